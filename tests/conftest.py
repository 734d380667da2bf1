from datetime import timedelta

import pytest

from voterdesk import create_app
from voterdesk.config import TestingConfig
from voterdesk.extensions import db
from voterdesk.models import AccessCode, Voter
from voterdesk.utils.clock import utcnow

M = Voter.GENDER_MALE
F = Voter.GENDER_FEMALE

UTTUR = "उत्तूर"
SHENDRI = "शेंद्री"
PERNOLI = "पेरणोली"

# (name, age, gender, village, division_no, ward_no, serial)
VOTERS = [
    ("पाटील राम गणपती", 20, M, UTTUR, 60, 119, "1/1"),
    ("पाटील सीता राम", 45, F, UTTUR, 60, 119, "1/2"),
    ("पाटील सुनील राम", 23, M, UTTUR, 60, 119, "2/1"),
    ("जाधव अनिल शंकर", 65, M, UTTUR, 60, 119, "10"),
    ("जाधव सुनिता अनिल", 82, F, UTTUR, 60, 119, "10/2"),
    ("कांबळे प्रकाश गणपती", 35, M, UTTUR, 60, 119, "3"),
    ("मुल्ला आयेशा गणपती", 19, F, UTTUR, 60, 119, "4"),
    ("शिंदे गीता", None, None, UTTUR, 60, 119, None),
    ("देसाई मोहन", 30, M, SHENDRI, 60, 119, "5"),
    ("देसाई लता", 28, F, SHENDRI, 60, 119, "6"),
    ("कुलकर्णी अजय", 50, M, PERNOLI, 61, 121, "1"),
    ("जोशी माधुरी", 61, F, PERNOLI, 61, 121, "2"),
]

DIVISION_NAMES = {60: "६० - उत्तूर", 61: "६१ - पेरणोली"}
WARD_NAMES = {119: "११९ - उत्तूर", 121: "१२१ - पेरणोली"}


def _seed_voters():
    for index, (name, age, gender, village, division_no, ward_no, serial) in enumerate(VOTERS, start=1):
        db.session.add(Voter(
            epic_id=f"KOP{index:07d}",
            name=name,
            age=age,
            gender=gender,
            village=village,
            zp_division=DIVISION_NAMES[division_no],
            zp_division_no=division_no,
            ps_ward=WARD_NAMES[ward_no],
            ps_ward_no=ward_no,
            taluka="आजरा",
            serial_number=serial,
        ))


def _seed_access_codes():
    now = utcnow()
    db.session.add_all([
        AccessCode(code="DEMO2025", name="Demo", division_access=[60, 61], ward_access=[119]),
        AccessCode(code="LIMIT2", name="Trial", customer_name="Sharma", max_uses=2,
                   expiry_date=now + timedelta(days=30)),
        AccessCode(code="ONCE", name="Single", max_uses=1),
        AccessCode(code="OLD", name="Expired", expiry_date=now - timedelta(days=1)),
        AccessCode(code="OFF", name="Disabled", is_active=False),
        AccessCode(code="STALE", name="Stale", max_uses=1, current_uses=1,
                   expiry_date=now - timedelta(days=1)),
    ])


@pytest.fixture()
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        _seed_voters()
        _seed_access_codes()
        db.session.commit()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def access_code(app):
    def _get(code: str) -> AccessCode:
        return AccessCode.query.filter_by(code=code).one()
    return _get
