from ..extensions import db


class Voter(db.Model):
    """
    One electoral-roll entry. Rows are written by the offline import and
    only ever read by the API.
    """
    __tablename__ = "voters"

    GENDER_MALE = "पुरुष"
    GENDER_FEMALE = "स्त्री"
    KNOWN_GENDERS = (GENDER_MALE, GENDER_FEMALE)

    id = db.Column(db.Integer, primary_key=True)
    epic_id = db.Column(db.String(20), nullable=False, unique=True, index=True)
    name = db.Column(db.String(255), nullable=True, index=True)
    age = db.Column(db.Integer, nullable=True)
    gender = db.Column(db.String(20), nullable=True)

    # ZP electoral division / PS ward as printed ("60 - उत्तूर") plus the parsed number
    zp_division = db.Column(db.String(255), nullable=True)
    zp_division_no = db.Column(db.Integer, nullable=True, index=True)
    ps_ward = db.Column(db.String(255), nullable=True)
    ps_ward_no = db.Column(db.Integer, nullable=True, index=True)

    village = db.Column(db.String(255), nullable=True, index=True)
    taluka = db.Column(db.String(100), nullable=True)
    section = db.Column(db.String(255), nullable=True)
    ac_no = db.Column(db.Integer, nullable=True)
    serial_number = db.Column(db.String(50), nullable=True)

    def __repr__(self) -> str:
        return f"<Voter {self.epic_id}>"
