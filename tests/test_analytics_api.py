from .conftest import PERNOLI, SHENDRI, UTTUR


def test_overall_analytics(client):
    res = client.get("/api/voters/analytics")

    assert res.status_code == 200
    body = res.get_json()
    assert body["total"] == 12
    assert body["gender"] == {
        "male": 6,
        "female": 5,
        "other": 1,
        "malePercent": 50.0,
        "femalePercent": 41.7,
        "otherPercent": 8.3,
    }
    assert body["ageGroups"] == {"18-25": 3, "26-40": 3, "41-60": 2, "60+": 3}
    assert body["specialCategories"] == {"firstTimeVoters": 2, "seniorVoters": 3}
    assert body["villages"] is None


def test_division_analytics_lists_villages(client):
    res = client.get("/api/voters/analytics", query_string={"division": "60"})

    body = res.get_json()
    assert body["total"] == 10
    assert body["villages"] == [
        {"name": UTTUR, "total": 8, "male": 4, "female": 3},
        {"name": SHENDRI, "total": 2, "male": 1, "female": 1},
    ]


def test_ward_takes_precedence_over_division(client):
    res = client.get("/api/voters/analytics", query_string={"division": "60", "ward": "121"})

    body = res.get_json()
    assert body["total"] == 2
    assert [v["name"] for v in body["villages"]] == [PERNOLI]


def test_analytics_without_data(client):
    res = client.get("/api/voters/analytics", query_string={"ward": "999"})

    assert res.status_code == 404
    assert res.get_json() == {"error": "No data found for the specified criteria"}


def test_demographics(client):
    res = client.get("/api/voters/demographics", query_string={"village": UTTUR})

    assert res.status_code == 200
    body = res.get_json()
    assert body["totalVoters"] == 8
    assert body["religion"][0] == {"name": "Hindu", "nameMr": "हिंदू", "count": 5, "percentage": 62.5}
    assert {r["name"] for r in body["religion"]} == {"Hindu", "Buddhist", "Muslim", "Unknown"}
    assert body["community"][0]["name"] == "Maratha"
    assert sum(c["count"] for c in body["community"]) == 8


def test_demographics_scoped_by_ward(client):
    res = client.get("/api/voters/demographics", query_string={"village": PERNOLI, "ward": "121"})

    body = res.get_json()
    assert body["totalVoters"] == 2
    assert body["community"] == [
        {"name": "Brahmin", "nameMr": "ब्राह्मण", "count": 2, "percentage": 100.0},
    ]


def test_demographics_for_unknown_village(client):
    res = client.get("/api/voters/demographics", query_string={"village": "nowhere"})

    assert res.status_code == 200
    assert res.get_json() == {"religion": [], "community": [], "totalVoters": 0}


def test_demographics_requires_village(client):
    res = client.get("/api/voters/demographics")

    assert res.status_code == 400
    assert res.get_json()["error"] == "Village parameter is required"


def test_family_stats(client):
    res = client.get("/api/voters/family-stats", query_string={"village": UTTUR})

    assert res.status_code == 200
    body = res.get_json()
    assert body["village"] == UTTUR
    assert body["totalFamilies"] == 2
    patil, jadhav = body["families"]
    assert patil == {
        "surname": "पाटील",
        "voterCount": 3,
        "householdEstimate": 2,
        "avgAge": 29,
        "maleCount": 2,
        "femaleCount": 1,
        "youngest": 20,
        "oldest": 45,
    }
    assert jadhav["surname"] == "जाधव"
    assert jadhav["householdEstimate"] == 2
    assert jadhav["avgAge"] == 74


def test_family_stats_skips_single_member_names(client):
    res = client.get("/api/voters/family-stats", query_string={"village": UTTUR})

    surnames = {f["surname"] for f in res.get_json()["families"]}
    assert "कांबळे" not in surnames
    assert "शिंदे" not in surnames


def test_family_stats_limit(client):
    res = client.get("/api/voters/family-stats", query_string={"village": UTTUR, "limit": 1})

    body = res.get_json()
    assert body["totalFamilies"] == 1
    assert body["families"][0]["surname"] == "पाटील"


def test_family_stats_requires_village(client):
    res = client.get("/api/voters/family-stats")

    assert res.status_code == 400
    assert res.get_json()["error"] == "Please provide village name"


def test_village_analytics(client):
    res = client.get("/api/voters/village-analytics", query_string={"village": UTTUR})

    assert res.status_code == 200
    body = res.get_json()
    assert body["village"] == UTTUR
    assert body["total"] == 8
    assert body["topSurnames"] == [{"name": "गणपती", "count": 3, "percentage": 37.5}]
    assert body["topFirstNames"] == [{"name": "पाटील", "count": 3, "percentage": 37.5}]
    assert body["ageStats"] == {
        "avgAge": 41.3,
        "minAge": 19,
        "maxAge": 82,
        "firstTimeVoters": 2,
        "young22to25": 1,
        "age26to35": 1,
        "age36to45": 1,
        "age46to60": 0,
        "seniorCitizens": 2,
        "superSeniors": 1,
    }
    assert body["ageGroupsByGender"]["age18_21"] == {"male": 1, "female": 1}
    assert body["ageGroupsByGender"]["age60plus"] == {"male": 1, "female": 1}
    assert body["genderStats"] == {"male": 4, "female": 3, "other": 1}
    assert body["firstTimeVotersByGender"] == {"male": 1, "female": 1}
    assert body["seniorVotersByGender"] == {"male": 1, "female": 1}


def test_village_analytics_for_empty_village(client):
    res = client.get("/api/voters/village-analytics", query_string={"village": "nowhere"})

    body = res.get_json()
    assert body["total"] == 0
    assert body["topSurnames"] == []
    assert body["ageStats"]["avgAge"] == 0
    assert body["ageStats"]["maxAge"] == 0


def test_village_analytics_requires_village(client):
    res = client.get("/api/voters/village-analytics")

    assert res.status_code == 400
    assert res.get_json()["error"] == "Village name required"
