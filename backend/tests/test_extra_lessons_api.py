def test_manual_entry_and_monthly_summary(client, school):
    fill = client.post(
        "/api/substitutions/auto-fill",
        json={"date": school["date"], "absentTeacherId": school["absent_id"]},
    )
    assert fill.status_code == 200

    manual = client.post(
        "/api/extra-lessons",
        json={"teacherId": school["ali_id"], "count": 2, "month": 3, "year": 2024, "type": "duty", "notes": "Nöbet"},
    )
    assert manual.status_code == 201
    assert manual.json()["type"] == "duty"
    assert manual.json()["substitutionId"] is None

    summary = client.get("/api/extra-lessons/summary", params={"month": 3, "year": 2024})

    assert summary.status_code == 200
    rows = {item["teacherId"]: item for item in summary.json()}
    assert [item["teacherId"] for item in summary.json()] == sorted(rows)
    assert rows[school["absent_id"]]["total"] == -2
    assert rows[school["fatma_id"]]["substitution"] == 1
    assert rows[school["ali_id"]] == {
        "teacherId": school["ali_id"],
        "teacherName": "Ali Öztürk",
        "month": 3,
        "year": 2024,
        "total": 3,
        "substitution": 1,
        "duty": 2,
        "manual": 0,
    }

    april = client.get("/api/extra-lessons/summary", params={"month": 4, "year": 2024})
    assert april.json() == []


def test_list_filters_by_teacher(client, school):
    for teacher_key, count in (("ali_id", 1), ("fatma_id", -1)):
        response = client.post(
            "/api/extra-lessons",
            json={"teacherId": school[teacher_key], "count": count, "month": 3, "year": 2024},
        )
        assert response.status_code == 201
        assert response.json()["type"] == "manual"

    listed = client.get("/api/extra-lessons", params={"teacher_id": school["fatma_id"]})

    assert [item["count"] for item in listed.json()] == [-1]


def test_manual_entry_validation(client, school):
    ledger_type = client.post(
        "/api/extra-lessons",
        json={"teacherId": school["ali_id"], "count": 1, "month": 3, "year": 2024, "type": "substitution"},
    )
    assert ledger_type.status_code == 422

    unknown_teacher = client.post(
        "/api/extra-lessons",
        json={"teacherId": 999, "count": 1, "month": 3, "year": 2024},
    )
    assert unknown_teacher.status_code == 404
