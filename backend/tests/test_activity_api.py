def test_substitution_actions_are_logged(client, school):
    assigned = client.post(
        "/api/substitutions",
        json={
            "date": school["date"],
            "scheduleEntryId": school["first_entry_id"],
            "substituteTeacherId": school["ali_id"],
            "assignedBy": "  Müdür Yardımcısı ",
        },
    )
    assert assigned.status_code == 201
    assert client.delete(f"/api/substitutions/{school['date']}/{school['first_entry_id']}").status_code == 204

    response = client.get("/api/activity/logs")

    assert response.status_code == 200
    actions = [item["action"] for item in response.json()]
    assert actions == ["substitution.unassign", "substitution.assign"]
    logged = response.json()[1]
    assert logged["actor"] == "Müdür Yardımcısı"
    assert logged["entityId"] == str(school["first_entry_id"])
    assert logged["details"]["substitute_teacher_id"] == school["ali_id"]


def test_activity_filter_by_action(client, school):
    client.post(
        "/api/absences",
        json={"teacherId": school["ali_id"], "startDate": "2024-03-05", "endDate": "2024-03-05"},
    )
    client.post(
        "/api/substitutions/auto-fill",
        json={"date": school["date"], "absentTeacherId": school["absent_id"]},
    )

    response = client.get("/api/activity/logs", params={"action": "absence.create"})

    assert [item["entityType"] for item in response.json()] == ["absence"]


def test_absence_actions_record_who_reported_them(client, school):
    created = client.post(
        "/api/absences",
        json={
            "teacherId": school["ali_id"],
            "startDate": "2024-03-05",
            "endDate": "2024-03-05",
            "reportedBy": "Okul Müdürü",
        },
    )
    assert created.status_code == 201
    deleted = client.delete(
        f"/api/absences/{created.json()['id']}",
        params={"reportedBy": "Nöbetçi Müdür Yardımcısı"},
    )
    assert deleted.status_code == 200

    logs = client.get("/api/activity/logs").json()

    actors = {item["action"]: item["actor"] for item in logs}
    assert actors["absence.create"] == "Okul Müdürü"
    assert actors["absence.delete"] == "Nöbetçi Müdür Yardımcısı"
