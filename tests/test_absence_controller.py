from __future__ import annotations

from datetime import date

import pytest
from flask import Flask

from src.absence_journal.absence_journal.absences.controller import register
from src.absence_journal.absence_journal.absences.editor import RecordEditor
from src.absence_journal.absence_journal.container import assemble

DAY = date(2024, 9, 2)


@pytest.fixture
def repo(absences_repo_cls, new_record):
    return absences_repo_cls([new_record("r1", "c-1a", DAY, ("Петров", "illness"))])


@pytest.fixture
def client(repo, roster_repo, clock, ids):
    app = Flask(__name__)
    app.secret_key = "test"
    container = assemble(
        roster_repo=roster_repo,
        absences_repo=repo,
        editor=RecordEditor(clock=clock, id_factory=ids),
    )
    register(app, container)
    return app.test_client()


def _login(client, role="teacher", user_id="t-1"):
    with client.session_transaction() as s:
        s["user_id"] = user_id
        s["email"] = f"{user_id}@school.example"
        s["role"] = role


def test_requires_login(client):
    resp = client.get("/api/absences/day?date=2024-09-02")

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_day_view(client):
    _login(client)

    body = client.get("/api/absences/day?date=2024-09-02").get_json()

    assert [c["class_name"] for c in body["pending"]] == ["1В", "2А"]
    assert body["submitted"][0]["class_name"] == "1А"
    assert body["submitted"][0]["summary"] == "Отсутствует: 1 чел. (Петров)"
    assert body["is_complete"] is False


def test_bad_date_is_400(client):
    _login(client)

    assert client.get("/api/absences/day?date=02.09.2024").status_code == 400


def test_stats_month(client):
    _login(client)

    body = client.get("/api/absences/stats?period=month&value=2024-09").get_json()

    assert body["label"] == "Сентябрь 2024"
    assert [(b["class_name"], b["total"]) for b in body["buckets"]] == [("1А", 1), ("1В", 0), ("2А", 0)]
    assert body["buckets"][0]["reasons"] == [{"label": "Болезнь", "count": 1}]


def test_report_csv(client):
    _login(client)

    resp = client.get("/api/absences/report.csv?period=day&value=2024-09-02")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    text = resp.data.decode("utf-8-sig")
    lines = text.strip().splitlines()
    assert lines[0] == "class_name,total,reasons"
    assert lines[1] == "1А,1,Болезнь: 1"
    assert lines[-1] == "Итого,1,"


def test_create_record(client, repo):
    _login(client)

    resp = client.post(
        "/api/absences",
        json={
            "class_id": "c-1v",
            "date": "2024-09-02",
            "absences": [
                {"student_name": "Орлова", "reason": "other", "other_reason": "Олимпиада"},
                {"student_name": "Белов", "reason": "abroad"},
            ],
        },
    )

    assert resp.status_code == 201
    record = resp.get_json()["record"]
    assert record["class_name"] == "1В"
    assert [a["label"] for a in record["absences"]] == ["Олимпиада", "За пределами РБ"]
    assert {r.class_id for r in repo.stored} == {"c-1a", "c-1v"}


def test_create_with_invalid_entry_is_rejected(client, repo):
    _login(client)

    resp = client.post(
        "/api/absences",
        json={"class_id": "c-1v", "date": "2024-09-02", "absences": [{"student_name": "Орлова", "reason": "other"}]},
    )

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Укажите причину"
    assert repo.persist_calls == []


@pytest.mark.parametrize(
    "payload",
    [
        {"class_id": 5, "date": "2024-09-02", "absences": []},
        {"class_id": "c-1v", "date": "2024-09-02", "absences": [{"student_name": 123, "reason": "illness"}]},
        {"class_id": "c-1v", "date": "2024-09-02", "absences": ["Петров"]},
        {"class_id": "c-1v", "date": "2024-09-02", "absences": {"student_name": "Петров"}},
        {"class_id": "c-1v", "date": 20240902, "absences": []},
        ["c-1v", "2024-09-02"],
    ],
)
def test_wrong_typed_payload_is_400(client, repo, payload):
    _login(client)

    resp = client.post("/api/absences", json=payload)

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False
    assert repo.persist_calls == []


def test_duplicate_create_is_rejected(client):
    _login(client)

    resp = client.post("/api/absences", json={"class_id": "c-1a", "date": "2024-09-02", "absences": []})

    assert resp.status_code == 400


def test_update_record_replaces_absentees(client, repo):
    _login(client)

    resp = client.post(
        "/api/absences",
        json={"record_id": "r1", "absences": [{"student_name": "Сидоров", "reason": "statement"}]},
    )

    assert resp.status_code == 200
    assert [a.student_name for a in repo.stored[0].absences] == ["Сидоров"]
    assert repo.stored[0].record_id == "r1"


def test_viewer_cannot_save(client, repo):
    _login(client, role="viewer", user_id="u-view")

    resp = client.post("/api/absences", json={"class_id": "c-1v", "date": "2024-09-02", "absences": []})

    assert resp.status_code == 403
    assert repo.persist_calls == []


def test_delete_needs_confirmation(client, repo):
    _login(client, role="admin", user_id="u-admin")

    assert client.delete("/api/absences/r1").status_code == 400
    assert client.delete("/api/absences/r1?confirm=1").status_code == 200
    assert repo.stored == []
    assert client.delete("/api/absences/r1?confirm=1").status_code == 404


def test_persistence_failure_is_502(absences_repo_cls, roster_repo, clock, ids):
    app = Flask(__name__)
    app.secret_key = "test"
    repo = absences_repo_cls(fail_with=RuntimeError("quota exceeded"))
    register(app, assemble(roster_repo=roster_repo, absences_repo=repo, editor=RecordEditor(clock=clock, id_factory=ids)))
    client = app.test_client()
    _login(client)

    resp = client.post("/api/absences", json={"class_id": "c-1v", "date": "2024-09-02", "absences": []})

    assert resp.status_code == 502
    assert client.get("/api/absences/day?date=2024-09-02").get_json()["submitted"][0]["class_id"] == "c-1v"
