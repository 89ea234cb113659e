"""
Tests for API endpoints
"""
import json

import pytest
from fastapi.testclient import TestClient

import config
from api.main import app
from api.shared import clear_cache


QUESTIONS = [
    {
        "question_id": f"q{i}",
        "content": f"Question {i}",
        "question_type": "SINGLE",
        "options": [
            {"option_id": f"q{i}-o{j}", "label": chr(65 + j), "content": f"Option {j}", "is_correct": j == 0}
            for j in range(4)
        ],
        "metadata": {"difficulty": ["EASY", "MEDIUM", "HARD"][i % 3], "category": "Math"},
    }
    for i in range(5)
]


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def bank_file(tmp_path, monkeypatch):
    path = tmp_path / "question_bank.json"
    path.write_text(json.dumps({"A1": QUESTIONS}), encoding="utf-8")
    monkeypatch.setattr(config.settings, "QUESTION_BANK_FILE", str(path))
    clear_cache()
    yield path
    clear_cache()


@pytest.fixture
def missing_bank(tmp_path, monkeypatch):
    monkeypatch.setattr(config.settings, "QUESTION_BANK_FILE", str(tmp_path / "missing.json"))
    clear_cache()
    yield
    clear_cache()


class TestMeta:

    def test_root_and_health(self, client):
        assert client.get("/").status_code == 200
        response = client.get("/health")
        assert response.json() == {"status": "healthy"}


class TestExamApi:

    def test_present_inline_questions(self, client):
        payload = {"student_id": "S1", "assignment_id": "A1", "questions": QUESTIONS}

        first = client.post("/api/exam/present", json=payload)
        second = client.post("/api/exam/present", json=payload)

        assert first.status_code == 200
        data = first.json()
        assert data["seed"] == "S1-A1"
        assert data["total_questions"] == 5
        assert sorted(q["question_id"] for q in data["questions"]) == [f"q{i}" for i in range(5)]
        assert [o["presented_label"] for o in data["questions"][0]["options"]] == ["A", "B", "C", "D"]
        assert first.json() == second.json()

    def test_present_from_bank(self, client, bank_file):
        response = client.post("/api/exam/present", json={"student_id": "S1", "assignment_id": "A1"})
        assert response.status_code == 200
        assert response.json()["total_questions"] == 5

    def test_unknown_assignment_in_bank(self, client, bank_file):
        response = client.post("/api/exam/present", json={"student_id": "S1", "assignment_id": "nope"})
        assert response.status_code == 404

    def test_missing_bank_file(self, client, missing_bank):
        response = client.post("/api/exam/present", json={"student_id": "S1", "assignment_id": "A1"})
        assert response.status_code == 404

    def test_invalid_question_type(self, client):
        bad = dict(QUESTIONS[0], question_type="ESSAY")
        response = client.post(
            "/api/exam/present",
            json={"student_id": "S1", "assignment_id": "A1", "questions": [bad]}
        )
        assert response.status_code == 400

    def test_convert_answer_round_trip(self, client):
        presented = client.post(
            "/api/exam/present",
            json={"student_id": "S1", "assignment_id": "A1", "questions": QUESTIONS}
        ).json()
        options = presented["questions"][0]["options"]

        response = client.post("/api/exam/convert-answer", json={
            "answer": ["A", "B"],
            "presented_options": options,
            "direction": "to_canonical",
        })
        assert response.status_code == 200
        canonical = response.json()["answer"]
        assert canonical == [options[0]["canonical_label"], options[1]["canonical_label"]]

        response = client.post("/api/exam/convert-answer", json={
            "answer": canonical,
            "presented_options": options,
            "direction": "to_presented",
        })
        assert response.json()["answer"] == ["A", "B"]

    def test_convert_unknown_label(self, client):
        response = client.post("/api/exam/convert-answer", json={
            "answer": "Z",
            "presented_options": [
                {"option_id": "o1", "content": "x", "canonical_label": "A", "presented_label": "B"}
            ],
        })
        assert response.status_code == 400

    def test_preview(self, client):
        response = client.post("/api/exam/preview", json={
            "assignment_id": "A1",
            "sample_student_ids": ["S1", "S2", "S3"],
            "questions": QUESTIONS,
        })
        assert response.status_code == 200
        data = response.json()
        assert [p["student_id"] for p in data["previews"]] == ["S1", "S2", "S3"]
        assert 0.0 <= data["diversity"]["average_difference"] <= 1.0


class TestRandomizationApi:

    def test_randomize(self, client):
        response = client.post("/api/randomization/randomize", json={
            "strategy": "ADAPTIVE_ORDER",
            "seed": "seed-1",
            "questions": QUESTIONS,
        })
        assert response.status_code == 200
        data = response.json()
        difficulties = [q["metadata"]["difficulty"] for q in data["questions"]]
        assert difficulties == ["EASY", "EASY", "MEDIUM", "MEDIUM", "HARD"]
        assert 0 <= data["diagnostics"]["quality_score"] <= 100
        assert "Tất cả câu hỏi thuộc cùng một chủ đề" in data["warnings"]

    def test_unknown_strategy(self, client):
        response = client.post("/api/randomization/randomize", json={
            "strategy": "NOPE", "seed": "s", "questions": QUESTIONS,
        })
        assert response.status_code == 400

    def test_recommend_strategy(self, client):
        response = client.get(
            "/api/randomization/recommend-strategy",
            params={"question_count": 10, "has_difficulties": True}
        )
        assert response.json() == {"strategy": "DIFFICULTY_BALANCED"}


def event(event_type, created_at, student_id="S1", attempt=1):
    return {
        "assignment_id": "A1",
        "student_id": student_id,
        "attempt": attempt,
        "event_type": event_type,
        "created_at": created_at,
    }


class TestProctoringApi:

    EVENTS = [
        event("SESSION_PAUSED", "2024-05-01T08:00:20Z"),
        event("SESSION_STARTED", "2024-05-01T08:00:00Z"),
        event("TAB_SWITCH_DETECTED", "2024-05-01T08:00:10Z"),
        event("SESSION_STARTED", "2024-05-01T08:01:00Z", student_id="S2"),
    ]

    def test_sessions(self, client):
        response = client.post("/api/proctoring/sessions", json={
            "events": self.EVENTS,
            "now": "2024-05-01T08:01:30Z",
        })
        assert response.status_code == 200
        data = response.json()
        assert data["total_sessions"] == 2
        assert data["flagged_sessions"] == 1

        first = data["sessions"][0]
        assert first["student_id"] == "S1"
        assert first["status"] == "PAUSED"
        assert first["high_count"] == 1
        assert first["flagged"] is True
        assert first["is_online"] is True

    def test_bad_timestamp_is_rejected(self, client):
        response = client.post("/api/proctoring/sessions", json={
            "events": [event("SESSION_STARTED", "garbage")]
        })
        assert response.status_code == 400
        assert "garbage" in response.json()["detail"]

    def test_summary(self, client):
        response = client.post("/api/proctoring/summary", json={"events": self.EVENTS})
        assert response.status_code == 200
        data = response.json()
        assert data["total_events"] == 4
        assert data["by_type"][0] == {"event_type": "SESSION_STARTED", "count": 2, "severity": "info"}
        assert [s["student_id"] for s in data["by_student_attempt"]] == ["S1", "S2"]

    def test_score(self, client):
        response = client.post("/api/proctoring/score", json={"events": self.EVENTS})
        assert response.status_code == 200
        data = response.json()
        assert data["suspicion_score"] == 12
        assert data["risk_level"] == "low"
        assert data["counts_by_type"]["TAB_SWITCH"] == 1


class TestAttemptApi:

    def test_start_and_rebuild(self, client):
        response = client.post("/api/attempts/start", json={
            "assignment_id": "A1",
            "student_id": "S1",
            "max_attempts": 2,
            "time_limit_minutes": 45,
        })
        assert response.status_code == 200
        record = response.json()
        assert record["attempt_number"] == 1
        assert record["seed"] == "S1-A1"

        rebuilt = client.post("/api/attempts/layout", json={
            "attempt": record, "questions": QUESTIONS,
        })
        presented = client.post("/api/exam/present", json={
            "student_id": "S1", "assignment_id": "A1", "questions": QUESTIONS,
        })
        assert rebuilt.status_code == 200
        assert rebuilt.json()["questions"] == presented.json()["questions"]

    def test_limit_exceeded(self, client):
        response = client.post("/api/attempts/start", json={
            "assignment_id": "A1",
            "student_id": "S1",
            "previous_attempts": [{
                "assignment_id": "A1",
                "student_id": "S1",
                "attempt_number": 1,
                "seed": "S1-A1",
                "status": "COMPLETED",
                "ended_at": "2024-05-01T09:00:00Z",
            }],
            "max_attempts": 1,
        })
        assert response.status_code == 403
