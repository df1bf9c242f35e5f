"""Tests for assessment API endpoints using FastAPI TestClient."""

import pytest
from fastapi.testclient import TestClient

from services.api.src.screening.db.repository import (
    InitialScreeningRepository,
    ReferralRepository,
    SocialFunctionRepository,
    TriageEventRepository,
)
from services.api.src.screening.main import app
from services.api.src.screening.routes import assessment as assessment_module
from services.api.src.screening.triage.questions import social_question_ids

BASE = "/api/v1/assessment"


@pytest.fixture
def client(engine):
    """TestClient with overridden DB engine."""
    app.dependency_overrides[assessment_module._engine] = lambda: engine
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _start_session(client, **overrides) -> str:
    body = {
        "demographics": {"age": 28, "gender": "female", "occupation": "nurse"},
        "accepted_terms": True,
        "accepted_privacy": True,
    }
    body.update(overrides)
    res = client.post(f"{BASE}/sessions", json=body)
    assert res.status_code == 200
    return res.json()["id"]


def _social_answers(value: int) -> dict:
    return {q: value for q in social_question_ids()}


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


# ---------------------------------------------------------------------------
# Questionnaire
# ---------------------------------------------------------------------------

class TestQuestions:
    def test_get_questions(self, client):
        res = client.get(f"{BASE}/questions")
        assert res.status_code == 200
        data = res.json()
        assert data["version"] == "v1"
        assert len(data["screening_questions"]) == 11
        assert len(data["social_questions"]) == 8
        assert data["likert_max"] == 4

    def test_unknown_version(self, client):
        res = client.get(f"{BASE}/questions", params={"version": "v9"})
        assert res.status_code == 400


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

class TestStartSession:
    def test_create_session(self, client):
        res = client.post(f"{BASE}/sessions", json={
            "demographics": {"age": 35, "marital_status": "married"},
            "accepted_terms": True,
            "accepted_privacy": True,
        })
        assert res.status_code == 200
        data = res.json()
        assert data["questionnaire_version"] == "v1"
        assert "id" in data

    def test_terms_not_accepted(self, client):
        res = client.post(f"{BASE}/sessions", json={
            "demographics": {"age": 35},
            "accepted_terms": False,
            "accepted_privacy": True,
        })
        assert res.status_code == 400

    def test_age_too_young(self, client):
        res = client.post(f"{BASE}/sessions", json={
            "demographics": {"age": 10},
            "accepted_terms": True,
            "accepted_privacy": True,
        })
        assert res.status_code == 422

    def test_unknown_version(self, client):
        res = client.post(f"{BASE}/sessions", json={
            "demographics": {"age": 35},
            "accepted_terms": True,
            "accepted_privacy": True,
            "questionnaire_version": "v9",
        })
        assert res.status_code == 400


# ---------------------------------------------------------------------------
# Initial screening
# ---------------------------------------------------------------------------

class TestSubmitScreening:
    def test_suicidal_ideation_is_imminent(self, client, engine):
        session_id = _start_session(client)
        res = client.post(
            f"{BASE}/sessions/{session_id}/screening",
            json={"answers": {"ending_life": True, "loss_interest": False}},
        )
        assert res.status_code == 200
        data = res.json()
        assert data["risk_level"] == "imminent"
        assert data["has_suicidal_ideation"] is True
        assert data["should_show_emergency"] is True
        assert data["should_block_chat"] is True
        assert data["detected_conditions"] == ["suicidal"]
        assert data["referral_id"] is not None

        events = TriageEventRepository(engine).list_by_session(session_id)
        assert len(events) == 1
        assert events[0]["trigger_question"] == "ending_life"

        alerts = ReferralRepository(engine).list_alerts(data["referral_id"])
        assert alerts[0]["alert_type"] == "imminent_risk"

    def test_psychosis_is_high_with_referral(self, client, engine):
        session_id = _start_session(client)
        res = client.post(
            f"{BASE}/sessions/{session_id}/screening",
            json={"answers": {"hearing_voices": True}},
        )
        data = res.json()
        assert data["risk_level"] == "high"
        assert data["has_psychosis_indicators"] is True
        assert data["should_show_emergency"] is False

        alerts = ReferralRepository(engine).list_alerts(data["referral_id"])
        assert alerts[0]["alert_type"] == "high_risk"

    def test_all_negative_is_low(self, client, engine):
        session_id = _start_session(client)
        res = client.post(
            f"{BASE}/sessions/{session_id}/screening",
            json={"answers": {"ending_life": False, "hearing_voices": False}},
        )
        data = res.json()
        assert data["risk_level"] == "low"
        assert data["detected_conditions"] == []
        assert data["should_show_emergency"] is False
        assert data["referral_id"] is None
        assert TriageEventRepository(engine).list_by_session(session_id) == []

    def test_conditions_without_risk(self, client):
        session_id = _start_session(client)
        res = client.post(
            f"{BASE}/sessions/{session_id}/screening",
            json={"answers": {"loss_interest": True, "excessive_worry": True}},
        )
        data = res.json()
        assert data["risk_level"] == "low"
        assert data["detected_conditions"] == ["depression", "anxiety"]

    def test_unknown_question_rejected(self, client):
        session_id = _start_session(client)
        res = client.post(
            f"{BASE}/sessions/{session_id}/screening",
            json={"answers": {"not_a_question": True}},
        )
        assert res.status_code == 400

    def test_non_boolean_answer_rejected(self, client):
        session_id = _start_session(client)
        res = client.post(
            f"{BASE}/sessions/{session_id}/screening",
            json={"answers": {"ending_life": "maybe"}},
        )
        assert res.status_code == 422

    def test_session_not_found(self, client):
        res = client.post(
            f"{BASE}/sessions/does-not-exist/screening",
            json={"answers": {}},
        )
        assert res.status_code == 404

    def test_second_submission_conflicts(self, client):
        session_id = _start_session(client)
        url = f"{BASE}/sessions/{session_id}/screening"
        assert client.post(url, json={"answers": {}}).status_code == 200
        assert client.post(url, json={"answers": {"ending_life": True}}).status_code == 409

    def test_failed_alert_rolls_back_screening(self, client, engine, monkeypatch):
        session_id = _start_session(client)
        url = f"{BASE}/sessions/{session_id}/screening"

        def fail_alert(self, referral_id, alert_type, conn=None):
            raise RuntimeError("alert insert failed")

        monkeypatch.setattr(ReferralRepository, "create_alert", fail_alert)
        with pytest.raises(RuntimeError):
            client.post(url, json={"answers": {"ending_life": True}})

        assert InitialScreeningRepository(engine).get_by_session(session_id) is None
        assert TriageEventRepository(engine).list_by_session(session_id) == []
        assert ReferralRepository(engine).list_by_session(session_id) == []

        # Nothing was committed, so the retry goes through and opens the referral
        monkeypatch.undo()
        res = client.post(url, json={"answers": {"ending_life": True}})
        assert res.status_code == 200
        assert res.json()["referral_id"] is not None


class TestCheckAnswer:
    def test_triggering_answer(self, client):
        res = client.post(f"{BASE}/screening/answer", json={
            "question_id": "ending_life", "answer": True,
        })
        assert res.status_code == 200
        data = res.json()
        assert data["triggered"] is True
        assert data["result"]["risk_level"] == "imminent"
        assert data["result"]["should_show_emergency"] is True

    def test_non_triggering_answer(self, client):
        res = client.post(f"{BASE}/screening/answer", json={
            "question_id": "loss_interest", "answer": True,
        })
        assert res.json() == {"triggered": False, "result": None}


# ---------------------------------------------------------------------------
# Social function
# ---------------------------------------------------------------------------

class TestSubmitSocial:
    def test_high_functioning_without_screening(self, client):
        session_id = _start_session(client)
        res = client.post(
            f"{BASE}/sessions/{session_id}/social", json={"answers": _social_answers(4)},
        )
        assert res.status_code == 200
        data = res.json()
        assert data["total_score"] == 32
        assert data["functional_level"] == "high"
        assert data["overall_risk_level"] == "low"

    def test_severe_functioning_escalates(self, client):
        session_id = _start_session(client)
        client.post(f"{BASE}/sessions/{session_id}/screening", json={"answers": {}})
        res = client.post(
            f"{BASE}/sessions/{session_id}/social", json={"answers": _social_answers(1)},
        )
        data = res.json()
        assert data["total_score"] == 8
        assert data["functional_level"] == "severe"
        assert data["overall_risk_level"] == "high"

    def test_screening_risk_kept_when_higher(self, client):
        session_id = _start_session(client)
        client.post(
            f"{BASE}/sessions/{session_id}/screening", json={"answers": {"ending_life": True}},
        )
        res = client.post(
            f"{BASE}/sessions/{session_id}/social", json={"answers": _social_answers(4)},
        )
        assert res.json()["overall_risk_level"] == "imminent"

    def test_missing_answer_rejected(self, client):
        session_id = _start_session(client)
        answers = _social_answers(3)
        answers.pop("life_meaning")
        res = client.post(f"{BASE}/sessions/{session_id}/social", json={"answers": answers})
        assert res.status_code == 400

    def test_out_of_range_rejected(self, client):
        session_id = _start_session(client)
        answers = _social_answers(3)
        answers["work_focus"] = 5
        res = client.post(f"{BASE}/sessions/{session_id}/social", json={"answers": answers})
        assert res.status_code == 422

    def test_second_submission_conflicts(self, client):
        session_id = _start_session(client)
        url = f"{BASE}/sessions/{session_id}/social"
        assert client.post(url, json={"answers": _social_answers(2)}).status_code == 200
        assert client.post(url, json={"answers": _social_answers(2)}).status_code == 409


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class TestResults:
    def test_results_after_both_steps(self, client):
        session_id = _start_session(client)
        client.post(
            f"{BASE}/sessions/{session_id}/screening",
            json={"answers": {"traumatic_memories": True}},
        )
        client.post(
            f"{BASE}/sessions/{session_id}/social", json={"answers": _social_answers(2)},
        )

        res = client.get(f"{BASE}/sessions/{session_id}/results")
        assert res.status_code == 200
        data = res.json()
        assert data["screening"]["risk_level"] == "low"
        assert data["screening"]["detected_conditions"] == ["ptsd"]
        assert data["social"]["total_score"] == 16
        assert data["social"]["functional_level"] == "low"
        assert data["overall_risk_level"] == "moderate"

    def test_screening_after_social_updates_overall_risk(self, client, engine):
        session_id = _start_session(client)
        social = client.post(
            f"{BASE}/sessions/{session_id}/social", json={"answers": _social_answers(4)},
        )
        assert social.json()["overall_risk_level"] == "low"

        screening = client.post(
            f"{BASE}/sessions/{session_id}/screening", json={"answers": {"ending_life": True}},
        )
        assert screening.json()["risk_level"] == "imminent"

        data = client.get(f"{BASE}/sessions/{session_id}/results").json()
        assert data["social"]["functional_level"] == "high"
        assert data["overall_risk_level"] == "imminent"

        stored = SocialFunctionRepository(engine).get_by_session(session_id)
        assert stored["overall_risk_level"] == "imminent"

    def test_results_before_any_step(self, client):
        session_id = _start_session(client)
        data = client.get(f"{BASE}/sessions/{session_id}/results").json()
        assert data["screening"] is None
        assert data["social"] is None
        assert data["overall_risk_level"] is None

    def test_results_unknown_session(self, client):
        res = client.get(f"{BASE}/sessions/does-not-exist/results")
        assert res.status_code == 404
