"""Tests for triage Pydantic schemas."""

import pytest
from pydantic import ValidationError

from services.api.src.screening.triage.rules import evaluate_triage
from services.api.src.screening.triage.schemas import (
    RiskLevel,
    TriageAction,
    TriageResult,
    TriageRule,
)


class TestTriageResult:
    def test_defaults_are_least_severe(self):
        r = TriageResult()
        assert r.risk_level == RiskLevel.LOW
        assert r.triggered_rules == ()
        assert r.should_show_emergency is False
        assert r.should_block_chat is False
        assert r.highest_risk_reason is None

    def test_frozen(self):
        r = evaluate_triage({"ending_life": True})
        with pytest.raises(ValidationError):
            r.risk_level = RiskLevel.LOW

    def test_invalid_risk_level(self):
        with pytest.raises(ValidationError):
            TriageResult(risk_level="critical")

    def test_json_dump_uses_plain_values(self):
        data = evaluate_triage({"hearing_voices": True}).model_dump(mode="json")
        assert data["risk_level"] == "high"
        assert data["triggered_rules"] == ["hearing_voices"]
        assert "block_chat" in data["actions"]
        assert data["has_psychosis_indicators"] is True


class TestTriageRule:
    def test_rule_fields(self):
        rule = TriageRule(
            question_id="ending_life",
            risk_level=RiskLevel.IMMINENT,
            reason="test",
            actions=(TriageAction.BLOCK_CHAT,),
            suicidal_ideation=True,
        )
        assert rule.psychosis_indicator is False
        assert rule.actions == (TriageAction.BLOCK_CHAT,)

    def test_risk_levels_are_strings(self):
        assert RiskLevel.IMMINENT == "imminent"
        assert [level.value for level in RiskLevel] == ["low", "moderate", "high", "imminent"]
