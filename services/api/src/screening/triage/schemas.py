"""Pydantic schemas for screening triage results."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RiskLevel(str, Enum):
    """Ordered urgency tier: low < moderate < high < imminent."""

    LOW = "low"              # Normal flow
    MODERATE = "moderate"    # Concerning, provide resources
    HIGH = "high"            # Urgent, recommend professional help
    IMMINENT = "imminent"    # Immediate danger, emergency resources


class FunctionalLevel(str, Enum):
    """Social-functioning band, best to worst."""

    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"
    SEVERE = "severe"


class ConditionTag(str, Enum):
    """Conditions surfaced for follow-up assessment routing."""

    DEPRESSION = "depression"
    ANXIETY = "anxiety"
    OCD = "ocd"
    PTSD = "ptsd"
    INSOMNIA = "insomnia"
    SUICIDAL = "suicidal"
    PSYCHOSIS = "psychosis"
    SEXUAL_ADDICTION = "sexual_addiction"
    MARITAL_DISTRESS = "marital_distress"


class TriageAction(str, Enum):
    """Actions recommended to the calling handler and UI."""

    SHOW_EMERGENCY_MODAL = "show_emergency_modal"
    SHOW_WARNING_BANNER = "show_warning_banner"
    BLOCK_CHAT = "block_chat"
    REDIRECT_EMERGENCY = "redirect_emergency"
    CREATE_REFERRAL = "create_referral"
    LOG_EVENT = "log_event"


class TriageRule(BaseModel):
    """A single question -> risk contribution rule."""

    model_config = ConfigDict(frozen=True)

    question_id: str
    risk_level: RiskLevel
    reason: str
    actions: tuple[TriageAction, ...] = ()
    suicidal_ideation: bool = False
    psychosis_indicator: bool = False


class TriageResult(BaseModel):
    """Outcome of evaluating one screening answer set.

    Frozen: handlers persist these fields but never modify them.
    """

    model_config = ConfigDict(frozen=True)

    risk_level: RiskLevel = RiskLevel.LOW
    triggered_rules: tuple[str, ...] = Field(
        default=(), description="Question ids of the rules that fired, in table order"
    )
    actions: tuple[TriageAction, ...] = ()
    has_suicidal_ideation: bool = False
    has_psychosis_indicators: bool = False
    should_show_emergency: bool = False
    should_block_chat: bool = False
    should_redirect_emergency: bool = False
    highest_risk_reason: str | None = None
