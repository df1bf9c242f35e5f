"""Deterministic screening triage rules.

How it works:
  1. The user answers the initial yes/no screening questions
  2. THIS FILE evaluates every triage rule against those answers
  3. The most severe triggered rule sets the risk level; its actions tell the
     handler and UI what to do (emergency modal, block chat, referral)
  4. Separately, affirmative answers map to condition tags that route the
     user to detailed assessments
  5. The social-function questionnaire is summed, banded into a functional
     level and combined with the screening risk into an overall risk

Risk levels (most to least urgent):
  imminent — Immediate danger: emergency modal, block chat, redirect
  high     — Urgent: warning banner, block chat, referral
  moderate — Concerning: resources
  low      — Normal flow

Missing answers count as "no". Only the boolean True is an affirmative
answer; any other value degrades to "no". An answers argument that is not a
mapping is rejected with InvalidInputError rather than defaulted to low risk.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from services.api.src.screening.triage.questions import (
    INITIAL_SCREENING_QUESTIONS,
    LIKERT_MAX,
    LIKERT_MIN,
    SOCIAL_FUNCTION_MAX_SCORE,
    SOCIAL_FUNCTION_QUESTIONS,
    ScreeningQuestion,
)
from services.api.src.screening.triage.schemas import (
    ConditionTag,
    FunctionalLevel,
    RiskLevel,
    TriageAction,
    TriageResult,
    TriageRule,
)


class InvalidInputError(ValueError):
    """Raised when evaluator input has the wrong shape or range."""

    pass


RISK_PRIORITY: dict[RiskLevel, int] = {
    RiskLevel.LOW: 0,
    RiskLevel.MODERATE: 1,
    RiskLevel.HIGH: 2,
    RiskLevel.IMMINENT: 3,
}


def _max_risk(a: RiskLevel, b: RiskLevel) -> RiskLevel:
    return a if RISK_PRIORITY[a] >= RISK_PRIORITY[b] else b


# ---------------------------------------------------------------------------
# Rule table — built once from the question definitions
# ---------------------------------------------------------------------------

_ACTIONS_BY_LEVEL: dict[RiskLevel, tuple[TriageAction, ...]] = {
    RiskLevel.IMMINENT: (
        TriageAction.SHOW_EMERGENCY_MODAL,
        TriageAction.BLOCK_CHAT,
        TriageAction.REDIRECT_EMERGENCY,
        TriageAction.CREATE_REFERRAL,
        TriageAction.LOG_EVENT,
    ),
    RiskLevel.HIGH: (
        TriageAction.SHOW_WARNING_BANNER,
        TriageAction.BLOCK_CHAT,
        TriageAction.CREATE_REFERRAL,
        TriageAction.LOG_EVENT,
    ),
    RiskLevel.LOW: (),
}


def _rule_for(question: ScreeningQuestion) -> TriageRule:
    level = question.triage_risk or RiskLevel.LOW
    # Suicidal ideation is always imminent, psychosis at least high
    if question.suicidal_ideation:
        level = _max_risk(level, RiskLevel.IMMINENT)
    if question.psychosis_indicator:
        level = _max_risk(level, RiskLevel.HIGH)

    return TriageRule(
        question_id=question.id,
        risk_level=level,
        reason=question.triage_reason or f"Triggered by {question.id}",
        actions=_ACTIONS_BY_LEVEL[level],
        suicidal_ideation=question.suicidal_ideation,
        psychosis_indicator=question.psychosis_indicator,
    )


TRIAGE_RULES: tuple[TriageRule, ...] = tuple(
    _rule_for(q)
    for q in INITIAL_SCREENING_QUESTIONS
    if q.triage_risk is not None or q.suicidal_ideation or q.psychosis_indicator
)

_RULES_BY_QUESTION: dict[str, TriageRule] = {r.question_id: r for r in TRIAGE_RULES}


# ---------------------------------------------------------------------------
# Input handling
# ---------------------------------------------------------------------------

def _validate_answers(answers: Any) -> None:
    if not isinstance(answers, Mapping):
        raise InvalidInputError(
            f"answers must be a mapping of question id to answer, got {type(answers).__name__}"
        )
    for key in answers:
        if not isinstance(key, str):
            raise InvalidInputError(f"question ids must be strings, got {key!r}")


def _is_affirmative(value: Any) -> bool:
    return value is True


# ---------------------------------------------------------------------------
# Triage evaluation
# ---------------------------------------------------------------------------

def _build_result(triggered: list[TriageRule]) -> TriageResult:
    risk_level = RiskLevel.LOW
    reason: str | None = None
    actions: list[TriageAction] = []

    for rule in triggered:
        for action in rule.actions:
            if action not in actions:
                actions.append(action)
        if RISK_PRIORITY[rule.risk_level] > RISK_PRIORITY[risk_level]:
            risk_level = rule.risk_level
            reason = rule.reason

    return TriageResult(
        risk_level=risk_level,
        triggered_rules=tuple(r.question_id for r in triggered),
        actions=tuple(actions),
        has_suicidal_ideation=any(r.suicidal_ideation for r in triggered),
        has_psychosis_indicators=any(r.psychosis_indicator for r in triggered),
        should_show_emergency=risk_level == RiskLevel.IMMINENT,
        should_block_chat=RISK_PRIORITY[risk_level] >= RISK_PRIORITY[RiskLevel.HIGH],
        should_redirect_emergency=risk_level == RiskLevel.IMMINENT,
        highest_risk_reason=reason,
    )


def evaluate_triage(answers: Mapping[str, Any]) -> TriageResult:
    """Evaluate every triage rule against a full answer set.

    Rules are independent; the final risk level is the most severe
    contribution among the rules that fired.

    Raises:
        InvalidInputError: If answers is not a mapping with string keys
    """
    _validate_answers(answers)
    triggered = [r for r in TRIAGE_RULES if _is_affirmative(answers.get(r.question_id))]
    return _build_result(triggered)


def evaluate_single_answer(question_id: str, answer: Any) -> TriageResult | None:
    """Check one answer as it is given. Returns None when no rule fires."""
    if not isinstance(question_id, str):
        raise InvalidInputError(f"question id must be a string, got {question_id!r}")

    rule = _RULES_BY_QUESTION.get(question_id)
    if rule is None or not _is_affirmative(answer):
        return None
    return _build_result([rule])


# ---------------------------------------------------------------------------
# Condition detection
# ---------------------------------------------------------------------------

def detect_conditions(answers: Mapping[str, Any]) -> list[ConditionTag]:
    """Condition tags for follow-up assessments, in questionnaire order."""
    _validate_answers(answers)
    conditions: list[ConditionTag] = []
    for question in INITIAL_SCREENING_QUESTIONS:
        if _is_affirmative(answers.get(question.id)) and question.condition not in conditions:
            conditions.append(question.condition)
    return conditions


# ---------------------------------------------------------------------------
# Social function & overall risk
# ---------------------------------------------------------------------------

# Lower bound of each band, checked top-down. 26-32 / 18-25 / 10-17 / 0-9
_FUNCTIONAL_BANDS: tuple[tuple[int, FunctionalLevel], ...] = (
    (26, FunctionalLevel.HIGH),      # 81-100%
    (18, FunctionalLevel.MODERATE),  # 56-80%
    (10, FunctionalLevel.LOW),       # 31-55%
    (0, FunctionalLevel.SEVERE),     # 0-30%
)

# Where each functional level sits on the risk scale
_FUNCTIONAL_RISK: dict[FunctionalLevel, RiskLevel] = {
    FunctionalLevel.HIGH: RiskLevel.LOW,
    FunctionalLevel.MODERATE: RiskLevel.LOW,
    FunctionalLevel.LOW: RiskLevel.MODERATE,
    FunctionalLevel.SEVERE: RiskLevel.HIGH,
}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def score_social_function(answers: Mapping[str, Any]) -> int:
    """Sum the social-function answers (0-4 each, 0-32 total).

    Unanswered questions score 0. Unknown keys are ignored.
    """
    _validate_answers(answers)
    total = 0
    for question in SOCIAL_FUNCTION_QUESTIONS:
        value = answers.get(question.id, 0)
        if not _is_int(value) or not LIKERT_MIN <= value <= LIKERT_MAX:
            raise InvalidInputError(
                f"{question.id} must be an integer {LIKERT_MIN}-{LIKERT_MAX}, got {value!r}"
            )
        total += value
    return total


def calculate_functional_level(total_score: int) -> FunctionalLevel:
    """Band a social-function total (0-32) into a functional level."""
    if not _is_int(total_score) or not 0 <= total_score <= SOCIAL_FUNCTION_MAX_SCORE:
        raise InvalidInputError(
            f"total_score must be an integer 0-{SOCIAL_FUNCTION_MAX_SCORE}, got {total_score!r}"
        )
    for lower_bound, level in _FUNCTIONAL_BANDS:
        if total_score >= lower_bound:
            return level
    return FunctionalLevel.SEVERE


def get_overall_risk_level(
    initial_risk: RiskLevel | str,
    functional_level: FunctionalLevel | str,
) -> RiskLevel:
    """Combine screening risk and functional level; the more severe wins."""
    try:
        initial = RiskLevel(initial_risk)
        functional = FunctionalLevel(functional_level)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(str(exc)) from exc

    return _max_risk(initial, _FUNCTIONAL_RISK[functional])
