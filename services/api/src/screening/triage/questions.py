"""Screening questionnaire definitions.

Two instruments per questionnaire version:
  - Initial screening: quick yes/no questions. Each may route to a detailed
    assessment (condition tag) and may carry a triage risk.
  - Social function: 8 positively worded statements on a 0-4 Likert scale
    (0 = strongly disagree, 4 = strongly agree). Higher total = better
    functioning.
"""

from __future__ import annotations

from dataclasses import dataclass

from services.api.src.screening.triage.schemas import ConditionTag, RiskLevel

CURRENT_VERSION = "v1"

LIKERT_MIN = 0
LIKERT_MAX = 4


@dataclass(frozen=True)
class ScreeningQuestion:
    id: str
    text: str
    condition: ConditionTag
    triage_risk: RiskLevel | None = None
    triage_reason: str = ""
    suicidal_ideation: bool = False
    psychosis_indicator: bool = False


@dataclass(frozen=True)
class SocialFunctionQuestion:
    id: str
    text: str
    category: str


INITIAL_SCREENING_QUESTIONS: tuple[ScreeningQuestion, ...] = (
    ScreeningQuestion(
        id="sleep_wake_easily",
        text="Have you easily woken up from your sleep?",
        condition=ConditionTag.INSOMNIA,
    ),
    ScreeningQuestion(
        id="thoughts_death_dying",
        text="Have you ever thought of death or dying recently?",
        condition=ConditionTag.SUICIDAL,
        triage_risk=RiskLevel.HIGH,
        triage_reason="User indicated thoughts of death or dying",
    ),
    ScreeningQuestion(
        id="hearing_voices",
        text="Do you frequently hear voices which no one else could hear them?",
        condition=ConditionTag.PSYCHOSIS,
        triage_risk=RiskLevel.HIGH,
        triage_reason="User indicated hearing voices others cannot hear",
        psychosis_indicator=True,
    ),
    ScreeningQuestion(
        id="sexual_fantasy",
        text=(
            "Have you been spending a lot of time fantasizing and fulfilling your "
            "sexual fantasy, urges and planning to involve in sexual related behaviour?"
        ),
        condition=ConditionTag.SEXUAL_ADDICTION,
    ),
    ScreeningQuestion(
        id="extraordinary_powers",
        text="Do you believe yourself to have extraordinary, gifts and power?",
        condition=ConditionTag.PSYCHOSIS,
        triage_risk=RiskLevel.HIGH,
        triage_reason="User indicated belief in extraordinary powers",
        psychosis_indicator=True,
    ),
    ScreeningQuestion(
        id="ending_life",
        text="Have you ever thought about ending your life?",
        condition=ConditionTag.SUICIDAL,
        triage_risk=RiskLevel.IMMINENT,
        triage_reason="User indicated thoughts of ending their life",
        suicidal_ideation=True,
    ),
    ScreeningQuestion(
        id="loss_interest",
        text="Have you lost interest or pleasure in doing things you used to enjoy?",
        condition=ConditionTag.DEPRESSION,
    ),
    ScreeningQuestion(
        id="excessive_worry",
        text="Do you feel excessive worry or anxiety that is difficult to control?",
        condition=ConditionTag.ANXIETY,
    ),
    ScreeningQuestion(
        id="repetitive_thoughts",
        text="Do you have repetitive, unwanted thoughts that cause you distress?",
        condition=ConditionTag.OCD,
    ),
    ScreeningQuestion(
        id="traumatic_memories",
        text="Do you experience distressing memories or flashbacks of a traumatic event?",
        condition=ConditionTag.PTSD,
    ),
    ScreeningQuestion(
        id="relationship_conflict",
        text=(
            "Are you experiencing significant conflict or distress in your "
            "marriage or relationship?"
        ),
        condition=ConditionTag.MARITAL_DISTRESS,
    ),
)

SOCIAL_FUNCTION_QUESTIONS: tuple[SocialFunctionQuestion, ...] = (
    SocialFunctionQuestion(
        id="personal_hygiene",
        text="I am able to maintain good personal hygiene and daily routines",
        category="self_care",
    ),
    SocialFunctionQuestion(
        id="emotion_management",
        text="I am able to manage my emotions and stress without feeling overwhelmed",
        category="emotional",
    ),
    SocialFunctionQuestion(
        id="relationships",
        text="I have good relationships with my family and friends",
        category="social",
    ),
    SocialFunctionQuestion(
        id="social_activities",
        text="I feel comfortable and engage in social activities",
        category="social",
    ),
    SocialFunctionQuestion(
        id="work_focus",
        text="I am able to focus and complete work tasks well",
        category="occupational",
    ),
    SocialFunctionQuestion(
        id="daily_motivation",
        text="I feel motivated to carry out my daily responsibilities",
        category="motivation",
    ),
    SocialFunctionQuestion(
        id="community_involvement",
        text="I am involved in community activities or help others",
        category="community",
    ),
    SocialFunctionQuestion(
        id="life_meaning",
        text="I feel that my life gives meaning and benefits to those around me",
        category="purpose",
    ),
)

SOCIAL_FUNCTION_MAX_SCORE = len(SOCIAL_FUNCTION_QUESTIONS) * LIKERT_MAX

# Question sets per questionnaire version (initial, social)
QUESTIONNAIRES: dict[str, tuple[tuple[ScreeningQuestion, ...], tuple[SocialFunctionQuestion, ...]]] = {
    "v1": (INITIAL_SCREENING_QUESTIONS, SOCIAL_FUNCTION_QUESTIONS),
}


def screening_question_ids(version: str = CURRENT_VERSION) -> list[str]:
    """Ordered initial screening question ids for a version."""
    initial, _ = QUESTIONNAIRES[version]
    return [q.id for q in initial]


def social_question_ids(version: str = CURRENT_VERSION) -> list[str]:
    """Ordered social-function question ids for a version."""
    _, social = QUESTIONNAIRES[version]
    return [q.id for q in social]
