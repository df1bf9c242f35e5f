"""Pydantic request/response models for assessment API endpoints."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field, StrictBool, StrictInt

from services.api.src.screening.schemas.enums import (
    Education,
    Gender,
    MaritalStatus,
    Nationality,
    Religion,
)
from services.api.src.screening.triage.questions import CURRENT_VERSION, LIKERT_MAX, LIKERT_MIN
from services.api.src.screening.triage.schemas import (
    ConditionTag,
    FunctionalLevel,
    RiskLevel,
    TriageAction,
    TriageResult,
)

LikertAnswer = Annotated[StrictInt, Field(ge=LIKERT_MIN, le=LIKERT_MAX)]


# -- Requests ---------------------------------------------------------------

class Demographics(BaseModel):
    age: int = Field(..., ge=13, le=120)
    gender: Gender | None = None
    marital_status: MaritalStatus | None = None
    nationality: Nationality | None = None
    religion: Religion | None = None
    education: Education | None = None
    occupation: str | None = None
    has_mental_illness_diagnosis: bool = False


class StartSessionRequest(BaseModel):
    demographics: Demographics
    accepted_terms: bool
    accepted_privacy: bool
    questionnaire_version: str = CURRENT_VERSION
    user_id: str | None = None


class ScreeningAnswersRequest(BaseModel):
    answers: dict[str, StrictBool]


class SingleAnswerRequest(BaseModel):
    question_id: str
    answer: StrictBool


class SocialAnswersRequest(BaseModel):
    answers: dict[str, LikertAnswer]


# -- Responses ---------------------------------------------------------------

class QuestionItem(BaseModel):
    id: str
    text: str
    category: str


class QuestionnaireResponse(BaseModel):
    version: str
    screening_questions: list[QuestionItem]
    social_questions: list[QuestionItem]
    likert_min: int = LIKERT_MIN
    likert_max: int = LIKERT_MAX


class SessionResponse(BaseModel):
    id: str
    questionnaire_version: str
    created_at: str


class ScreeningResponse(BaseModel):
    screening_id: str
    session_id: str
    risk_level: RiskLevel
    detected_conditions: list[ConditionTag]
    actions: list[TriageAction]
    has_suicidal_ideation: bool
    has_psychosis_indicators: bool
    should_show_emergency: bool
    should_block_chat: bool
    should_redirect_emergency: bool
    highest_risk_reason: str | None = None
    referral_id: str | None = None


class SingleAnswerResponse(BaseModel):
    triggered: bool
    result: TriageResult | None = None


class SocialResponse(BaseModel):
    social_screening_id: str
    session_id: str
    total_score: int
    functional_level: FunctionalLevel
    overall_risk_level: RiskLevel


class ScreeningSummary(BaseModel):
    risk_level: RiskLevel
    detected_conditions: list[ConditionTag]
    has_suicidal_ideation: bool
    has_psychosis_indicators: bool
    created_at: str


class SocialSummary(BaseModel):
    total_score: int
    functional_level: FunctionalLevel
    created_at: str


class ResultsResponse(BaseModel):
    session_id: str
    screening: ScreeningSummary | None = None
    social: SocialSummary | None = None
    overall_risk_level: RiskLevel | None = None
