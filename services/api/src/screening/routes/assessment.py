"""Assessment API endpoints: intake, screening, social function, results."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError

from services.api.src.screening.core.redaction import redact_demographics
from services.api.src.screening.core.versions import ALL_VERSIONS, is_version_active
from services.api.src.screening.db.engine import get_engine
from services.api.src.screening.db.repository import (
    InitialScreeningRepository,
    ReferralRepository,
    SessionRepository,
    SocialFunctionRepository,
    TriageEventRepository,
)
from services.api.src.screening.schemas.enums import AlertType
from services.api.src.screening.schemas.responses import (
    QuestionItem,
    QuestionnaireResponse,
    ResultsResponse,
    ScreeningAnswersRequest,
    ScreeningResponse,
    ScreeningSummary,
    SessionResponse,
    SingleAnswerRequest,
    SingleAnswerResponse,
    SocialAnswersRequest,
    SocialResponse,
    SocialSummary,
    StartSessionRequest,
)
from services.api.src.screening.triage.questions import (
    QUESTIONNAIRES,
    screening_question_ids,
    social_question_ids,
)
from services.api.src.screening.triage.rules import (
    InvalidInputError,
    calculate_functional_level,
    detect_conditions,
    evaluate_single_answer,
    evaluate_triage,
    get_overall_risk_level,
    score_social_function,
)
from services.api.src.screening.triage.schemas import RiskLevel, TriageAction, TriageResult

logger = logging.getLogger(__name__)

router = APIRouter()


def _engine() -> Engine:
    return get_engine()


def _str_dt(dt) -> str:
    """Convert a datetime to ISO string."""
    return dt.isoformat() if hasattr(dt, "isoformat") else str(dt)


def _require_version(version: str) -> str:
    if version not in ALL_VERSIONS:
        raise HTTPException(400, f"Unknown questionnaire version: {version}")
    if not is_version_active(version):
        raise HTTPException(400, f"Questionnaire version '{version}' is not active")
    return version


def _require_session(engine: Engine, session_id: str) -> dict:
    session = SessionRepository(engine).get(session_id)
    if not session:
        raise HTTPException(404, "Session not found")
    return session


# ---------------------------------------------------------------------------
# Questionnaire
# ---------------------------------------------------------------------------

@router.get("/questions", response_model=QuestionnaireResponse)
def get_questions(version: str = "v1") -> QuestionnaireResponse:
    """Return the questionnaire for an active version."""
    _require_version(version)
    initial, social = QUESTIONNAIRES[version]
    return QuestionnaireResponse(
        version=version,
        screening_questions=[
            QuestionItem(id=q.id, text=q.text, category=q.condition.value) for q in initial
        ],
        social_questions=[
            QuestionItem(id=q.id, text=q.text, category=q.category) for q in social
        ],
    )


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

@router.post("/sessions", response_model=SessionResponse)
def start_session(
    body: StartSessionRequest,
    engine: Engine = Depends(_engine),
) -> SessionResponse:
    """Start a screening session from demographic intake."""
    if not body.accepted_terms or not body.accepted_privacy:
        raise HTTPException(400, "Terms and privacy policy must be accepted")
    _require_version(body.questionnaire_version)

    demographics = body.demographics.model_dump(mode="json")
    row = SessionRepository(engine).create(
        questionnaire_version=body.questionnaire_version,
        demographics=demographics,
        accepted_terms=body.accepted_terms,
        accepted_privacy=body.accepted_privacy,
        user_id=body.user_id,
    )

    logger.info("session_started", extra={
        "session_id": row["id"],
        "version": body.questionnaire_version,
        "demographics": redact_demographics(demographics),
    })

    return SessionResponse(
        id=row["id"],
        questionnaire_version=row["questionnaire_version"],
        created_at=_str_dt(row["created_at"]),
    )


# ---------------------------------------------------------------------------
# Initial screening
# ---------------------------------------------------------------------------

@router.post("/sessions/{session_id}/screening", response_model=ScreeningResponse)
def submit_screening(
    session_id: str,
    body: ScreeningAnswersRequest,
    engine: Engine = Depends(_engine),
) -> ScreeningResponse:
    """Run triage on the initial screening answers and persist the result."""
    session = _require_session(engine, session_id)
    version = _require_version(session["questionnaire_version"])

    unknown = sorted(set(body.answers) - set(screening_question_ids(version)))
    if unknown:
        raise HTTPException(400, f"Unknown question ids for {version}: {', '.join(unknown)}")

    screening_repo = InitialScreeningRepository(engine)
    if screening_repo.get_by_session(session_id):
        raise HTTPException(409, "Screening already submitted for this session")

    social = SocialFunctionRepository(engine).get_by_session(session_id)

    # Evaluator failures are fatal for the request, never a low-risk default
    try:
        result = evaluate_triage(body.answers)
        conditions = detect_conditions(body.answers)
        overall_risk = (
            get_overall_risk_level(result.risk_level, social["functional_level"])
            if social else None
        )
    except InvalidInputError as exc:
        logger.error("triage_input_rejected", extra={"session_id": session_id, "error": str(exc)})
        raise HTTPException(422, str(exc)) from exc

    condition_values = [c.value for c in conditions]
    result_json = result.model_dump(mode="json")

    # Screening, triage event, referral and alert commit or roll back together
    referral_id = None
    try:
        with engine.begin() as conn:
            screening_row = screening_repo.create(
                session_id=session_id,
                answers=body.answers,
                result=result_json,
                detected_conditions=condition_values,
                conn=conn,
            )
            if result.risk_level != RiskLevel.LOW:
                TriageEventRepository(engine).append(
                    session_id=session_id,
                    risk_level=result.risk_level.value,
                    trigger_question=result.triggered_rules[0] if result.triggered_rules else None,
                    actions=result_json["actions"],
                    conn=conn,
                )
            if TriageAction.CREATE_REFERRAL in result.actions:
                referral_id = _create_referral(engine, conn, session, result, condition_values)
            if overall_risk is not None:
                SocialFunctionRepository(engine).update_overall_risk(
                    session_id, overall_risk.value, conn=conn,
                )
    except IntegrityError as exc:
        raise HTTPException(409, "Screening already submitted for this session") from exc

    if result.risk_level != RiskLevel.LOW:
        logger.warning("triage_event_logged", extra={
            "session_id": session_id,
            "risk_level": result.risk_level.value,
            "triggered_rules": list(result.triggered_rules),
        })

    logger.info("screening_submitted", extra={
        "session_id": session_id,
        "screening_id": screening_row["id"],
        "risk_level": result.risk_level.value,
        "conditions": condition_values,
    })

    return ScreeningResponse(
        screening_id=screening_row["id"],
        session_id=session_id,
        risk_level=result.risk_level,
        detected_conditions=conditions,
        actions=list(result.actions),
        has_suicidal_ideation=result.has_suicidal_ideation,
        has_psychosis_indicators=result.has_psychosis_indicators,
        should_show_emergency=result.should_show_emergency,
        should_block_chat=result.should_block_chat,
        should_redirect_emergency=result.should_redirect_emergency,
        highest_risk_reason=result.highest_risk_reason,
        referral_id=referral_id,
    )


@router.post("/screening/answer", response_model=SingleAnswerResponse)
def check_answer(body: SingleAnswerRequest) -> SingleAnswerResponse:
    """Real-time triage check for a single answer."""
    try:
        result = evaluate_single_answer(body.question_id, body.answer)
    except InvalidInputError as exc:
        raise HTTPException(422, str(exc)) from exc

    if result is None:
        return SingleAnswerResponse(triggered=False)
    return SingleAnswerResponse(triggered=True, result=result)


# ---------------------------------------------------------------------------
# Social function
# ---------------------------------------------------------------------------

@router.post("/sessions/{session_id}/social", response_model=SocialResponse)
def submit_social(
    session_id: str,
    body: SocialAnswersRequest,
    engine: Engine = Depends(_engine),
) -> SocialResponse:
    """Score the social-function answers and combine with screening risk."""
    session = _require_session(engine, session_id)
    version = _require_version(session["questionnaire_version"])

    expected = set(social_question_ids(version))
    missing = sorted(expected - set(body.answers))
    unknown = sorted(set(body.answers) - expected)
    if missing or unknown:
        raise HTTPException(
            400,
            f"Social answers must cover exactly the {version} questions "
            f"(missing: {missing}, unknown: {unknown})",
        )

    social_repo = SocialFunctionRepository(engine)
    if social_repo.get_by_session(session_id):
        raise HTTPException(409, "Social function screening already submitted for this session")

    initial = InitialScreeningRepository(engine).get_by_session(session_id)
    initial_risk = initial["risk_level"] if initial else RiskLevel.LOW

    try:
        total_score = score_social_function(body.answers)
        functional_level = calculate_functional_level(total_score)
        overall_risk = get_overall_risk_level(initial_risk, functional_level)
    except InvalidInputError as exc:
        logger.error("social_input_rejected", extra={"session_id": session_id, "error": str(exc)})
        raise HTTPException(422, str(exc)) from exc

    try:
        row = social_repo.create(
            session_id=session_id,
            answers=body.answers,
            total_score=total_score,
            functional_level=functional_level.value,
            overall_risk_level=overall_risk.value,
        )
    except IntegrityError as exc:
        raise HTTPException(
            409, "Social function screening already submitted for this session"
        ) from exc

    logger.info("social_submitted", extra={
        "session_id": session_id,
        "total_score": total_score,
        "functional_level": functional_level.value,
        "overall_risk_level": overall_risk.value,
    })

    return SocialResponse(
        social_screening_id=row["id"],
        session_id=session_id,
        total_score=total_score,
        functional_level=functional_level,
        overall_risk_level=overall_risk,
    )


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@router.get("/sessions/{session_id}/results", response_model=ResultsResponse)
def get_results(
    session_id: str,
    engine: Engine = Depends(_engine),
) -> ResultsResponse:
    """Stored screening and social-function results for a session."""
    _require_session(engine, session_id)
    initial = InitialScreeningRepository(engine).get_by_session(session_id)
    social = SocialFunctionRepository(engine).get_by_session(session_id)

    screening_summary = None
    if initial:
        screening_summary = ScreeningSummary(
            risk_level=initial["risk_level"],
            detected_conditions=initial["detected_conditions_json"],
            has_suicidal_ideation=initial["has_suicidal_ideation"],
            has_psychosis_indicators=initial["has_psychosis_indicators"],
            created_at=_str_dt(initial["created_at"]),
        )

    social_summary = None
    if social:
        social_summary = SocialSummary(
            total_score=social["total_score"],
            functional_level=social["functional_level"],
            created_at=_str_dt(social["created_at"]),
        )

    if initial and social:
        overall = get_overall_risk_level(initial["risk_level"], social["functional_level"])
    elif social:
        overall = social["overall_risk_level"]
    elif initial:
        overall = initial["risk_level"]
    else:
        overall = None

    return ResultsResponse(
        session_id=session_id,
        screening=screening_summary,
        social=social_summary,
        overall_risk_level=overall,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _create_referral(
    engine: Engine,
    conn: Connection,
    session: dict,
    result: TriageResult,
    conditions: list[str],
) -> str:
    """Open a referral and raise the matching admin alert on ``conn``."""
    repo = ReferralRepository(engine)
    referral = repo.create(
        session_id=session["id"],
        risk_level=result.risk_level.value,
        detected_conditions=conditions,
        referral_reason=result.highest_risk_reason,
        user_id=session["user_id"],
        conn=conn,
    )
    alert_type = (
        AlertType.IMMINENT_RISK if result.risk_level == RiskLevel.IMMINENT
        else AlertType.HIGH_RISK
    )
    repo.create_alert(referral["id"], alert_type.value, conn=conn)

    logger.warning("referral_created", extra={
        "session_id": session["id"],
        "referral_id": referral["id"],
        "alert_type": alert_type.value,
    })
    return referral["id"]
