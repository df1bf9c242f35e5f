"""Repository classes for screening data access."""

import json
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Table, select, update
from sqlalchemy.engine import Connection, Engine

from services.api.src.screening.db.models import (
    initial_screenings,
    referral_alerts,
    referrals,
    screening_sessions,
    social_function_screenings,
    triage_events,
)
from services.api.src.screening.schemas.enums import ReferralStatus


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def _decode(row: Any, *json_columns: str) -> dict:
    d = dict(row)
    for column in json_columns:
        d[column] = json.loads(d[column])
    return d


def _insert(engine: Engine, table: Table, row: dict, conn: Connection | None) -> None:
    """Insert on the caller's connection when given, else in a transaction of its own."""
    if conn is not None:
        conn.execute(table.insert().values(row))
        return
    with engine.begin() as own:
        own.execute(table.insert().values(row))


class SessionRepository:
    """Data access for screening sessions (demographic intake)."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def create(
        self,
        questionnaire_version: str,
        demographics: dict,
        accepted_terms: bool,
        accepted_privacy: bool,
        user_id: str | None = None,
        conn: Connection | None = None,
    ) -> dict:
        row = {
            "id": _new_id(),
            "user_id": user_id,
            "questionnaire_version": questionnaire_version,
            "age": demographics["age"],
            "gender": demographics.get("gender"),
            "marital_status": demographics.get("marital_status"),
            "nationality": demographics.get("nationality"),
            "religion": demographics.get("religion"),
            "education": demographics.get("education"),
            "occupation": demographics.get("occupation"),
            "has_mental_illness_diagnosis": demographics.get("has_mental_illness_diagnosis", False),
            "accepted_terms": accepted_terms,
            "accepted_privacy": accepted_privacy,
            "created_at": _now(),
        }
        _insert(self.engine, screening_sessions, row, conn)
        return row

    def get(self, session_id: str) -> dict | None:
        with self.engine.connect() as conn:
            result = conn.execute(
                select(screening_sessions).where(screening_sessions.c.id == session_id)
            )
            row = result.mappings().first()
            return dict(row) if row else None


class InitialScreeningRepository:
    """Data access for initial screening results. Written once per session."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def create(
        self,
        session_id: str,
        answers: dict,
        result: dict,
        detected_conditions: list[str],
        conn: Connection | None = None,
    ) -> dict:
        row = {
            "id": _new_id(),
            "session_id": session_id,
            "answers_json": json.dumps(answers),
            "risk_level": result["risk_level"],
            "detected_conditions_json": json.dumps(detected_conditions),
            "has_suicidal_ideation": result["has_suicidal_ideation"],
            "has_psychosis_indicators": result["has_psychosis_indicators"],
            "result_json": json.dumps(result),
            "created_at": _now(),
        }
        _insert(self.engine, initial_screenings, row, conn)
        return row

    def get_by_session(self, session_id: str) -> dict | None:
        with self.engine.connect() as conn:
            result = conn.execute(
                select(initial_screenings).where(initial_screenings.c.session_id == session_id)
            )
            row = result.mappings().first()
            if row:
                return _decode(row, "answers_json", "detected_conditions_json", "result_json")
            return None


class SocialFunctionRepository:
    """Data access for social-function screening results."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def create(
        self,
        session_id: str,
        answers: dict,
        total_score: int,
        functional_level: str,
        overall_risk_level: str,
        conn: Connection | None = None,
    ) -> dict:
        row = {
            "id": _new_id(),
            "session_id": session_id,
            "answers_json": json.dumps(answers),
            "total_score": total_score,
            "functional_level": functional_level,
            "overall_risk_level": overall_risk_level,
            "created_at": _now(),
        }
        _insert(self.engine, social_function_screenings, row, conn)
        return row

    def get_by_session(self, session_id: str) -> dict | None:
        with self.engine.connect() as conn:
            result = conn.execute(
                select(social_function_screenings)
                .where(social_function_screenings.c.session_id == session_id)
            )
            row = result.mappings().first()
            return _decode(row, "answers_json") if row else None

    def update_overall_risk(
        self,
        session_id: str,
        overall_risk_level: str,
        conn: Connection | None = None,
    ) -> None:
        stmt = (
            update(social_function_screenings)
            .where(social_function_screenings.c.session_id == session_id)
            .values(overall_risk_level=overall_risk_level)
        )
        if conn is not None:
            conn.execute(stmt)
            return
        with self.engine.begin() as own:
            own.execute(stmt)


class TriageEventRepository:
    """Append-only log of non-low triage outcomes."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def append(
        self,
        session_id: str,
        risk_level: str,
        trigger_question: str | None,
        actions: list[str],
        conn: Connection | None = None,
    ) -> dict:
        row = {
            "id": _new_id(),
            "session_id": session_id,
            "risk_level": risk_level,
            "trigger_question": trigger_question,
            "actions_json": json.dumps(actions),
            "created_at": _now(),
        }
        _insert(self.engine, triage_events, row, conn)
        return row

    def list_by_session(self, session_id: str) -> list[dict]:
        with self.engine.connect() as conn:
            result = conn.execute(
                select(triage_events)
                .where(triage_events.c.session_id == session_id)
                .order_by(triage_events.c.created_at.asc())
            )
            return [_decode(row, "actions_json") for row in result.mappings()]


class ReferralRepository:
    """Referrals for high-risk users and the admin alerts they raise."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def create(
        self,
        session_id: str,
        risk_level: str,
        detected_conditions: list[str],
        referral_reason: str | None,
        user_id: str | None = None,
        conn: Connection | None = None,
    ) -> dict:
        row = {
            "id": _new_id(),
            "session_id": session_id,
            "user_id": user_id,
            "risk_level": risk_level,
            "detected_conditions_json": json.dumps(detected_conditions),
            "referral_reason": referral_reason,
            "status": ReferralStatus.PENDING.value,
            "created_at": _now(),
        }
        _insert(self.engine, referrals, row, conn)
        return row

    def create_alert(
        self,
        referral_id: str,
        alert_type: str,
        conn: Connection | None = None,
    ) -> dict:
        row = {
            "id": _new_id(),
            "referral_id": referral_id,
            "alert_type": alert_type,
            "is_read": False,
            "is_actioned": False,
            "created_at": _now(),
        }
        _insert(self.engine, referral_alerts, row, conn)
        return row

    def list_by_session(self, session_id: str) -> list[dict]:
        with self.engine.connect() as conn:
            result = conn.execute(
                select(referrals)
                .where(referrals.c.session_id == session_id)
                .order_by(referrals.c.created_at.asc())
            )
            return [_decode(row, "detected_conditions_json") for row in result.mappings()]

    def list_alerts(self, referral_id: str) -> list[dict]:
        with self.engine.connect() as conn:
            result = conn.execute(
                select(referral_alerts).where(referral_alerts.c.referral_id == referral_id)
            )
            return [dict(row) for row in result.mappings()]
