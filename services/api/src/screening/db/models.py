"""SQLAlchemy table definitions for screening sessions and their results."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)

metadata = MetaData()

screening_sessions = Table(
    "screening_sessions",
    metadata,
    Column("id", String, primary_key=True),
    Column("user_id", String, nullable=True),
    Column("questionnaire_version", String(16), nullable=False),
    Column("age", Integer, nullable=False),
    Column("gender", String(32), nullable=True),
    Column("marital_status", String(32), nullable=True),
    Column("nationality", String(32), nullable=True),
    Column("religion", String(32), nullable=True),
    Column("education", String(32), nullable=True),
    Column("occupation", String, nullable=True),
    Column("has_mental_illness_diagnosis", Boolean, nullable=False, server_default="0"),
    Column("accepted_terms", Boolean, nullable=False),
    Column("accepted_privacy", Boolean, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Index("ix_sessions_user", "user_id"),
    Index("ix_sessions_created", "created_at"),
)

# One row per session; the unique constraint rejects a second submission
initial_screenings = Table(
    "initial_screenings",
    metadata,
    Column("id", String, primary_key=True),
    Column("session_id", String, ForeignKey("screening_sessions.id"), nullable=False, unique=True),
    Column("answers_json", Text, nullable=False),
    Column("risk_level", String(16), nullable=False),
    Column("detected_conditions_json", Text, nullable=False, server_default="[]"),
    Column("has_suicidal_ideation", Boolean, nullable=False),
    Column("has_psychosis_indicators", Boolean, nullable=False),
    Column("result_json", Text, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Index("ix_initial_risk", "risk_level"),
)

social_function_screenings = Table(
    "social_function_screenings",
    metadata,
    Column("id", String, primary_key=True),
    Column("session_id", String, ForeignKey("screening_sessions.id"), nullable=False, unique=True),
    Column("answers_json", Text, nullable=False),
    Column("total_score", Integer, nullable=False),
    Column("functional_level", String(16), nullable=False),
    Column("overall_risk_level", String(16), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

triage_events = Table(
    "triage_events",
    metadata,
    Column("id", String, primary_key=True),
    Column("session_id", String, ForeignKey("screening_sessions.id"), nullable=False),
    Column("risk_level", String(16), nullable=False),
    Column("trigger_question", String(64), nullable=True),
    Column("actions_json", Text, nullable=False, server_default="[]"),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Index("ix_triage_events_session", "session_id"),
    Index("ix_triage_events_created", "created_at"),
)

referrals = Table(
    "referrals",
    metadata,
    Column("id", String, primary_key=True),
    Column("session_id", String, ForeignKey("screening_sessions.id"), nullable=False),
    Column("user_id", String, nullable=True),
    Column("risk_level", String(16), nullable=False),
    Column("detected_conditions_json", Text, nullable=False, server_default="[]"),
    Column("referral_reason", Text, nullable=True),
    Column("status", String(32), nullable=False, server_default="pending"),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Index("ix_referrals_session", "session_id"),
    Index("ix_referrals_status", "status"),
)

referral_alerts = Table(
    "referral_alerts",
    metadata,
    Column("id", String, primary_key=True),
    Column("referral_id", String, ForeignKey("referrals.id"), nullable=False),
    Column("alert_type", String(32), nullable=False),
    Column("is_read", Boolean, nullable=False, server_default="0"),
    Column("is_actioned", Boolean, nullable=False, server_default="0"),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Index("ix_alerts_referral", "referral_id"),
)
