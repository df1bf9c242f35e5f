"""Questionnaire version activation."""

from services.api.src.screening.config import settings
from services.api.src.screening.triage.questions import QUESTIONNAIRES

# Versions with question definitions
ALL_VERSIONS = tuple(QUESTIONNAIRES)


def get_active_versions() -> list[str]:
    """Return list of questionnaire versions currently accepted."""
    raw = settings.active_questionnaire_versions
    versions = [v.strip().lower() for v in raw.split(",") if v.strip()]
    return [v for v in versions if v in ALL_VERSIONS]


def is_version_active(version: str) -> bool:
    """Check if a questionnaire version is accepted."""
    return version.lower() in get_active_versions()
