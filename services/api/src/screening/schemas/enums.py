"""Enums for the assessment API."""

from enum import Enum


class ReferralStatus(str, Enum):
    """Lifecycle of a referral raised by triage."""
    PENDING = "pending"
    CONTACTED = "contacted"
    CLOSED = "closed"


class AlertType(str, Enum):
    """Admin alert raised alongside a referral."""
    IMMINENT_RISK = "imminent_risk"
    HIGH_RISK = "high_risk"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    PREFER_NOT_TO_SAY = "prefer_not_to_say"


class MaritalStatus(str, Enum):
    SINGLE = "single"
    MARRIED = "married"
    DIVORCED = "divorced"
    WIDOWED = "widowed"
    SEPARATED = "separated"


class Education(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    DIPLOMA = "diploma"
    DEGREE = "degree"
    MASTERS = "masters"
    PHD = "phd"
    OTHER = "other"


class Religion(str, Enum):
    ISLAM = "islam"
    BUDDHISM = "buddhism"
    CHRISTIANITY = "christianity"
    HINDUISM = "hinduism"
    SIKHISM = "sikhism"
    OTHER = "other"
    NONE = "none"


class Nationality(str, Enum):
    MALAYSIAN = "malaysian"
    OTHER = "other"
