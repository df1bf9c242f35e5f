"""Tests for redaction helpers."""

from services.api.src.screening.core.redaction import (
    age_band,
    redact_demographics,
    redact_dict,
    redact_value,
)


def test_redact_value_returns_hash():
    result = redact_value("sensitive-data")
    assert result.startswith("REDACTED:")
    assert len(result) > 10


def test_redact_value_deterministic():
    assert redact_value("test") == redact_value("test")


def test_redact_dict_sensitive_keys():
    data = {
        "full_name": "Siti Aminah",
        "gender": "female",
        "email": "siti@example.com",
    }
    result = redact_dict(data)
    assert result["full_name"].startswith("REDACTED:")
    assert result["email"].startswith("REDACTED:")
    assert result["gender"] == "female"


def test_redact_dict_nested_and_lists():
    data = {
        "contact": {"phone": "0123456789", "preferred": "phone"},
        "notes": ["call 0123456789 after 5pm", 3],
    }
    result = redact_dict(data)
    assert result["contact"]["phone"].startswith("REDACTED:")
    assert result["contact"]["preferred"] == "phone"
    assert result["notes"][0] == "call [REDACTED] after 5pm"
    assert result["notes"][1] == 3


def test_redact_dict_ic_number_in_text():
    result = redact_dict({"note": "IC 900101-14-5678 on file"})
    assert "900101-14-5678" not in result["note"]
    assert "[REDACTED]" in result["note"]


def test_empty_sensitive_value_becomes_none():
    assert redact_dict({"occupation": ""})["occupation"] is None


def test_age_band():
    assert age_band(34) == "30-39"
    assert age_band(13) == "10-19"


def test_redact_demographics_bands_age():
    result = redact_demographics({"age": 42, "occupation": "teacher", "religion": "islam"})
    assert result["age"] == "40-49"
    assert result["occupation"].startswith("REDACTED:")
    assert result["religion"] == "islam"
