# tests/test_identity.py
"""
Unit tests for the IdentityAssertion value object.

These tests verify:
- Normalization and validation of raw identity fields
- Creation-time defaults ("Unknown" names, derived display name)
- Log output safety

Tests do NOT require a database.
"""
from __future__ import annotations

import pytest

from jobboard.auth.identity import IdentityAssertion, clean_external_id


# ---------------------------------------------------------------------------
# Tests: validation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("external_id", [None, "", "   ", "null", "NULL", " null "])
def test_missing_or_placeholder_external_id_rejected(external_id):
    with pytest.raises(ValueError):
        IdentityAssertion.from_claims(external_id, "a@b.com")


@pytest.mark.parametrize("email", [None, "", "   "])
def test_missing_email_rejected(email):
    with pytest.raises(ValueError):
        IdentityAssertion.from_claims("user_123", email)


def test_clean_external_id_strips_whitespace():
    assert clean_external_id("  user_123 ") == "user_123"
    assert clean_external_id("null") is None


# ---------------------------------------------------------------------------
# Tests: normalization and defaults
# ---------------------------------------------------------------------------


def test_from_claims_normalizes_fields():
    assertion = IdentityAssertion.from_claims(
        " user_123 ",
        "Jane.Doe@Example.COM ",
        first_name=" Jane ",
        last_name="Doe",
        avatar_url="https://img.test/jane.png",
    )

    assert assertion.external_id == "user_123"
    assert assertion.email == "jane.doe@example.com"
    assert assertion.first_name == "Jane"
    assert assertion.display_name == "Jane Doe"


def test_creation_fields_default_unknown_names():
    assertion = IdentityAssertion.from_claims("user_123", "a@b.com")
    fields = assertion.creation_fields()

    assert fields["first_name"] == "Unknown"
    assert fields["last_name"] == "Unknown"
    # Display name comes from the asserted names, not the defaults.
    assert fields["display_name"] == ""
    assert fields["avatar_url"] == ""


def test_display_name_with_only_last_name():
    assertion = IdentityAssertion.from_claims("user_123", "a@b.com", last_name="Doe")

    assert assertion.display_name == "Doe"
    assert assertion.creation_fields()["first_name"] == "Unknown"


# ---------------------------------------------------------------------------
# Tests: safety
# ---------------------------------------------------------------------------


def test_to_log_dict_excludes_profile_fields():
    assertion = IdentityAssertion.from_claims(
        "user_123", "a@b.com", first_name="Jane", avatar_url="https://img.test/x.png"
    )

    assert assertion.to_log_dict() == {"external_id": "user_123", "email": "a@b.com"}


def test_assertion_is_frozen():
    assertion = IdentityAssertion.from_claims("user_123", "a@b.com")

    with pytest.raises(Exception):
        assertion.email = "changed@b.com"  # type: ignore[misc]
