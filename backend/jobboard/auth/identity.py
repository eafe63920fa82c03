# jobboard/auth/identity.py
"""
External identity assertion model.

The identity provider (verified upstream, before a request reaches this service)
asserts who the caller is: a stable subject id plus a handful of profile fields.
This module turns that loose payload into one immutable value so the services
can reason about "which account is this?" without re-checking raw request fields.

The assertion is INTERNAL ONLY. It is never returned to clients; use
``to_log_dict()`` when it needs to appear in logs.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Front-ends serialize a missing id as the string "null"; treat it as absent.
NULL_PLACEHOLDER = "null"
UNKNOWN_NAME = "Unknown"


def clean_external_id(external_id: str | None) -> str | None:
    """Return the stripped subject id, or None when it is missing or a placeholder."""
    if external_id is None:
        return None
    value = str(external_id).strip()
    if not value or value.lower() == NULL_PLACEHOLDER:
        return None
    return value


def clean_email(email: str | None) -> str | None:
    if email is None:
        return None
    value = str(email).strip().lower()
    return value or None


def _clean_optional(value: str | None) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class IdentityAssertion:
    """
    Canonical representation of an identity-provider assertion.

    Attributes:
        external_id: The provider's subject id (stable across sessions).
        email: Normalized (stripped, lower-cased) email address.
        first_name: Given name as asserted, "" when absent.
        last_name: Family name as asserted, "" when absent.
        avatar_url: Profile image URL, "" when absent.
    """

    external_id: str
    email: str
    first_name: str = ""
    last_name: str = ""
    avatar_url: str = ""

    @classmethod
    def from_claims(
        cls,
        external_id: str | None,
        email: str | None,
        first_name: str | None = None,
        last_name: str | None = None,
        avatar_url: str | None = None,
    ) -> IdentityAssertion:
        """
        Build an assertion from raw request fields.

        Raises:
            ValueError: If external_id is missing/placeholder or email is missing.
        """
        cleaned_id = clean_external_id(external_id)
        if cleaned_id is None:
            raise ValueError("Missing or invalid external_id")
        cleaned_email = clean_email(email)
        if cleaned_email is None:
            raise ValueError("Missing or invalid email")

        return cls(
            external_id=cleaned_id,
            email=cleaned_email,
            first_name=_clean_optional(first_name),
            last_name=_clean_optional(last_name),
            avatar_url=_clean_optional(avatar_url),
        )

    @property
    def display_name(self) -> str:
        """Trimmed "first last" of the asserted names (absent names contribute nothing)."""
        return f"{self.first_name} {self.last_name}".strip()

    def creation_fields(self) -> dict[str, str]:
        """Column values for a first-sighting user row, with "Unknown" for absent names."""
        return {
            "external_id": self.external_id,
            "email": self.email,
            "first_name": self.first_name or UNKNOWN_NAME,
            "last_name": self.last_name or UNKNOWN_NAME,
            "display_name": self.display_name,
            "avatar_url": self.avatar_url,
        }

    def to_log_dict(self) -> dict[str, Any]:
        """
        Return the subset of the assertion that is safe to log.

        Profile fields are left out; the subject id and email identify the account.
        """
        return {
            "external_id": self.external_id,
            "email": self.email,
        }
