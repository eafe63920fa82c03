# jobboard/services/users.py
"""
User reconciliation helpers.

Responsibilities:
- JIT (Just-In-Time) provisioning of local users for identity-provider accounts
- User lookup by external_id or email
- Recovering from concurrent first sightings of the same external_id
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from jobboard.auth.identity import IdentityAssertion, clean_email
from jobboard.core.database import is_unique_violation
from jobboard.models.user import User
from jobboard.services.errors import IdentityConflictError, InternalError, ValidationError

logger = logging.getLogger(__name__)


def get_user_by_external_id(db: Session, external_id: str) -> Optional[User]:
    """Look up a user by their identity-provider subject id."""
    return db.query(User).filter(User.external_id == external_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Look up a user by email address."""
    return db.query(User).filter(User.email == clean_email(email)).first()


class IdentityReconciler:
    """
    Get-or-create of the local user for an external identity.

    Existing users are returned as-is: profile fields (names, avatar) are frozen
    at first creation and are not refreshed from later assertions.
    """

    def __init__(self, db: Session):
        self.db = db

    def reconcile(
        self,
        external_id: str | None,
        email: str | None,
        first_name: str | None = None,
        last_name: str | None = None,
        avatar_url: str | None = None,
    ) -> User:
        """
        Ensure a database user exists for an external identity.

        Args:
            external_id: Identity-provider subject id
            email: Email address asserted by the provider
            first_name: Optional given name (defaults to "Unknown" on creation)
            last_name: Optional family name (defaults to "Unknown" on creation)
            avatar_url: Optional profile image URL

        Returns:
            User: existing or newly created user

        Raises:
            ValidationError: external_id missing/"null" or email missing
            IdentityConflictError: email already belongs to another external_id
            InternalError: any other persistence failure
        """
        try:
            assertion = IdentityAssertion.from_claims(
                external_id,
                email,
                first_name=first_name,
                last_name=last_name,
                avatar_url=avatar_url,
            )
        except ValueError as exc:
            logger.warning("Rejected identity: external_id=%r, email_present=%s", external_id, bool(email))
            raise ValidationError("Missing or invalid external_id or email") from exc

        try:
            user = get_user_by_external_id(self.db, assertion.external_id)
        except SQLAlchemyError as exc:
            logger.exception("User lookup failed: external_id=%s", assertion.external_id)
            raise InternalError("Database error: Unable to load user.") from exc

        if user:
            logger.debug("User already exists: id=%s, external_id=%s", user.id, assertion.external_id)
            return user

        return self._provision(assertion)

    def _provision(self, assertion: IdentityAssertion) -> User:
        user = User(**assertion.creation_fields())

        try:
            self.db.add(user)
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if not is_unique_violation(exc):
                logger.exception("Error saving user: %s", assertion.to_log_dict())
                raise InternalError("Database error: Unable to save user.") from exc
            return self._recover_conflict(assertion, exc)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Error saving user: %s", assertion.to_log_dict())
            raise InternalError("Database error: Unable to save user.") from exc

        self.db.refresh(user)
        logger.info(
            "Provisioned new user: id=%s, external_id=%s, email=%s",
            user.id,
            assertion.external_id,
            assertion.email,
        )
        return user

    def _recover_conflict(self, assertion: IdentityAssertion, exc: IntegrityError) -> User:
        """Re-read after a unique violation; a concurrent sync may have won the insert."""
        winner = get_user_by_external_id(self.db, assertion.external_id)
        if winner:
            logger.warning(
                "Concurrent provisioning for external_id=%s; using existing user id=%s",
                assertion.external_id,
                winner.id,
            )
            return winner

        if get_user_by_email(self.db, assertion.email):
            # Safe default: accounts are never linked automatically by email.
            logger.warning("Email already linked to another identity: %s", assertion.to_log_dict())
            raise IdentityConflictError() from exc

        logger.error("Unique violation without a matching user: %s", assertion.to_log_dict())
        raise InternalError("Database error: Unable to save user.") from exc
