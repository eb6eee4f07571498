"""Account registration and login."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from chatline.core import security
from chatline.core.exceptions import ConflictError, StorageError, ValidationError
from chatline.models import Account

__all__ = ["AccountService", "normalize_email"]

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountService:
    """Creates accounts and exchanges credentials for access tokens."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, account_id: str) -> Account | None:
        try:
            return self.session.get(Account, account_id)
        except SQLAlchemyError as err:
            raise StorageError("Error retrieving account", details=str(err)) from err

    def get_by_email(self, email: str) -> Account | None:
        try:
            result = self.session.execute(
                select(Account).where(Account.email == normalize_email(email))
            )
            return result.scalars().first()
        except SQLAlchemyError as err:
            raise StorageError("Error retrieving account", details=str(err)) from err

    def register(self, email: str, password: str) -> Account:
        """Persist a new account with a bcrypt-hashed password."""
        if not email or not password:
            raise ValidationError("Email and password are required")
        account = Account(
            email=normalize_email(email),
            password_hash=security.hash_password(password),
        )
        self.session.add(account)
        try:
            self.session.commit()
        except IntegrityError as err:
            self.session.rollback()
            raise ConflictError("Error registering user", details="Email already registered") from err
        except SQLAlchemyError as err:
            self.session.rollback()
            raise StorageError("Error registering user", details=str(err)) from err
        self.session.refresh(account)
        logger.info("Registered account %s", account.id)
        return account

    def login(self, email: str, password: str) -> str:
        """Return an access token for valid credentials.

        Raises:
            ValidationError: unknown email or wrong password.
        """
        account = self.get_by_email(email)
        if account is None:
            raise ValidationError("User not found")
        if not security.verify_password(password, account.password_hash):
            raise ValidationError("Invalid credentials")
        return security.create_access_token(account.id)
