"""Data access for profile records."""
from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from chatline.core.exceptions import ConflictError, NotFoundError, StorageError, ValidationError
from chatline.models import Profile
from chatline.schemas.profile import ProfileRecord

__all__ = ["ProfileStore", "validate_profile_id"]

logger = logging.getLogger(__name__)


def validate_profile_id(profile_id: str) -> str:
    """Return the canonical form of a profile id or raise ValidationError."""
    try:
        return uuid.UUID(str(profile_id)).hex
    except (ValueError, AttributeError) as err:
        raise ValidationError("Invalid ID format", details=str(profile_id)) from err


class ProfileStore:
    """Thin wrapper around database access for profile records.

    Every mutating call commits its own transaction, so each profile row and
    its log are updated atomically. Unique-key violations surface as
    ConflictError, missing rows as NotFoundError and any other database
    failure as StorageError.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def _fail(self, action: str, err: SQLAlchemyError) -> StorageError:
        self.session.rollback()
        logger.error("Profile store failed to %s: %s", action, err)
        return StorageError(f"Error {action}", details=str(err))

    def list_all(self) -> Sequence[Profile]:
        """Return all profiles with their message logs."""
        try:
            result = self.session.execute(
                select(Profile).options(selectinload(Profile.messages)).order_by(Profile.created_at)
            )
            return list(result.scalars())
        except SQLAlchemyError as err:
            raise self._fail("retrieving data", err) from err

    def find(self, profile_id: str) -> Profile | None:
        """Return a profile by id, or None if it does not exist."""
        canonical = validate_profile_id(profile_id)
        try:
            return self.session.get(Profile, canonical)
        except SQLAlchemyError as err:
            raise self._fail("retrieving data", err) from err

    def get(self, profile_id: str) -> Profile:
        """Return a profile by id or raise NotFoundError."""
        profile = self.find(profile_id)
        if profile is None:
            raise NotFoundError("Data not found", details=profile_id)
        return profile

    def get_by_nickname(self, nickname: str) -> Profile | None:
        """Return the profile owning ``nickname``, if any."""
        try:
            result = self.session.execute(select(Profile).where(Profile.nickname == nickname))
            return result.scalars().first()
        except SQLAlchemyError as err:
            raise self._fail("retrieving data", err) from err

    def create(self, *, nickname: str, image: str, email: str) -> Profile:
        """Insert a new profile; the nickname must not be taken."""
        if not nickname or not image or not email:
            raise ValidationError("Nickname, image URL, or email is missing")

        profile = Profile(nickname=nickname, image=image, email=email)
        self.session.add(profile)
        try:
            self.session.commit()
        except IntegrityError as err:
            self.session.rollback()
            raise ConflictError("Nickname is already taken", details=nickname) from err
        except SQLAlchemyError as err:
            raise self._fail("saving the data", err) from err
        self.session.refresh(profile)
        return profile

    def update_image(self, profile_id: str, image: str) -> tuple[Profile, str | None]:
        """Replace a profile's image and return it with the previous reference."""
        profile = self.get(profile_id)
        previous = profile.image
        profile.image = image
        try:
            self.session.commit()
        except SQLAlchemyError as err:
            raise self._fail("updating the image", err) from err
        self.session.refresh(profile)
        return profile, previous

    def delete(self, profile_id: str) -> ProfileRecord:
        """Remove a profile and its own log; other logs are left untouched.

        Returns a snapshot of the deleted record.
        """
        profile = self.get(profile_id)
        snapshot = ProfileRecord.model_validate(profile)
        try:
            self.session.delete(profile)
            self.session.commit()
        except SQLAlchemyError as err:
            raise self._fail("deleting data", err) from err
        return snapshot
