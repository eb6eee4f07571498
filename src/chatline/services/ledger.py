"""Dual-log message append with per-log idempotency.

A message is written into two profile logs by two independent commits:

1. the path-addressed profile ("friend" side);
2. the counterpart profile, resolved by nickname ("user" side).

Each step is keyed by ``(profile_id, message_id)`` and skips the insert when
that log already holds the message, so a client that saw a failure between
the two steps can simply re-issue the same append. `message_status` is the
read a client uses to detect such a partial state.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from chatline.core.exceptions import StorageError, ValidationError
from chatline.models import Profile, ProfileMessage
from chatline.schemas.profile import ProfileRecord
from chatline.services.delivery import EVENT_MESSAGE_APPENDED, DeliveryBus
from chatline.services.profile_store import ProfileStore, validate_profile_id

__all__ = ["AppendResult", "MessageLedger", "counterpart_nickname"]

logger = logging.getLogger(__name__)


def counterpart_nickname(owner_nickname: str, sender: str, recipient: str) -> str:
    """Return the nickname whose log receives the second copy.

    When the addressed log belongs to the recipient the second copy goes to
    the sender; otherwise it goes to the recipient.
    """
    return sender if owner_nickname == recipient else recipient


def serialize_profile(profile: Profile) -> dict[str, Any]:
    """Render a profile the way clients receive it over HTTP."""
    return ProfileRecord.model_validate(profile).model_dump(mode="json", by_alias=True)


@dataclass(frozen=True)
class AppendResult:
    """Profiles touched by an append; ``user_data`` is None if unresolved."""

    friend_data: Profile
    user_data: Profile | None

    def payload(self) -> dict[str, Any]:
        return {
            "friendData": serialize_profile(self.friend_data),
            "userData": serialize_profile(self.user_data) if self.user_data else None,
        }


class MessageLedger:
    """Writes messages into both participants' logs and announces the result."""

    def __init__(self, store: ProfileStore, bus: DeliveryBus) -> None:
        self.store = store
        self.bus = bus

    @property
    def session(self) -> Session:
        return self.store.session

    async def append_message(
        self,
        profile_id: str,
        *,
        sender: str,
        recipient: str,
        content: str,
        message_id: str,
        timestamp: datetime | None,
    ) -> AppendResult:
        """Append a message to the addressed log and the counterpart's log.

        Raises:
            ValidationError: a field is missing, the profile id is malformed or
                the addressed profile is neither sender nor recipient.
            NotFoundError: the addressed profile does not exist.
            StorageError: the store failed during either step.
        """
        if not sender or not recipient or not content or not message_id or timestamp is None:
            raise ValidationError("User, content, toUser, _id and timestamp are required")
        validate_profile_id(profile_id)

        friend = self.store.get(profile_id)
        if friend.nickname not in (sender, recipient):
            raise ValidationError("Profile is not a party to this message", details=friend.nickname)
        self._append_once(
            friend,
            message_id=message_id,
            sender=sender,
            recipient=recipient,
            content=content,
            timestamp=timestamp,
        )

        other = self.store.get_by_nickname(
            counterpart_nickname(friend.nickname, sender, recipient)
        )
        if other is not None and other.id != friend.id:
            self._append_once(
                other,
                message_id=message_id,
                sender=sender,
                recipient=recipient,
                content=content,
                timestamp=timestamp,
            )

        logger.info(
            "Appended message %s to profile %s (counterpart %s)",
            message_id,
            friend.id,
            other.id if other is not None else None,
        )
        result = AppendResult(friend_data=friend, user_data=other)
        await self.bus.broadcast(EVENT_MESSAGE_APPENDED, result.payload())
        return result

    def message_status(self, profile_id: str, message_id: str, user: str | None = None) -> dict[str, Any]:
        """Report which of the two logs currently hold ``message_id``."""
        friend = self.store.get(profile_id)
        status: dict[str, Any] = {
            "message_id": message_id,
            "friend_has_message": self._has_message(friend.id, message_id),
            "user": user,
            "user_has_message": None,
        }
        if user:
            other = self.store.get_by_nickname(user)
            if other is not None:
                status["user_has_message"] = self._has_message(other.id, message_id)
        return status

    def _has_message(self, profile_id: str, message_id: str) -> bool:
        try:
            row = self.session.execute(
                select(ProfileMessage.position).where(
                    ProfileMessage.profile_id == profile_id,
                    ProfileMessage.message_id == message_id,
                )
            ).first()
        except SQLAlchemyError as err:
            self.session.rollback()
            raise StorageError("Error retrieving data", details=str(err)) from err
        return row is not None

    def _append_once(self, profile: Profile, *, message_id: str, **fields: Any) -> bool:
        """Insert the message into one log unless it is already there.

        Returns True if a row was written. A concurrent insert of the same
        message loses on the unique (profile_id, message_id) constraint and is
        treated as already present.
        """
        if self._has_message(profile.id, message_id):
            return False

        self.session.add(ProfileMessage(profile_id=profile.id, message_id=message_id, **fields))
        try:
            self.session.commit()
        except IntegrityError as err:
            self.session.rollback()
            if self._has_message(profile.id, message_id):
                logger.debug("Message %s already stored for %s", message_id, profile.id)
                return False
            raise StorageError("Error saving message", details=str(err)) from err
        except SQLAlchemyError as err:
            self.session.rollback()
            raise StorageError("Error saving message", details=str(err)) from err
        finally:
            self.session.expire(profile, ["messages"])
        return True
