"""Read-receipt updates on a single profile's log."""
from __future__ import annotations

import logging

from sqlalchemy import or_, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import ColumnElement

from chatline.core.exceptions import NotFoundError, StorageError, ValidationError
from chatline.models import Profile, ProfileMessage
from chatline.services.delivery import EVENT_MESSAGE_SEEN, DeliveryBus
from chatline.services.ledger import serialize_profile
from chatline.services.profile_store import ProfileStore

__all__ = ["ReceiptTracker"]

logger = logging.getLogger(__name__)


class ReceiptTracker:
    """Sets the monotonic ``seen`` flag on messages in one profile's log.

    Updates are single conditional UPDATE statements that only ever move
    ``seen`` from false to true, so repeated or concurrent calls converge on
    the same state. The other copy of each message is left as it is.
    """

    def __init__(self, store: ProfileStore, bus: DeliveryBus) -> None:
        self.store = store
        self.bus = bus

    async def mark_seen(self, profile_id: str, by_nickname: str) -> Profile:
        """Mark every message exchanged with ``by_nickname`` in this log as seen."""
        if not by_nickname:
            raise ValidationError("User is required")
        profile = self.store.get(profile_id)
        changed = self._mark(
            profile,
            or_(
                ProfileMessage.recipient == by_nickname,
                ProfileMessage.sender == by_nickname,
            ),
        )
        if changed:
            await self._announce(profile)
        return profile

    async def mark_single_seen(self, profile_id: str, message_id: str) -> Profile:
        """Mark one message of this log as seen."""
        if not message_id:
            raise ValidationError("messageId is required")
        profile = self.store.get(profile_id)
        if profile.find_message(message_id) is None:
            raise NotFoundError("Message not found", details=message_id)
        if self._mark(profile, ProfileMessage.message_id == message_id):
            await self._announce(profile)
        return profile

    def _mark(self, profile: Profile, condition: ColumnElement[bool]) -> int:
        session = self.store.session
        stmt = (
            update(ProfileMessage)
            .where(
                ProfileMessage.profile_id == profile.id,
                ProfileMessage.seen.is_(False),
                condition,
            )
            .values(seen=True)
        )
        try:
            result = session.execute(stmt)
            session.commit()
        except SQLAlchemyError as err:
            session.rollback()
            raise StorageError("Error updating messages", details=str(err)) from err
        session.expire(profile, ["messages"])
        changed = result.rowcount or 0
        logger.debug("Marked %d message(s) seen for profile %s", changed, profile.id)
        return changed

    async def _announce(self, profile: Profile) -> None:
        await self.bus.broadcast(EVENT_MESSAGE_SEEN, {"profile": serialize_profile(profile)})
