"""Profile records and the message log embedded in each of them."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from chatline.db.session import Base, utcnow


def new_profile_id() -> str:
    """Return a fresh opaque profile identifier."""
    return uuid.uuid4().hex


class Profile(Base):
    """Per-user record: nickname, image, email and the ordered message log."""

    __tablename__ = "profile"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_profile_id)
    nickname: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    image: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)

    messages: Mapped[list[ProfileMessage]] = relationship(
        "ProfileMessage",
        back_populates="profile",
        cascade="all, delete-orphan",
        order_by="ProfileMessage.position",
    )

    def find_message(self, message_id: str) -> ProfileMessage | None:
        """Return this log's copy of a message, if present."""
        for message in self.messages:
            if message.message_id == message_id:
                return message
        return None


class ProfileMessage(Base):
    """One copy of a message inside a single profile's log.

    The same ``message_id`` appears in the sender's and the addressee's log;
    it never appears twice within one log.
    """

    __tablename__ = "profile_message"
    __table_args__ = (
        UniqueConstraint("profile_id", "message_id", name="uq_profile_message_id"),
    )

    # Autoincrement key doubles as the insertion order of the log.
    position: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    profile_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("profile.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    message_id: Mapped[str] = mapped_column(Text, nullable=False)
    sender: Mapped[str] = mapped_column(Text, nullable=False)
    recipient: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    seen: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)

    profile: Mapped[Profile] = relationship("Profile", back_populates="messages")
