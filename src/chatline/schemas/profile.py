"""Profile and message schemas.

Response models keep the field names the web client already consumes
(``_id``, ``from``, ``to``, ``friendData``/``userData``) as
aliases over the ORM attribute names.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ProfileCreate(BaseModel):
    """Schema for creating a new profile record."""

    model_config = ConfigDict(str_strip_whitespace=True)

    nickname: str = Field(..., min_length=1, description="Unique, immutable display handle")
    image: str = Field(..., min_length=1, description="Image URL or stored upload path")
    email: str = Field(..., min_length=1)


class MessageCreate(BaseModel):
    """Body of an append-message request."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    user: str = Field(..., min_length=1, description="Sender nickname")
    content: str = Field(..., min_length=1)
    to_user: str = Field(..., alias="toUser", min_length=1, description="Recipient nickname")
    message_id: str = Field(..., alias="_id", min_length=1, description="Client-chosen message id")
    timestamp: datetime = Field(..., description="Client creation time")


class MarkSeenRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    user: str = Field(..., min_length=1, description="Nickname the messages are addressed to")


class SingleSeenRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    message_id: str = Field(..., alias="messageId", min_length=1)


class MessageRecord(BaseModel):
    """One message copy as returned to clients."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    message_id: str = Field(alias="_id")
    sender: str = Field(alias="from")
    recipient: str = Field(alias="to")
    content: str
    timestamp: datetime
    seen: bool


class ProfileRecord(BaseModel):
    """Profile with its full message log."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str = Field(alias="_id")
    nickname: str
    image: str
    email: str
    messages: list[MessageRecord] = Field(default_factory=list)


class AppendResponse(BaseModel):
    """Addressee record and sender record (null when the sender has no profile)."""

    model_config = ConfigDict(populate_by_name=True)

    friend_data: ProfileRecord = Field(alias="friendData")
    user_data: ProfileRecord | None = Field(alias="userData")


class MessageStatus(BaseModel):
    """Where copies of a message currently exist."""

    model_config = ConfigDict(populate_by_name=True)

    message_id: str = Field(alias="messageId")
    friend_has_message: bool = Field(alias="friendHasMessage")
    user: str | None = None
    user_has_message: bool | None = Field(alias="userHasMessage")


class ImageResponse(BaseModel):
    image: str
