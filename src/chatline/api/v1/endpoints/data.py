"""Profile record endpoints: CRUD, message append and read receipts."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, File, Query, UploadFile, status

from chatline.api.v1.dependencies import (
    ImageStorageDep,
    LedgerDep,
    ProfileStoreDep,
    ReceiptsDep,
)
from chatline.core.exceptions import ChatlineError
from chatline.schemas.profile import (
    AppendResponse,
    ImageResponse,
    MarkSeenRequest,
    MessageCreate,
    MessageStatus,
    ProfileCreate,
    ProfileRecord,
    SingleSeenRequest,
)

router = APIRouter(prefix="/data", tags=["data"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ProfileRecord)
async def create_profile(payload: ProfileCreate, store: ProfileStoreDep) -> ProfileRecord:
    """Create a profile record; the nickname must be unused."""
    profile = store.create(nickname=payload.nickname, image=payload.image, email=payload.email)
    return ProfileRecord.model_validate(profile)


@router.get("", response_model=list[ProfileRecord])
async def list_profiles(store: ProfileStoreDep) -> list[ProfileRecord]:
    """Return every profile with its embedded message log."""
    return [ProfileRecord.model_validate(profile) for profile in store.list_all()]


@router.get("/{profile_id}", response_model=ProfileRecord)
async def get_profile(profile_id: str, store: ProfileStoreDep) -> ProfileRecord:
    return ProfileRecord.model_validate(store.get(profile_id))


@router.patch("/{profile_id}/messages", response_model=AppendResponse)
async def append_message(
    profile_id: str,
    payload: MessageCreate,
    ledger: LedgerDep,
) -> AppendResponse:
    """Append a message to this profile's log and to the counterpart's log.

    Retrying with the same ``_id`` never duplicates a message in either log.
    """
    result = await ledger.append_message(
        profile_id,
        sender=payload.user,
        recipient=payload.to_user,
        content=payload.content,
        message_id=payload.message_id,
        timestamp=payload.timestamp,
    )
    return AppendResponse(
        friend_data=ProfileRecord.model_validate(result.friend_data),
        user_data=(
            ProfileRecord.model_validate(result.user_data) if result.user_data else None
        ),
    )


@router.get("/{profile_id}/messages/{message_id}/status", response_model=MessageStatus)
async def get_message_status(
    profile_id: str,
    message_id: str,
    ledger: LedgerDep,
    user: Annotated[str | None, Query(description="Counterpart nickname to check")] = None,
) -> MessageStatus:
    """Report which logs hold a message so a client can re-issue a partial append."""
    return MessageStatus(**ledger.message_status(profile_id, message_id, user))


@router.patch("/{profile_id}/markAsSeen", response_model=ProfileRecord)
async def mark_as_seen(
    profile_id: str,
    payload: MarkSeenRequest,
    receipts: ReceiptsDep,
) -> ProfileRecord:
    """Mark every message exchanged with ``user`` in this log as seen."""
    profile = await receipts.mark_seen(profile_id, payload.user)
    return ProfileRecord.model_validate(profile)


@router.patch("/{profile_id}/messages/seen", response_model=ProfileRecord)
async def mark_message_seen(
    profile_id: str,
    payload: SingleSeenRequest,
    receipts: ReceiptsDep,
) -> ProfileRecord:
    profile = await receipts.mark_single_seen(profile_id, payload.message_id)
    return ProfileRecord.model_validate(profile)


@router.patch("/{profile_id}/updateImage", response_model=ImageResponse)
async def update_image(
    profile_id: str,
    store: ProfileStoreDep,
    images: ImageStorageDep,
    image: Annotated[UploadFile, File(description="Replacement profile image")],
) -> ImageResponse:
    """Store a new image for the profile and delete the previous file."""
    store.get(profile_id)
    new_path = await images.save(image)
    try:
        _, previous = store.update_image(profile_id, new_path)
    except ChatlineError:
        images.delete(new_path)
        raise
    if previous and previous != new_path:
        images.delete(previous)
    return ImageResponse(image=new_path)


@router.delete("/{profile_id}", response_model=ProfileRecord)
async def delete_profile(
    profile_id: str,
    store: ProfileStoreDep,
    images: ImageStorageDep,
) -> ProfileRecord:
    """Delete a profile and, best effort, its stored image file.

    Copies of its messages in other profiles' logs are kept.
    """
    deleted = store.delete(profile_id)
    images.delete(deleted.image)
    return deleted
