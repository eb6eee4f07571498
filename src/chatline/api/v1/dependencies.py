"""Shared API dependencies: sessions, services and the current account."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from starlette.requests import HTTPConnection

from chatline.core.security import decode_access_token
from chatline.core.settings import settings
from chatline.db.session import get_db
from chatline.models import Account
from chatline.services import (
    AccountService,
    DeliveryBus,
    ImageStorage,
    MessageLedger,
    ProfileStore,
    ReceiptTracker,
)

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_delivery_bus(connection: HTTPConnection) -> DeliveryBus:
    """Return the application's delivery bus."""
    bus: DeliveryBus | None = getattr(connection.app.state, "delivery_bus", None)
    if bus is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Realtime delivery is not running",
        )
    return bus


def get_image_storage(request: Request) -> ImageStorage:
    storage: ImageStorage | None = getattr(request.app.state, "image_storage", None)
    return storage or ImageStorage(settings.upload_dir)


BusDep = Annotated[DeliveryBus, Depends(get_delivery_bus)]
ImageStorageDep = Annotated[ImageStorage, Depends(get_image_storage)]


def get_profile_store(db: SessionDep) -> ProfileStore:
    return ProfileStore(db)


ProfileStoreDep = Annotated[ProfileStore, Depends(get_profile_store)]


def get_message_ledger(store: ProfileStoreDep, bus: BusDep) -> MessageLedger:
    return MessageLedger(store, bus)


def get_receipt_tracker(store: ProfileStoreDep, bus: BusDep) -> ReceiptTracker:
    return ReceiptTracker(store, bus)


def get_account_service(db: SessionDep) -> AccountService:
    return AccountService(db)


LedgerDep = Annotated[MessageLedger, Depends(get_message_ledger)]
ReceiptsDep = Annotated[ReceiptTracker, Depends(get_receipt_tracker)]
AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]


def get_current_account(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    accounts: AccountServiceDep,
) -> Account:
    """Get the authenticated account from a bearer JWT.

    Raises:
        HTTPException: If the token is invalid or the account no longer exists
    """
    subject = decode_access_token(credentials.credentials)
    if subject is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    account = accounts.get(subject)
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return account


# Type alias for current account dependency
CurrentAccountDep = Annotated[Account, Depends(get_current_account)]
