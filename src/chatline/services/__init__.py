"""Business logic services for the Chatline application."""

from .accounts import AccountService
from .delivery import DeliveryBus
from .images import ImageStorage
from .ledger import MessageLedger
from .profile_store import ProfileStore
from .receipts import ReceiptTracker

__all__ = [
    "AccountService",
    "DeliveryBus",
    "ImageStorage",
    "MessageLedger",
    "ProfileStore",
    "ReceiptTracker",
]
