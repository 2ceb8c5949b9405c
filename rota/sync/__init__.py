"""Synchronization with the shared schedule document."""

from .store import ScheduleStore, SubscriptionError, WriteError
from .transport import FirestoreTransport, MemoryTransport, ShiftStoreTransport

__all__ = [
    "ScheduleStore",
    "SubscriptionError",
    "WriteError",
    "ShiftStoreTransport",
    "FirestoreTransport",
    "MemoryTransport",
]
