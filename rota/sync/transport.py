"""Transports for the shared schedule document."""

from __future__ import annotations

import copy
import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

SnapshotCallback = Callable[[dict], None]
ErrorCallback = Callable[[Exception], None]
Unsubscribe = Callable[[], None]


class ShiftStoreTransport(ABC):
    """
    Access to the one shared document that holds every shift override.

    Implementations only ever replace the whole document; there is no
    field-level update.
    """

    @abstractmethod
    def subscribe(self, on_snapshot: SnapshotCallback, on_error: ErrorCallback) -> Unsubscribe:
        """
        Start delivering full-document snapshots.

        `on_snapshot` receives the whole document (an empty dict when it does
        not exist yet) for the initial value and after every change.
        `on_error` is called if the channel cannot be opened or breaks.

        Returns:
            Callable that stops delivery
        """

    @abstractmethod
    def overwrite(self, document: dict) -> None:
        """
        Replace the whole document. Blocks until the store answers.

        Raises:
            Exception: Whatever the underlying store raises on failure
        """


class FirestoreTransport(ShiftStoreTransport):
    """Shared document kept in Firestore at `collection/document`."""

    def __init__(self, collection: str = "rota", document: str = "shifts", client=None):
        from rota.domain.db import schedule_document

        self.doc_ref = schedule_document(collection, document, client=client)

    def __repr__(self) -> str:
        return f"<FirestoreTransport(path={self.doc_ref.path})>"

    def subscribe(self, on_snapshot: SnapshotCallback, on_error: ErrorCallback) -> Unsubscribe:
        def _on_change(doc_snapshots, changes, read_time):
            try:
                doc = doc_snapshots[0] if doc_snapshots else None
                on_snapshot((doc.to_dict() or {}) if doc is not None and doc.exists else {})
            except Exception as e:
                on_error(e)

        try:
            watch = self.doc_ref.on_snapshot(_on_change)
        except Exception as e:
            on_error(e)
            return lambda: None
        return watch.unsubscribe

    def overwrite(self, document: dict) -> None:
        self.doc_ref.set(document)


class MemoryTransport(ShiftStoreTransport):
    """
    Process-local document with push notifications.

    Used for offline runs and tests. Subscribers are notified on the thread
    that performed the overwrite.
    """

    def __init__(self, document: Optional[dict] = None):
        self._document: dict = copy.deepcopy(document or {})
        self._subscribers: List[SnapshotCallback] = []
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"<MemoryTransport(entries={len(self._document)})>"

    @property
    def document(self) -> dict:
        with self._lock:
            return copy.deepcopy(self._document)

    def subscribe(self, on_snapshot: SnapshotCallback, on_error: ErrorCallback) -> Unsubscribe:
        with self._lock:
            self._subscribers.append(on_snapshot)
            initial = copy.deepcopy(self._document)
        on_snapshot(initial)

        def _unsubscribe() -> None:
            with self._lock:
                if on_snapshot in self._subscribers:
                    self._subscribers.remove(on_snapshot)

        return _unsubscribe

    def overwrite(self, document: dict) -> None:
        with self._lock:
            self._document = copy.deepcopy(document)
            subscribers = list(self._subscribers)
            snapshot: Dict = self._document
        for callback in subscribers:
            callback(copy.deepcopy(snapshot))
