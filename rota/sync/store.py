"""Local mirror of the shared override map with optimistic write-through."""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, Mapping, Optional

from rota.domain.keys import is_valid_key
from rota.domain.models import ShiftOverride

from .transport import ShiftStoreTransport, Unsubscribe


class SubscriptionError(RuntimeError):
    """The live read channel could not be opened or broke."""


class WriteError(RuntimeError):
    """A full-document overwrite of the shared store failed."""


def parse_document(document: Optional[dict]) -> Dict[str, ShiftOverride]:
    """Convert a stored document into an override map, dropping malformed entries."""
    overrides: Dict[str, ShiftOverride] = {}
    for key, record in (document or {}).items():
        if not is_valid_key(key):
            print(f"[WARN] Ignoring malformed override key '{key}'")
            continue
        if record is not None and not isinstance(record, dict):
            print(f"[WARN] Ignoring non-record value for '{key}'")
            continue
        overrides[key] = ShiftOverride.from_dict(record)
    return overrides


def serialize_overrides(overrides: Mapping[str, ShiftOverride]) -> dict:
    """Convert an override map into the stored document shape."""
    return {key: record.to_dict() for key, record in overrides.items()}


class ScheduleStore:
    """
    Mirror of the shared document plus a `syncing` flag.

    Reads: every snapshot replaces the whole mirror (last snapshot wins).
    Writes: the mirror is replaced at once and the full document is written
    in the background. A failed write is logged and the mirror is kept as is.

    By default writes are not queued, so two writes in flight race each other
    and whichever reaches the store last wins. With `serialize_writes=True`
    they are sent one at a time in issue order.
    """

    def __init__(
        self,
        transport: ShiftStoreTransport,
        serialize_writes: bool = False,
        max_write_workers: int = 4,
    ):
        self.transport = transport
        self.serialize_writes = serialize_writes
        self._executor = ThreadPoolExecutor(
            max_workers=1 if serialize_writes else max_write_workers,
            thread_name_prefix="rota-write",
        )
        self._lock = threading.Lock()
        self._overrides: Dict[str, ShiftOverride] = {}
        self._unsubscribe: Optional[Unsubscribe] = None
        self.loading = True
        self.syncing = False
        self.last_error: Optional[Exception] = None
        self._loaded = threading.Event()

    def __repr__(self) -> str:
        return (f"<ScheduleStore(entries={len(self._overrides)}, loading={self.loading}, "
                f"syncing={self.syncing})>")

    @property
    def overrides(self) -> Dict[str, ShiftOverride]:
        """Current mirror. Treat as read-only; build a new map to edit."""
        with self._lock:
            return self._overrides

    def snapshot(self) -> Dict[str, ShiftOverride]:
        """Shallow copy of the current mirror."""
        with self._lock:
            return dict(self._overrides)

    def subscribe(self) -> None:
        """Open the live read channel. Loading ends at the first snapshot or error."""
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self.transport.subscribe(self._on_snapshot, self._on_subscription_error)

    def _on_snapshot(self, document: Optional[dict]) -> None:
        overrides = parse_document(document)
        with self._lock:
            self._overrides = overrides
            self.loading = False
        self._loaded.set()

    def _on_subscription_error(self, exc: Exception) -> None:
        error = SubscriptionError(f"Schedule subscription failed: {exc}")
        error.__cause__ = exc
        print(f"[ERROR] {error}")
        with self._lock:
            self._overrides = {}
            self.loading = False
            self.last_error = error
        self._loaded.set()

    def wait_until_loaded(self, timeout: Optional[float] = None) -> bool:
        """Block until the first snapshot (or a subscription failure). For CLI use."""
        return self._loaded.wait(timeout)

    def write(self, new_overrides: Mapping[str, ShiftOverride]) -> Future:
        """
        Replace the mirror with `new_overrides` and write it through.

        Returns:
            Future that settles when the store answers; it never raises, a
            failure is recorded on `last_error` instead
        """
        overrides = dict(new_overrides)
        document = serialize_overrides(overrides)
        with self._lock:
            self._overrides = overrides
            self.syncing = True
        return self._executor.submit(self._overwrite, document)

    def _overwrite(self, document: dict) -> bool:
        try:
            self.transport.overwrite(document)
        except Exception as e:
            error = WriteError(f"Error saving schedule: {e}")
            error.__cause__ = e
            print(f"[ERROR] {error}")
            with self._lock:
                self.last_error = error
            return False
        finally:
            with self._lock:
                self.syncing = False
        return True

    def close(self) -> None:
        """Stop the subscription and wait for writes in flight."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._executor.shutdown(wait=True)
