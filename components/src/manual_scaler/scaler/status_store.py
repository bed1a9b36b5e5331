# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""In-memory registry of per-object activation state.

The store is the single source of truth consulted by the external scaler
handlers. It holds:
- one global default state, seeded from configuration
- one entry per scaled object that currently has an open StreamIsActive call

Lookups for objects without an entry fall back to the global default, so
every query is answerable. Nothing is persisted; state lives for the
lifetime of the process.
"""

import asyncio
import itertools
import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple


class ApplyOutcome(str, Enum):
    """Where an update event ended up"""

    GLOBAL = "global"
    OBJECT = "object"
    DISCARDED = "discarded"


@dataclass
class GlobalDefault:
    """Fallback state used for objects without a dedicated stream."""

    metric_name: str
    active: bool = False
    target_size: int = 1
    metric_value: int = 0


@dataclass(frozen=True)
class UpdateEvent:
    """An activation update; an empty object name targets the global default."""

    object_name: str
    active: bool
    metric_value: int

    @property
    def is_global(self) -> bool:
        return self.object_name == ""


class NotificationSlot:
    """Single-slot notification channel between one writer and one reader.

    The slot holds at most one undelivered value. Writers never block: an
    offer into a full slot replaces the pending value, so a slow reader
    always wakes up to the most recent state (intermediate values are
    coalesced). The reader is an asyncio task; writers may live on any
    thread and wake the reader through its event loop.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._lock = threading.Lock()
        self._event = asyncio.Event()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._value = False
        self._pending = False
        self._logger = logger or logging.getLogger(__name__)

    @property
    def pending(self) -> bool:
        """True if a value is waiting to be consumed."""
        with self._lock:
            return self._pending

    def offer(self, value: bool) -> bool:
        """Publish a value without blocking.

        Returns:
            False if an undelivered value was overwritten, True otherwise
        """
        with self._lock:
            replaced = self._pending
            self._value = value
            self._pending = True
            loop = self._loop

        if loop is not None:
            self._wake(loop)
        return not replaced

    def _wake(self, loop: asyncio.AbstractEventLoop) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is loop:
            self._event.set()
            return
        try:
            loop.call_soon_threadsafe(self._event.set)
        except RuntimeError:
            # The reader's loop is closed, the value stays in the slot.
            self._logger.debug("Notification reader loop is closed")

    async def get(self) -> bool:
        """Wait for the next value and consume it. Single consumer only."""
        while True:
            with self._lock:
                if self._loop is None:
                    self._loop = asyncio.get_running_loop()
                if self._pending:
                    self._pending = False
                    self._event.clear()
                    return self._value
                self._event.clear()
            await self._event.wait()


@dataclass(frozen=True, eq=False)
class ObjectHandle:
    """Ownership token returned by register_object.

    Handles compare by identity, which lets a session remove only the entry
    it created.
    """

    name: str
    slot: NotificationSlot
    session_id: int


@dataclass
class _ObjectStatus:
    active: bool
    metric_value: int
    handle: ObjectHandle


class StatusStore:
    """Thread-safe activation registry.

    All access to the object map and the global default goes through a
    single lock. Notification offers are non-blocking, so holding the lock
    while offering never stalls a writer.
    """

    def __init__(self, default: GlobalDefault, logger: Optional[logging.Logger] = None):
        self._default = replace(default)
        self._objects: Dict[str, _ObjectStatus] = {}
        self._lock = threading.Lock()
        self._session_ids = itertools.count(1)
        self._logger = logger or logging.getLogger(__name__)

    def apply_event(self, event: UpdateEvent) -> ApplyOutcome:
        """Apply an update to the global default or to a registered object.

        Updates for objects without an open stream are logged and discarded;
        they are not buffered for a later registration.
        """
        if event.is_global:
            with self._lock:
                self._default.active = event.active
                self._default.metric_value = event.metric_value
            self._logger.debug(
                f"Updated global default: active={event.active} "
                f"metric_value={event.metric_value}"
            )
            return ApplyOutcome.GLOBAL

        with self._lock:
            status = self._objects.get(event.object_name)
            if status is not None:
                status.active = event.active
                status.metric_value = event.metric_value
                delivered = status.handle.slot.offer(event.active)

        if status is None:
            self._logger.error(
                f"Failed to update object status for '{event.object_name}': "
                "object is not registered in KEDA yet"
            )
            return ApplyOutcome.DISCARDED

        if not delivered:
            self._logger.debug(
                f"Coalesced notification for '{event.object_name}': "
                "stream has not consumed the previous value"
            )
        return ApplyOutcome.OBJECT

    def get_status(self, object_name: str) -> Tuple[bool, int]:
        """Return (active, metric_value) for an object, or the global default."""
        with self._lock:
            status = self._objects.get(object_name)
            if status is None:
                return self._default.active, self._default.metric_value
            return status.active, status.metric_value

    def register_object(self, object_name: str) -> ObjectHandle:
        """Create an entry for object_name seeded from the current global default.

        A second registration for the same name replaces the first entry;
        the previous owner keeps its handle but no longer receives updates.
        """
        handle = ObjectHandle(
            name=object_name,
            slot=NotificationSlot(logger=self._logger),
            session_id=next(self._session_ids),
        )
        with self._lock:
            previous = self._objects.get(object_name)
            self._objects[object_name] = _ObjectStatus(
                active=self._default.active,
                metric_value=self._default.metric_value,
                handle=handle,
            )

        if previous is not None:
            self._logger.warning(
                f"Object '{object_name}' re-registered by session {handle.session_id}; "
                f"session {previous.handle.session_id} will no longer receive updates"
            )
        return handle

    def deregister_object(
        self, object_name: str, handle: Optional[ObjectHandle] = None
    ) -> bool:
        """Remove the entry for object_name. Removing an absent key is a no-op.

        Args:
            object_name: Name of the scaled object
            handle: If given, the entry is removed only while it is still
                owned by this handle

        Returns:
            True if an entry was removed
        """
        with self._lock:
            status = self._objects.get(object_name)
            if status is None:
                return False
            if handle is not None and status.handle is not handle:
                self._logger.debug(
                    f"Keeping entry for '{object_name}': owned by session "
                    f"{status.handle.session_id}, not {handle.session_id}"
                )
                return False
            del self._objects[object_name]
        return True

    def global_default(self) -> GlobalDefault:
        """Snapshot of the global default state."""
        with self._lock:
            return replace(self._default)

    def registered_objects(self) -> List[str]:
        with self._lock:
            return sorted(self._objects)
