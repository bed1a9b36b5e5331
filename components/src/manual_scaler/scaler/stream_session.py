# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""State machine backing a single StreamIsActive call.

    START -> LISTENING -> EMITTING -> LISTENING ... -> TERMINATING

- START registers the object in the status store.
- LISTENING waits for the next notification (or for cancellation).
- EMITTING pushes the new activation value to the caller. A failed push
  ends the session; delivery is best-effort once the transport fails.
- TERMINATING deregisters the object. It is reached on cancellation or
  after a failed push, and is always the last state.
"""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Optional

from manual_scaler.scaler.metrics import ScalerPrometheusMetrics
from manual_scaler.scaler.status_store import ObjectHandle, StatusStore

SendFn = Callable[[bool], Awaitable[None]]


class SessionState(str, Enum):
    START = "start"
    LISTENING = "listening"
    EMITTING = "emitting"
    TERMINATING = "terminating"


class StreamingSession:
    """Relays activation changes of one object to one streaming caller.

    Cancellation is signalled by cancelling the task running run(); the
    session deregisters its entry before the cancellation propagates.
    """

    def __init__(
        self,
        store: StatusStore,
        object_name: str,
        metrics: Optional[ScalerPrometheusMetrics] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.object_name = object_name
        self.metrics = metrics
        self.state = SessionState.START
        self.handle: Optional[ObjectHandle] = None
        self.sent = 0
        self._logger = logger or logging.getLogger(__name__)

    async def run(self, send: SendFn) -> None:
        """Run the session until cancelled or until a push fails.

        Args:
            send: Coroutine function pushing one IsActive result to the caller
        """
        self.handle = self.store.register_object(self.object_name)
        if self.metrics is not None:
            self.metrics.open_streams.inc()
        self._logger.info(
            f"StreamIsActive started for '{self.object_name}' "
            f"(session {self.handle.session_id})"
        )

        try:
            while True:
                self.state = SessionState.LISTENING
                active = await self.handle.slot.get()

                self.state = SessionState.EMITTING
                self._logger.debug(
                    f"Sending IsActive response for '{self.object_name}': "
                    f"active={active}"
                )
                try:
                    await send(active)
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    self._logger.error(
                        "Failed to send IsActive response for "
                        f"'{self.object_name}': {e}"
                    )
                    if self.metrics is not None:
                        self.metrics.stream_send_failures_total.inc()
                    return
                self.sent += 1
                if self.metrics is not None:
                    self.metrics.stream_notifications_total.inc()
        except asyncio.CancelledError:
            self._logger.info(f"StreamIsActive call completed for '{self.object_name}'")
            raise
        finally:
            self._terminate()

    def _terminate(self) -> None:
        self.state = SessionState.TERMINATING
        self.store.deregister_object(self.object_name, self.handle)
        if self.metrics is not None:
            self.metrics.open_streams.dec()
