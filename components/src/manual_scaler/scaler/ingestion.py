# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Validation of inbound update events before they reach the status store."""

import logging
import re
from typing import Optional

from manual_scaler.scaler.exceptions import InvalidArgumentError
from manual_scaler.scaler.metrics import ScalerPrometheusMetrics
from manual_scaler.scaler.status_store import ApplyOutcome, StatusStore, UpdateEvent

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_TRUE_LITERALS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_LITERALS = frozenset({"0", "f", "F", "FALSE", "false", "False"})
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_bool(value: Optional[str]) -> bool:
    """Parse a boolean literal such as "true", "F" or "1".

    Raises:
        ValueError: If the text is not a recognised boolean literal
    """
    if value in _TRUE_LITERALS:
        return True
    if value in _FALSE_LITERALS:
        return False
    raise ValueError(f"{value!r} is not a boolean")


def parse_int64(value: Optional[str]) -> int:
    """Parse a base-10 signed 64-bit integer.

    Raises:
        ValueError: If the text is not an integer or is out of range
    """
    if value is None or not _INT_PATTERN.fullmatch(value):
        raise ValueError(f"{value!r} is not a base-10 integer")
    number = int(value)
    if not INT64_MIN <= number <= INT64_MAX:
        raise ValueError(f"{value!r} is out of the 64-bit integer range")
    return number


class EventIngestor:
    """Turns loosely-typed submissions into update events and applies them.

    Submission is synchronous: once submit() returns, the state transition
    has been applied to the store (or the event has been discarded).
    """

    def __init__(
        self,
        store: StatusStore,
        metrics: Optional[ScalerPrometheusMetrics] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.metrics = metrics
        self._logger = logger or logging.getLogger(__name__)

    def submit(
        self, name: Optional[str], active: Optional[str], value: Optional[str]
    ) -> ApplyOutcome:
        """Validate and apply an update.

        Args:
            name: Scaled object name; empty or None updates the global default
            active: Boolean text
            value: Metric value text

        Raises:
            InvalidArgumentError: If active or value cannot be parsed
        """
        event = UpdateEvent(
            object_name=name or "",
            active=self._parse("active", active, parse_bool),
            metric_value=self._parse("value", value, parse_int64),
        )
        outcome = self.store.apply_event(event)
        if self.metrics is not None:
            self.metrics.events_total.labels(outcome=outcome.value).inc()

        self._logger.debug(
            f"Applied event name={event.object_name!r} active={event.active} "
            f"value={event.metric_value} outcome={outcome.value}"
        )
        return outcome

    def _parse(self, parameter: str, raw, parser):
        try:
            return parser(raw)
        except ValueError as e:
            self._logger.error(f"Invalid {parameter} parameter: {e}")
            if self.metrics is not None:
                self.metrics.invalid_events_total.labels(parameter=parameter).inc()
            raise InvalidArgumentError(parameter, raw or "", str(e)) from e
