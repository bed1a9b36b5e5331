# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Gauge


class ScalerPrometheusMetrics:
    """Container for all manual scaler Prometheus metrics."""

    def __init__(
        self,
        prefix: str = "manual_scaler",
        registry: Optional[CollectorRegistry] = None,
    ):
        self.registry = registry if registry is not None else CollectorRegistry()

        # Event submission
        self.events_total = Counter(
            f"{prefix}_events_total",
            "Update events by outcome (global, object, discarded)",
            ["outcome"],
            registry=self.registry,
        )
        self.invalid_events_total = Counter(
            f"{prefix}_invalid_events_total",
            "Rejected update events by offending parameter",
            ["parameter"],
            registry=self.registry,
        )

        # Streaming
        self.open_streams = Gauge(
            f"{prefix}_open_streams",
            "Number of open StreamIsActive calls",
            registry=self.registry,
        )
        self.stream_notifications_total = Counter(
            f"{prefix}_stream_notifications_total",
            "IsActive responses pushed to streams",
            registry=self.registry,
        )
        self.stream_send_failures_total = Counter(
            f"{prefix}_stream_send_failures_total",
            "Streams terminated because a push failed",
            registry=self.registry,
        )
