# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Manual Scaler - KEDA external push scaler driven over HTTP.

An external caller reports "this workload should be active, with this
metric value" over HTTP; KEDA observes it through the external scaler gRPC
protocol.

Architecture:
- StatusStore holds a global default state plus one entry per scaled object
  with an open StreamIsActive call
- EventIngestor validates HTTP submissions and applies them to the store
- ExternalScalerServicer answers IsActive, GetMetricSpec and GetMetrics
- StreamingSession pushes activation changes to each open stream

Usage:
    python -m manual_scaler.scaler --config config.yaml
"""

__all__ = [
    "ApplyOutcome",
    "EventIngestor",
    "ExternalScalerServicer",
    "GlobalDefault",
    "StatusStore",
    "StreamingSession",
    "UpdateEvent",
]

from manual_scaler.scaler.ingestion import EventIngestor
from manual_scaler.scaler.query_handler import ExternalScalerServicer
from manual_scaler.scaler.status_store import (
    ApplyOutcome,
    GlobalDefault,
    StatusStore,
    UpdateEvent,
)
from manual_scaler.scaler.stream_session import StreamingSession
