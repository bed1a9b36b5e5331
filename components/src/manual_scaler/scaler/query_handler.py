# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""ExternalScaler gRPC service backed by the status store."""

import logging
from typing import Optional

import grpc

from manual_scaler.scaler.metrics import ScalerPrometheusMetrics
from manual_scaler.scaler.protocol import externalscaler_pb2, externalscaler_pb2_grpc
from manual_scaler.scaler.status_store import StatusStore
from manual_scaler.scaler.stream_session import StreamingSession


class ExternalScalerServicer(externalscaler_pb2_grpc.ExternalScalerServicer):
    """Answers KEDA's activation and metric queries.

    Point-in-time queries read the store synchronously and never fail: an
    object without an open stream is answered from the global default.
    The metric name and target size always come from the global default.
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

    async def IsActive(self, request, context):
        self._logger.debug(f"IsActive called for '{request.name}'")
        active, _ = self.store.get_status(request.name)
        return externalscaler_pb2.IsActiveResponse(result=active)

    async def StreamIsActive(self, request, context):
        # The empty name addresses the global default; it has no per-object entry.
        if not request.name:
            self._logger.warning("Rejected StreamIsActive call without an object name")
            await context.abort(
                grpc.StatusCode.INVALID_ARGUMENT,
                "StreamIsActive requires a scaled object name",
            )
            return

        session = StreamingSession(
            self.store,
            request.name,
            metrics=self.metrics,
            logger=self._logger.getChild("stream"),
        )

        async def send(active: bool) -> None:
            await context.write(externalscaler_pb2.IsActiveResponse(result=active))

        await session.run(send)

    async def GetMetricSpec(self, request, context):
        self._logger.debug(f"GetMetricSpec called for '{request.name}'")
        default = self.store.global_default()
        return externalscaler_pb2.GetMetricSpecResponse(
            metricSpecs=[
                externalscaler_pb2.MetricSpec(
                    metricName=default.metric_name, targetSize=default.target_size
                )
            ]
        )

    async def GetMetrics(self, request, context):
        name = request.scaledObjectRef.name
        self._logger.debug(
            f"GetMetrics called for '{name}' (metric '{request.metricName}')"
        )
        _, value = self.store.get_status(name)
        return externalscaler_pb2.GetMetricsResponse(
            metricValues=[
                externalscaler_pb2.MetricValue(
                    metricName=self.store.global_default().metric_name,
                    metricValue=value,
                )
            ]
        )
