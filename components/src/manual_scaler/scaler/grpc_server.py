# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""gRPC server exposing the KEDA ExternalScaler service, health and reflection."""

import logging
from typing import Optional

import grpc
from grpc_health.v1 import health, health_pb2, health_pb2_grpc
from grpc_reflection.v1alpha import reflection

from manual_scaler.scaler import protocol
from manual_scaler.scaler.exceptions import ServerStartupError
from manual_scaler.scaler.metrics import ScalerPrometheusMetrics
from manual_scaler.scaler.protocol import externalscaler_pb2_grpc
from manual_scaler.scaler.query_handler import ExternalScalerServicer
from manual_scaler.scaler.status_store import StatusStore


class ExternalScalerServer:
    """Owns the grpc.aio server serving KEDA's external push scaler API."""

    def __init__(
        self,
        store: StatusStore,
        host: str = "0.0.0.0",
        port: int = 6000,
        metrics: Optional[ScalerPrometheusMetrics] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.host = host
        self.port = port
        self._logger = logger or logging.getLogger(__name__)
        # Fail on an occupied port instead of sharing it with another process.
        self._server = grpc.aio.server(options=[("grpc.so_reuseport", 0)])
        self._health = health.aio.HealthServicer()

        self.servicer = ExternalScalerServicer(
            store, metrics=metrics, logger=self._logger
        )
        externalscaler_pb2_grpc.add_ExternalScalerServicer_to_server(
            self.servicer, self._server
        )
        health_pb2_grpc.add_HealthServicer_to_server(self._health, self._server)
        reflection.enable_server_reflection(
            (protocol.SERVICE_NAME, health.SERVICE_NAME, reflection.SERVICE_NAME),
            self._server,
        )

    async def start(self) -> int:
        """Bind and start serving.

        Returns:
            The bound port (useful when port 0 was requested)

        Raises:
            ServerStartupError: If the address cannot be bound
        """
        address = f"{self.host}:{self.port}"
        try:
            bound_port = self._server.add_insecure_port(address)
        except RuntimeError as e:
            raise ServerStartupError(
                f"Failed to bind gRPC server to {address}: {e}"
            ) from e
        if bound_port == 0:
            raise ServerStartupError(f"Failed to bind gRPC server to {address}")
        self.port = bound_port

        await self._server.start()
        serving = health_pb2.HealthCheckResponse.SERVING
        await self._health.set("", serving)
        await self._health.set(protocol.SERVICE_NAME, serving)
        self._logger.info(f"Starting KEDA external push scaler on port {bound_port}")
        return bound_port

    async def wait_for_termination(self) -> None:
        await self._server.wait_for_termination()

    async def stop(self, grace: Optional[float] = 5.0) -> None:
        """Stop serving; open streams are cancelled once the grace period ends."""
        await self._health.enter_graceful_shutdown()
        await self._server.stop(grace)
        self._logger.info("KEDA external push scaler stopped")
