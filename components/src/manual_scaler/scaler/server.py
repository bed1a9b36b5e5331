# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Process wiring: one status store shared by the HTTP API and the gRPC server."""

import asyncio
import logging
import signal
import socket
from typing import Optional

import uvicorn

from manual_scaler.scaler.config import ScalerConfig
from manual_scaler.scaler.exceptions import ServerStartupError
from manual_scaler.scaler.grpc_server import ExternalScalerServer
from manual_scaler.scaler.http_api import create_app
from manual_scaler.scaler.ingestion import EventIngestor
from manual_scaler.scaler.metrics import ScalerPrometheusMetrics
from manual_scaler.scaler.status_store import StatusStore

GRPC_SHUTDOWN_GRACE_SECONDS = 5.0


def bind_http_socket(host: str, port: int) -> socket.socket:
    """Bind the HTTP listening socket up front so a taken port fails startup.

    Raises:
        ServerStartupError: If the address cannot be bound
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError as e:
        sock.close()
        raise ServerStartupError(
            f"Failed to bind HTTP API server to {host}:{port}: {e}"
        ) from e
    sock.set_inheritable(True)
    return sock


async def _serve_http(server: uvicorn.Server, sock: socket.socket) -> None:
    # uvicorn reports startup failures with sys.exit()
    try:
        await server.serve(sockets=[sock])
    except SystemExit as e:
        raise ServerStartupError(
            f"HTTP API server failed to start (exit code {e.code})"
        ) from e


async def run(
    config: ScalerConfig,
    logger: Optional[logging.Logger] = None,
    stop: Optional[asyncio.Event] = None,
) -> None:
    """Serve HTTP and gRPC until stopped or either server exits.

    Args:
        config: Validated scaler configuration
        logger: Parent logger for all components
        stop: Event that ends serving when set; defaults to one set on
            SIGINT/SIGTERM

    Raises:
        ServerStartupError: If either server cannot bind or start
    """
    logger = logger or logging.getLogger("manual_scaler")
    logger.info(f"Starting manual scaler, config: {config.model_dump(by_alias=True)}")

    metrics = ScalerPrometheusMetrics()
    store = StatusStore(
        config.default.to_global_default(), logger=logger.getChild("store")
    )
    ingestor = EventIngestor(
        store, metrics=metrics, logger=logger.getChild("ingestion")
    )

    http_socket = bind_http_socket(config.host, config.http_port)
    grpc_server = ExternalScalerServer(
        store,
        host=config.host,
        port=config.grpc_port,
        metrics=metrics,
        logger=logger.getChild("scaler"),
    )
    try:
        await grpc_server.start()
    except ServerStartupError:
        http_socket.close()
        raise

    http_server = uvicorn.Server(
        uvicorn.Config(
            create_app(ingestor, metrics),
            host=config.host,
            port=config.http_port,
            log_config=None,
        )
    )
    logger.info(f"Starting HTTP API server on port {http_socket.getsockname()[1]}")

    loop = asyncio.get_running_loop()
    handled_signals = []
    if stop is None:
        stop = asyncio.Event()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, stop.set)
            except NotImplementedError:
                # add_signal_handler is unavailable on Windows event loops
                continue
            handled_signals.append(sig)

    http_task = asyncio.create_task(
        _serve_http(http_server, http_socket), name="http-api"
    )
    grpc_task = asyncio.create_task(
        grpc_server.wait_for_termination(), name="grpc-scaler"
    )
    stop_task = asyncio.create_task(stop.wait(), name="stop-signal")

    try:
        done, _ = await asyncio.wait(
            {http_task, grpc_task, stop_task}, return_when=asyncio.FIRST_COMPLETED
        )
        if stop_task in done:
            logger.info("Received shutdown signal")
    finally:
        http_server.should_exit = True
        await grpc_server.stop(GRPC_SHUTDOWN_GRACE_SECONDS)
        stop_task.cancel()
        results = await asyncio.gather(
            http_task, grpc_task, stop_task, return_exceptions=True
        )
        http_socket.close()
        for sig in handled_signals:
            loop.remove_signal_handler(sig)

    for task, result in zip((http_task, grpc_task), results):
        if isinstance(result, Exception):
            logger.error(f"{task.get_name()} exited with error: {result}")
            raise result
    logger.info("Manual scaler stopped")
