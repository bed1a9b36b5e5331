# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""HTTP API accepting activation updates.

    GET|POST /?name=<object>&active=<bool>&value=<int64>

An empty or missing name updates the global default. Unparseable active or
value parameters are rejected with 400. Updates for objects without an open
stream are discarded; the response still carries 200 and reports
"discarded" in its body.
"""

from typing import Optional

from fastapi import FastAPI, HTTPException, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from manual_scaler.scaler.exceptions import InvalidArgumentError
from manual_scaler.scaler.ingestion import EventIngestor
from manual_scaler.scaler.metrics import ScalerPrometheusMetrics


def create_app(
    ingestor: EventIngestor,
    metrics: Optional[ScalerPrometheusMetrics] = None,
) -> FastAPI:
    """Build the FastAPI application serving the event submission endpoint."""
    app = FastAPI(title="Manual Scaler API")
    app.state.ingestor = ingestor
    app.state.metrics = metrics

    # Sync handler: runs in the worker thread pool, one request per thread.
    @app.api_route("/", methods=["GET", "POST"])
    def submit_event(
        name: str = "",
        active: Optional[str] = None,
        value: Optional[str] = None,
    ):
        try:
            outcome = ingestor.submit(name, active, value)
        except InvalidArgumentError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return {
            "status": outcome.value,
            "name": name,
            "active": active,
            "value": value,
        }

    @app.get("/health")
    def health():
        store = ingestor.store
        return {
            "status": "healthy",
            "registered_objects": store.registered_objects(),
        }

    @app.get("/metrics")
    def prometheus_metrics():
        if metrics is None:
            raise HTTPException(status_code=404, detail="Metrics are disabled")
        return Response(
            content=generate_latest(metrics.registry), media_type=CONTENT_TYPE_LATEST
        )

    return app
