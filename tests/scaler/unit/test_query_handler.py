# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for the ExternalScaler point-in-time queries."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import grpc
import pytest

from manual_scaler.scaler import protocol
from manual_scaler.scaler.protocol import externalscaler_pb2
from manual_scaler.scaler.query_handler import ExternalScalerServicer
from manual_scaler.scaler.status_store import GlobalDefault, StatusStore, UpdateEvent

pytestmark = [
    pytest.mark.pre_merge,
    pytest.mark.unit,
    pytest.mark.scaler,
]


@pytest.fixture
def store():
    return StatusStore(
        GlobalDefault(metric_name="queue", active=False, target_size=10, metric_value=0)
    )


@pytest.fixture
def servicer(store):
    return ExternalScalerServicer(store)


@pytest.mark.asyncio
async def test_is_active_falls_back_to_default(store, servicer):
    response = await servicer.IsActive(externalscaler_pb2.ScaledObjectRef(name="unknown"), None)
    assert response.result is False

    store.apply_event(UpdateEvent(object_name="", active=True, metric_value=1))
    response = await servicer.IsActive(externalscaler_pb2.ScaledObjectRef(name="unknown"), None)
    assert response.result is True


@pytest.mark.asyncio
async def test_is_active_uses_object_entry(store, servicer):
    store.register_object("job-1")
    store.apply_event(UpdateEvent(object_name="job-1", active=True, metric_value=1))

    on = await servicer.IsActive(externalscaler_pb2.ScaledObjectRef(name="job-1"), None)
    off = await servicer.IsActive(externalscaler_pb2.ScaledObjectRef(name="job-2"), None)

    assert on.result is True
    assert off.result is False


@pytest.mark.asyncio
async def test_get_metric_spec_returns_configured_values(store, servicer):
    store.register_object("job-1")

    response = await servicer.GetMetricSpec(externalscaler_pb2.ScaledObjectRef(name="job-1"), None)

    assert len(response.metricSpecs) == 1
    assert response.metricSpecs[0].metricName == "queue"
    assert response.metricSpecs[0].targetSize == 10


@pytest.mark.asyncio
async def test_get_metrics_returns_object_value(store, servicer):
    store.register_object("job-1")
    store.apply_event(UpdateEvent(object_name="job-1", active=True, metric_value=42))
    store.apply_event(UpdateEvent(object_name="", active=True, metric_value=5))

    request = externalscaler_pb2.GetMetricsRequest(
        scaledObjectRef=externalscaler_pb2.ScaledObjectRef(name="job-1"), metricName="queue"
    )
    response = await servicer.GetMetrics(request, None)
    assert response.metricValues[0].metricName == "queue"
    assert response.metricValues[0].metricValue == 42

    request = externalscaler_pb2.GetMetricsRequest(
        scaledObjectRef=externalscaler_pb2.ScaledObjectRef(name="other"), metricName="queue"
    )
    response = await servicer.GetMetrics(request, None)
    assert response.metricValues[0].metricValue == 5


@pytest.mark.asyncio
async def test_stream_is_active_writes_to_context(store, servicer):
    context = MagicMock()
    context.write = AsyncMock()

    task = asyncio.create_task(
        servicer.StreamIsActive(externalscaler_pb2.ScaledObjectRef(name="job-1"), context)
    )
    for _ in range(100):
        if store.registered_objects():
            break
        await asyncio.sleep(0.005)
    assert store.registered_objects() == ["job-1"]

    store.apply_event(UpdateEvent(object_name="job-1", active=True, metric_value=1))
    for _ in range(100):
        if context.write.await_count:
            break
        await asyncio.sleep(0.005)

    context.write.assert_awaited_once_with(externalscaler_pb2.IsActiveResponse(result=True))

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert store.registered_objects() == []


@pytest.mark.asyncio
async def test_stream_is_active_rejects_empty_name(store, servicer):
    context = MagicMock()
    context.abort = AsyncMock()
    context.write = AsyncMock()

    await servicer.StreamIsActive(externalscaler_pb2.ScaledObjectRef(name=""), context)

    context.abort.assert_awaited_once()
    assert context.abort.await_args.args[0] == grpc.StatusCode.INVALID_ARGUMENT
    context.write.assert_not_awaited()
    assert store.registered_objects() == []

    # Global events keep reaching IsActive("") through the default.
    store.apply_event(UpdateEvent(object_name="", active=True, metric_value=5))
    assert store.get_status("") == (True, 5)


def test_protocol_uses_keda_wire_format():
    """Test the generated schema uses KEDA's package and field numbers."""
    ref = externalscaler_pb2.ScaledObjectRef(
        name="job-1", namespace="default", scalerMetadata={"scalerAddress": "x:6000"}
    )
    decoded = externalscaler_pb2.ScaledObjectRef.FromString(ref.SerializeToString())

    assert decoded.name == "job-1"
    assert decoded.namespace == "default"
    assert dict(decoded.scalerMetadata) == {"scalerAddress": "x:6000"}
    # field 1 (result), varint true
    response = externalscaler_pb2.IsActiveResponse(result=True)
    assert response.SerializeToString() == b"\x08\x01"
    assert protocol.SERVICE_NAME == "externalscaler.ExternalScaler"
