# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for event parsing and ingestion."""

import pytest

from manual_scaler.scaler.exceptions import InvalidArgumentError
from manual_scaler.scaler.ingestion import EventIngestor, parse_bool, parse_int64
from manual_scaler.scaler.metrics import ScalerPrometheusMetrics
from manual_scaler.scaler.status_store import ApplyOutcome, GlobalDefault, StatusStore

pytestmark = [
    pytest.mark.pre_merge,
    pytest.mark.unit,
    pytest.mark.scaler,
]


@pytest.mark.parametrize("text", ["1", "t", "T", "TRUE", "true", "True"])
def test_parse_bool_true(text):
    assert parse_bool(text) is True


@pytest.mark.parametrize("text", ["0", "f", "F", "FALSE", "false", "False"])
def test_parse_bool_false(text):
    assert parse_bool(text) is False


@pytest.mark.parametrize("text", [None, "", "yes", "on", "tRuE", " true"])
def test_parse_bool_rejects(text):
    with pytest.raises(ValueError):
        parse_bool(text)


def test_parse_int64_accepts_signed_and_bounds():
    assert parse_int64("42") == 42
    assert parse_int64("-7") == -7
    assert parse_int64("+3") == 3
    assert parse_int64("9223372036854775807") == 2**63 - 1
    assert parse_int64("-9223372036854775808") == -(2**63)


@pytest.mark.parametrize(
    "text", [None, "", "1.5", "0x10", "1_000", " 5", "abc", "9223372036854775808"]
)
def test_parse_int64_rejects(text):
    with pytest.raises(ValueError):
        parse_int64(text)


@pytest.fixture
def store():
    return StatusStore(GlobalDefault(metric_name="manual"))


def test_submit_global_update(store):
    ingestor = EventIngestor(store)

    outcome = ingestor.submit("", "true", "5")

    assert outcome == ApplyOutcome.GLOBAL
    assert store.get_status("anything") == (True, 5)


def test_submit_none_name_targets_default(store):
    ingestor = EventIngestor(store)

    assert ingestor.submit(None, "1", "2") == ApplyOutcome.GLOBAL


def test_submit_object_update(store):
    ingestor = EventIngestor(store)
    store.register_object("job-1")

    assert ingestor.submit("job-1", "true", "3") == ApplyOutcome.OBJECT
    assert store.get_status("job-1") == (True, 3)


def test_submit_unregistered_object_is_discarded(store):
    ingestor = EventIngestor(store)

    assert ingestor.submit("ghost", "true", "3") == ApplyOutcome.DISCARDED
    assert store.get_status("ghost") == (False, 0)


def test_invalid_active_does_not_mutate(store):
    metrics = ScalerPrometheusMetrics()
    ingestor = EventIngestor(store, metrics=metrics)

    with pytest.raises(InvalidArgumentError) as exc_info:
        ingestor.submit("", "maybe", "5")

    assert exc_info.value.parameter == "active"
    assert exc_info.value.raw_value == "maybe"
    assert "Invalid active parameter" in str(exc_info.value)
    assert store.get_status("x") == (False, 0)
    assert (
        metrics.registry.get_sample_value(
            "manual_scaler_invalid_events_total", {"parameter": "active"}
        )
        == 1
    )


def test_invalid_value_does_not_mutate(store):
    ingestor = EventIngestor(store)

    with pytest.raises(InvalidArgumentError) as exc_info:
        ingestor.submit("", "true", None)

    assert exc_info.value.parameter == "value"
    assert isinstance(exc_info.value, ValueError)
    assert store.get_status("x") == (False, 0)


def test_outcomes_are_counted(store):
    metrics = ScalerPrometheusMetrics()
    ingestor = EventIngestor(store, metrics=metrics)

    ingestor.submit("", "true", "1")
    ingestor.submit("ghost", "true", "1")
    ingestor.submit("ghost", "false", "1")

    sample = metrics.registry.get_sample_value
    assert sample("manual_scaler_events_total", {"outcome": "global"}) == 1
    assert sample("manual_scaler_events_total", {"outcome": "discarded"}) == 2
