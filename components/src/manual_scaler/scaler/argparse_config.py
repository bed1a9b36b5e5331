# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Argument parsing for the manual scaler."""

import argparse

from manual_scaler.common.configuration.utils import add_argument
from manual_scaler.scaler.config import ScalerConfig


def create_scaler_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for the manual scaler.

    Returns:
        argparse.ArgumentParser: Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="manual-scaler",
        description="Manual Scaler - KEDA external push scaler driven over HTTP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Serve with built-in defaults (gRPC :6000, HTTP :8080)
  python -m manual_scaler.scaler

  # Load ports and the initial default state from a file
  python -m manual_scaler.scaler --config /etc/manual-scaler/config.yaml -v 1

  # Activate every scaled object without a stream
  curl "http://localhost:8080/?active=true&value=5"
        """,
    )

    add_argument(
        parser,
        "--config",
        env_var="MANUAL_SCALER_CONFIG",
        default=None,
        help="Path to the config file",
    )
    add_argument(
        parser,
        "--log-level",
        "-v",
        env_var="MANUAL_SCALER_LOG_LEVEL",
        default=0,
        arg_type=int,
        dest="log_level",
        help="Log level for the manual scaler (0: info, 1+: debug)",
    )
    add_argument(
        parser,
        "--grpc-port",
        env_var="MANUAL_SCALER_GRPC_PORT",
        default=None,
        arg_type=int,
        help="Override the gRPC port from the config file",
    )
    add_argument(
        parser,
        "--http-port",
        env_var="MANUAL_SCALER_HTTP_PORT",
        default=None,
        arg_type=int,
        help="Override the HTTP API port from the config file",
    )
    return parser


def apply_overrides(config: ScalerConfig, args: argparse.Namespace) -> ScalerConfig:
    """Return a copy of config with CLI port overrides applied."""
    updates = {}
    for field_name in ("grpc_port", "http_port"):
        value = getattr(args, field_name, None)
        if value is None:
            continue
        if not 0 <= value <= 65535:
            raise ValueError(f"--{field_name.replace('_', '-')} must be 0-65535")
        updates[field_name] = value
    return config.model_copy(update=updates)
