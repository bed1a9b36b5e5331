# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Exception hierarchy for the manual scaler."""


class ManualScalerError(Exception):
    """Base exception for all manual scaler errors."""


class ConfigError(ManualScalerError):
    """The configuration file is missing, unreadable or invalid."""


class InvalidArgumentError(ManualScalerError, ValueError):
    """An inbound event parameter could not be parsed.

    Attributes:
        parameter: Name of the offending query parameter ("active" or "value")
        raw_value: The text that failed to parse
    """

    def __init__(self, parameter: str, raw_value: str, reason: str):
        self.parameter = parameter
        self.raw_value = raw_value
        self.reason = reason
        super().__init__(f"Invalid {parameter} parameter: {reason}")


class ServerStartupError(ManualScalerError):
    """A server could not be started (e.g. the port is already bound)."""
