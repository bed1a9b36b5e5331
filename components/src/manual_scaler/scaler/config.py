# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""YAML configuration for the manual scaler.

Example:

    grpcPort: 6000
    httpPort: 8080
    default:
      metricName: manual
      active: false
      targetSize: 1
      metricValue: 0
"""

import logging
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from manual_scaler.scaler.exceptions import ConfigError
from manual_scaler.scaler.ingestion import INT64_MAX, INT64_MIN
from manual_scaler.scaler.status_store import GlobalDefault

logger = logging.getLogger(__name__)


class DefaultStatusConfig(BaseModel):
    """Initial global default state"""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    metric_name: str = Field("manual", alias="metricName", min_length=1)
    active: bool = False
    target_size: int = Field(1, alias="targetSize", ge=INT64_MIN, le=INT64_MAX)
    metric_value: int = Field(0, alias="metricValue", ge=INT64_MIN, le=INT64_MAX)

    def to_global_default(self) -> GlobalDefault:
        return GlobalDefault(
            metric_name=self.metric_name,
            active=self.active,
            target_size=self.target_size,
            metric_value=self.metric_value,
        )


class ScalerConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    host: str = "0.0.0.0"
    grpc_port: int = Field(6000, alias="grpcPort", ge=0, le=65535)
    http_port: int = Field(8080, alias="httpPort", ge=0, le=65535)
    default: DefaultStatusConfig = Field(default_factory=DefaultStatusConfig)


def load_config(path: Optional[Union[str, Path]]) -> ScalerConfig:
    """Load and validate the scaler configuration.

    Args:
        path: Path to a YAML file, or None to use the built-in defaults

    Raises:
        ConfigError: If the file cannot be read, parsed or validated
    """
    if not path:
        logger.info("No config file given, using defaults")
        return ScalerConfig()

    logger.info(f"Loading config from {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"config: read: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"config: unmarshal: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"config: {path} must contain a mapping, got {type(data).__name__}"
        )

    try:
        return ScalerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"config: invalid: {e}") from e
