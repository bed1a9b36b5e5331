# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Helpers for CLI flags that can also be set through environment variables."""

import os
from typing import Any, Callable, Optional, TypeVar, Union

T = TypeVar("T")


def env_or_default(
    env_var: str,
    default: T,
    value_type: Optional[Union[type, Callable[..., Any]]] = None,
) -> T:
    """
    Get value from environment variable or return default.

    Args:
        env_var: Environment variable name (e.g., "MANUAL_SCALER_CONFIG")
        default: Default value if env var not set
        value_type: Conversion applied to the env value. If None, the type
        is taken from type(default); with default=None the raw string is used.

    Returns:
        Environment variable value (type-converted) or default
    """
    value = os.environ.get(env_var)
    if value is None:
        return default

    if value_type is None and default is None:
        return value  # type: ignore[return-value]

    target_type = value_type if value_type is not None else type(default)
    if target_type is bool:
        return value.lower() in ("true", "1", "yes", "on")  # type: ignore
    return target_type(value)  # type: ignore


def add_argument(
    parser,
    *flags: str,
    env_var: str,
    default: Any,
    help: str,
    arg_type: Optional[Union[type, Callable[..., Any]]] = str,
    **kwargs: Any,
) -> None:
    """
    Add a CLI argument whose default can be overridden by an env var.

    The help message is suffixed with the env var name and the default.

    Args:
        parser: ArgumentParser or argument group
        flags: Option strings, long form first (e.g. "--log-level", "-v")
        env_var: Environment variable name
        default: Default value when neither flag nor env var is set
        help: Help text
        arg_type: Type for the argument (default: str)
    """
    kwargs.update(
        default=env_or_default(env_var, default, value_type=arg_type),
        help=f"{help}\nenv var: {env_var} | default: {default}",
    )
    if arg_type is not None:
        kwargs["type"] = arg_type
    parser.add_argument(*flags, **kwargs)
