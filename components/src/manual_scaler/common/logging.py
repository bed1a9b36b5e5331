# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbosity: int = 0) -> logging.Logger:
    """Configure root logging once for the process.

    Args:
        verbosity: 0 logs at INFO, 1 and above at DEBUG

    Returns:
        The package logger components derive their loggers from
    """
    level = logging.DEBUG if verbosity >= 1 else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
    # grpc and asyncio debug output is noise at -v 1
    logging.getLogger("asyncio").setLevel(logging.INFO)
    logging.getLogger("grpc").setLevel(logging.INFO)
    return logging.getLogger("manual_scaler")
