# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""
Manual Scaler - KEDA external push scaler driven over HTTP

Entry point for the manual scaler.

Usage:
    python -m manual_scaler.scaler --config config.yaml

    # Deactivate one scaled object that has an open stream
    curl "http://localhost:8080/?name=job-1&active=false&value=0"
"""

import asyncio
import sys
from typing import List, Optional

from manual_scaler.common.logging import configure_logging
from manual_scaler.scaler.argparse_config import apply_overrides, create_scaler_parser
from manual_scaler.scaler.config import load_config
from manual_scaler.scaler.exceptions import ManualScalerError
from manual_scaler.scaler.server import run


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_scaler_parser()
    args = parser.parse_args(argv)
    logger = configure_logging(args.log_level)

    try:
        config = apply_overrides(load_config(args.config), args)
    except (ManualScalerError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    try:
        asyncio.run(run(config, logger))
    except ManualScalerError as e:
        logger.error(f"Manual scaler failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
