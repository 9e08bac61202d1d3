# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Core utilities and shared modules for the seed installer.

This package contains:
- config: Configuration management
- errors: Custom exceptions
- logging: Structured logging
"""

from seed.core.config import get_config, load_config, Config
from seed.core.errors import SeedError, NotFoundError, InvalidInputError
from seed.core.logging import get_logger, configure_logging

__all__ = [
    "get_config",
    "load_config",
    "Config",
    "SeedError",
    "NotFoundError",
    "InvalidInputError",
    "get_logger",
    "configure_logging",
]
