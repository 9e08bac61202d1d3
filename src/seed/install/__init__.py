# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""Install pipeline: descriptor cache, resolver, preparer and the session context."""

from .command import run_install, validate_request
from .context import InstallContext, is_path
from .descriptors import DescriptorCache, PackageDescriptor
from .preparer import Preparer
from .resolver import Resolver

__all__ = [
    "run_install",
    "validate_request",
    "InstallContext",
    "is_path",
    "DescriptorCache",
    "PackageDescriptor",
    "Preparer",
    "Resolver",
]
