# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""Package remotes: directory and HTTP backends plus the registry that opens them."""

from .base import Remote, matches_query
from .directory import DirectoryRemote
from .http import HttpRemote
from .registry import RemoteConfigLoader, RemoteRegistry

__all__ = [
    "Remote",
    "matches_query",
    "DirectoryRemote",
    "HttpRemote",
    "RemoteConfigLoader",
    "RemoteRegistry",
]
