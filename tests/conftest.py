# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Test Fixtures and Utilities

Provides in-memory remotes and destinations plus helpers for writing
package directories, shared by the installer test suites.
"""

import json
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from seed.models import RemoteConfig, RemotePackageInfo, RemoteQuery
from seed.remotes.base import Remote, matches_query


def write_package(
    directory: Path,
    name: str,
    version: str,
    dependencies: Optional[Dict[str, str]] = None,
    **extra
) -> Path:
    """Write a package directory holding package.json and return it."""
    directory.mkdir(parents=True, exist_ok=True)
    config = {"name": name, "version": version, **extra}
    if dependencies is not None:
        config["dependencies"] = dependencies
    (directory / "package.json").write_text(json.dumps(config))
    return directory


class FakeRemote(Remote):
    """
    In-memory remote.

    Listings are registered with add(); fetch writes the package into a
    staging directory under tmp_path. Every call is recorded.
    """

    def __init__(self, name: str, staging_root: Path, priority: int = 50):
        super().__init__(RemoteConfig(name=name, display_name=name, url=f"fake://{name}", priority=priority))
        self.staging_root = staging_root
        self.listings: List[RemotePackageInfo] = []
        self.list_calls: List[RemoteQuery] = []
        self.fetch_calls: List[RemotePackageInfo] = []
        self.cleanup_calls: List[Path] = []
        self.list_error: Optional[Exception] = None
        self.fetch_error: Optional[Exception] = None
        self.fetch_returns_none = False
        self.cleanup_error: Optional[Exception] = None
        self.ignore_filters = False

    def add(self, name: str, version: str, dependencies: Optional[Dict[str, str]] = None) -> RemotePackageInfo:
        info = RemotePackageInfo(name=name, version=version, dependencies=dependencies or {})
        self.listings.append(info)
        return info

    async def list(self, query: RemoteQuery) -> List[RemotePackageInfo]:
        self.list_calls.append(query)
        if self.list_error:
            raise self.list_error
        if self.ignore_filters:
            return [info for info in self.listings if info.name == query.name]
        return [info for info in self.listings if matches_query(info, query)]

    async def fetch(self, info: RemotePackageInfo) -> Optional[Path]:
        self.fetch_calls.append(info)
        if self.fetch_error:
            raise self.fetch_error
        if self.fetch_returns_none:
            return None
        target = self.staging_root / f"{self.name}-{info.name}-{info.version}"
        return write_package(target, info.name, info.version, dict(info.dependencies))

    async def cleanup(self, path: Path) -> None:
        self.cleanup_calls.append(Path(path))
        if self.cleanup_error:
            raise self.cleanup_error

    def fetched(self, name: str) -> List[str]:
        return [info.version for info in self.fetch_calls if info.name == name]


class FakeDestination:
    """Destination that records installed packages"""

    accepts_installs = True

    def __init__(self):
        self.installed = []
        self.error: Optional[Exception] = None

    async def install(self, package) -> None:
        if self.error:
            raise self.error
        self.installed.append((package.name, package.version))

    def count(self, name: str) -> int:
        return sum(1 for installed_name, _ in self.installed if installed_name == name)


class ReadOnlyDestination:
    """Destination that refuses installs"""

    accepts_installs = False

    async def install(self, package) -> None:
        raise AssertionError("install must not be called")


@pytest.fixture
def staging_root(tmp_path):
    root = tmp_path / "staging"
    root.mkdir()
    return root


@pytest.fixture
def destination():
    return FakeDestination()


@pytest.fixture
def remote(staging_root):
    return FakeRemote("primary", staging_root)
