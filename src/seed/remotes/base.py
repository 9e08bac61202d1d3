# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Remote interface

A remote lists package candidates, fetches an artifact into a local
staging directory, and cleans that directory up once the package has
been installed.
"""

import logging
import shutil
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Set

from seed import semver
from seed.asyncutil import asyncify
from seed.core.errors import CleanupFailureError, InvalidVersionError
from seed.models import RemoteConfig, RemotePackageInfo, RemoteQuery

logger = logging.getLogger(__name__)


class Remote(ABC):
    """Base class for package remotes"""

    def __init__(self, config: RemoteConfig, staging_dir: Optional[Path] = None):
        """
        Initialize remote.

        Args:
            config: Remote configuration
            staging_dir: Parent directory for staged artifacts (system temp if None)
        """
        self.config = config
        self.staging_dir = staging_dir
        self._staging_dirs: Set[Path] = set()

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def url(self) -> str:
        return self.config.url

    @abstractmethod
    async def list(self, query: RemoteQuery) -> List[RemotePackageInfo]:
        """Return candidates matching the query (possibly empty)."""

    @abstractmethod
    async def fetch(self, info: RemotePackageInfo) -> Optional[Path]:
        """Stage the artifact described by info and return its local directory."""

    async def cleanup(self, path: Path) -> None:
        """
        Remove a directory staged by fetch.

        Only directories created by this remote's fetch are removed.

        Raises:
            CleanupFailureError: If path was not staged here or cannot be removed
        """
        staging = self._staging_dir_of(Path(path))
        if staging is None:
            raise CleanupFailureError(f"{path} was not staged by {self.name}", path=str(path))
        try:
            await _remove_tree(staging)
        except OSError as e:
            raise CleanupFailureError(f"Could not clean up {path}: {e}", path=str(path))
        self._staging_dirs.discard(staging)
        logger.debug(f"Removed staged artifact {path}")

    async def _discard_staging_dir(self, staging: Path) -> None:
        """Remove the staging directory of a fetch that did not complete."""
        try:
            await _remove_tree(staging)
        except OSError as e:
            logger.warning(f"Could not remove staging directory {staging}: {e}")
        self._staging_dirs.discard(staging.resolve())

    def _new_staging_dir(self, info: RemotePackageInfo) -> Path:
        if self.staging_dir:
            self.staging_dir.mkdir(parents=True, exist_ok=True)
        prefix = f"seed-{info.name}-{info.version}-"
        staging = Path(tempfile.mkdtemp(prefix=prefix, dir=self.staging_dir))
        self._staging_dirs.add(staging.resolve())
        return staging

    def _staging_dir_of(self, path: Path) -> Optional[Path]:
        resolved = path.resolve()
        for candidate in (resolved, *resolved.parents):
            if candidate in self._staging_dirs:
                return candidate
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r}, {self.url!r})"


def matches_query(info: RemotePackageInfo, query: RemoteQuery) -> bool:
    """Apply a query's name and version filters to a listing."""
    if info.name != query.name:
        return False
    if not query.version:
        return True
    if query.exact:
        try:
            return semver.normalize(info.version) == semver.normalize(query.version)
        except InvalidVersionError:
            return info.version == query.version
    return semver.compatible(query.version, info.version)


@asyncify
def _remove_tree(path: Path) -> None:
    if path.exists():
        shutil.rmtree(path)
