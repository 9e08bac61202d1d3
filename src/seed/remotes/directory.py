# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Directory Remote

Single responsibility: Serve packages from a local file:// repository
(like a local YUM repo). Every package is a directory holding
package.json, either directly under the root (<root>/<pkg>) or one level
deeper for multiple versions (<root>/<name>/<version>).
"""

import json
import logging
import shutil
from pathlib import Path
from typing import List, Optional

from seed.asyncutil import asyncify
from seed.models import RemoteConfig, RemotePackageInfo, RemoteQuery
from seed.package import PACKAGE_FILE

from .base import Remote, matches_query

logger = logging.getLogger(__name__)


def directory_from_url(url: str, base_dir: Optional[Path] = None) -> Path:
    """
    Extract the repository directory from a file:// URL.

    Relative paths (file://./repo, file://../repo) resolve from base_dir.
    """
    local_path = url[len("file://"):] if url.startswith("file://") else url
    if local_path.startswith("./") or local_path.startswith("../"):
        return ((base_dir or Path.cwd()) / local_path).resolve()
    return Path(local_path)


class DirectoryRemote(Remote):
    """Remote backed by a local directory tree"""

    def __init__(
        self,
        config: RemoteConfig,
        staging_dir: Optional[Path] = None,
        base_dir: Optional[Path] = None
    ):
        super().__init__(config, staging_dir)
        self.directory = directory_from_url(config.url, base_dir)

    async def list(self, query: RemoteQuery) -> List[RemotePackageInfo]:
        packages = await self._scan()
        return [info for info in packages if matches_query(info, query)]

    async def fetch(self, info: RemotePackageInfo) -> Optional[Path]:
        if not info.path:
            return None

        staging = self._new_staging_dir(info)
        try:
            staged = await self._copy_to_staging(info, staging)
        except Exception:
            await self._discard_staging_dir(staging)
            raise
        if staged is None:
            await self._discard_staging_dir(staging)
        return staged

    @asyncify
    def _scan(self) -> List[RemotePackageInfo]:
        """
        Scan the repository for package.json files (like createrepo for YUM).

        Returns:
            One listing per valid package directory
        """
        if not self.directory.exists() or not self.directory.is_dir():
            logger.warning(f"Local remote directory does not exist: {self.directory}")
            return []

        packages = []
        candidates = list(self.directory.glob(f"*/{PACKAGE_FILE}"))
        candidates += list(self.directory.glob(f"*/*/{PACKAGE_FILE}"))
        for manifest in sorted(candidates):
            try:
                with open(manifest, "r", encoding="utf-8") as f:
                    metadata = json.load(f)

                # Ensure it has required fields
                if "name" not in metadata or "version" not in metadata:
                    logger.warning(f"Invalid {PACKAGE_FILE} in {manifest.parent}: missing name or version")
                    continue

                packages.append(RemotePackageInfo(
                    name=str(metadata["name"]),
                    version=str(metadata["version"]),
                    dependencies={str(k): str(v) for k, v in (metadata.get("dependencies") or {}).items()},
                    description=str(metadata.get("description", "")),
                    path=str(manifest.parent),
                ))
                logger.debug(f"Found package: {metadata['name']} v{metadata['version']}")

            except Exception as e:
                logger.warning(f"Failed to load {manifest}: {e}")
                continue

        logger.debug(f"Scanned {len(packages)} packages from {self.directory}")
        return packages

    @asyncify
    def _copy_to_staging(self, info: RemotePackageInfo, staging: Path) -> Optional[Path]:
        source = Path(info.path)
        if not (source / PACKAGE_FILE).exists():
            logger.warning(f"Package directory vanished: {source}")
            return None
        target = staging / "package"
        shutil.copytree(source, target)
        logger.info(f"Staged {info.name}@{info.version} from {self.name}")
        return target
