# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Package Descriptors and Descriptor Cache

Single responsibility: Track the known versions of every package id seen
during one install session and pick the version that satisfies a request.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from seed import semver
from seed.models import Origin, RemotePackageInfo
from seed.package import Package

if TYPE_CHECKING:
    from seed.remotes.base import Remote

logger = logging.getLogger(__name__)

DescriptorKey = Tuple[str, str]


@dataclass(eq=False)
class PackageDescriptor:
    """
    One resolvable version of a package.

    Everything but local_path is fixed at creation; local_path is set once
    the artifact is staged on disk.
    """
    name: str
    version: str
    origin: Origin
    dependencies: Dict[str, str] = field(default_factory=dict)
    remote: Optional["Remote"] = None
    remote_info: Optional[RemotePackageInfo] = None
    local_path: Optional[Path] = None

    @property
    def key(self) -> DescriptorKey:
        return (self.name, self.version)

    @property
    def is_remote(self) -> bool:
        return self.origin == Origin.REMOTE

    @classmethod
    def from_package(cls, package: Package) -> "PackageDescriptor":
        """Describe a package loaded from the local filesystem."""
        return cls(
            name=package.name,
            version=semver.normalize(package.version),
            origin=Origin.LOCAL,
            dependencies=dict(package.dependencies),
            local_path=package.path,
        )

    @classmethod
    def from_remote(cls, info: RemotePackageInfo, remote: "Remote") -> "PackageDescriptor":
        """Describe a package listed by a remote."""
        return cls(
            name=info.name,
            version=semver.normalize(info.version),
            origin=Origin.REMOTE,
            dependencies=dict(info.dependencies),
            remote=remote,
            remote_info=info,
        )

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"


class DescriptorCache:
    """In-memory registry of descriptors by package id, one per version"""

    def __init__(self):
        self._descriptors: Dict[str, List[PackageDescriptor]] = {}

    def select(
        self,
        package_id: str,
        constraint: Optional[str] = None,
        exact: bool = False
    ) -> Optional[PackageDescriptor]:
        """
        Find the cached descriptor that satisfies a version constraint.

        Without a constraint the highest cached version wins. With exact
        set, only a descriptor whose version equals the constraint string
        matches. Otherwise the highest compatible version wins; a version
        equal to the constraint string also qualifies.

        Args:
            package_id: Package identifier
            constraint: Requested version, or None for any
            exact: Require an exact version string match

        Returns:
            Matching descriptor, or None when nothing qualifies
        """
        selected = None
        for candidate in self._descriptors.get(package_id, []):
            if not constraint or (not exact and semver.compatible(constraint, candidate.version)):
                if selected is None or semver.compare(selected.version, candidate.version) < 0:
                    selected = candidate
            elif candidate.version == constraint:
                selected = candidate
        return selected

    def insert(self, descriptor: PackageDescriptor, overlay: bool = True) -> bool:
        """
        Add a descriptor to the cache.

        Args:
            descriptor: Descriptor to add
            overlay: Replace an existing descriptor for the same version

        Returns:
            True if the descriptor is now cached, False if an existing one was kept
        """
        known = self._descriptors.setdefault(descriptor.name, [])
        for index, existing in enumerate(known):
            if existing.version != descriptor.version:
                continue
            if not overlay:
                return False
            known[index] = descriptor
            logger.debug(f"Replaced cached descriptor {descriptor}")
            return True

        known.append(descriptor)
        return True

    def versions(self, package_id: str) -> List[str]:
        """Cached versions of a package id, in insertion order."""
        return [d.version for d in self._descriptors.get(package_id, [])]

    def __contains__(self, key: DescriptorKey) -> bool:
        name, version = key
        return version in self.versions(name)

    def __len__(self) -> int:
        return sum(len(items) for items in self._descriptors.values())
