# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Install Context

Single responsibility: Orchestrate one install session. Resolves each
requested package, stages it, installs its dependencies, hands it to the
destination and cleans up staged artifacts. Every (name, version) is
prepared once and installed once no matter how many requests reach it.
"""

import logging
import os
from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Optional, Set

from seed.asyncutil import Once, chain, parallel
from seed.core.errors import (
    CircularDependencyError,
    CleanupFailureError,
    InstallFailureError,
    InvalidPackageError,
    NotFoundError,
)
from seed.package import Package, load_package_async
from seed.remotes.base import Remote

from .descriptors import DescriptorCache, DescriptorKey, PackageDescriptor
from .preparer import Preparer
from .resolver import Resolver

logger = logging.getLogger(__name__)

PackageLoader = Callable[[Path], Awaitable[Optional[Package]]]


def is_path(package_id: str) -> bool:
    """Whether an install argument names a directory rather than a package id."""
    return package_id.startswith(".") or "/" in package_id or os.sep in package_id


class InstallContext:
    """
    State and operations of a single install invocation.

    Owns the descriptor cache and the per-key prepare and install jobs.
    The destination and remotes are shared collaborators.
    """

    def __init__(
        self,
        destination,
        remotes: List[Remote],
        include_dependencies: Optional[bool] = None,
        loader: PackageLoader = load_package_async
    ):
        """
        Initialize install context.

        Args:
            destination: Source that accepts installs
            remotes: Remotes in priority order
            include_dependencies: Install dependencies (None = decide from the
                origin of the first package whose dependencies are considered)
            loader: Coroutine function loading the package in a directory
        """
        self.destination = destination
        self.remotes = remotes
        self.include_dependencies = include_dependencies
        self.loader = loader

        self.cache = DescriptorCache()
        self.prepare_jobs: Dict[DescriptorKey, Once] = {}
        self.install_jobs: Dict[DescriptorKey, Once] = {}
        self.preparer = Preparer(self.prepare_jobs)
        self.resolver = Resolver(self.cache, remotes, self.preparer)

        self._edges: Dict[DescriptorKey, Set[DescriptorKey]] = {}
        self._cleaned: Set[Path] = set()

    async def install(
        self,
        package_id: str,
        constraint: Optional[str] = None,
        exact: bool = False,
        parent: Optional[PackageDescriptor] = None
    ) -> PackageDescriptor:
        """
        Install a package id or package directory, dependencies first.

        Args:
            package_id: Package id, or a path to a package directory
            constraint: Version constraint (ignored for paths)
            exact: Require an exact version match
            parent: Descriptor whose dependency triggered this install

        Returns:
            The installed descriptor

        Raises:
            NotFoundError: If the package cannot be resolved
            CircularDependencyError: If installing it would close a dependency cycle
            SeedError: Whatever the shared install job failed with
        """
        if is_path(package_id):
            descriptor = await self.load_descriptor(package_id)
        else:
            descriptor = await self.resolver.resolve(package_id, constraint, exact)

        if parent is not None:
            self._add_edge(parent.key, descriptor.key)

        job = self.install_jobs.get(descriptor.key)
        if job is None:
            job = Once(lambda: self._install_job(descriptor), name=f"install:{descriptor}")
            self.install_jobs[descriptor.key] = job

        await job()
        return descriptor

    async def install_dependencies(self, descriptor: PackageDescriptor) -> None:
        """
        Install every dependency of descriptor in parallel.

        The first descriptor to get here fixes the session's dependency
        preference when none was given: dependencies of remote packages are
        installed, those of local packages are assumed to be in place.
        """
        if self.include_dependencies is None:
            self.include_dependencies = descriptor.is_remote
            logger.debug(
                f"Dependency installation {'enabled' if self.include_dependencies else 'disabled'} "
                f"by {descriptor.origin.value} package {descriptor}"
            )

        if not self.include_dependencies or not descriptor.dependencies:
            return

        await parallel(
            list(descriptor.dependencies.items()),
            lambda dep: self.install(dep[0], dep[1], exact=False, parent=descriptor)
        )

    async def load_descriptor(self, path: str) -> PackageDescriptor:
        """
        Describe the package in a local directory and cache it.

        Local descriptors always replace a cached descriptor of the same version.
        """
        try:
            package = await self.loader(Path(os.path.normpath(path)))
        except FileNotFoundError as e:
            raise NotFoundError(path, details={"reason": str(e)}) from e
        except ValueError as e:
            raise InvalidPackageError(path, details={"reason": str(e)}) from e
        if package is None:
            raise NotFoundError(path)

        descriptor = PackageDescriptor.from_package(package)
        self.cache.insert(descriptor, overlay=True)
        return descriptor

    async def drain(self) -> None:
        """
        Settle background work once all requested installs are finished.

        Waits for speculative fetches and removes artifacts they staged
        that no install consumed.
        """
        await self.resolver.wait_for_prefetches()
        for descriptor in self.preparer.staged():
            if descriptor.local_path in self._cleaned:
                continue
            self._cleaned.add(descriptor.local_path)
            try:
                await descriptor.remote.cleanup(descriptor.local_path)
                logger.debug(f"Discarded unused staged artifact for {descriptor}")
            except Exception as e:
                logger.warning(f"Could not clean up staged {descriptor}: {e}")

    async def _install_job(self, descriptor: PackageDescriptor) -> None:
        await chain(
            lambda: self.preparer.prepare(descriptor),
            lambda _: self.install_dependencies(descriptor),
            lambda _: self._materialize(descriptor)
        )

    async def _materialize(self, descriptor: PackageDescriptor) -> None:
        try:
            package = await self.loader(descriptor.local_path)
        except (FileNotFoundError, ValueError) as e:
            raise InvalidPackageError(descriptor.name, details={"reason": str(e)}) from e
        if package is None:
            raise InvalidPackageError(descriptor.name)

        try:
            await self.destination.install(package)
        except InstallFailureError:
            raise
        except Exception as e:
            raise InstallFailureError(f"Failed to install {descriptor}: {e}", package_id=descriptor.name) from e
        logger.info(f"Installed {descriptor}")

        if descriptor.is_remote:
            self._cleaned.add(descriptor.local_path)
            try:
                await descriptor.remote.cleanup(descriptor.local_path)
            except CleanupFailureError:
                raise
            except Exception as e:
                raise CleanupFailureError(
                    f"Installed {descriptor} but could not clean up {descriptor.local_path}: {e}",
                    path=str(descriptor.local_path)
                ) from e

    def _add_edge(self, parent: DescriptorKey, child: DescriptorKey) -> None:
        cycle = self._find_path(child, parent)
        if cycle is not None:
            names = [f"{name}@{version}" for name, version in [parent, *cycle]]
            raise CircularDependencyError(names)
        self._edges.setdefault(parent, set()).add(child)

    def _find_path(self, start: DescriptorKey, goal: DescriptorKey) -> Optional[List[DescriptorKey]]:
        # Depth-first search over recorded "depends on" edges
        stack = [(start, [start])]
        visited = set()
        while stack:
            node, path = stack.pop()
            if node == goal:
                return path
            if node in visited:
                continue
            visited.add(node)
            for nxt in self._edges.get(node, ()):
                stack.append((nxt, path + [nxt]))
        return None
