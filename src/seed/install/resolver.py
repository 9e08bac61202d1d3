# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Resolver

Single responsibility: Turn a package id and version constraint into a
descriptor, consulting the session cache first and then each remote in
priority order.
"""

import asyncio
import logging
from typing import List, Optional, Set

from seed.core.errors import InvalidVersionError, NotFoundError
from seed.models import RemoteQuery
from seed.remotes.base import Remote

from .descriptors import DescriptorCache, PackageDescriptor
from .preparer import Preparer

logger = logging.getLogger(__name__)


class Resolver:
    """Resolves package ids against the cache and remotes"""

    def __init__(self, cache: DescriptorCache, remotes: List[Remote], preparer: Preparer):
        """
        Initialize resolver.

        Args:
            cache: Session descriptor cache
            remotes: Remotes in priority order
            preparer: Preparer used for speculative prefetch
        """
        self.cache = cache
        self.remotes = remotes
        self.preparer = preparer
        self._prefetches: Set[asyncio.Task] = set()

    async def resolve(
        self,
        package_id: str,
        constraint: Optional[str] = None,
        exact: bool = False
    ) -> PackageDescriptor:
        """
        Find a descriptor for package_id.

        Remotes are searched sequentially; the search stops at the first
        remote whose listings satisfy the request.

        Raises:
            NotFoundError: If neither the cache nor any remote has a match
        """
        descriptor = self.cache.select(package_id, constraint, exact)
        if descriptor is not None:
            return descriptor

        query = RemoteQuery(name=package_id, version=constraint, exact=exact, dependencies=True)
        for remote in self.remotes:
            try:
                listings = await remote.list(query)
            except Exception as e:
                logger.warning(f"Remote {remote.name} failed to list {package_id}: {e}")
                continue

            for info in listings or []:
                try:
                    candidate = PackageDescriptor.from_remote(info, remote)
                except InvalidVersionError as e:
                    logger.warning(
                        f"Remote {remote.name} listed {info.name}@{info.version} "
                        f"with an invalid version, skipping: {e}"
                    )
                    continue
                if self.cache.insert(candidate, overlay=False):
                    self._prefetch(candidate)

            descriptor = self.cache.select(package_id, constraint, exact)
            if descriptor is not None:
                logger.debug(f"Resolved {package_id} to {descriptor} via {remote.name}")
                return descriptor

        raise NotFoundError(package_id)

    def _prefetch(self, descriptor: PackageDescriptor) -> None:
        job = self.preparer.start(descriptor)
        if job is None:
            return
        task = asyncio.ensure_future(self._await_prefetch(descriptor, job))
        self._prefetches.add(task)
        task.add_done_callback(self._prefetches.discard)

    async def _await_prefetch(self, descriptor, job) -> None:
        try:
            await job()
        except Exception as e:
            logger.debug(f"Speculative fetch of {descriptor} failed: {e}")

    async def wait_for_prefetches(self) -> None:
        """Wait until every speculative fetch started so far has settled."""
        while self._prefetches:
            await asyncio.gather(*list(self._prefetches))
