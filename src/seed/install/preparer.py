# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Preparer

Single responsibility: Make sure a descriptor has a local directory,
fetching it from its remote at most once per install session.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from seed.asyncutil import Once
from seed.core.errors import FetchFailureError, InternalInconsistencyError

from .descriptors import DescriptorKey, PackageDescriptor

logger = logging.getLogger(__name__)


class Preparer:
    """Stages remote descriptors into local directories"""

    def __init__(self, jobs: Optional[Dict[DescriptorKey, Once]] = None):
        """
        Initialize preparer.

        Args:
            jobs: Prepare job map shared with the owning install context
        """
        self.jobs: Dict[DescriptorKey, Once] = jobs if jobs is not None else {}
        self._staged: List[PackageDescriptor] = []

    async def prepare(self, descriptor: PackageDescriptor) -> Path:
        """
        Stage a descriptor locally.

        Args:
            descriptor: Descriptor to stage

        Returns:
            Local package directory

        Raises:
            InternalInconsistencyError: If a descriptor without local path has no remote
            FetchFailureError: If the remote fetch fails or returns nothing
        """
        if descriptor.local_path is not None:
            return descriptor.local_path

        return await self._job_for(descriptor)()

    def start(self, descriptor: PackageDescriptor) -> Optional[Once]:
        """Begin staging in the background without waiting for it."""
        if descriptor.local_path is not None:
            return None
        job = self._job_for(descriptor)
        job.start()
        return job

    def _job_for(self, descriptor: PackageDescriptor) -> Once:
        job = self.jobs.get(descriptor.key)
        if job is None:
            job = Once(lambda: self._stage(descriptor), name=f"prepare:{descriptor}")
            self.jobs[descriptor.key] = job
        return job

    def staged(self) -> List[PackageDescriptor]:
        """Descriptors whose artifacts were fetched from a remote."""
        return list(self._staged)

    async def _stage(self, descriptor: PackageDescriptor) -> Path:
        if descriptor.remote is None:
            raise InternalInconsistencyError(f"{descriptor} has no local path and no remote")

        try:
            local_path = await descriptor.remote.fetch(descriptor.remote_info)
        except Exception as e:
            logger.debug(f"Fetch of {descriptor} from {descriptor.remote.name} failed: {e}")
            raise FetchFailureError(descriptor.name, descriptor.version, details={"reason": str(e)}) from e

        if not local_path:
            raise FetchFailureError(descriptor.name, descriptor.version)

        descriptor.local_path = Path(local_path)
        self._staged.append(descriptor)
        logger.debug(f"Prepared {descriptor} at {descriptor.local_path}")
        return descriptor.local_path
