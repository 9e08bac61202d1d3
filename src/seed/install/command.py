# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Install Command

Single responsibility: Validate an install request, pick the destination
and remotes, and install every requested package in one session.
"""

import logging
from typing import List, Optional, Sequence

from seed.asyncutil import parallel
from seed.core.errors import InvalidInputError, NoInstallTargetError
from seed.core.logging import log_event
from seed.models import InstallRequest
from seed.package import load_package_async
from seed.remotes.base import Remote
from seed.remotes.registry import RemoteRegistry

from .context import InstallContext, PackageLoader

logger = logging.getLogger(__name__)


def validate_request(request: InstallRequest) -> None:
    """
    Reject malformed requests before any remote is contacted.

    Raises:
        InvalidInputError: If no package is named, or --version is used
            with more than one package
    """
    if not request.package_ids:
        raise InvalidInputError("You must name at least one package")
    if request.version and len(request.package_ids) > 1:
        raise InvalidInputError(
            "--version switch can only be used with one package name",
            option="--version"
        )


def select_destination(sources: Sequence):
    """First source that accepts installs."""
    for source in sources:
        if getattr(source, "accepts_installs", False):
            return source
    raise NoInstallTargetError()


def select_remotes(request: InstallRequest, registry: RemoteRegistry) -> List[Remote]:
    """The remote named by --remote, or every configured remote by priority."""
    if not request.remote:
        return registry.list_configured()

    url = registry.normalize(request.remote)
    remote = registry.open(url)
    if remote is None:
        remote = registry.open_default(url)
    return [remote]


async def run_install(
    request: InstallRequest,
    sources: Sequence,
    remote_registry: RemoteRegistry,
    loader: Optional[PackageLoader] = None
) -> InstallContext:
    """
    Run an install invocation.

    Args:
        request: Parsed install request
        sources: Candidate destinations, in preference order
        remote_registry: Registry used to open remotes
        loader: Package loader (load_package_async if None)

    Returns:
        The finished install context

    Raises:
        SeedError: The first failure among the requested installs
    """
    validate_request(request)
    destination = select_destination(sources)
    remotes = select_remotes(request, remote_registry)

    context = InstallContext(
        destination,
        remotes,
        include_dependencies=request.dependencies,
        loader=loader or load_package_async
    )
    log_event(
        logger,
        f"Installing {', '.join(request.package_ids)}",
        packages=list(request.package_ids),
        remotes=[remote.name for remote in remotes],
        destination=type(destination).__name__
    )

    try:
        await parallel(
            request.package_ids,
            lambda package_id: context.install(package_id, request.version, exact=True)
        )
    finally:
        await context.drain()
    return context
