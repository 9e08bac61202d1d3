# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
HTTP Remote

Single responsibility: List and download packages from an HTTP(S) package
server.

Wire format:
    GET {url}/api/v1/packages?name=&version=&exact=&dependencies=
        -> {"packages": [{"name", "version", "dependencies", "url", ...}]}
    GET {listing.url}  -> .tar.gz artifact (relative URLs resolve from {url})
    GET {listing.signature_url} -> detached signature (when gpgcheck is on)
"""

import asyncio
import hashlib
import logging
import tarfile
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional
from urllib.parse import urljoin

import httpx

from seed.asyncutil import asyncify
from seed.models import RemoteConfig, RemotePackageInfo, RemoteQuery
from seed.package import PACKAGE_FILE
from seed.signing import import_key_file, verify_file

from .base import Remote, matches_query

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class HttpRemote(Remote):
    """Remote backed by an HTTP package server"""

    def __init__(
        self,
        config: RemoteConfig,
        staging_dir: Optional[Path] = None,
        timeout: float = 30.0,
        max_retries: int = 2,
        backoff: float = 0.2,
        keyring_dir: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize HTTP remote.

        Args:
            config: Remote configuration
            staging_dir: Parent directory for staged artifacts
            timeout: Per-request timeout in seconds
            max_retries: Retries after a transport error
            backoff: Initial retry delay, doubled after each retry
            keyring_dir: GPG keyring used when gpgcheck is enabled
            transport: Optional httpx transport (tests)
        """
        super().__init__(config, staging_dir)
        self.base_url = config.url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff = backoff
        self.keyring_dir = keyring_dir
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
            follow_redirects=True
        )

    async def list(self, query: RemoteQuery) -> List[RemotePackageInfo]:
        params = {
            "name": query.name,
            "exact": "true" if query.exact else "false",
            "dependencies": "true" if query.dependencies else "false",
        }
        if query.version:
            params["version"] = query.version

        async with self._client() as client:
            response = await self._with_retry(
                lambda: client.get(f"{self.base_url}/api/v1/packages", params=params),
                f"list {query.name}"
            )

        if response.status_code == 404:
            return []
        response.raise_for_status()

        data = response.json()
        packages = []
        for item in data.get("packages", []):
            info = RemotePackageInfo(**item)
            # Servers may ignore filters; apply them again locally
            if matches_query(info, query):
                packages.append(info)
        return packages

    async def fetch(self, info: RemotePackageInfo) -> Optional[Path]:
        if not info.url:
            return None

        staging = self._new_staging_dir(info)
        try:
            package_dir = await self._stage(info, staging)
        except Exception:
            await self._discard_staging_dir(staging)
            raise
        logger.info(f"Staged {info.name}@{info.version} from {self.name}")
        return package_dir

    async def _stage(self, info: RemotePackageInfo, staging: Path) -> Path:
        artifact = staging / "artifact.tar.gz"

        async with self._client() as client:
            await self._download(client, urljoin(self.base_url + "/", info.url), artifact)
            if self.config.gpgcheck:
                if not info.signature_url:
                    raise ValueError(f"{info.name}@{info.version} has no signature and {self.name} requires one")
                signature = staging / "artifact.tar.gz.asc"
                await self._download(client, urljoin(self.base_url + "/", info.signature_url), signature)
                await self._verify(artifact, signature)

        if info.checksum:
            digest = await _sha256(artifact)
            expected = info.checksum.split(":", 1)[-1]
            if digest != expected:
                raise ValueError(f"Checksum mismatch for {info.name}@{info.version}: expected {expected}, got {digest}")

        package_dir = await _unpack(artifact, staging / "package")
        artifact.unlink()
        return package_dir

    async def _download(self, client: httpx.AsyncClient, url: str, target: Path) -> None:
        response = await self._with_retry(lambda: client.get(url), f"download {url}")
        response.raise_for_status()
        target.write_bytes(response.content)

    @asyncify
    def _verify(self, artifact: Path, signature: Path) -> None:
        if self.config.gpgkey:
            import_key_file(self.config.gpgkey, self.keyring_dir)
        verify_file(artifact, signature, self.keyring_dir)

    async def _with_retry(
        self,
        request: Callable[[], Awaitable[httpx.Response]],
        operation_name: str
    ) -> Any:
        """
        Execute a request with retry logic on transport errors.

        Args:
            request: Coroutine function issuing the request
            operation_name: Operation name for logging

        Returns:
            The response of the first successful attempt

        Raises:
            httpx.TransportError: If all retries fail
        """
        delay = self.backoff
        for attempt in range(self.max_retries + 1):
            try:
                return await request()
            except httpx.TransportError as e:
                if attempt == self.max_retries:
                    logger.error(f"Final retry failed for {operation_name} on {self.name}: {e}")
                    raise
                logger.warning(
                    f"Retry {attempt + 1}/{self.max_retries} failed "
                    f"for {operation_name} on {self.name}: {e}"
                )
                await asyncio.sleep(delay)

                # Exponential backoff
                delay *= 2


@asyncify
def _sha256(path: Path) -> str:
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for block in iter(lambda: f.read(CHUNK_SIZE), b""):
            digest.update(block)
    return digest.hexdigest()


@asyncify
def _unpack(artifact: Path, target: Path) -> Path:
    """Extract a tarball into target and return the package root inside it."""
    target.mkdir(parents=True, exist_ok=True)
    root = target.resolve()
    with tarfile.open(artifact, "r:*") as archive:
        for member in archive.getmembers():
            destination = (root / member.name).resolve()
            if destination != root and root not in destination.parents:
                raise ValueError(f"Archive member escapes staging directory: {member.name}")
            if member.issym() or member.islnk():
                raise ValueError(f"Archive links are not supported: {member.name}")
        archive.extractall(root, filter="data")

    if (root / PACKAGE_FILE).exists():
        return root

    # npm-style tarballs wrap the package in a single top-level directory
    children = [child for child in root.iterdir() if child.is_dir()]
    if len(children) == 1 and (children[0] / PACKAGE_FILE).exists():
        return children[0]
    return root
