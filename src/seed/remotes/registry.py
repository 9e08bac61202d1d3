# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Remote Registry

Single responsibility: Load remote configurations from remotes.conf and
turn them (or an ad-hoc --remote URL) into Remote instances.

remotes.conf is INI-style, one section per remote:

    [local]
    name = Local packages
    url = file:///srv/seed/packages
    enabled = true
    priority = 10

    [central]
    url = https://packages.example.com
    type = http
    gpgcheck = true
    gpgkey = /etc/seed/keys/central.asc
"""

import configparser
import logging
from pathlib import Path
from typing import Dict, List, Optional

from seed.core.config import Config
from seed.core.errors import ConfigurationError
from seed.models import RemoteConfig, RemoteType

from .base import Remote
from .directory import DirectoryRemote
from .http import HttpRemote

logger = logging.getLogger(__name__)


class RemoteConfigLoader:
    """Loads remote configurations from INI-style remotes.conf"""

    def __init__(self, config_path: Path):
        """
        Initialize configuration loader.

        Args:
            config_path: Path to remotes.conf file
        """
        self.config_path = config_path

    def load(self) -> Dict[str, RemoteConfig]:
        """
        Load remote configurations from remotes.conf

        Returns:
            Dictionary of remote configs keyed by section name

        Raises:
            ConfigurationError: If the file cannot be parsed
        """
        remotes = {}

        if not self.config_path.exists():
            logger.debug(f"No remotes.conf found at {self.config_path}")
            return remotes

        config = configparser.ConfigParser()
        try:
            config.read(self.config_path)
        except configparser.Error as e:
            raise ConfigurationError(f"Invalid remotes.conf: {e}", config_file=str(self.config_path))

        for section in config.sections():
            try:
                url = config.get(section, "url")
                remote_config = RemoteConfig(
                    name=section,
                    display_name=config.get(section, "name", fallback=section),
                    url=url,
                    enabled=config.getboolean(section, "enabled", fallback=True),
                    priority=config.getint(section, "priority", fallback=50),
                    gpgcheck=config.getboolean(section, "gpgcheck", fallback=False),
                    gpgkey=config.get(section, "gpgkey", fallback=None),
                    type=RemoteType(config.get(section, "type", fallback=_type_for_url(url).value))
                )
                remotes[section] = remote_config
                logger.debug(f"Loaded remote: {section} ({remote_config.url})")
            except Exception as e:
                logger.error(f"Failed to load remote {section}: {e}")

        return remotes


def _type_for_url(url: str) -> RemoteType:
    if url.startswith("http://") or url.startswith("https://"):
        return RemoteType.HTTP
    return RemoteType.DIRECTORY


class RemoteRegistry:
    """
    Builds Remote instances from configuration.

    Configured remotes come from remotes.conf; any other URL can still be
    opened with open_default, which picks the remote type from its scheme.
    """

    def __init__(self, config: Config, remotes: Optional[Dict[str, RemoteConfig]] = None):
        """
        Initialize the registry.

        Args:
            config: Installer configuration (paths and HTTP settings)
            remotes: Remote configs; loaded from config.remotes_conf when None
        """
        self.config = config
        if remotes is None:
            remotes = RemoteConfigLoader(config.remotes_conf_path).load()
        self.remotes = remotes

    def normalize(self, url: str) -> str:
        """
        Canonicalize a remote URL.

        Bare filesystem paths become absolute file:// URLs. Configured
        remote names and http(s) URLs are kept as given. A trailing slash
        is stripped.
        """
        url = url.strip()
        if url in self.remotes:
            return url
        if "://" in url:
            return url.rstrip("/")
        return f"file://{Path(url).expanduser().resolve()}"

    def open(self, url: str) -> Optional[Remote]:
        """Open the configured remote with this URL or section name, if any."""
        if url in self.remotes:
            return self._build(self.remotes[url])

        for remote_config in self.remotes.values():
            if remote_config.url.rstrip("/") == url:
                return self._build(remote_config)
        return None

    def open_default(self, url: str) -> Remote:
        """Open an unconfigured remote, choosing its type from the URL scheme."""
        remote_type = _type_for_url(url)
        remote_config = RemoteConfig(
            name=url,
            display_name=url,
            url=url,
            type=remote_type
        )
        logger.info(f"Using unconfigured {remote_type.value} remote {url}")
        return self._build(remote_config)

    def list_configured(self) -> List[Remote]:
        """Enabled remotes, highest priority (lowest number) first."""
        enabled = [r for r in self.remotes.values() if r.enabled]
        enabled.sort(key=lambda r: r.priority)
        return [self._build(r) for r in enabled]

    def _build(self, remote_config: RemoteConfig) -> Remote:
        if remote_config.type == RemoteType.HTTP:
            return HttpRemote(
                remote_config,
                staging_dir=self.config.staging_path,
                timeout=self.config.http_timeout,
                max_retries=self.config.http_max_retries,
                backoff=self.config.http_backoff,
                keyring_dir=self.config.keyring_dir
            )
        return DirectoryRemote(
            remote_config,
            staging_dir=self.config.staging_path,
            base_dir=self.config.remotes_conf_path.parent
        )
