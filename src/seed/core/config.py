# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Seed Configuration - Single source of truth.
YAML is king. Env vars only for locating the file and the log level.

Layout of config.yaml (every key optional):

    paths:
      home: ~/.seed
      install_root: ~/.seed/packages
      remotes_conf: ~/.seed/remotes.conf
      staging: ~/.seed/staging
      state: ~/.seed/state
      keyring: ~/.seed/keyring
    http:
      timeout: 30
      max_retries: 2
      backoff: 0.2
    logging:
      level: INFO
      format: text
      file: null
"""

import os
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import ConfigurationError

DEFAULT_HOME = "~/.seed"
DEFAULT_CONFIG_PATH = "~/.seed/config.yaml"


# =============================================================================
# CONFIGURATION DATACLASS
# =============================================================================

@dataclass(frozen=True)
class Config:
    """
    Immutable installer configuration.
    All values from YAML. No hidden state.
    """

    # -- Paths --
    home: str = DEFAULT_HOME
    install_root: str = "~/.seed/packages"
    remotes_conf: str = "~/.seed/remotes.conf"
    staging_dir: str = "~/.seed/staging"
    state_dir: str = "~/.seed/state"
    keyring_dir: Optional[str] = None

    # -- HTTP --
    http_timeout: float = 30.0
    http_max_retries: int = 2
    http_backoff: float = 0.2

    # -- Logging --
    log_level: str = "WARNING"
    log_format: str = "text"
    log_file: Optional[str] = None

    @property
    def install_root_path(self) -> Path:
        return Path(self.install_root).expanduser()

    @property
    def remotes_conf_path(self) -> Path:
        return Path(self.remotes_conf).expanduser()

    @property
    def staging_path(self) -> Path:
        return Path(self.staging_dir).expanduser()

    @property
    def state_path(self) -> Path:
        return Path(self.state_dir).expanduser()


# =============================================================================
# LOADER
# =============================================================================

def load_config(path: Optional[str] = None) -> Config:
    """
    Load configuration from YAML.
    Returns defaults if file doesn't exist.

    Raises:
        ConfigurationError: If the file exists but is not a YAML mapping
    """
    path = path or DEFAULT_CONFIG_PATH
    config_file = Path(path).expanduser()
    if not config_file.exists():
        return _with_env(Config())

    try:
        with open(config_file) as f:
            y = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_file}: {e}", config_file=str(config_file))

    if not isinstance(y, dict):
        raise ConfigurationError(f"Config root must be a mapping: {config_file}", config_file=str(config_file))

    # Helper to safely navigate nested dicts
    def get(d: dict, *keys, default=None):
        for k in keys:
            if not isinstance(d, dict):
                return default
            d = d.get(k, {})
        return d if d != {} else default

    home = get(y, "paths", "home") or DEFAULT_HOME

    try:
        config = Config(
            # Paths
            home=home,
            install_root=get(y, "paths", "install_root") or f"{home}/packages",
            remotes_conf=get(y, "paths", "remotes_conf") or f"{home}/remotes.conf",
            staging_dir=get(y, "paths", "staging") or f"{home}/staging",
            state_dir=get(y, "paths", "state") or f"{home}/state",
            keyring_dir=get(y, "paths", "keyring"),

            # HTTP
            http_timeout=float(get(y, "http", "timeout") or 30.0),
            http_max_retries=int(get(y, "http", "max_retries", default=2)),
            http_backoff=float(get(y, "http", "backoff") or 0.2),

            # Logging
            log_level=str(get(y, "logging", "level") or "WARNING"),
            log_format=str(get(y, "logging", "format") or "text"),
            log_file=get(y, "logging", "file"),
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid value in {config_file}: {e}", config_file=str(config_file))

    return _with_env(config)


def _with_env(config: Config) -> Config:
    level = os.getenv("SEED_LOG_LEVEL")
    if not level:
        return config
    return Config(**{**config.__dict__, "log_level": level})


# =============================================================================
# GLOBAL INSTANCE
# =============================================================================

_config: Optional[Config] = None


def get_config(path: Optional[str] = None) -> Config:
    """Get or create global config instance."""
    global _config
    if _config is None:
        _config = load_config(path or os.getenv("SEED_CONFIG"))
    return _config


def reload_config(path: Optional[str] = None) -> Config:
    """Force reload configuration."""
    global _config
    _config = None
    return get_config(path)
