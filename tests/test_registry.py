# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit Tests for the Remote Registry

Tests loading remotes.conf and opening configured and ad-hoc remotes.
"""

import pytest

from seed.core.config import Config
from seed.models import RemoteType
from seed.remotes.directory import DirectoryRemote
from seed.remotes.http import HttpRemote
from seed.remotes.registry import RemoteConfigLoader, RemoteRegistry

REMOTES_CONF = """\
[central]
name = Central packages
url = https://packages.example.com/
priority = 20
gpgcheck = true
gpgkey = /etc/seed/central.asc

[local]
url = file://./repo
priority = 10

[mirror]
url = https://mirror.example.com
enabled = false
"""


@pytest.fixture
def config(tmp_path):
    (tmp_path / "remotes.conf").write_text(REMOTES_CONF)
    return Config(
        home=str(tmp_path),
        install_root=str(tmp_path / "packages"),
        remotes_conf=str(tmp_path / "remotes.conf"),
        staging_dir=str(tmp_path / "staging"),
        state_dir=str(tmp_path / "state"),
        http_timeout=3.0,
    )


@pytest.fixture
def registry(config):
    return RemoteRegistry(config)


class TestRemoteConfigLoader:
    """Test suite for RemoteConfigLoader"""

    def test_load(self, config):
        remotes = RemoteConfigLoader(config.remotes_conf_path).load()

        central = remotes["central"]
        assert central.display_name == "Central packages"
        assert central.type == RemoteType.HTTP
        assert central.gpgcheck is True
        assert central.gpgkey == "/etc/seed/central.asc"
        assert remotes["local"].type == RemoteType.DIRECTORY
        assert remotes["local"].display_name == "local"
        assert remotes["mirror"].enabled is False

    def test_missing_file(self, tmp_path):
        assert RemoteConfigLoader(tmp_path / "absent.conf").load() == {}

    def test_bad_section_skipped(self, tmp_path):
        conf = tmp_path / "remotes.conf"
        conf.write_text("[nourl]\npriority = 1\n\n[ok]\nurl = file:///srv\n")

        assert list(RemoteConfigLoader(conf).load()) == ["ok"]


class TestRemoteRegistry:
    """Test suite for RemoteRegistry"""

    def test_list_configured_by_priority(self, registry):
        remotes = registry.list_configured()

        assert [r.name for r in remotes] == ["local", "central"]
        assert isinstance(remotes[0], DirectoryRemote)
        assert isinstance(remotes[1], HttpRemote)

    def test_relative_directory_resolves_from_conf(self, registry, tmp_path):
        local = registry.open("local")

        assert local.directory == (tmp_path / "repo").resolve()

    def test_http_settings_from_config(self, registry):
        central = registry.open("central")

        assert central.timeout == 3.0
        assert central.config.gpgcheck is True

    def test_normalize(self, registry, tmp_path):
        assert registry.normalize("https://packages.example.com/") == "https://packages.example.com"
        assert registry.normalize("central") == "central"
        assert registry.normalize(str(tmp_path / "repo") + "/") == f"file://{tmp_path / 'repo'}"

    def test_open_by_url(self, registry):
        remote = registry.open(registry.normalize("https://packages.example.com/"))

        assert remote.name == "central"

    def test_open_unknown(self, registry):
        assert registry.open("https://elsewhere.example.com") is None

    def test_open_default_picks_type_from_scheme(self, registry, tmp_path):
        http_remote = registry.open_default("https://elsewhere.example.com")
        dir_remote = registry.open_default(f"file://{tmp_path}")

        assert isinstance(http_remote, HttpRemote)
        assert isinstance(dir_remote, DirectoryRemote)
        assert dir_remote.directory == tmp_path

    def test_explicit_remote_configs(self, config):
        registry = RemoteRegistry(config, remotes={})

        assert registry.list_configured() == []
