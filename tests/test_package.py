# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit Tests for the Package Loader

Tests loading package.json directories and validation of required fields.
"""

import json

import pytest
from conftest import write_package

from seed.package import Package, load_package, load_package_async


class TestPackage:
    """Test suite for Package"""

    def test_create_package(self, tmp_path):
        package = Package(name="foo", version="1.0.0", path=tmp_path, config={"license": "MIT"})

        assert package.get("license") == "MIT"
        assert package.get("missing", "default") == "default"
        assert package.dependencies == {}
        assert str(package) == "foo@1.0.0"

    def test_empty_name_rejected(self, tmp_path):
        with pytest.raises(ValueError, match="name cannot be empty"):
            Package(name="", version="1.0.0", path=tmp_path, config={})

    def test_empty_version_rejected(self, tmp_path):
        with pytest.raises(ValueError, match="version cannot be empty"):
            Package(name="foo", version="", path=tmp_path, config={})


class TestLoadPackage:
    """Test suite for load_package"""

    def test_load_from_directory(self, tmp_path):
        write_package(tmp_path / "foo", "foo", "1.2.3", {"bar": "^1.0"}, description="Foo package")

        package = load_package(tmp_path / "foo")

        assert package.name == "foo"
        assert package.version == "1.2.3"
        assert package.dependencies == {"bar": "^1.0"}
        assert package.get("description") == "Foo package"
        assert package.path == (tmp_path / "foo").resolve()

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_package(tmp_path / "nope")

    def test_missing_required_fields(self, tmp_path):
        (tmp_path / "package.json").write_text(json.dumps({"name": "foo"}))

        with pytest.raises(ValueError, match="missing required fields"):
            load_package(tmp_path)

    def test_malformed_json(self, tmp_path):
        (tmp_path / "package.json").write_text("{not json")

        with pytest.raises(ValueError, match="Invalid package.json"):
            load_package(tmp_path)

    def test_dependencies_must_be_an_object(self, tmp_path):
        (tmp_path / "package.json").write_text(json.dumps({
            "name": "foo", "version": "1.0.0", "dependencies": ["bar"]
        }))

        with pytest.raises(ValueError, match="Invalid dependencies"):
            load_package(tmp_path)

    @pytest.mark.asyncio
    async def test_async_loader(self, tmp_path):
        write_package(tmp_path / "foo", "foo", "1.0.0")

        package = await load_package_async(tmp_path / "foo")

        assert package.name == "foo"
