# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Package Loader

Loads a package directory (a folder holding package.json) into a
structured Package with name, version, dependencies and its own path.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from seed.asyncutil import asyncify

PACKAGE_FILE = "package.json"


@dataclass
class Package:
    """
    A loaded package.

    Wraps the raw package.json content together with the directory it was
    loaded from.
    """
    name: str
    version: str
    path: Path
    config: Dict[str, Any]
    dependencies: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Validate package fields"""
        if not self.name:
            raise ValueError("Package name cannot be empty")

        if not self.version:
            raise ValueError("Package version cannot be empty")

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """Return a raw field from package.json."""
        return self.config.get(key, default)

    @classmethod
    def from_directory(cls, package_dir: Path) -> "Package":
        """
        Load package from a directory containing package.json.

        Args:
            package_dir: Path to package directory

        Returns:
            Package instance

        Raises:
            FileNotFoundError: If the directory or package.json doesn't exist
            ValueError: If package.json is malformed or missing required fields
        """
        config_file = package_dir / PACKAGE_FILE
        if not config_file.exists():
            raise FileNotFoundError(f"Package config not found: {config_file}")

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid {PACKAGE_FILE} in {package_dir}: {e}")

        if not isinstance(config, dict):
            raise ValueError(f"Invalid {PACKAGE_FILE} in {package_dir}: expected an object")

        name = config.get("name")
        version = config.get("version")
        if not name or not version:
            raise ValueError(
                f"Package config missing required fields: name or version. "
                f"Found: name={name}, version={version}"
            )

        dependencies = config.get("dependencies") or {}
        if not isinstance(dependencies, dict):
            raise ValueError(f"Invalid dependencies in {config_file}: expected an object")

        return cls(
            name=str(name),
            version=str(version),
            path=package_dir,
            config=config,
            dependencies={str(k): str(v) for k, v in dependencies.items()},
        )

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"


def load_package(path: Union[str, Path]) -> Package:
    """Load the package at path, resolving it to an absolute directory."""
    return Package.from_directory(Path(path).expanduser().resolve())


load_package_async = asyncify(load_package)
