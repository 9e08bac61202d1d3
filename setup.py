# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Setup configuration for the Seed package installer
"""

from setuptools import setup, find_packages

setup(
    name="seed-install",
    version="1.0.0",
    description="Package installer with local and remote resolution",
    author="Jason Cafarelli",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11.4",
    install_requires=[
        "pydantic>=2.0.0",
        "httpx>=0.24.0",
        "PyYAML>=6.0",
        "python-gnupg>=0.5.0",
        "semantic_version>=2.10.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "seed=seed.cli:main",
        ]
    },
)
