# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Semantic version helpers backed by semantic_version.

Compatibility follows the installer's rule: same major version, and the
candidate is equal to or newer than the requested version.
"""

import re

import semantic_version

from seed.core.errors import InvalidVersionError

_RANGE_PREFIX = re.compile(r"^\s*(?:\^|~>?|==?|>=|v)\s*")


def parse(version: str) -> semantic_version.Version:
    """Parse a possibly partial version string ("1", "1.2", "1.2.3-beta")."""
    raw = _RANGE_PREFIX.sub("", str(version).strip())
    try:
        return semantic_version.Version.coerce(raw)
    except ValueError:
        raise InvalidVersionError(str(version))


def normalize(version: str) -> str:
    """Return the canonical MAJOR.MINOR.PATCH[-pre][+build] form."""
    return str(parse(version))


def compare(a: str, b: str) -> int:
    """Return -1, 0 or 1 as a sorts before, equal to, or after b."""
    left, right = parse(a), parse(b)
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def compatible(constraint: str, candidate: str) -> bool:
    """
    Check whether candidate satisfies constraint under compatible matching.

    Unparseable input on either side is treated as incompatible.
    """
    try:
        wanted, found = parse(constraint), parse(candidate)
    except InvalidVersionError:
        return False
    return found.major == wanted.major and found >= wanted
