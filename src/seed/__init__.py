# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Seed - package installer core.

Resolves requested packages against a priority-ordered set of remotes,
stages their artifacts, installs their dependency graph and hands each
package to a destination source, installing every package exactly once
per invocation.
"""

__version__ = "1.0.0"
