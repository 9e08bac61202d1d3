# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Command line front end.

    seed install PACKAGE... [--version VERSION] [--remote REMOTE]
                            [--dependencies | --no-dependencies]

Success is silent. A failure prints a single "error: <message>" line to
stderr and exits with the error's exit code.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from seed.core.config import reload_config
from seed.core.errors import SeedError, sanitize_error_for_user
from seed.core.logging import configure_logging
from seed.install.command import run_install
from seed.models import InstallRequest
from seed.remotes.registry import RemoteRegistry
from seed.sources import DirectorySource

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="seed",
        description="Seed - install packages from local directories and remotes",
    )
    parser.add_argument("--config",
                        dest="config",
                        help="Path to config.yaml (default: $SEED_CONFIG or ~/.seed/config.yaml)",
                        action="store", type=str)

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    install = commands.add_parser("install", help="Install one or more packages")
    install.add_argument("packages",
                         metavar="PACKAGE",
                         help="Package id, or path to a package directory",
                         nargs="*")
    install.add_argument("-V", "--version",
                         dest="version",
                         help="Exact version to install (one package only)",
                         action="store", type=str)
    install.add_argument("-r", "--remote",
                         dest="remote",
                         help="Install from this remote only (configured name or URL)",
                         action="store", type=str)

    deps = install.add_mutually_exclusive_group()
    deps.add_argument("-D", "--dependencies",
                      dest="dependencies",
                      help="Always install dependencies",
                      action="store_const", const=True, default=None)
    deps.add_argument("-n", "--no-dependencies",
                      dest="dependencies",
                      help="Never install dependencies",
                      action="store_const", const=False)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the seed command line and return the process exit status."""
    args = build_parser().parse_args(argv)

    try:
        config = reload_config(args.config)
        configure_logging(config)

        request = InstallRequest(
            package_ids=args.packages,
            version=args.version,
            remote=args.remote,
            dependencies=args.dependencies,
        )
        sources = [DirectorySource(config.install_root_path, config.state_path)]
        registry = RemoteRegistry(config)
        asyncio.run(run_install(request, sources, registry))

    except SeedError as e:
        logger.debug("Install failed", extra={"error": e.to_dict()})
        print(f"error: {e.message}", file=sys.stderr)
        return e.exit_code
    except Exception as e:
        logger.debug("Install failed", exc_info=True)
        print(f"error: {sanitize_error_for_user(e)}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
