"""
Install command implementation.

Installs a Swift toolchain into the cache and adds its bin directory to PATH.
"""

import logging

from swiftkit.cli.utils import print_error, settings_from_args, system_from_args
from swiftkit.toolchain.installer import SwiftInstaller

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for any failed install)
    """
    settings = settings_from_args(args)
    system = system_from_args(args)

    installer = SwiftInstaller.from_settings(settings)
    result = installer.install(args.swift_version, system, force=args.force)

    if not result.ok:
        print_error(
            f"Swift {args.swift_version} was not installed",
            details=str(result.error),
        )
        return 1

    source = "cache" if result.was_cached else "download"
    logger.info(f"Swift {args.swift_version} ready ({source}): {result.bin_path}")
    print(result.bin_path)
    return 0
