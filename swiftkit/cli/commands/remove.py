"""
Remove command implementation.

Removes a Swift version from the cache.
"""

import logging

from swiftkit.cli.utils import print_error, settings_from_args, tool_cache_from_settings
from swiftkit.toolchain.system import cache_namespace, detect_system

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the remove command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 if removed, 1 if the version was not cached)
    """
    settings = settings_from_args(args)
    cache = tool_cache_from_settings(settings)

    system_name = args.system or detect_system().name
    namespace = cache_namespace(system_name)

    if not cache.remove(namespace, args.swift_version):
        print_error(f"Swift {args.swift_version} is not cached for {system_name}")
        return 1

    return 0
