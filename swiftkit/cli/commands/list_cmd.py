"""
List command implementation.

Lists Swift versions present in the cache for a system.
"""

import logging

from swiftkit.cli.utils import settings_from_args, tool_cache_from_settings
from swiftkit.toolchain.system import cache_namespace, detect_system

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the list command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    settings = settings_from_args(args)
    cache = tool_cache_from_settings(settings)

    system_name = args.system or detect_system().name
    namespace = cache_namespace(system_name)

    versions = cache.list_versions(namespace)
    if not versions:
        logger.info(f"No cached toolchains for {system_name}")
        return 0

    for version in versions:
        path = cache.entry_path(namespace, version)
        info = cache.get_entry_info(namespace, version) or {}
        size = info.get("size_mb")
        if size is not None:
            print(f"{version}\t{size:.1f} MB\t{path}")
        else:
            print(f"{version}\t{path}")

    return 0
