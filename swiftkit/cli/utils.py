"""
Shared utilities for CLI commands.

Provides settings loading and system resolution common to every command,
and consistent error output.
"""

import logging
import sys
from typing import Optional

from swiftkit.config.settings import InstallerSettings, load_settings
from swiftkit.core.tool_cache import DirectoryToolCache
from swiftkit.toolchain.system import SystemDescriptor

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Management
# ============================================================================


def settings_from_args(args) -> InstallerSettings:
    """
    Load settings honoring the global --config and --cache-dir options.

    Raises:
        ConfigError: If the configuration is invalid
    """
    settings = load_settings(getattr(args, "config", None))

    cache_dir = getattr(args, "cache_dir", None)
    if cache_dir is not None:
        settings.cache_dir = cache_dir
        logger.debug(f"Using cache directory from command line: {cache_dir}")

    return settings


def system_from_args(args) -> Optional[SystemDescriptor]:
    """
    Build a SystemDescriptor from --system/--system-version.

    Returns None when neither is given. A missing part is left blank and
    filled from the host by the installer after its platform check.
    """
    name = getattr(args, "system", None)
    version = getattr(args, "system_version", None)

    if name is None and version is None:
        return None

    return SystemDescriptor(name=name or "", version=version or "")


def tool_cache_from_settings(settings: InstallerSettings) -> DirectoryToolCache:
    """Tool cache rooted at the configured cache directory."""
    return DirectoryToolCache(settings.cache_dir, lock_timeout=settings.lock_timeout)


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)
