"""
URL command implementation.

Prints where a release is downloaded from without downloading it.
"""

from swiftkit.cli.utils import settings_from_args
from swiftkit.toolchain.fetcher import resolve_artifact


def run(args) -> int:
    """
    Run the url command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    settings = settings_from_args(args)
    location = resolve_artifact(
        args.swift_version, args.system_version, settings.download_host
    )

    print(f"archive:   {location.archive_name}")
    print(f"payload:   {location.payload_url}")
    print(f"signature: {location.signature_url}")
    return 0
