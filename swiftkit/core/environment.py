"""
Executable search path registration.

Adds an installed toolchain's bin directory to PATH for the current process
and, when running inside a GitHub Actions job, appends it to the file named by
GITHUB_PATH so later steps of the job see it too.
"""

import logging
import os
from pathlib import Path
from typing import MutableMapping, Optional

from swiftkit.core.interfaces import PathRegistry

logger = logging.getLogger(__name__)

GITHUB_PATH_VAR = "GITHUB_PATH"


class EnvironmentPathRegistry(PathRegistry):
    """PathRegistry that edits an environment mapping (os.environ by default)."""

    def __init__(self, environ: Optional[MutableMapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def add_path(self, directory: Path) -> None:
        directory_str = str(directory)

        path_file = self.environ.get(GITHUB_PATH_VAR)
        if path_file:
            with open(path_file, "a", encoding="utf-8") as f:
                f.write(f"{directory_str}{os.linesep}")
            logger.debug(f"Appended {directory_str} to {path_file}")

        current = self.environ.get("PATH", "")
        entries = current.split(os.pathsep) if current else []
        if directory_str not in entries:
            self.environ["PATH"] = os.pathsep.join([directory_str] + entries)
            logger.debug(f"Prepended {directory_str} to PATH")


__all__ = ["EnvironmentPathRegistry", "GITHUB_PATH_VAR"]
