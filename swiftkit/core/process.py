"""
External process execution.

gpg is the only external tool the installer drives; it is run through this
module so the exit status is the single success signal and its output ends up
in the debug log.
"""

import logging
import subprocess
from typing import Optional, Sequence

from swiftkit.core.exceptions import ProcessError
from swiftkit.core.interfaces import ProcessRunner

logger = logging.getLogger(__name__)


class SubprocessRunner(ProcessRunner):
    """ProcessRunner backed by subprocess.run."""

    def __init__(self, timeout: Optional[float] = None):
        """
        Args:
            timeout: Seconds to wait for each command (None waits indefinitely)
        """
        self.timeout = timeout

    def run(self, args: Sequence[str]) -> int:
        args = [str(a) for a in args]
        logger.debug(f"Running: {' '.join(args)}")

        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise ProcessError(f"Command not found: {args[0]}") from e
        except subprocess.TimeoutExpired as e:
            raise ProcessError(
                f"Command timed out after {self.timeout}s: {' '.join(args)}"
            ) from e

        if result.stdout:
            logger.debug(result.stdout.rstrip())
        if result.returncode != 0 and result.stderr:
            logger.error(result.stderr.rstrip())
        elif result.stderr:
            # gpg writes status messages to stderr even on success
            logger.debug(result.stderr.rstrip())

        return result.returncode


__all__ = ["SubprocessRunner"]
