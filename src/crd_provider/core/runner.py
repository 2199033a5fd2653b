"""Subprocess runner for external CLIs."""

from __future__ import annotations

import logging
import subprocess

from crd_provider.errors import ProviderError

logger = logging.getLogger(__name__)


class RunError(ProviderError):
    """An external command failed or could not be started."""

    def __init__(self, cmd: list[str], message: str, returncode: int | None = None) -> None:
        self.cmd = cmd
        self.returncode = returncode
        super().__init__(f"{' '.join(cmd)}: {message}")


def run(cmd: list[str]) -> str:
    """Run a command and return its stdout.

    Raises RunError if the binary is missing, exits non-zero or writes
    output that is not UTF-8.
    """
    logger.debug("Running %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except FileNotFoundError as e:
        raise RunError(cmd, f"executable not found: {cmd[0]}") from e
    except UnicodeDecodeError as e:
        raise RunError(cmd, f"output is not valid UTF-8: {e}") from e

    if result.returncode != 0:
        stderr = result.stderr.strip() or "no error output"
        raise RunError(cmd, stderr, returncode=result.returncode)

    return result.stdout
