"""Blocking external command execution."""

from __future__ import annotations

import logging
import subprocess
from typing import Sequence

from chromash.errors import ChromashError, ErrorCode

logger = logging.getLogger(__name__)


def run_command(program: str, args: Sequence[str]) -> str:
    """Run *program* and return its stdout.

    Raises:
        ChromashError: ``COMMAND_NOT_FOUND`` if the binary is missing,
            ``PROCESS_FAILED`` with captured stderr on a non-zero exit.
    """
    argv = [program, *args]
    logger.debug("running %s", " ".join(argv))
    try:
        completed = subprocess.run(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
            check=False,
        )
    except FileNotFoundError as exc:
        raise ChromashError(
            ErrorCode.COMMAND_NOT_FOUND,
            message=f"Command not found: {program}",
            details={"original": str(exc)},
        ) from exc
    except OSError as exc:
        raise ChromashError(
            ErrorCode.PROCESS_FAILED,
            message=f"Could not start {program}: {exc}",
            details={"original": str(exc)},
        ) from exc

    if completed.returncode != 0:
        raise ChromashError(
            ErrorCode.PROCESS_FAILED,
            message=f"Process failed: {program} exited with status {completed.returncode}",
            details={"command": " ".join(argv), "stderr": completed.stderr.strip()},
        )
    return completed.stdout
