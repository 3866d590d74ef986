"""Subprocess helpers."""

import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional


logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Result from running a command."""
    returncode: int
    stdout: str = ""
    stderr: str = ""


def run_command(
    cmd: List[str],
    check: bool = True,
    timeout: Optional[int] = None,
) -> CommandResult:
    """Run a command to completion, capturing its output."""
    logger.debug(f"Running command: {' '.join(cmd)}")

    process = subprocess.run(
        cmd,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        timeout=timeout,
    )

    result = CommandResult(
        returncode=process.returncode,
        stdout=process.stdout or "",
        stderr=process.stderr or "",
    )

    if check and process.returncode != 0:
        error = subprocess.CalledProcessError(process.returncode, cmd)
        error.stdout = result.stdout
        error.stderr = result.stderr
        raise error

    return result
