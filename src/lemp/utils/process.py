"""Subprocess helpers."""

import logging
import subprocess
from dataclasses import dataclass
from typing import Dict, List, Optional


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
    capture_output: bool = True,
    timeout: Optional[int] = None,
    env: Optional[Dict[str, str]] = None,
) -> CommandResult:
    """Run a command and wait for it to finish.

    With ``capture_output=False`` the child shares our terminal, so long
    running tools such as ansible-playbook stream their output live.
    """
    logger.debug(f"Running command: {' '.join(cmd)}")

    process = subprocess.run(
        cmd,
        stdout=subprocess.PIPE if capture_output else None,
        stderr=subprocess.PIPE if capture_output else None,
        text=True,
        timeout=timeout,
        env=env,
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
