"""Hand off to the system SSH client."""

import logging
import shutil
import subprocess

logger = logging.getLogger(__name__)


class LaunchError(RuntimeError):
    """Raised when the SSH client cannot be started."""


def build_command(alias: str, ssh_binary: str = "ssh") -> list[str]:
    """Command line that opens an interactive session to alias."""
    return [ssh_binary, alias]


def connect(alias: str, ssh_binary: str = "ssh") -> int:
    """Run the SSH client for alias with inherited stdio. Returns its exit code."""
    if shutil.which(ssh_binary) is None:
        raise LaunchError(f"SSH client not found: {ssh_binary}")

    logger.info(f"ssh start: {alias}")
    result = subprocess.run(build_command(alias, ssh_binary))
    if result.returncode != 0:
        logger.warning(f"ssh exited with code {result.returncode} for {alias}")
    logger.info(f"ssh end: {alias}")
    return result.returncode
