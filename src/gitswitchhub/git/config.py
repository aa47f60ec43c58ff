"""Registering gitswitchhub as git's global credential helper."""

import shlex
import shutil
import subprocess  # nosec B404 - only runs git with fixed arguments
import sys
from dataclasses import dataclass

from structlog import get_logger

from gitswitchhub.exceptions import GitConfigError


logger = get_logger(__name__)

HELPER_SUBCOMMAND = "credential-helper"


@dataclass
class GitHelperStatus:
    installed: bool
    configured: bool
    current: str | None = None


def helper_command() -> str:
    """The ``credential.helper`` value that runs this installation.

    The leading ``!`` makes git run it as a shell command.
    """
    executable = shutil.which("gitswitchhub")
    if executable:
        return f"!{shlex.quote(executable)} {HELPER_SUBCOMMAND}"
    return f"!{shlex.quote(sys.executable)} -m gitswitchhub {HELPER_SUBCOMMAND}"


def _run_git(*args: str) -> subprocess.CompletedProcess[str]:
    try:
        # nosec B603, B607 - hardcoded git command
        return subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as e:
        raise GitConfigError("git executable not found", command="git") from e


def install_helper() -> str:
    """Replace every global credential helper with gitswitchhub.

    Returns:
        The installed helper command

    Raises:
        GitConfigError: If git refuses the new setting

    """
    command = helper_command()

    # Exit status 5 just means there was nothing to unset
    _run_git("config", "--global", "--unset-all", "credential.helper")

    result = _run_git("config", "--global", "credential.helper", command)
    if result.returncode != 0:
        raise GitConfigError(
            "Failed to set credential.helper",
            command="git config --global credential.helper",
            stderr=result.stderr.strip(),
        )
    logger.info("git_helper_installed", helper=command)
    return command


def helper_status() -> GitHelperStatus:
    """Whether git is available and points at this installation."""
    try:
        result = _run_git("config", "--global", "credential.helper")
    except GitConfigError:
        return GitHelperStatus(installed=False, configured=False)

    if result.returncode != 0:
        return GitHelperStatus(installed=True, configured=False)

    current = result.stdout.strip()
    return GitHelperStatus(
        installed=True,
        configured=current == helper_command(),
        current=current or None,
    )
