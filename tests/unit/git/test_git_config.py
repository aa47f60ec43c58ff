"""Tests for credential helper registration."""

import subprocess
from unittest.mock import patch

import pytest

from gitswitchhub.exceptions import GitConfigError
from gitswitchhub.git import helper_command, helper_status, install_helper


def completed(returncode: int = 0, stdout: str = "", stderr: str = ""):
    return subprocess.CompletedProcess(["git"], returncode, stdout, stderr)


@pytest.fixture
def installed_command():
    with patch(
        "gitswitchhub.git.config.shutil.which", return_value="/usr/local/bin/gitswitchhub"
    ):
        yield "!/usr/local/bin/gitswitchhub credential-helper"


def test_helper_command_uses_console_script(installed_command: str) -> None:
    assert helper_command() == installed_command


def test_helper_command_falls_back_to_module() -> None:
    with (
        patch("gitswitchhub.git.config.shutil.which", return_value=None),
        patch("gitswitchhub.git.config.sys.executable", "/opt/py/bin/python"),
    ):
        assert helper_command() == "!/opt/py/bin/python -m gitswitchhub credential-helper"


def test_install_replaces_existing_helpers(installed_command: str) -> None:
    with patch(
        "gitswitchhub.git.config.subprocess.run",
        side_effect=[completed(5), completed(0)],
    ) as run:
        assert install_helper() == installed_command

    commands = [call.args[0] for call in run.call_args_list]
    assert commands == [
        ["git", "config", "--global", "--unset-all", "credential.helper"],
        ["git", "config", "--global", "credential.helper", installed_command],
    ]


def test_install_failure(installed_command: str) -> None:
    with (
        patch(
            "gitswitchhub.git.config.subprocess.run",
            side_effect=[completed(0), completed(1, stderr="could not lock config")],
        ),
        pytest.raises(GitConfigError) as exc_info,
    ):
        install_helper()

    assert exc_info.value.details["stderr"] == "could not lock config"


def test_install_without_git() -> None:
    with (
        patch("gitswitchhub.git.config.subprocess.run", side_effect=FileNotFoundError),
        pytest.raises(GitConfigError, match="git executable not found"),
    ):
        install_helper()


def test_status_configured(installed_command: str) -> None:
    with patch(
        "gitswitchhub.git.config.subprocess.run",
        return_value=completed(0, stdout=f"{installed_command}\n"),
    ):
        status = helper_status()

    assert status.installed is True
    assert status.configured is True
    assert status.current == installed_command


def test_status_other_helper(installed_command: str) -> None:
    with patch(
        "gitswitchhub.git.config.subprocess.run",
        return_value=completed(0, stdout="osxkeychain\n"),
    ):
        status = helper_status()

    assert status.configured is False
    assert status.current == "osxkeychain"


def test_status_unset() -> None:
    with patch("gitswitchhub.git.config.subprocess.run", return_value=completed(1)):
        status = helper_status()

    assert status.installed is True
    assert status.configured is False
    assert status.current is None


def test_status_without_git() -> None:
    with patch("gitswitchhub.git.config.subprocess.run", side_effect=FileNotFoundError):
        status = helper_status()

    assert status.installed is False
