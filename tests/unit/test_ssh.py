"""Tests for SSH key and config management."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from gitswitchhub.exceptions import SSHError
from gitswitchhub.ssh import SSHManager, convert_remote_to_ssh


@pytest.fixture
def ssh_dir(tmp_path: Path) -> Path:
    return tmp_path / ".ssh"


@pytest.fixture
def manager(ssh_dir: Path) -> SSHManager:
    return SSHManager(ssh_dir)


def fake_keygen(args, **kwargs):
    """Writes the files ssh-keygen would create."""
    key_path = Path(args[args.index("-f") + 1])
    key_path.write_text("PRIVATE")
    key_path.with_name(f"{key_path.name}.pub").write_text(
        "ssh-ed25519 AAAAC3Nza alice@gitswitchhub\n"
    )
    return subprocess.CompletedProcess(args, 0, "", "")


class TestGenerateKey:
    def test_generates_ed25519_key(self, manager: SSHManager, ssh_dir: Path) -> None:
        with patch("gitswitchhub.ssh.subprocess.run", side_effect=fake_keygen) as run:
            key = manager.generate_key("alice")

        args = run.call_args.args[0]
        assert args[:3] == ["ssh-keygen", "-t", "ed25519"]
        assert args[args.index("-N") + 1] == ""
        assert key.key_id == "gitswitchhub_alice"
        assert key.private_key_path == str(ssh_dir / "gitswitchhub_alice")
        assert key.public_key == "ssh-ed25519 AAAAC3Nza alice@gitswitchhub"

    def test_refuses_to_overwrite(self, manager: SSHManager, ssh_dir: Path) -> None:
        ssh_dir.mkdir()
        (ssh_dir / "gitswitchhub_alice").write_text("existing")

        with pytest.raises(SSHError, match="already exists"):
            manager.generate_key("alice")

    def test_keygen_failure(self, manager: SSHManager) -> None:
        with (
            patch(
                "gitswitchhub.ssh.subprocess.run",
                return_value=subprocess.CompletedProcess([], 1, "", "bad things"),
            ),
            pytest.raises(SSHError) as exc_info,
        ):
            manager.generate_key("alice")
        assert exc_info.value.details["stderr"] == "bad things"

    def test_keygen_missing(self, manager: SSHManager) -> None:
        with (
            patch("gitswitchhub.ssh.subprocess.run", side_effect=FileNotFoundError),
            pytest.raises(SSHError, match="ssh-keygen not found"),
        ):
            manager.generate_key("alice")


class TestSSHConfig:
    def test_render(self, manager: SSHManager, ssh_dir: Path) -> None:
        rendered = manager.host_config("alice").render()
        assert rendered == (
            "Host github-alice\n"
            "    HostName github.com\n"
            "    User git\n"
            f"    IdentityFile {ssh_dir / 'gitswitchhub_alice'}\n"
            "    IdentitiesOnly yes\n"
        )

    def test_add_is_idempotent(self, manager: SSHManager) -> None:
        assert manager.add_to_ssh_config("alice") is True
        assert manager.add_to_ssh_config("alice") is False

        content = manager.config_path.read_text()
        assert content.count("Host github-alice") == 1

    def test_add_keeps_existing_entries(self, manager: SSHManager, ssh_dir: Path) -> None:
        ssh_dir.mkdir()
        manager.config_path.write_text("Host work\n    HostName work.example.com")

        manager.add_to_ssh_config("alice")

        content = manager.config_path.read_text()
        assert content.startswith("Host work\n    HostName work.example.com\n\nHost github-alice\n")

    def test_remove_only_that_block(self, manager: SSHManager, ssh_dir: Path) -> None:
        ssh_dir.mkdir()
        manager.config_path.write_text("Host work\n    HostName work.example.com\n")
        manager.add_to_ssh_config("alice")
        manager.add_to_ssh_config("bob")

        assert manager.remove_from_ssh_config("alice") is True

        content = manager.config_path.read_text()
        assert "github-alice" not in content
        assert "Host work\n" in content
        assert "Host github-bob\n" in content
        assert "gitswitchhub_bob" in content
        assert manager.remove_from_ssh_config("alice") is False

    def test_remove_without_config(self, manager: SSHManager) -> None:
        assert manager.remove_from_ssh_config("alice") is False


class TestConvertRemote:
    def test_converts_https_remote(self) -> None:
        assert (
            convert_remote_to_ssh("https://github.com/org/repo.git", "alice")
            == "git@github-alice:org/repo.git"
        )

    @pytest.mark.parametrize(
        "url",
        ["git@github.com:org/repo.git", "https://gitlab.com/org/repo", "https://github.com/"],
    )
    def test_rejects_other_urls(self, url: str) -> None:
        with pytest.raises(SSHError):
            convert_remote_to_ssh(url, "alice")
