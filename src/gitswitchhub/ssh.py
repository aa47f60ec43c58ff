"""Per-account SSH keys and ``~/.ssh/config`` host aliases.

Each account gets an ed25519 key ``~/.ssh/gitswitchhub_<username>`` and a host
alias ``github-<username>``, so SSH remotes can pick an identity through the
host name: ``git@github-alice:org/repo.git``.
"""

import subprocess  # nosec B404 - only runs ssh-keygen with fixed arguments
from dataclasses import dataclass
from pathlib import Path

from structlog import get_logger

from gitswitchhub.core.system import get_ssh_dir
from gitswitchhub.exceptions import SSHError


logger = get_logger(__name__)

GITHUB_HOSTNAME = "github.com"
GITHUB_HTTPS_PREFIX = "https://github.com/"


@dataclass
class SSHKeyInfo:
    public_key: str
    private_key_path: str
    key_id: str


@dataclass
class SSHHostConfig:
    host: str
    hostname: str
    user: str
    identity_file: str

    def render(self) -> str:
        """The ``Host`` block for ``~/.ssh/config``."""
        return (
            f"Host {self.host}\n"
            f"    HostName {self.hostname}\n"
            f"    User {self.user}\n"
            f"    IdentityFile {self.identity_file}\n"
            f"    IdentitiesOnly yes\n"
        )


class SSHManager:
    """Generates keys and edits the SSH client config for accounts."""

    def __init__(self, ssh_dir: Path | None = None) -> None:
        self.ssh_dir = ssh_dir or get_ssh_dir()

    @staticmethod
    def key_name(username: str) -> str:
        return f"gitswitchhub_{username}"

    @property
    def config_path(self) -> Path:
        return self.ssh_dir / "config"

    def generate_key(self, username: str) -> SSHKeyInfo:
        """Create an ed25519 key pair without passphrase for ``username``.

        Raises:
            SSHError: If ssh-keygen is missing or fails

        """
        self.ssh_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
        key_id = self.key_name(username)
        private_key_path = self.ssh_dir / key_id
        public_key_path = self.ssh_dir / f"{key_id}.pub"

        if private_key_path.exists():
            raise SSHError(f"SSH key already exists: {private_key_path}")

        try:
            # nosec B603, B607 - hardcoded ssh-keygen command
            result = subprocess.run(
                [
                    "ssh-keygen",
                    "-t",
                    "ed25519",
                    "-f",
                    str(private_key_path),
                    "-C",
                    f"{username}@gitswitchhub",
                    "-N",
                    "",
                ],
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise SSHError("ssh-keygen not found", command="ssh-keygen") from e

        if result.returncode != 0:
            raise SSHError(
                "SSH key generation failed",
                command="ssh-keygen",
                stderr=result.stderr.strip(),
            )

        try:
            public_key = public_key_path.read_text().strip()
        except OSError as e:
            raise SSHError(f"Failed to read public key: {e}") from e

        logger.info("ssh_key_generated", username=username, key_id=key_id)
        return SSHKeyInfo(
            public_key=public_key,
            private_key_path=str(private_key_path),
            key_id=key_id,
        )

    def host_config(self, username: str) -> SSHHostConfig:
        return SSHHostConfig(
            host=f"github-{username}",
            hostname=GITHUB_HOSTNAME,
            user="git",
            identity_file=str(self.ssh_dir / self.key_name(username)),
        )

    def _read_config(self) -> str:
        if not self.config_path.exists():
            return ""
        try:
            return self.config_path.read_text()
        except OSError as e:
            raise SSHError(f"Cannot read {self.config_path}: {e}") from e

    def _write_config(self, content: str) -> None:
        try:
            self.ssh_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
            self.config_path.write_text(content)
            self.config_path.chmod(0o600)
        except OSError as e:
            raise SSHError(f"Cannot write {self.config_path}: {e}") from e

    def add_to_ssh_config(self, username: str) -> bool:
        """Append the account's host block unless it is already there.

        Returns:
            True if the config was changed

        """
        config = self.host_config(username)
        content = self._read_config()
        if any(
            line.strip() == f"Host {config.host}" for line in content.splitlines()
        ):
            return False

        if content and not content.endswith("\n"):
            content += "\n"
        separator = "\n" if content else ""
        self._write_config(f"{content}{separator}{config.render()}")
        logger.info("ssh_config_entry_added", host=config.host)
        return True

    def remove_from_ssh_config(self, username: str) -> bool:
        """Drop the account's host block, leaving the rest untouched.

        Returns:
            True if a block was removed

        """
        host_line = f"Host {self.host_config(username).host}"
        kept: list[str] = []
        skipping = False
        removed = False
        for line in self._read_config().splitlines(keepends=True):
            stripped = line.strip()
            if stripped == host_line:
                skipping = True
                removed = True
                continue
            if skipping and stripped.startswith(("Host ", "Match ")):
                skipping = False
            if not skipping:
                kept.append(line)

        if removed:
            self._write_config("".join(kept))
            logger.info("ssh_config_entry_removed", host=host_line[5:])
        return removed


def convert_remote_to_ssh(remote_url: str, username: str) -> str:
    """Rewrite an HTTPS GitHub remote to use the account's SSH host alias.

    Raises:
        SSHError: If the URL is not a GitHub HTTPS remote

    """
    if not remote_url.startswith(GITHUB_HTTPS_PREFIX):
        raise SSHError("Not a GitHub HTTPS URL")
    repo_path = remote_url[len(GITHUB_HTTPS_PREFIX) :]
    if not repo_path:
        raise SSHError("Invalid GitHub URL")
    return f"git@github-{username}:{repo_path}"
