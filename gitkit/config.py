"""Configuration for credentials and output limits"""

import configparser
import logging
import os
import platform
from dataclasses import dataclass
from typing import Optional, Any

from pathlib import Path

APP_NAME = "gitkit"

# 20 MiB, large enough for the tree listing of a sizable repository
DEFAULT_MAX_OUTPUT = 1024 * 1024 * 20

_home = os.path.expanduser("~")

xdg_config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.join(_home, ".config")

default_cfg = {
    "credentials": {"ssh_key": ""},
    "limits": {"max_output": str(DEFAULT_MAX_OUTPUT)},
}

if platform.system() == "Darwin":
    # macOS
    config_dir = Path("~/Library/Application Support/gitkit").expanduser()
else:
    # Linux or others
    config_dir = Path(os.path.join(xdg_config_home, APP_NAME))

logger = logging.getLogger(__name__)


def get_config_file():
    return config_dir / f"{APP_NAME}.cfg"


class ConfigAccessor:
    """
    A dict-like accessor for configuration files.

    Missing files, sections and keys fall back to the supplied default.

    Usage:
        config = ConfigAccessor()
        value = config.get('credentials', 'ssh_key', default='')
    """

    def __init__(self, config_path: Optional[Path] = None):
        if config_path is None:
            self.config_path = get_config_file()
        else:
            self.config_path = config_path

        self.config = configparser.ConfigParser()
        if self.config_path.exists():
            self.config.read(self.config_path)

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """
        Get a configuration value from the specified section and key.

        Args:
            section: The configuration section
            key: The configuration key
            default: Value to return if the section or key doesn't exist

        Returns:
            The configuration value if it exists, otherwise the default value
        """
        try:
            return self.config[section][key]
        except (KeyError, configparser.NoSectionError, configparser.NoOptionError):
            return default


# Create a global config accessor instance
config = ConfigAccessor()


@dataclass(frozen=True)
class Credential:
    """Transport credential: the private key used for ssh remotes."""

    ssh_key: Path

    def __str__(self) -> str:
        return str(self.ssh_key)


class CredentialStore:
    """
    Holder for an optional credential.

    A store is owned by a session (see ``gitkit.mirror.Mirror``) and read at
    every entry call, so a credential set once is used by all later calls.
    Not synchronized; the last write wins.
    """

    def __init__(self, credential: Optional[Credential] = None):
        self._credential = credential

    def get(self) -> Optional[Credential]:
        return self._credential

    def set(self, credential: Optional[Credential]) -> None:
        self._credential = credential


def get_ssh_key() -> Optional[Path]:
    """
    Get the configured ssh key path.

    The ``GITKIT_SSH_KEY`` environment variable takes precedence over the
    ``[credentials] ssh_key`` entry of the config file.
    """
    value = os.environ.get("GITKIT_SSH_KEY") or config.get(
        "credentials", "ssh_key", default_cfg["credentials"]["ssh_key"]
    )
    if not value:
        return None
    return Path(value).expanduser()


def load_credential() -> Optional[Credential]:
    """Build a credential from configuration, or None if no key is configured."""
    ssh_key = get_ssh_key()
    if ssh_key is None:
        return None
    return Credential(ssh_key=ssh_key)


def get_max_output() -> int:
    """
    Get the capture cap, in bytes, for command output.

    Returns:
        ``GITKIT_MAX_OUTPUT`` or ``[limits] max_output``, defaulting to 20 MiB
    """
    value = os.environ.get("GITKIT_MAX_OUTPUT") or config.get(
        "limits", "max_output", default_cfg["limits"]["max_output"]
    )
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(
            f"Invalid max_output value {value!r}, using {DEFAULT_MAX_OUTPUT}"
        )
        return DEFAULT_MAX_OUTPUT
