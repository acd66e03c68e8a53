"""Configuration management for the nixctl application."""
import logging
import os
from pathlib import Path

from dotenv import dotenv_values, load_dotenv

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

# Variables reported on startup when a .env file is loaded
CRITICAL_ENV_VARS = (
    "AGE_PRIVATE_KEY",
    "K3S_TOKEN",
    "TAILSCALE_AUTH_KEY",
    "HCLOUD_TOKEN",
    "GITHUB_TOKEN",
)


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name, "")
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be a whole number of seconds, got '{value}'") from None


class Config:
    """Application configuration with sensible defaults.

    Values are refreshed from the environment by ``reload()``, which runs
    after the .env file has been loaded.
    """

    # SSH
    DEFAULT_SSH_KEY: str = "~/.ssh/id_rsa"

    # Waits (in seconds)
    REBOOT_WAIT: int = 30
    SERVER_BOOT_WAIT: int = 60

    # Paths
    SECRETS_FILE: str = "sops.secrets.yaml"
    REMOTE_FLAKE_DIR: str = "/root/k3s-nixos"
    KUBECONFIG_DIR: str = "~/.kube"

    # Self-hosted control node
    CONTROL_NODE: str = "thinkcenter-1"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @classmethod
    def reload(cls) -> None:
        """Re-read every setting from the environment.

        Raises:
            ConfigError: If a numeric setting is not a number
        """
        cls.REBOOT_WAIT = _int_env("NIXCTL_REBOOT_WAIT", 30)
        cls.SERVER_BOOT_WAIT = _int_env("NIXCTL_SERVER_BOOT_WAIT", 60)
        cls.SECRETS_FILE = os.getenv("NIXCTL_SECRETS_FILE") or "sops.secrets.yaml"
        cls.REMOTE_FLAKE_DIR = os.getenv("NIXCTL_REMOTE_FLAKE_DIR") or "/root/k3s-nixos"
        cls.KUBECONFIG_DIR = os.getenv("NIXCTL_KUBECONFIG_DIR") or "~/.kube"
        cls.CONTROL_NODE = os.getenv("NIXCTL_CONTROL_NODE") or "thinkcenter-1"
        cls.LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").upper()
        cls.LOG_FORMAT = os.getenv("LOG_FORMAT") or "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def load_environment(path: str = ".env") -> bool:
    """Load a local .env file into the process environment and refresh Config.

    Existing environment variables win over values from the file.

    Args:
        path: Location of the env file

    Returns:
        True if the file existed and was loaded
    """
    env_path = Path(path)
    loaded = env_path.is_file()
    if loaded:
        load_dotenv(env_path, override=False)
    Config.reload()
    return loaded


def report_environment(path: str, loaded: bool) -> None:
    """Log which critical variables the .env file provided, never their values."""
    if not loaded:
        logger.info(".env file not found, using existing environment variables")
        return

    logger.info(".env file loaded successfully")
    file_values = dotenv_values(path)
    for name in CRITICAL_ENV_VARS:
        if name not in file_values:
            logger.warning("Critical variable %s not found in .env", name)
        elif os.getenv(name):
            logger.info("Critical variable %s found in .env", name)
        else:
            logger.warning("Critical variable %s found in .env but not set in environment", name)


def require_env(name: str) -> str:
    """Return a required environment variable, rejecting empty values."""
    value = os.getenv(name, "")
    if not value:
        raise ConfigError(f"{name} environment variable must be set")
    return value


def env_or_default(name: str, default: str) -> str:
    """Return an optional environment variable, falling back to ``default`` when unset or empty."""
    value = os.getenv(name, "")
    if not value:
        logger.info("%s not set, defaulting to %s", name, default)
        return default
    return value


def expand_home(path: str) -> str:
    return os.path.expanduser(path)
