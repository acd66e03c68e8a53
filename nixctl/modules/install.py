"""
Bare-metal (re)installation of NixOS nodes with nixos-anywhere.

The installer wipes the target, partitions it with disko, generates a
nixos-facter hardware report and copies the staged age key onto the new
system so sops-nix can decrypt secrets on first boot.
"""
import logging
import os
import tempfile
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from . import flake, shell
from .flake import DeployTarget
from ..config import Config, expand_home, require_env
from ..exceptions import CommandError, ConfigError, StepError

logger = logging.getLogger(__name__)

AGE_KEY_PREFIX = "AGE-SECRET-KEY-"
AGE_KEY_RELPATH = Path("etc", "sops", "age", "key.txt")
FACTER_REPORT_PATH = "/tmp/facter.json"
REMOTE_KUBECONFIG = "/etc/rancher/k3s/k3s.yaml"


def resolve_ssh_key() -> str:
    """Return the SSH private key path from MAGE_SSH_KEY or the default.

    Raises:
        ConfigError: If the key file does not exist
    """
    ssh_key = os.getenv("MAGE_SSH_KEY", "")
    if not ssh_key:
        ssh_key = Config.DEFAULT_SSH_KEY
        logger.info(f"MAGE_SSH_KEY environment variable not set, using default: {ssh_key}")

    ssh_key = expand_home(ssh_key)
    if not os.path.exists(ssh_key):
        raise ConfigError(f"SSH key not found at {ssh_key}")
    logger.info(f"🔐 Using SSH key: {ssh_key}")
    return ssh_key


@contextmanager
def staged_age_key(age_key: str) -> Iterator[str]:
    """Write the age key into a temporary ``etc/sops/age/key.txt`` tree.

    Yields the root of the tree, suitable for ``--extra-files``. The tree
    is removed when the block exits, whether or not it raised.
    """
    if not age_key.startswith(AGE_KEY_PREFIX):
        raise ConfigError(f"AGE_PRIVATE_KEY has invalid format, should start with {AGE_KEY_PREFIX}")

    with tempfile.TemporaryDirectory(prefix="nixos-anywhere-age-key") as temp_dir:
        key_dir = Path(temp_dir)
        for part in AGE_KEY_RELPATH.parent.parts:
            key_dir = key_dir / part
            key_dir.mkdir(mode=0o700)
        key_path = key_dir / AGE_KEY_RELPATH.name
        fd = os.open(key_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w") as f:
            f.write(age_key)
        logger.info(f"AGE key written to temporary path {key_path} for deployment")
        yield temp_dir


def nixos_anywhere_args(config_name: str, target: DeployTarget, ssh_key: str, extra_files: str) -> List[str]:
    return [
        "nixos-anywhere",
        "--debug",
        "-f", f".#{config_name}",
        "--generate-hardware-config", "nixos-facter", FACTER_REPORT_PATH,
        "--extra-files", extra_files,
        "--substitute-on-destination",
        "--copy-host-keys",
        "-i", ssh_key,
        str(target),
    ]


def kubeconfig_path(config_name: str) -> Path:
    return Path(expand_home(Config.KUBECONFIG_DIR)) / f"k3s-{config_name}.yaml"


def fetch_kubeconfig(target: DeployTarget, ssh_key: str, dest: Path) -> Optional[Path]:
    """Copy the K3s kubeconfig from a freshly installed node.

    Failure to fetch is not fatal: K3s may still be starting, or the node
    may not be a control-plane node.

    Returns:
        The written path, or None if the fetch failed
    """
    logger.info("📥 Attempting to copy K3s configuration file from the server...")
    try:
        content = shell.output([
            "ssh",
            "-i", ssh_key,
            "-o", "StrictHostKeyChecking=no",
            "-o", "UserKnownHostsFile=/dev/null",
            str(target),
            f"sudo cat {REMOTE_KUBECONFIG}",
        ])
    except CommandError as e:
        logger.warning(
            f"⚠️ Failed to copy k3s.yaml from {target}. This might be expected if K3s isn't "
            f"fully up yet or if this is not a control plane node: {e}"
        )
        return None

    try:
        dest.parent.mkdir(parents=True, exist_ok=True, mode=0o755)
        fd = os.open(dest, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w") as f:
            f.write(content)
        os.chmod(dest, 0o600)
    except OSError as e:
        raise StepError(f"write kubeconfig from {target} to {dest}", str(e)) from e

    logger.info(f"✅ K3s config copied to {dest}")
    logger.info(f"To use it, run: export KUBECONFIG={dest}")
    return dest


def recreate_node(config_name: str) -> Optional[Path]:
    """Reinstall a node from scratch with nixos-anywhere.

    Returns:
        Path of the fetched kubeconfig, or None if it could not be fetched

    Raises:
        EvalError: If the deploy target cannot be resolved
        ConfigError: On a missing SSH key or a missing/malformed age key
        StepError: If the installer fails or the kubeconfig cannot be written
    """
    target = flake.get_deploy_target(config_name)
    ssh_key = resolve_ssh_key()
    age_key = require_env("AGE_PRIVATE_KEY")

    with staged_age_key(age_key) as extra_files:
        args = nixos_anywhere_args(config_name, target, ssh_key, extra_files)
        logger.info(f"🚀 Running nixos-anywhere to deploy NixOS to {target}...")
        logger.debug("nixos-anywhere args: %s", args)
        try:
            shell.run(args)
        except CommandError as e:
            raise StepError(f"install NixOS on {target}", str(e)) from e

    logger.info(f"⏳ Waiting {Config.REBOOT_WAIT}s for {target.host} to reboot and become available...")
    time.sleep(Config.REBOOT_WAIT)

    fetched = fetch_kubeconfig(target, ssh_key, kubeconfig_path(config_name))

    logger.info(f"✅ Node '{config_name}' recreated and configured. Tailscale and K3s should be setting up.")
    return fetched


def deploy_control_node() -> Optional[Path]:
    """Reinstall the self-hosted control node."""
    logger.info(f"Deploying self-hosted control node ({Config.CONTROL_NODE})...")
    return recreate_node(Config.CONTROL_NODE)
