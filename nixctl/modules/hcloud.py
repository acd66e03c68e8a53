"""
Hetzner Cloud server recreation through the hcloud CLI.
"""
import logging
import os
from dataclasses import dataclass
from typing import List, Optional

from . import flake, shell
from ..config import env_or_default, require_env
from ..exceptions import CommandError, ConfigError, StepError

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "ash"
DEFAULT_IMAGE = "debian-12"
DEFAULT_SERVER_TYPE = "cpx21"


def parse_bool_flag(value: str) -> bool:
    """Parse a ``true``/``false`` command-line flag, case-insensitively."""
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ConfigError(f"ipv4 flag must be either 'true' or 'false', got '{value}'")


def resolve_ipv4(value: Optional[str]) -> bool:
    """Resolve the IPv4 flag, falling back to HETZNER_DEFAULT_ENABLE_IPV4 when omitted."""
    if not value:
        return os.getenv("HETZNER_DEFAULT_ENABLE_IPV4", "").lower() == "true"
    return parse_bool_flag(value)


@dataclass
class ServerSpec:
    """Properties of a cloud server to create."""
    name: str
    server_type: str
    image: str
    location: str
    ssh_key_name: str
    network: str
    placement_group: str
    enable_ipv4: bool = False

    @property
    def datacenter(self) -> str:
        return f"{self.location}-dc1"

    def create_args(self) -> List[str]:
        args = [
            "server", "create", self.name,
            "--server-type", self.server_type,
            "--image", self.image,
            "--datacenter", self.datacenter,
            "--ssh-key", self.ssh_key_name,
            "--network", self.network,
            "--placement-group", self.placement_group,
        ]
        if self.enable_ipv4:
            args.append("--enable-ipv4")
        return args


def server_spec_from_env(name: str, ipv4: Optional[str] = None) -> ServerSpec:
    """Build a ServerSpec from the environment.

    The API token is only validated here; hcloud reads HCLOUD_TOKEN itself.
    """
    require_env("HCLOUD_TOKEN")
    ssh_key_name = require_env("HETZNER_SSH_KEY_NAME")
    network = require_env("PRIVATE_NETWORK_NAME")
    placement_group = require_env("PLACEMENT_GROUP_NAME")

    return ServerSpec(
        name=name,
        server_type=env_or_default("CONTROL_PLANE_VM_TYPE", DEFAULT_SERVER_TYPE),
        image=env_or_default("HETZNER_IMAGE_NAME", DEFAULT_IMAGE),
        location=env_or_default("HETZNER_LOCATION", DEFAULT_LOCATION),
        ssh_key_name=ssh_key_name,
        network=network,
        placement_group=placement_group,
        enable_ipv4=resolve_ipv4(ipv4),
    )


def recreate_server(name: str, ipv4: Optional[str] = None, check_flake: bool = True) -> ServerSpec:
    """Delete a server (if present) and create it again with the same name.

    A deleted server is not restored if creation fails.

    Raises:
        ConfigError: On missing environment or a bad ipv4 flag
        StepError: If the delete or create call fails
    """
    spec = server_spec_from_env(name, ipv4)

    if check_flake:
        flake.check()

    logger.info(f"♻️ Recreating server {name} with IPv4 enabled: {spec.enable_ipv4}...")

    logger.info("🗑️ Deleting existing server...")
    try:
        shell.run(["hcloud", "server", "delete", name, "--force", "--ignore-not-found"])
    except CommandError as e:
        raise StepError("delete server", str(e)) from e
    logger.info(f"Server {name} deleted (or did not exist).")

    logger.info("🚀 Creating new server...")
    try:
        shell.run(["hcloud", *spec.create_args()])
    except CommandError as e:
        raise StepError("create server", str(e)) from e

    logger.info(f"✅ Server {name} recreated successfully.")
    return spec
