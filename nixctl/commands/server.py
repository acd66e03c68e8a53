"""
Hetzner Cloud server commands.

Environment Variables:
- HCLOUD_TOKEN, HETZNER_SSH_KEY_NAME, PRIVATE_NETWORK_NAME, PLACEMENT_GROUP_NAME (required)
- HETZNER_LOCATION, HETZNER_IMAGE_NAME, CONTROL_PLANE_VM_TYPE (optional)
- HETZNER_DEFAULT_ENABLE_IPV4: used when IPV4 is omitted
"""
from typing import Optional

import typer

from . import reported_errors
from ..modules import hcloud, redeploy

app = typer.Typer(help="Recreate Hetzner Cloud servers")


@app.command("recreate")
def recreate_cmd(
    server_name: str = typer.Argument(..., help="Hetzner server name"),
    ipv4: Optional[str] = typer.Argument(None, help="Enable a public IPv4 address (true/false)"),
):
    """Delete a server and create it again with the same properties."""
    with reported_errors():
        hcloud.recreate_server(server_name, ipv4)


@app.command("redeploy")
def redeploy_cmd(
    server_name: str = typer.Argument(..., help="Hetzner server name"),
    config_name: str = typer.Argument(..., help="Flake configuration to install"),
    ipv4: Optional[str] = typer.Argument(None, help="Enable a public IPv4 address (true/false)"),
):
    """Recreate a server, then install a NixOS configuration onto it.

    Example:
        nixctl server redeploy cpx21-control-1 cpx21-control-1 true
    """
    with reported_errors():
        redeploy.delete_and_redeploy(server_name, config_name, ipv4)
