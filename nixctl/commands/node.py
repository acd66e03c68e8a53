"""
Node commands: resolve, deploy, rebuild and reinstall NixOS configurations.
"""
import typer

from . import reported_errors
from ..modules import deploy, flake, install

app = typer.Typer(help="Deploy and reinstall NixOS nodes")


@app.command("target")
def target_cmd(name: str = typer.Argument(..., help="Flake configuration name")):
    """Print the user@host deploy target of a configuration."""
    with reported_errors():
        typer.echo(str(flake.get_deploy_target(name)))


@app.command("deploy")
def deploy_cmd(name: str = typer.Argument(..., help="Flake configuration name")):
    """Deploy a configuration to its running host with deploy-rs.

    Example:
        nixctl node deploy cpx21-control-1
    """
    with reported_errors():
        deploy.deploy(name)


@app.command("rebuild")
def rebuild_cmd(name: str = typer.Argument(..., help="Flake configuration name")):
    """Pull the flake on the node and run nixos-rebuild switch there."""
    with reported_errors():
        deploy.rebuild(name)


@app.command("recreate")
def recreate_cmd(name: str = typer.Argument(..., help="Flake configuration name")):
    """Reinstall a node from scratch with nixos-anywhere.

    This is destructive: the target's disks are repartitioned.
    """
    with reported_errors():
        install.recreate_node(name)


@app.command("deploy-control")
def deploy_control_cmd():
    """Reinstall the self-hosted control node."""
    with reported_errors():
        install.deploy_control_node()
