import typer

from . import reported_errors
from ..modules import flake

app = typer.Typer(help="Validate and inspect the cluster flake")


@app.command("check")
def check_cmd():
    """Run `nix flake check`."""
    with reported_errors():
        flake.check()


@app.command("update")
def update_cmd():
    """Update all flake inputs."""
    with reported_errors():
        flake.update()


@app.command("show")
def show_cmd():
    """Show flake outputs."""
    with reported_errors():
        flake.show()
