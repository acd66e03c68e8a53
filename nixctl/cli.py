import logging

import typer

from nixctl.commands import flake, node, reported_errors, secrets, server
from nixctl.config import load_environment, report_environment
from nixctl.logging import setup_logging
from nixctl.modules import flake as flake_ops

app = typer.Typer(help="NixOS/K3s cluster node provisioning and deployment.")

# Add all command groups
app.add_typer(flake.app, name="flake")
app.add_typer(node.app, name="node")
app.add_typer(server.app, name="server")
app.add_typer(secrets.app, name="secrets")


# Global options callback
@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
    env_file: str = typer.Option(".env", "--env-file", help="Environment file to load"),
):
    """nixctl - NixOS cluster management CLI.

    Without a command, validates the flake.
    """
    # Settings from the env file (LOG_LEVEL included) must be in place before logging is set up
    with reported_errors():
        loaded = load_environment(env_file)
    setup_logging(debug)
    if debug:
        logging.debug("Debug mode enabled")
    report_environment(env_file, loaded)

    if ctx.invoked_subcommand is None:
        with reported_errors():
            flake_ops.check()


if __name__ == "__main__":
    app()
