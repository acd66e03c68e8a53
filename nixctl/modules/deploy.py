"""
Updates of already-installed nodes, via deploy-rs or an in-place rebuild.
"""
import logging
import shlex

from . import flake, shell
from ..config import Config
from ..exceptions import CommandError, StepError

logger = logging.getLogger(__name__)


def deploy(config_name: str) -> None:
    """Validate the flake, then push the configuration with deploy-rs.

    deploy-rs reads the host and user from ``deploy.nodes.<name>`` itself.
    """
    flake.check()

    logger.info(f"🚀 Deploying NixOS configuration '{config_name}' via deploy-rs...")
    try:
        shell.run(["deploy-rs", f".#{config_name}"])
    except CommandError as e:
        raise StepError(f"deploy '{config_name}'", str(e)) from e
    logger.info(f"✅ Deployed '{config_name}'")


def rebuild_command(config_name: str) -> str:
    flake_dir = shlex.quote(Config.REMOTE_FLAKE_DIR)
    flake_ref = shlex.quote(f".#{config_name}")
    return f"cd {flake_dir} && git pull && nixos-rebuild switch --flake {flake_ref}"


def rebuild(config_name: str) -> None:
    """Run ``nixos-rebuild switch`` on the node against its local flake checkout."""
    target = flake.get_deploy_target(config_name)

    logger.info(f"🔧 Rebuilding NixOS configuration '{config_name}' on {target}...")
    logger.info(f"This assumes the flake checkout at {Config.REMOTE_FLAKE_DIR} on the target can be pulled.")
    try:
        shell.run(["ssh", str(target), rebuild_command(config_name)])
    except CommandError as e:
        raise StepError(f"rebuild '{config_name}' on {target}", str(e)) from e
    logger.info(f"✅ Rebuilt '{config_name}'")
