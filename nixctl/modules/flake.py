"""
Validation and evaluation of the cluster's Nix flake.
"""
import json
import logging
from dataclasses import dataclass

from . import shell
from ..exceptions import CommandError, EvalError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeployTarget:
    """SSH destination of a node, rendered as ``user@host``."""
    user: str
    host: str

    def __str__(self) -> str:
        return f"{self.user}@{self.host}"


def check() -> None:
    logger.info("🔍 Checking Nix flake...")
    shell.run(["nix", "flake", "check", "--show-trace"])


def update() -> None:
    logger.info("🔄 Updating flake inputs...")
    shell.run(["nix", "flake", "update"])


def show() -> None:
    logger.info("📋 Showing flake outputs...")
    shell.run(["nix", "flake", "show"])


def get_deploy_target(config_name: str) -> DeployTarget:
    """Evaluate ``deploy.nodes.<name>`` and return its SSH user and hostname.

    ``--impure`` is needed because the flake reads hostnames from the
    environment.

    Raises:
        EvalError: If the attribute is missing, the JSON is malformed or
            either field is empty
    """
    attr_path = f".#deploy.nodes.{config_name}"
    logger.info(f"Evaluating flake attribute '{attr_path}' to get deploy target...")

    try:
        raw = shell.output(["nix", "eval", "--json", "--impure", "--show-trace", attr_path])
    except CommandError as e:
        raise EvalError(f"deploy node '{config_name}' not found in flake ({e})") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise EvalError(f"failed to parse JSON output from nix eval for '{config_name}': {e}") from e

    if not isinstance(data, dict):
        raise EvalError(f"expected an object for '{attr_path}', got {type(data).__name__}")

    user = data.get("sshUser") or ""
    host = data.get("sshHostname") or ""
    if not user or not host:
        raise EvalError(
            f"deploy target (sshHostname or sshUser) is empty for '{config_name}'. "
            "Ensure it's defined in machines.nix and the corresponding environment variables are set in .env"
        )

    target = DeployTarget(user=str(user), host=str(host))
    logger.debug("Resolved %s to %s", config_name, target)
    return target
