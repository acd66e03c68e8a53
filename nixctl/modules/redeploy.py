"""
Full server redeployment: recreate the cloud server, then reinstall NixOS on it.
"""
import logging
import time
from pathlib import Path
from typing import Optional

from . import hcloud, install
from ..config import Config
from ..exceptions import NixctlError, StepError

logger = logging.getLogger(__name__)


def delete_and_redeploy(server_name: str, config_name: str, ipv4: Optional[str] = None) -> Optional[Path]:
    """Recreate ``server_name`` and install ``config_name`` onto it.

    Stops at the first failing phase. Nothing is rolled back: a server
    deleted in the first phase stays deleted.
    """
    logger.info(
        f"🚀 Starting complete redeployment of server {server_name} with flake config {config_name}"
    )

    try:
        hcloud.recreate_server(server_name, ipv4)
    except NixctlError as e:
        raise StepError("recreate server", str(e)) from e

    logger.info(f"⏳ Waiting {Config.SERVER_BOOT_WAIT}s for server to be fully up and SSHable...")
    time.sleep(Config.SERVER_BOOT_WAIT)

    try:
        kubeconfig = install.recreate_node(config_name)
    except NixctlError as e:
        raise StepError("deploy NixOS to server", str(e)) from e

    logger.info(
        f"✅ Server {server_name} has been deleted, recreated, and redeployed "
        f"with NixOS configuration {config_name}"
    )
    return kubeconfig
