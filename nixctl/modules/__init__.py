"""
Orchestration modules wrapping the external infrastructure tools.
"""
from .flake import DeployTarget, get_deploy_target
from .hcloud import ServerSpec, recreate_server
from .install import deploy_control_node, recreate_node
from .redeploy import delete_and_redeploy
from .secrets import decrypt_secrets

__all__ = [
    'DeployTarget',
    'get_deploy_target',
    'ServerSpec',
    'recreate_server',
    'recreate_node',
    'deploy_control_node',
    'delete_and_redeploy',
    'decrypt_secrets',
]
