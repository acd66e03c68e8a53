"""nixctl - NixOS/K3s cluster node provisioning CLI."""

__version__ = "0.1.0"
