"""
LEMP provision - Proxmox LXC provisioning for a LEMP server.

Helpers to pick a container ID and OS template from the Proxmox API, an
interactive wizard writing terraform.tfvars, and a provisioner that creates
the container and hands it to Ansible.
"""

__version__ = "1.0.0"

# Re-export key components for easier access
from lemp.models.config import LempConfig, ProxmoxConfig
from lemp.models.tfvars import TfVars

__all__ = [
    "LempConfig",
    "ProxmoxConfig",
    "TfVars",
]
