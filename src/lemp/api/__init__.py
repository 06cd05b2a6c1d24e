"""Proxmox API access."""

from lemp.api.client import ProxmoxClient

__all__ = ["ProxmoxClient"]
