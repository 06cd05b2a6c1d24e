"""Pydantic models for configuration and validation."""

from lemp.models.config import (
    ProxmoxConfig,
    LempConfig,
    DefaultsConfig,
    AllocationConfig,
    HelpersConfig,
    ProvisionConfig,
)
from lemp.models.inventory import InventoryResource, StorageContent
from lemp.models.tfvars import TfVars

__all__ = [
    "ProxmoxConfig",
    "LempConfig",
    "DefaultsConfig",
    "AllocationConfig",
    "HelpersConfig",
    "ProvisionConfig",
    "InventoryResource",
    "StorageContent",
    "TfVars",
]
