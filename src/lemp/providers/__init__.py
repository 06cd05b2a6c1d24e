"""Resource providers."""

from lemp.providers.base import BaseProvider, ProviderStatus
from lemp.providers.container import ContainerProvider
from lemp.providers.resources import allocate_container_id, list_templates, next_container_id

__all__ = [
    "BaseProvider",
    "ProviderStatus",
    "ContainerProvider",
    "allocate_container_id",
    "list_templates",
    "next_container_id",
]
