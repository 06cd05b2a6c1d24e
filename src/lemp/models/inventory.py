"""Proxmox inventory models."""

from typing import Optional
from pydantic import BaseModel, Field


CONTAINER_TYPE = "lxc"
TEMPLATE_CONTENT = "vztmpl"


class InventoryResource(BaseModel):
    """One entry of /cluster/resources."""
    type: str = Field(..., description="Resource kind (lxc, qemu, node, storage, ...)")
    vmid: Optional[int] = Field(None, ge=0)
    node: Optional[str] = None
    name: Optional[str] = None

    class Config:
        """Pydantic config."""
        extra = "allow"

    @property
    def is_container(self) -> bool:
        return self.type == CONTAINER_TYPE


class StorageContent(BaseModel):
    """One entry of /nodes/{node}/storage/{storage}/content."""
    content: str = Field(..., description="Content type (vztmpl, iso, images, ...)")
    volid: str = Field(..., description="Volume identifier")
    size: Optional[int] = None

    class Config:
        """Pydantic config."""
        extra = "allow"

    @property
    def is_template(self) -> bool:
        return self.content == TEMPLATE_CONTENT
