"""Variable file model."""

from typing import Optional
from pydantic import BaseModel, Field, root_validator


ADDRESSING_FIELDS = ("container_id", "ip_prefix", "cidr_suffix", "gateway")


class TfVars(BaseModel):
    """Values handed from the wizard to the provisioning step."""
    proxmox_host_ip: str = Field(..., min_length=1)
    target_node: str = Field(..., min_length=1)
    hostname: str = Field(..., min_length=1)
    ostemplate: str = Field(..., min_length=1)
    rootfs_storage: str = Field(..., min_length=1)
    root_password: str = Field(default="")

    # Static addressing; all None means DHCP
    container_id: Optional[int] = Field(None, ge=100)
    ip_prefix: Optional[str] = None
    cidr_suffix: Optional[str] = None
    gateway: Optional[str] = None

    @root_validator(skip_on_failure=True)
    def check_addressing(cls, values):
        """Addressing fields are either all set or all null."""
        present = [name for name in ADDRESSING_FIELDS if values.get(name) not in (None, "")]
        if present and len(present) != len(ADDRESSING_FIELDS):
            missing = [name for name in ADDRESSING_FIELDS if name not in present]
            raise ValueError(
                f"Static addressing requires {', '.join(ADDRESSING_FIELDS)}; missing: {', '.join(missing)}"
            )
        return values

    class Config:
        """Pydantic config."""
        extra = "ignore"

    @property
    def is_static(self) -> bool:
        return self.container_id is not None

    @property
    def ip_address(self) -> Optional[str]:
        """Static address the container will get, without mask."""
        if not self.is_static:
            return None
        return f"{self.ip_prefix}.{self.container_id}"

    @property
    def ip_config(self) -> str:
        """Address in the form Proxmox expects for net0."""
        if not self.is_static:
            return "dhcp"
        return f"{self.ip_address}/{self.cidr_suffix}"
