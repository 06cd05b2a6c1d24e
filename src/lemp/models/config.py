"""Configuration models."""

import os
from typing import Literal, Mapping, Optional
from pydantic import BaseModel, Field, validator

from lemp.errors import ConfigError


REQUIRED_ENV_VARS = ("PM_API_URL", "PM_API_TOKEN_ID", "PM_API_TOKEN_SECRET")


class ProxmoxConfig(BaseModel):
    """Proxmox API connection settings."""
    api_url: str = Field(..., description="Base API URL, e.g. https://pve:8006/api2/json")
    token_id: str = Field(..., description="API token id (user@realm!name)")
    token_secret: str = Field(..., description="API token secret")
    verify_tls: bool = Field(default=False)

    @validator("api_url")
    def strip_trailing_slash(cls, v):
        """Normalise the base URL."""
        return v.rstrip("/")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ProxmoxConfig":
        """Build settings from PM_* environment variables."""
        env = os.environ if environ is None else environ

        missing = [var for var in REQUIRED_ENV_VARS if not env.get(var)]
        if missing:
            raise ConfigError(
                f"Required environment variable(s) not set or empty: {', '.join(missing)}. "
                "Please source your Proxmox API secrets file "
                "(e.g., source ~/.proxmox_api_secrets)."
            )

        # TLS verification is enabled only when PM_TLS_INSECURE == "false"
        return cls(
            api_url=env["PM_API_URL"],
            token_id=env["PM_API_TOKEN_ID"],
            token_secret=env["PM_API_TOKEN_SECRET"],
            verify_tls=env.get("PM_TLS_INSECURE", "") == "false",
        )

    @property
    def auth_header(self) -> str:
        return f"PVEAPIToken={self.token_id}={self.token_secret}"


class DefaultsConfig(BaseModel):
    """Defaults offered by the wizard and the leaf commands."""
    node: str = Field(default="pve")
    storage: str = Field(default="local")
    hostname: str = Field(default="lemp-iac")
    ip_prefix: str = Field(default="192.168.0")
    cidr_suffix: str = Field(default="24")
    var_file: str = Field(default="terraform.tfvars")


class AllocationConfig(BaseModel):
    """Container ID allocation settings."""
    strategy: Literal["last", "max"] = Field(default="last")
    floor: int = Field(default=99, ge=0)


class HelpersConfig(BaseModel):
    """Helper commands the wizard shells out to."""
    next_id: str = Field(default="lemp-next-id")
    templates: str = Field(default="lemp-templates")


class ProvisionConfig(BaseModel):
    """Container creation and bootstrap settings."""
    ssh_user: str = Field(default="terraform", description="Admin account on the Proxmox host")
    ansible_user: str = Field(default="root")
    playbook: str = Field(default="ansible/playbook.yml")
    ansible_args: list[str] = Field(default_factory=list)
    settle_seconds: int = Field(default=15, ge=0)
    task_timeout: int = Field(default=300, ge=1)
    task_poll_interval: float = Field(default=2.0, gt=0)
    cores: int = Field(default=1, ge=1)
    memory: int = Field(default=1024, ge=16)
    swap: int = Field(default=512, ge=0)
    disk_size: int = Field(default=8, ge=1, description="Root disk size in GiB")
    bridge: str = Field(default="vmbr0")
    unprivileged: bool = Field(default=True)
    nesting: bool = Field(default=True)
    start_on_create: bool = Field(default=True)
    ssh_public_keys: Optional[str] = None


class LempConfig(BaseModel):
    """Main configuration model."""
    log_level: str = Field(default="INFO")
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    allocation: AllocationConfig = Field(default_factory=AllocationConfig)
    helpers: HelpersConfig = Field(default_factory=HelpersConfig)
    provision: ProvisionConfig = Field(default_factory=ProvisionConfig)

    @validator("log_level")
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    class Config:
        """Pydantic config."""
        extra = "ignore"
