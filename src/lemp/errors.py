"""Exception hierarchy shared by all lemp commands."""

from typing import Optional


class LempError(Exception):
    """Base error for lemp tooling."""
    pass


class ConfigError(LempError):
    """Missing or invalid configuration."""
    pass


class HelperError(LempError):
    """A helper command is missing, not executable or failed."""
    pass


class ProxmoxAPIError(LempError):
    """Proxmox API request failed."""
    pass


class ProxmoxResponseError(ProxmoxAPIError):
    """Proxmox API returned a response that could not be understood."""

    def __init__(self, message: str, body: str = ""):
        super().__init__(f"{message}\nAPI Response was: {body}" if body else message)
        self.body = body


class WizardInputError(LempError):
    """Invalid answer given during the interactive wizard."""
    pass


class WizardCancelled(LempError):
    """User chose to quit the wizard."""
    pass


class ProvisionError(LempError):
    """A provisioning step failed."""

    def __init__(self, message: str, returncode: Optional[int] = None):
        super().__init__(message)
        self.returncode = returncode or 1
