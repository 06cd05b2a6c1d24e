"""Shared fixtures."""

import httpx
import pytest

from lemp.api.client import ProxmoxClient
from lemp.models.config import ProxmoxConfig


@pytest.fixture
def proxmox_config():
    """Proxmox settings pointing at a fake host."""
    return ProxmoxConfig(
        api_url="https://10.0.0.5:8006/api2/json",
        token_id="root@pam!ci",
        token_secret="s3cret",
    )


@pytest.fixture
def make_client(proxmox_config):
    """Build a ProxmoxClient whose requests are answered by a handler."""
    def _make(handler):
        return ProxmoxClient(proxmox_config, transport=httpx.MockTransport(handler))
    return _make


@pytest.fixture
def pm_env():
    """Environment with the required PM_* variables."""
    return {
        "PM_API_URL": "https://10.0.0.5:8006/api2/json",
        "PM_API_TOKEN_ID": "root@pam!ci",
        "PM_API_TOKEN_SECRET": "s3cret",
    }
