"""Tests for configuration models."""

import pytest
from pydantic import ValidationError

from lemp.errors import ConfigError
from lemp.models.config import LempConfig, ProxmoxConfig, ProvisionConfig


class TestProxmoxConfig:
    """Test ProxmoxConfig built from the environment."""

    def test_from_env(self, pm_env):
        """Test all required variables are picked up."""
        config = ProxmoxConfig.from_env(pm_env)

        assert config.api_url == "https://10.0.0.5:8006/api2/json"
        assert config.token_id == "root@pam!ci"
        assert config.token_secret == "s3cret"
        assert config.auth_header == "PVEAPIToken=root@pam!ci=s3cret"

    def test_missing_variables_are_named(self):
        """Test every missing variable is listed in the error."""
        with pytest.raises(ConfigError) as exc_info:
            ProxmoxConfig.from_env({"PM_API_URL": "https://pve:8006/api2/json", "PM_API_TOKEN_ID": ""})

        message = str(exc_info.value)
        assert "PM_API_TOKEN_ID" in message
        assert "PM_API_TOKEN_SECRET" in message
        assert "PM_API_URL" not in message

    def test_tls_verification(self, pm_env):
        """Test TLS is only verified when PM_TLS_INSECURE is exactly 'false'."""
        assert ProxmoxConfig.from_env(pm_env).verify_tls is False

        for value in ("true", "False", "0", "no", ""):
            env = dict(pm_env, PM_TLS_INSECURE=value)
            assert ProxmoxConfig.from_env(env).verify_tls is False

        env = dict(pm_env, PM_TLS_INSECURE="false")
        assert ProxmoxConfig.from_env(env).verify_tls is True

    def test_trailing_slash_stripped(self, pm_env):
        env = dict(pm_env, PM_API_URL="https://pve:8006/api2/json/")
        assert ProxmoxConfig.from_env(env).api_url == "https://pve:8006/api2/json"


class TestLempConfig:
    """Test LempConfig model."""

    def test_default_values(self):
        """Test default configuration values."""
        config = LempConfig()

        assert config.log_level == "INFO"
        assert config.defaults.node == "pve"
        assert config.defaults.storage == "local"
        assert config.defaults.hostname == "lemp-iac"
        assert config.defaults.ip_prefix == "192.168.0"
        assert config.defaults.cidr_suffix == "24"
        assert config.allocation.strategy == "last"
        assert config.allocation.floor == 99
        assert config.helpers.next_id == "lemp-next-id"

    def test_log_level_validation(self):
        """Test log level validation."""
        assert LempConfig(log_level="debug").log_level == "DEBUG"

        with pytest.raises(ValidationError) as exc_info:
            LempConfig(log_level="INVALID")

        assert "log_level" in str(exc_info.value)

    def test_unknown_strategy_rejected(self):
        with pytest.raises(ValidationError):
            LempConfig(allocation={"strategy": "random"})

    def test_extra_fields_ignored(self):
        """Test that extra fields are ignored."""
        config = LempConfig(extra_field="ignored")
        assert not hasattr(config, "extra_field")

    def test_provision_bounds(self):
        with pytest.raises(ValidationError):
            ProvisionConfig(settle_seconds=-1)
