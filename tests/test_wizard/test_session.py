"""Tests for the interactive wizard."""

from unittest.mock import Mock

import pytest

from lemp.errors import HelperError, WizardCancelled, WizardInputError
from lemp.models.config import DefaultsConfig
from lemp.utils.varfile import load_tfvars
from lemp.wizard import HelperRunner, ScriptedPrompter, Wizard, host_from_api_url


TEMPLATES = [
    "local:vztmpl/debian-12-standard_12.7-1_amd64.tar.zst",
    "local:vztmpl/ubuntu-24.04-standard_24.04-2_amd64.tar.zst",
]

API_URL = "https://10.0.0.5:8006/api2/json"

# host, node, storage, hostname, template, rootfs, password
COMMON = ["", "", "", "", "2", "local-lvm", "pw-secret"]
# container id, prefix, cidr, host part, gateway
STATIC_DEFAULTS = ["", "", "", "", ""]


@pytest.fixture
def helpers():
    helpers = Mock(spec=HelperRunner)
    helpers.next_id.return_value = "105"
    helpers.templates.return_value = list(TEMPLATES)
    return helpers


@pytest.fixture
def output(tmp_path):
    return tmp_path / "terraform.tfvars"


def make_wizard(answers, helpers, output, api_url=API_URL, defaults=None):
    prompter = ScriptedPrompter(answers)
    wizard = Wizard(prompter, helpers, defaults=defaults, api_url=api_url, output_path=output)
    return wizard, prompter


class TestHostFromApiUrl:
    """Test deriving the default host address."""

    def test_strips_scheme_port_and_path(self):
        assert host_from_api_url("https://10.0.0.5:8006/api2/json") == "10.0.0.5"
        assert host_from_api_url("http://pve.lan/api2/json") == "pve.lan"
        assert host_from_api_url("pve.lan:8006") == "pve.lan"

    def test_empty(self):
        assert host_from_api_url(None) == ""
        assert host_from_api_url("") == ""


class TestWizardStatic:
    """Test a full static-address session."""

    def test_writes_static_file(self, helpers, output):
        wizard, prompter = make_wizard(COMMON + ["y"] + STATIC_DEFAULTS, helpers, output)

        wizard.run()

        tfvars = load_tfvars(output)
        assert tfvars.proxmox_host_ip == "10.0.0.5"
        assert tfvars.target_node == "pve"
        assert tfvars.hostname == "lemp-iac"
        assert tfvars.ostemplate == TEMPLATES[1]
        assert tfvars.rootfs_storage == "local-lvm"
        assert tfvars.root_password == "pw-secret"
        assert tfvars.container_id == 105
        assert tfvars.ip_prefix == "192.168.0"
        assert tfvars.cidr_suffix == "24"
        assert tfvars.gateway == "192.168.0.1"
        helpers.templates.assert_called_once_with("pve", "local")

    def test_host_default_from_api_url(self, helpers, output):
        """Test the host prompt offers exactly 10.0.0.5."""
        wizard, prompter = make_wizard(COMMON + ["y"] + STATIC_DEFAULTS, helpers, output)

        wizard.run()

        assert prompter.defaults[0] == "10.0.0.5"

    def test_derived_defaults(self, helpers, output):
        answers = COMMON + ["Y", "230", "10.20.30", "16", "", ""]
        wizard, prompter = make_wizard(answers, helpers, output)

        wizard.run()

        # host part defaults to the container id, gateway to prefix + .1
        assert prompter.defaults[-2] == "230"
        assert prompter.defaults[-1] == "10.20.30.1"
        tfvars = load_tfvars(output)
        assert tfvars.container_id == 230
        assert tfvars.gateway == "10.20.30.1"

    def test_host_part_override_is_reported(self, helpers, output):
        status = Mock()
        prompter = ScriptedPrompter(COMMON + ["y", "105", "192.168.0", "24", "42", ""])
        wizard = Wizard(prompter, helpers, api_url=API_URL, output_path=output, status=status)

        wizard.run()

        messages = [call.args[0] for call in status.call_args_list]
        assert any("assigns 192.168.0.105" in message for message in messages)
        assert "(192.168.0.105/24)" in output.read_text()

    def test_secret_not_echoed(self, helpers, output):
        wizard, prompter = make_wizard(COMMON + ["y"] + STATIC_DEFAULTS, helpers, output)

        wizard.run()

        echoed = "\n".join(prompter.output)
        assert "pw-secret" not in echoed
        assert 'hostname        = "lemp-iac"' in echoed
        assert "pw-secret" in output.read_text()

    def test_empty_static_field(self, helpers, output):
        """Test an empty static field ends the session without writing."""
        defaults = DefaultsConfig(ip_prefix="")
        wizard, _ = make_wizard(COMMON + ["y", "", ""], helpers, output, defaults=defaults)

        with pytest.raises(WizardInputError):
            wizard.run()

        assert not output.exists()

    @pytest.mark.parametrize("container_id", ["abc", "¹⁰⁵"])
    def test_non_numeric_container_id(self, helpers, output, container_id):
        wizard, _ = make_wizard(COMMON + ["y", container_id], helpers, output)

        with pytest.raises(WizardInputError):
            wizard.run()

        assert not output.exists()


class TestWizardDynamic:
    """Test a DHCP session."""

    def test_writes_null_markers(self, helpers, output):
        wizard, prompter = make_wizard(COMMON + ["n"], helpers, output)

        content = wizard.run()

        assert "container_id    = null" in content
        tfvars = load_tfvars(output)
        assert tfvars.container_id is None
        assert tfvars.ip_prefix is None
        assert tfvars.cidr_suffix is None
        assert tfvars.gateway is None
        assert len(prompter.asked) == len(COMMON) + 1

    def test_overwrites_previous_file(self, helpers, output):
        output.write_text("stale = 1\n")
        wizard, _ = make_wizard(COMMON + ["n"], helpers, output)

        wizard.run()

        assert "stale" not in output.read_text()


class TestWizardFailures:
    """Test fatal conditions and the quit option."""

    def test_quit_option(self, helpers, output):
        """Test the option after the last template cancels cleanly."""
        answers = ["", "", "", "", str(len(TEMPLATES) + 1)]
        wizard, prompter = make_wizard(answers, helpers, output)

        with pytest.raises(WizardCancelled):
            wizard.run()

        assert not output.exists()
        assert f"  {len(TEMPLATES) + 1}) Quit" in prompter.output

    def test_quit_keeps_existing_file(self, helpers, output):
        output.write_text("keep = 1\n")
        wizard, _ = make_wizard(["", "", "", "", "3"], helpers, output)

        with pytest.raises(WizardCancelled):
            wizard.run()

        assert output.read_text() == "keep = 1\n"

    @pytest.mark.parametrize("choice", ["abc", "0", "4", "-1", "", "²"])
    def test_invalid_selection(self, helpers, output, choice):
        wizard, _ = make_wizard(["", "", "", "", choice], helpers, output)

        with pytest.raises(WizardInputError):
            wizard.run()

        assert not output.exists()

    def test_empty_rootfs_storage(self, helpers, output):
        wizard, _ = make_wizard(["", "", "", "", "1", ""], helpers, output)

        with pytest.raises(WizardInputError) as exc_info:
            wizard.run()

        assert "Root disk storage" in str(exc_info.value)
        assert not output.exists()

    def test_host_required_without_env(self, helpers, output):
        wizard, prompter = make_wizard([""], helpers, output, api_url=None)

        with pytest.raises(WizardInputError):
            wizard.run()

        assert prompter.defaults[0] is None

    def test_no_templates(self, helpers, output):
        helpers.templates.return_value = []
        wizard, _ = make_wizard(["", "", ""], helpers, output)

        with pytest.raises(WizardInputError):
            wizard.run()

    def test_missing_helper_checked_first(self, helpers, output):
        helpers.check.side_effect = HelperError("lemp-next-id not found")
        wizard, prompter = make_wizard([], helpers, output)

        with pytest.raises(HelperError):
            wizard.run()

        helpers.next_id.assert_not_called()
        assert prompter.asked == []
