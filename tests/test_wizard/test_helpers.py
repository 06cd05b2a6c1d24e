"""Tests for helper command execution."""

import os
from unittest.mock import MagicMock, patch

import pytest

from lemp.errors import HelperError
from lemp.wizard.helpers import HelperRunner


@patch("lemp.wizard.helpers.shutil.which", return_value=None)
def test_missing_helper(mock_which):
    runner = HelperRunner()

    with pytest.raises(HelperError) as exc_info:
        runner.check()

    assert "lemp-next-id" in str(exc_info.value)


@patch("lemp.wizard.helpers.os.access", return_value=False)
@patch("lemp.wizard.helpers.shutil.which", return_value="/usr/local/bin/lemp-next-id")
def test_not_executable(mock_which, mock_access):
    with pytest.raises(HelperError):
        HelperRunner().check()


@patch("lemp.wizard.helpers.subprocess.run")
@patch("lemp.wizard.helpers.os.access", return_value=True)
@patch("lemp.wizard.helpers.shutil.which", side_effect=lambda name: f"/usr/local/bin/{name}")
class TestHelperRunner:
    """Test running helpers once located."""

    def test_next_id(self, mock_which, mock_access, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="105\n")

        assert HelperRunner().next_id() == "105"
        assert mock_run.call_args[0][0] == ["/usr/local/bin/lemp-next-id"]

    def test_templates(self, mock_which, mock_access, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="local:vztmpl/a.tar.zst\nlocal:vztmpl/b.tar.zst\n")

        templates = HelperRunner().templates("pve", "nfs")

        assert templates == ["local:vztmpl/a.tar.zst", "local:vztmpl/b.tar.zst"]
        assert mock_run.call_args[0][0] == ["/usr/local/bin/lemp-templates", "pve", "nfs"]

    def test_helper_failure(self, mock_which, mock_access, mock_run):
        mock_run.return_value = MagicMock(returncode=1, stdout="")

        with pytest.raises(HelperError):
            HelperRunner().next_id()

    def test_settings_file_passed_to_helpers(self, mock_which, mock_access, mock_run, tmp_path):
        """Test helpers get LEMP_CONFIG pointing at the wizard's settings file."""
        mock_run.return_value = MagicMock(returncode=0, stdout="105\n")
        settings = tmp_path / "custom.yaml"
        settings.write_text("allocation:\n  strategy: max\n")

        HelperRunner(config_path=settings).next_id()

        env = mock_run.call_args[1]["env"]
        assert env["LEMP_CONFIG"] == str(settings.resolve())
        assert env["PATH"] == os.environ["PATH"]

    def test_inherits_environment_without_settings_file(self, mock_which, mock_access, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="105\n")

        HelperRunner().next_id()

        assert mock_run.call_args[1]["env"] is None
