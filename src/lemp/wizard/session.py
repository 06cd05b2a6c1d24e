"""Interactive variable file wizard."""

import logging
from pathlib import Path
from typing import Callable, Optional, Union

from pydantic import ValidationError

from lemp.errors import WizardCancelled, WizardInputError
from lemp.models.config import DefaultsConfig
from lemp.models.tfvars import TfVars
from lemp.wizard.helpers import HelperRunner
from lemp.wizard.prompts import Prompter
from lemp.utils.varfile import render_tfvars, write_tfvars


logger = logging.getLogger(__name__)

SEPARATOR = "-" * 50


def host_from_api_url(url: Optional[str]) -> str:
    """Strip scheme, port and path: https://10.0.0.5:8006/api2/json -> 10.0.0.5."""
    if not url:
        return ""
    host = url.strip()
    if "://" in host:
        host = host.split("://", 1)[1]
    for sep in ("/", ":"):
        host = host.split(sep, 1)[0]
    return host


def _status(message: str, style: str = "yellow") -> None:
    logger.debug(message)


class Wizard:
    """Collects the answers needed to provision one container."""

    def __init__(
        self,
        prompter: Prompter,
        helpers: HelperRunner,
        defaults: Optional[DefaultsConfig] = None,
        api_url: Optional[str] = None,
        output_path: Optional[Union[str, Path]] = None,
        status: Callable[[str, str], None] = _status,
    ):
        self.prompter = prompter
        self.helpers = helpers
        self.defaults = defaults or DefaultsConfig()
        self.api_url = api_url
        self.output_path = Path(output_path or self.defaults.var_file)
        self.status = status

    def _required(self, message: str, default: Optional[str] = None, error: Optional[str] = None) -> str:
        value = self.prompter.ask(message, default)
        if not value:
            raise WizardInputError(error or f"{message} is required.")
        return value

    def _choose_template(self, templates: list[str]) -> str:
        self.prompter.say("Please select an OS template:")
        for index, template in enumerate(templates, start=1):
            self.prompter.say(f"  {index}) {template}")
        quit_choice = len(templates) + 1
        self.prompter.say(f"  {quit_choice}) Quit")

        choice = self.prompter.ask(f"Enter selection [1-{quit_choice}]", show_default=False)
        if not (choice.isascii() and choice.isdigit()) or not 1 <= int(choice) <= quit_choice:
            raise WizardInputError("Invalid selection.")
        if int(choice) == quit_choice:
            raise WizardCancelled("Operation cancelled.")
        return templates[int(choice) - 1]

    def collect(self) -> TfVars:
        """Run every prompt and return the validated answers."""
        self.helpers.check()
        self.status("All helper commands are present and executable.", "green")

        next_id = self.helpers.next_id()
        self.status(f"Next available container ID is: {next_id}", "yellow")

        proxmox_host_ip = self._required(
            "Enter Proxmox Host IP (for SSH access)",
            host_from_api_url(self.api_url) or None,
            "Proxmox Host IP is required for the provisioner.",
        )
        node = self.prompter.ask("Enter Proxmox Node Name", self.defaults.node)
        storage = self.prompter.ask("Enter Storage Pool for Templates", self.defaults.storage)

        templates = self.helpers.templates(node, storage)
        if not templates:
            raise WizardInputError(f"No LXC templates found on node '{node}' in storage '{storage}'.")

        hostname = self.prompter.ask("Enter Hostname", self.defaults.hostname)
        ostemplate = self._choose_template(templates)

        rootfs_storage = self.prompter.ask("Enter storage for root disk (e.g., local-lvm)", show_default=False)
        if not rootfs_storage:
            raise WizardInputError("Root disk storage is required.")

        root_password = self.prompter.ask_secret(
            "Enter a root password for the container (will not be displayed)"
        )

        values = dict(
            proxmox_host_ip=proxmox_host_ip,
            target_node=node,
            hostname=hostname,
            ostemplate=ostemplate,
            rootfs_storage=rootfs_storage,
            root_password=root_password,
        )

        use_static = self.prompter.ask("Use static IP? (y/n)", "y")
        if use_static in ("y", "Y"):
            values.update(self._collect_static(next_id))

        try:
            return TfVars(**values)
        except ValidationError as e:
            raise WizardInputError(f"Invalid answers: {e}") from e

    def _collect_static(self, next_id: str) -> dict:
        required = "IP Prefix, CIDR Suffix, Host Part, and Gateway are required for static configuration."
        container_id = self._required("Enter Container ID", next_id, "Container ID is required.")
        if not (container_id.isascii() and container_id.isdigit()):
            raise WizardInputError(f"Container ID must be a number, got: {container_id}")
        ip_prefix = self._required("Enter IP Prefix", self.defaults.ip_prefix, required)
        cidr_suffix = self._required("Enter CIDR Suffix", self.defaults.cidr_suffix, required)
        host_part = self._required(
            "Enter Host IP Part (last octet)", container_id.rsplit(".", 1)[-1], required
        )
        self.status(f"Static IP address set to: {ip_prefix}.{host_part}", "yellow")
        if host_part != container_id:
            self.status(
                f"The provisioner assigns {ip_prefix}.{container_id}; the host part {host_part} is not stored.",
                "yellow",
            )
        gateway = self._required("Enter Gateway", f"{ip_prefix}.1", required)
        return dict(
            container_id=int(container_id),
            ip_prefix=ip_prefix,
            cidr_suffix=cidr_suffix,
            gateway=gateway,
        )

    def run(self) -> str:
        """Collect answers, write the variable file and echo it back."""
        self.status("--- Starting Terraform .tfvars Setup Wizard ---", "yellow")
        tfvars = self.collect()

        self.status(f"Generating {self.output_path}...", "yellow")
        content = write_tfvars(self.output_path, tfvars)
        self.status(f"{self.output_path} created successfully!", "green")

        # The secret is written to the file but never shown
        masked = tfvars.copy(update={"root_password": "*" * 8})
        self.prompter.say(SEPARATOR)
        self.prompter.say(render_tfvars(masked).rstrip("\n"))
        self.prompter.say(SEPARATOR)
        return content
