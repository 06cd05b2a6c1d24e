"""Command implementations for CLI."""

import logging
from pathlib import Path
from typing import List, Optional

from rich.markup import escape
from rich.table import Table

from lemp.api.client import ProxmoxClient
from lemp.models.config import LempConfig, ProxmoxConfig
from lemp.providers.container import ContainerProvider, ProvisionPlan
from lemp.providers.resources import allocate_container_id, list_templates
from lemp.utils.console import console, log_message
from lemp.utils.varfile import load_tfvars
from lemp.wizard import HelperRunner, Prompter, Wizard


logger = logging.getLogger(__name__)


def build_client(proxmox: ProxmoxConfig) -> ProxmoxClient:
    return ProxmoxClient(proxmox)


def next_id(client: ProxmoxClient, strategy: str = "last", floor: int = 99) -> int:
    """Next free container ID."""
    return allocate_container_id(client, strategy=strategy, floor=floor)


def templates(client: ProxmoxClient, node: str, storage: str) -> List[str]:
    """Template volume ids on a node's storage pool."""
    return list_templates(client, node, storage)


def run_wizard(
    config: LempConfig,
    prompter: Prompter,
    api_url: Optional[str],
    output: Optional[Path] = None,
    config_path: Optional[Path] = None,
) -> str:
    """Run the interactive wizard and write the variable file."""
    wizard = Wizard(
        prompter=prompter,
        helpers=HelperRunner(
            next_id=config.helpers.next_id,
            templates=config.helpers.templates,
            config_path=config_path,
        ),
        defaults=config.defaults,
        api_url=api_url,
        output_path=output,
        status=lambda message, style: log_message(style, message),
    )
    return wizard.run()


def show_plan(plan: ProvisionPlan) -> None:
    """Print what a provisioning run would do."""
    table = Table(title=f"Container {plan.vmid}")
    table.add_column("Parameter", style="cyan")
    table.add_column("Value")
    for key, value in plan.create_params.items():
        shown = "********" if key == "password" else str(value)
        table.add_row(key, escape(shown))
    console.print(table)

    action = "create" if plan.create else "skip (already exists)"
    console.print(f"[bold]Create:[/bold] {action}")
    console.print(f"[bold]Bootstrap:[/bold] {escape(' '.join(plan.bootstrap_cmd))}")
    if plan.ansible_cmd:
        console.print(f"[bold]Configure:[/bold] {escape(' '.join(plan.ansible_cmd))}")
    else:
        console.print("[bold]Configure:[/bold] ansible-playbook against the DHCP address once known")


def provision(
    client: ProxmoxClient,
    config: LempConfig,
    var_file: Path,
    dry_run: bool = False,
) -> ProvisionPlan:
    """Create the container described by var_file and configure it."""
    spec = load_tfvars(var_file)
    provider = ContainerProvider(client, config.provision, allocation_floor=config.allocation.floor)

    if dry_run:
        plan = provider.plan(spec)
        show_plan(plan)
        return plan

    log_message("yellow", f"Provisioning {spec.hostname} on node {spec.target_node}")
    plan = provider.present(spec)
    log_message("green", f"Container {plan.vmid} provisioned and configured")
    return plan
