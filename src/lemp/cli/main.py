"""Main CLI implementation using Typer."""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, TypeVar

import typer
from rich.markup import escape

from lemp.cli import commands
from lemp.cli.config import ConfigManager, dump_config
from lemp.errors import LempError, ProvisionError, WizardCancelled
from lemp.models.config import LempConfig, ProxmoxConfig
from lemp.utils.console import console, log_message, stderr_console
from lemp.utils.logging import LEAF_FORMAT, setup_logging
from lemp.wizard import ConsolePrompter


logger = logging.getLogger(__name__)

T = TypeVar("T")


app = typer.Typer(
    name="lempctl",
    help="Provision a Proxmox LXC container and configure it into a LEMP server",
    add_completion=False,
)

# Single-command apps installed as the lemp-next-id and lemp-templates helpers
next_id_app = typer.Typer(add_completion=False)
templates_app = typer.Typer(add_completion=False)


class Strategy(str, Enum):
    """Allocation strategies accepted on the command line."""
    last = "last"
    max = "max"


def _load_config(path: Optional[Path]) -> LempConfig:
    return ConfigManager(path).load()


def _run_leaf(handler: Callable[[], T]) -> T:
    """Run a helper command; diagnostics go to stderr as [ERROR] lines."""
    try:
        return handler()
    except LempError as e:
        logger.error(str(e))
        raise typer.Exit(1) from e


def _print_next_id(config_path: Optional[Path], strategy: Optional[Strategy]) -> None:
    def handler():
        config = _load_config(config_path)
        logging.getLogger().setLevel(config.log_level)
        client = commands.build_client(ProxmoxConfig.from_env())
        return commands.next_id(
            client,
            strategy=strategy.value if strategy else config.allocation.strategy,
            floor=config.allocation.floor,
        )

    setup_logging("INFO", LEAF_FORMAT)
    typer.echo(_run_leaf(handler))


def _print_templates(node: Optional[str], storage: Optional[str], config_path: Optional[Path]) -> None:
    def handler():
        config = _load_config(config_path)
        logging.getLogger().setLevel(config.log_level)
        client = commands.build_client(ProxmoxConfig.from_env())
        return commands.templates(
            client,
            node or config.defaults.node,
            storage or config.defaults.storage,
        )

    setup_logging("INFO", LEAF_FORMAT)
    for template in _run_leaf(handler):
        typer.echo(template)


STRATEGY_HELP = "Allocation strategy: 'last' (API order) or 'max'"
CONFIG_HELP = "Settings file (defaults to $LEMP_CONFIG or ./lemp.yaml)"


@next_id_app.command()
def next_id_command(
    strategy: Optional[Strategy] = typer.Option(None, "--strategy", help=STRATEGY_HELP),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
):
    """Print the next available LXC container ID."""
    _print_next_id(config, strategy)


@templates_app.command()
def templates_command(
    node: Optional[str] = typer.Argument(None, help="Proxmox node name (default: pve)"),
    storage: Optional[str] = typer.Argument(None, help="Storage pool name (default: local)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
):
    """Print LXC template volume ids, one per line."""
    _print_templates(node, storage, config)


@app.command("next-id")
def lempctl_next_id_command(
    strategy: Optional[Strategy] = typer.Option(None, "--strategy", help=STRATEGY_HELP),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
):
    """Print the next available LXC container ID."""
    _print_next_id(config, strategy)


@app.command("templates")
def lempctl_templates_command(
    node: Optional[str] = typer.Argument(None, help="Proxmox node name"),
    storage: Optional[str] = typer.Argument(None, help="Storage pool name"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
):
    """Print LXC template volume ids, one per line."""
    _print_templates(node, storage, config)


@app.command("wizard")
def wizard_command(
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Variable file to write (default: terraform.tfvars)"
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
):
    """Interactively create the terraform.tfvars variable file."""
    try:
        manager = ConfigManager(config)
        settings = manager.load()
        setup_logging(settings.log_level)
        commands.run_wizard(
            settings,
            prompter=ConsolePrompter(console),
            api_url=os.environ.get("PM_API_URL"),
            output=output,
            config_path=manager.path if manager.path.exists() else None,
        )
    except WizardCancelled as e:
        log_message("yellow", str(e))
        raise typer.Exit(0)
    except LempError as e:
        log_message("red", str(e))
        raise typer.Exit(1) from e


@app.command("provision")
def provision_command(
    var_file: Optional[Path] = typer.Option(
        None, "--var-file", "-f", help="Variable file written by the wizard"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the plan without changing anything"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
):
    """Create the container, bootstrap SSH and run the Ansible playbook."""
    try:
        settings = _load_config(config)
        setup_logging(settings.log_level)
        client = commands.build_client(ProxmoxConfig.from_env())
        commands.provision(
            client,
            settings,
            var_file or Path(settings.defaults.var_file),
            dry_run=dry_run,
        )
    except ProvisionError as e:
        log_message("red", str(e))
        raise typer.Exit(e.returncode) from e
    except LempError as e:
        log_message("red", str(e))
        raise typer.Exit(1) from e


# Config subcommands
config_app = typer.Typer(help="Configuration commands")
app.add_typer(config_app, name="config")


@config_app.command("show")
def config_show_command(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
):
    """Show the effective settings."""
    try:
        settings = _load_config(config)
    except LempError as e:
        stderr_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e
    typer.echo(dump_config(settings), nl=False)


def main():
    """Main entry point for lempctl."""
    app()


def next_id_main():
    """Entry point for lemp-next-id."""
    next_id_app()


def templates_main():
    """Entry point for lemp-templates."""
    templates_app()
