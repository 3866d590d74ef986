"""Main CLI implementation using Typer."""

import logging
import sys
from pathlib import Path
from typing import Any, Callable, List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from autoinst.cli.commands import show_install_config, validate_answer
from autoinst.config import resolve_settings
from autoinst.errors import AutoInstError, UsageError
from autoinst.fetch.orchestrator import fetch_answer
from autoinst.installer.config import DhcpLease, InstallEnvironment
from autoinst.utils.logging import setup_logging


logger = logging.getLogger(__name__)

FETCH_LOG_FILE = "/tmp/fetch_answer.log"

# Console for rich output
console = Console()
stderr_console = Console(stderr=True)


fetch_app = typer.Typer(
    name="autoinst-fetch-answer",
    help="Retrieve the answer file for an automated installation",
    add_completion=False,
)

app = typer.Typer(
    name="autoinst-assistant",
    help="Validate answer files and inspect the resulting installer configuration",
    add_completion=False,
)


@fetch_app.command(
    context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
    add_help_option=False,
)
def fetch_command(
    args: Optional[List[str]] = typer.Argument(
        None, help="<http|iso|partition> [<http-url>] [<tls-cert-fingerprint>]"
    ),
):
    """Fetch the answer file and print it to stdout."""
    setup_logging("INFO", FETCH_LOG_FILE)

    argv = [Path(sys.argv[0]).name] + list(args or [])
    try:
        settings = resolve_settings(argv)
        answer = fetch_answer(settings)
    except UsageError as e:
        stderr_console.print(e.usage, markup=False, highlight=False)
        raise typer.Exit(1)
    except AutoInstError as e:
        logger.error(f"Aborting: {e}")
        raise typer.Exit(1) from e

    typer.echo(answer)


def _run_cli_command(handler: Callable[..., Any], debug: bool = False, **kwargs: Any):
    """Helper to run a CLI command with logging and error handling."""
    setup_logging("DEBUG" if debug else "WARNING")
    try:
        handler(**kwargs)
    except AutoInstError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e


@app.command("validate-answer")
def validate_answer_command(
    path: Path = typer.Argument(..., help="Answer file to validate"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Parse and validate an answer file."""
    _run_cli_command(validate_answer, debug=debug, path=path)


@app.command("install-config")
def install_config_command(
    path: Path = typer.Argument(..., help="Answer file to project"),
    disk: List[str] = typer.Option(..., "--disk", "-d", help="Target disk, repeat for more"),
    disk_size: float = typer.Option(..., "--disk-size", help="Target disk size in GiB"),
    nic: str = typer.Option(..., "--nic", help="Management network interface"),
    memory: int = typer.Option(8192, "--memory", help="Total memory in MiB"),
    dhcp_cidr: Optional[str] = typer.Option(None, "--dhcp-cidr", help="Address/prefix leased via DHCP"),
    dhcp_gateway: Optional[str] = typer.Option(None, "--dhcp-gateway", help="Gateway leased via DHCP"),
    dhcp_dns: Optional[str] = typer.Option(None, "--dhcp-dns", help="DNS server leased via DHCP"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Print the low-level installer configuration for an answer file."""
    dhcp = None
    if dhcp_cidr or dhcp_gateway or dhcp_dns:
        if not (dhcp_cidr and dhcp_gateway and dhcp_dns):
            console.print("[red]Error:[/red] --dhcp-cidr, --dhcp-gateway and --dhcp-dns go together")
            raise typer.Exit(1)
        dhcp = DhcpLease(cidr=dhcp_cidr, gateway=dhcp_gateway, dns=dhcp_dns)

    environment = InstallEnvironment(
        target_disks=disk,
        disk_size=disk_size,
        mngmt_nic=nic,
        total_memory=memory,
        dhcp=dhcp,
    )
    _run_cli_command(show_install_config, debug=debug, path=path, environment=environment)


def fetch_main():
    """Entry point for autoinst-fetch-answer."""
    fetch_app()


def main():
    """Entry point for autoinst-assistant."""
    app()
