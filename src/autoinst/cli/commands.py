"""Command implementations for the answer file assistant."""

from pathlib import Path

from rich.console import Console
from rich.table import Table

from autoinst.installer.config import InstallEnvironment, project_install_config
from autoinst.models.answer import Answer, load_answer
from autoinst.models.disks import DiskList
from autoinst.models.network import NetworkManual


console = Console()


def _network_summary(answer: Answer) -> str:
    network = answer.network
    if isinstance(network, NetworkManual):
        return f"{network.cidr} via {network.gateway}, dns {network.dns}"
    return "from DHCP"


def _disk_summary(answer: Answer) -> str:
    selection = answer.disks.disk_selection
    if isinstance(selection, DiskList):
        return ", ".join(selection.disks)
    match = answer.disks.filter_match.value if answer.disks.filter_match else "any"
    predicates = ", ".join(f"{key}={value}" for key, value in selection.filter.items())
    return f"filter ({match}): {predicates}"


def validate_answer(path: Path, quiet: bool = False) -> Answer:
    """Parse and validate an answer file, printing a summary."""
    answer = load_answer(path)
    if quiet:
        return answer

    global_ = answer.global_
    table = Table(title=f"Answer file {path}")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("FQDN", global_.fqdn)
    table.add_row("Country / Timezone", f"{global_.country} / {global_.timezone}")
    table.add_row("Keyboard", str(global_.keyboard))
    table.add_row("Mail", global_.mailto)
    if global_.root_password_hashed:
        password = "hashed"
    elif global_.root_password:
        password = "plain"
    else:
        password = "[yellow]not set[/yellow]"
    table.add_row("Root password", password)
    table.add_row("SSH keys", str(len(global_.root_ssh_keys)))
    table.add_row("Network", _network_summary(answer))
    table.add_row("Filesystem", str(answer.disks.fs_type))
    table.add_row("Disks", _disk_summary(answer))

    if answer.post_installation_webhook:
        table.add_row("Webhook", answer.post_installation_webhook.url)
    if answer.first_boot:
        hook = answer.first_boot
        source = hook.url if hook.url else "installation media"
        table.add_row("First boot", f"{source} ({hook.ordering.systemd_target_name}.target)")

    console.print(table)
    console.print(f"[green]✓[/green] Answer file {path} is valid")
    return answer


def show_install_config(path: Path, environment: InstallEnvironment) -> None:
    """Print the installer configuration record projected from an answer file."""
    answer = load_answer(path)
    config = project_install_config(answer, environment)
    console.print(config.to_json(), markup=False, highlight=False, soft_wrap=True)
