"""rich rendering for hostkeeper: entry, backup and system-info tables plus status lines."""

from typing import List

from rich.console import Console
from rich.table import Table

from ..backups import BackupInfo
from ..hosts_model import HostEntry
from ..utils import HostsFileInfo, format_file_size

console = Console()


def display_entries(entries: List[HostEntry], title: str = "Hosts Entries") -> None:
    """Pretty-print parsed host entries, one row per hostname."""
    table = Table(title=title, header_style="bold magenta")
    table.add_column("Line", style="dim", justify="right")
    table.add_column("Status", no_wrap=True)
    table.add_column("Address", style="cyan", no_wrap=True)
    table.add_column("Hostname", style="green")
    table.add_column("Comment", style="yellow")

    for entry in entries:
        status = "[green]enabled[/green]" if entry.enabled else "[red]disabled[/red]"
        table.add_row(
            str(entry.line_number),
            status,
            entry.address,
            entry.hostname,
            entry.comment or "",
        )

    console.print(table)


def display_backups(backups: List[BackupInfo]) -> None:
    table = Table(title="Backups", header_style="bold magenta")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Size", style="green", justify="right")
    table.add_column("Modified", style="yellow")

    for i, backup in enumerate(backups, start=1):
        table.add_row(
            str(i),
            backup.name,
            format_file_size(backup.size),
            backup.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
        )

    console.print(table)


def display_info(info: HostsFileInfo, shell: dict, backup_dir: str) -> None:
    table = Table(title="System Information", show_header=False)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_row("Hosts File", info.path)
    table.add_row("File Exists", str(info.exists))
    table.add_row("Readable", str(info.readable))
    table.add_row("Writable", str(info.writable))
    table.add_row("File Size", format_file_size(info.size))
    last_modified = info.last_modified.strftime("%Y-%m-%d %H:%M:%S") if info.last_modified else "-"
    table.add_row("Last Modified", last_modified)
    table.add_row("Shell", f"{shell['shell']} ({shell['version']})")
    table.add_row("Backup Directory", backup_dir)
    console.print(table)


def display_success(message: str) -> None:
    """Report a completed hosts-file or backup operation."""
    console.print(f"[green]✅ {message}[/green]")


def display_warning(message: str) -> None:
    """Report a lookup miss or a cancelled elevation prompt."""
    console.print(f"[yellow]⚠️  {message}[/yellow]")


def display_error(message: str) -> None:
    """Report a failed read, write or validation."""
    console.print(f"[red]❌ {message}[/red]")
