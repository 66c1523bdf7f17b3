from __future__ import annotations

import logging
import sys
from functools import wraps
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from .config import Config
from .exceptions import (
    HostkeeperError,
    HostsEntryNotFoundError,
    HostsWriteCancelled,
    format_error_message,
)
from .hosts_manager import HostsManager
from .log_config import setup_logging
from .cli_helpers.display import (
    display_backups,
    display_entries,
    display_error,
    display_info,
    display_success,
    display_warning,
)

__all__ = ["cli"]

console = Console()
logger = logging.getLogger("hostkeeper.cli")


def handle_errors(func):
    """Report hostkeeper errors to the user and exit non-zero."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except HostsEntryNotFoundError as e:
            display_warning(e.message)
            sys.exit(1)
        except HostsWriteCancelled:
            display_warning("Operation cancelled by user")
            sys.exit(1)
        except HostkeeperError as e:
            logger.debug(format_error_message(e))
            display_error(e.message)
            sys.exit(1)

    return wrapper


def _manager(ctx: click.Context) -> HostsManager:
    return ctx.obj["manager"]


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--hosts-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Hosts file to edit. Defaults to the system hosts file.",
)
@click.option(
    "--backup-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding hosts.backup.* snapshots.",
)
@click.option(
    "--env-file",
    "-e",
    type=click.Path(dir_okay=False),
    default=None,
    help="Dotenv file with HOSTKEEPER_* settings.",
)
@click.option("--no-sudo", is_flag=True, help="Write the hosts file without sudo.")
@click.option("--no-backup", is_flag=True, help="Skip the automatic backup before writes.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging output.")
@click.pass_context
def cli(
    ctx: click.Context,
    hosts_file: Optional[str],
    backup_dir: Optional[str],
    env_file: Optional[str],
    no_sudo: bool,
    no_backup: bool,
    verbose: bool,
) -> None:
    """hostkeeper – toggle, edit and back up hosts file entries."""
    try:
        config = Config.from_env(env_file)
        if hosts_file:
            config.hosts_file = hosts_file
        if backup_dir:
            config.backup_dir = Path(backup_dir)
        if no_sudo:
            config.use_sudo = False
        if no_backup:
            config.auto_backup = False
        config.validate()
    except HostkeeperError as e:
        display_error(e.message)
        sys.exit(1)

    setup_logging(verbose, config.state_dir, config.log_level)
    logger.debug(f"🚀 hostkeeper started - hosts_file: {config.hosts_file}")

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["manager"] = HostsManager(config)


@cli.command("list")
@click.option("--enabled", "state", flag_value="enabled", help="Only enabled entries.")
@click.option("--disabled", "state", flag_value="disabled", help="Only disabled entries.")
@click.option("--address", "-a", default=None, help="Only entries for this address.")
@click.pass_context
@handle_errors
def list_entries(ctx: click.Context, state: Optional[str], address: Optional[str]) -> None:
    """Show the entries of the hosts file."""
    entries = _manager(ctx).entries()
    if state == "enabled":
        entries = [e for e in entries if e.enabled]
    elif state == "disabled":
        entries = [e for e in entries if not e.enabled]
    if address:
        entries = [e for e in entries if e.address == address]

    if not entries:
        display_warning("No host entries found")
        return
    display_entries(entries)


@cli.command()
@click.argument("address")
@click.argument("hostname")
@click.option("--comment", "-c", default=None, help="Trailing comment for the new line.")
@click.pass_context
@handle_errors
def add(ctx: click.Context, address: str, hostname: str, comment: Optional[str]) -> None:
    """Append ADDRESS HOSTNAME to the hosts file."""
    _manager(ctx).add(address, hostname, comment)
    display_success(f"Added {address} {hostname}")


@cli.command()
@click.argument("line", type=int)
@click.argument("address")
@click.argument("hostname")
@click.option("--comment", "-c", default=None, help="New comment (keeps the current one if omitted).")
@click.option("--enable/--disable", "enabled", default=None, help="Set the line state (keeps it if omitted).")
@click.option(
    "--replace",
    "old_hostname",
    default=None,
    help="Only replace this hostname on the line and keep the others.",
)
@click.pass_context
@handle_errors
def edit(
    ctx: click.Context,
    line: int,
    address: str,
    hostname: str,
    comment: Optional[str],
    enabled: Optional[bool],
    old_hostname: Optional[str],
) -> None:
    """Rewrite the entry on LINE as ADDRESS HOSTNAME."""
    _manager(ctx).edit(line, address, hostname, comment, enabled, old_hostname)
    display_success(f"Updated line {line}: {address} {hostname}")


@cli.command()
@click.argument("address", required=False)
@click.argument("hostname", required=False)
@click.option("--line", "-l", type=int, default=None, help="Toggle this line number instead.")
@click.option("--loose", is_flag=True, help="Match address and hostname as substrings.")
@click.pass_context
@handle_errors
def toggle(
    ctx: click.Context,
    address: Optional[str],
    hostname: Optional[str],
    line: Optional[int],
    loose: bool,
) -> None:
    """Enable a disabled entry or disable an enabled one."""
    manager = _manager(ctx)
    if line is not None:
        manager.toggle_line(line)
        display_success(f"Toggled line {line}")
        return
    if not (address and hostname):
        raise click.UsageError("Pass ADDRESS HOSTNAME or --line N")
    manager.toggle(address, hostname, exact=not loose)
    display_success(f"Toggled {address} {hostname}")


@cli.command()
@click.argument("address")
@click.argument("hostname")
@click.option("--loose", is_flag=True, help="Match as substrings (IPv4 lines only).")
@click.pass_context
@handle_errors
def enable(ctx: click.Context, address: str, hostname: str, loose: bool) -> None:
    """Enable HOSTNAME and disable the other entries for ADDRESS."""
    _manager(ctx).enable_only(address, hostname, exact=not loose)
    display_success(f"Enabled {hostname} and disabled other entries with IP {address}")


@cli.command()
@click.argument("address")
@click.argument("hostname")
@click.option("--loose", is_flag=True, help="Match address and hostname as substrings.")
@click.pass_context
@handle_errors
def disable(ctx: click.Context, address: str, hostname: str, loose: bool) -> None:
    """Comment out the entry ADDRESS HOSTNAME."""
    _manager(ctx).disable(address, hostname, exact=not loose)
    display_success(f"Disabled host entry: {hostname}")


@cli.command()
@click.argument("line", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
@handle_errors
def delete(ctx: click.Context, line: int, yes: bool) -> None:
    """Delete the entry line LINE."""
    manager = _manager(ctx)
    if not yes:
        names = ", ".join(e.hostname for e in manager.document().entries_on_line(line))
        click.confirm(f"Delete line {line} ({names or 'no entries'})?", abort=True)
    manager.delete(line)
    display_success(f"Deleted line {line}")


@cli.command()
@click.pass_context
@handle_errors
def backup(ctx: click.Context) -> None:
    """Snapshot the hosts file into the backup directory."""
    path = _manager(ctx).backup()
    display_success(f"Hosts file backed up to: {path}")


@cli.command("backups")
@click.pass_context
@handle_errors
def list_backups(ctx: click.Context) -> None:
    """List backups, newest first."""
    backups = _manager(ctx).list_backups()
    if not backups:
        display_warning("No backup files found")
        return
    display_backups(backups)


@cli.command()
@click.argument("backup", required=False)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
@handle_errors
def restore(ctx: click.Context, backup: Optional[str], yes: bool) -> None:
    """Restore BACKUP (name or path), or the latest backup."""
    if not yes:
        click.confirm(f"Restore hosts file from {backup or 'the latest backup'}?", abort=True)
    path = _manager(ctx).restore(backup)
    display_success(f"Hosts file restored from {path.name}")


@cli.command("delete-backup")
@click.argument("backup")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
@handle_errors
def delete_backup(ctx: click.Context, backup: str, yes: bool) -> None:
    """Delete one backup file."""
    if not yes:
        click.confirm(f"Delete backup {backup}?", abort=True)
    path = _manager(ctx).delete_backup(backup)
    display_success(f"Backup deleted: {path.name}")


@cli.command("clean-backups")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
@handle_errors
def clean_backups(ctx: click.Context, yes: bool) -> None:
    """Delete every backup file."""
    manager = _manager(ctx)
    count = len(manager.list_backups())
    if count == 0:
        display_warning("No backup files found to clean up")
        return
    if not yes:
        click.confirm(f"Delete all {count} backup files? This cannot be undone.", abort=True)
    deleted = manager.clean_backups()
    display_success(f"Deleted {deleted} backup files")


@cli.command()
@click.pass_context
@handle_errors
def info(ctx: click.Context) -> None:
    """Show hosts file and environment details."""
    manager = _manager(ctx)
    display_info(manager.info(), manager.executor.shell_info(), str(manager.backups.directory))


@cli.command()
@click.pass_context
def path(ctx: click.Context) -> None:
    """Print the hosts file path."""
    click.echo(ctx.obj["config"].hosts_file)
