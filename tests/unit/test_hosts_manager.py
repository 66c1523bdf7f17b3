"""Unit tests for HostsManager with an in-process executor."""
from __future__ import annotations

from pathlib import Path

import pytest

from hostkeeper.backups import BackupStore
from hostkeeper.exceptions import (
    HostkeeperValidationError,
    HostsEntryNotFoundError,
    HostsReadError,
    HostsWriteCancelled,
    HostsWriteError,
)
from hostkeeper.hosts_manager import HostsManager
from hostkeeper.hosts_model import parse

pytestmark = pytest.mark.unit


@pytest.fixture()
def manager(config, fake_executor) -> HostsManager:
    return HostsManager(config, executor=fake_executor)


def _states(hosts_file: Path) -> dict:
    return {(e.address, e.hostname): e.enabled for e in parse(hosts_file.read_text())}


def test_entries_reads_file(manager):
    entries = manager.entries()
    assert len(entries) == 7
    assert entries[0].hostname == "localhost"


def test_read_missing_file(config, fake_executor):
    config.hosts_file = str(Path(config.hosts_file).with_name("missing"))
    with pytest.raises(HostsReadError):
        HostsManager(config, executor=fake_executor).read()


def test_write_backs_up_and_copies(manager, hosts_file, fake_executor):
    original = hosts_file.read_text()

    backup_path = manager.write("127.0.0.1 localhost\n")

    assert hosts_file.read_text() == "127.0.0.1 localhost\n"
    assert backup_path is not None and backup_path.read_text() == original
    source, destination = fake_executor.copies[0]
    assert destination == str(hosts_file)
    assert not Path(source).exists(), "temporary file should be removed"


def test_write_without_auto_backup(manager, config):
    config.auto_backup = False
    assert manager.write("x\n") is None
    assert manager.list_backups() == []


def test_cancelled_write_leaves_file(manager, hosts_file, fake_executor):
    original = hosts_file.read_text()
    fake_executor.error = HostsWriteCancelled("Operation cancelled by user")

    with pytest.raises(HostsWriteCancelled):
        manager.toggle_line(3)

    assert hosts_file.read_text() == original
    assert not Path(fake_executor.copies[0][0]).exists()


def test_failed_write_is_distinct_from_cancel(manager, fake_executor):
    fake_executor.error = HostsWriteError("cp failed")
    with pytest.raises(HostsWriteError) as excinfo:
        manager.add("10.0.0.9", "new.local")
    assert not isinstance(excinfo.value, HostsWriteCancelled)


def test_add_appends_line(manager, hosts_file):
    manager.add("10.0.0.9", "new.local", "fresh")
    lines = hosts_file.read_text().split("\n")
    assert lines[-2] == "10.0.0.9\tnew.local\t# fresh"
    assert lines[-1] == ""


def test_add_validates_input(manager):
    with pytest.raises(HostkeeperValidationError):
        manager.add("999.1.1.1", "x.local")
    with pytest.raises(HostkeeperValidationError):
        manager.add("10.0.0.1", "bad host")


def test_toggle_and_toggle_line(manager, hosts_file):
    manager.toggle("10.0.0.2", "db.local")
    assert _states(hosts_file)[("10.0.0.2", "db.local")] is False

    manager.toggle_line(9)
    assert _states(hosts_file)[("10.0.0.2", "db.local")] is True


def test_toggle_line_out_of_range_does_not_write(manager, hosts_file, fake_executor):
    with pytest.raises(HostsEntryNotFoundError):
        manager.toggle_line(99)
    assert fake_executor.copies == []


def test_toggle_line_refuses_prose_comment(manager, hosts_file, fake_executor):
    original = hosts_file.read_text()

    with pytest.raises(HostsEntryNotFoundError):
        manager.toggle_line(1)

    assert fake_executor.copies == []
    assert hosts_file.read_text() == original
    assert len(manager.entries()) == 7


def test_edit_keeps_crlf_line_endings(manager, hosts_file):
    hosts_file.write_bytes(b"127.0.0.1 localhost\r\n10.0.0.1 a.local\r\n10.0.0.2 b.local\r\n")

    manager.toggle_line(2)
    assert hosts_file.read_bytes() == (
        b"127.0.0.1 localhost\r\n# 10.0.0.1 a.local\r\n10.0.0.2 b.local\r\n"
    )

    manager.add("10.0.0.3", "c.local")
    assert hosts_file.read_bytes().endswith(b"b.local\r\n10.0.0.3\tc.local\r\n")


def test_restore_keeps_crlf_bytes(manager, hosts_file):
    content = b"127.0.0.1 localhost\r\n10.0.0.1 a.local\r\n"
    hosts_file.write_bytes(content)
    manager.backup()
    manager.write("0.0.0.0 nothing\n", backup=False)

    manager.restore()

    assert hosts_file.read_bytes() == content


def test_enable_only(manager, hosts_file):
    manager.enable_only("10.0.0.1", "admin.local")
    states = _states(hosts_file)
    assert states[("10.0.0.1", "admin.local")] is True
    assert states[("10.0.0.1", "api.local")] is False
    assert states[("10.0.0.1", "web.local")] is False
    assert states[("10.0.0.2", "db.local")] is True
    assert states[("127.0.0.1", "localhost")] is True


def test_enable_only_ipv6_entry(manager, hosts_file):
    manager.enable_only("::1", "localhost")
    states = _states(hosts_file)
    assert states[("::1", "localhost")] is True
    assert states[("::1", "ip6-localhost")] is True
    assert states[("127.0.0.1", "localhost")] is True


def test_disable(manager, hosts_file):
    manager.disable("127.0.0.1", "localhost")
    assert _states(hosts_file)[("127.0.0.1", "localhost")] is False
    assert _states(hosts_file)[("::1", "localhost")] is True


def test_edit_keeps_state_and_comment(manager, hosts_file):
    manager.edit(8, "10.0.0.5", "admin.local")
    line = hosts_file.read_text().split("\n")[7]
    assert line == "# 10.0.0.5\tadmin.local"


def test_edit_single_hostname_of_shared_line(manager, hosts_file):
    manager.edit(7, "10.0.0.1", "www.local", old_hostname="web.local")
    line = hosts_file.read_text().split("\n")[6]
    assert line == "10.0.0.1\tapi.local www.local\t# staging"


def test_edit_line_without_entry(manager):
    with pytest.raises(HostsEntryNotFoundError):
        manager.edit(6, "10.0.0.1", "x.local")


def test_delete(manager, hosts_file):
    manager.delete(9)
    assert "db.local" not in hosts_file.read_text()
    with pytest.raises(HostsEntryNotFoundError):
        manager.delete(1)


def test_restore_latest(manager, hosts_file):
    original = hosts_file.read_text()
    manager.backup()
    manager.write("0.0.0.0 nothing\n", backup=False)

    restored = manager.restore()

    assert hosts_file.read_text() == original
    assert restored.name.startswith("hosts.backup.")


def test_restore_without_backups(manager):
    with pytest.raises(HostsEntryNotFoundError):
        manager.restore()


def test_backup_retention(manager, config):
    for _ in range(5):
        manager.backup()
    assert len(manager.list_backups()) == config.max_backups


def test_delete_and_clean_backups(manager):
    first = manager.backup()
    manager.backup()
    assert manager.delete_backup(first.name) == first
    assert manager.clean_backups() == 1


def test_default_collaborators(config):
    manager = HostsManager(config)
    assert isinstance(manager.backups, BackupStore)
    assert manager.backups.max_backups == config.max_backups
    assert manager.executor.use_sudo is False


def test_info(manager, hosts_file):
    info = manager.info()
    assert info.exists is True
    assert info.size == hosts_file.stat().st_size
