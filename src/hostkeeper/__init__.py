"""hostkeeper - toggle, edit and back up hosts file entries"""
from __future__ import annotations

__version__ = "0.1.0"

from .hosts_model import HostEntry, HostsDocument, parse  # noqa: E402
from .backups import BackupStore  # noqa: E402
from .hosts_manager import HostsManager  # noqa: E402
from .config import Config  # noqa: E402

__all__: list[str] = [
    "HostEntry",
    "HostsDocument",
    "parse",
    "BackupStore",
    "HostsManager",
    "Config",
]
