from __future__ import annotations

import ipaddress
import os
import re
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

__all__ = [
    "default_hosts_path",
    "validate_ip_address",
    "validate_hostname",
    "format_file_size",
    "HostsFileInfo",
    "get_hosts_file_info",
]

_HOSTNAME_RE = re.compile(
    r"^[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?(\.[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)


def default_hosts_path(platform: Optional[str] = None) -> str:
    """Return the system hosts file location for *platform*."""
    platform = platform or sys.platform
    if platform == "win32":
        return r"C:\Windows\System32\drivers\etc\hosts"
    return "/etc/hosts"


def validate_ip_address(value: str) -> bool:
    """Accept dotted-quad IPv4 and IPv6 addresses."""
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def validate_hostname(value: str) -> bool:
    if not value or len(value) > 253:
        return False
    return bool(_HOSTNAME_RE.match(value))


def format_file_size(size: int) -> str:
    if size <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB"]
    value = float(size)
    i = 0
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    return f"{round(value, 2):g} {units[i]}"


@dataclass
class HostsFileInfo:
    path: str
    exists: bool
    readable: bool
    writable: bool
    size: int
    last_modified: Optional[datetime]


def get_hosts_file_info(path: str) -> HostsFileInfo:
    hosts_path = Path(path)
    try:
        stats = hosts_path.stat()
    except OSError:
        return HostsFileInfo(path, False, False, False, 0, None)
    return HostsFileInfo(
        path=path,
        exists=True,
        readable=os.access(hosts_path, os.R_OK),
        writable=os.access(hosts_path, os.W_OK),
        size=stats.st_size,
        last_modified=datetime.fromtimestamp(stats.st_mtime),
    )
