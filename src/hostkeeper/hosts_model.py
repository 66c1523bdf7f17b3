"""Hosts file text model.

Parses raw hosts text into :class:`HostEntry` records and applies point
edits back to the text.  Every function here is pure: it takes the current
lines (or text) and returns new ones, leaving untouched lines byte-for-byte
identical.  Reading and writing the real file is the job of
:class:`hostkeeper.hosts_manager.HostsManager`.

Line numbers are 1-based and only valid for the text they were parsed from.
Callers that chain edits should either re-parse between them or keep using
the same :class:`HostsDocument`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .exceptions import HostsEntryNotFoundError

__all__ = [
    "HostEntry",
    "HostsDocument",
    "parse",
    "split_lines",
    "join_lines",
    "active_content",
    "format_entry_line",
    "toggle_line",
    "toggle_match",
    "set_match_enabled",
    "set_exclusive_enabled",
    "insert_entry",
    "replace_entry_line",
    "delete_line",
]

# A disabled line only counts as an entry when it starts with a dotted quad;
# anything else behind a "#" is prose.
_DISABLED_ENTRY_RE = re.compile(r"^\d+\.\d+\.\d+\.\d+\s+")
_ENTRY_RE = re.compile(r"^\S+\s+")
_UNCOMMENT_RE = re.compile(r"^\s*#\s*")


@dataclass(frozen=True)
class HostEntry:
    """One hostname mapping taken from one physical line."""

    address: str
    hostname: str
    comment: Optional[str]
    enabled: bool
    line_number: int

    def __str__(self) -> str:
        state = "on" if self.enabled else "off"
        return f"{self.hostname} -> {self.address} [{state}] (line {self.line_number})"


# ---------------------------------------------------------------------------
# Line helpers
# ---------------------------------------------------------------------------

def split_lines(text: str) -> List[str]:
    return text.split("\n")


def join_lines(lines: List[str]) -> str:
    return "\n".join(lines)


def _with_eol(original: str, replacement: str) -> str:
    # Keep CRLF files CRLF when a line is rewritten.
    if original.endswith("\r") and not replacement.endswith("\r"):
        return replacement + "\r"
    return replacement


def active_content(line: str) -> Tuple[str, bool]:
    """Return ``(content, is_commented)`` for *line* with the disable marker removed."""
    stripped = line.strip()
    if stripped.startswith("#"):
        return stripped[1:].strip(), True
    return stripped, False


def _tokenize(content: str) -> Tuple[Optional[str], List[str], Optional[str]]:
    """Split active content into address, hostnames and trailing comment."""
    body, sep, tail = content.partition("#")
    comment = tail.strip() if sep else None
    tokens = body.split()
    if not tokens:
        return None, [], comment or None
    return tokens[0], tokens[1:], comment or None


def _is_entry_content(content: str, is_commented: bool) -> bool:
    if is_commented:
        return bool(_DISABLED_ENTRY_RE.match(content))
    return bool(_ENTRY_RE.match(content))


def format_entry_line(
    address: str,
    hostnames: List[str] | str,
    comment: Optional[str] = None,
    enabled: bool = True,
) -> str:
    """Render an entry line: ``address<TAB>host [host...]`` plus an optional comment."""
    if isinstance(hostnames, str):
        hostnames = [hostnames]
    line = f"{address}\t{' '.join(hostnames)}"
    if comment:
        line = f"{line}\t# {comment}"
    return line if enabled else f"# {line}"


def _check_line_number(lines: List[str], line_number: int) -> int:
    if line_number < 1 or line_number > len(lines):
        raise HostsEntryNotFoundError(
            f"Line {line_number} is out of range (1-{len(lines)})",
            {"line_number": line_number, "line_count": len(lines)},
        )
    return line_number - 1


def _matches(content: str, address: str, hostname: str, exact: bool) -> bool:
    if not exact:
        return address in content and hostname in content
    line_address, hostnames, _ = _tokenize(content)
    return line_address == address and hostname in hostnames


def _enable(line: str) -> str:
    return _with_eol(line, _UNCOMMENT_RE.sub("", line.strip()))


def _disable(line: str) -> str:
    return _with_eol(line, f"# {line.strip()}")


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse(text: str) -> List[HostEntry]:
    """Parse hosts *text* into entries, one per hostname.

    Lines that are blank, prose comments, or otherwise not shaped like
    ``address hostname...`` are skipped without error.
    """
    entries: List[HostEntry] = []
    for index, line in enumerate(split_lines(text)):
        if not line.strip():
            continue

        content, is_commented = active_content(line)
        if not content or not _is_entry_content(content, is_commented):
            continue

        address, hostnames, comment = _tokenize(content)
        for hostname in hostnames:
            entries.append(
                HostEntry(
                    address=address,
                    hostname=hostname,
                    comment=comment,
                    enabled=not is_commented,
                    line_number=index + 1,
                )
            )
    return entries


# ---------------------------------------------------------------------------
# Mutators
# ---------------------------------------------------------------------------

def toggle_line(lines: List[str], line_number: int) -> List[str]:
    """Flip one physical line between commented and uncommented."""
    index = _check_line_number(lines, line_number)
    line = lines[index]
    if not line.strip():
        raise HostsEntryNotFoundError(
            f"Line {line_number} is blank", {"line_number": line_number}
        )

    updated = list(lines)
    updated[index] = _enable(line) if line.strip().startswith("#") else _disable(line)
    return updated


def _find_match(lines: List[str], address: str, hostname: str, exact: bool) -> int:
    for index, line in enumerate(lines):
        content, _ = active_content(line)
        if content and _matches(content, address, hostname, exact):
            return index
    raise HostsEntryNotFoundError(
        f"Host entry not found: {address} {hostname}",
        {"address": address, "hostname": hostname},
    )


def toggle_match(
    lines: List[str], address: str, hostname: str, exact: bool = True
) -> List[str]:
    """Flip the first line naming *address* and *hostname*.

    With ``exact=False`` the lookup uses substring containment, so ``ab``
    also finds a line naming ``abc``.
    """
    index = _find_match(lines, address, hostname, exact)
    return toggle_line(lines, index + 1)


def set_match_enabled(
    lines: List[str], address: str, hostname: str, enabled: bool, exact: bool = True
) -> List[str]:
    """Force every line naming *address* and *hostname* into the given state."""
    updated = list(lines)
    found = False
    for index, line in enumerate(lines):
        content, is_commented = active_content(line)
        if not content or not _is_entry_content(content, is_commented):
            continue
        if not _matches(content, address, hostname, exact):
            continue
        found = True
        if enabled and is_commented:
            updated[index] = _enable(line)
        elif not enabled and not is_commented:
            updated[index] = _disable(line)

    if not found:
        raise HostsEntryNotFoundError(
            f"Host entry not found: {address} {hostname}",
            {"address": address, "hostname": hostname},
        )
    return updated


def set_exclusive_enabled(
    lines: List[str], address: str, hostname: str, exact: bool = True
) -> List[str]:
    """Enable the lines for *hostname* and disable its siblings under *address*.

    Lines for other addresses, prose comments and blank lines are returned
    unchanged.  The loose lookup only considers dotted-quad lines.
    """
    updated = list(lines)
    found = False
    for index, line in enumerate(lines):
        content, is_commented = active_content(line)
        if not content:
            continue
        if exact and not _is_entry_content(content, is_commented):
            continue
        if not exact and not _DISABLED_ENTRY_RE.match(content):
            continue

        line_address, hostnames, _ = _tokenize(content)
        if exact:
            in_group = line_address == address
            is_target = hostname in hostnames
        else:
            in_group = address in content
            is_target = hostname in content
        if not in_group:
            continue

        if is_target:
            found = True
            if is_commented:
                updated[index] = _enable(line)
        elif not is_commented:
            updated[index] = _disable(line)

    if not found:
        raise HostsEntryNotFoundError(
            f"Host entry not found: {address} {hostname}",
            {"address": address, "hostname": hostname},
        )
    return updated


def insert_entry(
    text: str, address: str, hostname: str, comment: Optional[str] = None
) -> str:
    """Append a new entry line at the end of *text*, using its line ending."""
    line = format_entry_line(address, hostname, comment)
    eol = "\r\n" if "\r\n" in text else "\n"
    if not text:
        return line + eol
    if text.endswith("\n"):
        return text + line + eol
    return text + eol + line


def replace_entry_line(
    lines: List[str],
    line_number: int,
    address: str,
    hostname: str,
    comment: Optional[str] = None,
    enabled: bool = True,
    old_hostname: Optional[str] = None,
) -> List[str]:
    """Rewrite the entry at *line_number*.

    Without *old_hostname* the whole line becomes ``address<TAB>hostname``.
    With it, only that hostname is replaced and any siblings on the line
    are kept: in place when the address is unchanged, otherwise the
    siblings stay on the original line and the edited mapping is written on
    a new line right below it.
    """
    index = _check_line_number(lines, line_number)
    original = lines[index]
    updated = list(lines)

    if old_hostname is None:
        updated[index] = _with_eol(original, format_entry_line(address, hostname, comment, enabled))
        return updated

    content, is_commented = active_content(original)
    line_address, hostnames, line_comment = _tokenize(content)
    if old_hostname not in hostnames:
        raise HostsEntryNotFoundError(
            f"Hostname {old_hostname} not found on line {line_number}",
            {"line_number": line_number, "hostname": old_hostname},
        )

    if len(hostnames) == 1:
        updated[index] = _with_eol(original, format_entry_line(address, hostname, comment, enabled))
        return updated

    if address == line_address:
        hostnames = [hostname if h == old_hostname else h for h in hostnames]
        updated[index] = _with_eol(original, format_entry_line(address, hostnames, comment, enabled))
        return updated

    siblings = [h for h in hostnames if h != old_hostname]
    updated[index] = _with_eol(
        original, format_entry_line(line_address, siblings, line_comment, not is_commented)
    )
    updated.insert(index + 1, _with_eol(original, format_entry_line(address, hostname, comment, enabled)))
    return updated


def delete_line(lines: List[str], line_number: int) -> List[str]:
    """Remove one physical line.  Later line numbers shift down by one."""
    index = _check_line_number(lines, line_number)
    return lines[:index] + lines[index + 1:]


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------

class HostsDocument:
    """Hosts text held as an ordered arena of physical lines.

    Entries are re-derived from the current lines on every call, so chained
    edits on one document never act on stale line numbers.
    """

    def __init__(self, text: str = "") -> None:
        self.lines: List[str] = split_lines(text)

    @property
    def text(self) -> str:
        return join_lines(self.lines)

    def entries(self) -> List[HostEntry]:
        return parse(self.text)

    def entries_on_line(self, line_number: int) -> List[HostEntry]:
        return [e for e in self.entries() if e.line_number == line_number]

    def find(self, address: str, hostname: str) -> Optional[HostEntry]:
        for entry in self.entries():
            if entry.address == address and entry.hostname == hostname:
                return entry
        return None

    def toggle_line(self, line_number: int) -> "HostsDocument":
        self.lines = toggle_line(self.lines, line_number)
        return self

    def toggle(self, address: str, hostname: str, exact: bool = True) -> "HostsDocument":
        self.lines = toggle_match(self.lines, address, hostname, exact)
        return self

    def set_enabled(
        self, address: str, hostname: str, enabled: bool, exact: bool = True
    ) -> "HostsDocument":
        self.lines = set_match_enabled(self.lines, address, hostname, enabled, exact)
        return self

    def enable_only(self, address: str, hostname: str, exact: bool = True) -> "HostsDocument":
        self.lines = set_exclusive_enabled(self.lines, address, hostname, exact)
        return self

    def add(self, address: str, hostname: str, comment: Optional[str] = None) -> "HostsDocument":
        self.lines = split_lines(insert_entry(self.text, address, hostname, comment))
        return self

    def replace(
        self,
        line_number: int,
        address: str,
        hostname: str,
        comment: Optional[str] = None,
        enabled: bool = True,
        old_hostname: Optional[str] = None,
    ) -> "HostsDocument":
        self.lines = replace_entry_line(
            self.lines, line_number, address, hostname, comment, enabled, old_hostname
        )
        return self

    def delete(self, line_number: int) -> "HostsDocument":
        self.lines = delete_line(self.lines, line_number)
        return self

    def __len__(self) -> int:
        return len(self.lines)
