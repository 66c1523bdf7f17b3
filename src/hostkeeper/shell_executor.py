from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from typing import List, Optional

from .exceptions import ErrorHandler, HostkeeperError, HostsWriteError

__all__ = ["ShellExecutor"]

logger = logging.getLogger("hostkeeper.shell_executor")

DEFAULT_TIMEOUT = 30
AUTH_PROMPT_TIMEOUT = 60


def _is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


class ShellExecutor:
    """Run shell commands, elevating through sudo when a write needs it.

    The executor is the only place that knows how privileges are obtained:
    already root, cached ``sudo`` credentials, or the macOS authorization
    dialog via ``osascript``.  Anything else is reported back as a
    :class:`HostsWriteError` so the caller can tell the user what to do.
    """

    def __init__(self, use_sudo: bool = True, platform: Optional[str] = None) -> None:
        self.use_sudo = use_sudo
        self.platform = platform or sys.platform
        self.errors = ErrorHandler(logger)

    def execute(self, args: List[str], timeout: int = DEFAULT_TIMEOUT) -> str:
        """Run *args* and return stdout; failures raise hostkeeper errors."""
        logger.debug(f"Running: {' '.join(args)}")
        try:
            proc = subprocess.run(
                args, capture_output=True, text=True, check=True, timeout=timeout
            )
            if proc.stderr:
                logger.warning(f"Shell command stderr: {proc.stderr.strip()}")
            return proc.stdout
        except FileNotFoundError as e:
            self.errors.log_and_raise(
                HostsWriteError, f"Command not found: {args[0]}", e, {"command": " ".join(args)}
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, PermissionError) as e:
            self.errors.handle_subprocess_error(args, e, "shell command")

    def check_sudo_access(self) -> bool:
        """Return ``True`` when sudo runs without asking for a password."""
        try:
            proc = subprocess.run(["sudo", "-n", "true"], capture_output=True, check=False)
        except FileNotFoundError:
            return False
        return proc.returncode == 0

    def execute_with_sudo(self, args: List[str], prompt: Optional[str] = None) -> str:
        """Run *args* with elevated privileges."""
        if self.platform == "win32" or not self.use_sudo or _is_root():
            return self.execute(args)

        if self.check_sudo_access():
            return self.execute(["sudo", *args])

        if self.platform == "darwin":
            return self._execute_with_macos_auth(args, prompt)

        raise HostsWriteError(
            'Sudo authentication required. Please run "sudo true" in a terminal '
            "first to cache credentials, then try again.",
            {"command": " ".join(args)},
        )

    def _execute_with_macos_auth(self, args: List[str], prompt: Optional[str]) -> str:
        command = " ".join(_shell_quote(a) for a in args).replace('"', '\\"')
        script = f'do shell script "{command}" with administrator privileges'
        if prompt:
            escaped_prompt = prompt.replace('"', '\\"')
            script += f' with prompt "{escaped_prompt}"'
        return self.execute(["osascript", "-e", script], timeout=AUTH_PROMPT_TIMEOUT)

    def copy_elevated(self, source: str, destination: str, prompt: Optional[str] = None) -> None:
        """Copy *source* over *destination*, elevating when needed."""
        if self.platform == "win32":
            self.execute(["cmd", "/c", "copy", "/Y", source, destination])
            return
        self.execute_with_sudo(["cp", source, destination], prompt)

    def shell_info(self) -> dict[str, str]:
        shell = os.environ.get("SHELL") or shutil.which("bash") or "unknown"
        try:
            version = self.execute([shell, "--version"]).strip().splitlines()[0]
        except (HostkeeperError, IndexError):
            version = "Unknown"
        return {"shell": shell, "version": version}


def _shell_quote(arg: str) -> str:
    return "'" + arg.replace("'", "'\\''") + "'"
