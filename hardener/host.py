"""
Host environment — platform identity, privileges, executables, command line.

Every platform-dependent question the engine asks goes through a
HostEnvironment instance so tests can substitute a fake host and exercise
Windows behaviour on Linux and vice versa.
"""

import os
import platform
import shutil
import subprocess
import sys
from functools import lru_cache
from pathlib import Path
from typing import Optional


_OS_RELEASE = Path("/etc/os-release")

# Distributions with a known policy bundle
_KNOWN_LINUX_IDS = frozenset(("ubuntu", "centos"))


class HostEnvironment:
    """
    The running host, as seen by the elevation controller and dispatcher.

    `system` is the lower-cased platform name ("windows", "linux", "darwin").
    """

    def __init__(
        self,
        system: Optional[str] = None,
        os_release: Path = _OS_RELEASE,
    ) -> None:
        self.system = (system or platform.system()).lower()
        self.os_release = os_release

    def __repr__(self) -> str:
        return f"{type(self).__name__}(system={self.system!r})"

    @property
    def is_windows(self) -> bool:
        return self.system == "windows"

    # ── Identity ──────────────────────────────────────────────────────────────

    def detect_os(self) -> str:
        """Return "windows", "ubuntu", "centos" or "unknown"."""
        if self.is_windows:
            return "windows"
        if self.system == "linux":
            distro = self.linux_id()
            if distro in _KNOWN_LINUX_IDS:
                return distro
        return "unknown"

    def linux_id(self) -> str:
        """Lower-cased ID= value from os-release, or '' when unreadable."""
        try:
            lines = self.os_release.read_text(encoding="utf-8").splitlines()
        except OSError:
            return ""
        for line in lines:
            if line.startswith("ID="):
                return line[len("ID="):].strip().strip('"').strip("'").lower()
        return ""

    # ── Privileges & processes ────────────────────────────────────────────────

    def geteuid(self) -> int:
        return os.geteuid()

    def which(self, name: str) -> Optional[str]:
        """Absolute path of an executable on PATH, or None."""
        return shutil.which(name)

    def run(self, cmd: list[str], timeout: int = 10) -> int:
        """
        Run a probe command silently and return its exit code.

        Raises OSError when the command cannot be started and
        subprocess.TimeoutExpired when it hangs.
        """
        proc = subprocess.run(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            timeout=timeout,
            check=False,
        )
        return proc.returncode

    def cwd(self) -> str:
        return os.getcwd()

    def relaunch_command(self) -> list[str]:
        """
        Absolute executable followed by the arguments of this invocation.

        sys.orig_argv keeps interpreter options such as `-m hardener`, so the
        relaunched process starts exactly the way this one did.
        """
        executable = os.path.abspath(sys.executable)
        if getattr(sys, "frozen", False):
            return [executable, *sys.argv[1:]]
        return [executable, *sys.orig_argv[1:]]


@lru_cache(maxsize=1)
def current_host() -> HostEnvironment:
    """The real host this process runs on."""
    return HostEnvironment()
