"""
Elevation on POSIX hosts — effective uid check, relaunch through pkexec or sudo.
"""

import logging
import subprocess
from typing import Optional

from hardener.elevation.base import Elevator
from hardener.errors import AlreadyElevated, NoElevationToolAvailable, RelaunchError

logger = logging.getLogger(__name__)


# Preference order: polkit's graphical prompt first, then terminal sudo
_ELEVATION_TOOLS = ("pkexec", "sudo")


class PosixElevator(Elevator):
    """
    uid 0 means elevated.

    pkexec and sudo both prompt on the controlling terminal or need it to
    stay attached, so the relaunched copy always runs in the foreground and
    request_elevation() returns its exit code whatever `wait` says.
    """

    def is_elevated(self) -> bool:
        return self.host.geteuid() == 0

    def request_elevation(self, wait: bool = False) -> Optional[int]:
        if self.is_elevated():
            raise AlreadyElevated()

        tool = self._find_tool()
        cmd = [tool, *self.host.relaunch_command()]
        logger.info("Relaunching with %s", cmd[0])

        try:
            # stdin/stdout/stderr are inherited so the tool can prompt
            proc = subprocess.run(cmd, cwd=self.host.cwd(), check=False)
        except OSError as e:
            raise RelaunchError(f"start {tool}: {e}") from e
        return proc.returncode

    def _find_tool(self) -> str:
        for name in _ELEVATION_TOOLS:
            path = self.host.which(name)
            if path:
                return path
        raise NoElevationToolAvailable(
            "neither pkexec nor sudo is available to request elevation"
        )
