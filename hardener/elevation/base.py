"""
Elevation controller — the platform-neutral half.

Elevator  — abstract capability set {is_elevated, request_elevation}.
get_elevator()     — picks the single concrete variant for the host.
ensure_privileged() — two-phase startup: either we already hold privileges,
                      or an elevated sibling was started and the caller must
                      exit with the returned status.

ensure_privileged() never exits the process itself; the decision to
terminate belongs to the top-level caller.
"""

import enum
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from hardener.host import HostEnvironment, current_host

logger = logging.getLogger(__name__)


class Elevator(ABC):
    """
    Privilege detection and elevated relaunch for one platform.

    Subclasses must implement both methods. request_elevation() raises
    AlreadyElevated when called from an already-privileged process.
    """

    def __init__(self, host: Optional[HostEnvironment] = None) -> None:
        self.host = host or current_host()

    @abstractmethod
    def is_elevated(self) -> bool:
        """Return True when running with admin/root rights. Raises ProbeError."""

    @abstractmethod
    def request_elevation(self, wait: bool = False) -> Optional[int]:
        """
        Relaunch this program, with the same arguments, with elevated rights.

        Returns None when the elevated process was started detached, or its
        exit code when the call waited for it to finish.

        Raises AlreadyElevated, NoElevationToolAvailable or RelaunchError.
        """


# ── Two-phase startup ─────────────────────────────────────────────────────────

class Privilege(enum.Enum):
    ALREADY_PRIVILEGED = "already_privileged"
    RELAUNCHED = "relaunched"


@dataclass(frozen=True)
class PrivilegeOutcome:
    privilege: Privilege
    exit_code: int = 0          # status the caller must exit with after a relaunch

    @property
    def must_exit(self) -> bool:
        return self.privilege is Privilege.RELAUNCHED


def ensure_privileged(elevator: Elevator, wait: bool = False) -> PrivilegeOutcome:
    """
    Make sure the program runs elevated.

    Returns ALREADY_PRIVILEGED when the current process may carry on, or
    RELAUNCHED when a privileged copy has been started. In the latter case
    the caller must terminate immediately with `exit_code` so the host is
    not audited twice.

    ProbeError and the request_elevation() errors propagate; they are fatal.
    """
    if elevator.is_elevated():
        return PrivilegeOutcome(Privilege.ALREADY_PRIVILEGED)

    logger.info("Not elevated; requesting elevation via %s", type(elevator).__name__)
    code = elevator.request_elevation(wait=wait)
    return PrivilegeOutcome(Privilege.RELAUNCHED, exit_code=code or 0)


def get_elevator(host: Optional[HostEnvironment] = None) -> Elevator:
    """Return the Elevator variant for the host's platform."""
    host = host or current_host()
    if host.is_windows:
        from hardener.elevation.windows import WindowsElevator
        return WindowsElevator(host)
    from hardener.elevation.posix import PosixElevator
    return PosixElevator(host)
