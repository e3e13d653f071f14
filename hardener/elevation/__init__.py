"""
Privilege elevation.

Modules:
  base.py    — Elevator interface, variant selection, ensure_privileged().
  posix.py   — uid check, relaunch via pkexec / sudo.
  windows.py — probe-based check, relaunch via the UAC consent prompt.
  winargs.py — Windows command-line quoting for the relaunch.
"""

from hardener.elevation.base import (
    Elevator,
    Privilege,
    PrivilegeOutcome,
    ensure_privileged,
    get_elevator,
)

__all__ = [
    "Elevator",
    "Privilege",
    "PrivilegeOutcome",
    "ensure_privileged",
    "get_elevator",
]
