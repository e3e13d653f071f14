"""
Elevation on Windows.

Detection: there is no uid to check, so we run commands that only succeed
for an elevated administrator (fltmc, then `net session`) and read their
exit status.

Relaunch: ShellExecuteExW with the "runas" verb, which raises the UAC
consent prompt on the secure desktop. A process started this way crosses a
privilege boundary, so waiting for it goes through its process handle
rather than subprocess.
"""

import logging
import subprocess
from typing import Callable, Optional

from hardener.elevation.base import Elevator
from hardener.elevation.winargs import join_windows_args
from hardener.errors import (
    AlreadyElevated,
    NoElevationToolAvailable,
    ProbeError,
    RelaunchError,
)
from hardener.host import HostEnvironment

logger = logging.getLogger(__name__)


# Commands that exit non-zero for a non-elevated user, tried in order
_PROBES: tuple[tuple[str, ...], ...] = (
    ("fltmc",),
    ("net", "session"),
)

_SEE_MASK_NOCLOSEPROCESS = 0x00000040
_SW_SHOWNORMAL = 1
_INFINITE = 0xFFFFFFFF
_ERROR_CANCELLED = 1223

# (file, parameters, directory, wait) -> exit code when waited, else None
ShellExecute = Callable[[str, str, str, bool], Optional[int]]


class WindowsElevator(Elevator):
    def __init__(
        self,
        host: Optional[HostEnvironment] = None,
        shell_execute: Optional[ShellExecute] = None,
    ) -> None:
        super().__init__(host)
        self._shell_execute = shell_execute or shell_execute_runas

    def is_elevated(self) -> bool:
        for probe in _PROBES:
            path = self.host.which(probe[0])
            if path is None:
                continue
            try:
                code = self.host.run([path, *probe[1:]])
            except (OSError, subprocess.TimeoutExpired) as e:
                logger.debug("Elevation probe %s unusable: %s", probe[0], e)
                continue
            logger.debug("Elevation probe %s exited %d", probe[0], code)
            return code == 0
        raise ProbeError("unable to determine elevation (probing commands unavailable)")

    def request_elevation(self, wait: bool = False) -> Optional[int]:
        if self.is_elevated():
            raise AlreadyElevated()

        executable, *args = self.host.relaunch_command()
        params = join_windows_args(args)
        logger.info("Requesting UAC elevation for %s %s", executable, params)
        return self._shell_execute(executable, params, self.host.cwd(), wait)


def shell_execute_runas(file: str, params: str, directory: str, wait: bool) -> Optional[int]:
    """Start `file` elevated through ShellExecuteExW("runas")."""
    import ctypes

    try:
        shell32 = ctypes.WinDLL("shell32", use_last_error=True)
        kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)
    except (AttributeError, OSError) as e:
        raise NoElevationToolAvailable(f"shell32 is not available: {e}") from e

    from ctypes import wintypes

    class SHELLEXECUTEINFOW(ctypes.Structure):
        _fields_ = [
            ("cbSize", wintypes.DWORD),
            ("fMask", wintypes.ULONG),
            ("hwnd", wintypes.HWND),
            ("lpVerb", wintypes.LPCWSTR),
            ("lpFile", wintypes.LPCWSTR),
            ("lpParameters", wintypes.LPCWSTR),
            ("lpDirectory", wintypes.LPCWSTR),
            ("nShow", ctypes.c_int),
            ("hInstApp", wintypes.HINSTANCE),
            ("lpIDList", ctypes.c_void_p),
            ("lpClass", wintypes.LPCWSTR),
            ("hkeyClass", wintypes.HKEY),
            ("dwHotKey", wintypes.DWORD),
            ("hIconOrMonitor", wintypes.HANDLE),
            ("hProcess", wintypes.HANDLE),
        ]

    shell32.ShellExecuteExW.argtypes = [ctypes.POINTER(SHELLEXECUTEINFOW)]
    shell32.ShellExecuteExW.restype = wintypes.BOOL
    kernel32.WaitForSingleObject.argtypes = [wintypes.HANDLE, wintypes.DWORD]
    kernel32.WaitForSingleObject.restype = wintypes.DWORD
    kernel32.GetExitCodeProcess.argtypes = [wintypes.HANDLE, ctypes.POINTER(wintypes.DWORD)]
    kernel32.GetExitCodeProcess.restype = wintypes.BOOL
    kernel32.CloseHandle.argtypes = [wintypes.HANDLE]
    kernel32.CloseHandle.restype = wintypes.BOOL

    info = SHELLEXECUTEINFOW()
    info.cbSize = ctypes.sizeof(info)
    info.fMask = _SEE_MASK_NOCLOSEPROCESS
    info.lpVerb = "runas"
    info.lpFile = file
    info.lpParameters = params
    info.lpDirectory = directory
    info.nShow = _SW_SHOWNORMAL

    if not shell32.ShellExecuteExW(ctypes.byref(info)):
        err = ctypes.get_last_error()
        if err == _ERROR_CANCELLED:
            raise RelaunchError("elevation request was declined")
        raise RelaunchError(f"ShellExecuteExW failed, code={err}: {ctypes.FormatError(err)}")

    handle = info.hProcess
    if not handle:
        return None
    try:
        if not wait:
            return None
        kernel32.WaitForSingleObject(handle, _INFINITE)
        code = wintypes.DWORD()
        if not kernel32.GetExitCodeProcess(handle, ctypes.byref(code)):
            raise RelaunchError(f"GetExitCodeProcess failed, code={ctypes.get_last_error()}")
        return code.value
    finally:
        kernel32.CloseHandle(handle)
