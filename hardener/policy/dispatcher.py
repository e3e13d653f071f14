"""
Script dispatcher — run one ScriptBlock as a child process.

execute() never raises for a policy-level problem. Unsupported kinds,
platform mismatches, missing interpreters, spawn failures and timeouts all
come back as an ExecutionResult with exit_code -1 and `error` set, so the
runner can turn them into a single `error` result.

The script body is always written to a temporary file and passed to the
interpreter by path, never inlined on the command line.
"""

import logging
import os
import signal
import subprocess
import tempfile
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from hardener.errors import (
    DeadlineExceeded,
    InterpreterUnavailable,
    PlatformMismatch,
    ScriptTimeout,
    SpawnError,
    UnsupportedKind,
)
from hardener.host import HostEnvironment, current_host
from hardener.policy.models import ExecutionResult, ScriptBlock

logger = logging.getLogger(__name__)


# Seconds to wait for a killed child to release its pipes
_REAP_TIMEOUT = 5

_POSIX = os.name == "posix"


# ── Deadline ──────────────────────────────────────────────────────────────────

class Deadline:
    """Overall run deadline on the monotonic clock."""

    def __init__(self, seconds: float) -> None:
        self.seconds = seconds
        self._expires_at = time.monotonic() + seconds

    def remaining(self) -> float:
        return max(0.0, self._expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0


# ── Interpreters ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Interpreter:
    binary: str
    args: tuple[str, ...]       # placed between the binary and the script path
    suffix: str
    encoding: str
    windows: bool               # True: Windows only. False: everything else.

    def supports(self, host: HostEnvironment) -> bool:
        return host.is_windows == self.windows


_POWERSHELL = Interpreter(
    binary="powershell.exe",
    args=("-NoProfile", "-NonInteractive", "-ExecutionPolicy", "Bypass", "-File"),
    suffix=".ps1",
    # Windows PowerShell reads BOM-less scripts in the ANSI code page
    encoding="utf-8-sig",
    windows=True,
)

_BASH = Interpreter(
    binary="bash",
    args=("-o", "pipefail"),
    suffix=".sh",
    encoding="utf-8",
    windows=False,
)

INTERPRETERS: dict[str, Interpreter] = {
    "powershell": _POWERSHELL,
    "bash": _BASH,
    "shell": _BASH,
    "sh": _BASH,
}


# ── Public API ────────────────────────────────────────────────────────────────

def execute(
    block: ScriptBlock,
    deadline: Optional[Deadline] = None,
    host: Optional[HostEnvironment] = None,
) -> ExecutionResult:
    """
    Run block.script with the interpreter for block.kind and capture its output.

    Args:
        block:    The script block to run.
        deadline: Overall run deadline; the child is bound by whichever of
                  this and the block's own timeout elapses first.
        host:     Host environment (defaults to the real one).

    Returns:
        ExecutionResult. A normal exit carries the real exit code and no
        error; every other outcome carries exit_code -1 and an error.
    """
    host = host or current_host()

    interpreter = INTERPRETERS.get(block.kind)
    if interpreter is None:
        return _failure(UnsupportedKind(block.kind))

    if not interpreter.supports(host):
        required = "Windows" if interpreter.windows else "a non-Windows host"
        return _failure(PlatformMismatch(f"{block.kind} execution requires {required}"))

    timeout: float = block.effective_timeout
    bounded_by_deadline = False
    if deadline is not None:
        remaining = deadline.remaining()
        if remaining <= 0:
            return _failure(DeadlineExceeded())
        if remaining < timeout:
            timeout = remaining
            bounded_by_deadline = True

    binary = host.which(interpreter.binary)
    if binary is None:
        return _failure(InterpreterUnavailable(f"{interpreter.binary} not found on PATH"))

    try:
        with _script_file(block.script, interpreter) as path:
            cmd = [binary, *interpreter.args, path]
            logger.debug("Running %s script %s (timeout %.1fs)", block.kind, path, timeout)
            return _run(cmd, timeout, bounded_by_deadline)
    except OSError as e:
        return _failure(SpawnError(f"write temp script: {e}"))


# ── Internal ──────────────────────────────────────────────────────────────────

def _failure(error: Exception, stdout: str = "", stderr: str = "") -> ExecutionResult:
    return ExecutionResult(stdout=stdout, stderr=stderr, exit_code=-1, error=error)


@contextmanager
def _script_file(script: str, interpreter: Interpreter) -> Iterator[str]:
    """Write script to a fresh temp file and remove it on every exit path."""
    fd, path = tempfile.mkstemp(prefix="policy-", suffix=interpreter.suffix)
    try:
        with os.fdopen(fd, "w", encoding=interpreter.encoding, newline="") as f:
            f.write(script)
        yield path
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass


def _run(
    cmd: list[str],
    timeout: float,
    bounded_by_deadline: bool,
) -> ExecutionResult:
    try:
        proc = subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            # Own process group, so a timeout can take down the script's children too
            start_new_session=_POSIX,
        )
    except OSError as e:
        return _failure(SpawnError(f"start {cmd[0]}: {e}"))

    try:
        out, err = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired as exc:
        _kill(proc)
        try:
            out, err = proc.communicate(timeout=_REAP_TIMEOUT)
        except subprocess.TimeoutExpired as late:
            # A descendant outside the process group still holds the pipes
            out, err = late.stdout or exc.stdout, late.stderr or exc.stderr
            _release(proc)
        error = DeadlineExceeded() if bounded_by_deadline else ScriptTimeout(timeout)
        logger.warning("%s: %s", cmd[-1], error)
        return _failure(error, _decode(out), _decode(err))

    return ExecutionResult(
        stdout=_decode(out),
        stderr=_decode(err),
        exit_code=proc.returncode,
    )


def _kill(proc: subprocess.Popen) -> None:
    if _POSIX:
        try:
            os.killpg(proc.pid, signal.SIGKILL)
            return
        except OSError:
            pass
    proc.kill()


def _release(proc: subprocess.Popen) -> None:
    for pipe in (proc.stdout, proc.stderr):
        if pipe is not None:
            pipe.close()
    proc.wait()


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")
