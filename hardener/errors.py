"""
Exception hierarchy for hardener.

Elevation and bundle errors are raised to the caller and end the run.
Dispatch errors are carried inside an ExecutionResult and end up as the
error text of a single policy result; they are never raised past the runner.
"""


class HardenerError(Exception):
    """Base class for every error raised by hardener."""


# ── Elevation ─────────────────────────────────────────────────────────────────

class ElevationError(HardenerError):
    pass


class ProbeError(ElevationError):
    """The current privilege level could not be determined."""


class AlreadyElevated(ElevationError):
    def __init__(self, message: str = "already elevated") -> None:
        super().__init__(message)


class NoElevationToolAvailable(ElevationError):
    """No consent mechanism (pkexec, sudo, UAC) can be used on this host."""


class RelaunchError(ElevationError):
    """The elevated copy of the program could not be started."""


# ── Dispatch ──────────────────────────────────────────────────────────────────

class DispatchError(HardenerError):
    pass


class UnsupportedKind(DispatchError):
    def __init__(self, kind: str) -> None:
        super().__init__(f"unsupported script kind: {kind}")
        self.kind = kind


class PlatformMismatch(DispatchError):
    pass


class InterpreterUnavailable(DispatchError):
    pass


class SpawnError(DispatchError):
    pass


class ScriptTimeout(DispatchError):
    def __init__(self, seconds: float) -> None:
        super().__init__(f"script timed out after {seconds:g}s")
        self.seconds = seconds


class DeadlineExceeded(DispatchError):
    def __init__(self, message: str = "run deadline exceeded") -> None:
        super().__init__(message)


# ── Bundle ────────────────────────────────────────────────────────────────────

class BundleError(HardenerError):
    """The policy bundle could not be read or parsed."""
