"""
Core data model for hardener policies and their results.

Bundle / Policy / ScriptBlock — the loaded, immutable policy bundle.
AuditResult / SnapshotResult — one record per policy per run.

Result records serialise with to_dict() and rebuild with from_dict();
optional fields are omitted when empty and restored on the way back in.
"""

from dataclasses import dataclass, field
from typing import Any, Literal, Optional

from hardener.errors import BundleError


AuditStatus = Literal["ok", "noncompliant", "error", "skipped"]

DEFAULT_TIMEOUT = 60  # seconds, used when a block declares none


# ── Bundle ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ScriptBlock:
    kind: str                   # "powershell" | "bash" | "shell" | "sh"
    script: str                 # literal script body
    timeout: int = 0            # seconds; <= 0 means DEFAULT_TIMEOUT

    @property
    def effective_timeout(self) -> int:
        return self.timeout if self.timeout > 0 else DEFAULT_TIMEOUT

    @classmethod
    def from_dict(cls, data: Any) -> Optional["ScriptBlock"]:
        if data is None:
            return None
        if not isinstance(data, dict):
            raise BundleError(f"script block must be a mapping, got {type(data).__name__}")
        timeout = data.get("timeout") or 0
        try:
            timeout = int(timeout)
        except (TypeError, ValueError):
            raise BundleError(f"invalid script timeout: {timeout!r}") from None
        return cls(
            kind=str(data.get("kind") or ""),
            script=str(data.get("script") or ""),
            timeout=timeout,
        )


@dataclass(frozen=True)
class Policy:
    # Identity
    id: str
    title: str
    category: str = ""
    subcategory: str = ""
    severity: str = ""
    levels: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()

    # Script blocks. Only check and snapshot are ever dispatched.
    check: Optional[ScriptBlock] = None
    snapshot: Optional[ScriptBlock] = None
    remediate: Optional[ScriptBlock] = None
    rollback: Optional[ScriptBlock] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Policy":
        if not isinstance(data, dict):
            raise BundleError(f"policy must be a mapping, got {type(data).__name__}")
        return cls(
            id=str(data.get("id") or ""),
            title=str(data.get("title") or ""),
            category=str(data.get("category") or ""),
            subcategory=str(data.get("subcategory") or ""),
            severity=str(data.get("severity") or ""),
            levels=_str_tuple(data.get("levels"), "levels"),
            tags=_str_tuple(data.get("tags"), "tags"),
            check=ScriptBlock.from_dict(data.get("check")),
            snapshot=ScriptBlock.from_dict(data.get("snapshot")),
            remediate=ScriptBlock.from_dict(data.get("remediate")),
            rollback=ScriptBlock.from_dict(data.get("rollback")),
        )


@dataclass(frozen=True)
class Bundle:
    os: str = ""                            # "" means no OS restriction
    policies: tuple[Policy, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> "Bundle":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise BundleError(f"bundle must be a mapping, got {type(data).__name__}")
        policies = data.get("policies") or []
        if not isinstance(policies, list):
            raise BundleError("bundle 'policies' must be a list")
        return cls(
            os=str(data.get("os") or ""),
            policies=tuple(Policy.from_dict(p) for p in policies),
        )


def _str_tuple(value: Any, name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise BundleError(f"policy '{name}' must be a list")
    return tuple(str(v) for v in value)


def kind_of(block: Optional[ScriptBlock]) -> str:
    return block.kind if block is not None else ""


# ── Execution ─────────────────────────────────────────────────────────────────

@dataclass
class ExecutionResult:
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
    error: Optional[Exception] = None   # execution-layer failure, not a non-zero exit

    @property
    def failed(self) -> bool:
        return self.error is not None or self.exit_code != 0

    def failure_message(self) -> str:
        if self.error is not None:
            return str(self.error)
        return f"non-zero exit code: {self.exit_code}"


# ── Results ───────────────────────────────────────────────────────────────────

@dataclass
class AuditResult:
    policy_id: str
    title: str
    kind: str
    status: AuditStatus = "skipped"
    compliant: Optional[bool] = None        # only set from a boolean `compliant` key
    raw: str = ""                           # script stdout, verbatim
    parsed: Optional[dict[str, Any]] = None
    stderr: str = ""
    error: str = ""

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "policy_id": self.policy_id,
            "title": self.title,
            "kind": self.kind,
            "status": self.status,
        }
        if self.compliant is not None:
            d["compliant"] = self.compliant
        d["raw"] = self.raw
        return _add_optional(d, self.parsed, self.stderr, self.error)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuditResult":
        return cls(
            policy_id=data["policy_id"],
            title=data["title"],
            kind=data.get("kind", ""),
            status=data["status"],
            compliant=data.get("compliant"),
            raw=data.get("raw", ""),
            parsed=data.get("parsed"),
            stderr=data.get("stderr", ""),
            error=data.get("error", ""),
        )


@dataclass
class SnapshotResult:
    policy_id: str
    title: str
    kind: str
    raw: str = ""
    parsed: Optional[dict[str, Any]] = None
    stderr: str = ""
    error: str = ""

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "policy_id": self.policy_id,
            "title": self.title,
            "kind": self.kind,
            "raw": self.raw,
        }
        return _add_optional(d, self.parsed, self.stderr, self.error)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SnapshotResult":
        return cls(
            policy_id=data["policy_id"],
            title=data["title"],
            kind=data.get("kind", ""),
            raw=data.get("raw", ""),
            parsed=data.get("parsed"),
            stderr=data.get("stderr", ""),
            error=data.get("error", ""),
        )


def _add_optional(
    d: dict[str, Any],
    parsed: Optional[dict[str, Any]],
    stderr: str,
    error: str,
) -> dict[str, Any]:
    if parsed is not None:
        d["parsed"] = parsed
    if stderr:
        d["stderr"] = stderr
    if error:
        d["error"] = error
    return d
