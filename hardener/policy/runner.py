"""
Policy runner — audit and snapshot passes over a bundle.

Both passes walk the bundle's policies one at a time, in order, and emit
exactly one result per policy. A policy that is skipped, whose script fails,
or whose output is malformed still yields its record; nothing one policy
does can abort the pass.

Audit classification (check block):

  bundle OS does not match host   → skipped
  no check block                  → skipped
  execution error / exit != 0     → error
  exit 0, stdout not a JSON object → ok
  exit 0, JSON without boolean `compliant` → ok
  exit 0, JSON with `compliant: true`     → ok,           compliant=True
  exit 0, JSON with `compliant: false`    → noncompliant, compliant=False

Snapshot runs the same gates and records stdout plus whatever JSON parses,
without a verdict.
"""

import json
import logging
from typing import Any, Callable, Optional

from hardener.host import HostEnvironment, current_host
from hardener.policy.dispatcher import Deadline, execute
from hardener.policy.models import (
    AuditResult,
    Bundle,
    ExecutionResult,
    ScriptBlock,
    SnapshotResult,
    kind_of,
)

logger = logging.getLogger(__name__)

Executor = Callable[[ScriptBlock, Optional[Deadline], HostEnvironment], ExecutionResult]


# ── Public API ────────────────────────────────────────────────────────────────

def run_audit(
    bundle: Bundle,
    deadline: Optional[Deadline] = None,
    host: Optional[HostEnvironment] = None,
    executor: Executor = execute,
) -> list[AuditResult]:
    """Run every policy's check block and classify the outcome."""
    host = host or current_host()
    results: list[AuditResult] = []

    for policy in bundle.policies:
        result = AuditResult(
            policy_id=policy.id,
            title=policy.title,
            kind=kind_of(policy.check),
            status="skipped",
        )

        mismatch = _os_mismatch(bundle, host)
        if mismatch:
            result.error = mismatch
        elif policy.check is None:
            result.error = "no check block"
        else:
            try:
                _classify(result, executor(policy.check, deadline, host))
            except Exception as e:
                # Recorded against this policy; the pass carries on
                logger.exception("Audit of %s failed", policy.id)
                result.status = "error"
                result.error = f"unexpected error in {policy.id}: {e}"

        logger.debug("audit %s → %s", policy.id, result.status)
        results.append(result)

    return results


def run_snapshot(
    bundle: Bundle,
    deadline: Optional[Deadline] = None,
    host: Optional[HostEnvironment] = None,
    executor: Executor = execute,
) -> list[SnapshotResult]:
    """Run every policy's snapshot block and record what it prints."""
    host = host or current_host()
    results: list[SnapshotResult] = []

    for policy in bundle.policies:
        result = SnapshotResult(
            policy_id=policy.id,
            title=policy.title,
            kind=kind_of(policy.snapshot),
        )

        mismatch = _os_mismatch(bundle, host)
        if mismatch:
            result.error = mismatch
        elif policy.snapshot is None:
            result.error = "no snapshot block"
        else:
            try:
                er = executor(policy.snapshot, deadline, host)
                result.raw = er.stdout
                result.stderr = er.stderr
                if er.failed:
                    result.error = er.failure_message()
                else:
                    result.parsed = try_parse_json(er.stdout)
            except Exception as e:
                logger.exception("Snapshot of %s failed", policy.id)
                result.error = f"unexpected error in {policy.id}: {e}"

        results.append(result)

    return results


def os_matches_bundle(host_system: str, bundle_os: str) -> bool:
    """
    Only a Windows bundle restricts where it runs. Any other value,
    including an empty one, is treated as applicable everywhere.
    """
    if bundle_os.lower() == "windows":
        return host_system == "windows"
    return True


def try_parse_json(stdout: str) -> Optional[dict[str, Any]]:
    """Parse stdout as a strict JSON object. Anything else returns None."""
    try:
        parsed = json.loads(stdout, parse_constant=_reject_constant)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


# ── Internal ──────────────────────────────────────────────────────────────────

def _reject_constant(name: str) -> None:
    # NaN and Infinity are not JSON; snapshot files must stay strict
    raise ValueError(f"non-standard JSON constant: {name}")


def _os_mismatch(bundle: Bundle, host: HostEnvironment) -> str:
    if not bundle.os or os_matches_bundle(host.system, bundle.os):
        return ""
    return f'bundle OS="{bundle.os}" does not match runtime="{host.system}"'


def _classify(result: AuditResult, er: ExecutionResult) -> None:
    result.raw = er.stdout
    result.stderr = er.stderr

    if er.failed:
        result.status = "error"
        result.error = er.failure_message()
        return

    # A script that exits 0 is compliant unless it says otherwise
    result.status = "ok"
    parsed = try_parse_json(er.stdout)
    if parsed is None:
        return
    result.parsed = parsed

    compliant = parsed.get("compliant")
    if isinstance(compliant, bool):
        result.compliant = compliant
        result.status = "ok" if compliant else "noncompliant"
