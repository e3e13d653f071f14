"""
Result files — write snapshot result sets to timestamped JSON files.

One file per run: <dir>/snapshot-YYYYMMDD-HHMMSS.json, readable only by
the owner since snapshots can capture sensitive host state.
"""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from hardener.policy.models import AuditResult, SnapshotResult


def save_snapshot(
    results: Sequence[SnapshotResult],
    directory: Path,
    now: Optional[datetime] = None,
) -> Path:
    """
    Write the snapshot results and return the file path.

    Raises OSError when the directory or file cannot be written.
    """
    ts = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"snapshot-{ts}.json"

    payload = json.dumps([r.to_dict() for r in results], indent=2)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(payload)
    return path


def load_snapshot(path: Path) -> list[SnapshotResult]:
    """Read back a file written by save_snapshot()."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return [SnapshotResult.from_dict(d) for d in data]


def audit_json(results: Sequence[AuditResult]) -> str:
    """Serialise audit results for --json output."""
    return json.dumps([r.to_dict() for r in results], indent=2)
