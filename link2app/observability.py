# link2app/observability.py
from __future__ import annotations
import json
import os
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

AUDIT_LOG = os.getenv("LINK2APP_AUDIT_LOG", "runtime/audit.log.jsonl")

_lock = threading.Lock()

def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

def _path(path: Optional[str]) -> str:
    return path or AUDIT_LOG

def audit_log(
    *,
    run_id: str,
    action: str,
    status: str,
    params: Dict[str, Any] | None = None,
    message: str | None = None,
    extra: Dict[str, Any] | None = None,
    path: str | None = None,
) -> None:
    """
    Append one JSON line to the audit file.
    status: "start" | "ok" | "error"
    """
    rec = {
        "ts": _now_iso(),
        "run_id": run_id,
        "action": action,
        "status": status,
        "params": params or {},
        "message": message or "",
        **(extra or {}),
    }
    line = json.dumps(rec, ensure_ascii=False, default=str)
    target = _path(path)
    with _lock:
        folder = os.path.dirname(target)
        if folder:
            os.makedirs(folder, exist_ok=True)
        with open(target, "a", encoding="utf-8") as f:
            f.write(line + "\n")

def _read_lines(path: str) -> List[str]:
    if not os.path.exists(path):
        return []
    with open(path, "r", encoding="utf-8") as f:
        return f.read().splitlines()

def _parse(lines: List[str]) -> List[Dict[str, Any]]:
    events: List[Dict[str, Any]] = []
    for ln in lines:
        try:
            events.append(json.loads(ln))
        except json.JSONDecodeError:
            # a torn line from a crashed writer; skip it
            continue
    return events

def list_events(limit: int = 200, path: str | None = None) -> List[Dict[str, Any]]:
    lines = _read_lines(_path(path))
    return _parse(lines[-limit:]) if lines else []

def list_run(run_id: str, path: str | None = None) -> List[Dict[str, Any]]:
    return [rec for rec in _parse(_read_lines(_path(path))) if rec.get("run_id") == run_id]
