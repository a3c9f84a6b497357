from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


def read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def write_json(path: Path, obj: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj, indent=2, ensure_ascii=False, sort_keys=True) + "\n", encoding="utf-8")


def merge_json_log(path: Optional[Path], payload: dict[str, Any]) -> None:
    """Best-effort merge of `payload` into a JSON log file. Never raises."""
    if path is None:
        return

    try:
        if path.exists():
            existing = read_json(path)
            if isinstance(existing, dict):
                existing.update(payload)
                write_json(path, existing)
                return
        write_json(path, payload)
    except Exception:
        # The run log must never fail the run.
        return
