from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from uuid import uuid4


def summary_filename(state: str | None, year: int | None, timestamp: datetime | None = None) -> str:
    resolved_ts = timestamp or datetime.now(tz=UTC)
    stamp = resolved_ts.astimezone(UTC).strftime("%Y%m%dT%H%M%SZ")
    state_part = (state or "all").lower()
    year_part = str(year) if year is not None else "all"
    return f"summary_{state_part}_{year_part}_{stamp}.json"


def write_json_atomic(payload: dict[str, Any], output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = output_path.parent / f"{output_path.name}.{uuid4().hex}.tmp"
    try:
        temp_path.write_text(
            json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False),
            encoding="utf-8",
        )
        temp_path.replace(output_path)
    finally:
        if temp_path.exists():
            temp_path.unlink()
