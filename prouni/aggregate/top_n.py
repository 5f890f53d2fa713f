from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from prouni.aggregate.aggregator import count_categories
from prouni.aggregate.records import Records

_MISSING_SENTINEL = "\x00missing"


@dataclass(frozen=True, slots=True)
class TopEntry:
    name: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "count": self.count}


def top_n(records: Records, field: str = "ies", n: int = 5) -> list[TopEntry]:
    """Most frequent values of ``field``; rows without a value are not counted."""

    if n < 0:
        raise ValueError("n must be non-negative.")
    counts = count_categories(records, field, default_label=_MISSING_SENTINEL)
    counts.pop(_MISSING_SENTINEL, None)
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [TopEntry(name=name, count=count) for name, count in ranked[:n]]
