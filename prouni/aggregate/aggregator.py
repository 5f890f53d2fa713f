from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any

from prouni.aggregate.records import Records, as_frame, is_missing

DEFAULT_MISSING_LABEL = "Não informado"
DEFAULT_OTHER_LABEL = "Outros"


@dataclass(frozen=True, slots=True)
class AggregationEntry:
    category: str
    count: int
    percentage: float

    def to_dict(self) -> dict[str, Any]:
        return {"category": self.category, "count": self.count, "percentage": self.percentage}


def _category_label(value: Any, default_label: str) -> str:
    if is_missing(value):
        return default_label
    return str(value).strip()


def count_categories(records: Records, field: str, default_label: str = DEFAULT_MISSING_LABEL) -> Counter[str]:
    """Counts per category, keyed in first-encountered order."""

    df = as_frame(records)
    counts: Counter[str] = Counter()
    if df.empty:
        return counts
    if field not in df.columns:
        counts[default_label] = len(df)
        return counts
    for value in df[field].tolist():
        counts[_category_label(value, default_label)] += 1
    return counts


def aggregate_by_category(
    records: Records,
    field: str,
    *,
    default_label: str = DEFAULT_MISSING_LABEL,
    decimals: int = 1,
    max_categories: int | None = None,
    other_label: str = DEFAULT_OTHER_LABEL,
) -> list[AggregationEntry]:
    """Group records by ``field`` and rank the groups by count.

    Ties keep first-encountered order. With ``max_categories`` set and more
    distinct categories than that, the top ``max_categories - 1`` are kept and
    the remainder is folded into a single ``other_label`` entry.
    """

    if decimals < 0:
        raise ValueError("decimals must be non-negative.")
    if max_categories is not None and max_categories < 2:
        raise ValueError("max_categories must be at least 2.")

    counts = count_categories(records, field, default_label)
    total = sum(counts.values())
    if total == 0:
        return []

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    entries = [
        AggregationEntry(
            category=category,
            count=count,
            percentage=round(count / total * 100.0, decimals),
        )
        for category, count in ranked
    ]

    if max_categories is None or len(entries) <= max_categories:
        return entries

    kept = entries[: max_categories - 1]
    folded = entries[max_categories - 1 :]
    other = AggregationEntry(
        category=other_label,
        count=sum(entry.count for entry in folded),
        percentage=round(sum(entry.percentage for entry in folded), decimals),
    )
    return [*kept, other]
