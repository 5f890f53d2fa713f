"""Pure aggregation functions over the scholarship record table."""

from prouni.aggregate.aggregator import AggregationEntry, aggregate_by_category
from prouni.aggregate.record_filter import filter_records
from prouni.aggregate.selection import Selection, SelectionState, classify_selection
from prouni.aggregate.time_series import TimeSeriesPoint, count_by_state, yearly_counts
from prouni.aggregate.top_n import TopEntry, top_n

__all__ = [
    "AggregationEntry",
    "Selection",
    "SelectionState",
    "TimeSeriesPoint",
    "TopEntry",
    "aggregate_by_category",
    "classify_selection",
    "count_by_state",
    "filter_records",
    "top_n",
    "yearly_counts",
]
