"""JSON artifact helpers for dashboard summaries."""

from prouni.io.artifacts import summary_filename, write_json_atomic

__all__ = ["summary_filename", "write_json_atomic"]
