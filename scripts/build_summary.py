from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from prouni.aggregate.selection import Selection
from prouni.aggregate.summary import build_dashboard_summary
from prouni.config import CATEGORY_LABELS, DashboardConfig, load_config
from prouni.ingest.loaders import load_dashboard_inputs
from prouni.io.artifacts import summary_filename, write_json_atomic

logger = logging.getLogger("build_summary")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compute dashboard aggregates for one selection.")
    parser.add_argument("--config", type=Path, default=None, help="Optional dashboard JSON config.")
    parser.add_argument("--csv", type=str, default=None, help="Scholarship CSV path or URL.")
    parser.add_argument("--geojson", type=str, default=None, help="State GeoJSON path or URL.")
    parser.add_argument("--state", type=str, default="", help="State code (UF). Empty = no selection.")
    parser.add_argument("--year", type=str, default=None, help="Award year. Omit for all years.")
    parser.add_argument("--category", choices=tuple(CATEGORY_LABELS), default=None)
    parser.add_argument("--output", type=Path, default=None, help="Output JSON path.")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=ROOT_DIR / "reports" / "summaries",
        help="Directory for timestamped output when --output is not given.",
    )
    return parser.parse_args(argv)


def _resolve_config(args: argparse.Namespace) -> DashboardConfig:
    base = load_config(args.config)
    overrides: dict[str, Any] = base.to_dict()
    if args.csv:
        overrides["csv_source"] = args.csv
    if args.geojson:
        overrides["geojson_source"] = args.geojson
    return DashboardConfig.from_mapping(overrides)


def build_summary_payload(args: argparse.Namespace) -> dict[str, Any]:
    config = _resolve_config(args)
    selection = Selection.from_controls(
        args.state,
        args.year,
        args.category or config.default_category,
    )
    inputs = load_dashboard_inputs(config)
    summary = build_dashboard_summary(inputs.dataset, selection, config)

    payload = summary.to_dict()
    payload["data_sources"] = {
        "csv": config.csv_source,
        "geojson": config.geojson_source,
        "dataset_is_synthetic": inputs.dataset_is_synthetic,
        "geojson_is_synthetic": inputs.geojson_is_synthetic,
        "field_mapping": inputs.field_mapping.to_dict() if inputs.field_mapping else None,
        "errors": dict(inputs.errors),
    }
    return payload


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        payload = build_summary_payload(args)
    except (ValueError, FileNotFoundError) as exc:
        logger.error("Invalid arguments or configuration: %s", exc)
        return 2

    selection = payload["selection"]
    output_path = args.output or args.output_dir / summary_filename(selection["state"], selection["year"])
    write_json_atomic(payload, output_path)

    print(f"Selection state: {payload['selection_state']}")
    print(f"Total awards: {payload['total_awards']}")
    if payload["data_sources"]["dataset_is_synthetic"]:
        print("Warning: scholarship CSV unavailable, summary computed from synthetic data.")
    print(f"Wrote summary: {output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
