"""Command-line runner for inspecting an ABC database export.

This script loads `item.data` and `item_posted.data`, reconciles them into
products, and writes a structured JSON report under `output/` by default.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from abc_product import ExportParseError, load_export
from abc_product.models import DataIssue, ExtractResult, Product
from abc_product.parser import DEFAULT_ENCODING

logger = logging.getLogger("inspect_export")

DEFAULT_EXPORT_DIR = Path(os.environ.get("ABC_EXPORT_DIR", r"C:\ABC Software\Database Export\Company001\Data"))
DEFAULT_ITEM_DATA = DEFAULT_EXPORT_DIR / "item.data"
DEFAULT_ITEM_POSTED_DATA = DEFAULT_EXPORT_DIR / "item_posted.data"
DEFAULT_OUTPUT = Path("output/export_report.json")


def _issue_to_dict(issue: DataIssue, *, source: str) -> dict[str, Any]:
    """Serialize a `DataIssue` into a JSON-friendly dictionary."""

    return {
        "source": source,
        "code": issue.code,
        "field": issue.field,
        "row": issue.row,
        "sku": issue.sku,
        "message": issue.message,
    }


def _product_to_dict(product: Product) -> dict[str, Any]:
    """Serialize a product; prices stay strings so no precision is lost."""

    return {
        "sku": product.sku,
        "description": product.description,
        "barcodes": list(product.barcodes),
        "list_price": str(product.list_price),
        "cost": str(product.cost),
        "stock": product.stock,
        "group": product.group,
        "weight": product.weight,
        "last_sold": product.last_sold.isoformat() if product.last_sold else None,
        "alt_skus": list(product.alt_skus),
    }


def _collect_issues(result: ExtractResult, *, source: str) -> list[dict[str, Any]]:
    return [_issue_to_dict(issue, source=source) for issue in result.issues]


def build_report(*, item_path: Path, item_posted_path: Path, encoding: str = DEFAULT_ENCODING) -> dict[str, Any]:
    """Build a complete export report payload."""

    export = load_export(item_path, item_posted_path, encoding=encoding)
    issues = [
        *_collect_issues(export.item_data, source="item.data"),
        *_collect_issues(export.item_posted_data, source="item_posted.data"),
    ]

    return {
        "metadata": {
            "generated_at_utc": datetime.now(timezone.utc).isoformat(),
            "item_path": str(item_path),
            "item_posted_path": str(item_posted_path),
            "duplicate_sku_rule": "If a sku repeats within a file, the later row replaces the earlier one.",
        },
        "summary": {
            "item_row_count": export.item_data.total_rows,
            "item_posted_row_count": export.item_posted_data.total_rows,
            "product_count": len(export.products),
            "products_with_barcodes": sum(1 for product in export.products.values() if product.barcodes),
            "products_never_sold": sum(1 for product in export.products.values() if product.last_sold is None),
            "products_with_negative_stock": sum(1 for product in export.products.values() if product.stock < 0),
            "issue_count": len(issues),
        },
        "products": {sku: _product_to_dict(export.products[sku]) for sku in sorted(export.products)},
        "data_quality_issues": {
            "issues": issues,
            "duplicate_skus": {
                "item.data": export.item_data.duplicate_skus,
                "item_posted.data": export.item_posted_data.duplicate_skus,
            },
        },
    }


def write_report(report: dict[str, Any], *, output_path: Path) -> None:
    """Write report JSON to disk."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(report, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for report generation."""

    parser = argparse.ArgumentParser(description="Load an ABC inventory export and emit a JSON report.")
    parser.add_argument("--item-data", type=Path, default=DEFAULT_ITEM_DATA, help="Path to item.data")
    parser.add_argument(
        "--item-posted-data",
        type=Path,
        default=DEFAULT_ITEM_POSTED_DATA,
        help="Path to item_posted.data",
    )
    parser.add_argument("--encoding", default=DEFAULT_ENCODING, help="Text encoding of both export files")
    parser.add_argument("--output", type=Path, default=DEFAULT_OUTPUT, help="Output JSON path")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for command-line execution."""

    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    try:
        report = build_report(
            item_path=args.item_data,
            item_posted_path=args.item_posted_data,
            encoding=args.encoding,
        )
    except ExportParseError as exc:
        logger.error("Unable to load export: %s", exc)
        return 1

    write_report(report, output_path=args.output)
    logger.info("Wrote export report: %s", args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
