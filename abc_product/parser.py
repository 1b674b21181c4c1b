"""Positional parsers for the two tab-delimited ABC export files.

ABC's database export (report 7-10, file "I") writes `item.data` and
`item_posted.data` with no header row, so every field is located by column
index. The indices live in the two layout tables below and nowhere else.

Row numbers count non-blank records from 1; blank lines are skipped without
advancing the count."""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterator
from dataclasses import dataclass, replace
from decimal import Decimal
from pathlib import Path
from typing import TextIO

from .errors import ExportFormatError, ExportReadError, MissingFieldError
from .models import DataIssue, ExtractResult, PartialBaseRecord, PartialPostedRecord, RecordT
from .normalize import (
    InvalidPriceError,
    collect_alt_skus,
    normalize_barcodes,
    parse_group,
    parse_last_sold,
    parse_price,
    parse_stock,
    parse_weight,
)

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8-sig"


@dataclass(frozen=True, slots=True)
class ExportLayout:
    """Maps field names to column positions for one export file."""

    columns: dict[str, int]
    required: tuple[str, ...]


ITEM_LAYOUT = ExportLayout(
    columns={
        "sku": 0,
        "description": 1,
        "list_price": 6,
        "cost": 8,
        "group": 18,
        "alt_sku_1": 40,
        "alt_sku_2": 41,
        "alt_sku_3": 42,
        "barcodes": 43,
        "weight": 45,
    },
    required=("sku", "description", "barcodes", "list_price", "cost", "weight"),
)

ITEM_POSTED_LAYOUT = ExportLayout(
    columns={
        "sku": 0,
        "last_sold": 1,
        "stock": 19,
    },
    required=("sku", "stock", "last_sold"),
)

_ALT_SKU_FIELDS = ("alt_sku_1", "alt_sku_2", "alt_sku_3")


def _open_export(path: Path, encoding: str) -> TextIO:
    try:
        return path.open("r", encoding=encoding, newline="")
    except OSError as exc:
        raise ExportReadError(path, exc) from exc


def _iter_rows(handle: TextIO, path: Path, issues: list[DataIssue]) -> Iterator[tuple[int, list[str]]]:
    """Yield `(row_number, fields)` pairs for non-blank records, numbering rows from 1."""

    reader = csv.reader(handle, delimiter="\t")
    row_number = 0
    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except (csv.Error, UnicodeDecodeError, OSError) as exc:
            raise ExportReadError(path, exc) from exc
        if not row:
            issues.append(
                DataIssue(
                    code="blank_row_skipped",
                    message=f"Blank line {reader.line_num} was skipped",
                )
            )
            continue
        row_number += 1
        yield row_number, row


def _required_fields(row: list[str], layout: ExportLayout, row_number: int) -> dict[str, str]:
    """Return the required columns of `row`, in layout order, by field name."""

    values: dict[str, str] = {}
    for name in layout.required:
        index = layout.columns[name]
        if index >= len(row):
            raise MissingFieldError(name, row_number)
        values[name] = row[index]
    return values


def _optional_field(row: list[str], layout: ExportLayout, name: str) -> str | None:
    index = layout.columns[name]
    if index >= len(row):
        return None
    return row[index]


def _store(
    result: ExtractResult[RecordT],
    record: RecordT,
    *,
    row_number: int,
) -> None:
    """Insert a record, letting a later row with the same sku replace an earlier one."""

    previous = result.records.get(record.sku)
    if previous is not None:
        logger.warning(
            "%s row %d repeats sku %r from row %d; keeping the later row",
            result.file_path.name,
            row_number,
            record.sku,
            previous.source_row,
        )
        # Issues raised for the replaced row no longer describe any record.
        result.issues[:] = [
            issue for issue in result.issues if issue.row != previous.source_row or issue.code == "duplicate_sku"
        ]
        result.issues.append(
            DataIssue(
                code="duplicate_sku",
                message=f"Row {row_number} overwrote row {previous.source_row} with the same sku",
                field="sku",
                row=row_number,
                sku=record.sku,
            )
        )
    result.records[record.sku] = record


def _parse_price_field(value: str, *, field: str, row_number: int) -> Decimal:
    try:
        return parse_price(value)
    except InvalidPriceError as exc:
        raise ExportFormatError(f"Cannot parse a price for {field} in row {row_number}") from exc


def parse_item_data(item_path: str | Path, *, encoding: str = DEFAULT_ENCODING) -> ExtractResult[PartialBaseRecord]:
    """Parse `item.data` into partial product records keyed by sku.

    Prices must parse; weight, discount group and barcodes are best effort and
    fall back to absent values with a `DataIssue` when they cannot be read.
    """

    path = Path(item_path)
    result: ExtractResult[PartialBaseRecord] = ExtractResult(file_path=path, records={})

    with _open_export(path, encoding) as handle:
        for row_number, row in _iter_rows(handle, path, result.issues):
            result.total_rows = row_number

            values = _required_fields(row, ITEM_LAYOUT, row_number)
            barcodes, barcode_issues = normalize_barcodes(values["barcodes"], row=row_number)
            list_price = _parse_price_field(values["list_price"], field="list", row_number=row_number)
            cost = _parse_price_field(values["cost"], field="cost", row_number=row_number)
            weight, weight_issues = parse_weight(values["weight"], row=row_number)
            group, group_issues = parse_group(_optional_field(row, ITEM_LAYOUT, "group"), row=row_number)
            alt_skus = collect_alt_skus([_optional_field(row, ITEM_LAYOUT, name) for name in _ALT_SKU_FIELDS])

            result.issues.extend(
                replace(issue, sku=values["sku"]) for issue in (*barcode_issues, *weight_issues, *group_issues)
            )

            record = PartialBaseRecord(
                sku=values["sku"],
                description=values["description"],
                list_price=list_price,
                cost=cost,
                barcodes=barcodes,
                group=group,
                weight=weight,
                alt_skus=alt_skus,
                source_row=row_number,
            )
            _store(result, record, row_number=row_number)

    logger.info("Parsed %d products from %s (%d rows)", len(result.records), path.name, result.total_rows)
    return result


def parse_item_posted_data(
    item_posted_path: str | Path,
    *,
    encoding: str = DEFAULT_ENCODING,
) -> ExtractResult[PartialPostedRecord]:
    """Parse `item_posted.data` into partial product records keyed by sku.

    Stock has no fallback and must parse. An unreadable last-sold date is
    treated as the product never having been sold.
    """

    path = Path(item_posted_path)
    result: ExtractResult[PartialPostedRecord] = ExtractResult(file_path=path, records={})

    with _open_export(path, encoding) as handle:
        for row_number, row in _iter_rows(handle, path, result.issues):
            result.total_rows = row_number

            values = _required_fields(row, ITEM_POSTED_LAYOUT, row_number)
            try:
                stock = parse_stock(values["stock"])
            except ValueError as exc:
                raise ExportFormatError(
                    f"Cannot parse stock in row {row_number} of posted items"
                ) from exc
            last_sold, date_issues = parse_last_sold(values["last_sold"], row=row_number)

            result.issues.extend(replace(issue, sku=values["sku"]) for issue in date_issues)

            record = PartialPostedRecord(
                sku=values["sku"],
                stock=stock,
                last_sold=last_sold,
                source_row=row_number,
            )
            _store(result, record, row_number=row_number)

    logger.info("Parsed %d products from %s (%d rows)", len(result.records), path.name, result.total_rows)
    return result
