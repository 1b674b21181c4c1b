"""Join the two parsed export files into complete products."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from .builder import ProductBuilder
from .errors import MismatchedKeysError, RowCountMismatchError, UnmatchedKeyError
from .models import ExportResult, PartialBaseRecord, PartialPostedRecord, Product, ProductsBySku
from .parser import DEFAULT_ENCODING, parse_item_data, parse_item_posted_data

logger = logging.getLogger(__name__)


def merge_records(base: PartialBaseRecord, posted: PartialPostedRecord) -> Product:
    """Combine the `item.data` and `item_posted.data` halves of one product."""

    if base.sku != posted.sku:
        raise MismatchedKeysError(base.sku, posted.sku)

    builder = (
        ProductBuilder()
        .with_sku(base.sku)
        .with_description(base.description)
        .with_barcodes(base.barcodes)
        .with_list_price(base.list_price)
        .with_cost(base.cost)
        .with_alt_skus(base.alt_skus)
        .with_stock(posted.stock)
    )
    if base.weight is not None:
        builder.with_weight(base.weight)
    if base.group is not None:
        # Extraction already normalized the group to one uppercase letter.
        builder.with_group(base.group)
    if posted.last_sold is not None:
        builder.with_last_sold(posted.last_sold)
    return builder.build()


def reconcile_records(
    base_records: Mapping[str, PartialBaseRecord],
    posted_records: Mapping[str, PartialPostedRecord],
) -> ProductsBySku:
    """Return one product per sku, or raise on the first mismatch between the two files.

    Both files are expected to describe the same set of products, so a
    different count or a sku missing from `item_posted.data` aborts the whole
    reconciliation.
    """

    if len(base_records) != len(posted_records):
        raise RowCountMismatchError(len(base_records), len(posted_records))

    products: ProductsBySku = {}
    for sku, base in base_records.items():
        posted = posted_records.get(sku)
        if posted is None:
            raise UnmatchedKeyError(sku)
        products[sku] = merge_records(base, posted)

    logger.info("Reconciled %d products", len(products))
    return products


def load_export(
    item_path: str | Path,
    item_posted_path: str | Path,
    *,
    encoding: str = DEFAULT_ENCODING,
) -> ExportResult:
    """Parse both export files and reconcile them, keeping per-file issues."""

    item_data = parse_item_data(item_path, encoding=encoding)
    item_posted_data = parse_item_posted_data(item_posted_path, encoding=encoding)
    products = reconcile_records(item_data.records, item_posted_data.records)
    return ExportResult(products=products, item_data=item_data, item_posted_data=item_posted_data)


def load_products(
    item_path: str | Path,
    item_posted_path: str | Path,
    *,
    encoding: str = DEFAULT_ENCODING,
) -> ProductsBySku:
    """Create a map of skus to products from an ABC database export.

    To produce the export, run report 7-10 in ABC and select "I" (Inventory)
    as the file to export, leaving the other parameters at their defaults.
    Running the report to the screen writes both files to
    `C:\\ABC Software\\Database Export\\Company001\\Data\\`.

    Raises an `ExportParseError` subclass for the first hard failure: a
    missing required column, an unparseable price or stock level, or the two
    files disagreeing about which products exist.
    """

    return load_export(item_path, item_posted_path, encoding=encoding).products
