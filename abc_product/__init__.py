"""Public API for reading products out of an ABC database export."""

from .builder import ProductBuilder
from .errors import (
    ExportFormatError,
    ExportParseError,
    ExportReadError,
    MismatchedKeysError,
    MissingFieldError,
    RowCountMismatchError,
    UnmatchedKeyError,
)
from .models import DataIssue, ExportResult, ExtractResult, PartialBaseRecord, PartialPostedRecord, Product, ProductsBySku
from .normalize import normalize_barcodes, parse_barcode_nonstrict, parse_price
from .parser import parse_item_data, parse_item_posted_data
from .reconcile import load_export, load_products, merge_records, reconcile_records

__all__ = [
    "DataIssue",
    "ExportFormatError",
    "ExportParseError",
    "ExportReadError",
    "ExportResult",
    "ExtractResult",
    "MismatchedKeysError",
    "MissingFieldError",
    "PartialBaseRecord",
    "PartialPostedRecord",
    "Product",
    "ProductBuilder",
    "ProductsBySku",
    "RowCountMismatchError",
    "UnmatchedKeyError",
    "load_export",
    "load_products",
    "merge_records",
    "normalize_barcodes",
    "parse_barcode_nonstrict",
    "parse_item_data",
    "parse_item_posted_data",
    "parse_price",
    "reconcile_records",
]
