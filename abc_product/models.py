"""Core typed models shared by the extractors, reconciler and builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import TYPE_CHECKING, Generic, TypeAlias, TypeVar

if TYPE_CHECKING:
    from .builder import ProductBuilder


@dataclass(frozen=True, slots=True)
class DataIssue:
    """Structured data-quality issue emitted for a value that was dropped or overwritten."""

    code: str
    message: str
    field: str | None = None
    row: int | None = None
    sku: str | None = None


@dataclass(frozen=True, slots=True)
class Product:
    """A product or inventory item in ABC accounting software.

    Instances are immutable. To change a product, seed a builder from it with
    `to_builder()` and build a new one.
    """

    sku: str
    description: str
    list_price: Decimal
    cost: Decimal
    stock: float
    barcodes: tuple[str, ...] = ()
    group: str | None = None
    weight: float | None = None
    last_sold: date | None = None
    alt_skus: tuple[str, ...] = ()

    @staticmethod
    def builder() -> ProductBuilder:
        """Return an empty builder."""

        from .builder import ProductBuilder

        return ProductBuilder()

    def to_builder(self) -> ProductBuilder:
        """Return a builder pre-populated with this product's values."""

        from .builder import ProductBuilder

        return ProductBuilder.from_product(self)


ProductsBySku: TypeAlias = dict[str, Product]


@dataclass(slots=True)
class PartialBaseRecord:
    """Fields of a product that can be parsed from `item.data`."""

    sku: str
    description: str
    list_price: Decimal
    cost: Decimal
    barcodes: list[str] = field(default_factory=list)
    group: str | None = None
    weight: float | None = None
    alt_skus: list[str] = field(default_factory=list)
    source_row: int = 0


@dataclass(slots=True)
class PartialPostedRecord:
    """Fields of a product that can be parsed from `item_posted.data`."""

    sku: str
    stock: float
    last_sold: date | None = None
    source_row: int = 0


RecordT = TypeVar("RecordT", PartialBaseRecord, PartialPostedRecord)


@dataclass
class ExtractResult(Generic[RecordT]):
    """Parsed output for one export file."""

    file_path: Path
    records: dict[str, RecordT]
    total_rows: int = 0
    issues: list[DataIssue] = field(default_factory=list)

    @property
    def duplicate_skus(self) -> list[str]:
        """Return skus whose earlier rows were overwritten by a later row."""

        return sorted({issue.sku for issue in self.issues if issue.code == "duplicate_sku" and issue.sku})


@dataclass(slots=True)
class ExportResult:
    """Reconciled products together with both per-file extraction results."""

    products: ProductsBySku
    item_data: ExtractResult[PartialBaseRecord]
    item_posted_data: ExtractResult[PartialPostedRecord]

    def all_issues(self) -> list[DataIssue]:
        """Return a flat list of issues from both files."""

        return [*self.item_data.issues, *self.item_posted_data.issues]
