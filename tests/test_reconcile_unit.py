"""Small-scale unit tests for joining partial records into products.

These tests use handcrafted partial records so each reconciliation rule can
be verified without writing export files.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from abc_product.errors import MismatchedKeysError, RowCountMismatchError, UnmatchedKeyError
from abc_product.models import PartialBaseRecord, PartialPostedRecord, Product
from abc_product.reconcile import merge_records, reconcile_records


def _base(sku: str, **overrides: object) -> PartialBaseRecord:
    """Build a minimal base record for targeted reconciliation tests."""
    values: dict[str, object] = {
        "sku": sku,
        "description": f"Product {sku}",
        "list_price": Decimal("2.00"),
        "cost": Decimal("1.00"),
    }
    values.update(overrides)
    return PartialBaseRecord(**values)  # type: ignore[arg-type]


def _posted(sku: str, stock: float = 0.0, last_sold: date | None = None) -> PartialPostedRecord:
    return PartialPostedRecord(sku=sku, stock=stock, last_sold=last_sold)


def test_merge_records_combines_both_halves() -> None:
    base = _base(
        "SKU-1",
        barcodes=["4006381333931"],
        group="A",
        weight=1.5,
        alt_skus=["ALT"],
    )
    posted = _posted("SKU-1", stock=-3.0, last_sold=date(2024, 1, 2))

    assert merge_records(base, posted) == Product(
        sku="SKU-1",
        description="Product SKU-1",
        list_price=Decimal("2.00"),
        cost=Decimal("1.00"),
        stock=-3.0,
        barcodes=("4006381333931",),
        group="A",
        weight=1.5,
        last_sold=date(2024, 1, 2),
        alt_skus=("ALT",),
    )


def test_merge_records_rejects_different_skus() -> None:
    with pytest.raises(MismatchedKeysError) as exc_info:
        merge_records(_base("SKU-1"), _posted("SKU-2"))

    assert exc_info.value.base_sku == "SKU-1"
    assert exc_info.value.posted_sku == "SKU-2"


def test_reconcile_records_produces_one_product_per_sku() -> None:
    base = {sku: _base(sku) for sku in ("A", "B", "C")}
    posted = {sku: _posted(sku, stock=float(index)) for index, sku in enumerate(("C", "B", "A"))}

    products = reconcile_records(base, posted)

    assert sorted(products) == ["A", "B", "C"]
    assert products["A"].stock == 2.0
    assert products["C"].stock == 0.0
    assert all(sku == product.sku for sku, product in products.items())


def test_reconcile_records_rejects_different_counts() -> None:
    base = {"A": _base("A"), "B": _base("B")}
    posted = {"A": _posted("A")}

    with pytest.raises(RowCountMismatchError) as exc_info:
        reconcile_records(base, posted)

    assert (exc_info.value.base_count, exc_info.value.posted_count) == (2, 1)


def test_reconcile_records_names_unmatched_sku() -> None:
    base = {"A": _base("A"), "B": _base("B")}
    posted = {"A": _posted("A"), "Z": _posted("Z")}

    with pytest.raises(UnmatchedKeyError, match="no product with sku 'B'") as exc_info:
        reconcile_records(base, posted)

    assert exc_info.value.sku == "B"


def test_reconcile_records_detects_corrupted_keys() -> None:
    """A posted record stored under the wrong key is caught during the merge."""
    base = {"A": _base("A")}
    posted = {"A": _posted("B")}

    with pytest.raises(MismatchedKeysError):
        reconcile_records(base, posted)


def test_reconcile_records_empty_maps() -> None:
    assert reconcile_records({}, {}) == {}


def test_reconciled_products_do_not_alias_partial_records() -> None:
    """Mutating a partial record after reconciliation leaves the product untouched."""
    base = {"A": _base("A", barcodes=["4006381333931"], alt_skus=["ALT"])}
    products = reconcile_records(base, {"A": _posted("A")})

    base["A"].barcodes.append("0036000291452")
    base["A"].alt_skus.clear()

    assert products["A"].barcodes == ("4006381333931",)
    assert products["A"].alt_skus == ("ALT",)
