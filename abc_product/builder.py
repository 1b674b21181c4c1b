"""Builder used to safely construct a `Product`."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from .errors import MissingFieldError
from .models import Product
from .normalize import normalize_group

REQUIRED_FIELDS = ("sku", "description", "list_price", "cost", "stock")


class ProductBuilder:
    """Accumulates product fields and validates them once in `build()`.

    Every setter returns the builder so calls can be chained:

        product = (
            ProductBuilder()
            .with_sku("abc-123")
            .with_description("Test product")
            .with_list_price(Decimal("1.99"))
            .with_cost(Decimal("0.99"))
            .with_stock(1.0)
            .build()
        )
    """

    def __init__(self) -> None:
        self.sku: str | None = None
        self.description: str | None = None
        self.barcodes: list[str] = []
        self.list_price: Decimal | None = None
        self.cost: Decimal | None = None
        self.stock: float | None = None
        self.weight: float | None = None
        self.group: str | None = None
        self.last_sold: date | None = None
        self.alt_skus: list[str] = []

    @classmethod
    def from_product(cls, product: Product) -> ProductBuilder:
        """Seed a builder with every value of an existing product."""

        builder = cls()
        builder.sku = product.sku
        builder.description = product.description
        builder.barcodes = list(product.barcodes)
        builder.list_price = product.list_price
        builder.cost = product.cost
        builder.stock = product.stock
        builder.weight = product.weight
        builder.group = product.group
        builder.last_sold = product.last_sold
        builder.alt_skus = list(product.alt_skus)
        return builder

    def with_sku(self, sku: str) -> ProductBuilder:
        self.sku = sku
        return self

    def with_description(self, description: str) -> ProductBuilder:
        self.description = description
        return self

    def with_barcodes(self, barcodes: Iterable[str]) -> ProductBuilder:
        """Replace the list of EAN-13 barcodes."""

        self.barcodes = list(barcodes)
        return self

    def add_barcode(self, barcode: str) -> ProductBuilder:
        self.barcodes.append(barcode)
        return self

    def with_list_price(self, list_price: Decimal) -> ProductBuilder:
        self.list_price = list_price
        return self

    def with_cost(self, cost: Decimal) -> ProductBuilder:
        self.cost = cost
        return self

    def with_stock(self, stock: float) -> ProductBuilder:
        """Set the stock level. Negative stock is allowed."""

        self.stock = stock
        return self

    def with_weight(self, weight: float) -> ProductBuilder:
        """Set the weight in pounds."""

        self.weight = weight
        return self

    def with_group(self, group: str) -> ProductBuilder | None:
        """Set the discount group.

        `group` must be a single letter from A to Z in either case; it is
        stored uppercase. Any other value leaves the builder untouched and
        returns None, so check the result before chaining further.
        """

        normalized = normalize_group(group)
        if normalized is None:
            return None
        self.group = normalized
        return self

    def with_last_sold(self, last_sold: date) -> ProductBuilder:
        self.last_sold = last_sold
        return self

    def with_alt_skus(self, alt_skus: Iterable[str]) -> ProductBuilder:
        """Replace the list of alternate skus."""

        self.alt_skus = list(alt_skus)
        return self

    def add_alt_sku(self, alt_sku: str) -> ProductBuilder:
        self.alt_skus.append(alt_sku)
        return self

    def build(self) -> Product:
        """Return a `Product`, or raise `MissingFieldError` for the first required field never set."""

        for name in REQUIRED_FIELDS:
            if getattr(self, name) is None:
                raise MissingFieldError(name)

        return Product(
            sku=self.sku,
            description=self.description,
            list_price=self.list_price,
            cost=self.cost,
            stock=self.stock,
            barcodes=tuple(self.barcodes),
            group=self.group,
            weight=self.weight,
            last_sold=self.last_sold,
            alt_skus=tuple(self.alt_skus),
        )
