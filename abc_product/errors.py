"""Error types raised while reading an ABC database export."""

from __future__ import annotations

from pathlib import Path


class ExportParseError(ValueError):
    """Base class for every hard failure while loading an export."""


class MissingFieldError(ExportParseError):
    """A required column is absent from a row, or a builder field was never set."""

    def __init__(self, field: str, row: int | None = None) -> None:
        self.field = field
        self.row = row
        if row is None:
            message = f"Missing field `{field}`"
        else:
            message = f"Missing field `{field}` in row {row}"
        super().__init__(message)


class MismatchedKeysError(ExportParseError):
    """Base and posted records paired for one product carry different skus."""

    def __init__(self, base_sku: str, posted_sku: str) -> None:
        self.base_sku = base_sku
        self.posted_sku = posted_sku
        super().__init__(
            "Attempted to combine data from `item.data` and `item_posted.data` into a single "
            f"product, but the skus do not match ({base_sku!r} != {posted_sku!r})"
        )


class RowCountMismatchError(ExportParseError):
    """The two export files describe a different number of products."""

    def __init__(self, base_count: int, posted_count: int) -> None:
        self.base_count = base_count
        self.posted_count = posted_count
        super().__init__(
            "The item.data and item_posted.data files have a different number of items "
            f"({base_count} != {posted_count})"
        )


class UnmatchedKeyError(ExportParseError):
    """A sku from `item.data` has no counterpart in `item_posted.data`."""

    def __init__(self, sku: str) -> None:
        self.sku = sku
        super().__init__(f"item_posted.data file has no product with sku '{sku}'")


class ExportReadError(ExportParseError):
    """The delimited-row reader could not read the file."""

    def __init__(self, path: Path, error: Exception) -> None:
        self.path = path
        self.error = error
        super().__init__(f"Unable to read {path}: {error}")


class ExportFormatError(ExportParseError):
    """A value could not be parsed; the message carries the row context."""

    def __init__(self, context: str) -> None:
        self.context = context
        super().__init__(context)
