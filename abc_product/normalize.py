"""Field-level normalization helpers used by export parsing."""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from stdnum import ean
from stdnum.exceptions import InvalidFormat, InvalidLength, ValidationError
from stdnum.util import isdigits

from .models import DataIssue

logger = logging.getLogger(__name__)

_PRICE_NOISE_RE = re.compile(r"[^0-9.]")
_BARCODE_NOISE_RE = re.compile(r"[^0-9,]")
_GROUP_RE = re.compile(r"[A-Za-z]")

LAST_SOLD_FORMAT = "%Y-%m-%d"

# ABC drops the check digit from some UPC-A codes.
_MISSING_CHECK_DIGIT_LENGTH = 11


class InvalidPriceError(ValueError):
    """Raised when a price cannot be recovered from export text."""


def _parse_plain_float(value: str) -> float:
    """Parse a bare float literal; padding and digit separators are rejected."""

    if value != value.strip() or "_" in value:
        raise ValueError(f"Not a plain number: {value!r}")
    return float(value)


def parse_price(value: str) -> Decimal:
    """Parse a price by discarding everything that is not a digit or a decimal point.

    Currency symbols, thousands separators and whitespace are dropped rather
    than rejected, so `"$1,234.50 ea"` parses to `Decimal("1234.50")`.
    """

    cleaned = _PRICE_NOISE_RE.sub("", value)
    if cleaned == "":
        raise InvalidPriceError(f"No digits in price: {value!r}")
    try:
        return Decimal(cleaned)
    except InvalidOperation as exc:
        raise InvalidPriceError(f"Price is not a decimal number: {value!r}") from exc


def parse_barcode_nonstrict(code: str) -> str:
    """Return `code` as a 13 digit EAN with a correct check digit.

    Twelve digit codes are read as UPC-A and zero-padded. A wrong check digit
    is replaced instead of rejected. Raises `stdnum.exceptions.ValidationError`
    for non-numeric input or any other length.
    """

    number = ean.compact(code)
    if not isdigits(number):
        raise InvalidFormat()
    if len(number) == 12:
        number = "0" + number
    if len(number) != 13:
        raise InvalidLength()
    number = number[:-1] + ean.calc_check_digit(number[:-1])
    return ean.validate(number)


def normalize_barcodes(value: str, *, row: int | None = None) -> tuple[list[str], list[DataIssue]]:
    """Turn the comma-joined barcode column into a list of checksummed EAN-13 codes.

    Runs shorter than 11 digits are treated as dead codes. An 11 digit run is
    missing its check digit, so a placeholder is appended for the checksum
    helper to fix. Anything the checksum helper rejects is dropped.
    """

    cleaned = _BARCODE_NOISE_RE.sub("", value)
    barcodes: list[str] = []
    issues: list[DataIssue] = []

    for run in cleaned.split(","):
        if run == "":
            continue

        if len(run) < _MISSING_CHECK_DIGIT_LENGTH:
            issues.append(
                DataIssue(
                    code="barcode_too_short",
                    message=f"Barcode {run} is too short and was dropped",
                    field="barcodes",
                    row=row,
                )
            )
            continue

        candidate = f"{run}0" if len(run) == _MISSING_CHECK_DIGIT_LENGTH else run
        try:
            barcodes.append(parse_barcode_nonstrict(candidate))
        except ValidationError:
            issues.append(
                DataIssue(
                    code="invalid_barcode",
                    message=f"Barcode {run} is not a valid EAN and was dropped",
                    field="barcodes",
                    row=row,
                )
            )

    return barcodes, issues


def parse_weight(value: str, *, row: int | None = None) -> tuple[float | None, list[DataIssue]]:
    """Parse weight in pounds; unparseable text means no weight."""

    try:
        return _parse_plain_float(value), []
    except ValueError:
        if value.strip() == "":
            return None, []
        return None, [
            DataIssue(
                code="invalid_weight",
                message=f"Unable to parse weight: {value}",
                field="weight",
                row=row,
            )
        ]


def parse_stock(value: str) -> float:
    """Parse a stock level. Negative values are valid backorder quantities."""

    return _parse_plain_float(value)


def parse_last_sold(value: str, *, row: int | None = None) -> tuple[date | None, list[DataIssue]]:
    """Parse the last-sold date; anything other than `YYYY-MM-DD` means never sold."""

    try:
        return datetime.strptime(value, LAST_SOLD_FORMAT).date(), []
    except ValueError:
        if value.strip() == "":
            return None, []
        return None, [
            DataIssue(
                code="invalid_last_sold",
                message=f"Unable to parse date: {value}",
                field="last_sold",
                row=row,
            )
        ]


def normalize_group(value: str) -> str | None:
    """Return `value` as an uppercase discount group letter, or None if it is not one letter."""

    if not _GROUP_RE.fullmatch(value):
        return None
    return value.upper()


def parse_group(value: str | None, *, row: int | None = None) -> tuple[str | None, list[DataIssue]]:
    """Parse the discount group column; blank means no group."""

    if value is None or value == "":
        return None, []

    group = normalize_group(value)
    if group is None:
        logger.debug("Row %s: discarding discount group %r", row, value)
        return None, [
            DataIssue(
                code="invalid_group",
                message=f"Discount group is not a letter from A to Z: {value}",
                field="group",
                row=row,
            )
        ]
    return group, []


def collect_alt_skus(values: list[str | None]) -> list[str]:
    """Keep non-empty alternate skus in column order."""

    return [value for value in values if value]
