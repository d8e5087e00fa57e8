"""Validation helpers shared across expense tracker services."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from .exceptions import ValidationError

DESCRIPTION_REQUIRED = "Description is required"
AMOUNT_REQUIRED = "Valid amount is required"
CATEGORY_REQUIRED = "Category is required"
INVALID_ID = "Invalid ID"

MAX_AMOUNT = Decimal("1e10")

# Bounds of a signed 64-bit integer column; ids outside them cannot exist.
MIN_STORED_ID = -(2**63)
MAX_STORED_ID = 2**63 - 1

ID_PATTERN = re.compile(r"[+-]?[0-9]+")
AMOUNT_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _quantize_two_decimals(amount: Decimal) -> Decimal:
    """Round the amount to two decimal places using HALF_UP rounding."""
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def parse_amount(raw: object) -> Decimal:
    """Convert raw input to a positive Decimal with two fraction digits."""
    if raw is None or isinstance(raw, bool):
        raise ValidationError(AMOUNT_REQUIRED)
    text = raw.strip() if isinstance(raw, str) else str(raw)
    if not AMOUNT_PATTERN.fullmatch(text):
        raise ValidationError(AMOUNT_REQUIRED)
    try:
        amount = Decimal(text)
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(AMOUNT_REQUIRED) from exc

    # NUMERIC(12, 2) holds at most ten integer digits.
    if not amount.is_finite() or amount >= MAX_AMOUNT:
        raise ValidationError(AMOUNT_REQUIRED)

    amount = _quantize_two_decimals(amount)
    if amount <= 0 or amount >= MAX_AMOUNT:
        raise ValidationError(AMOUNT_REQUIRED)
    return amount


def validate_required_str(value: object, message: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(message)
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(message)
    return trimmed


def parse_expense_id(raw: object) -> int:
    """Parse a path or CLI supplied identifier; anything but an integer is rejected."""
    if isinstance(raw, bool):
        raise ValidationError(INVALID_ID)
    if isinstance(raw, int):
        return raw
    text = str(raw).strip()
    if not ID_PATTERN.fullmatch(text):
        raise ValidationError(INVALID_ID)
    return int(text)


def is_storable_id(expense_id: int) -> bool:
    return MIN_STORED_ID <= expense_id <= MAX_STORED_ID
