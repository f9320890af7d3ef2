# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""Field validation of clients, invoices and invoice lines.

Each *_errors function returns a mapping of field name to a human-readable
message, empty when the values are valid, so that several violations are
reported at once. ValidationError carries such a mapping.
"""

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from .vat_rate import VatRate, parse_vat_rate

__all__ = [
    "ValidationError",
    "client_errors",
    "invoice_errors",
    "line_errors",
    "to_unit_price",
    "strip_text",
    "check",
]

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
REGISTRATION_NUMBER_PATTERN = re.compile(r"[0-9]{14}")
PRICE_QUANTUM = Decimal("0.01")
# SQLite integers are signed 64 bits; prices are stored in cents.
MAX_QUANTITY = 2**63 - 1
MAX_UNIT_PRICE = Decimal(MAX_QUANTITY).scaleb(-2)
CLIENT_TEXT_FIELDS = ("name", "email", "registration_number")


class ValidationError(ValueError):
    """Raised when one or more fields hold malformed or out-of-range values."""

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        super().__init__(
            "; ".join(f"{field}: {message}" for field, message in self.errors.items())
        )


def check(errors: dict[str, str]) -> None:
    if errors:
        raise ValidationError(errors)


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def strip_text(value: Any) -> Any:
    """Drops the surrounding whitespace of a string, other values are kept."""
    return value.strip() if isinstance(value, str) else value


def client_errors(
    name: Optional[str],
    email: Optional[str],
    registration_number: Optional[str],
    *,
    partial: bool = False,
) -> dict[str, str]:
    """Checks the client fields.

    With partial=True (client update), a None field is left unchecked since it
    keeps its current value.
    """
    errors: dict[str, str] = {}

    if not (partial and name is None) and _is_blank(name):
        errors["name"] = "The client name is required"

    if not (partial and email is None):
        if _is_blank(email):
            errors["email"] = "The client email is required"
        elif EMAIL_PATTERN.fullmatch(email.strip()) is None:  # type: ignore[union-attr]
            errors["email"] = "Invalid email format"

    if not (partial and registration_number is None):
        if _is_blank(registration_number):
            errors["registration_number"] = "The registration number is required"
        elif REGISTRATION_NUMBER_PATTERN.fullmatch(registration_number) is None:  # type: ignore[arg-type]
            errors["registration_number"] = (
                "The registration number shall contain exactly 14 digits"
            )

    return errors


def invoice_errors(date_: Any, client_id: Any) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not isinstance(date_, date):
        errors["date"] = "The invoice date is required"
    if client_id is None:
        errors["client_id"] = "The client is required"
    return errors


def to_unit_price(value: Any) -> Decimal:
    """Converts a unit price to an exact Decimal.

    Raises:
        ValueError: on floats (binary rounding) and non-numeric values.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValueError(f"{value!r} is not an exact decimal amount")
    try:
        return Decimal(value.strip() if isinstance(value, str) else value)
    except InvalidOperation:
        raise ValueError(f"{value!r} is not a decimal amount") from None


def line_errors(
    description: Any, quantity: Any, unit_price: Any, vat_rate: Any
) -> dict[str, str]:
    errors: dict[str, str] = {}

    if _is_blank(description):
        errors["description"] = "The description is required"

    if isinstance(quantity, bool) or not isinstance(quantity, int):
        errors["quantity"] = "The quantity is required"
    elif quantity < 1:
        errors["quantity"] = "The quantity shall be at least 1"
    elif quantity > MAX_QUANTITY:
        errors["quantity"] = f"The quantity shall not exceed {MAX_QUANTITY}"

    try:
        price = to_unit_price(unit_price)
    except ValueError:
        errors["unit_price"] = "The unit price is required"
    else:
        if not price.is_finite() or price <= 0:
            errors["unit_price"] = "The unit price shall be greater than 0"
        elif price > MAX_UNIT_PRICE:
            errors["unit_price"] = f"The unit price shall not exceed {MAX_UNIT_PRICE}"
        elif price != price.quantize(PRICE_QUANTUM):
            errors["unit_price"] = "The unit price shall have at most 2 decimals"

    try:
        parse_vat_rate(vat_rate)
    except ValueError:
        allowed = ", ".join(rate.label for rate in VatRate)
        errors["vat_rate"] = f"The VAT rate shall be one of {allowed}"

    return errors
