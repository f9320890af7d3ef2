# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""The closed set of VAT rates an invoice line may use."""

import enum
from decimal import Decimal, InvalidOperation
from typing import Any


class VatRate(enum.Enum):
    ZERO = "taux zéro"
    REDUCED = "taux réduit"
    INTERMEDIATE = "taux intermédiaire"
    NORMAL = "taux normal"

    @property
    def percentage(self) -> Decimal:
        return percentage_of(self)

    @property
    def label(self) -> str:
        return label_of(self)

    def __str__(self) -> str:
        return self.label


_PERCENTAGES: dict[VatRate, Decimal] = {
    VatRate.ZERO: Decimal("0"),
    VatRate.REDUCED: Decimal("5.5"),
    VatRate.INTERMEDIATE: Decimal("10"),
    VatRate.NORMAL: Decimal("20"),
}

_LABELS: dict[VatRate, str] = {
    VatRate.ZERO: "0%",
    VatRate.REDUCED: "5.5%",
    VatRate.INTERMEDIATE: "10%",
    VatRate.NORMAL: "20%",
}


def percentage_of(rate: VatRate) -> Decimal:
    """Returns the exact percentage of a VAT rate (e.g. Decimal('5.5'))."""
    return _PERCENTAGES[rate]


def label_of(rate: VatRate) -> str:
    return _LABELS[rate]


def parse_vat_rate(value: Any) -> VatRate:
    """Maps an external representation to a member of the closed VAT rate set.

    Accepted: a VatRate, a member name ('NORMAL'), a label ('20%') or a numeric
    percentage (20, '5.5', Decimal('10.0')). Floats are refused.

    Raises:
        ValueError: if value does not designate one of the allowed rates.
    """
    if isinstance(value, VatRate):
        return value
    if isinstance(value, (bool, float)):
        raise ValueError(f"{value!r} is not an allowed VAT rate")
    if isinstance(value, str):
        text = value.strip()
        if text.upper() in VatRate.__members__:
            return VatRate[text.upper()]
        for rate, label in _LABELS.items():
            if text == label:
                return rate
        value = text.rstrip("%").strip()
    try:
        percentage = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"{value!r} is not an allowed VAT rate") from None
    for rate, allowed in _PERCENTAGES.items():
        if percentage == allowed:
            return rate
    raise ValueError(f"{value!r} is not an allowed VAT rate")
