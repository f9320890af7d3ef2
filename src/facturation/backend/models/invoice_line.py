# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from decimal import Decimal
from typing import Optional

from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.schema import CheckConstraint

from facturation.backend.util import Amount

from .base_model import BaseModel, intpk
from .validation import check, line_errors, to_unit_price
from .vat_rate import VatRate, parse_vat_rate, percentage_of


class InvoiceLine(BaseModel):
    """A billable entry of an invoice.

    Constructing a line validates its fields and raises a ValidationError
    listing every invalid one. Amounts are recomputed on each access and never
    rounded.
    """

    __tablename__ = "invoice_line"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="quantity_at_least_one"),
        CheckConstraint("unit_price > 0", name="unit_price_positive"),
    )

    id: Mapped[intpk] = mapped_column(init=False)
    description: Mapped[str]
    quantity: Mapped[int]
    unit_price: Mapped[Decimal]
    vat_rate: Mapped[VatRate]
    invoice_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("invoice.id", ondelete="CASCADE"),
        init=False,
        nullable=False,
        index=True,
    )

    def __post_init__(self) -> None:
        check(
            line_errors(self.description, self.quantity, self.unit_price, self.vat_rate)
        )
        self.unit_price = to_unit_price(self.unit_price)
        self.vat_rate = parse_vat_rate(self.vat_rate)

    @property
    def pre_tax(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def tax(self) -> Decimal:
        return self.pre_tax * (percentage_of(self.vat_rate) / 100)

    @property
    def including_tax(self) -> Decimal:
        return self.pre_tax + self.tax

    @property
    def amount(self) -> Amount:
        pre_tax = self.pre_tax
        tax = self.tax
        return Amount(pre_tax=pre_tax, tax=tax, including_tax=pre_tax + tax)
