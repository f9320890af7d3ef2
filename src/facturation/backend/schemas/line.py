# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Union

from facturation.backend import models
from facturation.backend.models import VatRate
from facturation.backend.util import Amount

from .base import BaseSchema


@dataclass
class _LineBase(BaseSchema[models.InvoiceLine]):
    description: str
    quantity: int


@dataclass
class LineCreate(_LineBase):
    # Raw values, checked when the line entity is built.
    unit_price: Union[Decimal, int, str]
    vat_rate: Union[VatRate, str, int, Decimal]


@dataclass
class _LineInDBBase(_LineBase):
    id: int
    unit_price: Decimal
    vat_rate: VatRate
    invoice_id: int


# Additional properties to return from DB
@dataclass
class InvoiceLine(_LineInDBBase):
    @property
    def amount(self) -> Amount:
        pre_tax = self.unit_price * self.quantity
        tax = pre_tax * (self.vat_rate.percentage / 100)
        return Amount(pre_tax=pre_tax, tax=tax, including_tax=pre_tax + tax)

    def flatten(self) -> dict[str, Any]:
        amount = self.amount
        return {
            "id": self.id,
            "description": self.description,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "vat_rate": self.vat_rate.name,
            "vat_label": self.vat_rate.label,
            "pre_tax": amount.pre_tax,
            "tax": amount.tax,
            "including_tax": amount.including_tax,
        }

    @classmethod
    def from_orm(cls, orm_obj: models.InvoiceLine) -> "InvoiceLine":
        assert orm_obj.invoice_id is not None
        return cls(
            id=orm_obj.id,
            description=orm_obj.description,
            quantity=orm_obj.quantity,
            unit_price=orm_obj.unit_price,
            vat_rate=orm_obj.vat_rate,
            invoice_id=orm_obj.invoice_id,
        )
