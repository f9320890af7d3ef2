# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import datetime
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from facturation.backend import models
from facturation.backend.util import Amount

from .base import BaseSchema
from .client import Client
from .line import InvoiceLine


@dataclass
class _InvoiceBase(BaseSchema[models.Invoice]):
    client_id: int
    date: datetime.date


@dataclass
class InvoiceCreate(BaseSchema[models.Invoice]):
    client_id: int
    date: Optional[datetime.date] = None


@dataclass
class InvoiceUpdate(_InvoiceBase):
    pass


@dataclass
class _InvoiceInDBBase(_InvoiceBase):
    id: int


# Additional properties to return from DB
@dataclass
class Invoice(_InvoiceInDBBase):
    client: Client
    lines: list[InvoiceLine]

    @property
    def amount(self) -> Amount:
        amount = Amount()
        for line in self.lines:
            amount += line.amount
        return amount

    @property
    def total_pre_tax(self) -> Decimal:
        return self.amount.pre_tax

    @property
    def total_tax(self) -> Decimal:
        return self.amount.tax

    @property
    def total_including_tax(self) -> Decimal:
        return self.amount.including_tax

    def flatten(self) -> dict[str, Any]:
        """The complete invoice record, as plain values.

        The client is embedded, each line carries its amounts and the invoice
        totals are appended.
        """
        amount = self.amount
        return {
            "id": self.id,
            "date": self.date,
            "client_id": self.client_id,
            "client": self.client.flatten(),
            "lines": [line.flatten() for line in self.lines],
            "total_pre_tax": amount.pre_tax,
            "total_tax": amount.tax,
            "total_including_tax": amount.including_tax,
        }

    @classmethod
    def from_orm(cls, orm_obj: models.Invoice) -> "Invoice":
        return cls(
            id=orm_obj.id,
            client_id=orm_obj.client_id,
            date=orm_obj.date,
            client=Client.from_orm(orm_obj.client),
            lines=[InvoiceLine.from_orm(line) for line in orm_obj.lines],
        )
