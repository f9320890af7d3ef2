# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from facturation.backend.util import Amount

from .base_model import BaseModel, intpk

if TYPE_CHECKING:  # pragma: no cover
    from .client import Client
    from .invoice_line import InvoiceLine


class Invoice(BaseModel):
    """An invoice of a client and its ordered lines.

    The invoice exclusively owns its lines: a line removed from the collection,
    or belonging to a deleted invoice, is deleted too.
    """

    __tablename__ = "invoice"

    id: Mapped[intpk] = mapped_column(init=False)
    date: Mapped[datetime.date]
    client_id: Mapped[int] = mapped_column(
        ForeignKey("client.id", ondelete="CASCADE"), index=True
    )

    client: Mapped["Client"] = relationship(init=False, lazy="joined")
    lines: Mapped[list["InvoiceLine"]] = relationship(
        init=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="InvoiceLine.id",
        lazy="selectin",
    )

    def add_line(self, line: "InvoiceLine") -> None:
        self.lines.append(line)
        line.invoice_id = self.id

    def remove_line(self, line: "InvoiceLine") -> None:
        # By identity: two lines may hold equal values.
        for index, line_ in enumerate(self.lines):
            if line_ is line:
                del self.lines[index]
                line.invoice_id = None
                return
        raise ValueError(f"Line {line.id} is not part of invoice {self.id}")

    @property
    def total_pre_tax(self) -> Decimal:
        return sum((line.pre_tax for line in self.lines), Decimal(0))

    @property
    def total_tax(self) -> Decimal:
        return sum((line.tax for line in self.lines), Decimal(0))

    @property
    def total_including_tax(self) -> Decimal:
        return self.total_pre_tax + self.total_tax

    @property
    def amount(self) -> Amount:
        amount = Amount()
        for line in self.lines:
            amount += line.amount
        return amount
