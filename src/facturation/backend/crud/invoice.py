# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from typing import Optional, cast

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from facturation.backend import models, schemas
from facturation.backend.util import Period

from .base import CRUDBase, CrudError


class CRUDInvoice(
    CRUDBase[models.Invoice, schemas.InvoiceCreate, schemas.InvoiceUpdate]
):
    def get_for_client(self, dbsession: Session, client_id: int) -> list[models.Invoice]:
        try:
            invoices = cast(
                list[models.Invoice],
                dbsession.scalars(
                    select(models.Invoice)
                    .where(models.Invoice.client_id == client_id)
                    .order_by(models.Invoice.id)
                ).all(),
            )
        except SQLAlchemyError as exc:
            raise CrudError from exc
        else:
            return invoices

    def get_in_period(
        self,
        dbsession: Session,
        *,
        period: Period,
        client_id: Optional[int] = None,
    ) -> list[models.Invoice]:
        try:
            query = (
                select(models.Invoice)
                .where(models.Invoice.date >= period.start)
                .where(models.Invoice.date <= period.last_day)
            )
            if client_id is not None:
                query = query.where(models.Invoice.client_id == client_id)
            invoices = cast(
                list[models.Invoice],
                dbsession.scalars(
                    query.order_by(models.Invoice.date, models.Invoice.id)
                ).all(),
            )
        except SQLAlchemyError as exc:
            raise CrudError from exc
        else:
            return invoices

    def count_for_client(self, dbsession: Session, client_id: int) -> int:
        try:
            count = dbsession.scalar(
                select(func.count(models.Invoice.id)).where(
                    models.Invoice.client_id == client_id
                )
            )
        except SQLAlchemyError as exc:
            raise CrudError from exc
        else:
            return count or 0

    def get_line(
        self, dbsession: Session, *, invoice_: models.Invoice, line_id: int
    ) -> Optional[models.InvoiceLine]:
        # Only a line of this very invoice is returned.
        for line in invoice_.lines:
            if line.id == line_id:
                return line
        return None

    def add_line(
        self,
        dbsession: Session,
        *,
        invoice_: models.Invoice,
        obj_in: schemas.LineCreate,
    ) -> models.InvoiceLine:
        line = models.InvoiceLine(
            description=obj_in.description,
            quantity=obj_in.quantity,
            unit_price=obj_in.unit_price,  # type: ignore[arg-type]
            vat_rate=obj_in.vat_rate,  # type: ignore[arg-type]
        )
        invoice_.add_line(line)
        self._commit(dbsession)
        dbsession.refresh(invoice_)
        return line

    def remove_line(
        self,
        dbsession: Session,
        *,
        invoice_: models.Invoice,
        line: models.InvoiceLine,
    ) -> None:
        # The orphaned line is deleted at commit.
        invoice_.remove_line(line)
        self._commit(dbsession)


invoice = CRUDInvoice(models.Invoice)
