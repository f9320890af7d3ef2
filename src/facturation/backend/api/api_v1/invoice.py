# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from dataclasses import dataclass
from typing import Optional, Type

from facturation.backend import crud, models, schemas
from facturation.backend.api.command import (
    CommandResponse,
    CommandStatus,
    command,
    failed,
    not_found,
    rejected,
)
from facturation.backend.models.validation import invoice_errors
from facturation.backend.util import Period, PeriodFilter

from .base import FacturationModel


@dataclass
class InvoiceModel(FacturationModel[crud.CRUDInvoice, schemas.Invoice]):
    crud_object: crud.CRUDInvoice = crud.invoice
    schema: Type[schemas.Invoice] = schemas.Invoice

    def check_update(self, obj_in: schemas.InvoiceUpdate) -> dict[str, str]:
        return invoice_errors(obj_in.date, obj_in.client_id)

    @command
    def get_for_client(self, client_id: int) -> CommandResponse:
        try:
            invoices = self.crud_object.get_for_client(self.session, client_id)
        except crud.CrudError as exc:
            return failed(f"GET-FOR-CLIENT - Cannot get invoices of {client_id}", exc)
        body = [schemas.Invoice.from_orm(invoice_) for invoice_ in invoices]
        return CommandResponse(CommandStatus.COMPLETED, body=body)

    @command
    def get_in_period(
        self,
        *,
        period: Optional[Period] = None,
        filter_: Optional[PeriodFilter] = None,
        client_id: Optional[int] = None,
    ) -> CommandResponse:
        if filter_ is not None and period is not None:
            return rejected(
                "GET-IN-PERIOD - Invalid arguments",
                {"period": "'filter_' and 'period' arguments are mutually exclusive"},
            )
        if filter_ is not None:
            period = filter_.as_period()
        if period is None:
            period = Period()  # i.e. from the epoch to today

        try:
            invoices = self.crud_object.get_in_period(
                self.session, period=period, client_id=client_id
            )
        except crud.CrudError as exc:
            return failed("GET-IN-PERIOD - Cannot get invoices", exc)
        body = [schemas.Invoice.from_orm(invoice_) for invoice_ in invoices]
        return CommandResponse(CommandStatus.COMPLETED, body=body)

    @command
    def count_for_client(self, client_id: int) -> CommandResponse:
        try:
            count = self.crud_object.count_for_client(self.session, client_id)
        except crud.CrudError as exc:
            return failed(f"COUNT - Cannot count invoices of {client_id}", exc)
        return CommandResponse(CommandStatus.COMPLETED, body=count)

    @command
    def add(self, obj_in: schemas.InvoiceCreate) -> CommandResponse:
        errors = invoice_errors(obj_in.date, obj_in.client_id)
        if errors:
            return rejected("ADD - Invalid Invoice", errors)

        try:
            client_ = crud.client.get(self.session, obj_in.client_id)
        except crud.CrudError as exc:
            return failed(f"ADD - Cannot get client {obj_in.client_id}", exc)
        if client_ is None:
            return not_found(f"ADD - Client {obj_in.client_id} not found.")

        try:
            invoice_ = self.crud_object.create(self.session, obj_in=obj_in)
        except crud.CrudError as exc:
            return failed("ADD - Cannot add invoice", exc)
        body = schemas.Invoice.from_orm(invoice_)
        return CommandResponse(CommandStatus.COMPLETED, body=body)

    @command
    def add_line(self, obj_id: int, *, obj_in: schemas.LineCreate) -> CommandResponse:
        try:
            invoice_ = self.crud_object.get(self.session, obj_id)
        except crud.CrudError as exc:
            return failed(f"ADD-LINE - Cannot get invoice {obj_id}", exc)
        if invoice_ is None:
            return not_found(f"ADD-LINE - Invoice {obj_id} not found.")

        try:
            self.crud_object.add_line(self.session, invoice_=invoice_, obj_in=obj_in)
        except models.ValidationError as exc:
            return rejected(f"ADD-LINE - Invalid line for invoice {obj_id}", exc.errors)
        except crud.CrudError as exc:
            return failed(f"ADD-LINE - Cannot add line to invoice {obj_id}", exc)
        body = schemas.Invoice.from_orm(invoice_)
        return CommandResponse(CommandStatus.COMPLETED, body=body)

    @command
    def remove_line(self, obj_id: int, *, line_id: int) -> CommandResponse:
        try:
            invoice_ = self.crud_object.get(self.session, obj_id)
        except crud.CrudError as exc:
            return failed(f"REMOVE-LINE - Cannot get invoice {obj_id}", exc)
        if invoice_ is None:
            return not_found(f"REMOVE-LINE - Invoice {obj_id} not found.")

        line = self.crud_object.get_line(self.session, invoice_=invoice_, line_id=line_id)
        if line is None:
            return not_found(
                f"REMOVE-LINE - Line {line_id} not found in invoice {obj_id}."
            )

        try:
            self.crud_object.remove_line(self.session, invoice_=invoice_, line=line)
        except crud.CrudError as exc:
            return failed(f"REMOVE-LINE - Cannot remove line {line_id}", exc)
        body = schemas.Invoice.from_orm(invoice_)
        return CommandResponse(CommandStatus.COMPLETED, body=body)

    @command
    def update(
        self, obj_id: int, *, obj_in: schemas.InvoiceUpdate
    ) -> CommandResponse:
        errors = self.check_update(obj_in)
        if errors:
            return rejected(f"UPDATE - Invalid invoice {obj_id}", errors)

        try:
            invoice_ = self.crud_object.get(self.session, obj_id)
            client_ = crud.client.get(self.session, obj_in.client_id)
        except crud.CrudError as exc:
            return failed(f"UPDATE - Cannot get invoice {obj_id}", exc)
        if invoice_ is None:
            return not_found(f"UPDATE - Invoice {obj_id} not found.")
        if client_ is None:
            return not_found(f"UPDATE - Client {obj_in.client_id} not found.")

        try:
            invoice_ = self.crud_object.update(
                self.session, db_obj=invoice_, obj_in=obj_in
            )
        except crud.CrudError as exc:
            return failed(f"UPDATE - Cannot update invoice {obj_id}", exc)
        body = schemas.Invoice.from_orm(invoice_)
        return CommandResponse(CommandStatus.COMPLETED, body=body)

    @command
    def export(self, obj_id: int) -> CommandResponse:
        try:
            invoice_ = self.crud_object.get(self.session, obj_id)
        except crud.CrudError as exc:
            return failed(f"EXPORT - Cannot get invoice {obj_id}", exc)
        if invoice_ is None:
            return not_found(f"EXPORT - Invoice {obj_id} not found.")

        body = schemas.Invoice.from_orm(invoice_).flatten()
        return CommandResponse(CommandStatus.COMPLETED, body=body)


invoice = InvoiceModel()
