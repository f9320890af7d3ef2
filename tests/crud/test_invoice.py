# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from datetime import date
from decimal import Decimal

import pytest
import sqlalchemy as sa

from facturation.backend import crud, models, schemas
from facturation.backend.util import Period

pytestmark = pytest.mark.crud


def test_crud_init():
    assert crud.invoice.model is models.Invoice


def test_crud_get(dbsession, init_data):
    invoice = crud.invoice.get(dbsession, init_data.invoices[0].id)

    assert invoice is init_data.invoices[0]
    assert invoice.client is init_data.clients[0]
    assert [line.description for line in invoice.lines] == ["Consulting", "Training"]


def test_crud_get_fresh_session(connection, init_data):
    # Lines and client are loaded along with the invoice.
    with sa.orm.Session(bind=connection) as session:
        invoice = crud.invoice.get(session, init_data.invoices[0].id)
        session.expunge_all()

    assert invoice.client.name == "Client_1"
    assert len(invoice.lines) == 2
    assert invoice.total_including_tax == Decimal("136.00")


def test_crud_get_for_client(dbsession, init_data):
    invoices = crud.invoice.get_for_client(dbsession, init_data.clients[1].id)

    assert invoices == init_data.invoices[2:]
    assert crud.invoice.get_for_client(dbsession, init_data.clients[2].id) == []
    assert crud.invoice.get_for_client(dbsession, 100) == []


def test_crud_get_for_client_error(dbsession, init_data, mock_select):
    state, _called = mock_select
    state["failed"] = True

    with pytest.raises(crud.CrudError):
        crud.invoice.get_for_client(dbsession, init_data.clients[0].id)


@pytest.mark.parametrize(
    "period, client_index, expected",
    [
        (Period(date(2023, 2, 1), date(2023, 2, 28)), None, [1, 2]),
        (Period(date(2023, 2, 1), date(2023, 2, 28)), 1, [2]),
        (Period.from_quarter(2023, 1), 0, [0, 1]),
        (Period.from_quarter(2023, 2), None, [3]),
        (Period(), None, [0, 1, 2, 3]),
        (Period(date(2024, 1, 1), date(2024, 12, 31)), None, []),
    ],
)
def test_crud_get_in_period(dbsession, init_data, period, client_index, expected):
    client_id = None if client_index is None else init_data.clients[client_index].id

    invoices = crud.invoice.get_in_period(dbsession, period=period, client_id=client_id)

    assert invoices == [init_data.invoices[i] for i in expected]


def test_crud_count_for_client(dbsession, init_data):
    clients = init_data.clients

    assert crud.invoice.count_for_client(dbsession, clients[0].id) == 2
    assert crud.invoice.count_for_client(dbsession, clients[2].id) == 0


def test_crud_create(dbsession, init_data):
    client = init_data.clients[2]

    invoice = crud.invoice.create(
        dbsession,
        obj_in=schemas.InvoiceCreate(client_id=client.id, date=date(2023, 5, 1)),
    )

    assert invoice.id is not None
    assert invoice.client is client
    assert invoice.lines == []
    assert invoice.amount == (0, 0, 0)


def test_crud_create_unknown_client(dbsession, init_data):
    # Refused by the foreign key constraint.
    with pytest.raises(crud.CrudIntegrityError):
        crud.invoice.create(
            dbsession,
            obj_in=schemas.InvoiceCreate(client_id=100, date=date(2023, 5, 1)),
        )


def test_crud_add_line(dbsession, init_data):
    invoice = init_data.invoices[2]

    line = crud.invoice.add_line(
        dbsession,
        invoice_=invoice,
        obj_in=schemas.LineCreate(
            description="Audit", quantity=2, unit_price="150.50", vat_rate="20%"
        ),
    )

    assert line.id is not None
    assert line.invoice_id == invoice.id
    assert line.unit_price == Decimal("150.50")
    assert invoice.lines == [line]
    assert invoice.total_pre_tax == Decimal("301.00")
    assert invoice.total_tax == Decimal("60.20")
    assert invoice.total_including_tax == Decimal("361.20")

    stored = dbsession.scalars(
        sa.select(models.InvoiceLine).where(models.InvoiceLine.id == line.id)
    ).one()
    assert stored.unit_price == Decimal("150.50")
    assert stored.vat_rate is models.VatRate.NORMAL


def test_crud_add_line_invalid(dbsession, init_data, mock_commit):
    _state, called = mock_commit
    invoice = init_data.invoices[2]

    with pytest.raises(models.ValidationError) as exc_info:
        crud.invoice.add_line(
            dbsession,
            invoice_=invoice,
            obj_in=schemas.LineCreate(
                description="Audit", quantity=0, unit_price="150.50", vat_rate="20%"
            ),
        )

    assert list(exc_info.value.errors) == ["quantity"]
    assert invoice.lines == []
    assert len(called) == 0


def test_crud_add_line_error(dbsession, init_data, mock_commit):
    state, _called = mock_commit
    state["failed"] = True

    with pytest.raises(crud.CrudError):
        crud.invoice.add_line(
            dbsession,
            invoice_=init_data.invoices[2],
            obj_in=schemas.LineCreate(
                description="Audit", quantity=1, unit_price=10, vat_rate=0
            ),
        )


def test_crud_get_line(dbsession, init_data):
    invoices = init_data.invoices
    line = invoices[0].lines[1]

    assert crud.invoice.get_line(dbsession, invoice_=invoices[0], line_id=line.id) is line
    # A line of another invoice is not found
    assert crud.invoice.get_line(dbsession, invoice_=invoices[1], line_id=line.id) is None


def test_crud_remove_line(dbsession, init_data):
    invoice = init_data.invoices[0]
    line = invoice.lines[1]
    line_id = line.id

    crud.invoice.remove_line(dbsession, invoice_=invoice, line=line)

    assert len(invoice.lines) == 1
    assert invoice.total_including_tax == Decimal("36.00")
    assert dbsession.get(models.InvoiceLine, line_id) is None


def test_crud_update(dbsession, init_data):
    invoice = init_data.invoices[0]
    client = init_data.clients[2]

    updated = crud.invoice.update(
        dbsession,
        db_obj=invoice,
        obj_in=schemas.InvoiceUpdate(client_id=client.id, date=date(2023, 6, 1)),
    )

    assert updated.client_id == client.id
    assert updated.client is client
    assert updated.date == date(2023, 6, 1)
    assert len(updated.lines) == 2


def test_crud_delete(dbsession, init_data):
    invoice = init_data.invoices[0]
    line_ids = [line.id for line in invoice.lines]

    crud.invoice.delete(dbsession, db_obj=invoice)

    assert crud.invoice.get(dbsession, invoice.id) is None
    for line_id in line_ids:
        assert dbsession.get(models.InvoiceLine, line_id) is None
    assert crud.client.get(dbsession, init_data.clients[0].id) is not None


def test_crud_delete_cascade_in_storage(dbsession, init_data):
    invoice_id = init_data.invoices[1].id

    dbsession.execute(sa.delete(models.Invoice).where(models.Invoice.id == invoice_id))
    dbsession.commit()

    count = dbsession.scalar(
        sa.select(sa.func.count(models.InvoiceLine.id)).where(
            models.InvoiceLine.invoice_id == invoice_id
        )
    )
    assert count == 0
