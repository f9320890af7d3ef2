# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

# Cf. https://gist.github.com/kissgyorgy/e2365f25a213de44b9a2

import dataclasses
import os
import sys
from datetime import date, datetime
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.event import listen
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

# Settings of the test runs live in their own user directories.
os.environ.setdefault("FACTURATION_TEST", "1")

from facturation.backend import db, models
from facturation.backend.db.session import set_sqlite_pragma
from facturation.backend.models.base_model import BaseModel


# https://github.com/sqlalchemy/sqlalchemy/issues/7716
# https://docs.sqlalchemy.org/en/20/dialects/sqlite.html#pysqlite-serializable
def do_connect(dbapi_connection, connection_record):
    # disable pysqlite's emitting of the BEGIN statement entirely.
    # also stops it from emitting COMMIT before any DDL.
    dbapi_connection.isolation_level = None


def do_begin(conn):
    # emit our own BEGIN
    conn.exec_driver_sql("BEGIN")


@pytest.fixture(scope="session")
def engine():
    engine = create_engine("sqlite+pysqlite:///:memory:")
    listen(engine, "connect", set_sqlite_pragma)
    listen(engine, "connect", do_connect)
    listen(engine, "begin", do_begin)
    return engine


@pytest.fixture(scope="session")
def tables(engine):
    BaseModel.metadata.create_all(engine)
    yield
    BaseModel.metadata.drop_all(engine)


@pytest.fixture
def connection(engine, tables):
    """A connection whose outer transaction is rolled back after the test."""
    connection = engine.connect()
    # begin the nested transaction
    transaction = connection.begin()

    yield connection

    # roll back the broader transaction
    transaction.rollback()
    # put back the connection to the connection pool
    connection.close()


@pytest.fixture
def dbsession(connection):
    """Returns a sqlalchemy session, and after the test tears down everything properly."""
    # Session commits only release a savepoint of the outer transaction.
    factory = sessionmaker(
        bind=connection,
        join_transaction_mode="create_savepoint",
        expire_on_commit=False,
    )
    session = factory()

    yield session

    session.close()


@pytest.fixture
def api_session(connection, monkeypatch):
    """Binds the sessions opened by the api commands to the test connection."""
    monkeypatch.setattr(
        db.session_factory,
        "kw",
        {
            "bind": connection,
            "join_transaction_mode": "create_savepoint",
            "expire_on_commit": False,
        },
    )


#
# Mock some methods of the sqlalchemy Session
#
@pytest.fixture()
def mock_commit(monkeypatch):
    state = {"failed": False}
    called = []

    def _commit(_):
        called.append(True)
        if state["failed"]:
            raise SQLAlchemyError("Commit failed")

    monkeypatch.setattr("facturation.backend.crud.base.Session.commit", _commit)

    return state, called


@pytest.fixture()
def mock_get(monkeypatch):
    state = {"failed": False}
    called = []

    def _get(_1, _2, _3, **kwargs):
        called.append(True)
        if state["failed"]:
            raise SQLAlchemyError("Get failed")

    monkeypatch.setattr("facturation.backend.crud.base.Session.get", _get)

    return state, called


@pytest.fixture()
def mock_select(monkeypatch):
    state = {"failed": False}
    called = []

    def _select(*_args):
        called.append(True)
        if state["failed"]:
            raise SQLAlchemyError("Select failed")

    monkeypatch.setattr("facturation.backend.crud.base.select", _select)
    monkeypatch.setattr(sys.modules["facturation.backend.crud.client"], "select", _select)
    monkeypatch.setattr(sys.modules["facturation.backend.crud.invoice"], "select", _select)

    return state, called


@dataclasses.dataclass
class TestData:
    clients: list[models.Client]
    invoices: list[models.Invoice]


CREATED_AT = datetime(2023, 2, 22, 10, 30, 0)


def make_client(i: int) -> models.Client:
    return models.Client(
        name=f"Client_{i}",
        email=f"client_{i}@domain.com",
        registration_number=f"{i:014d}",
        created_at=CREATED_AT,
    )


@pytest.fixture
def init_data(dbsession: Session) -> TestData:
    """Three clients; the first two have two invoices each, the third none.

    Invoice lines (of invoices 1 to 4):
      1: 3 x 10.00 at 20%, 1 x 100.00 at 0%
      2: 2 x 50.00 at 5.5%
      3: none
      4: 1 x 19.99 at 10%
    """
    clients = [make_client(i + 1) for i in range(3)]
    dbsession.add_all(clients)
    dbsession.commit()

    invoices = [
        models.Invoice(date=date(2023, 1, 15), client_id=clients[0].id),
        models.Invoice(date=date(2023, 2, 10), client_id=clients[0].id),
        models.Invoice(date=date(2023, 2, 20), client_id=clients[1].id),
        models.Invoice(date=date(2023, 4, 5), client_id=clients[1].id),
    ]
    dbsession.add_all(invoices)
    dbsession.commit()

    invoices[0].add_line(
        models.InvoiceLine(
            description="Consulting",
            quantity=3,
            unit_price=Decimal("10.00"),
            vat_rate=models.VatRate.NORMAL,
        )
    )
    invoices[0].add_line(
        models.InvoiceLine(
            description="Training",
            quantity=1,
            unit_price=Decimal("100.00"),
            vat_rate=models.VatRate.ZERO,
        )
    )
    invoices[1].add_line(
        models.InvoiceLine(
            description="Books",
            quantity=2,
            unit_price=Decimal("50.00"),
            vat_rate=models.VatRate.REDUCED,
        )
    )
    invoices[3].add_line(
        models.InvoiceLine(
            description="Catering",
            quantity=1,
            unit_price=Decimal("19.99"),
            vat_rate=models.VatRate.INTERMEDIATE,
        )
    )
    dbsession.commit()
    for invoice in invoices:
        dbsession.refresh(invoice)

    return TestData(clients=clients, invoices=invoices)
