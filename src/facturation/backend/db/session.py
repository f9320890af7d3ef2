# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import logging
import sqlite3 as sqlite
from pathlib import Path
from typing import Union

import sqlalchemy as sa
from sqlalchemy.event import listen
from sqlalchemy.orm import sessionmaker

from facturation.backend import models

logger = logging.getLogger(__name__)


def set_sqlite_pragma(dbapi_connection, _connection_record):  # type: ignore
    # Foreign keys, hence ON DELETE CASCADE, are off by default in SQLite.
    if isinstance(dbapi_connection, sqlite.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_tables(engine: sa.Engine) -> None:
    models.BaseModel.metadata.create_all(bind=engine)


def create_engine(db_path: Union[Path, str]) -> sa.Engine:
    """Returns an engine on a SQLite database file (':memory:' for a transient one)."""
    location = db_path if db_path == ":memory:" else Path(db_path).as_posix()
    engine = sa.create_engine(f"sqlite+pysqlite:///{location}")
    listen(engine, "connect", set_sqlite_pragma)
    return engine


def configure_session(db_path: Union[Path, str], *, is_new: bool) -> sa.Engine:
    engine = create_engine(db_path)
    session_factory.configure(bind=engine)
    if is_new:
        logger.info("Creating the database tables")
        create_tables(engine)
    return engine


session_factory = sessionmaker(expire_on_commit=False)
