# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import decimal
from typing import Annotated, TypeVar

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase, MappedAsDataclass, mapped_column
from sqlalchemy.types import Integer, TypeDecorator


class SqliteDecimal(TypeDecorator):
    # https://stackoverflow.com/questions/10355767/how-should-i-handle-decimal-in-sqlalchemy-sqlite
    # Decimals are stored as integers in units of 10**-scale: with scale=2,
    # Decimal('12.34') is stored as 1234.
    impl = Integer
    cache_ok = True

    def __init__(self, scale: int) -> None:
        TypeDecorator.__init__(self)
        self.scale = scale
        self.multiplier_int = 10**self.scale

    def process_bind_param(self, value, dialect):  # type: ignore[no-untyped-def]
        if value is not None:
            scaled = decimal.Decimal(value) * self.multiplier_int
            if scaled != scaled.to_integral_value():
                raise ValueError(
                    f"{value} has more than {self.scale} decimal places"
                )
            value = int(scaled)
        return value

    def process_result_value(self, value, dialect):  # type: ignore[no-untyped-def]
        if value is not None:
            value = decimal.Decimal(value).scaleb(-self.scale)
        return value


# Explicit constraint names, so that an IntegrityError tells which one failed.
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class BaseModel(MappedAsDataclass, DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
    type_annotation_map = {decimal.Decimal: SqliteDecimal(scale=2)}


ModelType = TypeVar("ModelType", bound=BaseModel)


intpk = Annotated[int, mapped_column(primary_key=True)]
