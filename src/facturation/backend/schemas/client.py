# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from facturation.backend import models
from facturation.backend.models.validation import CLIENT_TEXT_FIELDS, strip_text

from .base import BaseSchema


def _strip(schema: Any) -> None:
    for field in CLIENT_TEXT_FIELDS:
        setattr(schema, field, strip_text(getattr(schema, field)))


@dataclass
class _ClientBase(BaseSchema[models.Client]):
    name: str
    email: str
    registration_number: str

    def __post_init__(self) -> None:
        _strip(self)


@dataclass
class _ClientDefaultsBase(BaseSchema[models.Client]):
    name: Optional[str] = None
    email: Optional[str] = None
    registration_number: Optional[str] = None

    def __post_init__(self) -> None:
        _strip(self)


@dataclass
class ClientCreate(_ClientBase):
    created_at: Optional[datetime] = None


@dataclass
class ClientUpdate(_ClientDefaultsBase):
    def flatten(self) -> dict[str, Any]:
        # Unset fields keep their current value.
        return {
            field: value
            for field, value in super().flatten().items()
            if value is not None
        }


@dataclass
class _ClientInDBBase(_ClientBase):
    id: int
    created_at: datetime


# Additional properties to return from DB
@dataclass
class Client(_ClientInDBBase):
    @classmethod
    def from_orm(cls, orm_obj: models.Client) -> "Client":
        assert orm_obj.created_at is not None
        return cls(
            id=orm_obj.id,
            name=orm_obj.name,
            email=orm_obj.email,
            registration_number=orm_obj.registration_number,
            created_at=orm_obj.created_at,
        )
