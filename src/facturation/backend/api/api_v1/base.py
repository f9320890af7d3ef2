# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from dataclasses import dataclass
from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from facturation.backend import crud, models, schemas
from facturation.backend.api.command import (
    CommandResponse,
    CommandStatus,
    command,
    current_session,
    failed,
    not_found,
    rejected,
)
from facturation.settings import facturation_settings

CRUDObjectType = TypeVar(  # pylint: disable=invalid-name
    "CRUDObjectType", bound=crud.CRUDBase  # type: ignore[type-arg]
)
SchemaType = TypeVar(  # pylint: disable=invalid-name
    "SchemaType", bound=schemas.BaseSchema  # type: ignore[type-arg]
)


@dataclass()
class FacturationModel(Generic[CRUDObjectType, SchemaType]):
    crud_object: CRUDObjectType
    schema: Type[SchemaType]

    @property
    def session(self) -> Session:
        return current_session()

    @property
    def name(self) -> str:
        return self.crud_object.model.__name__

    def check_create(self, obj_in: Any) -> dict[str, str]:
        """Field errors of obj_in, checked before any database access."""
        return {}

    def check_update(self, obj_in: Any) -> dict[str, str]:
        return {}

    @command
    def get(self, obj_id: int) -> CommandResponse:
        try:
            db_obj = self.crud_object.get(self.session, obj_id)
        except crud.CrudError as exc:
            return failed(f"GET - Cannot get {self.name} {obj_id}", exc)
        if db_obj is None:
            return not_found(f"GET - {self.name} {obj_id} not found.")
        body = self.schema.from_orm(db_obj)
        return CommandResponse(CommandStatus.COMPLETED, body=body)

    @command
    def get_multi(
        self, *, skip: int = 0, limit: Optional[int] = None
    ) -> CommandResponse:
        if limit is None:
            limit = facturation_settings.page_size
        try:
            db_objs = self.crud_object.get_multi(self.session, skip=skip, limit=limit)
        except crud.CrudError as exc:
            return failed(f"GET-MULTI - Cannot list {self.name} objects", exc)
        body = [self.schema.from_orm(db_obj) for db_obj in db_objs]
        return CommandResponse(CommandStatus.COMPLETED, body=body)

    @command
    def get_all(self) -> CommandResponse:
        try:
            db_objs = self.crud_object.get_all(self.session)
        except crud.CrudError as exc:
            return failed(f"GET-ALL - Cannot list {self.name} objects", exc)
        body = [self.schema.from_orm(db_obj) for db_obj in db_objs]
        return CommandResponse(CommandStatus.COMPLETED, body=body)

    @command
    def add(self, obj_in: crud.CreateSchemaType) -> CommandResponse:
        errors = self.check_create(obj_in)
        if errors:
            return rejected(f"ADD - Invalid {self.name}", errors)

        try:
            db_obj = self.crud_object.create(self.session, obj_in=obj_in)
        except models.ValidationError as exc:
            return rejected(f"ADD - Invalid {self.name}", exc.errors)
        except crud.ConflictError as exc:
            return rejected(f"ADD - {exc}", {exc.field: str(exc)})
        except crud.CrudError as exc:
            return failed(f"ADD - Cannot add {self.name}", exc)
        body = self.schema.from_orm(db_obj)
        return CommandResponse(CommandStatus.COMPLETED, body=body)

    @command
    def update(self, obj_id: int, *, obj_in: crud.UpdateSchemaType) -> CommandResponse:
        errors = self.check_update(obj_in)
        if errors:
            return rejected(f"UPDATE - Invalid {self.name}", errors)

        try:
            db_obj = self.crud_object.get(self.session, obj_id)
        except crud.CrudError as exc:
            return failed(f"UPDATE - Cannot get {self.name} {obj_id}", exc)

        if db_obj is None:
            return not_found(f"UPDATE - {self.name} {obj_id} not found.")

        try:
            db_obj = self.crud_object.update(self.session, db_obj=db_obj, obj_in=obj_in)
        except crud.ConflictError as exc:
            return rejected(f"UPDATE - {exc}", {exc.field: str(exc)})
        except crud.CrudError as exc:
            return failed(f"UPDATE - Cannot update {self.name} {obj_id}", exc)
        body = self.schema.from_orm(db_obj)
        return CommandResponse(CommandStatus.COMPLETED, body=body)

    @command
    def delete(self, obj_id: int) -> CommandResponse:
        try:
            db_obj = self.crud_object.get(self.session, obj_id)
        except crud.CrudError as exc:
            return failed(f"DELETE - Cannot get {self.name} {obj_id}", exc)

        if db_obj is None:
            return not_found(f"DELETE - {self.name} {obj_id} not found.")

        try:
            self.crud_object.delete(self.session, db_obj=db_obj)
        except crud.CrudError as exc:
            return failed(f"DELETE - Cannot delete {self.name} {obj_id}", exc)
        return CommandResponse(CommandStatus.COMPLETED)
