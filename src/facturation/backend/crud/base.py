# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from typing import Any, Generic, Optional, Type, TypeVar, Union, cast

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from facturation.backend import schemas
from facturation.backend.models import ModelType

CreateSchemaType = TypeVar("CreateSchemaType", bound=schemas.BaseSchema)  # type: ignore[type-arg]
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=schemas.BaseSchema)  # type: ignore[type-arg]


class CrudError(Exception):
    pass


class CrudIntegrityError(CrudError):
    pass


class ConflictError(CrudIntegrityError):
    """A unique value is already used by another record.

    Attributes:
        field: the name of the conflicting field.
    """

    field: str = ""


class DuplicateEmail(ConflictError):
    field = "email"

    def __init__(self, email: str) -> None:
        super().__init__(f"Email {email} is already used by another client")


class DuplicateRegistrationNumber(ConflictError):
    field = "registration_number"

    def __init__(self, number: str) -> None:
        super().__init__(
            f"Registration number {number} is already used by another client"
        )


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        """CRUD object with default methods to Create, Read, Update, Delete (CRUD)."""
        self.model = model

    def get(self, dbsession: Session, obj_id: Any) -> Optional[ModelType]:
        try:
            obj = dbsession.get(self.model, obj_id)
        except SQLAlchemyError as exc:
            raise CrudError from exc
        else:
            return obj

    def get_multi(
        self, dbsession: Session, *, skip: int = 0, limit: int = 100
    ) -> list[ModelType]:
        try:
            obj_list = cast(
                list[ModelType],
                dbsession.scalars(
                    select(self.model)
                    .order_by(self.model.id)  # type: ignore[attr-defined]
                    .offset(skip)
                    .limit(limit)
                ).all(),
            )
        except SQLAlchemyError as exc:
            raise CrudError from exc
        else:
            return obj_list

    def get_all(self, dbsession: Session) -> list[ModelType]:
        try:
            obj_list = cast(
                list[ModelType],
                dbsession.scalars(
                    select(self.model).order_by(self.model.id)  # type: ignore[attr-defined]
                ).all(),
            )
        except SQLAlchemyError as exc:
            raise CrudError from exc
        else:
            return obj_list

    def create(self, dbsession: Session, *, obj_in: CreateSchemaType) -> ModelType:
        obj_in_data = obj_in.flatten()
        db_obj = self.model(**obj_in_data)
        dbsession.add(db_obj)
        self._commit(dbsession)
        dbsession.refresh(db_obj)
        return db_obj

    def update(
        self,
        dbsession: Session,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, dict[str, Any]],
    ) -> ModelType:
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.flatten()

        updated = False
        for field, value in update_data.items():
            if value is not None and getattr(db_obj, field) != value:
                setattr(db_obj, field, value)
                updated = True

        if updated:
            self._commit(dbsession)
            dbsession.refresh(db_obj)
        return db_obj

    def delete(self, dbsession: Session, *, db_obj: ModelType) -> None:
        dbsession.delete(db_obj)
        self._commit(dbsession)

    def _commit(self, dbsession: Session) -> None:
        try:
            dbsession.commit()
        except IntegrityError as exc:
            dbsession.rollback()
            raise CrudIntegrityError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            dbsession.rollback()
            raise CrudError() from exc
