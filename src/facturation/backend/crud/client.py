# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from typing import Any, Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from facturation.backend import models, schemas
from facturation.backend.models.validation import strip_text

from .base import (
    CRUDBase,
    CrudError,
    CrudIntegrityError,
    DuplicateEmail,
    DuplicateRegistrationNumber,
)


class CRUDClient(CRUDBase[models.Client, schemas.ClientCreate, schemas.ClientUpdate]):
    def get_by_email(self, dbsession: Session, email: str) -> Optional[models.Client]:
        try:
            client_ = dbsession.scalars(
                select(models.Client).where(models.Client.email == strip_text(email))
            ).first()
        except SQLAlchemyError as exc:
            raise CrudError from exc
        else:
            return client_

    def get_by_registration_number(
        self, dbsession: Session, registration_number: str
    ) -> Optional[models.Client]:
        try:
            client_ = dbsession.scalars(
                select(models.Client).where(
                    models.Client.registration_number == strip_text(registration_number)
                )
            ).first()
        except SQLAlchemyError as exc:
            raise CrudError from exc
        else:
            return client_

    def create(
        self, dbsession: Session, *, obj_in: schemas.ClientCreate
    ) -> models.Client:
        self._check_unique(
            dbsession,
            email=obj_in.email,
            registration_number=obj_in.registration_number,
        )
        try:
            return super().create(dbsession, obj_in=obj_in)
        except CrudIntegrityError as exc:
            # Another session may have inserted the same values since the check.
            raise self._as_conflict(
                exc,
                email=obj_in.email,
                registration_number=obj_in.registration_number,
            ) from exc.__cause__

    def update(
        self,
        dbsession: Session,
        *,
        db_obj: models.Client,
        obj_in: Union[schemas.ClientUpdate, dict[str, Any]],
    ) -> models.Client:
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.flatten()
        update_data = {field: strip_text(value) for field, value in update_data.items()}
        email = update_data.get("email") or db_obj.email
        registration_number = (
            update_data.get("registration_number") or db_obj.registration_number
        )
        self._check_unique(
            dbsession,
            email=email,
            registration_number=registration_number,
            exclude_id=db_obj.id,
        )
        try:
            return super().update(dbsession, db_obj=db_obj, obj_in=update_data)
        except CrudIntegrityError as exc:
            raise self._as_conflict(
                exc, email=email, registration_number=registration_number
            ) from exc.__cause__

    def delete(self, dbsession: Session, *, db_obj: models.Client) -> None:
        try:
            invoices = dbsession.scalars(
                select(models.Invoice).where(models.Invoice.client_id == db_obj.id)
            ).all()
        except SQLAlchemyError as exc:
            raise CrudError from exc

        # Lines go with their invoice.
        for invoice_ in invoices:
            dbsession.delete(invoice_)
        dbsession.delete(db_obj)
        self._commit(dbsession)

    def _check_unique(
        self,
        dbsession: Session,
        *,
        email: str,
        registration_number: str,
        exclude_id: Optional[int] = None,
    ) -> None:
        other = self.get_by_email(dbsession, email)
        if other is not None and other.id != exclude_id:
            raise DuplicateEmail(email)
        other = self.get_by_registration_number(dbsession, registration_number)
        if other is not None and other.id != exclude_id:
            raise DuplicateRegistrationNumber(registration_number)

    @staticmethod
    def _as_conflict(
        exc: CrudIntegrityError, *, email: str, registration_number: str
    ) -> CrudIntegrityError:
        # SQLite reports e.g. "UNIQUE constraint failed: client.email"
        message = str(exc)
        if "client.registration_number" in message:
            return DuplicateRegistrationNumber(registration_number)
        if "client.email" in message:
            return DuplicateEmail(email)
        return exc


client = CRUDClient(models.Client)
