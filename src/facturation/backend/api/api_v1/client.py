# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from dataclasses import dataclass
from typing import Type

from facturation.backend import crud, schemas
from facturation.backend.api.command import (
    CommandResponse,
    CommandStatus,
    command,
    failed,
    not_found,
)
from facturation.backend.models.validation import client_errors

from .base import FacturationModel


@dataclass
class ClientModel(FacturationModel[crud.CRUDClient, schemas.Client]):
    """The client directory.

    Email and registration number identify a client: adding or updating a
    client to a value already used by another one is rejected, with the
    conflicting field as the error key.
    """

    crud_object: crud.CRUDClient = crud.client
    schema: Type[schemas.Client] = schemas.Client

    def check_create(self, obj_in: schemas.ClientCreate) -> dict[str, str]:
        return client_errors(obj_in.name, obj_in.email, obj_in.registration_number)

    def check_update(self, obj_in: schemas.ClientUpdate) -> dict[str, str]:
        return client_errors(
            obj_in.name, obj_in.email, obj_in.registration_number, partial=True
        )

    @command
    def get_by_email(self, email: str) -> CommandResponse:
        try:
            client_ = self.crud_object.get_by_email(self.session, email)
        except crud.CrudError as exc:
            return failed(f"GET-BY-EMAIL - Cannot get client {email}", exc)
        if client_ is None:
            return not_found(f"GET-BY-EMAIL - No client with email {email}.")
        body = schemas.Client.from_orm(client_)
        return CommandResponse(CommandStatus.COMPLETED, body=body)

    @command
    def get_by_registration_number(self, registration_number: str) -> CommandResponse:
        try:
            client_ = self.crud_object.get_by_registration_number(
                self.session, registration_number
            )
        except crud.CrudError as exc:
            return failed(
                f"GET-BY-REGISTRATION - Cannot get client {registration_number}", exc
            )
        if client_ is None:
            return not_found(
                f"GET-BY-REGISTRATION - No client with registration number "
                f"{registration_number}."
            )
        body = schemas.Client.from_orm(client_)
        return CommandResponse(CommandStatus.COMPLETED, body=body)


client = ClientModel()
