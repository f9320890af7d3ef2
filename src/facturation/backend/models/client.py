# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from datetime import datetime
from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from .base_model import BaseModel, intpk
from .validation import CLIENT_TEXT_FIELDS, check, client_errors, strip_text


class Client(BaseModel):
    """A client of the company.

    Email and registration number (SIRET) are unique over all clients: the
    unique constraints are the storage-side guarantee. Invoices refer to their
    client by client_id; a client holds no invoice collection.
    """

    __tablename__ = "client"

    id: Mapped[intpk] = mapped_column(init=False)
    name: Mapped[str]
    email: Mapped[str] = mapped_column(String(254), unique=True)
    registration_number: Mapped[str] = mapped_column(String(14), unique=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(
        default=None, nullable=False
    )

    def __post_init__(self) -> None:
        for field in CLIENT_TEXT_FIELDS:
            setattr(self, field, strip_text(getattr(self, field)))
        check(client_errors(self.name, self.email, self.registration_number))
        if self.created_at is None:
            self.created_at = datetime.now()
