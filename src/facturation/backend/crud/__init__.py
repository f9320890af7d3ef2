# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from .base import (
    ConflictError,
    CreateSchemaType,
    CRUDBase,
    CrudError,
    CrudIntegrityError,
    DuplicateEmail,
    DuplicateRegistrationNumber,
    UpdateSchemaType,
)
from .client import CRUDClient, client
from .invoice import CRUDInvoice, invoice
