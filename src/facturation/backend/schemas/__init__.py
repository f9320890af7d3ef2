# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from .base import BaseSchema
from .client import Client, ClientCreate, ClientUpdate
from .invoice import Invoice, InvoiceCreate, InvoiceUpdate
from .line import InvoiceLine, LineCreate
