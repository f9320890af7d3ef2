# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from .base_model import BaseModel, ModelType
from .vat_rate import VatRate, label_of, parse_vat_rate, percentage_of
from .validation import ValidationError
from .client import Client
from .invoice_line import InvoiceLine
from .invoice import Invoice

__all__ = [
    "ModelType",
    "BaseModel",
    "VatRate",
    "percentage_of",
    "label_of",
    "parse_vat_rate",
    "ValidationError",
    "Client",
    "InvoiceLine",
    "Invoice",
]
