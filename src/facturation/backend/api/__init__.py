# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from .api_v1.client import client
from .api_v1.invoice import invoice
from .command import CommandResponse, CommandStatus
