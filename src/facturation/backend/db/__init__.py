# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from .session import configure_session, create_engine, create_tables, session_factory

__all__ = [
    "session_factory",
    "configure_session",
    "create_engine",
    "create_tables",
]
