# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""Basic design patterns shared by the application utilities."""

from typing import Any

__all__ = ["Singleton"]


class Singleton(type):
    """A metaclass that creates at most one instance of each class using it.

    Subsequent instantiations return the first instance, whatever arguments
    are passed.
    """

    _instances: dict[type, Any] = {}

    def __call__(cls, *args: Any, **kwargs: Any) -> Any:
        if cls not in cls._instances:
            cls._instances[cls] = super().__call__(*args, **kwargs)
        return cls._instances[cls]
