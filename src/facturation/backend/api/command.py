# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import enum
import functools
import logging
from contextvars import ContextVar
from typing import Any, Callable, NamedTuple, Optional, ParamSpec, TypeVar

from sqlalchemy.orm import Session

from facturation.backend.db import session_factory

P = ParamSpec("P")
T = TypeVar("T")

logger = logging.getLogger(__name__)

# The session of the running command, private to each thread.
_current_session: ContextVar[Session] = ContextVar("current_session")


class CommandStatus(enum.Enum):
    """Authorized status of a command in its command response.

    COMPLETED: The command has terminated with success.
    REJECTED: the command input is invalid or conflicts with stored data.
    NOT_FOUND: a resource the command refers to does not exist.
    FAILED: The command has terminated with an unexpected error.
    """

    COMPLETED = enum.auto()
    REJECTED = enum.auto()
    NOT_FOUND = enum.auto()
    FAILED = enum.auto()


class CommandResponse(NamedTuple):
    """To be returned by any model's commands.

    Class attributes:
        status: the command status as defined above.
        reason: a message to explicit the status.
        body: an object returned by the command.
        errors: for a REJECTED command, the failing field names mapped to
            their message.
    """

    status: CommandStatus
    reason: Optional[str] = None
    body: Any = None
    errors: Optional[dict[str, str]] = None

    def __repr__(self) -> str:
        reason = f", {self.reason}" if self.reason else ""
        return f"CommandResponse({self.status.name}{reason})"


def rejected(reason: str, errors: dict[str, str]) -> CommandResponse:
    logger.info("%s: %s", reason, errors)
    return CommandResponse(CommandStatus.REJECTED, reason, errors=dict(errors))


def not_found(reason: str) -> CommandResponse:
    logger.info(reason)
    return CommandResponse(CommandStatus.NOT_FOUND, reason)


def failed(reason: str, exc: Exception) -> CommandResponse:
    # Database details are logged, never returned.
    logger.error("%s", reason, exc_info=exc)
    return CommandResponse(CommandStatus.FAILED, reason)


def current_session() -> Session:
    """The session of the running command.

    Raises:
        LookupError: outside of a command.
    """
    return _current_session.get()


# https://mypy.readthedocs.io/en/stable/generics.html#declaring-decorators
def command(func: Callable[P, T]) -> Callable[P, T]:
    """Runs a model's command in its own session, i.e. its unit of work."""

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        with session_factory() as session:
            token = _current_session.set(session)
            try:
                return func(*args, **kwargs)
            finally:
                _current_session.reset(token)

    return wrapper
