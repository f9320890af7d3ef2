# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import threading
from dataclasses import dataclass
from typing import Any

import pytest

from facturation.backend.api.api_v1.base import FacturationModel
from facturation.backend.api.command import command

pytestmark = pytest.mark.api


@dataclass
class SessionModel(FacturationModel):  # type: ignore[type-arg]
    crud_object: Any = None
    schema: Any = None

    @command
    def current(self):
        return self.session

    @command
    def hold(self, entered, resume):
        first = self.session
        entered.set()
        resume.wait(5)
        return first, self.session

    @command
    def nested(self):
        outer = self.session
        inner = self.current()
        return outer, inner, self.session


def test_session_outside_command():
    with pytest.raises(LookupError):
        SessionModel().session


def test_session_per_command():
    model = SessionModel()

    first = model.current()
    second = model.current()

    assert first is not second
    with pytest.raises(LookupError):
        model.session


def test_nested_command_restores_session():
    outer, inner, after = SessionModel().nested()

    assert inner is not outer
    assert after is outer


def test_concurrent_commands_keep_their_session():
    model = SessionModel()
    entered = threading.Event()
    resume = threading.Event()
    result = {}

    def run():
        result["sessions"] = model.hold(entered, resume)

    thread = threading.Thread(target=run)
    thread.start()
    assert entered.wait(5)

    # Runs while the other thread's command is still open.
    other = model.current()
    resume.set()
    thread.join(5)

    first, last = result["sessions"]
    assert first is last
    assert other is not first
