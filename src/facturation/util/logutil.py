# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""Process-safe logging configuration.

Log records emitted by any process are pushed in a multiprocessing queue and
handled by a dedicated log server process, which writes them in a log file and,
optionally, on the console.
"""

import logging
import logging.handlers
import multiprocessing as mp
import sys
import time
import traceback
from pathlib import Path
from queue import Empty
from typing import Optional, Union

from facturation.util.basicpatterns import Singleton

__all__ = ["LogConfig", "configure_root_logger", "as_log_level"]

CONSOLE_FORMAT = "%(processName)-15s%(levelname)s: %(message)s"
FILE_FORMAT = (
    "%(asctime)s.%(msecs)03d %(levelname)-8s %(processName)-15s "
    "%(name)s: %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def as_log_level(level: Union[int, str]) -> int:
    """Converts a level name such as 'INFO' (as stored in settings) to its value."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


class _LogServer(mp.Process):
    def __init__(
        self,
        log_queue: mp.Queue,  # type: ignore
        log_file: Path,
        log_level: int = logging.INFO,
        log_on_console: bool = True,
    ):
        super().__init__()

        self.name = "LogServer"
        self.log_queue = log_queue
        self.log_file = log_file
        self.log_level = log_level
        self.log_on_console = log_on_console

    def configure(self) -> None:
        console_log_level = logging.WARNING

        root = logging.getLogger()
        try:
            file_handler = logging.FileHandler(self.log_file, mode="a")
        except OSError:
            # No log file: everything goes to the console.
            console_log_level = self.log_level
        else:
            file_handler.setLevel(self.log_level)
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT, DATE_FORMAT))
            root.addHandler(file_handler)
        finally:
            if self.log_on_console:
                console_handler = logging.StreamHandler()
                console_handler.set_name("console")
                console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
                console_handler.setLevel(console_log_level)
                root.addHandler(console_handler)

            root.setLevel(logging.DEBUG)

    def run(self) -> None:
        self.configure()
        while True:
            try:
                record = self.log_queue.get(block=True, timeout=0.01)
            except Empty:
                continue
            if record is None:
                # Sentinel sent by stop_logging().
                break
            try:
                logging.getLogger(record.name).handle(record)
            except Exception:  # pylint: disable=broad-except
                print("LogServer cannot handle a record:", file=sys.stderr)
                traceback.print_exc(file=sys.stderr)


class LogConfig(metaclass=Singleton):
    """Starts and stops the log server of the application.

    Args:
        log_file: path of the log file.
        log_level: a level value or name ('DEBUG', 'INFO',...).
        log_on_console: also print WARNING and above records on the console.
    """

    def __init__(
        self,
        log_file: Optional[Path] = None,
        log_level: Union[int, str] = logging.INFO,
        log_on_console: bool = True,
    ):
        self.log_file = log_file or Path("facturation.log")
        self.log_level = as_log_level(log_level)
        self.log_on_console = log_on_console

        logging.captureWarnings(True)

        self.log_queue = mp.Queue(maxsize=-1)  # type: ignore
        self.log_server = _LogServer(
            self.log_queue, self.log_file, self.log_level, self.log_on_console
        )

    def init_logging(self) -> None:
        self.log_server.start()
        configure_root_logger(self.log_queue, self.log_level)

    def stop_logging(self) -> None:
        # Let the server drain the records queued so far.
        time.sleep(0.2)
        self.log_queue.put_nowait(None)
        self.log_server.join()


def configure_root_logger(
    log_queue: mp.Queue, log_level: Union[int, str]  # type: ignore
) -> None:
    handler = logging.handlers.QueueHandler(log_queue)
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(as_log_level(log_level))
