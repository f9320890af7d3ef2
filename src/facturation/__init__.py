# Copyright (c) 2023 Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""Facturation manages clients and their invoices.

Requires Python >= 3.10

Usage:
    ''python -m facturation''
"""

__all__ = ["DEV_MODE", "TEST_MODE", "run_main"]

import logging
import os
import sys
from typing import Final

from facturation.util.logutil import LogConfig

logger = logging.getLogger(__name__)

log_config: LogConfig

DEV_MODE: Final[bool] = os.environ.get("FACTURATION_DEV", "0") != "0"
TEST_MODE: Final[bool] = os.environ.get("FACTURATION_TEST", "0") != "0"


def except_hook(exc_type, exc_value, _exc_traceback):  # type: ignore[no-untyped-def]
    from facturation import __about__  # pylint: disable=import-outside-toplevel

    error_msg = f"{exc_type.__name__}: {exc_value}"
    logger.fatal("%s", error_msg, exc_info=False)
    sys.stderr.write(f"\nfacturation - {str(error_msg)}\n\n")
    logger.info("%(app_name)s is closing...", {"app_name": __about__.__title__})
    log_config.stop_logging()
    sys.exit(1)


def run_main() -> None:
    """Program entry point."""

    # Handles exceptions not trapped earlier.
    sys.excepthook = except_hook

    # Load settings and initialize the facturation_settings singleton instance.
    from facturation.settings import (  # pylint: disable=import-outside-toplevel
        facturation_settings,
    )

    # Initialize and start the log server.
    global log_config  # pylint: disable=global-statement
    log_config = LogConfig(
        facturation_settings.app_dirs.user_log_dir / "facturation.log",
        facturation_settings.log_level,
        log_on_console=True,
    )
    log_config.init_logging()

    from facturation import __about__  # pylint: disable=import-outside-toplevel
    from facturation.backend import api, db  # pylint: disable=import-outside-toplevel

    app_name = __about__.__title__
    logger.info("%(app_name)s is starting...", {"app_name": app_name})
    if DEV_MODE:
        logger.info("Running in Development mode")
    else:
        logger.info("Running in Production mode")

    db_path = facturation_settings.db_path
    is_new = not db_path.exists()
    db.configure_session(db_path, is_new=is_new)
    logger.info(
        "Using %(state)s database %(path)s",
        {"state": "new" if is_new else "existing", "path": db_path.as_posix()},
    )

    ret = 0
    for label, response in (
        ("clients", api.client.get_all()),
        ("invoices", api.invoice.get_all()),
    ):
        if response.status is api.CommandStatus.COMPLETED:
            logger.info("%d %s found", len(response.body), label)
        else:
            logger.warning("Cannot list %s: %s", label, response.reason)
            ret = 1

    logger.info("%(app_name)s is closing...", {"app_name": app_name})
    # Stop the log server.
    log_config.stop_logging()

    sys.exit(ret)


if __name__ == "__main__":
    run_main()
