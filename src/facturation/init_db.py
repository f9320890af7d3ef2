# Copyright (c) 2022, Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

import logging

from facturation.backend import db
from facturation.settings import facturation_settings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def init() -> None:
    db_path = facturation_settings.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    db.configure_session(db_path, is_new=True)


def main() -> None:
    logger.info("Creating the database schema in %s", facturation_settings.db_path)
    init()
    logger.info("Database schema created")


if __name__ == "__main__":
    main()
