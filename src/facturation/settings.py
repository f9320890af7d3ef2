# Copyright (c) 2023 Eric Lemoine
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""The FacturationSettings model.

The FacturationSettings model defines the application settings and make them
accessible throughout the application by exposing a facturation_settings
instance.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from facturation import DEV_MODE, TEST_MODE
from facturation.util.settings import Setting, Settings, get_app_dirs

if TYPE_CHECKING:
    from facturation.util.settings import AppDirs

__all__ = ["facturation_settings", "FacturationSettings"]

logger = logging.getLogger(__name__)


class FacturationSettings(Settings):
    """The FacturationSettings model definition.

    Class attributes:
        db_file: Path to the SQLite database file. A relative path is resolved
            against the user data directory (see db_path).
        log_level: The global application log level name.
        page_size: The default number of records returned by paged listings.

    Attributes:
        app_dirs: An AppDirs NamedTuple containing the user app directories paths.
    """

    app_dirs: "AppDirs"

    DEFAULT_DB_NAME = "facturation.db"
    DEFAULT_LOG_LEVEL = "INFO"
    DEFAULT_PAGE_SIZE = 100

    db_file: Setting = Setting(default_value=DEFAULT_DB_NAME, converter=Path)
    log_level: Setting = Setting(default_value=DEFAULT_LOG_LEVEL)
    page_size: Setting = Setting(default_value=DEFAULT_PAGE_SIZE, converter=int)

    def __init__(self, app_name: str) -> None:
        # Retrieve or create the user directories for the application.
        app_dirs = get_app_dirs(app_name)

        super().__init__(app_dirs.user_config_dir / "settings")

        self.app_dirs = app_dirs

    @property
    def db_path(self) -> Path:
        path: Path = self.db_file
        if path.is_absolute():
            return path
        return self.app_dirs.user_data_dir / path

    def __repr__(self) -> str:
        return (
            f"FacturationSettings({self.db_path.as_posix()}, {self.log_level}, "
            f"{self.page_size})"
        )

    def reset_to_defaults(self) -> None:
        """Reset all settings to their default value."""
        for setting in self.all_keys():
            descriptor = getattr(FacturationSettings, setting, None)
            if isinstance(descriptor, Setting):
                setattr(self, setting, descriptor.default_value)


if TEST_MODE:
    facturation_settings = FacturationSettings("facturation_test")
elif DEV_MODE:
    facturation_settings = FacturationSettings("facturation_dev")
else:
    facturation_settings = FacturationSettings("facturation")
