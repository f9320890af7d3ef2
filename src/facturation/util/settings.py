r"""Basic tools to handle application settings.

It provides:
    A Settings base class to manage persistent application settings as basic
        key/value pairs stored in a JSON file.
    A SettingsError exception to handle settings persistency errors.
    A Setting data descriptor to access the key/value pairs as class
        attributes, with an optional converter applied on read.
    A get_app_dirs convenient function to retrieve (and create) the user
        application directories: '%LOCALAPPDATA%\<appName>' on Windows,
        '$XDG_DATA_HOME/<appName>' or '~/.local/share/<appName>' elsewhere.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Callable, NamedTuple, Optional, cast, overload

from facturation.util.basicpatterns import Singleton

__all__ = ["Settings", "SettingsError", "Setting", "AppDirs", "get_app_dirs"]

logger = logging.getLogger(__name__)


class PathEncoder(json.JSONEncoder):
    """A JSONEncoder to encode pathlib.Path objects in a JSON file.

    The Path object is encoded into a string using its as_posix() method or into
    an empty string if the path name is not defined.
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, Path):
            return obj.as_posix() if obj.name else ""
        # Let the base class default method raise the TypeError
        return json.JSONEncoder.default(self, obj)


class SettingsError(Exception):
    """Exception raised on settings saving error."""


class Settings(metaclass=Singleton):
    """A base class to handle persistent application settings.

    Settings is a singleton: only one instance of settings may exist for an
    application. Key/value pairs are read from / saved to the JSON file passed
    when creating the Settings instance.

    Examples:
        app_settings = Settings(Path('path/to/mySettingsFile'))
        app_settings.set_value('mySetting', (100, 200))
        app_settings.value('mySetting', default_value=(0, 0))   # returns 100, 200
        app_settings.contains('mySetting')   # returns True
        app_settings.all_keys()   # returns ['mySetting']
        app_settings.remove('mySetting')
        app_settings.clear()

    Attributes:
        _settings_file: the path to the persistent settings file.
        _keys: the settings key/value pairs container.
    """

    _keys: dict[str, Any]
    _settings_file: Path

    def __init__(self, settings_file: Path) -> None:
        self._settings_file = settings_file.with_suffix(".json")
        self._keys = self._load()

    @property
    def settings_file(self) -> Path:
        return self._settings_file

    def _load(self) -> dict[str, Any]:
        """Initialize the settings from its persistent JSON file.

        Returns:
            The key/value pairs read from the JSON file or an empty dict on
            loading errors.
        """
        try:
            with self._settings_file.open() as fh:
                keys = cast(dict[str, Any], json.load(fh))
        except (FileNotFoundError, json.JSONDecodeError) as exc:
            logger.debug("Cannot load the settings file: %s", exc)
            return {}
        if not isinstance(keys, dict):
            logger.warning(
                "Settings file %s does not contain a JSON object: ignored",
                self._settings_file.as_posix(),
            )
            return {}
        return keys

    def save(self) -> None:
        """Save the settings key/value pairs in the JSON file.

        Raises:
            SettingsError: on OS or JSON encoding errors.
        """
        try:
            with self._settings_file.open(mode="w") as fh:
                json.dump(self._keys, fh, indent=4, cls=PathEncoder)
        except (OSError, TypeError) as exc:
            raise SettingsError(exc) from exc

    def value(self, key: str, default_value: Any = None) -> Any:
        """Returns the value for setting key, or default_value if not set."""
        return self._keys.get(key, default_value)

    def set_value(self, key: str, value: Any) -> None:
        self._keys[key] = value

    def contains(self, key: str) -> bool:
        return key in self._keys

    def remove(self, key: str) -> None:
        """Removes the setting key. No error if there is no such key."""
        self._keys.pop(key, None)

    def all_keys(self) -> list[str]:
        return list(self._keys)

    def clear(self) -> None:
        self._keys = {}


class Setting:
    """A data descriptor to simplify a key/value access in a Settings instance.

    The name of a Setting descriptor corresponds to a key in the Settings
    instance container / persistent file. On creation, an optional default
    value can be set for the associated key, and an optional converter applied
    to the raw JSON value when read (e.g. Path for a file location).

    Examples:
        class AppSettings(Settings):
            db_path = Setting(default_value="app.db", converter=Path)

        app_settings = AppSettings(Path('path/to/mySettingsFile'))
        app_settings.db_path   # returns Path('app.db')
    """

    _key: str
    default_value: Optional[Any]

    def __init__(
        self,
        default_value: Any = None,
        converter: Optional[Callable[[Any], Any]] = None,
    ) -> None:
        self.default_value = default_value
        self.converter = converter

    def __set_name__(self, owner: type[Settings], name: str) -> None:
        self._key = name

    @overload
    def __get__(self, instance: None, owner: None) -> Any:
        ...

    @overload
    def __get__(self, instance: Settings, owner: type[Settings]) -> Any:
        ...

    def __get__(
        self, instance: Optional[Settings], owner: Optional[type[Settings]]
    ) -> Any:
        if instance is None:
            return self
        raw = instance.value(self._key, self.default_value)
        if raw is None or self.converter is None:
            return raw
        return self.converter(raw)

    def __set__(self, instance: Settings, value: Any) -> None:
        instance.set_value(self._key, value)


class AppDirs(NamedTuple):
    """Paths of the user directories for the application."""

    user_data_dir: Path
    user_config_dir: Path
    user_cache_dir: Path
    user_log_dir: Path


def get_app_dirs(app_name: str, roaming: bool = False) -> AppDirs:
    r"""Returns the user directories for the application, creating them if required.

    Windows (roaming): %APPDATA%\<appName>
    Windows (not roaming): %LOCALAPPDATA%\<appName>
    Other platforms: $XDG_DATA_HOME/<appName>, or ~/.local/share/<appName>

    Fallback to the user home directory if the environment variable is not found.

    Args:
        app_name: the application name.
        roaming: controls if the folder should be roaming or not on Windows.

    Returns:
        An AppDirs NamedTuple containing the user app directories paths.
    """
    folder: Optional[str]
    if sys.platform == "win32":
        folder = os.environ.get("APPDATA" if roaming else "LOCALAPPDATA")
        base = Path(folder) if folder else Path.home()
    else:
        folder = os.environ.get("XDG_DATA_HOME")
        base = Path(folder) if folder else Path.home() / ".local" / "share"

    user_data_dir = base / app_name
    dirs = AppDirs(
        user_data_dir,
        user_data_dir / "Config",
        user_data_dir / "Cache",
        user_data_dir / "Logs",
    )
    for dir_ in dirs:
        dir_.mkdir(parents=True, exist_ok=True)

    return dirs
