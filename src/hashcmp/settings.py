import os
import tomllib
from pathlib import Path

from .errors import ArgumentError

# Settings key constants
SETTING_ALGORITHM = 'compare.algorithm'
SETTING_HIDDEN = 'compare.hidden'
SETTING_IGNORE = 'compare.ignore'
SETTING_TYPES = 'compare.types'
SETTING_REPORT_FORMAT = 'report.format'
SETTING_OUTPUT_FOLDER = 'report.output_folder'
SETTING_LOG_PATH = 'logging.path'
SETTING_LOG_LEVEL = 'logging.level'

CONFIG_ENVIRONMENT_VARIABLE = 'HASHCMP_CONFIG'


def default_settings_path() -> Path:
    return Path.home() / '.config' / 'hashcmp' / 'settings.toml'


class Settings:
    """Settings manager for comparison defaults.

    Provides a read-only key-value interface to settings loaded from a TOML file. This class is
    agnostic to the schema of settings; consumers interpret and validate the values they read.

    Example:
        settings = Settings.locate(None)
        algorithm = settings.get(SETTING_ALGORITHM, 'both')
        ignore = settings.get(SETTING_IGNORE, [])
    """

    def __init__(self, settings_file: Path | None = None):
        """Initialize settings from a TOML file.

        If ``settings_file`` is None or does not exist, an empty settings dictionary is used,
        and all get() calls will return their defaults.

        Args:
            settings_file: Path to the TOML file

        Raises:
            ArgumentError: The file exists but cannot be read or is not valid UTF-8 TOML
        """
        self._settings_file = settings_file
        self._settings = {}

        if settings_file is not None and settings_file.exists():
            try:
                with open(settings_file, 'rb') as f:
                    self._settings = tomllib.load(f)
            except OSError as e:
                raise ArgumentError(f"cannot read settings file {settings_file}: {e.strerror or e}") from e
            except (UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
                raise ArgumentError(f"invalid settings file {settings_file}: {e}") from e

    @classmethod
    def locate(cls, explicit_path: str | os.PathLike | None) -> "Settings":
        """Load settings from the first configured location.

        Order: ``explicit_path``, then the HASHCMP_CONFIG environment variable, then
        ~/.config/hashcmp/settings.toml. An explicitly named file must exist.

        Raises:
            ArgumentError: An explicitly named settings file does not exist
        """
        if explicit_path is None:
            explicit_path = os.environ.get(CONFIG_ENVIRONMENT_VARIABLE) or None

        if explicit_path is not None:
            path = Path(explicit_path)
            if not path.is_file():
                raise ArgumentError(f"settings file not found: {path}")
            return cls(path)

        return cls(default_settings_path())

    @property
    def path(self) -> Path | None:
        return self._settings_file

    def get(self, key: str, default=None):
        """Get a setting value by key with optional default.

        Supports both simple keys and dot notation for nested keys (e.g. 'compare.algorithm'
        accesses settings['compare']['algorithm']). Returns the default value if the key path
        does not exist or if any intermediate value is not a dictionary.

        Examples:
            >>> settings.get(SETTING_IGNORE, [])
            ['*.tmp', '.DS_Store']
            >>> settings.get('nonexistent.key', 'fallback')
            'fallback'
        """
        keys = key.split('.')
        value = self._settings

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_bool(self, key: str, default: bool) -> bool:
        value = self.get(key, default)
        if not isinstance(value, bool):
            raise ArgumentError(f"setting {key} must be a boolean, got {value!r}")
        return value

    def get_string_list(self, key: str) -> list[str]:
        value = self.get(key, [])
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise ArgumentError(f"setting {key} must be a list of strings, got {value!r}")
        return value
