"""Manages configuration for pyproptype.

Settings are aggregated from default values, TOML files and environment
variables. They only affect the host-side tooling (`check_record` and the
CLI); checkers themselves are configured purely by their construction
arguments.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import tomllib  # Available in Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for Python versions < 3.11

import tomli_w

logger = logging.getLogger(__name__)

# The default path for the user-specific global configuration file.
USER_CONFIG_PATH = Path.home() / ".config" / "proptype" / "config.toml"

# The project-level configuration file looked up in the working directory.
PROJECT_CONFIG_NAME = "proptype.toml"

MODES = ("warn", "silent", "block")


class Config:
    """Handles the configuration for pyproptype.

    Configuration is loaded with the following precedence:
    1.  Default values (lowest precedence).
    2.  Project-specific `proptype.toml` file.
    3.  User-level `~/.config/proptype/config.toml` file.
    4.  A custom configuration file specified at runtime.
    5.  Environment variables (highest precedence).

    Attributes:
        DEFAULT_CONFIG (Dict[str, Any]): The default configuration values.
    """

    DEFAULT_CONFIG = {
        "mode": "warn",  # Can be "warn", "silent", or "block".
        "colors": True,
        "verbose": False,
        "default_location": "prop",
        "anonymous_name": "<<anonymous>>",
    }

    ENV_MAPPING = {
        "PROPTYPE_MODE": "mode",
        "PROPTYPE_COLORS": "colors",
        "PROPTYPE_VERBOSE": "verbose",
        "PROPTYPE_DEFAULT_LOCATION": "default_location",
        "PROPTYPE_ANONYMOUS_NAME": "anonymous_name",
    }

    def __init__(self, config_path: Optional[Path] = None, user_config_path: Optional[Path] = None) -> None:
        """Initializes the configuration manager.

        Args:
            config_path (Optional[Path]): A specific configuration file to
                load instead of the default locations.
            user_config_path (Optional[Path]): Overrides the user-level file
                location, mostly useful in tests.
        """
        self.user_config_path = Path(user_config_path) if user_config_path else USER_CONFIG_PATH
        self.config: Dict[str, Any] = dict(self.DEFAULT_CONFIG)
        self._load_config(config_path)

    def _load_config(self, config_path: Optional[Path] = None) -> None:
        if config_path:
            self._load_file_config(Path(config_path))
        else:
            self._load_default_configs()

        self._load_env_config()

    def _load_default_configs(self) -> None:
        """Loads configs from standard locations if they exist."""
        project_config = Path.cwd() / PROJECT_CONFIG_NAME
        if project_config.exists():
            self._load_file_config(project_config)

        if self.user_config_path.exists():
            self._load_file_config(self.user_config_path)

    def _load_file_config(self, config_path: Path) -> None:
        """Loads and merges configuration from a TOML file.

        A file that cannot be read or parsed is skipped with a warning.
        """
        try:
            with open(config_path, "rb") as f:
                self.config.update(tomllib.load(f))
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning(f"Could not load config from {config_path}: {e}")

    def _load_env_config(self) -> None:
        for env_var, config_key in self.ENV_MAPPING.items():
            value = os.getenv(env_var)
            if value is not None:
                self._set_from_string(config_key, value)

    def _set_from_string(self, key: str, value: str) -> None:
        """Casts a string value (e.g. from the environment) and stores it."""
        if key in ("colors", "verbose"):
            self.config[key] = value.lower() in ("true", "1", "yes", "on")
        else:
            self.config[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.config[key] = value

    @property
    def mode(self) -> str:
        """The reporting mode, falling back to "warn" for unknown values."""
        mode = str(self.get("mode", "warn")).lower()
        if mode not in MODES:
            logger.warning(f"Unknown mode '{mode}', falling back to 'warn'.")
            return "warn"
        return mode

    def should_block(self) -> bool:
        return self.mode == "block"

    def is_silent(self) -> bool:
        return self.mode == "silent"

    def _get_user_config(self) -> Dict[str, Any]:
        """Returns the contents of the user config file, or an empty dict."""
        if not self.user_config_path.exists():
            return {}
        try:
            with open(self.user_config_path, "rb") as f:
                return tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError):
            return {}

    def save_user_config(self) -> None:
        """Persists settings that differ from the defaults to the user file.

        Raises:
            IOError: If the configuration file cannot be written.
        """
        user_config = self._get_user_config()

        for key, value in self.config.items():
            if key not in self.DEFAULT_CONFIG or value != self.DEFAULT_CONFIG[key]:
                user_config[key] = value

        try:
            self.user_config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.user_config_path, "wb") as f:
                tomli_w.dump(user_config, f)
        except OSError as e:
            raise IOError(f"Failed to save configuration to {self.user_config_path}: {e}") from e

    def reset_user_config(self) -> bool:
        """Deletes the user config file. Returns False if there was none."""
        if not self.user_config_path.exists():
            return False
        self.user_config_path.unlink()
        self.config = dict(self.DEFAULT_CONFIG)
        self._load_env_config()
        return True

    def __str__(self) -> str:
        return f"Config({self.config})"
