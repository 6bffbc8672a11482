"""
Constants for the decomposer package.

Note: These constants serve as default fallback values.
Actual values are loaded from .decomposer/config.json at runtime via ConfigManager.
"""
import json
from pathlib import Path
from typing import Any, Optional

# =============================================================================
# Default Fallback Values
# These are used if config.json doesn't exist or doesn't specify a value.
# =============================================================================

# Type offered under a parent that has no rule configured at all
DEFAULT_FALLBACK_CHILD_TYPE = "Task"

# Default titles look like "New <Type>"
DEFAULT_TITLE_PREFIX = "New"

# Process-local node ids look like "temp-<epoch ms>-<suffix>"
TEMP_ID_PREFIX = "temp"
TEMP_ID_SUFFIX_LENGTH = 9

DEFAULT_CONFIG_DIR = ".decomposer"
DEFAULT_CONFIG_FILENAME = "config.json"

DEFAULT_LOG_LEVEL = "WARNING"

# Submission batch planning thresholds: (max total items, batch size,
# max concurrent batches, child concurrency). Anything larger uses the
# last row.
DEFAULT_BATCH_THRESHOLDS = [
    (20, None, 1, 1),
    (100, 5, 3, 3),
    (500, 10, 5, 5),
]
DEFAULT_LARGE_BATCH_CONFIG = (20, 8, 8)

# Text format
DEPTH_MARKER = "-"
TYPE_TITLE_SEPARATOR = ":"

# Parser messages (not configurable)
PARSE_MISSING_SEPARATOR = "Missing colon (:) separator between work item type and title"
PARSE_EMPTY_TYPE = "Work item type cannot be empty"
PARSE_EMPTY_TITLE = "Work item title cannot be empty"
PARSE_FIRST_LINE_DEPTH = (
    "First item cannot have depth indicators. Root items should start without dashes."
)


# =============================================================================
# Config Loader
# Load values from .decomposer/config.json at runtime.
# =============================================================================

_config_manager_instance: Optional['ConfigManager'] = None


class ConfigManager:
    """
    Manages loading configuration from a config.json file with fallback to defaults.

    Usage:
        # With default path (.decomposer/config.json)
        config = ConfigManager()
        fallback = config.get_str('fallback_child_type', DEFAULT_FALLBACK_CHILD_TYPE)

        # With custom path
        config = ConfigManager(config_path=Path("/custom/path/config.json"))
        types = config.get_dict('work_item_types', {})
    """

    def __init__(self, config_path: Optional[Path] = None, config_dir: Optional[Path] = None) -> None:
        """
        Initialize ConfigManager.

        Args:
            config_path: Direct path to config.json file. Takes precedence over config_dir.
            config_dir: Path to .decomposer/ directory. Config path will be config_dir/config.json.
        """
        self._config: Optional[dict] = None

        if config_path is not None:
            self._config_path = Path(config_path)
        elif config_dir is not None:
            self._config_path = Path(config_dir) / DEFAULT_CONFIG_FILENAME
        else:
            self._config_path = Path(DEFAULT_CONFIG_DIR) / DEFAULT_CONFIG_FILENAME

    def _load_config(self) -> dict:
        """Load config from config.json file."""
        if self._config is not None:
            return self._config

        if self._config_path.exists():
            try:
                with open(self._config_path, "r") as f:
                    loaded = json.load(f)
                self._config = loaded if isinstance(loaded, dict) else {}
            except (json.JSONDecodeError, IOError):
                self._config = {}
        else:
            self._config = {}

        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a config value with fallback to default.

        Args:
            key: Configuration key name.
            default: Default value if key not found.

        Returns:
            Config value or default.
        """
        config = self._load_config()
        return config.get(key, default)

    def get_str(self, key: str, default: str) -> str:
        """Get a string config value with fallback."""
        value = self.get(key, default)
        return str(value) if value is not None else default

    def get_dict(self, key: str, default: dict) -> dict:
        """Get a mapping config value with fallback."""
        value = self.get(key, default)
        return dict(value) if isinstance(value, dict) else default

    def reload(self) -> dict:
        """Force reload of config from disk."""
        self._config = None
        return self._load_config()

    @property
    def config_path(self) -> Path:
        """Get the config file path."""
        return self._config_path


def get_config_manager(reset: bool = False) -> ConfigManager:
    """
    Get the singleton ConfigManager instance with default path.

    Args:
        reset: If True, reset the singleton and create a new instance.

    Returns:
        ConfigManager singleton instance.
    """
    global _config_manager_instance
    if _config_manager_instance is None or reset:
        _config_manager_instance = ConfigManager()
    return _config_manager_instance


def set_config_manager(config: ConfigManager) -> None:
    """Install a specific ConfigManager as the singleton (used by the CLI --config option)."""
    global _config_manager_instance
    _config_manager_instance = config


def reset_config_manager() -> None:
    """Reset the singleton ConfigManager instance (useful for testing)."""
    global _config_manager_instance
    _config_manager_instance = None


# Convenience functions for common config access
def get_fallback_child_type() -> str:
    """Get the fallback child type from config or default."""
    return get_config_manager().get_str('fallback_child_type', DEFAULT_FALLBACK_CHILD_TYPE)


def get_title_prefix() -> str:
    """Get the default-title prefix from config or default."""
    return get_config_manager().get_str('default_title_prefix', DEFAULT_TITLE_PREFIX)


def get_log_level() -> str:
    """Get the log level name from config or default."""
    return get_config_manager().get_str('log_level', DEFAULT_LOG_LEVEL)


def get_type_configurations() -> dict:
    """Get the raw work item type map (type name -> rules) from config."""
    return get_config_manager().get_dict('work_item_types', {})
