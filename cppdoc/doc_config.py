import json
import os
from pathlib import Path
from typing import Any, Dict, List

from .errors import ConfigurationError

DEFAULT_CONFIG_FILENAME = "cppdoc.json"

_TRUE_VALUES = ('true', 'yes', 'on', '1')
_FALSE_VALUES = ('false', 'no', 'off', '0')

_MISSING = object()


def split_list(value: str) -> List[str]:
    """Split a comma/newline separated config value, trimming and dropping empty items."""
    items = value.replace('\n', ',').split(',')
    return [item.strip() for item in items if item.strip()]


def current_platform() -> str:
    return 'windows' if os.name == 'nt' else 'unix'


class DocConfig:
    """
    Dotted-key configuration store.

    JSON documents are flattened so that {"cppdoc": {"output": "doc"}} is read
    back with get_string('cppdoc.output'). Later loads and defines override
    earlier values.
    """

    def __init__(self, values: Dict[str, Any] = None):
        self._config: Dict[str, Any] = {}
        if values:
            self._merge(values, '')

    def load_file(self, config_path):
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Cannot load configuration file {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {config_path} must contain a JSON object")

        self._merge(data, '')

    def _merge(self, data: Dict[str, Any], prefix: str):
        for key, value in data.items():
            full_key = f"{prefix}{key}"
            if isinstance(value, dict):
                self._merge(value, full_key + '.')
            else:
                self._config[full_key] = value

    def define(self, definition: str):
        """Apply a 'name=value' override. A bare name sets an empty value."""
        name, _, value = definition.partition('=')
        name = name.strip()
        if not name:
            raise ConfigurationError(f"Invalid property definition: '{definition}'")
        self.set(name, value)

    def set(self, key: str, value: Any):
        self._config[key] = value

    def get_string(self, key: str, default=_MISSING) -> str:
        if key not in self._config:
            if default is _MISSING:
                raise ConfigurationError(f"Missing configuration property '{key}'")
            return default

        value = self._config[key]
        if isinstance(value, bool):
            return 'true' if value else 'false'
        if isinstance(value, list):
            return ','.join(str(v) for v in value)
        return str(value)

    def get_bool(self, key: str, default=_MISSING) -> bool:
        if key not in self._config:
            if default is _MISSING:
                raise ConfigurationError(f"Missing configuration property '{key}'")
            return default

        value = self._config[key]
        if isinstance(value, bool):
            return value

        text = str(value).strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        raise ConfigurationError(f"Property '{key}' is not a boolean: '{value}'")

    def get_list(self, key: str, default=_MISSING) -> List[str]:
        if key not in self._config:
            if default is _MISSING:
                raise ConfigurationError(f"Missing configuration property '{key}'")
            return list(default)

        value = self._config[key]
        if isinstance(value, list):
            return [str(v).strip() for v in value if str(v).strip()]
        return split_list(str(value))

    def get_platform_string(self, prefix: str, name: str, default: str = '') -> str:
        """Look up '<prefix>.<platform>.<name>', falling back to '<prefix>.<name>'."""
        fallback = self.get_string(f"{prefix}.{name}", default)
        return self.get_string(f"{prefix}.{current_platform()}.{name}", fallback)

    def get_platform_bool(self, prefix: str, name: str, default: bool = False) -> bool:
        fallback = self.get_bool(f"{prefix}.{name}", default)
        return self.get_bool(f"{prefix}.{current_platform()}.{name}", fallback)
