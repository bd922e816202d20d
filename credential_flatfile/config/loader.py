# credential_flatfile/config/loader.py

import logging
import os
import yaml
from dotenv import load_dotenv
from pathlib import Path
from typing import Dict, Any, Optional

DEFAULT_LOCK_TIMEOUT = 10.0
LOG_FORMATS = ("plain", "json")
TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off", "")


class ConfigLoader:
    def __init__(self, config_path: Optional[str] = None):
        load_dotenv()  # Load .env if present
        config_path = config_path or os.getenv("FLATFILE_CONFIG")
        self.config_path = Path(config_path).expanduser() if config_path else None

    def load(self) -> Dict[str, Any]:
        config = {}
        if self.config_path and self.config_path.exists():
            with self.config_path.open('r', encoding='utf-8') as f:
                try:
                    config = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise ValueError(f"Configuration file {self.config_path} is not valid YAML: {e}") from e
            if not isinstance(config, dict):
                raise ValueError(f"Configuration file {self.config_path} must contain a mapping.")

        # Override with env vars and validate
        store = _section(config, 'store')
        store['path'] = os.getenv('FLATFILE_STORE_PATH', store.get('path')) or None
        if store['path']:
            store['path'] = str(Path(store['path']).expanduser())
        store['strict'] = _as_bool(os.getenv('FLATFILE_STRICT', store.get('strict', False)), 'store.strict')
        config['store'] = store

        lock = _section(config, 'lock')
        timeout = os.getenv('FLATFILE_LOCK_TIMEOUT', lock.get('timeout', DEFAULT_LOCK_TIMEOUT))
        try:
            timeout = float(timeout)
        except (TypeError, ValueError):
            raise ValueError(f"lock.timeout must be a number of seconds, got {timeout!r}.")
        if timeout <= 0:
            raise ValueError(f"lock.timeout must be positive, got {timeout!r}.")
        lock['timeout'] = timeout
        config['lock'] = lock

        log = _section(config, 'logging')
        level = str(os.getenv('FLATFILE_LOG_LEVEL', log.get('level', 'WARNING'))).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"logging.level {level!r} is not a known log level.")
        log_format = str(os.getenv('FLATFILE_LOG_FORMAT', log.get('format', 'plain'))).lower()
        if log_format not in LOG_FORMATS:
            raise ValueError(f"logging.format must be one of {', '.join(LOG_FORMATS)}, got {log_format!r}.")
        log['level'] = level
        log['format'] = log_format
        config['logging'] = log
        return config


def _as_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}.")


def _section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = config.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Configuration section '{name}' must be a mapping.")
    return section
