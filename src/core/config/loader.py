import json
import logging
from pathlib import Path

from pydantic import ValidationError

from src.core.config.env import load_env_from_path
from src.core.config.models import AppConfig
from src.core.exceptions import ConfigError

log = logging.getLogger("config")

DEFAULT_CONFIG_PATH = "config/engine.json"


def load_app_config(config_path: str | Path | None = None, project_root: Path | None = None) -> AppConfig:
    """Load and validate the engine config.

    With no explicit path, a missing default file yields the built-in defaults;
    an explicit path that does not exist is an error.
    """
    root = project_root or Path.cwd()
    path = Path(config_path if config_path is not None else DEFAULT_CONFIG_PATH)
    if not path.is_absolute():
        path = root / path
    if not path.exists():
        if config_path is not None:
            raise ConfigError(f"Config file not found: {path}")
        log.info("no config at %s, using defaults", path)
        return AppConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    try:
        config = AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config schema in {path}: {e}") from e
    load_env_from_path(config.env_file_path, root)
    log.info("loaded config from %s", path)
    return config
