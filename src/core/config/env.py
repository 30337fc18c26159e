import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from src.core.exceptions import ConfigError

log = logging.getLogger("config")


def load_env_from_path(env_file_path: str | None, project_root: Path | None = None) -> bool:
    """Load a dotenv file into os.environ without overriding what is already set.

    Relative paths resolve against `project_root` (default: cwd). Returns whether a file was loaded.
    """
    if not env_file_path:
        return False
    path = Path(env_file_path)
    if not path.is_absolute():
        path = (project_root or Path.cwd()) / path
    if not path.is_file():
        log.debug("env file %s not found, skipping", path)
        return False
    load_dotenv(path, override=False)
    return True


def require_env(name: str, env: dict[str, str] | None = None) -> str:
    value = (env if env is not None else os.environ).get(name)
    if not value:
        raise ConfigError(f"{name} not set (export it or put it in the env file named by env_file_path)")
    return value
