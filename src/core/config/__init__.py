from src.core.config.loader import DEFAULT_CONFIG_PATH, load_app_config
from src.core.config.models import AppConfig, EngineSettings, OracleConfig, RunnerConfig
from src.core.config.env import load_env_from_path, require_env

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "load_app_config",
    "AppConfig",
    "EngineSettings",
    "OracleConfig",
    "RunnerConfig",
    "load_env_from_path",
    "require_env",
]
