from src.core.config.loader import load_app_config
from src.core.config.models import AppConfig, EngineSettings, OracleConfig, RunnerConfig
from src.core.activity import ActivityLog, LogEntry, activity_log
from src.core.exceptions import (
    ConfigError,
    EngineError,
    NoActivePlanError,
    NoValidPlanError,
    OracleError,
    PlanningError,
    ProcessSpawnError,
    RetryLimitExceededError,
    RunnerError,
    RuntimeUnavailableError,
    SandboxError,
    StepExecutionError,
)

__all__ = [
    "load_app_config",
    "AppConfig",
    "EngineSettings",
    "OracleConfig",
    "RunnerConfig",
    "ActivityLog",
    "LogEntry",
    "activity_log",
    "ConfigError",
    "EngineError",
    "NoActivePlanError",
    "NoValidPlanError",
    "OracleError",
    "PlanningError",
    "ProcessSpawnError",
    "RetryLimitExceededError",
    "RunnerError",
    "RuntimeUnavailableError",
    "SandboxError",
    "StepExecutionError",
]
