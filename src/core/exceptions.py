class ConfigError(Exception):
    """Raised when config loading or validation fails."""


class EngineError(Exception):
    """Base class for plan engine failures."""


class OracleError(EngineError):
    """Raised when the decision oracle is unreachable or returns an unparsable structure."""


class PlanningError(EngineError):
    """Raised when a plan cannot be created for an objective."""


class StepExecutionError(EngineError):
    """Raised when an oracle call fails while a plan is running."""


class RetryLimitExceededError(StepExecutionError):
    """Raised when a step asks for more retries than engine.max_step_retries allows."""


class NoActivePlanError(EngineError):
    """Raised when an operation needs a plan and none is stored."""


class NoValidPlanError(NoActivePlanError):
    """Raised when the stored plan has nothing left to run."""


class RunnerError(Exception):
    """Base class for sandbox environment failures (never for a failing program)."""


class RuntimeUnavailableError(RunnerError):
    """Raised when the interpreter for a language is not installed."""

    def __init__(self, language: str, path: str):
        super().__init__(f"Interpreter for {language} not available at {path}")
        self.language = language
        self.path = path


class ProcessSpawnError(RunnerError):
    """Raised when the OS refuses to start the child process."""


class SandboxError(RunnerError):
    """Raised when the working directory or source file cannot be created."""
