from enum import Enum

from pydantic import BaseModel, ConfigDict


class Language(str, Enum):
    SWIFT = "swift"
    SHELL = "shell"
    PYTHON = "python"
    JAVASCRIPT = "javascript"
    RUBY = "ruby"


class ExecutionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    succeeded: bool
    stdout: str = ""
    stderr: str = ""
    exit_code: int
    timed_out: bool = False
