from __future__ import annotations

from pydantic import BaseModel, Field

from src.core.contracts.runner import Language


class OracleConfig(BaseModel):
    model: str = "gpt-4o-mini"
    temperature: float = 0.0
    max_retries: int = 2  # transport retries inside the oracle client, never in the engine
    request_timeout: float | None = 120.0
    num_questions: int = 3  # how many suggestions advise() asks for


class RunnerConfig(BaseModel):
    default_timeout_seconds: int = Field(default=30, gt=0)
    temp_root: str | None = None  # None: system temp dir
    max_output_bytes: int | None = Field(default=None, gt=0)  # None: capture everything
    interpreters: dict[Language, str] = Field(default_factory=dict)  # overrides of the built-in table


class EngineSettings(BaseModel):
    max_step_retries: int | None = Field(default=None, ge=0)  # None: retry directive is unbounded


class AppConfig(BaseModel):
    env_file_path: str | None = None
    oracle: OracleConfig = Field(default_factory=OracleConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)
    engine: EngineSettings = Field(default_factory=EngineSettings)
