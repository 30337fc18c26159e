from __future__ import annotations

import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class StepStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "inProgress"
    COMPLETED = "completed"
    FAILED = "failed"


class Step(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    description: str
    status: StepStatus = StepStatus.PENDING
    result: str | None = None


class Plan(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    title: str
    steps: list[Step] = Field(default_factory=list)
    cursor: int = 0

    @model_validator(mode="after")
    def _check_cursor(self) -> "Plan":
        if not 0 <= self.cursor <= len(self.steps):
            raise ValueError(f"cursor {self.cursor} out of range for {len(self.steps)} steps")
        return self

    @property
    def is_finished(self) -> bool:
        return self.cursor >= len(self.steps)

    def completed_steps(self) -> list[Step]:
        """Steps before the cursor whose status is completed, in plan order."""
        return [s for s in self.steps[: self.cursor] if s.status == StepStatus.COMPLETED]


class PlanDraft(BaseModel):
    """Oracle answer to a planning request."""

    title: str
    steps: list[str] = Field(default_factory=list)


class PlanRevision(BaseModel):
    """Oracle answer to a revision request: the continuation replacing the failed tail."""

    steps: list[str] = Field(default_factory=list)


class EngineStatus(BaseModel):
    is_planning: bool = False
    is_executing: bool = False
    current_output: str = ""
