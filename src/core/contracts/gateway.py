from pydantic import BaseModel, Field

from src.core.contracts.plan import Plan
from src.core.contracts.runner import Language


class PlanRequest(BaseModel):
    objective: str = Field(min_length=1)


class RunResponse(BaseModel):
    final_output: str
    plan: Plan | None = None  # None when the plan was reset while the run was in flight


class FeedbackResponse(BaseModel):
    suggestions: list[str] = Field(default_factory=list)


class ExecuteRequest(BaseModel):
    code: str
    language: Language
    timeout_seconds: int | None = Field(default=None, gt=0)


class LogEntryOut(BaseModel):
    timestamp: str
    message: str
