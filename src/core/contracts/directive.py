from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, field_validator


class NextAction(str, Enum):
    CONTINUE_TO_NEXT = "continueToNext"
    RETRY = "retry"
    MODIFY_PLAN = "modifyPlan"
    COMPLETE = "complete"


class StepDirective(BaseModel):
    succeeded: bool
    output: str = ""
    produced_code: str | None = None
    next: NextAction | None = None  # None (unknown or absent) is handled like COMPLETE

    @field_validator("next", mode="before")
    @classmethod
    def _unknown_action_is_none(cls, value: Any) -> Any:
        if isinstance(value, NextAction) or value is None:
            return value
        try:
            return NextAction(str(value))
        except ValueError:
            return None
