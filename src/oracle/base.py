"""Decision oracle contract consumed by the plan engine."""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from src.core.contracts.directive import StepDirective
from src.core.contracts.plan import PlanDraft, PlanRevision, Step


@runtime_checkable
class OracleClient(Protocol):
    """All methods raise OracleError when the remote decision source fails or answers garbage.

    Retrying transport failures is the implementation's business; the engine never retries.
    """

    async def plan(self, objective: str) -> PlanDraft: ...

    async def decide(self, step_description: str, context: str) -> StepDirective: ...

    async def revise(self, title: str, completed_steps: list[Step], failed_step: Step) -> PlanRevision: ...

    async def advise(self, plan_summary: str) -> list[str]: ...
