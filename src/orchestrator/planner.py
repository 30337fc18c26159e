"""Create a Plan from an objective, and regenerate its tail after a failed step."""
from __future__ import annotations

import logging

from src.core.activity import ActivityLog, activity_log
from src.core.contracts.plan import Plan, Step
from src.core.exceptions import OracleError
from src.oracle.base import OracleClient

log = logging.getLogger("planner")


async def build_plan(objective: str, oracle: OracleClient, activity: ActivityLog = activity_log) -> Plan:
    activity.append(f"Starting task planning for: {objective}")
    draft = await oracle.plan(objective)
    if not draft.steps:
        raise OracleError("Oracle returned a plan with no steps")
    plan = Plan(title=draft.title, steps=[Step(description=d) for d in draft.steps])
    activity.append(f"Plan created with {len(plan.steps)} steps: {plan.title}")
    return plan


async def regenerate_plan(plan: Plan, index: int, oracle: OracleClient, activity: ActivityLog = activity_log) -> Plan:
    """Keep steps [0, index) by value, replace the rest with a fresh continuation.

    The returned plan has the same title and its cursor at `index`, which is now
    the first newly generated step.
    """
    done = [s.model_copy(deep=True) for s in plan.steps[:index]]
    failed = plan.steps[index].model_copy(deep=True)
    activity.append(f"Regenerating plan from step {index + 1}")
    revision = await oracle.revise(plan.title, done, failed)
    if not revision.steps:
        raise OracleError("Oracle returned a revision with no steps")
    new_steps = [Step(description=d) for d in revision.steps]
    log.info("revision replaces %d step(s) with %d", len(plan.steps) - index, len(new_steps))
    activity.append(f"Plan regenerated with {len(new_steps)} new steps")
    return Plan(title=plan.title, steps=done + new_steps, cursor=index)
