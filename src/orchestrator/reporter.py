"""Ask the oracle for feedback on the progress of a plan."""
from __future__ import annotations

from src.core.activity import ActivityLog, activity_log
from src.core.contracts.plan import Plan
from src.oracle.base import OracleClient


def summarize_plan(plan: Plan) -> str:
    lines = [f'I\'m working on a task: "{plan.title}"', "", "Current progress:"]
    lines += [
        f"Step {i}: {s.description} - Status: {s.status.value}"
        for i, s in enumerate(plan.steps, 1)
    ]
    return "\n".join(lines)


async def request_feedback(plan: Plan, oracle: OracleClient, activity: ActivityLog = activity_log) -> list[str]:
    activity.append(f"Requesting feedback for task: {plan.title}")
    feedback = await oracle.advise(summarize_plan(plan))
    activity.append(f"Received {len(feedback)} feedback items")
    return feedback
