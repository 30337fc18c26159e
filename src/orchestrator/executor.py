"""Drive a Plan step by step through the oracle until it is finished."""
from __future__ import annotations

import logging
from typing import Callable

from src.core.activity import ActivityLog, activity_log
from src.core.contracts.directive import NextAction, StepDirective
from src.core.contracts.plan import Plan, Step, StepStatus
from src.core.exceptions import OracleError, RetryLimitExceededError, StepExecutionError
from src.oracle.base import OracleClient
from src.orchestrator.planner import regenerate_plan

log = logging.getLogger("executor")

NO_HISTORY = "No previous steps completed yet."
RETRY_WARNING_THRESHOLD = 10


def _preview(text: str, limit: int = 100) -> str:
    return (text[:limit] + "…") if len(text) > limit else text


def build_context(plan: Plan) -> str:
    completed = plan.completed_steps()
    if not completed:
        return NO_HISTORY
    return "\n\n".join(
        f"STEP {i}: {s.description}\nRESULT:\n{s.result or 'No result'}"
        for i, s in enumerate(completed, 1)
    )


async def run_step(step: Step, context: str, oracle: OracleClient) -> StepDirective:
    log.info("→ %s", _preview(step.description))
    try:
        directive = await oracle.decide(step.description, context)
    except OracleError as e:
        log.warning("← failed: %s", e)
        raise StepExecutionError(f"Oracle failed on step '{_preview(step.description, 60)}': {e}") from e
    log.info("← %s (%s)", _preview(directive.output, 150), directive.next.value if directive.next else "complete")
    return directive


async def run_plan(
    plan: Plan,
    oracle: OracleClient,
    publish: Callable[[Plan], None],
    *,
    max_step_retries: int | None = None,
    on_output: Callable[[str], None] | None = None,
    activity: ActivityLog = activity_log,
) -> str:
    """Run `plan` from its cursor to the end and return the final output.

    `plan` is mutated in place (and replaced on regeneration); `publish` is called
    after every mutation. Oracle failures abort the run as StepExecutionError and
    leave already-published state as it was.
    """
    activity.append(f"Starting execution of task plan: {plan.title}")
    final_output = ""
    retries = 0

    while plan.cursor < len(plan.steps):
        index = plan.cursor
        step = plan.steps[index]
        activity.append(f"Executing step {index + 1}/{len(plan.steps)}: {step.description}")

        step.status = StepStatus.IN_PROGRESS
        publish(plan)

        directive = await run_step(step, build_context(plan), oracle)

        step.result = directive.output
        step.status = StepStatus.COMPLETED if directive.succeeded else StepStatus.FAILED
        activity.append(
            f"Step {index + 1} {'completed' if directive.succeeded else 'failed'}: {_preview(directive.output)}"
        )
        publish(plan)
        if on_output is not None:
            on_output(directive.output)

        action = directive.next
        if action == NextAction.CONTINUE_TO_NEXT:
            activity.append("Moving to next step")
            plan.cursor = index + 1
            retries = 0
        elif action == NextAction.RETRY:
            retries += 1
            activity.append("Retrying current step")
            if max_step_retries is not None and retries > max_step_retries:
                raise RetryLimitExceededError(
                    f"Step {index + 1} asked for retry {retries} times (limit {max_step_retries})"
                )
            if retries >= RETRY_WARNING_THRESHOLD:
                log.warning("step %d has been retried %d times", index + 1, retries)
            continue
        elif action == NextAction.MODIFY_PLAN:
            activity.append("Modifying plan due to step failure")
            try:
                plan = await regenerate_plan(plan, index, oracle, activity)
            except OracleError as e:
                raise StepExecutionError(f"Plan regeneration at step {index + 1} failed: {e}") from e
            retries = 0
        else:
            activity.append("Task marked as complete")
            plan.cursor = len(plan.steps)
            final_output = directive.output

        if directive.succeeded and index == len(plan.steps) - 1:
            final_output = directive.output
            activity.append("All steps completed successfully")
        publish(plan)

    return final_output
