"""PlanEngine: the public face of planning, running, feedback and reset."""
from __future__ import annotations

import logging

from src.core.activity import ActivityLog, activity_log
from src.core.config.models import EngineSettings
from src.core.contracts.plan import EngineStatus, Plan
from src.core.exceptions import NoActivePlanError, NoValidPlanError, OracleError, PlanningError
from src.oracle.base import OracleClient
from src.orchestrator.executor import run_plan
from src.orchestrator.planner import build_plan
from src.orchestrator.reporter import request_feedback
from src.orchestrator.session import PlanStore

log = logging.getLogger("orchestrator")


class PlanEngine:
    """Owns the plan; the oracle is injected so any decision source (or a fake) can drive it.

    reset() does not abort a run in flight: that run keeps going on its own copy,
    stops publishing to the store, and its return value stays authoritative.
    """

    def __init__(
        self,
        oracle: OracleClient,
        settings: EngineSettings | None = None,
        store: PlanStore | None = None,
        activity: ActivityLog | None = None,
    ):
        self.oracle = oracle
        self.settings = settings or EngineSettings()
        self.store = store or PlanStore()
        self.activity = activity if activity is not None else activity_log
        self._planning = False
        self._executing = False
        self._current_output = ""

    @property
    def plan(self) -> Plan | None:
        return self.store.snapshot()

    @property
    def status(self) -> EngineStatus:
        return EngineStatus(
            is_planning=self._planning,
            is_executing=self._executing,
            current_output=self._current_output,
        )

    async def create_plan(self, objective: str) -> Plan:
        self._planning = True
        try:
            plan = await build_plan(objective, self.oracle, self.activity)
        except OracleError as e:
            self.activity.append(f"ERROR: planning failed: {e}")
            raise PlanningError(f"Could not plan '{objective}': {e}") from e
        finally:
            self._planning = False
        self.store.install(plan)
        return self.store.snapshot()

    async def run_plan(self) -> str:
        plan, epoch = self.store.checkout()
        if plan is None:
            self.activity.append("ERROR: No task plan to execute")
            raise NoActivePlanError("No active plan; create one first")
        if plan.is_finished:
            self.activity.append("ERROR: No valid task plan to execute")
            raise NoValidPlanError(f"Plan '{plan.title}' has no steps left to run")

        detached = False

        def publish(p: Plan) -> None:
            nonlocal detached
            if self.store.publish(p, epoch) or detached:
                return
            detached = True
            log.warning("plan '%s' was reset or replaced mid-run; this run is no longer published", p.title)

        def on_output(text: str) -> None:
            if not detached:
                self._current_output = text

        self._executing = True
        try:
            return await run_plan(
                plan,
                self.oracle,
                publish,
                max_step_retries=self.settings.max_step_retries,
                on_output=on_output,
                activity=self.activity,
            )
        finally:
            if self.store.epoch == epoch:
                self._executing = False

    async def request_feedback(self) -> list[str]:
        plan = self.store.snapshot()
        if plan is None:
            self.activity.append("ERROR: No task plan available for feedback")
            raise NoActivePlanError("No active plan to get feedback on")
        return await request_feedback(plan, self.oracle, self.activity)

    def reset(self) -> None:
        self.activity.append("Resetting task plan")
        self.store.clear()
        self._planning = False
        self._executing = False
        self._current_output = ""
