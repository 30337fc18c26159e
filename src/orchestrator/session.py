"""Single-writer, many-reader holder of the externally visible plan."""
from __future__ import annotations

import logging
import threading
from typing import Callable

from src.core.contracts.plan import Plan

log = logging.getLogger("orchestrator")

PlanListener = Callable[[Plan | None, int], None]


class PlanStore:
    """Mutex-guarded plan with copy-on-read semantics.

    Readers get deep copies and never see the engine's working object. Every
    accepted publication bumps `revision` and is delivered to listeners under the
    lock, so listeners observe publications in exactly the order they happened.

    `epoch` changes whenever the stored plan is replaced from outside a run
    (install or clear). A run publishes with the epoch it started under; once the
    epoch has moved on, its publications are refused and the run is detached.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._plan: Plan | None = None
        self._epoch = 0
        self._revision = 0
        self._listeners: list[PlanListener] = []

    @property
    def epoch(self) -> int:
        with self._lock:
            return self._epoch

    @property
    def revision(self) -> int:
        with self._lock:
            return self._revision

    def snapshot(self) -> Plan | None:
        with self._lock:
            return self._plan.model_copy(deep=True) if self._plan is not None else None

    def checkout(self) -> tuple[Plan | None, int]:
        """Snapshot and epoch read atomically, for a run about to start."""
        with self._lock:
            return self.snapshot(), self._epoch

    def install(self, plan: Plan) -> int:
        with self._lock:
            self._epoch += 1
            self._set(plan.model_copy(deep=True))
            return self._epoch

    def publish(self, plan: Plan, epoch: int) -> bool:
        with self._lock:
            if epoch != self._epoch:
                return False
            self._set(plan.model_copy(deep=True))
            return True

    def clear(self) -> None:
        with self._lock:
            self._epoch += 1
            self._set(None)

    def subscribe(self, listener: PlanListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _set(self, plan: Plan | None) -> None:
        self._plan = plan
        self._revision += 1
        for listener in list(self._listeners):
            try:
                listener(plan.model_copy(deep=True) if plan is not None else None, self._revision)
            except Exception:
                log.exception("plan listener %r failed", listener)
