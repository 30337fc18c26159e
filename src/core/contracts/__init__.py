from src.core.contracts.plan import EngineStatus, Plan, PlanDraft, PlanRevision, Step, StepStatus
from src.core.contracts.directive import NextAction, StepDirective
from src.core.contracts.runner import ExecutionResult, Language
from src.core.contracts.gateway import ExecuteRequest, FeedbackResponse, LogEntryOut, PlanRequest, RunResponse

__all__ = [
    "Plan",
    "PlanDraft",
    "PlanRevision",
    "Step",
    "StepStatus",
    "EngineStatus",
    "NextAction",
    "StepDirective",
    "ExecutionResult",
    "Language",
    "PlanRequest",
    "RunResponse",
    "FeedbackResponse",
    "ExecuteRequest",
    "LogEntryOut",
]
