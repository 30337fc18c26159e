"""OracleClient backed by a LangChain chat model in JSON mode."""
from __future__ import annotations

import json
import logging
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import Runnable
from langchain_openai import ChatOpenAI
from pydantic import ValidationError

from src.core.config.env import require_env
from src.core.config.models import OracleConfig
from src.core.contracts.directive import StepDirective
from src.core.contracts.plan import PlanDraft, PlanRevision, Step
from src.core.exceptions import OracleError
from src.oracle.prompts import (
    ADVISE_PROMPT,
    ADVISOR_SYSTEM,
    DECIDE_PROMPT,
    EXECUTOR_SYSTEM,
    PLAN_PROMPT,
    PLANNER_SYSTEM,
    REVISE_PROMPT,
    REVISER_SYSTEM,
)

log = logging.getLogger("oracle")


def build_chat_model(config: OracleConfig) -> Runnable:
    require_env("OPENAI_API_KEY")
    llm = ChatOpenAI(
        model=config.model,
        temperature=config.temperature,
        max_retries=config.max_retries,
        timeout=config.request_timeout,
    )
    return llm.bind(response_format={"type": "json_object"})


def parse_json(text: str) -> dict[str, Any]:
    """Parse a JSON object from model output, stripping a markdown fence if present."""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("```")[1]
        if text.startswith("json"):
            text = text[4:]
    text = text.strip()
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise OracleError(f"Oracle returned invalid JSON: {e}; response starts with {text[:200]!r}") from e
    if not isinstance(data, dict):
        raise OracleError(f"Oracle returned {type(data).__name__}, expected a JSON object")
    return data


def _descriptions(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        raise OracleError("Oracle response has no 'steps' list")
    out = []
    for item in raw:
        desc = item.get("description") if isinstance(item, dict) else item
        if not isinstance(desc, str) or not desc.strip():
            raise OracleError(f"Oracle returned a step without a description: {item!r}")
        out.append(desc.strip())
    return out


class LangChainOracle:
    """Plans, decides, revises and advises through one chat model.

    `llm` may be any LangChain chat model (tests pass a fake one); by default a
    ChatOpenAI model is built from `config`.
    """

    def __init__(self, config: OracleConfig | None = None, llm: BaseChatModel | Runnable | None = None):
        self.config = config or OracleConfig()
        self.llm = llm if llm is not None else build_chat_model(self.config)

    async def _ask(self, system: str, human: str, variables: dict[str, Any]) -> dict[str, Any]:
        prompt = ChatPromptTemplate.from_messages([("system", system), ("human", human)])
        try:
            out = await (prompt | self.llm).ainvoke(variables)
        except Exception as e:
            log.warning("oracle call failed: %s", e)
            raise OracleError(f"Oracle call failed: {e}") from e
        text = out.content if hasattr(out, "content") else str(out)
        return parse_json(text if isinstance(text, str) else str(text))

    async def plan(self, objective: str) -> PlanDraft:
        data = await self._ask(PLANNER_SYSTEM, PLAN_PROMPT, {"objective": objective})
        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            raise OracleError("Oracle plan has no title")
        steps = _descriptions(data.get("steps"))
        if not steps:
            raise OracleError("Oracle plan has no steps")
        return PlanDraft(title=title.strip(), steps=steps)

    async def decide(self, step_description: str, context: str) -> StepDirective:
        data = await self._ask(
            EXECUTOR_SYSTEM,
            DECIDE_PROMPT,
            {"step_description": step_description, "context": context},
        )
        try:
            return StepDirective(
                succeeded=data["success"],
                output=data.get("output") or "",
                produced_code=data.get("code") or None,
                next=data.get("nextAction"),
            )
        except (KeyError, ValidationError) as e:
            raise OracleError(f"Oracle step verdict is malformed: {e}") from e

    async def revise(self, title: str, completed_steps: list[Step], failed_step: Step) -> PlanRevision:
        completed = "\n\n".join(
            f"Step {i}: {s.description}\nResult: {s.result or 'No result'}"
            for i, s in enumerate(completed_steps, 1)
        )
        data = await self._ask(
            REVISER_SYSTEM,
            REVISE_PROMPT,
            {
                "title": title,
                "completed_steps": completed or "(none)",
                "failed_description": failed_step.description,
                "failure_details": failed_step.result or "No details available",
            },
        )
        return PlanRevision(steps=_descriptions(data.get("steps")))

    async def advise(self, plan_summary: str) -> list[str]:
        data = await self._ask(
            ADVISOR_SYSTEM,
            ADVISE_PROMPT,
            {"plan_summary": plan_summary, "num_questions": self.config.num_questions},
        )
        questions = data.get("questions")
        if not isinstance(questions, list):
            raise OracleError("Oracle feedback has no 'questions' list")
        return [str(q) for q in questions][: self.config.num_questions]
