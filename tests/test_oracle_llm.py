import json

import pytest
from langchain_core.language_models import FakeListChatModel
from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableLambda

from src.core.config.models import OracleConfig
from src.core.contracts.directive import NextAction
from src.core.contracts.plan import Step, StepStatus
from src.core.exceptions import ConfigError, OracleError
from src.oracle.base import OracleClient
from src.oracle import llm as llm_module
from src.oracle.llm import LangChainOracle, parse_json


def scripted_llm(*responses, seen=None):
    """A runnable chat stand-in that records the rendered messages and replays `responses`."""
    queue = [r if isinstance(r, str) else json.dumps(r) for r in responses]

    def answer(prompt_value):
        if seen is not None:
            seen.append(prompt_value.to_messages())
        return AIMessage(content=queue.pop(0))

    return RunnableLambda(answer)


def test_parse_json_plain_and_fenced():
    assert parse_json('{"a": 1}') == {"a": 1}
    assert parse_json('```json\n{"a": 2}\n```') == {"a": 2}
    assert parse_json('```\n{"a": 3}\n```') == {"a": 3}


@pytest.mark.parametrize("text", ["not json", "[1, 2]", ""])
def test_parse_json_rejects_non_objects(text):
    with pytest.raises(OracleError):
        parse_json(text)


def test_langchain_oracle_satisfies_protocol():
    assert isinstance(LangChainOracle(llm=scripted_llm()), OracleClient)


@pytest.mark.asyncio
async def test_plan_with_fake_chat_model():
    llm = FakeListChatModel(
        responses=[json.dumps({"title": "Add numbers", "steps": [{"description": "Read"}, {"description": "Sum"}]})]
    )
    draft = await LangChainOracle(llm=llm).plan("add two numbers")
    assert draft.title == "Add numbers"
    assert draft.steps == ["Read", "Sum"]


@pytest.mark.asyncio
async def test_plan_prompt_carries_objective():
    seen = []
    oracle = LangChainOracle(llm=scripted_llm({"title": "T", "steps": ["only step"]}, seen=seen))
    draft = await oracle.plan("write a haiku")
    assert draft.steps == ["only step"]
    system, human = seen[0]
    assert "JSON Mode" in system.content
    assert "TASK: write a haiku" in human.content
    assert '"title"' in human.content


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "answer",
    [
        {"title": "T", "steps": []},
        {"title": "", "steps": ["a"]},
        {"steps": ["a"]},
        {"title": "T", "steps": [{"nope": "x"}]},
        {"title": "T", "steps": "a, b"},
    ],
)
async def test_plan_rejects_malformed_answers(answer):
    with pytest.raises(OracleError):
        await LangChainOracle(llm=scripted_llm(answer)).plan("x")


@pytest.mark.asyncio
async def test_decide_maps_fields():
    seen = []
    answer = {"success": True, "output": "5", "code": "print(2+3)", "nextAction": "continueToNext"}
    oracle = LangChainOracle(llm=scripted_llm(answer, seen=seen))
    verdict = await oracle.decide("Add them", "STEP 1: Read\nRESULT:\n2 and 3")
    assert verdict.succeeded is True
    assert verdict.output == "5"
    assert verdict.produced_code == "print(2+3)"
    assert verdict.next == NextAction.CONTINUE_TO_NEXT
    human = seen[0][1].content
    assert "STEP: Add them" in human
    assert "2 and 3" in human


@pytest.mark.asyncio
async def test_decide_unknown_next_action_becomes_none():
    answer = {"success": False, "output": "hm", "nextAction": "panic"}
    verdict = await LangChainOracle(llm=scripted_llm(answer)).decide("s", "c")
    assert verdict.next is None
    assert verdict.produced_code is None


@pytest.mark.asyncio
async def test_decide_without_success_is_malformed():
    with pytest.raises(OracleError):
        await LangChainOracle(llm=scripted_llm({"output": "x"})).decide("s", "c")


@pytest.mark.asyncio
async def test_revise_formats_history():
    seen = []
    oracle = LangChainOracle(llm=scripted_llm({"steps": [{"description": "Try again differently"}]}, seen=seen))
    done = [Step(description="Read", status=StepStatus.COMPLETED, result="2 and 3")]
    failed = Step(description="Sum", status=StepStatus.FAILED, result="TypeError")
    revision = await oracle.revise("Add numbers", done, failed)
    assert revision.steps == ["Try again differently"]
    human = seen[0][1].content
    assert "ORIGINAL TASK: Add numbers" in human
    assert "Step 1: Read\nResult: 2 and 3" in human
    assert "FAILED STEP:\nSum" in human
    assert "FAILURE DETAILS:\nTypeError" in human


@pytest.mark.asyncio
async def test_revise_with_no_completed_steps():
    seen = []
    oracle = LangChainOracle(llm=scripted_llm({"steps": ["a"]}, seen=seen))
    await oracle.revise("T", [], Step(description="first", status=StepStatus.FAILED))
    human = seen[0][1].content
    assert "COMPLETED STEPS:\n(none)" in human
    assert "No details available" in human


@pytest.mark.asyncio
async def test_advise_truncates_to_configured_count():
    seen = []
    oracle = LangChainOracle(
        OracleConfig(num_questions=2),
        llm=scripted_llm({"questions": ["q1", "q2", "q3"]}, seen=seen),
    )
    assert await oracle.advise("summary text") == ["q1", "q2"]
    assert "exactly 2" in seen[0][1].content


@pytest.mark.asyncio
async def test_advise_requires_questions_list():
    with pytest.raises(OracleError):
        await LangChainOracle(llm=scripted_llm({"questions": "just one"})).advise("s")


@pytest.mark.asyncio
async def test_transport_failure_becomes_oracle_error():
    def boom(_):
        raise RuntimeError("connection reset")

    with pytest.raises(OracleError) as exc:
        await LangChainOracle(llm=RunnableLambda(boom)).plan("x")
    assert "connection reset" in str(exc.value)


def test_building_default_model_requires_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(ConfigError) as exc:
        LangChainOracle(OracleConfig())
    assert "OPENAI_API_KEY" in str(exc.value)


def test_default_model_is_chat_openai_in_json_mode(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    oracle = LangChainOracle(OracleConfig(model="gpt-4o-mini"))
    assert isinstance(oracle.llm.bound, llm_module.ChatOpenAI)
    assert oracle.llm.kwargs["response_format"] == {"type": "json_object"}
