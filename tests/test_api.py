import sys

import pytest
from fastapi.testclient import TestClient

from src.core.activity import activity_log
from src.core.config.models import AppConfig, RunnerConfig
from src.core.contracts.directive import NextAction
from src.core.contracts.runner import Language
from src.core.exceptions import OracleError
from src.orchestrator import main
from src.orchestrator.engine import PlanEngine
from src.runner.sandbox import ProcessRunner
from tests.fakes import ScriptedOracle, directive


@pytest.fixture
def oracle():
    return ScriptedOracle(directives=[directive("read 2 and 3"), directive("5", next=NextAction.COMPLETE)])


@pytest.fixture
def client(monkeypatch, tmp_path, oracle):
    monkeypatch.setattr(main, "CONFIG", AppConfig())
    monkeypatch.setattr(main, "ENGINE", PlanEngine(oracle))
    runner_config = RunnerConfig(temp_root=str(tmp_path), interpreters={Language.PYTHON: sys.executable})
    monkeypatch.setattr(main, "RUNNER", ProcessRunner(runner_config))
    activity_log.clear()
    return TestClient(main.app)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_plan_run_and_status(client):
    r = client.post("/plan", json={"objective": "add two numbers"})
    assert r.status_code == 200
    plan = r.json()
    assert plan["cursor"] == 0
    assert [s["status"] for s in plan["steps"]] == ["pending", "pending"]
    assert client.get("/plan").json() == plan

    r = client.post("/run")
    assert r.status_code == 200
    body = r.json()
    assert body["final_output"] == "5"
    assert body["plan"]["cursor"] == 2
    assert [s["result"] for s in body["plan"]["steps"]] == ["read 2 and 3", "5"]

    status = client.get("/status").json()
    assert status == {"is_planning": False, "is_executing": False, "current_output": "5"}


def test_empty_objective_is_rejected(client):
    assert client.post("/plan", json={"objective": ""}).status_code == 422


def test_plan_failure_is_bad_gateway(monkeypatch, client):
    monkeypatch.setattr(main, "ENGINE", PlanEngine(ScriptedOracle(draft=OracleError("down"))))
    r = client.post("/plan", json={"objective": "x"})
    assert r.status_code == 502


def test_run_without_plan_is_conflict(client):
    assert client.get("/plan").status_code == 404
    assert client.post("/run").status_code == 409
    assert client.post("/feedback").status_code == 409


def test_run_twice_is_conflict(client):
    client.post("/plan", json={"objective": "add two numbers"})
    client.post("/run")
    assert client.post("/run").status_code == 409


def test_feedback(client, oracle):
    client.post("/plan", json={"objective": "add two numbers"})
    r = client.post("/feedback")
    assert r.status_code == 200
    assert r.json()["suggestions"] == oracle.advice


def test_reset(client):
    client.post("/plan", json={"objective": "add two numbers"})
    assert client.post("/reset").json() == {"status": "reset"}
    assert client.get("/plan").status_code == 404


def test_logs(client):
    client.post("/plan", json={"objective": "add two numbers"})
    logs = client.get("/logs").json()
    assert logs[0]["message"] == "Starting task planning for: add two numbers"
    assert "T" in logs[0]["timestamp"]
    assert client.delete("/logs").json() == {"status": "cleared"}
    assert client.get("/logs").json() == []


def test_execute(client):
    r = client.post("/execute", json={"code": "print('hi')", "language": "python", "timeout_seconds": 10})
    assert r.status_code == 200
    assert r.json() == {"succeeded": True, "stdout": "hi\n", "stderr": "", "exit_code": 0, "timed_out": False}


def test_execute_failing_program_is_still_ok(client):
    r = client.post("/execute", json={"code": "raise SystemExit(2)", "language": "python"})
    assert r.status_code == 200
    assert r.json()["exit_code"] == 2
    assert r.json()["succeeded"] is False


def test_execute_validation(client):
    assert client.post("/execute", json={"code": "x", "language": "cobol"}).status_code == 422
    assert client.post("/execute", json={"code": "x", "language": "python", "timeout_seconds": 0}).status_code == 422


def test_execute_missing_interpreter(monkeypatch, client, tmp_path):
    config = RunnerConfig(temp_root=str(tmp_path), interpreters={Language.RUBY: str(tmp_path / "no-ruby")})
    monkeypatch.setattr(main, "RUNNER", ProcessRunner(config))
    r = client.post("/execute", json={"code": "puts 1", "language": "ruby"})
    assert r.status_code == 503
