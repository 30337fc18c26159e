"""Engine FastAPI app: plan an objective, run it, ask for feedback, and run code in the sandbox."""
from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
for _p in (_PROJECT_ROOT / "config" / ".env", _PROJECT_ROOT / ".env"):
    if _p.exists():
        load_dotenv(_p, override=False)
        break

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(name)s] %(message)s", datefmt="%H:%M:%S")
log = logging.getLogger("orchestrator")

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from src.core.activity import activity_log
from src.core.config.loader import load_app_config
from src.core.config.models import AppConfig
from src.core.contracts.gateway import ExecuteRequest, FeedbackResponse, LogEntryOut, PlanRequest, RunResponse
from src.core.contracts.plan import EngineStatus, Plan
from src.core.contracts.runner import ExecutionResult
from src.core.exceptions import (
    EngineError,
    NoActivePlanError,
    RunnerError,
    RuntimeUnavailableError,
)
from src.oracle.llm import LangChainOracle
from src.orchestrator.engine import PlanEngine
from src.runner.sandbox import ProcessRunner

app = FastAPI(title="Task Engine")
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

CONFIG_PATH = os.environ.get("CONFIG_PATH")
PROJECT_ROOT = _PROJECT_ROOT
CONFIG: AppConfig | None = None
ENGINE: PlanEngine | None = None
RUNNER: ProcessRunner | None = None


def get_config() -> AppConfig:
    global CONFIG
    if CONFIG is None:
        CONFIG = load_app_config(CONFIG_PATH, project_root=PROJECT_ROOT)
    return CONFIG


def get_engine() -> PlanEngine:
    global ENGINE
    if ENGINE is None:
        config = get_config()
        ENGINE = PlanEngine(LangChainOracle(config.oracle), settings=config.engine)
    return ENGINE


def get_runner() -> ProcessRunner:
    global RUNNER
    if RUNNER is None:
        RUNNER = ProcessRunner(get_config().runner)
    return RUNNER


def _engine_http_error(e: EngineError) -> HTTPException:
    if isinstance(e, NoActivePlanError):
        return HTTPException(status_code=409, detail=str(e))
    return HTTPException(status_code=502, detail=str(e))


@app.on_event("startup")
def startup():
    get_config()


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/plan", response_model=Plan)
async def create_plan(req: PlanRequest):
    engine = get_engine()
    log.info("OBJECTIVE: %s", (req.objective[:200] + "…") if len(req.objective) > 200 else req.objective)
    try:
        plan = await engine.create_plan(req.objective)
    except EngineError as e:
        log.warning("Plan failed: %s", e)
        raise _engine_http_error(e)
    for i, s in enumerate(plan.steps, 1):
        log.info("PLAN step %s: %s", i, (s.description[:80] + "…") if len(s.description) > 80 else s.description)
    return plan


@app.get("/plan", response_model=Plan)
def get_plan():
    plan = get_engine().plan
    if plan is None:
        raise HTTPException(status_code=404, detail="No active plan")
    return plan


@app.post("/run", response_model=RunResponse)
async def run_plan():
    engine = get_engine()
    try:
        final_output = await engine.run_plan()
    except EngineError as e:
        log.warning("Run failed: %s", e)
        raise _engine_http_error(e)
    log.info("FINAL OUTPUT: %s", (final_output[:300] + "…") if len(final_output) > 300 else (final_output or "(empty)"))
    return RunResponse(final_output=final_output, plan=engine.plan)


@app.post("/feedback", response_model=FeedbackResponse)
async def feedback():
    try:
        suggestions = await get_engine().request_feedback()
    except EngineError as e:
        raise _engine_http_error(e)
    return FeedbackResponse(suggestions=suggestions)


@app.post("/reset")
def reset():
    get_engine().reset()
    return {"status": "reset"}


@app.get("/status", response_model=EngineStatus)
def status():
    return get_engine().status


@app.get("/logs", response_model=list[LogEntryOut])
def get_logs():
    return [LogEntryOut(timestamp=e.timestamp.isoformat(), message=e.message) for e in activity_log.entries()]


@app.delete("/logs")
def clear_logs():
    activity_log.clear()
    return {"status": "cleared"}


@app.post("/execute", response_model=ExecutionResult)
async def execute(req: ExecuteRequest):
    try:
        return await get_runner().run(req.code, req.language, req.timeout_seconds)
    except RuntimeUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except RunnerError as e:
        log.exception("Sandbox failure")
        raise HTTPException(status_code=500, detail=str(e))


if __name__ == "__main__":
    import uvicorn

    parser = argparse.ArgumentParser()
    parser.add_argument("--config-path", default=CONFIG_PATH)
    parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")))
    args = parser.parse_args()
    CONFIG_PATH = args.config_path
    uvicorn.run(app, host="0.0.0.0", port=args.port)
