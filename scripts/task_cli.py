#!/usr/bin/env python3
"""Send an objective to the engine service: plan it, run it, print each step and the final output."""
import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

import httpx

ENGINE_URL = os.environ.get("ENGINE_BASE_URL", "http://127.0.0.1:8000")
STATUS_MARK = {"completed": "✓", "failed": "✗", "inProgress": "…", "pending": " "}


def _trunc(s: str, max_len: int = 100) -> str:
    s = str(s)
    return (s[:max_len] + "…") if len(s) > max_len else s


def _trace(label: str, body: Any, trace: bool, max_body_len: int = 2000) -> None:
    if not trace:
        return
    print(f"[{label}]", flush=True)
    raw = json.dumps(body, indent=2) if isinstance(body, (dict, list)) else str(body)
    if len(raw) > max_body_len:
        raw = raw[:max_body_len] + "\n… (truncated)"
    print(raw, flush=True)
    print("---", flush=True)


def _call(client: httpx.Client, method: str, path: str, trace: bool, body: dict | None = None) -> Any:
    _trace(f"REQUEST {method} {path}", body, trace and body is not None)
    r = client.request(method, path, json=body)
    try:
        data = r.json()
    except ValueError:
        data = r.text
    _trace(f"RESPONSE {r.status_code}", data, trace)
    if r.status_code != 200:
        detail = data.get("detail") if isinstance(data, dict) else data
        raise RuntimeError(f"{method} {path} failed ({r.status_code}): {detail}")
    return data


def _print_plan(plan: dict) -> None:
    print(f"Plan: {plan.get('title')}", flush=True)
    for i, step in enumerate(plan.get("steps") or [], 1):
        mark = STATUS_MARK.get(step.get("status"), "?")
        print(f"  [{mark}] step {i}: {_trunc(step.get('description', ''))}", flush=True)
        if step.get("result"):
            print(f"        → {_trunc(step['result'], 150)}", flush=True)


def main():
    parser = argparse.ArgumentParser(description="Plan and run an objective on the task engine service.")
    parser.add_argument("objective", nargs="*", help="Objective text")
    parser.add_argument("--url", default=ENGINE_URL, help="Engine base URL")
    parser.add_argument("--plan-only", action="store_true", help="Create the plan but do not run it")
    parser.add_argument("--feedback", action="store_true", help="Ask for feedback on the plan afterwards")
    parser.add_argument("--trace", action="store_true", help="Print every request and response body")
    args = parser.parse_args()
    objective = " ".join(args.objective).strip()
    if not objective:
        print('Usage: PYTHONPATH=. python scripts/task_cli.py "Your objective here"', file=sys.stderr)
        sys.exit(1)

    try:
        with httpx.Client(base_url=args.url.rstrip("/"), timeout=None) as client:
            print("Objective:", objective, flush=True)
            print("---", flush=True)
            plan = _call(client, "POST", "/plan", args.trace, {"objective": objective})
            _print_plan(plan)
            print("---", flush=True)

            if not args.plan_only:
                run = _call(client, "POST", "/run", args.trace)
                if run.get("plan"):
                    _print_plan(run["plan"])
                    print("---", flush=True)
                print("Final output:", flush=True)
                print(run.get("final_output") or "(empty)", flush=True)

            if args.feedback:
                fb = _call(client, "POST", "/feedback", args.trace)
                print("---", flush=True)
                print("Feedback:", flush=True)
                for s in fb.get("suggestions", []):
                    print(f"  - {s}", flush=True)
    except httpx.ConnectError:
        print(f"Cannot reach the engine at {args.url}. Is it running?", file=sys.stderr)
        sys.exit(1)
    except RuntimeError as e:
        print(e, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
