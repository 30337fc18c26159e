"""Run one source snippet in a throwaway directory with a hard wall-clock timeout."""
from __future__ import annotations

import asyncio
import logging
import os
import shutil
import signal
import tempfile
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from src.core.activity import ActivityLog, activity_log
from src.core.config.models import RunnerConfig
from src.core.contracts.runner import ExecutionResult, Language
from src.core.exceptions import ProcessSpawnError, SandboxError
from src.runner.languages import get_language_spec, resolve_interpreter

log = logging.getLogger("runner")

READ_CHUNK = 64 * 1024
KILL_GRACE_SECONDS = 5.0
TRUNCATION_MARKER = "\n… (output truncated)"


class _Capture:
    """Accumulates one output stream, keeping at most `limit` bytes (None: all)."""

    def __init__(self, limit: int | None):
        self.limit = limit
        self.buf = bytearray()
        self.truncated = False

    async def drain(self, stream: asyncio.StreamReader) -> None:
        while True:
            chunk = await stream.read(READ_CHUNK)
            if not chunk:
                return
            if self.limit is None:
                self.buf += chunk
                continue
            room = self.limit - len(self.buf)
            if room > 0:
                self.buf += chunk[:room]
            if len(chunk) > room:
                self.truncated = True

    def text(self) -> str:
        out = self.buf.decode("utf-8", errors="replace")
        return out + TRUNCATION_MARKER if self.truncated else out


@contextmanager
def _workdir(temp_root: str | None) -> Iterator[Path]:
    base = Path(temp_root) if temp_root else Path(tempfile.gettempdir())
    path = base / f"sandbox-{uuid.uuid4().hex}"
    try:
        path.mkdir(mode=0o700, parents=True)
    except OSError as e:
        raise SandboxError(f"Cannot create working directory {path}: {e}") from e
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
        if path.exists():
            log.warning("working directory %s could not be fully removed", path)


def _kill_group(proc: asyncio.subprocess.Process) -> None:
    # The child leads its own session, so the group id is its pid.
    try:
        if os.name == "posix":
            os.killpg(proc.pid, signal.SIGKILL)
        else:
            proc.kill()
    except ProcessLookupError:
        pass


def _raise_first_error(tasks) -> None:
    for task in tasks:
        if task.done() and not task.cancelled() and task.exception() is not None:
            raise task.exception()


async def _spawn(argv: list[str], cwd: Path) -> asyncio.subprocess.Process:
    try:
        return await asyncio.create_subprocess_exec(
            *argv,
            cwd=str(cwd),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=True,
        )
    except OSError as e:
        raise ProcessSpawnError(f"Could not start {argv[0]}: {e}") from e


class ProcessRunner:
    """Language-agnostic sandboxed runner.

    Every call gets its own directory, timer and child process, so any number of
    runs may be awaited concurrently. A program that fails is reported through
    ExecutionResult; only environment problems raise (RunnerError subclasses).
    """

    def __init__(self, config: RunnerConfig | None = None, activity: ActivityLog | None = None):
        self.config = config or RunnerConfig()
        self.activity = activity if activity is not None else activity_log

    async def run(
        self,
        source_code: str,
        language: Language | str,
        timeout_seconds: int | None = None,
    ) -> ExecutionResult:
        language = Language(language)
        timeout = timeout_seconds if timeout_seconds is not None else self.config.default_timeout_seconds
        if timeout <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {timeout}")
        spec = get_language_spec(language, self.config.interpreters)
        interpreter = resolve_interpreter(language, spec)

        self.activity.append(f"Executing {language.value} code (timeout: {timeout}s)")
        with _workdir(self.config.temp_root) as workdir:
            source = workdir / f"code{spec.extension}"
            try:
                source.write_text(source_code, encoding="utf-8")
            except OSError as e:
                raise SandboxError(f"Cannot write source file {source}: {e}") from e
            log.debug("wrote %s (%d chars)", source, len(source_code))

            proc = await _spawn([interpreter, *spec.args, str(source)], cwd=workdir)
            stdout, stderr, timed_out = await self._collect(proc, timeout)

        exit_code = proc.returncode if proc.returncode is not None else -signal.SIGKILL
        succeeded = exit_code == 0 and not timed_out
        if timed_out:
            self.activity.append(f"{language.value} code execution timed out after {timeout} seconds")
        self.activity.append(
            f"{language.value} code execution {'succeeded' if succeeded else 'failed'} with exit code {exit_code}"
        )
        return ExecutionResult(
            succeeded=succeeded,
            stdout=stdout.text(),
            stderr=stderr.text(),
            exit_code=exit_code,
            timed_out=timed_out,
        )

    async def _collect(self, proc: asyncio.subprocess.Process, timeout: float) -> tuple[_Capture, _Capture, bool]:
        limit = self.config.max_output_bytes
        stdout, stderr = _Capture(limit), _Capture(limit)
        tasks = [
            asyncio.create_task(proc.wait()),
            asyncio.create_task(stdout.drain(proc.stdout)),
            asyncio.create_task(stderr.drain(proc.stderr)),
        ]
        timed_out = False
        try:
            done, pending = await asyncio.wait(tasks, timeout=timeout, return_when=asyncio.FIRST_EXCEPTION)
            _raise_first_error(done)
            if pending:
                # Deadline hit. Background children may still hold the pipes after the program exited.
                timed_out = proc.returncode is None
                _kill_group(proc)
                _, pending = await asyncio.wait(pending, timeout=KILL_GRACE_SECONDS)
                if pending:
                    log.warning("pid %s: %d stream(s) still open after kill", proc.pid, len(pending))
            _raise_first_error(tasks)
        finally:
            if proc.returncode is None:
                _kill_group(proc)
            for task in tasks:
                if not task.done():
                    task.cancel()
        return stdout, stderr, timed_out
