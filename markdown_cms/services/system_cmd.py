from __future__ import annotations

import asyncio
import logging
import os
import shlex
import time
from dataclasses import dataclass
from typing import Protocol

from ..config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    success: bool
    stdout: str
    stderr: str
    exit_code: int
    execution_time: float


class CommandRunner(Protocol):
    async def run(
        self,
        cmd: list[str],
        cwd: str | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        ...


class RealCommandRunner:
    def __init__(self, extra_env: dict[str, str] | None = None):
        self.extra_env = dict(extra_env or {})

    async def run(
        self,
        cmd: list[str],
        cwd: str | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        logger.debug('run %s (cwd=%s)', shell_preview(cmd), cwd)
        env = {**os.environ, **self.extra_env} if self.extra_env else None
        return await _run_once(cmd, cwd=cwd, timeout=timeout, env=env)


class MockCommandRunner:
    def __init__(self, default: CommandResult | None = None):
        self.default = default or CommandResult(True, '', '', 0, 0.0)
        self.calls: list[dict] = []
        self._queue: list[CommandResult] = []

    def queue_result(self, result: CommandResult) -> None:
        self._queue.append(result)

    def queue_output(self, stdout: str = '', exit_code: int = 0, stderr: str = '') -> None:
        self.queue_result(CommandResult(exit_code == 0, stdout, stderr, exit_code, 0.0))

    async def run(
        self,
        cmd: list[str],
        cwd: str | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        self.calls.append({'cmd': cmd, 'cwd': cwd, 'timeout': timeout})
        if self._queue:
            return self._queue.pop(0)
        return self.default


async def _run_once(
    cmd: list[str],
    cwd: str | None = None,
    timeout: int | None = None,
    env: dict[str, str] | None = None,
) -> CommandResult:
    start = time.monotonic()
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=cwd,
            env=env,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as exc:
        return CommandResult(False, '', str(exc), 127, time.monotonic() - start)

    effective_timeout = timeout if timeout is not None else settings.command_timeout_sec
    try:
        out, err = await asyncio.wait_for(proc.communicate(), timeout=effective_timeout)
    except asyncio.TimeoutError:
        proc.kill()
        out, err = await proc.communicate()
        err_txt = err.decode(errors='ignore').strip() if err else ''
        detail = f'Command timed out after {effective_timeout}s'
        stderr = f'{detail}. {err_txt}'.strip()
        return CommandResult(False, out.decode(errors='ignore'), stderr, 124, time.monotonic() - start)

    # stdout is kept verbatim: porcelain output is whitespace sensitive
    stdout = out.decode(errors='ignore')
    stderr = err.decode(errors='ignore').strip()
    exit_code = proc.returncode
    return CommandResult(exit_code == 0, stdout, stderr, exit_code, time.monotonic() - start)


def shell_preview(cmd: list[str]) -> str:
    return ' '.join(shlex.quote(v) for v in cmd)
