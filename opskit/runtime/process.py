"""
Package-manager script runner.

Runs ``<runner> <script>`` (``npm run build`` by default) through the
platform shell and captures exit status, stdout and stderr in full. The
child sees the current PATH plus the npm global bin directory.

The wait is an asyncio wait: only the calling task is suspended. Without a
timeout the call blocks until the process exits.
"""
from __future__ import annotations

import asyncio
import os
import shlex
import signal
import subprocess
import sys
from pathlib import Path
from typing import Optional

from opskit.config.config import get_config
from opskit.constants import EXIT_STATUS_UNKNOWN, PROCESS_KILL_GRACE_SECONDS
from opskit.domain.models import ProcessOutput
from opskit.exceptions import ProcessSpawnError, ProcessTimeoutError
from opskit.monitoring.logger import get_logger

logger = get_logger(__name__)

IS_WINDOWS = sys.platform == "win32"

# Default for run_npm_script(timeout=...): use process.timeout_seconds.
CONFIG_TIMEOUT = object()


def npm_global_bin_dir() -> Path:
    """
    Directory holding globally installed npm binaries.

    ``process.npm_global_bin`` wins; otherwise ``%USERPROFILE%\\AppData\\Roaming\\npm``
    on Windows and ``~/.npm-global/bin`` elsewhere.
    """
    override = get_config().process.npm_global_bin
    if override:
        return Path(override)
    home = os.environ.get("HOME") or os.environ.get("USERPROFILE") or ""
    if IS_WINDOWS:
        return Path(home) / "AppData" / "Roaming" / "npm"
    return Path(home) / ".npm-global" / "bin"


def build_child_env() -> dict[str, str]:
    """Copy of the current environment with the npm global bin appended to PATH."""
    env = dict(os.environ)
    path = env.get("PATH", "")
    extra = str(npm_global_bin_dir())
    env["PATH"] = f"{path}{os.pathsep}{extra}" if path else extra
    return env


def build_shell_command(script: str, runner: Optional[str] = None) -> list[str]:
    """
    Return the argv that runs *script* through the platform shell.

    The runner words are quoted for the shell; *script* is appended as-is so
    it may carry its own arguments (``"test -- --watch"``).
    """
    runner = get_config().process.script_runner if runner is None else runner
    if IS_WINDOWS:
        line = " ".join(part for part in (runner, script) if part)
        return ["cmd", "/C", line]
    words = shlex.split(runner)
    line = " ".join(part for part in (shlex.join(words), script) if part)
    return ["sh", "-c", line]


def _decode(data: bytes | None) -> str:
    return (data or b"").decode("utf-8", errors="replace")


async def _kill_tree(proc: asyncio.subprocess.Process) -> None:
    """Kill the shell and everything it started."""
    if IS_WINDOWS:
        try:
            killer = await asyncio.create_subprocess_exec(
                "taskkill", "/T", "/F", "/PID", str(proc.pid),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
            await killer.wait()
            return
        except OSError as e:
            logger.warning("SCRIPT_TREE_KILL_FAILED", pid=proc.pid, error=str(e))
        try:
            proc.kill()
        except ProcessLookupError:
            pass
        return
    try:
        # The shell leads its own session, so its pid is the group id.
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass  # exited between the timeout and the kill


async def run_npm_script(
    script: str,
    *,
    timeout: Optional[float] | object = CONFIG_TIMEOUT,
    cwd: Optional[str] = None,
    runner: Optional[str] = None,
) -> ProcessOutput:
    """
    Run a package-manager script and wait for it to finish.

    Args:
        script: Script name (plus optional arguments) passed to the runner
        timeout: Seconds to wait. Omitted means ``process.timeout_seconds``;
            an explicit None means no limit.
        cwd: Working directory for the child
        runner: Command prefix; default ``process.script_runner``

    Returns:
        ProcessOutput with the exit status (-1 if killed by a signal) and the
        complete, undecorated stdout/stderr (trailing newlines kept)

    Raises:
        ProcessSpawnError: If the shell could not be started
        ProcessTimeoutError: If the timeout elapsed (the process tree is killed)
    """
    if timeout is CONFIG_TIMEOUT:
        timeout = get_config().process.timeout_seconds
    argv = build_shell_command(script, runner)

    logger.info("SCRIPT_START", script=script, command=argv[-1], cwd=cwd, timeout=timeout)

    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
            env=build_child_env(),
            start_new_session=not IS_WINDOWS,
        )
    except OSError as e:
        logger.error("SCRIPT_SPAWN_FAILED", script=script, error=str(e))
        raise ProcessSpawnError(f"Failed to start '{argv[-1]}': {e}") from e

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        await _kill_tree(proc)
        try:
            await asyncio.wait_for(proc.wait(), timeout=PROCESS_KILL_GRACE_SECONDS)
        except asyncio.TimeoutError:
            # A descendant that left the process group can hold the pipes open.
            logger.warning("SCRIPT_KILL_UNCONFIRMED", script=script, pid=proc.pid)
        logger.error("SCRIPT_TIMEOUT", script=script, timeout=timeout)
        raise ProcessTimeoutError(f"Script '{script}' did not finish within {timeout}s", timeout=timeout)

    returncode = proc.returncode
    status = returncode if returncode is not None and returncode >= 0 else EXIT_STATUS_UNKNOWN

    logger.info("SCRIPT_FINISHED", script=script, status=status)
    return ProcessOutput(status=status, stdout=_decode(stdout), stderr=_decode(stderr))
