"""
Daytona sandbox implementation.

Wraps Daytona's cloud sandboxes. The SDK is synchronous, so every call is
pushed to a worker thread with asyncio.to_thread.
"""

import asyncio
import logging
import os
import shlex
import time
from typing import Any, Optional

from .base import Sandbox, SandboxError, SandboxNotFoundError, SandboxState
from .types import CommandResult, SandboxConfig, SandboxInfo

logger = logging.getLogger(__name__)

# Lazy import daytona_sdk to avoid import errors if not installed
_daytona_client = None


def _get_daytona_client():
    """Get or create the global Daytona client."""
    global _daytona_client
    if _daytona_client is None:
        try:
            from daytona_sdk import Daytona, DaytonaConfig
        except ImportError:
            raise SandboxError("daytona_sdk not installed. Run: pip install daytona-sdk", "daytona")
        api_key = os.getenv("DAYTONA_API_KEY")
        if not api_key:
            raise SandboxError("DAYTONA_API_KEY environment variable not set", "daytona")
        config = DaytonaConfig(
            api_key=api_key,
            api_url=os.getenv("DAYTONA_API_URL") or None,
            target=os.getenv("DAYTONA_TARGET") or None,
        )
        _daytona_client = Daytona(config)
    return _daytona_client


def _now_ms() -> int:
    return int(time.time() * 1000)


class DaytonaSandbox(Sandbox):
    """
    Daytona-based sandbox implementation.

    Holds the SDK's sandbox handle. Commands are wrapped in `bash -c` so that
    pipes, `&&` and `source` work regardless of the image's /bin/sh.
    """

    BACKGROUND_LAUNCH_TIMEOUT = 10  # seconds

    def __init__(
        self,
        handle: Any,
        environment_id: Optional[str] = None,
        created_at: Optional[int] = None,
        lifetime_minutes: Optional[int] = None
    ):
        """
        Initialize a Daytona sandbox wrapper.

        Args:
            handle: The daytona_sdk Sandbox object
            environment_id: The snapshot used to create it, if known
            created_at: Creation time in epoch milliseconds, if known
            lifetime_minutes: Auto-stop interval the sandbox was created with
        """
        super().__init__(handle.id, environment_id)
        self._handle = handle
        self._created_at = created_at
        self._lifetime_minutes = lifetime_minutes

    @staticmethod
    def _bash(command: str) -> str:
        return f"bash -c {shlex.quote(command)}"

    async def run_command(
        self,
        command: str,
        timeout: Optional[int] = None,
        cwd: Optional[str] = None
    ) -> CommandResult:
        """
        Run a command through the Daytona process API.

        Daytona returns stdout and stderr merged into a single `result`
        string, so `stderr` is always empty here.
        """
        try:
            response = await asyncio.to_thread(
                self._handle.process.exec,
                self._bash(command),
                cwd=cwd,
                timeout=timeout
            )
        except Exception as e:
            raise SandboxError(f"Command failed: {e}", self._id) from e

        return CommandResult(
            exit_code=int(response.exit_code or 0),
            stdout=response.result or "",
        )

    async def start_background(self, command: str) -> None:
        """Launch a command under nohup and return without waiting for it."""
        launcher = self._bash(f"nohup {self._bash(command)} > /dev/null 2>&1 &")
        try:
            await asyncio.to_thread(
                self._handle.process.exec,
                launcher,
                timeout=self.BACKGROUND_LAUNCH_TIMEOUT
            )
        except Exception as e:
            raise SandboxError(f"Failed to start background command: {e}", self._id) from e

    async def write_file(self, path: str, content: str) -> None:
        try:
            await asyncio.to_thread(self._handle.fs.upload_file, content.encode("utf-8"), path)
        except Exception as e:
            raise SandboxError(f"Failed to write {path}: {e}", self._id) from e

    async def kill(self) -> None:
        """Delete the sandbox on the Daytona side."""
        daytona = _get_daytona_client()
        try:
            await asyncio.to_thread(daytona.delete, self._handle)
        except Exception as e:
            raise SandboxError(f"Failed to delete sandbox: {e}", self._id) from e
        self._state = SandboxState.KILLED

    async def get_info(self) -> SandboxInfo:
        expires_at = None
        if self._created_at is not None and self._lifetime_minutes:
            expires_at = self._created_at + self._lifetime_minutes * 60 * 1000
        return SandboxInfo(
            id=self._id,
            environment_id=self._environment_id,
            status=self._state.value,
            created_at=self._created_at,
            expires_at=expires_at,
        )

    @staticmethod
    async def create(config: Optional[SandboxConfig] = None) -> "DaytonaSandbox":
        """
        Create a new Daytona sandbox from a snapshot.

        daytona.create blocks until the sandbox is started, so the returned
        sandbox is already running.
        """
        from daytona_sdk import CreateSandboxFromSnapshotParams

        config = config or SandboxConfig()
        daytona = _get_daytona_client()

        try:
            params = CreateSandboxFromSnapshotParams(
                snapshot=config.environment_id,
                auto_stop_interval=config.lifetime_minutes,
                labels=config.labels or None,
            )
            handle = await asyncio.to_thread(daytona.create, params)
        except Exception as e:
            raise SandboxError(f"Failed to create Daytona sandbox: {e}", "daytona") from e

        sandbox = DaytonaSandbox(
            handle,
            environment_id=config.environment_id,
            created_at=_now_ms(),
            lifetime_minutes=config.lifetime_minutes,
        )
        sandbox._state = SandboxState.RUNNING
        logger.info(f"Daytona sandbox created: {sandbox.id}")
        return sandbox

    @staticmethod
    async def connect(sandbox_id: str) -> "DaytonaSandbox":
        """
        Connect to an existing Daytona sandbox, starting it if it was stopped.
        """
        daytona = _get_daytona_client()

        try:
            handle = await asyncio.to_thread(daytona.get, sandbox_id)
        except Exception as e:
            raise SandboxNotFoundError(f"Failed to connect: {e}", sandbox_id) from e

        state = getattr(handle, "state", None)
        state = getattr(state, "value", state)
        if state is not None and state != "started":
            logger.info(f"Sandbox {sandbox_id} is {state}, starting it")
            try:
                await asyncio.to_thread(handle.start)
            except Exception as e:
                raise SandboxNotFoundError(f"Failed to restart sandbox: {e}", sandbox_id) from e

        sandbox = DaytonaSandbox(handle)
        sandbox._state = SandboxState.RUNNING
        return sandbox
