"""
Sandbox Relay
=============

Translates relay operations into calls on a remote sandbox:
- Creating and bootstrapping a sandbox with Node.js
- Uploading project files
- Running commands
- Starting, polling and stopping the Expo dev server

Every operation reconnects by sandbox ID; nothing is cached between calls.
"""

import logging
import shlex
import time
from typing import List, Optional, Type

from src.expo import NVM_SOURCE, ExpoFiles, ExpoStatus, build_startup_script, summarize_status
from src.sandbox import CommandResult, Sandbox, SandboxConfig

from .config import RelayConfig
from .errors import (
    InvalidRequestError,
    ProjectNotFoundError,
    ProviderNotConfiguredError,
    SandboxExpiredError,
)
from .types import ExpoStartResponse, ProjectFile, SandboxCreatedResponse
from .utils import BASHRC, mkdir_command, nvm_install_command, resolve_project_path

logger = logging.getLogger(__name__)

# Matches expo processes without matching the pkill command line itself
EXPO_PROCESS_PATTERN = "[e]xpo"


class SandboxRelay:
    """
    Relays client requests to sandboxes of a single provider.

    Usage:
        relay = SandboxRelay(DaytonaSandbox, RelayConfig.from_env())
        created = await relay.create_sandbox(project_id="my-app")
        await relay.upload_files(created.sandbox_id, files)
        await relay.start_expo(created.sandbox_id)
    """

    def __init__(self, provider: Type[Sandbox], config: RelayConfig):
        """
        Args:
            provider: Sandbox implementation whose create/connect are used
            config: Relay settings
        """
        self._provider = provider
        self._config = config
        self._expo_files = ExpoFiles(home_dir=config.home_dir)

    @property
    def config(self) -> RelayConfig:
        return self._config

    @property
    def is_configured(self) -> bool:
        return self._config.is_configured

    @property
    def project_dir(self) -> str:
        return self._config.resolved_project_dir

    async def _reconnect(self, sandbox_id: str) -> Sandbox:
        logger.info(f"Reconnecting to: {sandbox_id}")
        sandbox = await self._provider.connect(sandbox_id)
        logger.info(f"Connected: {sandbox.id}")
        return sandbox

    async def create_sandbox(self, project_id: Optional[str] = None) -> SandboxCreatedResponse:
        """
        Create a sandbox and install Node.js in it.

        Raises:
            ProviderNotConfiguredError: If no provider API key is set.
            SandboxError: If the provider fails.
        """
        if not self.is_configured:
            raise ProviderNotConfiguredError()

        logger.info(f"Creating sandbox for project: {project_id}")
        config = SandboxConfig(
            environment_id=self._config.environment_id,
            lifetime_minutes=self._config.lifetime_minutes,
            labels={"project_id": project_id} if project_id else {},
        )
        sandbox = await self._provider.create(config)
        logger.info(f"Sandbox created: {sandbox.id}")

        try:
            await self._bootstrap(sandbox)
        except Exception:
            logger.exception(f"Bootstrap failed for sandbox {sandbox.id}, deleting it")
            try:
                await sandbox.kill()
            except Exception as kill_error:
                logger.warning(f"Could not delete sandbox {sandbox.id}: {kill_error}")
            raise

        logger.info(f"Sandbox ready: {sandbox.id}")

        info = await sandbox.get_info()
        created_at = info.created_at or int(time.time() * 1000)
        expires_at = info.expires_at or created_at + self._config.lifetime_minutes * 60 * 1000
        return SandboxCreatedResponse(
            id=sandbox.id,
            sandbox_id=sandbox.id,
            created_at=created_at,
            expires_at=expires_at,
        )

    async def _bootstrap(self, sandbox: Sandbox) -> None:
        logger.info("Installing Node.js...")
        result = await sandbox.run_command(
            nvm_install_command(self._config.nvm_version, self._config.node_version),
            timeout=self._config.bootstrap_timeout,
        )
        if not result.ok:
            logger.warning(f"Node.js install exited with {result.exit_code}: {result.output[-500:]}")

        await sandbox.write_file(f"{self._config.home_dir}/.bashrc", BASHRC)
        await sandbox.run_command(mkdir_command(self.project_dir))

    async def upload_files(self, sandbox_id: str, files: List[ProjectFile]) -> int:
        """
        Write files under the project directory.

        All paths are validated before anything is written.

        Returns:
            Number of files written.
        """
        targets = [(resolve_project_path(self.project_dir, f.path), f.content) for f in files]

        sandbox = await self._reconnect(sandbox_id)
        logger.info(f"Uploading {len(targets)} files...")

        await sandbox.run_command(mkdir_command(self.project_dir))
        created_dirs = {self.project_dir}
        for path, content in targets:
            parent = path.rsplit("/", 1)[0]
            if parent and parent not in created_dirs:
                await sandbox.run_command(mkdir_command(parent))
                created_dirs.add(parent)
            await sandbox.write_file(path, content)

        listing = await sandbox.run_command(
            f"ls -la {shlex.quote(self.project_dir)}/",
            timeout=self._config.check_timeout,
        )
        logger.info(f"Files uploaded: {listing.stdout}")
        return len(targets)

    async def exec_command(self, sandbox_id: str, command: str) -> CommandResult:
        """Run a command with nvm loaded."""
        if not command or not command.strip():
            raise InvalidRequestError("command required")

        sandbox = await self._reconnect(sandbox_id)
        logger.info(f"Executing: {command}")
        return await sandbox.run_command(
            f"{NVM_SOURCE}; {command}",
            timeout=self._config.exec_timeout,
        )

    async def start_expo(self, sandbox_id: str) -> ExpoStartResponse:
        """
        Launch the expo startup script in the background.

        Raises:
            SandboxExpiredError: If the sandbox can no longer be reached.
            ProjectNotFoundError: If no package.json has been uploaded.
        """
        logger.info(f"Starting Expo for: {sandbox_id}")
        try:
            sandbox = await self._reconnect(sandbox_id)
        except Exception as e:
            logger.error(f"Reconnect failed: {e}")
            raise SandboxExpiredError() from e

        check = await sandbox.run_command(
            f'test -f {shlex.quote(self.project_dir)}/package.json && echo "exists"',
            timeout=self._config.check_timeout,
        )
        if not check.ok:
            raise ProjectNotFoundError()

        files = self._expo_files
        await sandbox.write_file(files.script, build_startup_script(self.project_dir, files))
        await sandbox.run_command(f"chmod +x {files.script}", timeout=self._config.check_timeout)
        await sandbox.start_background(f"bash {files.script}")

        logger.info("Expo starting in background")
        return ExpoStartResponse(sandbox_id=sandbox_id)

    async def get_expo_status(self, sandbox_id: str) -> ExpoStatus:
        """Read the expo logs and infer where the startup script is."""
        sandbox = await self._reconnect(sandbox_id)
        files = self._expo_files

        status_result = await sandbox.run_command(
            f'cat {files.status_log} 2>/dev/null || echo "not started"',
            timeout=self._config.check_timeout,
        )
        expo_result = await sandbox.run_command(
            f"cat {files.expo_log} 2>/dev/null | tail -100",
            timeout=self._config.check_timeout,
        )

        status_log = status_result.stdout or ""
        expo_log = expo_result.stdout or ""

        logger.info(f"Status log: {status_log[:200]}")
        if expo_log:
            logger.info(f"Expo log: {expo_log[:200]}")

        return summarize_status(status_log, expo_log)

    async def stop_expo(self, sandbox_id: Optional[str]) -> bool:
        """
        Kill any expo processes in the sandbox.

        Returns:
            True if the kill command ran, False if there was nothing to do or it failed
        """
        if not sandbox_id:
            return False
        try:
            sandbox = await self._reconnect(sandbox_id)
            await sandbox.run_command(f"pkill -f '{EXPO_PROCESS_PATTERN}' || true")
            return True
        except Exception as e:
            logger.warning(f"Failed to stop Expo in {sandbox_id}: {e}")
            return False

    async def delete_sandbox(self, sandbox_id: str) -> bool:
        """
        Destroy a sandbox.

        Returns:
            True if deleted successfully, False otherwise
        """
        try:
            sandbox = await self._reconnect(sandbox_id)
            await sandbox.kill()
            logger.info(f"Sandbox deleted: {sandbox_id}")
            return True
        except Exception as e:
            logger.warning(f"Failed to delete sandbox {sandbox_id}: {e}")
            return False
