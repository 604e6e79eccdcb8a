"""
Pytest configuration and shared fixtures.

FakeSandbox is an in-memory Sandbox: it records commands and written files
and answers commands from canned responses.
"""

from typing import Dict, List, Optional, Tuple

import pytest

from src.relay import RelayConfig, SandboxRelay
from src.sandbox import (
    CommandResult,
    Sandbox,
    SandboxConfig,
    SandboxError,
    SandboxInfo,
    SandboxNotFoundError,
    SandboxState,
)


class FakeSandbox(Sandbox):
    """In-memory sandbox used in place of a real provider."""

    registry: Dict[str, "FakeSandbox"] = {}
    fail_create = False

    def __init__(self, sandbox_id: str, config: Optional[SandboxConfig] = None):
        super().__init__(sandbox_id, config.environment_id if config else None)
        self.config = config
        self.commands: List[str] = []
        self.timeouts: List[Optional[int]] = []
        self.files: Dict[str, str] = {}
        self.background: List[str] = []
        self.responses: List[Tuple[str, CommandResult]] = []
        self.fail_commands = False
        self.fail_kill = False

    def respond(self, fragment: str, stdout: str = "", exit_code: int = 0) -> None:
        """Answer commands containing `fragment` with the given result."""
        self.responses.append((fragment, CommandResult(exit_code=exit_code, stdout=stdout)))

    async def run_command(self, command, timeout=None, cwd=None):
        if self.fail_commands:
            raise SandboxError("command failed", self._id)
        self.commands.append(command)
        self.timeouts.append(timeout)
        for fragment, result in self.responses:
            if fragment in command:
                return result
        return CommandResult(exit_code=0)

    async def start_background(self, command):
        self.background.append(command)

    async def write_file(self, path, content):
        self.files[path] = content

    async def kill(self):
        if self.fail_kill:
            raise SandboxError("kill failed", self._id)
        self._state = SandboxState.KILLED
        FakeSandbox.registry.pop(self._id, None)

    async def get_info(self):
        return SandboxInfo(
            id=self._id,
            environment_id=self._environment_id,
            status=self._state.value,
            created_at=1_700_000_000_000,
            expires_at=1_700_003_600_000,
        )

    @staticmethod
    async def create(config=None):
        if FakeSandbox.fail_create:
            raise SandboxError("quota exceeded", "fake")
        sandbox = FakeSandbox(f"fake-{len(FakeSandbox.registry) + 1}", config)
        sandbox._state = SandboxState.RUNNING
        FakeSandbox.registry[sandbox.id] = sandbox
        return sandbox

    @staticmethod
    async def connect(sandbox_id):
        if sandbox_id not in FakeSandbox.registry:
            raise SandboxNotFoundError("not found", sandbox_id)
        return FakeSandbox.registry[sandbox_id]


@pytest.fixture
def fake_provider():
    """The FakeSandbox class with an empty registry."""
    FakeSandbox.registry = {}
    FakeSandbox.fail_create = False
    yield FakeSandbox
    FakeSandbox.registry = {}
    FakeSandbox.fail_create = False


@pytest.fixture
def existing_sandbox(fake_provider):
    """A running sandbox already known to the provider."""
    sandbox = FakeSandbox("sbx-existing")
    sandbox._state = SandboxState.RUNNING
    fake_provider.registry[sandbox.id] = sandbox
    return sandbox


@pytest.fixture
def relay_config():
    return RelayConfig(api_key="test-key", home_dir="/home/user")


@pytest.fixture
def relay(fake_provider, relay_config):
    return SandboxRelay(fake_provider, relay_config)
