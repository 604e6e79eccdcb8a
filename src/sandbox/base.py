"""
Base class for sandbox implementations.

A Sandbox represents a cloud-hosted virtual machine owned by a third-party
provider. The relay only ever talks to it through this interface: run a
command, write a file, start something detached, kill it.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from .types import CommandResult, SandboxConfig, SandboxInfo


class SandboxState(Enum):
    """Possible states of a sandbox."""

    CREATING = "creating"
    STARTING = "starting"
    RUNNING = "running"
    STOPPED = "stopped"
    KILLED = "killed"
    ERROR = "error"


class SandboxError(Exception):
    """Exception raised for sandbox-related errors."""

    def __init__(self, message: str, sandbox_id: Optional[str] = None):
        self.message = message
        self.sandbox_id = sandbox_id
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.sandbox_id:
            return f"[Sandbox {self.sandbox_id}] {self.message}"
        return self.message


class SandboxNotFoundError(SandboxError):
    """Raised when a sandbox cannot be found or reconnected to."""


class Sandbox(ABC):
    """
    Abstract base class for sandbox implementations.

    Subclasses integrate a specific provider (e.g., Daytona). Instances are
    cheap handles: the relay reconnects by ID on every request.
    """

    def __init__(self, sandbox_id: str, environment_id: Optional[str] = None):
        """
        Initialize a sandbox instance.

        Args:
            sandbox_id: Unique identifier for this sandbox instance
            environment_id: The environment/snapshot ID used to create the sandbox
        """
        self._id = sandbox_id
        self._environment_id = environment_id
        self._state = SandboxState.CREATING

    @property
    def id(self) -> str:
        """Get the sandbox ID."""
        return self._id

    @property
    def environment_id(self) -> Optional[str]:
        """Get the environment ID."""
        return self._environment_id

    @property
    def state(self) -> SandboxState:
        """Get the current sandbox state."""
        return self._state

    @property
    def is_running(self) -> bool:
        """Check if the sandbox is running."""
        return self._state == SandboxState.RUNNING

    @abstractmethod
    async def run_command(
        self,
        command: str,
        timeout: Optional[int] = None,
        cwd: Optional[str] = None
    ) -> CommandResult:
        """
        Run a shell command and wait for it to finish.

        Args:
            command: Command line, interpreted by bash
            timeout: Seconds to wait before giving up. None means provider default.
            cwd: Working directory inside the sandbox

        Returns:
            CommandResult: Exit code and captured output.

        Raises:
            SandboxError: If the provider call fails.
        """
        pass

    @abstractmethod
    async def start_background(self, command: str) -> None:
        """
        Start a command detached from the caller and return immediately.

        Raises:
            SandboxError: If the command could not be launched.
        """
        pass

    @abstractmethod
    async def write_file(self, path: str, content: str) -> None:
        """
        Write a text file inside the sandbox, replacing any existing file.

        The parent directory must already exist.

        Raises:
            SandboxError: If the write fails.
        """
        pass

    @abstractmethod
    async def kill(self) -> None:
        """
        Permanently destroy the sandbox.

        Raises:
            SandboxError: If termination fails.
        """
        pass

    @abstractmethod
    async def get_info(self) -> SandboxInfo:
        """Get current information about the sandbox."""
        pass

    @staticmethod
    @abstractmethod
    async def create(config: Optional[SandboxConfig] = None) -> "Sandbox":
        """
        Create a new sandbox and wait until it accepts commands.

        Raises:
            SandboxError: If sandbox creation fails.
        """
        pass

    @staticmethod
    @abstractmethod
    async def connect(sandbox_id: str) -> "Sandbox":
        """
        Connect to an existing sandbox by ID.

        Raises:
            SandboxNotFoundError: If the sandbox doesn't exist or can't be resumed.
        """
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self._id} env={self._environment_id} state={self._state.value}>"
