"""
Type definitions for the sandbox module.
"""

from typing import Dict, Optional
from pydantic import BaseModel, Field


class SandboxConfig(BaseModel):
    """Configuration for creating a sandbox."""

    environment_id: Optional[str] = Field(
        None,
        description="The environment/snapshot ID to use (None = provider default)"
    )
    lifetime_minutes: int = Field(
        default=60,
        description="Minutes of inactivity before the provider stops the sandbox"
    )
    labels: Dict[str, str] = Field(
        default_factory=dict,
        description="Labels attached to the sandbox at creation"
    )


class SandboxInfo(BaseModel):
    """Information about a sandbox instance."""

    id: str = Field(..., description="Unique identifier for the sandbox")
    environment_id: Optional[str] = Field(None, description="The environment/snapshot ID")
    status: str = Field(..., description="Current status of the sandbox")
    created_at: Optional[int] = Field(None, description="Creation time in epoch milliseconds")
    expires_at: Optional[int] = Field(None, description="Expected expiry in epoch milliseconds")


class CommandResult(BaseModel):
    """Result of a command run inside a sandbox."""

    exit_code: int = Field(..., description="Process exit code")
    stdout: str = Field(default="", description="Captured standard output")
    stderr: str = Field(default="", description="Captured standard error")

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """stdout, followed by stderr on its own line when there is any."""
        if self.stderr:
            return f"{self.stdout}\n{self.stderr}"
        return self.stdout
