"""
Sandbox module for talking to remote cloud sandboxes.

Sandboxes are VMs owned by a third-party provider. This module hides the
provider SDK behind a small async interface.
"""

from .base import Sandbox, SandboxError, SandboxNotFoundError, SandboxState
from .types import CommandResult, SandboxConfig, SandboxInfo
from .daytona import DaytonaSandbox

__all__ = [
    "Sandbox",
    "SandboxError",
    "SandboxNotFoundError",
    "SandboxState",
    "CommandResult",
    "SandboxConfig",
    "SandboxInfo",
    "DaytonaSandbox",
]
