"""
Relay Module
============

Request handling for the sandbox relay: configuration, wire types,
errors, and the SandboxRelay service that talks to the provider.
"""

from .config import RelayConfig
from .errors import (
    RelayError,
    ProviderNotConfiguredError,
    InvalidRequestError,
    ProjectNotFoundError,
    SandboxExpiredError,
)
from .log import configure_logging
from .service import SandboxRelay
from .types import (
    SandboxRequest,
    CreateSandboxRequest,
    SandboxCreatedResponse,
    ProjectFile,
    UploadRequest,
    UploadResponse,
    ExecRequest,
    ExecResponse,
    ExpoStartResponse,
    SuccessResponse,
)
from .utils import resolve_project_path

__all__ = [
    # Config
    "RelayConfig",
    "configure_logging",
    # Errors
    "RelayError",
    "ProviderNotConfiguredError",
    "InvalidRequestError",
    "ProjectNotFoundError",
    "SandboxExpiredError",
    # Service
    "SandboxRelay",
    # Types
    "SandboxRequest",
    "CreateSandboxRequest",
    "SandboxCreatedResponse",
    "ProjectFile",
    "UploadRequest",
    "UploadResponse",
    "ExecRequest",
    "ExecResponse",
    "ExpoStartResponse",
    "SuccessResponse",
    # Utils
    "resolve_project_path",
]
