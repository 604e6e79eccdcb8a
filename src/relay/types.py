"""
Relay Types
===========

Pydantic models for request/response schemas.
Fields are camelCase on the wire and snake_case in Python.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RelayModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SandboxRequest(RelayModel):
    """Request body that only names a sandbox."""
    sandbox_id: Optional[str] = None


class CreateSandboxRequest(RelayModel):
    """Request to create a sandbox for a project."""
    project_id: Optional[str] = None


class SandboxCreatedResponse(RelayModel):
    """A freshly created, bootstrapped sandbox. Timestamps are epoch milliseconds."""
    id: str
    sandbox_id: str
    status: str = "ready"
    created_at: int
    expires_at: int


class ProjectFile(RelayModel):
    """A file to place under the project directory."""
    path: str = Field(..., min_length=1)
    content: str = ""


class UploadRequest(SandboxRequest):
    files: List[ProjectFile] = Field(default_factory=list)


class UploadResponse(RelayModel):
    success: bool = True
    files_uploaded: int


class ExecRequest(SandboxRequest):
    command: str = ""


class ExecResponse(RelayModel):
    exit_code: int
    stdout: str
    stderr: str
    output: str


class ExpoStartResponse(RelayModel):
    status: str = "starting"
    message: str = "Installing dependencies and starting Expo..."
    sandbox_id: str
    success: bool = True


class SuccessResponse(RelayModel):
    success: bool = True
