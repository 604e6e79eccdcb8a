"""
Relay configuration, read from environment variables.
"""

import os
from typing import Optional

from pydantic import BaseModel, Field


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw:
        try:
            value = int(raw)
            if value > 0:
                return value
        except ValueError:
            pass
    return default


class RelayConfig(BaseModel):
    """Settings for the sandbox relay."""

    api_key: Optional[str] = Field(None, description="Sandbox provider API key")
    environment_id: Optional[str] = Field(
        None,
        description="Snapshot used for new sandboxes (None = provider default)"
    )
    home_dir: str = Field("/home/daytona", description="Home directory of the sandbox user")
    project_dir: Optional[str] = Field(
        None,
        description="Where uploaded project files go (default: <home_dir>/project)"
    )
    lifetime_minutes: int = Field(60, gt=0, description="Sandbox lifetime")
    bootstrap_timeout: int = Field(180, gt=0, description="Seconds allowed for the Node.js install")
    exec_timeout: int = Field(120, gt=0, description="Seconds allowed for a relayed command")
    check_timeout: int = Field(5, gt=0, description="Seconds allowed for quick checks (ls, cat, test)")
    node_version: str = Field("18", description="Node.js version installed through nvm")
    nvm_version: str = Field("v0.39.0", description="nvm release used by the installer")
    port: int = Field(3001, description="HTTP port")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @property
    def resolved_project_dir(self) -> str:
        return self.project_dir or f"{self.home_dir}/project"

    @classmethod
    def from_env(cls) -> "RelayConfig":
        return cls(
            api_key=os.getenv("DAYTONA_API_KEY") or None,
            environment_id=os.getenv("SANDBOX_ENVIRONMENT_ID") or None,
            home_dir=(os.getenv("SANDBOX_HOME_DIR") or "/home/daytona").rstrip("/"),
            project_dir=(os.getenv("SANDBOX_PROJECT_DIR") or "").rstrip("/") or None,
            lifetime_minutes=_env_int("SANDBOX_LIFETIME_MINUTES", 60),
            bootstrap_timeout=_env_int("SANDBOX_BOOTSTRAP_TIMEOUT_SECONDS", 180),
            exec_timeout=_env_int("SANDBOX_EXEC_TIMEOUT_SECONDS", 120),
            check_timeout=_env_int("SANDBOX_CHECK_TIMEOUT_SECONDS", 5),
            node_version=os.getenv("SANDBOX_NODE_VERSION") or "18",
            nvm_version=os.getenv("SANDBOX_NVM_VERSION") or "v0.39.0",
            port=_env_int("PORT", 3001),
        )
