"""
Errors raised by the relay and the HTTP status each maps to.
"""

from typing import Any, Dict, Optional


class RelayError(Exception):
    """Base class for errors reported to the client with a specific status."""

    status_code = 500

    def __init__(self, error: str, message: Optional[str] = None):
        self.error = error
        self.message = message
        super().__init__(error)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error}
        if self.message:
            body["message"] = self.message
        return body


class ProviderNotConfiguredError(RelayError):
    status_code = 503

    def __init__(self):
        super().__init__("Sandbox provider is not configured")


class InvalidRequestError(RelayError):
    status_code = 400


class ProjectNotFoundError(RelayError):
    status_code = 400

    def __init__(self):
        super().__init__("Project not found", "Upload the project files first")


class SandboxExpiredError(RelayError):
    status_code = 410

    def __init__(self):
        super().__init__("Sandbox expired", "Please create a new session")
