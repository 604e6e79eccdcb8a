"""
Sandbox Relay API Server
========================

Thin HTTP relay in front of a cloud sandbox provider (Daytona). Clients use it
to spin up a sandbox, upload an Expo project, start the Expo dev server in
tunnel mode and poll for the tunnel URL.

Endpoints:
---------
    POST   /sandbox/create       - Create a sandbox with Node.js installed
    POST   /sandbox/upload       - Upload project files
    POST   /sandbox/exec         - Run a command
    POST   /sandbox/expo-start   - Start Expo in the background
    POST   /sandbox/expo-status  - Get Expo status and tunnel URL
    POST   /sandbox/expo-stop    - Stop Expo
    DELETE /sandbox/{sandbox_id} - Delete a sandbox

Usage:
-----
1. Set environment variables (DAYTONA_API_KEY, optional SANDBOX_* overrides)
2. Run: uvicorn server:app --reload
"""

import logging
import os
from typing import Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv

from src.expo import ExpoStatus
from src.relay import (
    RelayConfig,
    RelayError,
    InvalidRequestError,
    SandboxRelay,
    SandboxRequest,
    CreateSandboxRequest,
    SandboxCreatedResponse,
    UploadRequest,
    UploadResponse,
    ExecRequest,
    ExecResponse,
    ExpoStartResponse,
    SuccessResponse,
    configure_logging,
)
from src.sandbox import DaytonaSandbox, SandboxError

# Load environment variables
load_dotenv()
configure_logging()

logger = logging.getLogger(__name__)

SERVICE_NAME = "Sandbox Relay API"


# =============================================================================
# Global instances
# =============================================================================

relay: Optional[SandboxRelay] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifecycle manager for the FastAPI app.
    """
    global relay

    config = RelayConfig.from_env()
    relay = SandboxRelay(DaytonaSandbox, config)
    logger.info(f"Sandbox provider configured: {config.is_configured}")

    yield

    logger.info("Server shutdown complete")


# =============================================================================
# FastAPI App
# =============================================================================

app = FastAPI(
    title=SERVICE_NAME,
    description="HTTP relay for creating and driving cloud sandboxes",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)


# =============================================================================
# Error handlers
# =============================================================================

@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError):
    logger.warning(f"{request.method} {request.url.path} rejected: {exc.error}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(SandboxError)
async def sandbox_error_handler(request: Request, exc: SandboxError):
    logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


def _get_relay() -> SandboxRelay:
    if not relay:
        raise HTTPException(status_code=503, detail="Server not initialized")
    return relay


def _require_sandbox_id(sandbox_id: Optional[str]) -> str:
    if not sandbox_id or not sandbox_id.strip():
        raise InvalidRequestError("sandboxId required")
    return sandbox_id.strip()


# =============================================================================
# Health Endpoints
# =============================================================================

@app.get("/")
async def root():
    """Service banner."""
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "providerConfigured": relay is not None and relay.is_configured,
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "providerConfigured": relay is not None and relay.is_configured}


# =============================================================================
# Sandbox Endpoints
# =============================================================================

@app.post("/sandbox/create", response_model=SandboxCreatedResponse)
async def create_sandbox(request: Optional[CreateSandboxRequest] = None):
    """Create a sandbox and install Node.js in it."""
    project_id = request.project_id if request else None
    return await _get_relay().create_sandbox(project_id)


@app.post("/sandbox/upload", response_model=UploadResponse)
async def upload_files(request: UploadRequest):
    """Upload files into the sandbox's project directory."""
    sandbox_id = _require_sandbox_id(request.sandbox_id)
    count = await _get_relay().upload_files(sandbox_id, request.files)
    return UploadResponse(files_uploaded=count)


@app.post("/sandbox/exec", response_model=ExecResponse)
async def exec_command(request: ExecRequest):
    """Run a shell command with Node.js on the PATH."""
    sandbox_id = _require_sandbox_id(request.sandbox_id)
    result = await _get_relay().exec_command(sandbox_id, request.command)
    return ExecResponse(
        exit_code=result.exit_code,
        stdout=result.stdout,
        stderr=result.stderr,
        output=result.output,
    )


@app.post("/sandbox/expo-start", response_model=ExpoStartResponse)
async def expo_start(request: SandboxRequest):
    """Install dependencies and start Expo in tunnel mode, without waiting."""
    sandbox_id = _require_sandbox_id(request.sandbox_id)
    return await _get_relay().start_expo(sandbox_id)


@app.post("/sandbox/expo-status", response_model=ExpoStatus)
async def expo_status(request: SandboxRequest):
    """Report Expo progress and, once available, the tunnel URL and QR code."""
    sandbox_id = _require_sandbox_id(request.sandbox_id)
    current = _get_relay()
    try:
        return await current.get_expo_status(sandbox_id)
    except Exception as e:
        logger.exception(f"Status error for {sandbox_id}")
        return JSONResponse(status_code=500, content={"status": "error", "message": str(e)})


@app.post("/sandbox/expo-stop", response_model=SuccessResponse)
async def expo_stop(request: Optional[SandboxRequest] = None):
    """Stop Expo. Always reports success."""
    sandbox_id = request.sandbox_id if request else None
    await _get_relay().stop_expo(sandbox_id)
    return SuccessResponse()


@app.delete("/sandbox/{sandbox_id}", response_model=SuccessResponse)
async def delete_sandbox(sandbox_id: str):
    """Delete a sandbox. Always reports success."""
    await _get_relay().delete_sandbox(sandbox_id)
    return SuccessResponse()


# =============================================================================
# Main entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    port = RelayConfig.from_env().port
    logger.info(f"Sandbox API running on port {port}")
    uvicorn.run(app, host=os.environ.get("HOST", "0.0.0.0"), port=port)
