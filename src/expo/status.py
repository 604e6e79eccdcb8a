"""
Expo Status Inference
=====================

Guesses how far the startup script got by looking for text markers in the
status log, and pulls the tunnel URL out of the expo dev server's output.
This is a best-effort heuristic over unstructured logs.
"""

import logging
import re
from enum import Enum
from typing import List, Tuple
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

from .script import (
    MARKER_EXPO_CLI_INSTALLED,
    MARKER_EXPO_STARTED,
    MARKER_INSTALL_COMPLETE,
    MARKER_INSTALL_STARTED,
)

logger = logging.getLogger(__name__)

QR_CODE_ENDPOINT = "https://api.qrserver.com/v1/create-qr-code/"
QR_CODE_SIZE = 200
LOG_TAIL_CHARS = 1000

_TUNNEL_READY_RE = re.compile(r"Tunnel ready at (exp://[^\s]+)")
_EXP_URL_RE = re.compile(r'exp://[^\s\]"]+')
_EXP_URL_TRAILING_RE = re.compile(r'[\])"]+$')
_EXP_HOST_RE = re.compile(r'https://exp\.host/[^\s"]+')

# encodeURIComponent leaves these unescaped
_URI_COMPONENT_SAFE = "-_.!~*'()"


class ExpoPhase(str, Enum):
    """Inferred progress of the expo startup script."""

    STARTING = "starting"
    INSTALLING = "installing"
    INSTALLING_EXPO = "installing-expo"
    STARTING_EXPO = "starting-expo"
    RUNNING = "running"
    READY = "ready"
    ERROR = "error"


PHASE_MESSAGES = {
    ExpoPhase.STARTING: "Starting...",
    ExpoPhase.INSTALLING: "Installing dependencies...",
    ExpoPhase.INSTALLING_EXPO: "Installing expo-cli...",
    ExpoPhase.STARTING_EXPO: "Starting Expo server...",
    ExpoPhase.RUNNING: "Expo is running",
    ExpoPhase.READY: "Expo is ready!",
}

# Later entries win when several markers are present
_PHASE_MARKERS: List[Tuple[str, ExpoPhase]] = [
    (MARKER_INSTALL_STARTED, ExpoPhase.INSTALLING),
    (MARKER_INSTALL_COMPLETE, ExpoPhase.INSTALLING_EXPO),
    (MARKER_EXPO_CLI_INSTALLED, ExpoPhase.STARTING_EXPO),
    (MARKER_EXPO_STARTED, ExpoPhase.RUNNING),
]


class ExpoStatus(BaseModel):
    """Snapshot of the expo dev server as seen from its logs."""

    model_config = ConfigDict(populate_by_name=True)

    status: ExpoPhase
    message: str
    url: str = ""
    qr_code: str = Field("", alias="qrCode")
    log: str = ""


def infer_phase(status_log: str) -> ExpoPhase:
    """Return the phase of the last marker found in the status log."""
    phase = ExpoPhase.STARTING
    for marker, marker_phase in _PHASE_MARKERS:
        if marker in status_log:
            phase = marker_phase
    return phase


def extract_expo_url(expo_log: str) -> str:
    """
    Find the URL a device should open, or "" if none is printed yet.

    Tried in order: the "Tunnel ready at" line, any exp:// URL, any
    https://exp.host/ URL.
    """
    match = _TUNNEL_READY_RE.search(expo_log)
    if match:
        return match.group(1)

    match = _EXP_URL_RE.search(expo_log)
    if match:
        return _EXP_URL_TRAILING_RE.sub("", match.group(0))

    match = _EXP_HOST_RE.search(expo_log)
    if match:
        return match.group(0)

    return ""


def qr_code_url(url: str, size: int = QR_CODE_SIZE) -> str:
    """Build a QR code image URL that encodes `url`."""
    if not url:
        return ""
    data = quote(url, safe=_URI_COMPONENT_SAFE)
    return f"{QR_CODE_ENDPOINT}?size={size}x{size}&data={data}"


def summarize_status(status_log: str, expo_log: str) -> ExpoStatus:
    """Combine both logs into a single status report."""
    phase = infer_phase(status_log)

    url = extract_expo_url(expo_log)
    if url:
        logger.info(f"Found Expo URL: {url}")
        phase = ExpoPhase.READY

    return ExpoStatus(
        status=phase,
        message=PHASE_MESSAGES[phase],
        url=url,
        qr_code=qr_code_url(url),
        log=expo_log[-LOG_TAIL_CHARS:],
    )
