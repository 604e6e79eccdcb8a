"""
Expo module: startup script generation and log-based status inference.
"""

from .script import ExpoFiles, build_startup_script, NVM_SOURCE
from .status import (
    ExpoPhase,
    ExpoStatus,
    infer_phase,
    extract_expo_url,
    qr_code_url,
    summarize_status,
)

__all__ = [
    "ExpoFiles",
    "build_startup_script",
    "NVM_SOURCE",
    "ExpoPhase",
    "ExpoStatus",
    "infer_phase",
    "extract_expo_url",
    "qr_code_url",
    "summarize_status",
]
