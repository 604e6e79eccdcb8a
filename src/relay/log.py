"""
Logging Setup
=============

Root logger configuration for the relay process.
"""

import logging
import os
import sys


def configure_logging() -> None:
    if logging.getLogger().handlers:
        return
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stdout,
    )
