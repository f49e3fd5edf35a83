"""Configuration for qtms from environment variables."""

import os
from typing import Optional

# Service
HOST = os.getenv("QTMS_HOST", "0.0.0.0")
PORT = int(os.getenv("QTMS_PORT", os.getenv("PORT", "3000")))
DEBUG = os.getenv("QTMS_DEBUG", "false").lower() == "true"

# Reproducible measurement sampling; unset means fresh OS entropy
_seed = os.getenv("QTMS_SEED")
SEED: Optional[int] = int(_seed) if _seed not in (None, "") else None

# Logging settings
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
