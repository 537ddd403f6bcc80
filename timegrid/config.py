"""
TimeGrid — Centralized configuration.

Loads interaction defaults from .env so the delays used by the
controllers can be tuned per deployment without code changes.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

# Load .env from project root (one level up from timegrid/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)


class Settings(BaseModel):
    """Engine settings loaded from environment variables."""

    # Delays (milliseconds)
    HOVER_DELAY_MS: int = 2000          # pointer must rest this long before a hover guide
    CLICK_DELAY_MS: int = 300           # window in which a second click becomes a dblclick
    GUIDE_RESTORE_DELAY_MS: int = 100   # creation guide re-enabled this long after a resize

    # Creation
    MIN_CREATION_MINUTES: int = 30

    # Logging / replay
    LOG_LEVEL: str = "INFO"
    REPLAY_SCRIPT_PATH: str = ""

    @field_validator(
        "HOVER_DELAY_MS", "CLICK_DELAY_MS", "GUIDE_RESTORE_DELAY_MS",
        "MIN_CREATION_MINUTES", mode="before",
    )
    @classmethod
    def parse_int(cls, v: str | int) -> int:
        return int(v)

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def parse_level(cls, v: str) -> str:
        return str(v).upper()


def _load_settings() -> Settings:
    """Load settings from environment, rejecting negative delays."""
    values = {
        "HOVER_DELAY_MS": os.getenv("HOVER_DELAY_MS", "2000"),
        "CLICK_DELAY_MS": os.getenv("CLICK_DELAY_MS", "300"),
        "GUIDE_RESTORE_DELAY_MS": os.getenv("GUIDE_RESTORE_DELAY_MS", "100"),
        "MIN_CREATION_MINUTES": os.getenv("MIN_CREATION_MINUTES", "30"),
    }

    for key, raw in values.items():
        if not raw.strip().isdigit():
            print(f"ERROR: {key} must be a non-negative integer, got {raw!r}", file=sys.stderr)
            sys.exit(1)

    return Settings(
        **values,
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        REPLAY_SCRIPT_PATH=os.getenv("REPLAY_SCRIPT_PATH", ""),
    )


# Singleton — imported by all other modules as:
#   from timegrid.config import settings
settings = _load_settings()
