"""Settings read from the environment (and an optional .env file)."""

import os

from dotenv import load_dotenv

load_dotenv()

# Neutral slope; used when slope play is off or no tee slope is known.
DEFAULT_SLOPE: int = int(os.getenv("GOLF_DEFAULT_SLOPE", "113"))

# Players at or above this exact handicap are not raised after a round.
HANDICAP_CEILING: float = float(os.getenv("GOLF_HANDICAP_CEILING", "12"))
HANDICAP_STEP: float = float(os.getenv("GOLF_HANDICAP_STEP", "1"))

LOG_LEVEL: str = os.getenv("GOLF_LOG_LEVEL", "INFO").upper()

__all__ = ["DEFAULT_SLOPE", "HANDICAP_CEILING", "HANDICAP_STEP", "LOG_LEVEL"]
