"""Settings. Module level constants, overridable through environment variables."""

import os
from typing import Optional

# Fixed by the wire protocol: tile ids are y*8+x and must fit in one byte
BOARD_SIZE = 8

CARD_DRAW_INTERVAL = int(os.environ.get("TOPSY_CARD_DRAW_INTERVAL", "2"))

LOG_LEVEL = os.environ.get("TOPSY_LOG_LEVEL", "INFO").upper()

HOST = os.environ.get("TOPSY_HOST", "127.0.0.1")
PORT = int(os.environ.get("TOPSY_PORT", "3000"))


def _optional_int(name: str) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return None
    return int(raw)


# Seed for the card draws. Unset means a fresh random source per match.
RANDOM_SEED = _optional_int("TOPSY_RANDOM_SEED")
