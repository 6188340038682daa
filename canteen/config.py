"""Runtime configuration defaults for the order lifecycle, persistence and logging."""

from __future__ import annotations

import os

PREPARATION_TIME_MS = int(os.environ.get("CANTEEN_PREPARATION_MS", "5000"))
STATUS_TICK_MS = int(os.environ.get("CANTEEN_TICK_MS", "1000"))

DB_PATH = os.environ.get("CANTEEN_DB_PATH", "data/canteen.db")
DEBUG_LOG_PATH = os.environ.get("CANTEEN_DEBUG_LOG", "/tmp/canteen-debug.log")

CURRENCY_SYMBOL = "¥"
