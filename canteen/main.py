"""Entry point for the canteen Textual app."""

from __future__ import annotations

import logging
from functools import partial
from pathlib import Path

from canteen.canteen_app import CanteenApp
from canteen.checkout import CheckoutEngine
from canteen.config import DB_PATH, DEBUG_LOG_PATH
from canteen.persistence import save_feedback
from canteen.scheduler import ThreadScheduler


def configure_logging(log_path: str | Path = DEBUG_LOG_PATH, level: int = logging.DEBUG) -> None:
    """Send canteen logs to an append-only file so they never draw over the terminal UI."""
    log_file = Path(log_path)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    root = logging.getLogger("canteen")
    root.setLevel(level)
    root.addHandler(handler)


def main() -> None:
    """Run the Textual application."""
    configure_logging()
    scheduler = ThreadScheduler()
    engine = CheckoutEngine(scheduler, feedback_sink=partial(save_feedback, db_path=DB_PATH))
    try:
        CanteenApp(engine, db_path=DB_PATH).run()
    finally:
        scheduler.shutdown()


if __name__ == "__main__":
    main()
