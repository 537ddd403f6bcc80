"""
TimeGrid — Entry Point.

Single entry point: `python main.py <script.json>` replays a gesture script
against the creation and resize controllers.
"""

import logging

from timegrid.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

from timegrid.replay.runner import main

if __name__ == "__main__":
    main()
