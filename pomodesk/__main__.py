"""Allow running PomoDesk as a module: python -m pomodesk."""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from .log import configure_logging
from .database.db import init_db
from .settings import load_settings
from .timer.engine import TimerEngine
from .bridge import TimerBridge
from .app import PomoDeskApp


def main() -> None:
    logger = configure_logging()
    init_db()
    settings = load_settings()

    app = QApplication(sys.argv)
    app.setApplicationName("PomoDesk")
    app.setOrganizationName("PomoDesk")

    engine = TimerEngine(settings=settings)
    bridge = TimerBridge(engine)
    app.aboutToQuit.connect(bridge.close)
    app.aboutToQuit.connect(engine.dispose)

    window = PomoDeskApp(bridge)
    window.show()
    logger.info("PomoDesk ready")

    code = app.exec()
    logging.shutdown()
    sys.exit(code)


if __name__ == "__main__":
    main()
