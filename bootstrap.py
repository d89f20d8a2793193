import logging
import sys

from PySide6.QtWidgets import QApplication

from core.config import load_config
from core.log import setup_logging
from core.paths import CONFIG_PATH
from core.theme_engine import ThemeEngine
from core.themes import apply_theme
from core.style import refresh_styles
from engine.context import AppContext
from engine.worker import ThreadedTaskRunner
from ui.bridge import UIBridge
from ui.main_window import NoteGPTWindow

logger = logging.getLogger("notegpt")


def main():
    config = load_config()
    setup_logging(config.log_level)
    if not config.api_key:
        logger.warning("No apiKey in %s; completion calls will fail until one is set", CONFIG_PATH)

    app = QApplication(sys.argv)
    app.setApplicationName("NoteGPT")
    apply_theme(config.theme)
    refresh_styles()
    ThemeEngine().apply(app)

    ctx = AppContext.from_config(config)
    runner = ThreadedTaskRunner()
    ctx.on_shutdown(runner.shutdown)

    ui_bridge = UIBridge()
    ui = NoteGPTWindow(ctx, ui_bridge, runner)

    app.aboutToQuit.connect(ctx.shutdown)

    ui.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
