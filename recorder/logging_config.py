# recorder/logging_config.py — configuration unique du logger racine (stdout, niveaux en couleur)
import logging
import sys
from typing import Optional

LOG_FORMAT = "[%(levelname)s] %(name)s - %(message)s"


class _ColoredFormatter(logging.Formatter):
    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        color = self.COLORS.get(record.levelname, "")
        if color:
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def setup_logging(*, debug: bool = False, level: Optional[int] = None) -> logging.Logger:
    """
    Configure the root logger once (stdout handler, coloured level names).

    Safe to call from every create_app(): later calls only adjust the level.
    """
    root = logging.getLogger()
    target = level if level is not None else (logging.DEBUG if debug else logging.INFO)
    root.setLevel(target)

    if getattr(root, "_recorder_logging_configured", False):
        return root

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_ColoredFormatter(LOG_FORMAT))
    root.addHandler(handler)

    for noisy in ("urllib3", "cloudinary"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    werkzeug = logging.getLogger("werkzeug")
    werkzeug.handlers = []
    werkzeug.propagate = True

    root._recorder_logging_configured = True  # type: ignore[attr-defined]
    return root


__all__ = ["setup_logging"]
