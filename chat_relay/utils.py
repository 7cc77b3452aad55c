"""Logging helpers shared by the relay entry points."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FILENAME = "chat_relay.log"


def setup_logging(log_dir: Optional[str] = None, level: int = logging.INFO) -> None:
    """Configure console logging and, when ``log_dir`` is given, a log file there.

    Calling this more than once replaces the handlers installed by the
    previous call instead of stacking duplicates.
    """
    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        if getattr(handler, "_chat_relay", False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path / LOG_FILENAME, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler._chat_relay = True  # type: ignore[attr-defined]
        root.addHandler(handler)
