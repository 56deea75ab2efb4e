"""Logging setup shared by the CLI and the library modules."""
from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

LOG_DIR: Path = Path(__file__).resolve().parent.parent / "logs"
_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
_configured = False


def get_logger(name: str) -> logging.Logger:
    """Named logger; the root handlers get installed the first time round."""
    if not _configured:
        configure_logging()
    return logging.getLogger(name)


def configure_logging(level: str | None = None, *, log_dir: Path | None = None) -> None:
    """Console on stdout at ``level`` plus a per-day DEBUG file in ``log_dir``.

    ``level`` falls back to ``$LOG_LEVEL`` then INFO. Handlers are installed
    once; later calls retune the console and the root logger to the new level.
    """
    global _configured
    level_name = (level or os.environ.get("LOG_LEVEL") or "INFO").upper()
    numeric = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger()

    if _configured:
        ours = [h for h in root.handlers if getattr(h, "_assign_handler", None)]
        for h in ours:
            if h._assign_handler == "console":  # type: ignore[attr-defined]
                h.setLevel(numeric)
        if ours:
            has_file = any(h._assign_handler == "file" for h in ours)  # type: ignore[attr-defined]
            root.setLevel(logging.DEBUG if has_file else numeric)
        return
    _configured = True

    # someone else (pytest, an embedding app) already owns the handlers
    if root.handlers:
        return

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FMT)
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(numeric)
    console.setFormatter(formatter)
    console._assign_handler = "console"  # type: ignore[attr-defined]
    root.addHandler(console)
    root.setLevel(numeric)

    target = log_dir or LOG_DIR
    try:
        target.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(
            target / f"assign_{datetime.now().strftime('%Y-%m-%d')}.log",
            encoding="utf-8",
        )
    except OSError:
        return
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(formatter)
    fh._assign_handler = "file"  # type: ignore[attr-defined]
    root.addHandler(fh)
    root.setLevel(logging.DEBUG)
