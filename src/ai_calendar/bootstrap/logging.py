from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

LOG_LEVEL = os.getenv("AI_CALENDAR_LOG_LEVEL", "INFO").upper()
LOG_DIR = Path(os.getenv("AI_CALENDAR_LOG_DIR", Path.cwd() / "logs"))

_INITIALIZED = False


def configure_logging(*, level: Optional[str] = None, log_dir: Optional[Path] = None) -> None:
    """Configure application-wide logging with a console and a dated file handler."""

    global _INITIALIZED
    if _INITIALIZED:
        return

    resolved_level = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    target_dir = log_dir or LOG_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d")
    log_path = target_dir / f"ai-calendar-{timestamp}.log"

    handlers: list[logging.Handler] = [
        logging.StreamHandler(),
        logging.FileHandler(log_path, encoding="utf-8"),
    ]

    logging.basicConfig(
        level=resolved_level,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )
    _INITIALIZED = True
    logging.getLogger(__name__).debug("Logging configured. Output file: %s", log_path)
