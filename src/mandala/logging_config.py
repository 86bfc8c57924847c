from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOG_FILENAME = "mandala.log"

_log_path: Optional[Path] = None


def setup_logging(log_dir: Path, level: Union[int, str] = logging.INFO) -> Path:
    """Send log records to ``log_dir/mandala.log`` and the console. Runs once per process."""
    global _log_path
    if _log_path is not None:
        return _log_path
    log_path = log_dir / LOG_FILENAME

    log_dir.mkdir(parents=True, exist_ok=True)
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level if isinstance(level, int) else level.upper())
    console_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    root.addHandler(console_handler)

    _log_path = log_path
    logging.getLogger(__name__).info("Logging to %s", log_path)
    return log_path
