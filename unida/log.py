import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from unida.config import Config


def setup_logging(
    level=None,
    log_dir: str = None,
    log_file: str = None,
):
    """Configure console + rotating file logging for the whole process."""
    cfg = Config.logging
    level = level or cfg.level
    log_dir = Path(log_dir or cfg.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # ---- Console ----
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    # ---- File (rotating) ----
    file_handler = RotatingFileHandler(
        log_dir / (log_file or cfg.log_file),
        maxBytes=cfg.max_bytes,
        backupCount=cfg.backup_count,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    logging.basicConfig(
        level=level,
        handlers=[console_handler, file_handler],
        force=True,
    )
