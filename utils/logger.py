"""
utils/logger.py
----------------
Central logging setup.
Every module logs through a logger configured here.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from config import LOG_DIR


# ============================================================
# 🔵 CONFIGURE GLOBAL LOGGING
# ============================================================

def configure_logging(log_dir: str = LOG_DIR, level: int = logging.INFO):
    """
    Unified logging setup (console + rotating file).
    Called once from main.py.
    """

    os.makedirs(log_dir, exist_ok=True)

    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Avoid stacking handlers when called twice
    if logging.getLogger().hasHandlers():
        logging.getLogger().handlers.clear()

    # -----------------------------
    # Console (stream handler)
    # -----------------------------
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(log_format))

    # -----------------------------
    # Rotating file
    # -----------------------------
    file_handler = RotatingFileHandler(
        os.path.join(log_dir, "positions_bot.log"),
        maxBytes=5_000_000,   # 5 MB
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(log_format))

    # -----------------------------
    # Root logger
    # -----------------------------
    logging.basicConfig(
        level=level,
        handlers=[console_handler, file_handler]
    )

    logging.getLogger("telegram").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logging.info("📘 Logging configured (file + console).")
