"""
config.py
---------
Central configuration for the Expert Positions Bot.

Includes:
    ✔ Environment variables (.env)
    ✔ Absolute paths for data files and logs
    ✔ Telegram bot token
    ✔ Portfolio display settings
"""

import os
from dotenv import load_dotenv

# ============================================================
# Load .env file
# ============================================================

load_dotenv()


# ============================================================
# PROJECT PATHS
# ============================================================

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

DATA_DIR = os.path.join(BASE_DIR, "data")
LOG_DIR = os.getenv("LOG_DIR", os.path.join(BASE_DIR, "logs"))

POSITIONS_FILE = os.getenv("POSITIONS_FILE", os.path.join(DATA_DIR, "positions.json"))
TOPICS_FILE = os.getenv("TOPICS_FILE", os.path.join(DATA_DIR, "topics.json"))


# ============================================================
# TELEGRAM BOT
# ============================================================

TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")


# ============================================================
# PORTFOLIO DISPLAY
# ============================================================

# Forum topic where portfolio updates are posted
ENTRIES_TOPIC_NAME = os.getenv("ENTRIES_TOPIC_NAME", "entries-and-exits")

# Seconds between a close and the follow-up portfolio post
HIDE_CLOSED_DELAY_SEC = float(os.getenv("HIDE_CLOSED_DELAY_SEC", "120"))


# ============================================================
# QUICK VALIDATION
# ============================================================


def validate_config() -> list[str]:
    errors = []

    if not TELEGRAM_BOT_TOKEN:
        errors.append("❌ TELEGRAM_BOT_TOKEN is not configured.")

    if HIDE_CLOSED_DELAY_SEC < 0:
        errors.append("❌ HIDE_CLOSED_DELAY_SEC must not be negative.")

    return errors


if __name__ == "__main__":
    print("📘 Validating configuration...")
    problems = validate_config()
    if problems:
        print("\n".join(problems))
        print("⚠️ Check your .env file before continuing.\n")
    else:
        print("✔ Configuration OK.")
