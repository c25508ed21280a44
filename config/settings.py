"""
Configuration Management

Loads application configuration from environment variables (and a local .env file).
"""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

ROOT_DIR = Path(__file__).parent.parent
DATA_DIR = ROOT_DIR / "data"
BACKUP_DIR = ROOT_DIR / "backups"

# Database
DATABASE_URL = os.getenv("LYRICMATCH_DATABASE_URL", f"sqlite:///{DATA_DIR / 'lyricmatch.db'}")

# Flask
SECRET_KEY = os.getenv("LYRICMATCH_SECRET_KEY", "dev-secret-change-in-production")

# Login lockout
MAX_FAILED_ATTEMPTS = int(os.getenv("LYRICMATCH_MAX_FAILED_ATTEMPTS", "3"))
LOCKOUT_SECONDS = int(os.getenv("LYRICMATCH_LOCKOUT_SECONDS", "30"))

# Number of times an add is retried when another writer took the same rank
RANK_RETRIES = int(os.getenv("LYRICMATCH_RANK_RETRIES", "3"))

# Lyrics acquisition
GENIUS_ACCESS_TOKEN = os.getenv("GENIUS_ACCESS_TOKEN")
GENIUS_API_URL = os.getenv("GENIUS_API_URL", "https://api.genius.com")
LYRICS_REQUEST_TIMEOUT = int(os.getenv("LYRICS_REQUEST_TIMEOUT", "10"))

LOG_LEVEL = os.getenv("LYRICMATCH_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
