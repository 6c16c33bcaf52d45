"""Application settings loaded from the environment and an optional .env file."""
import os

from dotenv import load_dotenv

# Existing environment variables take precedence over .env values
load_dotenv(override=False)

DATA_DIR = os.getenv("REGISTRATION_DATA_DIR", "data")
BACKUP_ENABLED = os.getenv("REGISTRATION_BACKUP", "true").strip().lower() not in {"0", "false", "no", "off"}
LOG_LEVEL = os.getenv("REGISTRATION_LOG_LEVEL", "INFO").strip().upper()


def get_store():
    """Build the file-backed record store from current settings."""
    from src.services.record_store import JsonFileRecordStore

    return JsonFileRecordStore(DATA_DIR, backup=BACKUP_ENABLED)
