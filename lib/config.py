"""Configuration management for the application."""
import os
from dotenv import load_dotenv

from utils.errors import ConfigError

# Load environment variables from .env file
load_dotenv()

# Supabase configuration
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY") or os.getenv("SUPABASE_SERVICE_KEY")
WORKSHOPS_TABLE = os.getenv("WORKSHOPS_TABLE", "workshops")
# Column holding the action plan in the remote table (legacy tables use "actionplan")
WORKSHOPS_ACTION_PLAN_COLUMN = os.getenv("WORKSHOPS_ACTION_PLAN_COLUMN", "actionPlan")
ATTACHMENTS_BUCKET = os.getenv("ATTACHMENTS_BUCKET", "workshop-attachments")

# Record store behaviour
WORKSHOP_FALLBACK_MODE = os.getenv("WORKSHOP_FALLBACK_MODE", "seed").strip().lower()
WORKSHOP_SEED_ON_EMPTY = os.getenv("WORKSHOP_SEED_ON_EMPTY", "true").strip().lower() not in {
    "0",
    "false",
    "no",
    "off",
}

# Gemini configuration
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash-lite")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

if WORKSHOP_FALLBACK_MODE not in {"seed", "empty"}:
    raise ConfigError(
        f"WORKSHOP_FALLBACK_MODE must be 'seed' or 'empty', got '{WORKSHOP_FALLBACK_MODE}'."
    )


def require_supabase_settings() -> tuple[str, str]:
    """Return the Supabase URL and key, failing loudly if either is missing."""
    if not SUPABASE_URL:
        raise ConfigError("SUPABASE_URL not found in environment variables. Please set it in .env file.")
    if not SUPABASE_KEY:
        raise ConfigError("SUPABASE_KEY not found in environment variables. Please set it in .env file.")
    return SUPABASE_URL, SUPABASE_KEY


def require_google_api_key() -> str:
    """Return the Gemini API key, failing loudly if it is missing."""
    if not GOOGLE_API_KEY:
        raise ConfigError("GOOGLE_API_KEY not found in environment variables. Please set it in .env file.")
    return GOOGLE_API_KEY
