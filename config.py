import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///todos.sqlite3")
AUTO_CREATE_TABLES = _env_bool("AUTO_CREATE_TABLES", False)

# Claude
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY") or None
CLAUDE_MODEL = os.getenv("CLAUDE_MODEL", "claude-sonnet-4-20250514")
CLAUDE_MAX_TOKENS = int(_env_float("CLAUDE_MAX_TOKENS", 1024))
CLAUDE_TIMEOUT_SECONDS = _env_float("CLAUDE_TIMEOUT_SECONDS", 30.0)

# Webhook delivery (the URL itself comes from the caller)
WEBHOOK_TIMEOUT_SECONDS = _env_float("WEBHOOK_TIMEOUT_SECONDS", 10.0)

SUMMARY_TIMEZONE = os.getenv("SUMMARY_TIMEZONE", "UTC")

# Server
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE") or None
PORT = int(_env_float("PORT", 8000))
