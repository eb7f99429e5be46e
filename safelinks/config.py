import os
from pathlib import Path

from dotenv import load_dotenv

# Explicitly load .env from project root (parent of safelinks/)
ENV_PATH = Path(__file__).parent.parent / ".env"
load_dotenv(ENV_PATH)


def _csv(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(part.strip().lower() for part in value.split(",") if part.strip())


def _flag(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


ENVIRONMENT = os.getenv("ENVIRONMENT", "dev")
DATABASE_URL = os.getenv("DATABASE_URL")
PUBLIC_BASE_URL = (os.getenv("PUBLIC_BASE_URL") or "").rstrip("/")

DEFAULT_BLOCKED_SHORTENERS = (
    "bit.ly", "bitly.com", "tinyurl.com", "t.co", "goo.gl", "ow.ly", "is.gd",
    "buff.ly", "rebrand.ly", "cutt.ly", "shorturl.at", "tiny.cc", "rb.gy",
    "t.ly", "s.id", "v.gd", "lnkd.in",
)
BLOCKED_SHORTENER_DOMAINS = _csv(os.getenv("BLOCKED_SHORTENER_DOMAINS")) or DEFAULT_BLOCKED_SHORTENERS

# Stricter mode: only hosts listed here skip the confirmation page
STRICT_EXTERNAL_REDIRECTS = _flag(os.getenv("STRICT_EXTERNAL_REDIRECTS"))
TRUSTED_HOSTS = _csv(os.getenv("TRUSTED_HOSTS"))

REPORT_WEBHOOK_URL = os.getenv("REPORT_WEBHOOK_URL")
NOTIFY_TIMEOUT = float(os.getenv("NOTIFY_TIMEOUT", 5))

CODE_LENGTH = int(os.getenv("CODE_LENGTH", 6))
MAX_CODE_ATTEMPTS = int(os.getenv("MAX_CODE_ATTEMPTS", 5))
