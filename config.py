"""
Central configuration — reads from .env file.

Every module reads config.X at call time, so tests (and anything else) can
monkeypatch a value here and have it picked up on the next call.
"""
import os
from dotenv import load_dotenv

load_dotenv()

# ── Telegram ──────────────────────────────────────────────────────────────────
# Only required by the bot itself, not by the vision pipeline.
TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")

# ── Cloud Vision ──────────────────────────────────────────────────────────────
# Key is sent as the ?key= query parameter. GOOGLE_API_KEY is accepted as a
# fallback so a single Google key can be shared with other tools.
GOOGLE_VISION_API_KEY: str | None = (
    os.getenv("GOOGLE_VISION_API_KEY") or os.getenv("GOOGLE_API_KEY") or None
)
VISION_API_URL: str        = os.getenv("VISION_API_URL", "https://vision.googleapis.com/v1/images:annotate")
VISION_TIMEOUT_SECS: float = float(os.getenv("VISION_TIMEOUT_SECS", "30"))

# What analyze() returns when the provider call or parsing fails:
#   placeholder → fixed placeholder result, failure only visible in the logs (default)
#   raise       → re-raise the TransportError / MalformedResponse
VISION_FALLBACK: str = os.getenv("VISION_FALLBACK", "placeholder").strip().lower()

# ── Logging ───────────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Log file lives here (data/bot.log)
DATA_DIR: str = os.getenv("DATA_DIR", "data")

# ── Bot behaviour ─────────────────────────────────────────────────────────────
# Show per-annotation confidence in the analysis card
SHOW_CONFIDENCE: bool = os.getenv("SHOW_CONFIDENCE", "true").lower() == "true"
# How many annotations the analysis card lists before "… and N more"
MAX_LISTED_RESULTS: int = int(os.getenv("MAX_LISTED_RESULTS", "10"))
