"""
key_store.py — single lookup point for API keys.

Keys come from config (environment / .env). Callers never read the env var
directly, and never log a key without passing it through mask() first.

Key names (env vars are the uppercase equivalent):
  google_vision_api_key  →  GOOGLE_VISION_API_KEY  (falls back to GOOGLE_API_KEY)
"""
from __future__ import annotations

import logging
import os
from typing import Optional

import config

logger = logging.getLogger(__name__)

KEY_NAMES = ("google_vision_api_key",)


def get(key_name: str) -> Optional[str]:
    """
    Return the value for key_name, checking config first then env.
    Returns None if not set anywhere.
    """
    cfg_val = getattr(config, key_name.upper(), None)
    if cfg_val:
        return cfg_val

    env_val = os.getenv(key_name.upper())
    if not env_val:
        logger.debug("key_store: %s not set", key_name)
    return env_val or None


def get_all_keys() -> dict[str, Optional[str]]:
    """Return all known keys with their current values (mask before display)."""
    return {name: get(name) for name in KEY_NAMES}


def mask(value: Optional[str]) -> str:
    """Return a masked version safe to show in logs and Telegram."""
    if not value:
        return "❌ not set"
    if len(value) <= 8:
        return "✅ ****"
    return f"✅ {value[:4]}{'*' * (len(value) - 8)}{value[-4:]}"
