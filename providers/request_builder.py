"""
Builds the Cloud Vision images:annotate request body.

All four features are requested in a single call, each with its own cap.
"""
from __future__ import annotations

import re

# (feature type, maxResults), in the order sent to the provider
FEATURES: tuple[tuple[str, int], ...] = (
    ("TEXT_DETECTION",      50),
    ("OBJECT_LOCALIZATION", 20),
    ("LANDMARK_DETECTION",  10),
    ("LOGO_DETECTION",      10),
)

# Anchored at the start; anything that doesn't match exactly is left alone.
_DATA_URL_PREFIX = re.compile(r"^data:image/[a-z0-9.+-]+;base64,")


def strip_data_url(image: str) -> str:
    """Remove a leading ``data:image/<type>;base64,`` prefix, if present."""
    m = _DATA_URL_PREFIX.match(image)
    if m:
        return image[m.end():]
    return image


def build_request(image: str) -> dict:
    """
    Wrap a base64 image (optionally data-URL prefixed) in a multi-feature
    request. The payload is passed through as-is, never re-encoded.
    """
    return {
        "requests": [{
            "image":    {"content": strip_data_url(image)},
            "features": [
                {"type": feature_type, "maxResults": cap}
                for feature_type, cap in FEATURES
            ],
        }]
    }
