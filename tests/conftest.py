"""
Shared pytest fixtures.

Every test gets a clean bot session/rate-limit state and a known vision
config, so tests are isolated from each other and from the real .env.
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# ── Make the project root importable without installing the package ────────────
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(autouse=True)
def vision_config(monkeypatch):
    """Pin the config values the pipeline reads at call time."""
    import config
    monkeypatch.setattr(config, "GOOGLE_VISION_API_KEY", "test-vision-key-1234")
    monkeypatch.setattr(config, "VISION_API_URL", "https://vision.example.test/v1/images:annotate")
    monkeypatch.setattr(config, "VISION_TIMEOUT_SECS", 5.0)
    monkeypatch.setattr(config, "VISION_FALLBACK", "placeholder")
    yield config


# ── Sample provider responses ─────────────────────────────────────────────────

def poly(*points) -> dict:
    return {"vertices": [dict(zip(("x", "y"), p)) for p in points]}


def text_entry(description: str, *points) -> dict:
    entry = {"description": description}
    if points:
        entry["boundingPoly"] = poly(*points)
    return entry


@pytest.fixture
def full_response() -> dict:
    """A realistic response with every feature present."""
    return {
        "responses": [{
            "textAnnotations": [
                text_entry("OPEN\nCAFE", (5, 10), (120, 10), (120, 60), (5, 60)),
                text_entry("OPEN", (5, 10), (50, 10), (50, 40), (5, 40)),
                text_entry("CAFE", (60, 10), (120, 10), (120, 60), (60, 60)),
            ],
            "localizedObjectAnnotations": [
                {"name": "Mobile phone", "score": 0.91,
                 "boundingPoly": {"normalizedVertices": [{"x": 0.1, "y": 0.2}]}},
            ],
            "landmarkAnnotations": [
                {"description": "Eiffel Tower", "score": 0.77,
                 "boundingPoly": poly((10, 20), (30, 20), (30, 90), (10, 90))},
            ],
            "logoAnnotations": [
                {"description": "Google"},
            ],
        }]
    }
