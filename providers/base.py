"""
Shared types and base class for the vision provider.

Every provider response ends up as the same AnalysisResult, and the rest
of the app (pipeline, bot, export) doesn't care which provider produced it.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

# ── Annotation kinds (fixed output order) ─────────────────────────────────────

KIND_TEXT     = "text"
KIND_OBJECT   = "object"
KIND_LANDMARK = "landmark"
KIND_LOGO     = "logo"

KINDS: tuple[str, ...] = (KIND_TEXT, KIND_OBJECT, KIND_LANDMARK, KIND_LOGO)

# Used whenever the provider omits a score for an entry.
DEFAULT_CONFIDENCE = 0.8


# ── Errors ────────────────────────────────────────────────────────────────────

class VisionError(Exception):
    """Base class for everything the vision pipeline raises."""


class PipelineError(VisionError):
    """A failure the pipeline converts into its fallback result."""


class TransportError(PipelineError):
    """Network failure, timeout, or non-2xx status from the provider."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class MalformedResponse(PipelineError):
    """The provider answered, but not in a shape we can parse."""


class EmptyCapture(VisionError):
    """The image source produced no bytes. Never masked by the fallback."""


# ── Result types ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned rectangle in the image's pixel space."""
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class Annotation:
    id: str                         # "{kind}-{index}", unique within one result
    kind: str                       # one of KINDS
    content: str
    confidence: float               # 0–1
    bounding_box: Optional[BoundingBox] = None

    def __post_init__(self) -> None:
        if self.kind not in KINDS:
            raise ValueError(f"Unknown annotation kind: {self.kind!r}")
        if not self.content:
            raise ValueError(f"Annotation {self.id} has empty content")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Annotation {self.id} confidence out of range: {self.confidence}")

    @property
    def confidence_pct(self) -> int:
        return round(self.confidence * 100)


@dataclass(frozen=True)
class AnalysisResult:
    """One pipeline run. Built once, never mutated afterwards."""
    timestamp: str                  # ISO-8601, UTC
    source_image: str               # whatever the caller passed to analyze()
    annotations: tuple[Annotation, ...]
    summary: str
    degraded: bool = False          # True only for the placeholder fallback


# ── Abstract base ─────────────────────────────────────────────────────────────

class VisionProvider(ABC):
    """The single network boundary of the pipeline."""

    name: str

    @abstractmethod
    async def annotate(self, request_body: dict) -> dict:
        """
        POST request_body to the provider and return the decoded JSON.
        Raises TransportError or MalformedResponse on failure.
        """
        ...
