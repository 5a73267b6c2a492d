"""
Cloud Vision response → ordered list of Annotation.

Two steps:
  1. parse_response() validates the raw JSON into RawEntry lists, one per
     feature. Any shape it doesn't recognise raises MalformedResponse;
     nothing is half-parsed.
  2. normalize() applies the per-kind rules (aggregate text entry dropped,
     confidence defaults, ids) and reduces polygons to boxes.

Response shape:
  {"responses": [{
      "textAnnotations":            [{"description", "boundingPoly"}, ...],
      "localizedObjectAnnotations": [{"name", "score", "boundingPoly"}, ...],
      "landmarkAnnotations":        [{"description", "score", "boundingPoly"}, ...],
      "logoAnnotations":            [{"description", "score", "boundingPoly"}, ...],
  }]}
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from providers.base import (
    DEFAULT_CONFIDENCE,
    KIND_LANDMARK,
    KIND_LOGO,
    KIND_OBJECT,
    KIND_TEXT,
    Annotation,
    MalformedResponse,
)
from providers.geometry import reduce_polygon

logger = logging.getLogger(__name__)

# Cloud Vision gives no per-token confidence for text detection.
TEXT_CONFIDENCE = 0.9

# kind → (response key, field holding the label)
FEATURE_KEYS: dict[str, tuple[str, str]] = {
    KIND_TEXT:     ("textAnnotations",            "description"),
    KIND_OBJECT:   ("localizedObjectAnnotations", "name"),
    KIND_LANDMARK: ("landmarkAnnotations",        "description"),
    KIND_LOGO:     ("logoAnnotations",            "description"),
}


@dataclass(frozen=True)
class RawEntry:
    """One validated provider entry, before any per-kind rule is applied."""
    position: int                   # index within its own feature list
    content: str
    score: Optional[float]
    vertices: Optional[list[dict]]


@dataclass
class ParsedResponse:
    features: dict[str, list[RawEntry]] = field(default_factory=dict)

    def entries(self, kind: str) -> list[RawEntry]:
        return self.features.get(kind, [])


# ── Validation ────────────────────────────────────────────────────────────────

def parse_response(data: Any) -> ParsedResponse:
    """Validate the top-level shape and every feature list. Raises MalformedResponse."""
    if not isinstance(data, dict):
        raise MalformedResponse(f"Expected a JSON object, got {type(data).__name__}")

    responses = data.get("responses")
    if not isinstance(responses, list) or not responses:
        raise MalformedResponse("Response has no 'responses' list")

    first = responses[0]
    if not isinstance(first, dict):
        raise MalformedResponse("First response is not an object")

    error = first.get("error")
    if error:
        message = error.get("message", "") if isinstance(error, dict) else str(error)
        raise MalformedResponse(f"Provider reported an error: {message}")

    parsed = ParsedResponse()
    for kind, (key, label_field) in FEATURE_KEYS.items():
        parsed.features[kind] = _parse_feature(first.get(key), kind, label_field)
    return parsed


def _parse_feature(raw: Any, kind: str, label_field: str) -> list[RawEntry]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise MalformedResponse(f"{kind} annotations are not a list")
    return [_parse_entry(item, i, kind, label_field) for i, item in enumerate(raw)]


def _parse_entry(item: Any, position: int, kind: str, label_field: str) -> RawEntry:
    where = f"{kind}[{position}]"
    if not isinstance(item, dict):
        raise MalformedResponse(f"{where} is not an object")

    content = item.get(label_field)
    if content is not None and not isinstance(content, str):
        raise MalformedResponse(f"{where}.{label_field} is not a string")

    score = item.get("score")
    if score is not None and not _is_number(score):
        raise MalformedResponse(f"{where}.score is not a number")

    vertices = None
    poly = item.get("boundingPoly")
    if poly is not None:
        if not isinstance(poly, dict):
            raise MalformedResponse(f"{where}.boundingPoly is not an object")
        vertices = poly.get("vertices")
        if vertices is not None:
            if not isinstance(vertices, list) or not all(isinstance(v, dict) for v in vertices):
                raise MalformedResponse(f"{where}.boundingPoly.vertices is not a list of points")
            if not all(v.get(axis) is None or _is_number(v[axis]) for v in vertices for axis in ("x", "y")):
                raise MalformedResponse(f"{where}.boundingPoly.vertices has a non-numeric coordinate")

    return RawEntry(
        position = position,
        content  = content or "",
        score    = float(score) if score is not None else None,
        vertices = vertices,
    )


def _is_number(value: Any) -> bool:
    # bool is an int subclass
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# ── Normalisation ─────────────────────────────────────────────────────────────

def normalize(data: Any) -> list[Annotation]:
    """
    Turn a raw provider response into annotations, kinds concatenated
    text → object → landmark → logo, provider order kept within each kind.
    """
    parsed = parse_response(data)
    annotations: list[Annotation] = []

    # First text entry is the aggregate full-text block, not a token.
    for entry in parsed.entries(KIND_TEXT)[1:]:
        ann = _to_annotation(KIND_TEXT, entry, TEXT_CONFIDENCE)
        if ann:
            annotations.append(ann)

    for kind in (KIND_OBJECT, KIND_LANDMARK, KIND_LOGO):
        for entry in parsed.entries(kind):
            confidence = entry.score if entry.score is not None else DEFAULT_CONFIDENCE
            ann = _to_annotation(kind, entry, confidence)
            if ann:
                annotations.append(ann)

    logger.debug(
        "Normalised %d annotations (%s)",
        len(annotations),
        ", ".join(f"{k}={len(parsed.entries(k))}" for k in FEATURE_KEYS),
    )
    return annotations


def _to_annotation(kind: str, entry: RawEntry, confidence: float) -> Optional[Annotation]:
    if not entry.content.strip():
        logger.warning("Skipping %s-%d: empty content", kind, entry.position)
        return None
    return Annotation(
        id           = f"{kind}-{entry.position}",
        kind         = kind,
        content      = entry.content,
        confidence   = min(1.0, max(0.0, confidence)),
        bounding_box = reduce_polygon(entry.vertices),
    )
