"""
summary.py — one-line description of an analysis, derived only from its
annotations. Deterministic: the same annotations always give the same text.
"""
from __future__ import annotations

from typing import Iterable

from providers.base import KINDS, KIND_LANDMARK, KIND_LOGO, KIND_OBJECT, KIND_TEXT, Annotation

SUMMARY_PREFIX = "Analysis complete. Found: "
NOTHING_FOUND  = "no recognizable content"

# kind → singular label ("s" appended for plural)
LABELS = {
    KIND_TEXT:     "text element",
    KIND_OBJECT:   "object",
    KIND_LANDMARK: "landmark",
    KIND_LOGO:     "logo",
}


def count_by_kind(annotations: Iterable[Annotation]) -> dict[str, int]:
    counts = {kind: 0 for kind in KINDS}
    for ann in annotations:
        counts[ann.kind] += 1
    return counts


def generate_summary(annotations: Iterable[Annotation]) -> str:
    counts = count_by_kind(annotations)
    parts = [
        f"{counts[kind]} {LABELS[kind]}{'s' if counts[kind] > 1 else ''}"
        for kind in KINDS
        if counts[kind] > 0
    ]
    return SUMMARY_PREFIX + (", ".join(parts) if parts else NOTHING_FOUND)
