"""
Tests for summary.py.
"""
from __future__ import annotations

from providers.base import Annotation
from summary import count_by_kind, generate_summary


def ann(kind: str, i: int = 0) -> Annotation:
    return Annotation(id=f"{kind}-{i}", kind=kind, content=f"{kind} {i}", confidence=0.8)


class TestGenerateSummary:

    def test_nothing_found(self):
        assert generate_summary([]) == "Analysis complete. Found: no recognizable content"

    def test_two_text_one_object(self):
        anns = [ann("object"), ann("text", 1), ann("text", 2)]
        assert generate_summary(anns) == "Analysis complete. Found: 2 text elements, 1 object"

    def test_singulars(self):
        anns = [ann("text"), ann("object"), ann("landmark"), ann("logo")]
        assert generate_summary(anns) == (
            "Analysis complete. Found: 1 text element, 1 object, 1 landmark, 1 logo"
        )

    def test_plurals(self):
        anns = [ann("landmark", i) for i in range(2)] + [ann("logo", i) for i in range(3)]
        assert generate_summary(anns) == "Analysis complete. Found: 2 landmarks, 3 logos"

    def test_fixed_order_regardless_of_input_order(self):
        anns = [ann("logo"), ann("landmark"), ann("object"), ann("text")]
        summary = generate_summary(anns)
        assert summary.index("text") < summary.index("object") < summary.index("landmark") < summary.index("logo")

    def test_deterministic(self):
        anns = [ann("text", 1), ann("object")]
        assert generate_summary(anns) == generate_summary(list(anns))


class TestCountByKind:

    def test_all_kinds_present_with_zero(self):
        assert count_by_kind([]) == {"text": 0, "object": 0, "landmark": 0, "logo": 0}

    def test_counts(self):
        counts = count_by_kind([ann("text", 1), ann("text", 2), ann("logo")])
        assert counts["text"] == 2 and counts["logo"] == 1
