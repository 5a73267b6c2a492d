"""
Tests for style.py — MarkdownV2 formatting helpers.

Covers:
  - esc(): all MarkdownV2 special characters are escaped
  - confidence_level() / conf_badge()
  - welcome() / help_text(): non-empty with required keywords
  - analysis_card(): counts, listing limit, degraded header, truncation
  - error messages
"""
from __future__ import annotations

import pytest

import style
from image_analyzer import FALLBACK_ANNOTATIONS, FALLBACK_SUMMARY
from providers.base import AnalysisResult, Annotation, BoundingBox


def make_result(annotations, summary="Analysis complete. Found: 1 object", degraded=False):
    return AnalysisResult(
        timestamp="2026-01-01T00:00:00+00:00",
        source_image="QUJD",
        annotations=tuple(annotations),
        summary=summary,
        degraded=degraded,
    )


# ── esc() ─────────────────────────────────────────────────────────────────────

class TestEsc:
    MDV2_SPECIALS = r"\_*[]()~`>#+-=|{}.!"

    def test_all_special_characters_escaped(self):
        for ch in self.MDV2_SPECIALS:
            assert style.esc(ch) == f"\\{ch}", f"Character {ch!r} not escaped"

    def test_plain_text_unchanged(self):
        assert style.esc("Hello World") == "Hello World"


# ── Confidence ────────────────────────────────────────────────────────────────

class TestConfidence:

    @pytest.mark.parametrize("value, level", [
        (0.95, "high"), (0.85, "high"), (0.84, "medium"), (0.6, "medium"), (0.59, "low"), (0.0, "low"),
    ])
    def test_levels(self, value, level):
        assert style.confidence_level(value) == level

    def test_badge(self):
        assert style.conf_badge(Annotation(id="object-0", kind="object", content="Cup", confidence=0.87)) == "🟢 87%"


# ── Static cards ──────────────────────────────────────────────────────────────

class TestStaticCards:

    def test_welcome(self):
        assert "VISION ASSISTANT" in style.welcome()

    def test_help_mentions_commands(self):
        text = style.help_text()
        assert "/start" in text and "/help" in text

    def test_rate_limited_contains_numbers(self):
        text = style.error_rate_limited(5, 60)
        assert "5 photos" in text and "60 seconds" in text


# ── analysis_card() ───────────────────────────────────────────────────────────

class TestAnalysisCard:

    def test_lists_annotations_with_confidence(self):
        card = style.analysis_card(make_result([
            Annotation(id="object-0", kind="object", content="Mobile phone", confidence=0.91),
        ]))
        assert "ANALYSIS COMPLETE" in card
        assert "Mobile phone" in card
        assert "91%" in card
        assert "1 object" in card

    def test_confidence_hidden(self):
        card = style.analysis_card(
            make_result([Annotation(id="logo-0", kind="logo", content="Acme", confidence=0.5)]),
            show_confidence=False,
        )
        assert "50%" not in card

    def test_bounding_box_shown(self):
        box = BoundingBox(x=5, y=10, width=45, height=30)
        card = style.analysis_card(make_result([
            Annotation(id="text-1", kind="text", content="OPEN", confidence=0.9, bounding_box=box),
        ]))
        assert "45×30" in card

    def test_listing_limit(self):
        anns = [Annotation(id=f"text-{i}", kind="text", content=f"w{i}", confidence=0.9) for i in range(1, 13)]
        card = style.analysis_card(make_result(anns), max_listed=10)
        assert "w10" in card and "w11" not in card
        assert "and 2 more" in card

    def test_empty_result(self):
        card = style.analysis_card(make_result([], summary="Analysis complete. Found: no recognizable content"))
        assert "nothing detected" in card

    def test_degraded_header(self):
        card = style.analysis_card(make_result(FALLBACK_ANNOTATIONS, FALLBACK_SUMMARY, degraded=True))
        assert "PLACEHOLDER RESULT" in card
        assert "Sample detected text" in card

    def test_truncated_when_too_long(self):
        anns = [Annotation(id=f"text-{i}", kind="text", content="x" * 400, confidence=0.9) for i in range(1, 30)]
        card = style.analysis_card(make_result(anns), max_listed=30)
        assert len(card) <= style.MAX_MESSAGE_LEN + 2

    @pytest.mark.parametrize("content", ["a.b" * 130, "a_b" * 130, "x" * 401])
    def test_truncation_keeps_whole_lines(self, content):
        box = BoundingBox(x=1, y=2, width=3, height=4)
        anns = [
            Annotation(id=f"text-{i}", kind="text", content=content, confidence=0.9, bounding_box=box)
            for i in range(1, 30)
        ]
        card = style.analysis_card(make_result(anns), max_listed=30)
        kept, marker = card.rsplit("\n", 1)
        assert marker == "…"
        last = kept.rsplit("\n", 1)[1]
        # either a full annotation line or its full location line
        assert last.endswith("90%") or (last.strip().startswith("_at") and last.endswith("_"))
        assert not kept.endswith("\\")


class TestAssistantReply:

    def test_escapes_reply(self):
        text = style.assistant_reply("Translate", 'Found: "Hi!"')
        assert "\\!" in text
        assert "Translate" in text
