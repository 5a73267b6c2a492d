"""
assistant_replies.py — chat replies and export built from an AnalysisResult.

Replies are canned: they pick annotations out of the last analysis and
phrase them, no language model involved.
"""
from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Iterable, Optional

from providers.base import KIND_OBJECT, KIND_TEXT, AnalysisResult, Annotation

# How many text elements the "summarize" reply quotes before "..."
SUMMARIZE_PREVIEW = 3


@dataclass(frozen=True)
class QuickPrompt:
    key: str        # callback data suffix
    label: str      # button text
    prompt: str     # what the user is "asking"


QUICK_PROMPTS: tuple[QuickPrompt, ...] = (
    QuickPrompt("summarize", "Summarize text",   "Summarize all the text you can see in this image"),
    QuickPrompt("translate", "Translate",        "Translate any text in this image to English"),
    QuickPrompt("identify",  "Identify objects", "List all objects and items you can identify"),
    QuickPrompt("read",      "Read aloud",       "Read out all text content in natural language"),
)


def quick_prompt(key: str) -> Optional[QuickPrompt]:
    return next((p for p in QUICK_PROMPTS if p.key == key), None)


def answer_prompt(prompt: str, annotations: Iterable[Annotation]) -> str:
    """Reply to a free-text or quick prompt, based on keywords in the prompt."""
    results = list(annotations)
    texts   = [a for a in results if a.kind == KIND_TEXT]
    objects = [a for a in results if a.kind == KIND_OBJECT]
    p = prompt.lower()

    if "summarize" in p:
        if texts:
            preview = ", ".join(a.content for a in texts[:SUMMARIZE_PREVIEW])
            more = "..." if len(texts) > SUMMARIZE_PREVIEW else ""
            return f"I found {len(texts)} text elements: {preview}{more}"
        return "I can see the image but couldn't detect specific text to summarize."

    if "translate" in p:
        if texts:
            return f'Here\'s the text I found that could be translated: "{texts[0].content}"'
        return "I didn't detect any text that needs translation in this image."

    if "object" in p or "identify" in p:
        if objects:
            return f"I can identify these objects: {', '.join(a.content for a in objects)}"
        return "I can see the image but couldn't identify specific objects clearly."

    return (
        f"Based on the analysis, I can help you with the {len(results)} items I detected. "
        f"Could you be more specific about what you'd like to know?"
    )


# ── Export ────────────────────────────────────────────────────────────────────

def export_analysis(result: AnalysisResult) -> dict:
    return {
        "timestamp": result.timestamp,
        "summary":   result.summary,
        "results": [
            {"type": a.kind, "content": a.content, "confidence": a.confidence}
            for a in result.annotations
        ],
    }


def export_json(result: AnalysisResult) -> str:
    return json.dumps(export_analysis(result), indent=2, ensure_ascii=False)


def export_filename(now_ms: Optional[int] = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"vision-analysis-{now_ms}.json"
