"""
style.py — Complete visual style system for the bot.

Design language:
  • Structured cards with consistent emoji icons
  • Unicode box-drawing dividers
  • Clear visual hierarchy: header → body → footer
  • MarkdownV2 throughout

All text that goes into Telegram messages should be formatted through this module.
"""
from __future__ import annotations

from providers.base import KINDS, AnalysisResult, Annotation
from summary import LABELS, count_by_kind

# ── Escape ────────────────────────────────────────────────────────────────────

def esc(text: str) -> str:
    """Escape all MarkdownV2 special characters."""
    for ch in r"\_*[]()~`>#+-=|{}.!":
        text = text.replace(ch, f"\\{ch}")
    return text


# ── Visual constants ──────────────────────────────────────────────────────────

DIV   = "━━━━━━━━━━━━━━━━━━━━━━━━━━"    # thick divider
SDIV  = "┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄┄"    # subtle divider

CONF  = {"high": "🟢", "medium": "🟡", "low": "🔴"}
KIND_ICON = {"text": "🔤", "object": "📦", "landmark": "📍", "logo": "✨"}

# Telegram rejects messages over 4096 chars
MAX_MESSAGE_LEN = 4050


def confidence_level(confidence: float) -> str:
    if confidence >= 0.85:
        return "high"
    if confidence >= 0.6:
        return "medium"
    return "low"


def conf_badge(ann: Annotation) -> str:
    return f"{CONF[confidence_level(ann.confidence)]} {ann.confidence_pct}%"


# ══════════════════════════════════════════════════════════════════════════════
# START / WELCOME
# ══════════════════════════════════════════════════════════════════════════════

def welcome() -> str:
    return (
        f"👁️ *VISION ASSISTANT*\n"
        f"{DIV}\n\n"
        f"Send me a photo or screenshot and I'll tell you\n"
        f"what's in it\\.\n\n"
        f"✨  *What I can do*\n"
        f"▸ Read text in the image\n"
        f"▸ Locate objects\n"
        f"▸ Recognise landmarks and logos\n"
        f"▸ Answer quick questions about the result\n\n"
        f"{DIV}\n"
        f"_📸 Just send a photo to get started_"
    )


def help_text() -> str:
    return (
        f"📖 *HOW TO USE*\n"
        f"{DIV}\n\n"
        f"*1️⃣  Send a photo*\n"
        f"_Camera shot or screenshot, one image at a time_\n\n"
        f"*2️⃣  Read the analysis*\n"
        f"_Text, objects, landmarks and logos with confidence_\n\n"
        f"*3️⃣  Ask a quick question*\n"
        f"_Summarize, translate, identify, read aloud_\n\n"
        f"*4️⃣  Export*\n"
        f"_Get the full result as a JSON file_\n\n"
        f"{DIV}\n"
        f"💡  *Tips for best results*\n"
        f"▸ Keep text sharp and in frame\n"
        f"▸ Avoid glare and extreme angles\n\n"
        f"{DIV}\n"
        f"_Commands: /start · /help_"
    )


# ══════════════════════════════════════════════════════════════════════════════
# LOADING MESSAGES
# ══════════════════════════════════════════════════════════════════════════════

def loading_vision() -> str:
    return (
        f"🔍 *Analysing your photo*\n"
        f"{SDIV}\n"
        f"⠋ Detecting text, objects, landmarks and logos…"
    )


# ══════════════════════════════════════════════════════════════════════════════
# ANALYSIS RESULT
# ══════════════════════════════════════════════════════════════════════════════

def annotation_line(ann: Annotation, show_confidence: bool = True) -> str:
    icon = KIND_ICON.get(ann.kind, "👁️")
    line = f"{icon} {esc(ann.content)}"
    if show_confidence:
        line += f"  {conf_badge(ann)}"
    if ann.bounding_box:
        box = ann.bounding_box
        line += f"\n      _at {esc(f'{box.x:g}, {box.y:g}')} · {esc(f'{box.width:g}×{box.height:g}')}_"
    return line


def analysis_card(
    result: AnalysisResult,
    show_confidence: bool = True,
    max_listed: int = 10,
) -> str:
    counts = count_by_kind(result.annotations)
    count_line = "   ".join(
        f"{KIND_ICON[kind]} {counts[kind]} {esc(LABELS[kind])}{'s' if counts[kind] != 1 else ''}"
        for kind in KINDS
        if counts[kind]
    ) or "_nothing detected_"

    listed = result.annotations[:max_listed]
    body = "\n".join(annotation_line(a, show_confidence) for a in listed)
    hidden = len(result.annotations) - len(listed)
    if hidden > 0:
        body += f"\n_… and {hidden} more_"

    header = "⚠️ *PLACEHOLDER RESULT*" if result.degraded else "✨ *ANALYSIS COMPLETE*"
    degraded_note = (
        f"\n_The vision service is unavailable right now — these are sample results\\._\n"
        if result.degraded else ""
    )

    text = (
        f"{header}\n"
        f"{DIV}\n"
        f"{degraded_note}\n"
        f"{esc(result.summary)}\n\n"
        f"{count_line}\n"
        f"{SDIV}\n"
        f"{body}\n"
        f"{DIV}\n"
        f"_Ask a quick question below:_"
    )
    if len(text) > MAX_MESSAGE_LEN:
        # cut on a line boundary so no escape or italic span is left open
        text = text[:MAX_MESSAGE_LEN].rsplit("\n", 1)[0] + "\n…"
    return text


def assistant_reply(prompt_label: str, reply: str) -> str:
    return (
        f"💬 *{esc(prompt_label)}*\n"
        f"{SDIV}\n"
        f"{esc(reply)}"
    )


# ══════════════════════════════════════════════════════════════════════════════
# ERROR MESSAGES
# ══════════════════════════════════════════════════════════════════════════════

def error_no_provider() -> str:
    return (
        f"⚠️ *Vision Service Not Configured*\n"
        f"{DIV}\n\n"
        f"An admin needs to add a Cloud Vision API key\\.\n\n"
        f"▸ Set `GOOGLE\\_VISION\\_API\\_KEY` in \\.env\n"
        f"▸ Restart the bot\n\n"
        f"_Keys are created at console\\.cloud\\.google\\.com_"
    )


def error_analysis_failed() -> str:
    return (
        f"❌ *Analysis Failed*\n"
        f"{DIV}\n\n"
        f"Couldn't analyse this photo\\. Try:\n"
        f"▸ Sending it again\n"
        f"▸ A sharper, better\\-lit shot\n"
    )


def error_empty_capture() -> str:
    return (
        f"📭 *No Image Received*\n"
        f"{SDIV}\n"
        f"The photo came through empty\\.\n"
        f"_Please capture it again and resend\\._"
    )


def error_session_expired() -> str:
    return "⚠️ Session expired — please send a new photo\\."


def not_a_photo() -> str:
    return (
        f"📸 *Send a Photo*\n"
        f"{SDIV}\n"
        f"I need a photo or screenshot to analyse\\.\n"
        f"_Just take a pic and send it here\\!_"
    )


def error_rate_limited(max_requests: int, window_secs: int) -> str:
    return (
        f"⏱ *Slow Down\\!*\n"
        f"{SDIV}\n"
        f"You can analyse up to *{max_requests} photos* every *{window_secs} seconds*\\.\n\n"
        f"_Please wait a moment before sending another photo\\._"
    )
