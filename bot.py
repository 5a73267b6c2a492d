"""
bot.py — Telegram bot handlers.

All visual formatting is delegated to style.py.
All analysis is delegated to image_analyzer.py.
Session state (the last analysis per user) is kept in-memory per user_id.
"""
from __future__ import annotations

import base64
import io
import logging
import time
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Optional

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, InputFile, Update
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

import config
import style
from assistant_replies import QUICK_PROMPTS, answer_prompt, export_filename, export_json, quick_prompt
from image_analyzer import analyze_image
from providers.base import AnalysisResult, EmptyCapture, PipelineError

logger = logging.getLogger(__name__)

# ── Callback data ──────────────────────────────────────────────────────────────
CB_PROMPT = "prompt:"        # + QuickPrompt.key
CB_EXPORT = "export"


# ── Session ────────────────────────────────────────────────────────────────────

@dataclass
class UserSession:
    analysis: Optional[AnalysisResult] = None


_sessions: dict[int, UserSession] = {}


# ── Rate limiter ───────────────────────────────────────────────────────────────
RATE_MAX_REQUESTS = 5
RATE_WINDOW_SECS  = 60
_rate_buckets: dict[int, deque] = defaultdict(deque)


def _is_rate_limited(user_id: int) -> bool:
    now    = time.monotonic()
    bucket = _rate_buckets[user_id]
    while bucket and now - bucket[0] > RATE_WINDOW_SECS:
        bucket.popleft()
    if len(bucket) >= RATE_MAX_REQUESTS:
        return True
    bucket.append(now)
    return False


def get_session(user_id: int) -> UserSession:
    if user_id not in _sessions:
        _sessions[user_id] = UserSession()
    return _sessions[user_id]


# ── Keyboards ──────────────────────────────────────────────────────────────────

def analysis_keyboard() -> InlineKeyboardMarkup:
    """Quick prompts two per row, export on its own row."""
    buttons = [
        InlineKeyboardButton(p.label, callback_data=f"{CB_PROMPT}{p.key}")
        for p in QUICK_PROMPTS
    ]
    rows = [buttons[i:i + 2] for i in range(0, len(buttons), 2)]
    rows.append([InlineKeyboardButton("📤  Export JSON", callback_data=CB_EXPORT)])
    return InlineKeyboardMarkup(rows)


# ── Handlers ───────────────────────────────────────────────────────────────────

async def cmd_start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(style.welcome(), parse_mode="MarkdownV2")


async def cmd_help(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(style.help_text(), parse_mode="MarkdownV2")


async def handle_photo(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    user_id = update.effective_user.id

    if _is_rate_limited(user_id):
        await update.message.reply_text(
            style.error_rate_limited(RATE_MAX_REQUESTS, RATE_WINDOW_SECS),
            parse_mode="MarkdownV2",
        )
        return

    _sessions[user_id] = UserSession()
    session = _sessions[user_id]

    msg = await update.message.reply_text(style.loading_vision(), parse_mode="MarkdownV2")

    photo       = update.message.photo[-1]
    photo_file  = await context.bot.get_file(photo.file_id)
    image_bytes = bytes(await photo_file.download_as_bytearray())
    image_b64   = base64.b64encode(image_bytes).decode()

    try:
        analysis = await analyze_image(image_b64)
    except EmptyCapture:
        await msg.edit_text(style.error_empty_capture(), parse_mode="MarkdownV2")
        return
    except RuntimeError:
        await msg.edit_text(style.error_no_provider(), parse_mode="MarkdownV2")
        return
    except PipelineError as exc:
        # Only reachable with VISION_FALLBACK=raise
        logger.error("Vision analysis failed: %s", exc)
        await msg.edit_text(style.error_analysis_failed(), parse_mode="MarkdownV2")
        return

    session.analysis = analysis
    await msg.edit_text(
        style.analysis_card(
            analysis,
            show_confidence=config.SHOW_CONFIDENCE,
            max_listed=config.MAX_LISTED_RESULTS,
        ),
        parse_mode="MarkdownV2",
        reply_markup=analysis_keyboard(),
    )


async def handle_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    query = update.callback_query
    await query.answer()
    session = get_session(update.effective_user.id)
    data    = query.data

    if not session.analysis:
        await query.message.reply_text(style.error_session_expired(), parse_mode="MarkdownV2")
        return

    # ── Quick prompt ──────────────────────────────────────────────────────────
    if data.startswith(CB_PROMPT):
        prompt = quick_prompt(data[len(CB_PROMPT):])
        if prompt is None:
            return
        reply = answer_prompt(prompt.prompt, session.analysis.annotations)
        await query.message.reply_text(
            style.assistant_reply(prompt.label, reply),
            parse_mode="MarkdownV2",
        )
        return

    # ── Export ────────────────────────────────────────────────────────────────
    if data == CB_EXPORT:
        payload = export_json(session.analysis).encode("utf-8")
        await query.message.reply_document(
            document=InputFile(io.BytesIO(payload), filename=export_filename()),
        )
        return


async def handle_text(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Free-text questions about the last analysis; without one, ask for a photo."""
    session = get_session(update.effective_user.id)
    if not session.analysis:
        await update.message.reply_text(style.not_a_photo(), parse_mode="MarkdownV2")
        return

    text  = update.message.text or ""
    reply = answer_prompt(text, session.analysis.annotations)
    await update.message.reply_text(
        style.assistant_reply(text[:60], reply),
        parse_mode="MarkdownV2",
    )


# ── App factory ────────────────────────────────────────────────────────────────

def build_application() -> Application:
    if not config.TELEGRAM_BOT_TOKEN:
        raise RuntimeError("TELEGRAM_BOT_TOKEN must be set in .env")

    app = Application.builder().token(config.TELEGRAM_BOT_TOKEN).build()

    app.add_handler(CommandHandler("start", cmd_start))
    app.add_handler(CommandHandler("help",  cmd_help))
    app.add_handler(MessageHandler(filters.PHOTO,                   handle_photo))
    app.add_handler(CallbackQueryHandler(handle_callback))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handle_text))
    return app
