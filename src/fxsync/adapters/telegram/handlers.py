# src/fxsync/adapters/telegram/handlers.py
"""
Telegram Handlers - Command Processing and User Interaction

This module contains the bot's command handlers. It parses command
arguments, calls the query service off the event loop, and replies with
formatted text. Handlers find their services in ``context.bot_data``,
filled in by fxsync.adapters.telegram.bot.

Files that USE this module:
- fxsync.adapters.telegram.bot (build_handlers registers them)
- tests.test_handlers (unit tests)

Files that this module USES:
- fxsync.application.query_service (QueryService for conversions and history)
- fxsync.application.sync_scheduler (SyncScheduler.status for /status)
- fxsync.adapters.formatting.formatter (reply formatting)
- fxsync.shared.validators (argument parsing)
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from telegram import Update
from telegram.ext import BaseHandler, CommandHandler, ContextTypes

from fxsync.adapters.formatting.formatter import USAGE, format_conversion, format_range, format_status
from fxsync.application.query_service import QueryService
from fxsync.application.sync_scheduler import SyncScheduler
from fxsync.domain.models import ConversionRequest
from fxsync.shared.validators import parse_amount, parse_currency_code, parse_iso_date

logger = logging.getLogger(__name__)

QUERY_SERVICE_KEY = "query_service"
SCHEDULER_KEY = "sync_scheduler"

CONVERT_USAGE = "Usage: /convert FROM TO AMOUNT [YYYY-MM-DD]\nExample: /convert USD GBP 110"
HISTORY_USAGE = "Usage: /history CODE START END\nExample: /history USD 2024-01-01 2024-01-10"


def parse_convert_args(args: List[str]) -> Optional[ConversionRequest]:
    """Build a ConversionRequest from /convert arguments, or None if malformed."""
    if len(args) not in (3, 4):
        return None
    from_code = parse_currency_code(args[0])
    to_code = parse_currency_code(args[1])
    amount = parse_amount(args[2])
    if from_code is None or to_code is None or amount is None:
        return None
    day = None
    if len(args) == 4:
        day = parse_iso_date(args[3])
        if day is None:
            return None
    return ConversionRequest(from_currency=from_code, to_currency=to_code, amount=amount, date=day)


# --- /start, /help ---
async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(USAGE)


# --- /convert: live or historical conversion ---
async def convert(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /convert FROM TO AMOUNT [YYYY-MM-DD].

    Uses latest provider rates, or the rates of the given day.
    """
    request = parse_convert_args(context.args or [])
    if request is None:
        await update.message.reply_text(CONVERT_USAGE)
        return

    service: QueryService = context.bot_data[QUERY_SERVICE_KEY]
    result = await asyncio.to_thread(service.convert, request)
    await update.message.reply_text(format_conversion(request, result))


# --- /history: stored daily rates for a currency ---
async def history(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /history CODE START END over the stored daily snapshots."""
    args = context.args or []
    if len(args) != 3:
        await update.message.reply_text(HISTORY_USAGE)
        return

    code = parse_currency_code(args[0])
    start_day = parse_iso_date(args[1])
    end_day = parse_iso_date(args[2])
    if code is None or start_day is None or end_day is None:
        await update.message.reply_text(HISTORY_USAGE)
        return

    service: QueryService = context.bot_data[QUERY_SERVICE_KEY]
    result = await asyncio.to_thread(service.get_range, code, start_day, end_day)
    await update.message.reply_text(format_range(code, result))


# --- /status: sync scheduler state ---
async def status(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    scheduler: SyncScheduler = context.bot_data[SCHEDULER_KEY]
    try:
        latest_day = await asyncio.to_thread(scheduler.store.latest_date)
    except Exception:
        logger.exception("Failed to read latest stored day")
        latest_day = None
    await update.message.reply_text(format_status(scheduler.status(), latest_day))


async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log errors raised inside handlers."""
    logger.error("Unhandled error while processing update %s", update, exc_info=context.error)


def build_handlers() -> List[BaseHandler]:
    """Create every command handler the bot serves."""
    return [
        CommandHandler(["start", "help"], start),
        CommandHandler("convert", convert),
        CommandHandler("history", history),
        CommandHandler("status", status),
    ]
