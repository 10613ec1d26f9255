"""Telegram "typing…" status kept alive for the length of a transcription."""
import asyncio
import contextlib
import logging
from typing import Optional

from telegram import Bot
from telegram.constants import ChatAction
from telegram.error import TelegramError

from voicebot.bot_client import TypingIndicator
from voicebot.constants import TELEGRAM_TYPING_INTERVAL

logger = logging.getLogger(__name__)


class TelegramTypingIndicator(TypingIndicator):
    """Re-sends ChatAction.TYPING every interval until stopped.

    Telegram clears the status on its own after ~5 s or when the bot sends a
    message, so the pulse is stopped before the transcript reply goes out.
    """

    def __init__(self, bot: Bot, chat_id: int, interval: float = TELEGRAM_TYPING_INTERVAL) -> None:
        self._bot = bot
        self._chat_id = chat_id
        self._interval = interval
        self._stopped = asyncio.Event()
        self._pulse: Optional[asyncio.Task] = None

    async def start(self) -> None:
        if self._pulse is not None:
            return
        self._stopped.clear()
        self._pulse = asyncio.create_task(self._keep_typing())

    async def stop(self) -> None:
        match self._pulse:
            case None:
                return
            case pulse:
                self._stopped.set()
                pulse.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await pulse
                self._pulse = None

    async def _keep_typing(self) -> None:
        while not self._stopped.is_set():
            try:
                await self._bot.send_chat_action(chat_id=self._chat_id, action=ChatAction.TYPING)
            except TelegramError as exc:
                logger.debug("Typing action for %s failed: %s", self._chat_id, exc)
            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(self._stopped.wait(), timeout=self._interval)
