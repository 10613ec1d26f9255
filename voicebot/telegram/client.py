"""TelegramClient — event-driven transport via python-telegram-bot."""
import logging
from typing import Callable, Optional

from telegram import Update
from telegram.constants import ChatType
from telegram.ext import Application, ContextTypes
from telegram.ext import MessageHandler as TGMessageHandler
from telegram.ext import filters

from voicebot.bot_client import BotClient, OnVoice, TypingIndicator
from voicebot.config import Config
from voicebot.constants import MSG_CONNECTED, MSG_DISCONNECTED, MSG_SEND_FAIL
from voicebot.message_handler import VoiceMessage
from voicebot.telegram.typing import TelegramTypingIndicator

logger = logging.getLogger(__name__)


class TelegramClient(BotClient):

    def __init__(self, config: Config) -> None:
        self._token = config.telegram_bot_token
        self._mode = config.mode.value
        self._app: Optional[Application] = None

    # ── BotClient interface ───────────────────────────────────────────────────

    def run(self, on_voice: OnVoice) -> None:
        """Poll until SIGINT/SIGTERM, then close the connection and return."""
        self._app = (
            Application.builder()
            .token(self._token)
            .concurrent_updates(True)
            .post_init(self._on_connected)
            .post_shutdown(self._on_disconnected)
            .build()
        )
        self._app.add_handler(
            TGMessageHandler(filters.UpdateType.MESSAGE, self._make_handler(on_voice))
        )
        self._app.run_polling(allowed_updates=[Update.MESSAGE])

    async def send_message(self, to: str, text: str) -> bool:
        match self._app:
            case None:
                logger.error("send_message called before run()")
                return False
            case app:
                try:
                    await app.bot.send_message(chat_id=int(to), text=text)
                    return True
                except Exception as exc:
                    logger.error(MSG_SEND_FAIL, exc)
                    return False

    async def download_voice(self, message: VoiceMessage) -> Optional[bytes]:
        match message.voice:
            case None:
                return None
            case voice:
                tg_file = await voice.get_file()
                return bytes(await tg_file.download_as_bytearray()) or None

    def typing(self, to: str) -> TypingIndicator:
        if self._app is None:
            raise RuntimeError("typing called before run()")
        return TelegramTypingIndicator(self._app.bot, int(to))

    # ── helpers (also used in tests) ─────────────────────────────────────────

    @staticmethod
    def _update_to_message(update: Update) -> Optional[VoiceMessage]:
        if update.message is None or update.effective_chat is None:
            return None
        msg, chat = update.message, update.effective_chat
        return VoiceMessage(
            sender=str(chat.id),
            message_id=msg.message_id,
            is_private=chat.type == ChatType.PRIVATE,
            voice=msg.voice,
        )

    # ── internal handler factory ──────────────────────────────────────────────

    def _make_handler(self, on_voice: OnVoice) -> Callable:
        async def _handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            msg = self._update_to_message(update)
            match msg:
                case None:
                    return
                case message:
                    await on_voice(message)

        return _handler

    async def _on_connected(self, application: Application) -> None:
        logger.info(MSG_CONNECTED, self._mode)

    async def _on_disconnected(self, application: Application) -> None:
        logger.info(MSG_DISCONNECTED)
