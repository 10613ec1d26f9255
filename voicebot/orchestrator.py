"""VoiceOrchestrator — download, transcribe, reply, clean up. Transport-agnostic."""
import logging
import time
from pathlib import Path
from typing import Optional

from voicebot.bot_client import BotClient
from voicebot.config import Config
from voicebot.constants import (
    ERR_DOWNLOAD_FAILED,
    MSG_DOWNLOADED,
    MSG_PROCESSING_FAILED,
    MSG_TIMES_CONVERSION,
    MSG_TIMES_PREFIX,
    MSG_TIMES_TRANSCRIPTION,
    MSG_TIMINGS_LOG,
    MSG_TOTAL_TIME,
    MSG_TRANSCRIPTION_EMPTY,
    TEMP_VOICE_TEMPLATE,
)
from voicebot.message_handler import VoiceMessage, should_process
from voicebot.tempfiles import message_temp_path, scoped_temp_files
from voicebot.transcription.client import TranscriptionClient

logger = logging.getLogger(__name__)


# ── pure helpers (module-level so tests can import them directly) ──────────────


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def format_timings(download_ms: int, transcription_ms: int, conversion_ms: Optional[int]) -> str:
    """Times: Download - Xms[, Conversion - Yms], Transcription - Zms"""
    match conversion_ms:
        case None:
            conversion = ""
        case ms:
            conversion = MSG_TIMES_CONVERSION % ms
    return MSG_TIMES_PREFIX % download_ms + conversion + MSG_TIMES_TRANSCRIPTION % transcription_ms


# ── orchestrator ──────────────────────────────────────────────────────────────


class VoiceOrchestrator:
    """Turns one private voice message into a transcript reply and a timing reply."""

    def __init__(self, bot: BotClient, transcriber: TranscriptionClient, config: Config) -> None:
        self._bot = bot
        self._transcriber = transcriber
        self._temp_dir = config.temp_dir

    async def handle(self, message: VoiceMessage) -> None:
        if not should_process(message).should_respond:
            return

        sender = message.sender
        temp_path = message_temp_path(self._temp_dir, TEMP_VOICE_TEMPLATE, message.file_key)
        start = time.monotonic()
        try:
            with scoped_temp_files(temp_path):
                await self._process(message, sender, temp_path)
        except Exception:
            logger.exception("Error processing private voice message %s", message.message_id)
            await self._bot.send_message(sender, MSG_PROCESSING_FAILED)
        finally:
            logger.info(MSG_TOTAL_TIME, message.message_id, time.monotonic() - start)

    async def _process(self, message: VoiceMessage, sender: str, temp_path: Path) -> None:
        download_start = time.monotonic()
        payload = await self._bot.download_voice(message)
        match payload:
            case None | b"":
                raise RuntimeError(ERR_DOWNLOAD_FAILED)
            case _:
                pass
        download_ms = _elapsed_ms(download_start)

        temp_path.write_bytes(payload)
        logger.info(MSG_DOWNLOADED, temp_path)
        audio = temp_path.read_bytes()

        transcription_start = time.monotonic()
        async with self._bot.typing(sender):
            result = await self._transcriber.transcribe(audio, message.file_key)
        transcription_ms = _elapsed_ms(transcription_start)

        await self._bot.send_message(sender, result.text or MSG_TRANSCRIPTION_EMPTY)

        timings = format_timings(download_ms, transcription_ms, result.conversion_ms)
        logger.info(MSG_TIMINGS_LOG, message.message_id, timings)
        await self._bot.send_message(sender, timings)
