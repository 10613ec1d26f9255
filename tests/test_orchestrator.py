"""TDD: VoiceOrchestrator tests written FIRST"""
import asyncio
import re
from typing import Optional

import httpx
import pytest

from voicebot.bot_client import BotClient, TypingIndicator
from voicebot.config import Config, TranscriptionMode
from voicebot.constants import MSG_PROCESSING_FAILED, MSG_TRANSCRIPTION_EMPTY
from voicebot.message_handler import VoiceMessage
from voicebot.orchestrator import VoiceOrchestrator, format_timings
from voicebot.transcription.client import TranscriptionClient, TranscriptResult
from voicebot.transcription.deepgram import DeepgramTranscriptionClient
from voicebot.transcription.retry import RetryPolicy
from voicebot.transcription.whisper_api import WhisperApiTranscriptionClient

TIMES_PATTERN = re.compile(r"Times: Download - \d+ms, Transcription - \d+ms")
TIMES_WITH_CONVERSION = re.compile(
    r"Times: Download - \d+ms, Conversion - \d+ms, Transcription - \d+ms"
)


class FakeTyping(TypingIndicator):

    def __init__(self, bot: "FakeBot", to: str) -> None:
        self._bot = bot
        self._to = to

    async def start(self) -> None:
        self._bot.typing_log.append(f"start:{self._to}")
        self._bot.events.append("typing-start")

    async def stop(self) -> None:
        self._bot.typing_log.append(f"stop:{self._to}")
        self._bot.events.append("typing-stop")


class FakeBot(BotClient):

    def __init__(self, payload: Optional[bytes] = b"ogg-bytes") -> None:
        self.payload = payload
        self.sent: list[tuple[str, str]] = []
        self.downloads: list[int] = []
        self.typing_log: list[str] = []
        self.events: list[str] = []

    def run(self, on_voice) -> None:
        raise NotImplementedError

    async def send_message(self, to: str, text: str) -> bool:
        self.sent.append((to, text))
        self.events.append("send")
        return True

    async def download_voice(self, message: VoiceMessage) -> Optional[bytes]:
        self.downloads.append(message.message_id)
        self.events.append("download")
        return self.payload

    def typing(self, to: str) -> TypingIndicator:
        return FakeTyping(self, to)


class StaticTranscriber(TranscriptionClient):

    def __init__(self, result: TranscriptResult) -> None:
        self.result = result
        self.calls: list[tuple[bytes, str]] = []

    async def transcribe(self, audio: bytes, file_key: str) -> TranscriptResult:
        self.calls.append((audio, file_key))
        return self.result


class ExplodingTranscriber(TranscriptionClient):

    async def transcribe(self, audio: bytes, file_key: str) -> TranscriptResult:
        raise RuntimeError("backend down")


def make_config(tmp_path, mode=TranscriptionMode.API) -> Config:
    return Config(
        telegram_bot_token="token",
        log_level="INFO",
        mode=mode,
        model_size="base",
        model_dir=None,
        whisper_device="cpu",
        whisper_compute_type="int8",
        whisper_api_key="wa-key",
        deepgram_key="dg-key",
        temp_dir=tmp_path,
    )


def voice_message(message_id: int = 101, sender: str = "555", *, private=True, voice=True):
    return VoiceMessage(
        sender=sender,
        message_id=message_id,
        is_private=private,
        voice=object() if voice else None,
    )


# ── timing summary ────────────────────────────────────────────────────────────


def test_format_timings_without_conversion():
    assert format_timings(12, 340, None) == "Times: Download - 12ms, Transcription - 340ms"


def test_format_timings_with_conversion():
    assert format_timings(12, 340, 55) == (
        "Times: Download - 12ms, Conversion - 55ms, Transcription - 340ms"
    )


def test_format_timings_keeps_zero_conversion():
    assert ", Conversion - 0ms" in format_timings(1, 2, 0)


# ── filter ────────────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "message",
    [
        voice_message(private=False),
        voice_message(voice=False),
        voice_message(private=False, voice=False),
    ],
)
async def test_non_qualifying_messages_have_no_side_effects(tmp_path, message):
    bot = FakeBot()
    transcriber = StaticTranscriber(TranscriptResult(text="never"))
    orchestrator = VoiceOrchestrator(bot, transcriber, make_config(tmp_path))

    await orchestrator.handle(message)

    assert bot.downloads == []
    assert bot.sent == []
    assert bot.typing_log == []
    assert transcriber.calls == []
    assert list(tmp_path.iterdir()) == []


# ── happy paths ───────────────────────────────────────────────────────────────


async def test_whisper_api_scenario_replies_text_then_timings(tmp_path):
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json={"transcript": "hello world"})
    )
    transcriber = WhisperApiTranscriptionClient(
        api_key="wa-key",
        model_size="base",
        retry_policy=RetryPolicy(),
        timeout=5.0,
        transport=transport,
    )
    bot = FakeBot()
    orchestrator = VoiceOrchestrator(bot, transcriber, make_config(tmp_path))

    await orchestrator.handle(voice_message(101, "555"))

    assert [to for to, _ in bot.sent] == ["555", "555"]
    assert bot.sent[0][1] == "hello world"
    assert TIMES_PATTERN.fullmatch(bot.sent[1][1])
    assert bot.typing_log == ["start:555", "stop:555"]
    assert list(tmp_path.iterdir()) == []


async def test_buffer_passed_to_transcriber_matches_download(tmp_path):
    bot = FakeBot(payload=b"opus-frames")
    transcriber = StaticTranscriber(TranscriptResult(text="ok"))
    orchestrator = VoiceOrchestrator(bot, transcriber, make_config(tmp_path))

    await orchestrator.handle(voice_message(7))

    assert transcriber.calls == [(b"opus-frames", "555_7")]


async def test_typing_covers_only_transcription(tmp_path):
    bot = FakeBot()
    orchestrator = VoiceOrchestrator(
        bot, StaticTranscriber(TranscriptResult(text="hi")), make_config(tmp_path)
    )

    await orchestrator.handle(voice_message())

    assert bot.events == ["download", "typing-start", "typing-stop", "send", "send"]


async def test_conversion_time_is_reported_when_present(tmp_path):
    bot = FakeBot()
    transcriber = StaticTranscriber(TranscriptResult(text="local words", conversion_ms=42))
    orchestrator = VoiceOrchestrator(bot, transcriber, make_config(tmp_path, TranscriptionMode.LOCAL))

    await orchestrator.handle(voice_message())

    assert bot.sent[0][1] == "local words"
    assert TIMES_WITH_CONVERSION.fullmatch(bot.sent[1][1])
    assert ", Conversion - 42ms," in bot.sent[1][1]


async def test_empty_transcript_sends_failure_notice_and_timings(tmp_path):
    bot = FakeBot()
    orchestrator = VoiceOrchestrator(
        bot, StaticTranscriber(TranscriptResult(text="")), make_config(tmp_path)
    )

    await orchestrator.handle(voice_message())

    assert bot.sent[0][1] == MSG_TRANSCRIPTION_EMPTY
    assert TIMES_PATTERN.fullmatch(bot.sent[1][1])


# ── failures ──────────────────────────────────────────────────────────────────


async def test_deepgram_exhaustion_sends_only_generic_failure(tmp_path):
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(500)

    transcriber = DeepgramTranscriptionClient(
        api_key="dg-key",
        retry_policy=RetryPolicy(attempts=3, base_delay=0.0),
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )
    bot = FakeBot()
    orchestrator = VoiceOrchestrator(bot, transcriber, make_config(tmp_path, TranscriptionMode.DEEPGRAM))

    await orchestrator.handle(voice_message(102, "777"))

    assert len(requests) == 3
    assert bot.sent == [("777", MSG_PROCESSING_FAILED)]
    assert bot.typing_log == ["start:777", "stop:777"]
    assert list(tmp_path.iterdir()) == []


async def test_empty_download_is_reported_as_failure(tmp_path):
    bot = FakeBot(payload=None)
    transcriber = StaticTranscriber(TranscriptResult(text="never"))
    orchestrator = VoiceOrchestrator(bot, transcriber, make_config(tmp_path))

    await orchestrator.handle(voice_message())

    assert bot.sent == [("555", MSG_PROCESSING_FAILED)]
    assert bot.typing_log == []
    assert transcriber.calls == []
    assert list(tmp_path.iterdir()) == []


async def test_transcriber_exception_is_contained_and_logged(tmp_path, caplog):
    bot = FakeBot()
    orchestrator = VoiceOrchestrator(bot, ExplodingTranscriber(), make_config(tmp_path))

    await orchestrator.handle(voice_message(9))

    assert bot.sent == [("555", MSG_PROCESSING_FAILED)]
    assert "backend down" in caplog.text
    assert list(tmp_path.iterdir()) == []


async def test_orchestrator_keeps_working_after_a_failure(tmp_path):
    bot = FakeBot()
    orchestrator = VoiceOrchestrator(bot, ExplodingTranscriber(), make_config(tmp_path))
    await orchestrator.handle(voice_message(1))

    orchestrator._transcriber = StaticTranscriber(TranscriptResult(text="back"))
    await orchestrator.handle(voice_message(2))

    assert [text for _, text in bot.sent][1] == "back"


# ── concurrency ───────────────────────────────────────────────────────────────


class SlowTranscriber(TranscriptionClient):
    """Records which temp files exist mid-flight and finishes in reverse order."""

    def __init__(self, temp_dir, delays: dict[str, float]) -> None:
        self._temp_dir = temp_dir
        self._delays = delays
        self.seen: dict[str, set[str]] = {}
        self.finished: list[str] = []

    async def transcribe(self, audio: bytes, file_key: str) -> TranscriptResult:
        self.seen[file_key] = {p.name for p in self._temp_dir.iterdir()}
        await asyncio.sleep(self._delays[file_key])
        self.finished.append(file_key)
        return TranscriptResult(text=audio.decode())


class PerChatBot(FakeBot):
    """Serves each chat its own audio."""

    async def download_voice(self, message: VoiceMessage) -> Optional[bytes]:
        await super().download_voice(message)
        return f"audio from {message.sender}".encode()


async def test_concurrent_messages_use_distinct_temp_files(tmp_path):
    bot = PerChatBot()
    transcriber = SlowTranscriber(tmp_path, delays={"111_101": 0.05, "222_102": 0.0})
    orchestrator = VoiceOrchestrator(bot, transcriber, make_config(tmp_path))

    await asyncio.gather(
        orchestrator.handle(voice_message(101, "111")),
        orchestrator.handle(voice_message(102, "222")),
    )

    assert "temp_voice_111_101.ogg" in transcriber.seen["111_101"]
    assert "temp_voice_222_102.ogg" in transcriber.seen["222_102"]
    assert transcriber.finished == ["222_102", "111_101"]
    assert list(tmp_path.iterdir()) == []


async def test_same_message_id_in_two_chats_stays_apart(tmp_path):
    bot = PerChatBot()
    transcriber = SlowTranscriber(tmp_path, delays={"111_5": 0.05, "222_5": 0.0})
    orchestrator = VoiceOrchestrator(bot, transcriber, make_config(tmp_path))

    await asyncio.gather(
        orchestrator.handle(voice_message(5, "111")),
        orchestrator.handle(voice_message(5, "222")),
    )

    assert {"temp_voice_111_5.ogg", "temp_voice_222_5.ogg"} <= transcriber.seen["222_5"]
    assert ("111", "audio from 111") in bot.sent
    assert ("222", "audio from 222") in bot.sent
    assert list(tmp_path.iterdir()) == []
