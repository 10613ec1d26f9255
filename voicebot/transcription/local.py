"""LocalWhisperTranscriptionClient — faster-whisper inference behind an FFmpeg resample."""
import asyncio
import logging
import threading
import time
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from faster_whisper import WhisperModel

from voicebot.constants import (
    ERR_FFMPEG_MISSING,
    LANGUAGE_AUTO,
    MSG_LOCAL_MODEL_DIR,
    TEMP_LOCAL_OGG_TEMPLATE,
    TEMP_LOCAL_WAV_TEMPLATE,
)
from voicebot.tempfiles import message_temp_path, scoped_temp_files
from voicebot.transcription.client import (
    ToolNotInstalledError,
    TranscriptionClient,
    TranscriptResult,
)
from voicebot.transcription.ffmpeg import convert_to_wav, is_ffmpeg_available

logger = logging.getLogger(__name__)


def join_segments(segments: Iterable[object]) -> str:
    parts = (getattr(segment, "text", "") or "" for segment in segments)
    return " ".join(part.strip() for part in parts if part.strip()).strip()


def engine_language(hint: str) -> Optional[str]:
    """faster-whisper auto-detects when no language is given."""
    match hint:
        case "auto" | "":
            return None
        case code:
            return code


class LocalWhisperTranscriptionClient(TranscriptionClient):

    def __init__(
        self,
        model_size: str,
        model_dir: Optional[str],
        temp_dir: Path,
        ffmpeg_path: str,
        ffmpeg_timeout: float,
        device: str = "cpu",
        compute_type: str = "int8",
    ) -> None:
        self._model_size = model_size
        self._model_dir = model_dir
        self._temp_dir = temp_dir
        self._ffmpeg_path = ffmpeg_path
        self._ffmpeg_timeout = ffmpeg_timeout
        self._device = device
        self._compute_type = compute_type
        self._model: Optional[WhisperModel] = None
        self._model_lock = threading.Lock()
        match model_dir:
            case str() as d if d:
                logger.info(MSG_LOCAL_MODEL_DIR, d)
            case _:
                pass

    async def transcribe(self, audio: bytes, file_key: str) -> TranscriptResult:
        if not await is_ffmpeg_available(self._ffmpeg_path):
            raise ToolNotInstalledError(ERR_FFMPEG_MISSING)

        ogg_path = message_temp_path(self._temp_dir, TEMP_LOCAL_OGG_TEMPLATE, file_key)
        wav_path = message_temp_path(self._temp_dir, TEMP_LOCAL_WAV_TEMPLATE, file_key)

        with scoped_temp_files(ogg_path, wav_path):
            ogg_path.write_bytes(audio)
            conversion_start = time.monotonic()
            await convert_to_wav(self._ffmpeg_path, ogg_path, wav_path, self._ffmpeg_timeout)
            conversion_ms = int((time.monotonic() - conversion_start) * 1000)
            text = await asyncio.to_thread(self._run_model, wav_path)
        return TranscriptResult(text=text, conversion_ms=conversion_ms)

    def _load_model(self) -> WhisperModel:
        """Build the model on first use; runs in worker threads, so serialized."""
        with self._model_lock:
            match self._model:
                case None:
                    kwargs = {"device": self._device, "compute_type": self._compute_type}
                    if self._model_dir:
                        kwargs["download_root"] = self._model_dir
                    self._model = WhisperModel(self._model_size, **kwargs)
                    return self._model
                case model:
                    return model

    def _run_model(self, wav_path: Path) -> str:
        segments, _info = self._load_model().transcribe(
            str(wav_path), language=engine_language(LANGUAGE_AUTO)
        )
        return join_segments(segments)
