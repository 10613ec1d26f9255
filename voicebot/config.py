from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional
import os
import tempfile
from dotenv import load_dotenv

from voicebot.constants import (
    DEFAULT_FFMPEG_PATH,
    DEFAULT_FFMPEG_TIMEOUT,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_RETRIES,
    DEFAULT_RETRY_BASE_DELAY,
    DEFAULT_WHISPER_COMPUTE_TYPE,
    DEFAULT_WHISPER_DEVICE,
    DEFAULT_WHISPER_MODE,
    DEFAULT_WHISPER_MODEL_DIR,
    DEFAULT_WHISPER_MODEL_SIZE,
    ERR_UNKNOWN_MODE,
)


class TranscriptionMode(str, Enum):
    LOCAL = "local"
    API = "api"
    DEEPGRAM = "deepgram"

    @classmethod
    def parse(cls, raw: str) -> "TranscriptionMode":
        try:
            return cls(raw.strip().lower())
        except ValueError:
            raise ValueError(ERR_UNKNOWN_MODE % raw) from None


def _parse_number(name: str, raw: str, kind: type):
    try:
        return kind(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Config:
    telegram_bot_token: str
    log_level: str
    mode: TranscriptionMode
    model_size: str
    model_dir: Optional[str]
    whisper_device: str
    whisper_compute_type: str
    whisper_api_key: Optional[str]
    deepgram_key: Optional[str]
    retries: int = 3
    retry_base_delay: float = 1.0
    http_timeout: float = 60.0
    ffmpeg_path: str = DEFAULT_FFMPEG_PATH
    ffmpeg_timeout: float = 120.0
    temp_dir: Path = Path(tempfile.gettempdir())

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        token = os.getenv("TELEGRAM_BOT_TOKEN")
        log_level = os.getenv("LOG_LEVEL", "INFO")
        raw_mode = os.getenv("WHISPER_MODE") or DEFAULT_WHISPER_MODE
        model_size = os.getenv("WHISPER_MODEL_SIZE") or DEFAULT_WHISPER_MODEL_SIZE
        model_dir = os.getenv("WHISPER_MODEL_DIR", DEFAULT_WHISPER_MODEL_DIR) or None
        device = os.getenv("WHISPER_DEVICE") or DEFAULT_WHISPER_DEVICE
        compute_type = os.getenv("WHISPER_COMPUTE_TYPE") or DEFAULT_WHISPER_COMPUTE_TYPE
        whisper_api_key = os.getenv("WHISPER_API_KEY") or None
        deepgram_key = os.getenv("DEEPGRAM_KEY") or None
        retries = os.getenv("TRANSCRIPTION_RETRIES") or DEFAULT_RETRIES
        base_delay = os.getenv("RETRY_BASE_DELAY") or DEFAULT_RETRY_BASE_DELAY
        http_timeout = os.getenv("HTTP_TIMEOUT") or DEFAULT_HTTP_TIMEOUT
        ffmpeg_path = os.getenv("FFMPEG_PATH") or DEFAULT_FFMPEG_PATH
        ffmpeg_timeout = os.getenv("FFMPEG_TIMEOUT") or DEFAULT_FFMPEG_TIMEOUT
        temp_dir = os.getenv("TEMP_DIR") or tempfile.gettempdir()

        return cls._validate(
            telegram_bot_token=token,
            log_level=log_level,
            mode=TranscriptionMode.parse(raw_mode),
            model_size=model_size,
            model_dir=model_dir,
            whisper_device=device,
            whisper_compute_type=compute_type,
            whisper_api_key=whisper_api_key,
            deepgram_key=deepgram_key,
            retries=_parse_number("TRANSCRIPTION_RETRIES", retries, int),
            retry_base_delay=_parse_number("RETRY_BASE_DELAY", base_delay, float),
            http_timeout=_parse_number("HTTP_TIMEOUT", http_timeout, float),
            ffmpeg_path=ffmpeg_path,
            ffmpeg_timeout=_parse_number("FFMPEG_TIMEOUT", ffmpeg_timeout, float),
            temp_dir=Path(temp_dir),
        )

    @staticmethod
    def _validate(
        telegram_bot_token: Optional[str],
        log_level: str,
        mode: TranscriptionMode,
        model_size: str,
        model_dir: Optional[str],
        whisper_device: str,
        whisper_compute_type: str,
        whisper_api_key: Optional[str],
        deepgram_key: Optional[str],
        retries: int,
        retry_base_delay: float,
        http_timeout: float,
        ffmpeg_path: str,
        ffmpeg_timeout: float,
        temp_dir: Path,
    ) -> "Config":
        match telegram_bot_token:
            case None | "":
                raise ValueError("TELEGRAM_BOT_TOKEN must be set in .env")
            case _:
                pass

        match (mode, whisper_api_key, deepgram_key):
            case (TranscriptionMode.API, None | "", _):
                raise ValueError("WHISPER_API_KEY is required for api mode")
            case (TranscriptionMode.DEEPGRAM, _, None | ""):
                raise ValueError("DEEPGRAM_KEY is required for deepgram mode")
            case _:
                pass

        match retries:
            case int() as n if n < 1:
                raise ValueError("TRANSCRIPTION_RETRIES must be at least 1")
            case _:
                pass

        return Config(
            telegram_bot_token=telegram_bot_token,
            log_level=log_level,
            mode=mode,
            model_size=model_size,
            model_dir=model_dir,
            whisper_device=whisper_device,
            whisper_compute_type=whisper_compute_type,
            whisper_api_key=whisper_api_key,
            deepgram_key=deepgram_key,
            retries=retries,
            retry_base_delay=retry_base_delay,
            http_timeout=http_timeout,
            ffmpeg_path=ffmpeg_path,
            ffmpeg_timeout=ffmpeg_timeout,
            temp_dir=temp_dir,
        )
