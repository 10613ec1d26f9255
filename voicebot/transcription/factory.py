"""Pick the TranscriptionClient matching the configured mode."""
from voicebot.config import Config, TranscriptionMode
from voicebot.constants import ERR_UNKNOWN_MODE
from voicebot.transcription.client import TranscriptionClient
from voicebot.transcription.deepgram import DeepgramTranscriptionClient
from voicebot.transcription.local import LocalWhisperTranscriptionClient
from voicebot.transcription.retry import RetryPolicy
from voicebot.transcription.whisper_api import WhisperApiTranscriptionClient


def build_transcriber(config: Config) -> TranscriptionClient:
    policy = RetryPolicy(attempts=config.retries, base_delay=config.retry_base_delay)
    match config.mode:
        case TranscriptionMode.LOCAL:
            return LocalWhisperTranscriptionClient(
                model_size=config.model_size,
                model_dir=config.model_dir,
                temp_dir=config.temp_dir,
                ffmpeg_path=config.ffmpeg_path,
                ffmpeg_timeout=config.ffmpeg_timeout,
                device=config.whisper_device,
                compute_type=config.whisper_compute_type,
            )
        case TranscriptionMode.API:
            return WhisperApiTranscriptionClient(
                api_key=config.whisper_api_key,
                model_size=config.model_size,
                retry_policy=policy,
                timeout=config.http_timeout,
            )
        case TranscriptionMode.DEEPGRAM:
            return DeepgramTranscriptionClient(
                api_key=config.deepgram_key,
                retry_policy=policy,
                timeout=config.http_timeout,
            )
        case other:
            raise ValueError(ERR_UNKNOWN_MODE % other)
