"""WhisperApiTranscriptionClient — WhisperAPI.com speech-to-text backend."""
from typing import Any, Optional

import httpx

from voicebot.constants import (
    ERR_WHISPER_API_FAILED,
    LANGUAGE_AUTO,
    TRANSCRIPT_PLACEHOLDER,
    VOICE_CONTENT_TYPE,
    VOICE_FILENAME,
    WHISPER_API_FORMAT,
    WHISPER_API_KEY_HEADER,
    WHISPER_API_URL,
)
from voicebot.transcription.client import TranscriptionError
from voicebot.transcription.remote import RemoteTranscriptionClient
from voicebot.transcription.retry import RetryPolicy


def extract_transcript(payload: Any) -> Optional[str]:
    match payload:
        case {"transcript": str() as text}:
            return text
        case _:
            return None


class WhisperApiTranscriptionClient(RemoteTranscriptionClient):

    def __init__(
        self,
        api_key: str,
        model_size: str,
        retry_policy: RetryPolicy,
        timeout: float,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(retry_policy, timeout, transport)
        self._api_key = api_key
        self._model_size = model_size

    async def _request(self, audio: bytes) -> str:
        files = {"file": (VOICE_FILENAME, audio, VOICE_CONTENT_TYPE)}
        data = {
            "model_size": self._model_size,
            "language": LANGUAGE_AUTO,
            "format": WHISPER_API_FORMAT,
        }
        async with self._http_client() as client:
            response = await client.post(
                WHISPER_API_URL,
                headers={WHISPER_API_KEY_HEADER: self._api_key},
                files=files,
                data=data,
            )
        match response.is_success:
            case False:
                raise TranscriptionError(ERR_WHISPER_API_FAILED % response.reason_phrase)
            case True:
                pass
        return extract_transcript(response.json()) or TRANSCRIPT_PLACEHOLDER
