"""DeepgramTranscriptionClient — Deepgram pre-recorded audio backend."""
from typing import Any, Optional

import httpx

from voicebot.constants import (
    DEEPGRAM_AUTH_SCHEME,
    DEEPGRAM_URL,
    ERR_DEEPGRAM_FAILED,
    TRANSCRIPT_PLACEHOLDER,
    VOICE_CONTENT_TYPE,
)
from voicebot.transcription.client import TranscriptionError
from voicebot.transcription.remote import RemoteTranscriptionClient
from voicebot.transcription.retry import RetryPolicy


def extract_transcript(payload: Any) -> Optional[str]:
    """Pull channel → alternatives[0] → transcript out of a Deepgram response.

    Accepts both a bare ``channel`` object and the documented
    ``results.channels[0]`` nesting.
    """
    match payload:
        case {"channel": {"alternatives": [{"transcript": str() as text}, *_]}}:
            return text
        case {"results": {"channels": [{"alternatives": [{"transcript": str() as text}, *_]}, *_]}}:
            return text
        case _:
            return None


class DeepgramTranscriptionClient(RemoteTranscriptionClient):

    def __init__(
        self,
        api_key: str,
        retry_policy: RetryPolicy,
        timeout: float,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(retry_policy, timeout, transport)
        self._api_key = api_key

    async def _request(self, audio: bytes) -> str:
        headers = {
            "Authorization": f"{DEEPGRAM_AUTH_SCHEME} {self._api_key}",
            "Content-Type": VOICE_CONTENT_TYPE,
        }
        async with self._http_client() as client:
            response = await client.post(DEEPGRAM_URL, headers=headers, content=audio)
        match response.is_success:
            case False:
                raise TranscriptionError(ERR_DEEPGRAM_FAILED % response.reason_phrase)
            case True:
                pass
        return extract_transcript(response.json()) or TRANSCRIPT_PLACEHOLDER
