"""RemoteTranscriptionClient — shared plumbing for HTTP speech-to-text APIs."""
from abc import abstractmethod
from typing import Optional

import httpx

from voicebot.transcription.client import TranscriptionClient, TranscriptResult
from voicebot.transcription.retry import RetryPolicy, with_retry


class RemoteTranscriptionClient(TranscriptionClient):
    """One HTTP request per attempt, retried with linear backoff."""

    def __init__(
        self,
        retry_policy: RetryPolicy,
        timeout: float,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._retry_policy = retry_policy
        self._timeout = timeout
        self._transport = transport

    async def transcribe(self, audio: bytes, file_key: str) -> TranscriptResult:
        text = await with_retry(lambda: self._request(audio), self._retry_policy)
        return TranscriptResult(text=text)

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    @abstractmethod
    async def _request(self, audio: bytes) -> str:
        """Issue a single request and return the transcript text."""
        ...
