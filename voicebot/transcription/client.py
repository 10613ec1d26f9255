"""TranscriptionClient — abstract base for speech-to-text backends."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


class TranscriptionError(Exception):
    """A backend could not produce a transcript."""


class ToolNotInstalledError(TranscriptionError):
    """The external audio conversion tool is not reachable."""


class ConversionError(TranscriptionError):
    """The external audio conversion tool failed or timed out."""


@dataclass(frozen=True)
class TranscriptResult:
    text: str
    conversion_ms: Optional[int] = None


class TranscriptionClient(ABC):
    @abstractmethod
    async def transcribe(self, audio: bytes, file_key: str) -> TranscriptResult:
        """Convert raw audio bytes to text. Raises on failure.

        ``file_key`` is unique per chat and message; it keeps temporary
        artifacts of concurrently handled messages apart.
        """
        ...
