"""Abstract interfaces for transport-agnostic bot clients."""
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional

from voicebot.message_handler import VoiceMessage

OnVoice = Callable[[VoiceMessage], Awaitable[None]]


class TypingIndicator(ABC):
    """Chat activity shown to the sender while the transcriber works.

    Used as ``async with bot.typing(sender): ...``; leaving the block always
    clears the activity, before any reply is sent.
    """

    async def __aenter__(self) -> "TypingIndicator":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    @abstractmethod
    async def start(self) -> None: ...

    @abstractmethod
    async def stop(self) -> None: ...


class BotClient(ABC):
    @abstractmethod
    def run(self, on_voice: OnVoice) -> None: ...

    @abstractmethod
    async def send_message(self, to: str, text: str) -> bool: ...

    @abstractmethod
    async def download_voice(self, message: VoiceMessage) -> Optional[bytes]: ...

    @abstractmethod
    def typing(self, to: str) -> TypingIndicator: ...
