from dataclasses import dataclass
from typing import Any, Optional
import logging

from voicebot.constants import MSG_SKIPPED, REASON_NO_VOICE, REASON_NOT_PRIVATE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoiceMessage:
    sender: str
    message_id: int
    is_private: bool
    voice: Optional[Any] = None

    @property
    def has_voice(self) -> bool:
        return self.voice is not None

    @property
    def file_key(self) -> str:
        # Bot API message ids are only unique within one chat
        return f"{self.sender}_{self.message_id}"


@dataclass(frozen=True)
class MessageAction:
    should_respond: bool
    reason: Optional[str] = None


def should_process(message: VoiceMessage) -> MessageAction:
    """Only private chats carrying a voice attachment are handled."""
    match (message.is_private, message.has_voice):
        case (True, True):
            return MessageAction(should_respond=True)
        case (False, _):
            reason = REASON_NOT_PRIVATE
        case _:
            reason = REASON_NO_VOICE
    logger.debug(MSG_SKIPPED, message.message_id, reason)
    return MessageAction(should_respond=False, reason=reason)
