"""Entry point — wires Config → TranscriptionClient → TelegramClient → VoiceOrchestrator."""
import logging

from rich.logging import RichHandler

from voicebot.config import Config
from voicebot.constants import MSG_BOT_STARTING
from voicebot.orchestrator import VoiceOrchestrator
from voicebot.telegram.client import TelegramClient
from voicebot.transcription.factory import build_transcriber


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True))
    # httpx logs every request URL at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def main() -> None:
    config = Config.from_env()
    _setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(MSG_BOT_STARTING, config.mode.value, config.model_size)

    transcriber = build_transcriber(config)
    client = TelegramClient(config)
    orchestrator = VoiceOrchestrator(client, transcriber, config)
    client.run(orchestrator.handle)


if __name__ == "__main__":
    main()
