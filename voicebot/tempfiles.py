"""Per-message temporary files that are always removed."""
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from voicebot.constants import MSG_CLEANUP_FAILED

logger = logging.getLogger(__name__)


def message_temp_path(directory: Path, template: str, file_key: str) -> Path:
    """Path for a temp file keyed per message, e.g. temp_voice_555_101.ogg."""
    return directory / template.format(key=file_key)


def remove_quietly(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning(MSG_CLEANUP_FAILED, path, exc)


@contextmanager
def scoped_temp_files(*paths: Path) -> Iterator[tuple[Path, ...]]:
    """Yield ``paths`` and delete every one of them on exit, however it happens."""
    try:
        yield paths
    finally:
        list(map(remove_quietly, paths))
