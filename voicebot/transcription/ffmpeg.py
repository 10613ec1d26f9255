"""FFmpeg subprocess helpers — availability check and 16 kHz mono conversion."""
import asyncio
import logging
from pathlib import Path

from voicebot.constants import (
    ERR_FFMPEG_FAILED,
    ERR_FFMPEG_TIMEOUT,
    FFMPEG_CHANNELS,
    FFMPEG_CHANNELS_FLAG,
    FFMPEG_INPUT_FLAG,
    FFMPEG_OVERWRITE_FLAG,
    FFMPEG_RATE_FLAG,
    FFMPEG_SAMPLE_RATE,
    FFMPEG_VERSION_FLAG,
)
from voicebot.transcription.client import ConversionError

logger = logging.getLogger(__name__)


async def is_ffmpeg_available(ffmpeg_path: str) -> bool:
    try:
        proc = await asyncio.create_subprocess_exec(
            ffmpeg_path,
            FFMPEG_VERSION_FLAG,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
    except OSError as exc:
        logger.debug("FFmpeg version check could not start: %s", exc)
        return False
    return await proc.wait() == 0


def conversion_args(ffmpeg_path: str, source: Path, target: Path) -> list[str]:
    return [
        ffmpeg_path,
        FFMPEG_INPUT_FLAG,
        str(source),
        FFMPEG_RATE_FLAG,
        FFMPEG_SAMPLE_RATE,
        FFMPEG_CHANNELS_FLAG,
        FFMPEG_CHANNELS,
        FFMPEG_OVERWRITE_FLAG,
        str(target),
    ]


async def convert_to_wav(ffmpeg_path: str, source: Path, target: Path, timeout: float) -> None:
    """Resample ``source`` into ``target``. Raises ConversionError on failure."""
    proc = await asyncio.create_subprocess_exec(
        *conversion_args(ffmpeg_path, source, target),
        stdout=asyncio.subprocess.DEVNULL,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        _, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        raise ConversionError(ERR_FFMPEG_TIMEOUT % timeout) from None

    match proc.returncode:
        case 0:
            return
        case code:
            logger.debug("FFmpeg stderr: %s", stderr.decode(errors="replace").strip())
            raise ConversionError(ERR_FFMPEG_FAILED % code)
