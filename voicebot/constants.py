"""All magic values live here — no inline literals anywhere else."""

# Telegram typing indicator re-send interval (seconds).
# The TYPING action expires after ~5 s, so we refresh every 4 s.
TELEGRAM_TYPING_INTERVAL: float = 4.0

# Config defaults
DEFAULT_WHISPER_MODE = "local"
DEFAULT_WHISPER_MODEL_SIZE = "base"
DEFAULT_WHISPER_MODEL_DIR = "models"
DEFAULT_WHISPER_DEVICE = "cpu"
DEFAULT_WHISPER_COMPUTE_TYPE = "int8"
DEFAULT_RETRIES = "3"
DEFAULT_RETRY_BASE_DELAY = "1.0"
DEFAULT_HTTP_TIMEOUT = "60"
DEFAULT_FFMPEG_PATH = "ffmpeg"
DEFAULT_FFMPEG_TIMEOUT = "120"

# Temporary files
TEMP_VOICE_TEMPLATE = "temp_voice_{key}.ogg"
TEMP_LOCAL_OGG_TEMPLATE = "temp_voice_{key}_local.ogg"
TEMP_LOCAL_WAV_TEMPLATE = "temp_voice_{key}_local.wav"

# FFmpeg flags (16 kHz mono is what Whisper expects)
FFMPEG_VERSION_FLAG = "-version"
FFMPEG_INPUT_FLAG = "-i"
FFMPEG_RATE_FLAG = "-ar"
FFMPEG_CHANNELS_FLAG = "-ac"
FFMPEG_OVERWRITE_FLAG = "-y"
FFMPEG_SAMPLE_RATE = "16000"
FFMPEG_CHANNELS = "1"

# Transcription
LANGUAGE_AUTO = "auto"
VOICE_FILENAME = "voice.ogg"
VOICE_CONTENT_TYPE = "audio/ogg"
TRANSCRIPT_PLACEHOLDER = "Transcription empty"

# WhisperAPI.com
WHISPER_API_URL = "https://api.whisper-api.com/transcribe"
WHISPER_API_KEY_HEADER = "X-API-Key"
WHISPER_API_FORMAT = "json"

# Deepgram
DEEPGRAM_URL = "https://api.deepgram.com/v1/listen"
DEEPGRAM_AUTH_SCHEME = "Token"

# Log messages
MSG_BOT_STARTING = "Starting Telegram voice bot in %s mode (model: %s)…"
MSG_CONNECTED = "Connected in %s mode. Parsing only private voice messages..."
MSG_DISCONNECTED = "Telegram connection closed"
MSG_LOCAL_MODEL_DIR = "Local mode: using model dir %s"
MSG_RETRY_FAILED = "API attempt %d/%d failed: %s"
MSG_DOWNLOADED = "Private voice message downloaded to %s"
MSG_TIMINGS_LOG = "Message %s — %s"
MSG_TOTAL_TIME = "Message %s handled in %.1fs"
MSG_SEND_FAIL = "Telegram send_message failed: %s"
MSG_CLEANUP_FAILED = "Cleanup failed for %s: %s"
MSG_SKIPPED = "Skipped message %s: %s"

# Error texts
ERR_FFMPEG_MISSING = "FFmpeg is not installed for local mode"
ERR_FFMPEG_FAILED = "FFmpeg conversion failed with code %s"
ERR_FFMPEG_TIMEOUT = "FFmpeg conversion timed out after %ss"
ERR_WHISPER_API_FAILED = "WhisperAPI failed: %s"
ERR_DEEPGRAM_FAILED = "Deepgram failed: %s"
ERR_DOWNLOAD_FAILED = "Failed to download media"
ERR_UNKNOWN_MODE = "Unknown mode: %s"

# Filter reasons
REASON_NOT_PRIVATE = "not a private chat"
REASON_NO_VOICE = "no voice attachment"

# User-facing replies
MSG_TRANSCRIPTION_EMPTY = "Transcription failed or empty."
MSG_PROCESSING_FAILED = "Sorry, an error occurred while processing your voice message."
MSG_TIMES_PREFIX = "Times: Download - %dms"
MSG_TIMES_CONVERSION = ", Conversion - %dms"
MSG_TIMES_TRANSCRIPTION = ", Transcription - %dms"
