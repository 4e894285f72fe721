"""Speech transcription — faster-whisper over ffmpeg-normalized audio.

Requires optional dependencies: pip install islvideo[transcribe]
Import-guarded so the rest of islvideo works without the model stack.

Browser recordings arrive as data URIs ('data:audio/webm;base64,...').
Audio is converted to 16 kHz mono WAV with ffmpeg before decoding, so
any container ffmpeg understands is accepted. With translate=True,
Whisper's translate task emits English directly.
"""

import base64
import binascii
import functools
import logging
import subprocess
import tempfile
from pathlib import Path

import imageio_ffmpeg

from .translate import language_code

logger = logging.getLogger(__name__)

_FFMPEG = imageio_ffmpeg.get_ffmpeg_exe()

# Import-guarded heavy dependency.
try:
    from faster_whisper import WhisperModel
    _WHISPER_AVAILABLE = True
except ImportError:
    WhisperModel = None
    _WHISPER_AVAILABLE = False


class TranscriptionError(ValueError):
    """Audio input is empty, malformed, or in an unsupported format."""


def parse_audio_data_uri(audio_data_uri: str) -> tuple[str, bytes]:
    """Split 'data:audio/<type>;base64,<payload>' into (mime_type, bytes).

    Raises:
        TranscriptionError: Not an audio data URI, not base64, or empty.
    """
    if not audio_data_uri or not audio_data_uri.startswith("data:"):
        raise TranscriptionError(
            'Invalid audio data URI format. Must start with "data:audio/"'
        )
    header, sep, payload = audio_data_uri.partition(",")
    mime_type = header[len("data:"):].split(";")[0]
    if not mime_type.startswith("audio/"):
        raise TranscriptionError(f"Unsupported audio format: {mime_type or 'unknown'}")
    if not sep or ";base64" not in header:
        raise TranscriptionError("Audio data URI must be base64-encoded")

    try:
        audio = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise TranscriptionError(f"Audio payload is not valid base64: {e}") from e
    if not audio:
        raise TranscriptionError("Audio payload is empty")
    return mime_type, audio


def _extract_audio(source: str, work_dir: Path) -> str:
    """Convert any audio/video input to 16 kHz mono WAV using ffmpeg.

    Returns path to the extracted WAV file.
    """
    wav_path = str(work_dir / "audio.wav")
    cmd = [
        _FFMPEG, "-y",
        "-i", source,
        "-vn",
        "-acodec", "pcm_s16le",
        "-ar", "16000",
        "-ac", "1",
        wav_path,
    ]
    try:
        subprocess.run(cmd, check=True, capture_output=True)
    except subprocess.CalledProcessError as e:
        raise TranscriptionError(
            f"ffmpeg could not decode audio: {e.stderr.decode(errors='replace').strip()}"
        ) from e
    return wav_path


@functools.lru_cache(maxsize=2)
def _load_model(model: str):
    logger.info("Loading whisper model '%s'", model)
    return WhisperModel(model)


def transcribe(
    source: str,
    language: str = "English",
    model: str = "small",
    translate: bool = False,
) -> str:
    """Transcribe an audio/video file and return the text.

    Args:
        source: Path to an audio or video file.
        language: Spoken language name (English, Hindi, Marathi, Gujarati).
        model: Whisper model size (tiny, base, small, medium, large-v3).
        translate: Emit an English translation instead of a transcript.

    Raises:
        RuntimeError: If islvideo[transcribe] is not installed.
        TranscriptionError: Audio could not be decoded.
        UnsupportedLanguage: Unknown language name.
    """
    if not _WHISPER_AVAILABLE:
        raise RuntimeError(
            "Transcription requires extra dependencies.\n"
            "Run: pip install islvideo[transcribe]"
        )

    code = language_code(language)
    with tempfile.TemporaryDirectory() as work_dir:
        wav_path = _extract_audio(source, Path(work_dir))
        segments, info = _load_model(model).transcribe(
            wav_path,
            language=code,
            task="translate" if translate else "transcribe",
        )
        text = " ".join(s.text.strip() for s in segments if s.text.strip())

    logger.info(
        "Transcribed %.1fs of %s audio: %d chars", info.duration, code, len(text),
    )
    return text


def transcribe_data_uri(
    audio_data_uri: str,
    language: str = "English",
    model: str = "small",
    translate: bool = False,
) -> str:
    """Transcribe a base64 audio data URI (as posted by the browser)."""
    mime_type, audio = parse_audio_data_uri(audio_data_uri)
    logger.debug("Audio MIME type: %s, %d bytes", mime_type, len(audio))

    suffix = "." + mime_type.split("/", 1)[1].split("+")[0]
    with tempfile.TemporaryDirectory() as work_dir:
        source = Path(work_dir) / f"recording{suffix}"
        source.write_bytes(audio)
        return transcribe(str(source), language=language, model=model, translate=translate)
