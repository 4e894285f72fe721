"""Clip compositor — concatenate word clips into one video with native ffmpeg.

All clips go through a single ffmpeg concat filter that joins video and
audio tracks in order, re-encodes to H.264/AAC, and writes a fast-start
mp4 so playback can begin before the whole file is fetched.

The encode writes to `<uuid>.partial.mp4` and is renamed to `<uuid>.mp4`
only after ffmpeg exits cleanly. Failed, timed-out, or cancelled encodes
remove their partial file, so callers never see a half-written video.
Files of encodes still running are reported by in_flight() so bulk
cleanup can leave them alone.
"""

import asyncio
import contextlib
import logging
import os
import subprocess
import threading
import time
from pathlib import Path

import imageio_ffmpeg

from .common import is_readable_file, partial_path_for, unique_output_name
from .errors import ClipUnavailable, CompositionFailed, CompositionTimeout

logger = logging.getLogger(__name__)

_FFMPEG = imageio_ffmpeg.get_ffmpeg_exe()


def _codec_params(codec):
    """Return ffmpeg quality params for the given video codec name."""
    if codec == "h264_nvenc":
        return ["-cq", "20", "-pix_fmt", "yuv420p"]
    return ["-crf", "20", "-pix_fmt", "yuv420p"]


def build_concat_filter(n: int) -> str:
    """Filter graph joining n inputs' first video and audio streams.

    >>> build_concat_filter(2)
    '[0:v:0][0:a:0][1:v:0][1:a:0]concat=n=2:v=1:a=1[v][a]'
    """
    streams = "".join(f"[{i}:v:0][{i}:a:0]" for i in range(n))
    return f"{streams}concat=n={n}:v=1:a=1[v][a]"


def build_concat_command(
    clip_paths: list[str],
    output_path: str,
    ffmpeg: str = _FFMPEG,
    video_codec: str = "libx264",
    audio_codec: str = "aac",
    preset: str = "medium",
) -> list[str]:
    """Assemble the ffmpeg argv for concatenating clip_paths in order."""
    inputs = []
    for path in clip_paths:
        inputs.extend(["-i", str(path)])

    return [
        ffmpeg, "-y", "-nostdin",
        "-hide_banner", "-loglevel", "error",
        *inputs,
        "-filter_complex", build_concat_filter(len(clip_paths)),
        "-map", "[v]", "-map", "[a]",
        "-c:v", video_codec, "-preset", preset, *_codec_params(video_codec),
        "-c:a", audio_codec,
        "-movflags", "+faststart",
        str(output_path),
    ]


def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove partial output %s: %s", path, e)


class ClipCompositor:
    """Runs one ffmpeg concat encode per call.

    Args:
        output_dir: Directory that receives `<uuid><extension>` files.
        extension: Output file extension (the clip extension).
        video_codec / audio_codec / preset: ffmpeg encoder settings.
        timeout: Seconds before the encode is killed and
            CompositionTimeout raised. None disables the timeout.
        ffmpeg: ffmpeg executable; defaults to imageio-ffmpeg's binary.
    """

    def __init__(
        self,
        output_dir: str | Path,
        extension: str = ".mp4",
        video_codec: str = "libx264",
        audio_codec: str = "aac",
        preset: str = "medium",
        timeout: float | None = 600,
        ffmpeg: str = _FFMPEG,
    ):
        self.output_dir = Path(output_dir)
        self.extension = extension
        self.video_codec = video_codec
        self.audio_codec = audio_codec
        self.preset = preset
        self.timeout = timeout
        self.ffmpeg = ffmpeg
        self._in_flight: set[str] = set()
        self._in_flight_lock = threading.Lock()

    def in_flight(self) -> frozenset[str]:
        """File names (partial and final) owned by encodes still running."""
        with self._in_flight_lock:
            return frozenset(self._in_flight)

    async def concatenate(self, clip_paths: list[str]) -> Path:
        """Concatenate clips (in the given order) into a new output file.

        Every input is checked before ffmpeg starts; no reordering or
        deduplication is applied.

        Returns:
            Path of the finished output video.

        Raises:
            ValueError: clip_paths is empty.
            ClipUnavailable: an input is missing or unreadable.
            CompositionFailed: ffmpeg could not run or exited non-zero;
                carries ffmpeg's stderr verbatim.
            CompositionTimeout: the encode exceeded self.timeout.
        """
        if not clip_paths:
            raise ValueError("No clips to concatenate")
        for path in clip_paths:
            if not is_readable_file(path):
                raise ClipUnavailable(str(path))

        final_path = self.output_dir / unique_output_name(self.extension)
        partial_path = partial_path_for(final_path)
        owned = {final_path.name, partial_path.name}
        with self._in_flight_lock:
            self._in_flight |= owned
        try:
            return await self._encode(clip_paths, partial_path, final_path)
        finally:
            with self._in_flight_lock:
                self._in_flight -= owned

    async def _encode(self, clip_paths, partial_path: Path, final_path: Path) -> Path:
        cmd = build_concat_command(
            clip_paths, str(partial_path),
            ffmpeg=self.ffmpeg,
            video_codec=self.video_codec,
            audio_codec=self.audio_codec,
            preset=self.preset,
        )

        logger.info("Concatenating %d clips -> %s", len(clip_paths), final_path.name)
        logger.debug("ffmpeg command: %s", subprocess.list2cmdline(cmd))
        t0 = time.monotonic()

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise CompositionFailed(f"Could not start ffmpeg: {e}", str(e)) from e

        try:
            _, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            # ffmpeg may exit on its own just as the timeout fires.
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            await proc.wait()
            _discard(partial_path)
            logger.error("ffmpeg timed out after %ss: %s", self.timeout, final_path.name)
            raise CompositionTimeout(self.timeout) from None
        except asyncio.CancelledError:
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            await proc.wait()
            _discard(partial_path)
            raise

        if proc.returncode != 0:
            _discard(partial_path)
            diagnostic = stderr.decode(errors="replace").strip()
            logger.error("ffmpeg exited with status %d: %s", proc.returncode, diagnostic)
            raise CompositionFailed(
                f"FFmpeg error: exited with status {proc.returncode}", diagnostic,
            )

        try:
            os.replace(partial_path, final_path)
        except OSError as e:
            _discard(partial_path)
            raise CompositionFailed(f"Could not finalize output: {e}", str(e)) from e

        logger.info(
            "Video combination completed: %s (%.1fs wall)",
            final_path, time.monotonic() - t0,
        )
        return final_path
