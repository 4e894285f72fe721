"""Generation orchestrator — cleaned English sentence to sign-language video.

Per request the generator walks a fixed state machine:

  IDLE -> CATALOG_CHECK -> TOKENIZING -> RESOLVING -> COMPOSING
       -> VERIFYING -> DONE | FAILED

  CATALOG_CHECK  wait (bounded) for the shared catalog to be READY.
  TOKENIZING     lowercase, split on whitespace; nothing left -> EmptyInput.
  RESOLVING      resolve each token in order; unresolved tokens are
                 dropped; nothing resolved -> NoClipsResolved.
  COMPOSING      ensure the output directory, then one ffmpeg encode.
  VERIFYING      output exists and is non-empty.

Failures raise a GenerationError subclass tagged with the stage that
failed. Nothing is retried.

Encodes are bounded process-wide by a semaphore (compose.max_concurrent,
default 1). Output directory writability is probed once and re-probed
after any failed encode. Bulk cleanup is a separate entry point.
"""

import asyncio
import enum
import logging
import threading
import uuid
from dataclasses import dataclass, field
from pathlib import Path

from .catalog import ClipCatalog
from .compositor import ClipCompositor
from .errors import (
    CompositionFailed,
    EmptyInput,
    GenerationError,
    NoClipsResolved,
    OutputDirectoryUnavailable,
    OutputVerificationFailed,
)
from .resolver import ResolvedWord, WordResolver

logger = logging.getLogger(__name__)


class GenerationState(enum.Enum):
    IDLE = "idle"
    CATALOG_CHECK = "catalog_check"
    TOKENIZING = "tokenizing"
    RESOLVING = "resolving"
    COMPOSING = "composing"
    VERIFYING = "verifying"
    DONE = "done"
    FAILED = "failed"


@dataclass
class GenerationResult:
    """A finished video. The caller owns output_path from here on."""

    output_path: Path
    words: list[ResolvedWord] = field(default_factory=list)

    @property
    def unresolved(self) -> list[str]:
        return [w.token for w in self.words if not w.resolved]


@dataclass
class CleanupReport:
    directory_found: bool
    deleted_files: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.deleted_files)


def tokenize(sentence: str) -> list[str]:
    """Lowercase and split on whitespace, dropping empty tokens."""
    return (sentence or "").lower().split()


def delete_generated_videos(
    output_dir: str | Path,
    extension: str = ".mp4",
    keep: frozenset[str] = frozenset(),
) -> CleanupReport:
    """Delete every file ending in `extension` directly inside output_dir.

    Names in `keep` (encodes still running) are left alone. Files that
    vanish between listing and deletion, e.g. to a concurrent cleanup,
    are skipped and not counted.

    A missing directory is reported (directory_found=False), not raised.
    """
    out_dir = Path(output_dir)
    if not out_dir.is_dir():
        return CleanupReport(directory_found=False)

    deleted = []
    for path in sorted(out_dir.iterdir()):
        if path.name in keep or not path.name.lower().endswith(extension):
            continue
        try:
            if not path.is_file():
                continue
            path.unlink()
        except FileNotFoundError:
            logger.debug("Already gone: %s", path.name)
            continue
        deleted.append(path.name)

    logger.info("Deleted %d generated videos from %s", len(deleted), out_dir)
    return CleanupReport(directory_found=True, deleted_files=deleted)


async def _acquire(slots: threading.BoundedSemaphore, poll: float = 0.05) -> None:
    """Wait for a semaphore slot without blocking the event loop.

    Polls instead of parking a thread so a cancelled waiter never holds
    a slot, and so the semaphore works across event loops.
    """
    while not slots.acquire(blocking=False):
        await asyncio.sleep(poll)


class SignVideoGenerator:
    """Process-wide service turning sentences into concatenated sign videos.

    Owns the clip catalog (loaded lazily on the first request), the word
    resolver, and the compositor. Create one per process and share it.

    Args:
        catalog: Clip catalog over the dataset directory.
        compositor: Compositor writing into output_dir.
        load_timeout: Seconds a request waits for the catalog load.
        max_concurrent: Simultaneous encodes allowed.
    """

    def __init__(
        self,
        catalog: ClipCatalog,
        compositor: ClipCompositor,
        load_timeout: float = 30,
        max_concurrent: int = 1,
    ):
        self.catalog = catalog
        self.resolver = WordResolver(catalog)
        self.compositor = compositor
        self.load_timeout = load_timeout
        self._encode_slots = threading.BoundedSemaphore(max_concurrent)
        self._output_lock = threading.Lock()
        self._output_ready = False

    @classmethod
    def from_config(cls, config: dict) -> "SignVideoGenerator":
        dataset = config["dataset"]
        compose = config["compose"]
        catalog = ClipCatalog(dataset["root"], extension=dataset["extension"])
        compositor = ClipCompositor(
            config["output"]["dir"],
            extension=dataset["extension"],
            video_codec=compose["video_codec"],
            audio_codec=compose["audio_codec"],
            preset=compose["preset"],
            timeout=compose["timeout"],
        )
        return cls(
            catalog, compositor,
            load_timeout=dataset["load_timeout"],
            max_concurrent=compose["max_concurrent"],
        )

    @property
    def output_dir(self) -> Path:
        return self.compositor.output_dir

    # ── Output directory lifecycle ────────────────────────────────

    def ensure_output_dir(self) -> None:
        """Create the output directory and prove it is writable.

        Idempotent; the probe runs again only after a failed encode.

        Raises:
            OutputDirectoryUnavailable: mkdir or the probe write failed.
        """
        with self._output_lock:
            if self._output_ready:
                return
            probe = self.output_dir / f".write-probe-{uuid.uuid4().hex}"
            try:
                self.output_dir.mkdir(parents=True, exist_ok=True)
                probe.write_text("test")
                probe.unlink()
            except OSError as e:
                raise OutputDirectoryUnavailable(
                    f"Failed to create or verify output directory: {self.output_dir}",
                    details=str(e),
                ) from e
            self._output_ready = True
            logger.info("Output directory is writable: %s", self.output_dir)

    def cleanup(self) -> CleanupReport:
        """Delete all generated videos and stray partial encodes.

        Files of encodes still running in this process are kept.
        """
        return delete_generated_videos(
            self.output_dir, self.compositor.extension,
            keep=self.compositor.in_flight(),
        )

    def reload_catalog(self) -> dict[str, str]:
        return self.catalog.reload()

    # ── Generation ────────────────────────────────────────────────

    async def generate(self, sentence: str) -> GenerationResult:
        """Run one sentence through the full pipeline.

        Args:
            sentence: Cleaned English text (see normalize.clean_text).

        Returns:
            GenerationResult with the new video's path and per-word
            resolution.

        Raises:
            GenerationError: A subclass naming what failed; `stage`
                holds the GenerationState value where it happened.
        """
        state = GenerationState.IDLE
        try:
            state = GenerationState.CATALOG_CHECK
            await asyncio.to_thread(self.catalog.load, self.load_timeout)

            state = GenerationState.TOKENIZING
            tokens = tokenize(sentence)
            if not tokens:
                raise EmptyInput(
                    "No words to sign",
                    details="The sentence is empty after removing whitespace.",
                )
            logger.info("Processing words: %s", tokens)

            state = GenerationState.RESOLVING
            words = await asyncio.to_thread(self.resolver.resolve_all, tokens)
            clip_paths = [w.clip_path for w in words if w.resolved]
            for w in words:
                if not w.resolved:
                    logger.warning("No video found for word: %s", w.token)
            if not clip_paths:
                raise NoClipsResolved(
                    "No videos found for any words in the sentence",
                    details=f"None of {tokens} is in the sign vocabulary.",
                )

            state = GenerationState.COMPOSING
            await asyncio.to_thread(self.ensure_output_dir)
            output_path = await self._compose(clip_paths)

            state = GenerationState.VERIFYING
            self._verify_output(output_path)

            state = GenerationState.DONE
        except GenerationError as e:
            e.stage = state.value
            if e.user_error:
                logger.info("Generation rejected at %s: %s", state.value, e)
            else:
                logger.error("Generation failed at %s: %s", state.value, e)
            raise

        return GenerationResult(output_path=output_path, words=words)

    async def _compose(self, clip_paths: list[str]) -> Path:
        """One encode under the process-wide slot.

        The encode itself is not interruptible: on cancellation it runs
        to completion, its unowned output is deleted, then the
        cancellation propagates.
        """
        await _acquire(self._encode_slots)
        try:
            task = asyncio.ensure_future(self.compositor.concatenate(clip_paths))
            try:
                return await asyncio.shield(task)
            except asyncio.CancelledError:
                logger.warning("Request cancelled mid-encode; finishing encode first")
                try:
                    orphan = await task
                except GenerationError as e:
                    logger.warning("Encode for cancelled request failed: %s", e)
                else:
                    orphan.unlink(missing_ok=True)
                raise
        except (CompositionFailed, OSError):
            self._output_ready = False
            raise
        finally:
            self._encode_slots.release()

    def _verify_output(self, output_path: Path) -> None:
        try:
            size = output_path.stat().st_size
        except OSError:
            size = 0
        if size <= 0:
            output_path.unlink(missing_ok=True)
            raise OutputVerificationFailed(str(output_path))
