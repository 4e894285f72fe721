"""Clip catalog — in-memory index from vocabulary word to clip file.

The dataset is a directory with one subdirectory per vocabulary entry:

    isl_dataset/
      hello/hello.mp4
      number/number.mp4
      4/4.mp4

The lowercased, trimmed directory name is the catalog key. The catalog is
scanned once and then served read-only; entries are not re-checked on
lookup, so consumers must verify the file still exists before use.

Lifecycle: UNINITIALIZED -> LOADING -> READY | FAILED. FAILED is sticky
until reload().
"""

import enum
import logging
import threading
from pathlib import Path

from .common import is_readable_file
from .errors import CatalogUnavailable

logger = logging.getLogger(__name__)


class CatalogState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


def scan_dataset(dataset_root: str | Path, extension: str = ".mp4") -> dict[str, str]:
    """Scan immediate subdirectories of dataset_root into {key: clip_path}.

    Directories are visited in sorted name order. Within a directory the
    first file (sorted) ending in `extension` is the clip. Directories
    without a readable clip, and later directories whose key collides
    with an earlier one after lowercasing, are skipped with a warning.

    Raises:
        CatalogUnavailable: dataset_root missing/unreadable, or no usable
            clips found.
    """
    root = Path(dataset_root)
    if not root.is_dir():
        raise CatalogUnavailable(
            f"Dataset directory not found at: {root}",
        )

    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise CatalogUnavailable(
            f"Dataset directory not readable: {root}", details=str(e),
        ) from e

    mapping = {}
    for entry in entries:
        if not entry.is_dir():
            continue

        key = entry.name.strip().lower()
        if not key:
            continue
        if key in mapping:
            logger.warning(
                "Skipping %s: key '%s' already mapped to %s", entry, key, mapping[key],
            )
            continue

        try:
            clips = sorted(
                p for p in entry.iterdir()
                if p.name.lower().endswith(extension) and p.is_file()
            )
        except OSError as e:
            logger.warning("Skipping %s: cannot list directory (%s)", entry, e)
            continue

        if not clips:
            logger.warning("No %s file found in directory: %s", extension, entry)
            continue

        clip = clips[0]
        if not is_readable_file(clip):
            logger.warning("Clip not accessible, skipping: %s", clip)
            continue

        mapping[key] = str(clip.resolve())
        logger.debug("Mapped '%s' -> %s", key, mapping[key])

    if not mapping:
        raise CatalogUnavailable(
            f"No clips found in dataset: {root}",
            details="Each vocabulary directory must contain one "
                    f"{extension} file.",
        )
    return mapping


class ClipCatalog:
    """Lazily loaded, process-shared word -> clip index.

    load() runs the scan at most once; concurrent callers block on the
    same lock (bounded by their timeout) and then observe READY or
    FAILED. The index (mapping plus sorted keys) is never mutated, only
    replaced wholesale, so readers need no locking. reload() rescans
    before swapping, and a READY catalog stays READY while it does.
    """

    def __init__(self, dataset_root: str | Path, extension: str = ".mp4"):
        self.dataset_root = Path(dataset_root)
        self.extension = extension
        self._lock = threading.Lock()
        self._state = CatalogState.UNINITIALIZED
        self._index: tuple[dict[str, str], tuple[str, ...]] = ({}, ())
        self._failure: CatalogUnavailable | None = None

    @property
    def state(self) -> CatalogState:
        return self._state

    def load(self, timeout: float | None = None) -> dict[str, str]:
        """Load the catalog if needed and return the mapping.

        Args:
            timeout: Seconds to wait for a load running in another
                thread. None waits indefinitely.

        Raises:
            CatalogUnavailable: Load failed (now or earlier), or the
                wait for another thread's load timed out.
        """
        if self._state is CatalogState.READY:
            return self._index[0]
        if self._state is CatalogState.FAILED:
            raise self._failed()

        acquired = self._lock.acquire(timeout=-1 if timeout is None else timeout)
        if not acquired:
            raise CatalogUnavailable(
                "Clip catalog not ready",
                details=f"Catalog load did not finish within {timeout:g}s",
            )
        try:
            if self._state is CatalogState.UNINITIALIZED:
                self._load_locked()
        finally:
            self._lock.release()

        if self._state is CatalogState.FAILED:
            raise self._failed()
        return self._index[0]

    def reload(self) -> dict[str, str]:
        """Rescan the dataset and replace the current index (or failure).

        Lookups keep using the old index until the new one is swapped
        in. A failed rescan leaves the catalog FAILED.
        """
        with self._lock:
            self._load_locked()
        if self._state is CatalogState.FAILED:
            raise self._failed()
        return self._index[0]

    def _failed(self) -> CatalogUnavailable:
        """Fresh copy of the recorded failure for each caller."""
        return CatalogUnavailable(self._failure.message, details=self._failure.details)

    def _load_locked(self) -> None:
        if self._state is not CatalogState.READY:
            self._state = CatalogState.LOADING
        logger.info("Loading clip catalog from %s", self.dataset_root)
        try:
            mapping = scan_dataset(self.dataset_root, self.extension)
        except CatalogUnavailable as e:
            logger.error("Clip catalog failed to load: %s", e)
            self._failure = e
            self._state = CatalogState.FAILED
            self._index = ({}, ())
            return
        self._index = (mapping, tuple(sorted(mapping)))
        self._failure = None
        self._state = CatalogState.READY
        logger.info("Clip catalog ready: %d words", len(mapping))

    def lookup(self, key: str) -> str | None:
        """Exact-match lookup. Returns the clip path or None."""
        return self._index[0].get(key)

    def keys(self) -> tuple[str, ...]:
        """Vocabulary in lexicographic order (the fallback scan order)."""
        return self._index[1]

    def __len__(self) -> int:
        return len(self._index[0])

    def __contains__(self, key: str) -> bool:
        return key in self._index[0]
