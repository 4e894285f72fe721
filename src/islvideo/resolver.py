"""Word resolver — map a normalized token to a clip path.

Resolution policy:
  1. Exact: the catalog entry for the token, if its file still exists.
  2. Fallback: the first catalog key, in lexicographic order, where the
     token contains the key or the key contains the token, and whose
     file exists.

Fallback trades precision for coverage against a small vocabulary
("numbers" -> "number"), so ties resolve to the alphabetically first key.
"""

import logging
from dataclasses import dataclass

from .catalog import CatalogState, ClipCatalog
from .common import is_readable_file
from .errors import CatalogUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedWord:
    token: str
    clip_path: str | None

    @property
    def resolved(self) -> bool:
        return self.clip_path is not None


class WordResolver:
    def __init__(self, catalog: ClipCatalog):
        self.catalog = catalog

    def resolve(self, token: str) -> str | None:
        """Return the clip path for token, or None when nothing matches.

        Raises:
            ValueError: token is empty.
            CatalogUnavailable: the catalog is not READY.
        """
        if not token:
            raise ValueError("Cannot resolve an empty token")
        if self.catalog.state is not CatalogState.READY:
            raise CatalogUnavailable(
                f"Clip catalog is {self.catalog.state.value}, cannot resolve words",
            )

        path = self.catalog.lookup(token)
        if path is not None:
            if is_readable_file(path):
                logger.debug("Exact match for '%s': %s", token, path)
                return path
            logger.warning("Stale catalog entry for '%s': %s is gone", token, path)

        for key in self.catalog.keys():
            if key == token or not (key in token or token in key):
                continue
            candidate = self.catalog.lookup(key)
            if candidate is None:
                # Key vanished in a concurrent reload.
                continue
            if is_readable_file(candidate):
                logger.debug("Partial match for '%s': %s (key '%s')", token, candidate, key)
                return candidate
            logger.warning("Stale catalog entry for '%s': %s is gone", key, candidate)

        logger.debug("No match for '%s'", token)
        return None

    def resolve_all(self, tokens: list[str]) -> list[ResolvedWord]:
        """Resolve tokens in order. Unresolved tokens get clip_path=None."""
        return [ResolvedWord(token, self.resolve(token)) for token in tokens]
