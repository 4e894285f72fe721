"""islvideo.common — shared filesystem and path helpers.

Contains: path variable resolution, readability checks, output naming.
"""

import os
import re
import uuid
from pathlib import Path


# ── Path utilities ─────────────────────────────────────────────────

def resolve_path_vars(text: str, paths: dict[str, str]) -> str:
    """Replace ${name} variables in a string using the paths dict."""
    def _replace(match):
        key = match.group(1)
        if key not in paths:
            raise ValueError(f"Unknown path variable: ${{{key}}}")
        return paths[key]
    return re.sub(r"\$\{(\w+)\}", _replace, text)


def is_readable_file(path: str | Path) -> bool:
    """True if path is an existing regular file this process can read."""
    p = Path(path)
    return p.is_file() and os.access(p, os.R_OK)


# ── Output naming ──────────────────────────────────────────────────

PARTIAL_MARKER = ".partial"


def unique_output_name(extension: str) -> str:
    """Collision-free output filename, e.g. '3f2b...-9c1d.mp4'."""
    return f"{uuid.uuid4()}{extension}"


def partial_path_for(final_path: Path) -> Path:
    """Temporary path an encode writes to before it is renamed to final_path.

    Keeps the clip extension last so ffmpeg picks the right muxer and bulk
    cleanup still matches stray partials.
    """
    return final_path.with_name(
        f"{final_path.stem}{PARTIAL_MARKER}{final_path.suffix}"
    )
