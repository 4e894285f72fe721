"""CLI for the clip catalog — validate the dataset and list its vocabulary.

Usage:
    islvideo catalog --dataset public/isl_dataset
    islvideo catalog --config islvideo.yaml --probe
"""

import argparse
import sys

from moviepy import VideoFileClip

from .catalog import ClipCatalog
from .config import add_config_args, config_from_args
from .errors import CatalogUnavailable


def _probe(path):
    """Return (duration_s, has_audio) for a clip using moviepy."""
    with VideoFileClip(path) as clip:
        return clip.duration, clip.audio is not None


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Load the clip catalog and list vocabulary words.",
    )
    parser.add_argument(
        "--probe", action="store_true",
        help="Open every clip and report duration and audio track",
    )
    add_config_args(parser)
    parsed = parser.parse_args(args)

    config = config_from_args(parsed)
    catalog = ClipCatalog(config["dataset"]["root"], config["dataset"]["extension"])
    try:
        catalog.load()
    except CatalogUnavailable as e:
        print(f"Catalog invalid: {e.message}", file=sys.stderr)
        sys.exit(1)

    print(f"Catalog valid: {len(catalog)} words in {catalog.dataset_root}")
    silent = []
    for key in catalog.keys():
        path = catalog.lookup(key)
        if not parsed.probe:
            print(f"  {key:<20} {path}")
            continue
        duration, has_audio = _probe(path)
        tag = "" if has_audio else "  [no audio]"
        if not has_audio:
            silent.append(key)
        print(f"  {key:<20} {duration:5.1f}s  {path}{tag}")

    if silent:
        # The concat filter needs an audio stream in every clip.
        print(f"\n{len(silent)} clip(s) without audio: {', '.join(silent)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
