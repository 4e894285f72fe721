"""CLI for bulk cleanup — delete every generated video.

Usage:
    islvideo cleanup
    islvideo cleanup --output-dir public/generated_videos
"""

import argparse

from .config import add_config_args, config_from_args
from .generator import delete_generated_videos


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Delete all generated videos from the output directory.",
    )
    add_config_args(parser)
    parsed = parser.parse_args(args)

    config = config_from_args(parsed)
    out_dir = config["output"]["dir"]

    report = delete_generated_videos(out_dir, config["dataset"]["extension"])
    if not report.directory_found:
        print(f"Nothing to delete: {out_dir} not found")
        return

    for name in report.deleted_files:
        print(f"  DELETE {name}")
    print(f"Done: deleted {report.count} videos from {out_dir}")


if __name__ == "__main__":
    main()
