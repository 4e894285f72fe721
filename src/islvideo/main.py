"""Subcommand dispatcher for islvideo.

Usage:
    islvideo generate   "I have 42 apples" --dataset public/isl_dataset
    islvideo cleanup    --output-dir public/generated_videos
    islvideo catalog    --dataset public/isl_dataset --probe
    islvideo transcribe recording.webm --language Hindi --translate
    islvideo serve      --config islvideo.yaml --port 5000
"""

import argparse
import importlib
import sys

COMMANDS = {
    "generate": ("generate_cli", "Generate a sign-language video from text"),
    "cleanup": ("cleanup_cli", "Delete all generated videos"),
    "catalog": ("catalog_cli", "Validate the dataset and list vocabulary"),
    "transcribe": ("transcribe_cli", "Transcribe speech to text"),
    "serve": ("serve_cli", "Run the HTTP API"),
}


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="islvideo",
        description="Speech/text to Indian Sign Language video by clip concatenation.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # Register subcommands. Each delegates to its own module's main().
    for name, (_, help_text) in COMMANDS.items():
        subparsers.add_parser(name, help=help_text, add_help=False)

    # Parse only the subcommand name, pass the rest to the subcommand's parser.
    parsed, remaining = parser.parse_known_args(args)

    if parsed.command is None:
        # No subcommand given: show help and exit with error.
        parser.print_help()
        sys.exit(1)

    module_name, _ = COMMANDS[parsed.command]
    module = importlib.import_module(f".{module_name}", __package__)
    module.main(remaining)


if __name__ == "__main__":
    main()
