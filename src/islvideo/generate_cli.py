"""CLI for generation — turn a sentence into a sign-language video.

Usage:
    islvideo generate "I have 42 apples"
    islvideo generate "hello world" --raw --dataset public/isl_dataset
    islvideo generate "hello" --config islvideo.yaml --output-dir /tmp/out
"""

import argparse
import asyncio
import sys
import time

from .config import add_config_args, config_from_args
from .errors import GenerationError
from .generator import SignVideoGenerator
from .normalize import clean_text
from .translate import TranslationUnavailable, UnsupportedLanguage, translate_if_necessary


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Generate a sign-language video from text.",
    )
    parser.add_argument(
        "text", nargs="+",
        help="Text to sign",
    )
    parser.add_argument(
        "--language", default="English",
        help="Language of the text (default: English)",
    )
    parser.add_argument(
        "--raw", action="store_true",
        help="Skip stop-word/punctuation cleaning; text is already normalized",
    )
    add_config_args(parser)
    parsed = parser.parse_args(args)

    config = config_from_args(parsed)
    text = " ".join(parsed.text)

    try:
        english = translate_if_necessary(text, parsed.language)
    except (UnsupportedLanguage, TranslationUnavailable) as e:
        parser.error(str(e))

    sentence = english if parsed.raw else clean_text(english)
    print(f"Sentence: {sentence!r}")

    generator = SignVideoGenerator.from_config(config)
    t0 = time.monotonic()
    try:
        result = asyncio.run(generator.generate(sentence))
    except GenerationError as e:
        print(f"Error [{e.kind}]: {e.message}", file=sys.stderr)
        if e.details and e.details != e.message:
            print(f"  {e.details}", file=sys.stderr)
        sys.exit(1)

    resolved = len(result.words) - len(result.unresolved)
    print(f"  Signed {resolved}/{len(result.words)} words")
    if result.unresolved:
        print(f"  Skipped (no clip): {', '.join(result.unresolved)}")
    print(f"\nDone: {result.output_path} ({time.monotonic() - t0:.1f}s)")


if __name__ == "__main__":
    main()
