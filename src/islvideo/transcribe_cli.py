"""CLI for transcription — speech in a supported language to text.

Usage:
    islvideo transcribe recording.webm
    islvideo transcribe recording.webm --language Hindi --translate
    islvideo transcribe recording.webm --language Hindi --translate --sign
"""

import argparse
import asyncio
import sys

from .config import add_config_args, config_from_args
from .errors import GenerationError
from .generator import SignVideoGenerator
from .normalize import clean_text
from .transcribe import TranscriptionError, transcribe
from .translate import UnsupportedLanguage


def _parse_args(args=None):
    parser = argparse.ArgumentParser(
        description="Transcribe speech, optionally translating to English and signing it.",
    )
    parser.add_argument(
        "source",
        help="Path to audio or video file",
    )
    parser.add_argument(
        "--language", default="English",
        help="Spoken language: English, Hindi, Marathi, Gujarati (default: English)",
    )
    parser.add_argument(
        "--model", default=None,
        help="Whisper model size (default: transcribe.model from config)",
    )
    parser.add_argument(
        "--translate", action="store_true",
        help="Output an English translation instead of a transcript",
    )
    parser.add_argument(
        "--sign", action="store_true",
        help="Also generate a sign video from the (English) result",
    )
    add_config_args(parser)
    return parser, parser.parse_args(args)


def main(args=None):
    parser, parsed = _parse_args(args)
    config = config_from_args(parsed)

    if parsed.sign and parsed.language.lower() != "english" and not parsed.translate:
        parser.error("--sign needs English text; add --translate for non-English speech")

    model = parsed.model or config["transcribe"]["model"]
    print(f"Transcribing: {parsed.source}")
    print(f"Model: {model}, language: {parsed.language}")

    try:
        text = transcribe(
            parsed.source,
            language=parsed.language,
            model=model,
            translate=parsed.translate,
        )
    except (TranscriptionError, UnsupportedLanguage, RuntimeError) as e:
        print(f"Error [{type(e).__name__}]: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"\nText: {text}")

    if not parsed.sign:
        return

    generator = SignVideoGenerator.from_config(config)
    try:
        result = asyncio.run(generator.generate(clean_text(text)))
    except GenerationError as e:
        print(f"Error [{e.kind}]: {e.message}", file=sys.stderr)
        sys.exit(1)
    print(f"Done: {result.output_path}")


if __name__ == "__main__":
    main()
