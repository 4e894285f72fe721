#!/usr/bin/env python3
"""Generate a synthetic sign dataset for trying islvideo without real clips.

Creates examples/isl_dataset/<word>/<word>.mp4 for a small vocabulary.
Each clip is the word in white on a solid color with a quiet tone, so the
order of words in a generated video is obvious at a glance. Every clip
carries an audio track because the compositor concatenates audio too.

Usage:
    python examples/generate_demo_dataset.py
    # Then generate:
    islvideo generate "Hello, I have 42 books" \
        --dataset examples/isl_dataset --output-dir examples/generated_videos
"""

import numpy as np
from moviepy import ImageClip
from moviepy.audio.AudioClip import AudioArrayClip
from pathlib import Path
from PIL import Image, ImageDraw, ImageFont

OUTPUT_DIR = Path(__file__).resolve().parent / "isl_dataset"
SIZE = (320, 240)
FPS = 25
AUDIO_FPS = 44100

# Vocabulary with distinct colors and varying durations (0.8s to 1.6s).
WORDS = [
    ("hello",  (180, 60, 60),   1.2),  # red
    ("thank",  (60, 60, 180),   1.0),  # blue
    ("good",   (60, 160, 60),   1.0),  # green
    ("book",   (200, 130, 40),  1.4),  # orange
    ("number", (130, 60, 180),  1.6),  # purple
    ("water",  (40, 170, 170),  1.0),  # cyan
] + [
    (str(d), (90 + 15 * d, 90, 120), 0.8) for d in range(10)  # digits
]


def _word_frame(word: str, bg_color: tuple[int, int, int]) -> np.ndarray:
    """White word centered on a solid background."""
    img = Image.new("RGB", SIZE, bg_color)
    draw = ImageDraw.Draw(img)
    try:
        font = ImageFont.truetype(
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 48
        )
    except OSError:
        font = ImageFont.load_default()
    bbox = draw.textbbox((0, 0), word, font=font)
    tw, th = bbox[2] - bbox[0], bbox[3] - bbox[1]
    draw.text(
        ((SIZE[0] - tw) / 2, (SIZE[1] - th) / 2),
        word,
        fill=(255, 255, 255),
        font=font,
    )
    return np.array(img)


def _tone(duration: float, freq: float = 440.0) -> AudioArrayClip:
    t = np.arange(int(duration * AUDIO_FPS)) / AUDIO_FPS
    mono = 0.1 * np.sin(2 * np.pi * freq * t)
    return AudioArrayClip(np.column_stack([mono, mono]), fps=AUDIO_FPS)


def main():
    for word, color, duration in WORDS:
        out = OUTPUT_DIR / word / f"{word}.mp4"
        if out.exists():
            print(f"  skip {word} (exists)")
            continue
        out.parent.mkdir(parents=True, exist_ok=True)

        clip = (
            ImageClip(_word_frame(word, color), duration=duration)
            .with_audio(_tone(duration))
        )
        clip.write_videofile(
            str(out), fps=FPS, codec="libx264", audio_codec="aac", logger=None,
        )
        print(f"  wrote {word} ({duration}s)")

    print(f"\nDone. {len(WORDS)} clips in {OUTPUT_DIR}")


if __name__ == "__main__":
    main()
