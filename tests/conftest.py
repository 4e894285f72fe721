"""Shared test fixtures for islvideo tests."""

import subprocess

import pytest
import imageio_ffmpeg

_FFMPEG = imageio_ffmpeg.get_ffmpeg_exe()

# word -> solid color of its clip, so output frames identify the source clip.
WORD_COLORS = {
    "hello": "red",
    "world": "blue",
    "number": "green",
    "4": "yellow",
    "2": "white",
}


def make_clip(path, color="blue", duration=1.0, audio=True):
    """Write a small solid-color mp4 (64x48, 10fps) with an optional tone."""
    path.parent.mkdir(parents=True, exist_ok=True)
    cmd = [
        _FFMPEG, "-y",
        "-f", "lavfi", "-i", f"color=c={color}:s=64x48:d={duration}:r=10",
    ]
    if audio:
        cmd += ["-f", "lavfi", "-i", f"sine=frequency=440:duration={duration}"]
    cmd += ["-c:v", "libx264", "-crf", "28", "-pix_fmt", "yuv420p"]
    cmd += ["-c:a", "aac", "-b:a", "32k", "-shortest"] if audio else ["-an"]
    cmd.append(str(path))
    subprocess.run(cmd, check=True, capture_output=True)
    return path


@pytest.fixture
def dataset(tmp_path):
    """Dataset directory with one real clip per word in WORD_COLORS.

    Shared across test_compositor.py, test_generator.py and test_web.py.
    """
    root = tmp_path / "isl_dataset"
    for word, color in WORD_COLORS.items():
        make_clip(root / word / f"{word}.mp4", color=color)
    return root


@pytest.fixture
def stub_dataset(tmp_path):
    """Dataset of placeholder files; enough for catalog and resolver logic."""
    def _build(words):
        root = tmp_path / "stub_dataset"
        root.mkdir(exist_ok=True)
        for word in words:
            d = root / word
            d.mkdir()
            (d / f"{word}.mp4").write_bytes(b"not really a video")
        return root
    return _build


@pytest.fixture
def config(dataset, tmp_path):
    """Normalized config pointing at the real-clip dataset."""
    from islvideo.config import load_config

    return load_config(overrides={
        "dataset": {"root": str(dataset), "load_timeout": 5},
        "output": {"dir": str(tmp_path / "generated_videos")},
        "compose": {"preset": "ultrafast", "timeout": 120},
    })
