"""Configuration loader — dataset, output, and encoder settings from YAML.

Every key has a default, so the config file is optional. Path values may
use ${name} variables declared under `paths:`.

Config schema:
  paths:
    public: "/srv/isl/public"
  dataset:
    root: "${public}/isl_dataset"
    extension: ".mp4"
    load_timeout: 30            # seconds a request waits for the catalog
  output:
    dir: "${public}/generated_videos"
    url_prefix: "/generated_videos"
  compose:
    video_codec: libx264
    audio_codec: aac
    preset: medium
    timeout: 600                # seconds before CompositionTimeout
    max_concurrent: 1           # simultaneous ffmpeg encodes per process
  transcribe:
    model: small
"""

import copy
import logging
from pathlib import Path

import yaml

from .common import resolve_path_vars


DEFAULTS = {
    "dataset": {
        "root": "public/isl_dataset",
        "extension": ".mp4",
        "load_timeout": 30,
    },
    "output": {
        "dir": "public/generated_videos",
        "url_prefix": "/generated_videos",
    },
    "compose": {
        "video_codec": "libx264",
        "audio_codec": "aac",
        "preset": "medium",
        "timeout": 600,
        "max_concurrent": 1,
    },
    "transcribe": {
        "model": "small",
    },
}

SECTIONS = set(DEFAULTS) | {"paths"}


def _positive_number(section: str, key: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValueError(f"Config: {section}.{key} must be > 0, got {value!r}")


def load_config(
    config_path: str | Path | None = None,
    overrides: dict | None = None,
) -> dict:
    """Load, validate, and normalize a config file.

    Processing pipeline:
      1. Parse YAML (or start empty when no path is given).
      2. Merge each section over DEFAULTS, then apply overrides.
      3. Resolve ${path} variables in dataset.root and output.dir.
      4. Make relative directories absolute against the config file's
         directory (or the working directory without a file).
      5. Validate timeouts, concurrency, and the clip extension.

    Args:
        config_path: Path to the YAML config, or None for defaults.
        overrides: {section: {key: value}} applied after the file,
            e.g. from CLI flags. None values are ignored.

    Returns:
        Normalized config dict with absolute directory paths.

    Raises:
        ValueError: Unknown sections or invalid values.
    """
    raw = {}
    base_dir = Path.cwd()
    if config_path is not None:
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}
        base_dir = Path(config_path).resolve().parent

    if not isinstance(raw, dict):
        raise ValueError("Config: top level must be a mapping")

    unknown = set(raw) - SECTIONS
    if unknown:
        raise ValueError(
            f"Config: unknown section(s) {sorted(unknown)}. Valid: {sorted(SECTIONS)}"
        )

    config = copy.deepcopy(DEFAULTS)
    for section, values in raw.items():
        if section == "paths":
            continue
        if not isinstance(values, dict):
            raise ValueError(f"Config: '{section}' must be a mapping")
        config[section].update(values)

    for section, values in (overrides or {}).items():
        config[section].update({k: v for k, v in values.items() if v is not None})

    paths = {k: str(v) for k, v in (raw.get("paths") or {}).items()}
    for section, key in (("dataset", "root"), ("output", "dir")):
        resolved = Path(resolve_path_vars(str(config[section][key]), paths))
        if not resolved.is_absolute():
            resolved = base_dir / resolved
        config[section][key] = str(resolved)

    ext = config["dataset"]["extension"]
    if not isinstance(ext, str) or not ext.startswith(".") or len(ext) < 2:
        raise ValueError(
            f"Config: dataset.extension must look like '.mp4', got {ext!r}"
        )
    config["dataset"]["extension"] = ext.lower()

    _positive_number("dataset", "load_timeout", config["dataset"]["load_timeout"])
    _positive_number("compose", "timeout", config["compose"]["timeout"])

    max_concurrent = config["compose"]["max_concurrent"]
    if isinstance(max_concurrent, bool) or not isinstance(max_concurrent, int) or max_concurrent < 1:
        raise ValueError(
            f"Config: compose.max_concurrent must be an integer >= 1, got {max_concurrent!r}"
        )

    config["output"]["url_prefix"] = "/" + str(config["output"]["url_prefix"]).strip("/")
    return config


# ── CLI helpers ────────────────────────────────────────────────────

def add_config_args(parser) -> None:
    """Register the --config/--dataset/--output-dir/--verbose flags."""
    parser.add_argument(
        "--config", default=None,
        help="Path to YAML config file (default: built-in defaults)",
    )
    parser.add_argument(
        "--dataset", default=None,
        help="Dataset directory (overrides dataset.root)",
    )
    parser.add_argument(
        "--output-dir", default=None,
        help="Generated video directory (overrides output.dir)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log per-word resolution and ffmpeg commands",
    )


def _absolute(path):
    return str(Path(path).resolve()) if path else None


def config_from_args(args) -> dict:
    """Load config from parsed CLI args and configure logging."""
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return load_config(
        args.config,
        overrides={
            "dataset": {"root": _absolute(args.dataset)},
            "output": {"dir": _absolute(args.output_dir)},
        },
    )
