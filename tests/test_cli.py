"""End-to-end tests for the generate, cleanup, catalog, and transcribe subcommands."""

from unittest.mock import patch

import pytest

from islvideo.main import main


def _dirs(dataset, tmp_path):
    return ["--dataset", str(dataset), "--output-dir", str(tmp_path / "videos")]


class TestGenerateCli:
    def test_cleans_and_generates(self, dataset, tmp_path, capsys):
        main(["generate", "I", "said", "Hello", "42!", *_dirs(dataset, tmp_path)])
        out = capsys.readouterr().out
        assert "Sentence: 'said hello 4 2'" in out
        assert "Signed 3/4 words" in out
        assert "Skipped (no clip): said" in out
        assert len(list((tmp_path / "videos").glob("*.mp4"))) == 1

    def test_no_clips_exits_nonzero(self, dataset, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["generate", "xyzzy", *_dirs(dataset, tmp_path)])
        assert exc_info.value.code == 1
        assert "NoClipsResolved" in capsys.readouterr().err

    def test_non_english_without_backend(self, dataset, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["generate", "नमस्ते", "--language", "Hindi", *_dirs(dataset, tmp_path)])
        assert exc_info.value.code == 2


class TestCleanupCli:
    def test_reports_count(self, tmp_path, capsys):
        videos = tmp_path / "videos"
        videos.mkdir()
        (videos / "a.mp4").write_bytes(b"x")
        (videos / "b.mp4").write_bytes(b"x")
        main(["cleanup", "--output-dir", str(videos)])
        assert "deleted 2 videos" in capsys.readouterr().out

    def test_missing_directory(self, tmp_path, capsys):
        main(["cleanup", "--output-dir", str(tmp_path / "nope")])
        assert "Nothing to delete" in capsys.readouterr().out


class TestCatalogCli:
    def test_lists_vocabulary(self, dataset, capsys):
        main(["catalog", "--dataset", str(dataset)])
        out = capsys.readouterr().out
        assert "Catalog valid: 5 words" in out
        assert "hello" in out and "number" in out

    def test_probe_durations(self, dataset, capsys):
        main(["catalog", "--dataset", str(dataset), "--probe"])
        out = capsys.readouterr().out
        assert "1.0s" in out

    def test_invalid_dataset(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["catalog", "--dataset", str(tmp_path / "missing")])
        assert exc_info.value.code == 1
        assert "Catalog invalid" in capsys.readouterr().err


class TestTranscribeCli:
    def test_undecodable_audio_exits_nonzero(self, tmp_path, capsys):
        from islvideo.transcribe import TranscriptionError

        with patch(
            "islvideo.transcribe_cli.transcribe",
            side_effect=TranscriptionError("ffmpeg could not decode audio: bad header"),
        ):
            with pytest.raises(SystemExit) as exc_info:
                main(["transcribe", str(tmp_path / "noise.webm")])
        assert exc_info.value.code == 1
        assert "Error [TranscriptionError]: ffmpeg could not decode audio" in capsys.readouterr().err

    def test_missing_extra_exits_nonzero(self, tmp_path, capsys):
        with patch("islvideo.transcribe._WHISPER_AVAILABLE", False):
            with pytest.raises(SystemExit) as exc_info:
                main(["transcribe", str(tmp_path / "speech.wav")])
        assert exc_info.value.code == 1
        assert "pip install islvideo[transcribe]" in capsys.readouterr().err

    def test_unknown_language_exits_nonzero(self, tmp_path, capsys):
        with patch("islvideo.transcribe._WHISPER_AVAILABLE", True):
            with pytest.raises(SystemExit) as exc_info:
                main(["transcribe", str(tmp_path / "speech.wav"), "--language", "Klingon"])
        assert exc_info.value.code == 1
        assert "Error [UnsupportedLanguage]" in capsys.readouterr().err
