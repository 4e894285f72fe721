"""Tests for word resolution: exact match first, then substring fallback."""

import pytest

from islvideo.catalog import ClipCatalog
from islvideo.errors import CatalogUnavailable
from islvideo.resolver import WordResolver


def _resolver(root):
    catalog = ClipCatalog(root)
    catalog.load()
    return WordResolver(catalog)


class TestExactMatch:
    def test_exact_key(self, stub_dataset):
        resolver = _resolver(stub_dataset(["hello", "world"]))
        assert resolver.resolve("hello").endswith("hello/hello.mp4")

    def test_exact_beats_substring_match(self, stub_dataset):
        # "go" sorts first and is a substring of "good".
        resolver = _resolver(stub_dataset(["go", "good", "goodbye"]))
        assert resolver.resolve("good").endswith("good/good.mp4")

    def test_exact_beats_earlier_fallback_key(self, stub_dataset):
        # "a" sorts first and is contained in "cat", yet "cat" is exact.
        resolver = _resolver(stub_dataset(["a", "cat"]))
        assert resolver.resolve("cat").endswith("cat/cat.mp4")

    def test_stale_exact_entry_falls_back(self, stub_dataset):
        root = stub_dataset(["number", "numbers"])
        resolver = _resolver(root)
        (root / "numbers" / "numbers.mp4").unlink()
        assert resolver.resolve("numbers").endswith("number/number.mp4")


class TestFallbackMatch:
    def test_token_contains_key(self, stub_dataset):
        resolver = _resolver(stub_dataset(["number"]))
        assert resolver.resolve("numbers").endswith("number/number.mp4")

    def test_key_contains_token(self, stub_dataset):
        resolver = _resolver(stub_dataset(["goodbye"]))
        assert resolver.resolve("good").endswith("goodbye/goodbye.mp4")

    def test_first_key_in_lexicographic_order_wins(self, stub_dataset):
        resolver = _resolver(stub_dataset(["thanks", "thank"]))
        # Both contain "than"; "thank" < "thanks".
        assert resolver.resolve("than").endswith("thank/thank.mp4")

    def test_skips_missing_files(self, stub_dataset):
        root = stub_dataset(["thank", "thanks"])
        resolver = _resolver(root)
        (root / "thank" / "thank.mp4").unlink()
        assert resolver.resolve("than").endswith("thanks/thanks.mp4")

    def test_no_match_returns_none(self, stub_dataset):
        resolver = _resolver(stub_dataset(["hello"]))
        assert resolver.resolve("zebra") is None


class TestResolveAll:
    def test_preserves_order_and_length(self, stub_dataset):
        resolver = _resolver(stub_dataset(["hello", "world", "4", "2"]))
        tokens = ["world", "4", "hello", "2", "4"]
        words = resolver.resolve_all(tokens)
        assert [w.token for w in words] == tokens
        assert all(w.resolved for w in words)
        assert words[1].clip_path == words[4].clip_path

    def test_unresolved_tokens_have_no_path(self, stub_dataset):
        resolver = _resolver(stub_dataset(["hello"]))
        words = resolver.resolve_all(["hello", "zebra"])
        assert words[0].resolved
        assert not words[1].resolved
        assert words[1].clip_path is None


class TestPreconditions:
    def test_empty_token_raises(self, stub_dataset):
        resolver = _resolver(stub_dataset(["hello"]))
        with pytest.raises(ValueError, match="empty"):
            resolver.resolve("")

    def test_catalog_not_ready_raises(self, stub_dataset):
        resolver = WordResolver(ClipCatalog(stub_dataset(["hello"])))
        with pytest.raises(CatalogUnavailable):
            resolver.resolve("hello")
