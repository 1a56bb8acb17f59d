"""Tests for sitestream.scanner — incremental package tag detection."""

from __future__ import annotations

import random

import pytest

from sitestream.scanner import DEFAULT_WINDOW, PackageScanner, observe

TEXT = (
    "Here is a landing page.\n"
    "<package>react</package> plus <package>framer-motion</package>\n"
    '<file path="src/App.jsx">export default App;</file>\n'
    "<package>react</package><package>  lucide-react \n</package>done"
)
EXPECTED = ["react", "framer-motion", "lucide-react"]


def _scan_all(chunks: list[str], window: int = DEFAULT_WINDOW) -> list[str]:
    scanner = PackageScanner(window)
    found: list[str] = []
    for chunk in chunks:
        found.extend(scanner.observe(chunk))
    return found


def _split(text: str, cuts: list[int]) -> list[str]:
    bounds = [0, *sorted(cuts), len(text)]
    return [text[a:b] for a, b in zip(bounds, bounds[1:])]


# ── observe() ────────────────────────────────────────────────


class TestObserveFunction:
    def test_partial_open_tag_reports_nothing(self):
        buffer, found = observe("", "<pack")
        assert found == []
        assert buffer == "<pack"

    def test_tag_completed_by_second_chunk(self):
        buffer, found = observe("", "<pack")
        buffer, found = observe(buffer, "age>foo</package>bar")
        assert found == ["foo"]

    def test_seen_names_skipped(self):
        _, found = observe("", "<package>a</package><package>b</package>", {"a"})
        assert found == ["b"]

    def test_duplicate_within_one_chunk_reported_once(self):
        _, found = observe("", "<package>a</package><package>a</package>")
        assert found == ["a"]

    def test_buffer_truncated_after_scan(self):
        chunk = "x" * 40 + "<package>late</package>"
        buffer, found = observe("", chunk, window=30)
        assert found == ["late"]
        assert len(buffer) == 30
        assert buffer == chunk[-30:]

    def test_short_buffer_kept_whole(self):
        buffer, _ = observe("abc", "def", window=10)
        assert buffer == "abcdef"


# ── PackageScanner ───────────────────────────────────────────


class TestPackageScanner:
    def test_split_open_tag(self):
        scanner = PackageScanner()
        assert scanner.observe("<pack") == []
        assert scanner.observe("age>foo</package>bar") == ["foo"]

    def test_repeated_tag_across_chunks_reported_once(self):
        scanner = PackageScanner()
        assert scanner.observe("<package>a</package>") == ["a"]
        assert scanner.observe("<package>a</package>") == []
        assert scanner.packages == ["a"]

    def test_many_tags_in_one_chunk(self):
        scanner = PackageScanner()
        found = scanner.observe(
            "<package>a</package><package>b</package><package>c</package>"
        )
        assert found == ["a", "b", "c"]

    def test_no_tags(self):
        scanner = PackageScanner()
        assert scanner.observe("plain text with <div> markup") == []
        assert scanner.packages == []

    def test_name_whitespace_trimmed(self):
        scanner = PackageScanner()
        assert scanner.observe("<package>\n  react-router-dom \n</package>") == [
            "react-router-dom"
        ]

    def test_blank_name_ignored(self):
        scanner = PackageScanner()
        assert scanner.observe("<package>   </package>") == []

    def test_empty_tag_ignored(self):
        scanner = PackageScanner()
        assert scanner.observe("<package></package>") == []

    def test_unterminated_tag_ignored(self):
        scanner = PackageScanner()
        assert scanner.observe("<package>react") == []
        assert scanner.observe(" and more text") == []
        assert scanner.packages == []

    def test_nested_tag_matches_innermost(self):
        scanner = PackageScanner()
        assert scanner.observe("<package><package>x</package></package>") == ["x"]

    def test_name_with_angle_bracket_does_not_match(self):
        scanner = PackageScanner()
        assert scanner.observe("<package>a<b</package>") == []

    def test_scoped_package_names(self):
        scanner = PackageScanner()
        found = scanner.observe("<package>@headlessui/react</package>")
        assert found == ["@headlessui/react"]

    def test_packages_in_discovery_order(self):
        scanner = PackageScanner()
        scanner.observe("<package>zod</package>")
        scanner.observe("<package>axios</package><package>zod</package>")
        assert scanner.packages == ["zod", "axios"]

    def test_buffer_bounded_for_long_streams(self):
        scanner = PackageScanner(window=100)
        for _ in range(500):
            scanner.observe("lorem ipsum " * 10)
        assert len(scanner.buffer) <= 100

    def test_tag_split_at_window_edge_still_found(self):
        scanner = PackageScanner(window=50)
        scanner.observe("x" * 200 + "<package>tail")
        assert scanner.observe("wind</package>") == ["tailwind"]

    def test_invalid_window_rejected(self):
        with pytest.raises(ValueError, match="window must be positive"):
            PackageScanner(window=0)


# ── Chunking invariance ──────────────────────────────────────


class TestChunkingInvariance:
    def test_whole_text_at_once(self):
        assert _scan_all([TEXT]) == EXPECTED

    @pytest.mark.parametrize("offset", range(1, len(TEXT)))
    def test_every_single_split_point(self, offset):
        assert _scan_all([TEXT[:offset], TEXT[offset:]]) == EXPECTED

    def test_one_character_chunks(self):
        assert _scan_all(list(TEXT)) == EXPECTED

    def test_one_character_chunks_small_window(self):
        assert _scan_all(list(TEXT), window=40) == EXPECTED

    @pytest.mark.parametrize("tag", ["<package>", "</package>"])
    def test_delimiter_split_at_every_offset(self, tag):
        text = "before <package>vite</package> after"
        start = text.index(tag)
        for i in range(1, len(tag)):
            cut = start + i
            assert _scan_all([text[:cut], text[cut:]]) == ["vite"]

    def test_random_chunkings(self):
        rng = random.Random(1234)
        for _ in range(200):
            count = rng.randint(1, 30)
            cuts = rng.sample(range(1, len(TEXT)), count)
            assert _scan_all(_split(TEXT, cuts)) == EXPECTED
