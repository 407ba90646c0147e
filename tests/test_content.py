"""Tests for frontmatter parsing and text helpers."""

from __future__ import annotations

from devlog.content import (
    make_excerpt,
    parse_front_matter,
    parse_tags,
    reading_time,
    slugify,
    strip_markdown,
)


class TestParseFrontMatter:
    def test_recovers_pairs_and_body(self) -> None:
        meta, body = parse_front_matter("---\ntitle: Hello\ndate: 2024-01-02\n---\nBody here.\n")
        assert meta == {"title": "Hello", "date": "2024-01-02"}
        assert body == "Body here.\n"

    def test_trims_keys_and_values(self) -> None:
        meta, _ = parse_front_matter("---\n  title  :   Spaced out   \n---\n")
        assert meta == {"title": "Spaced out"}

    def test_coerces_only_true_and_false(self) -> None:
        meta, _ = parse_front_matter("---\ndraft: true\npinned: false\nflag: yes\nupper: True\n---\n")
        assert meta["draft"] is True
        assert meta["pinned"] is False
        assert meta["flag"] == "yes"
        assert meta["upper"] == "True"

    def test_splits_on_first_colon(self) -> None:
        meta, _ = parse_front_matter("---\nlink: https://example.com:8080/x\n---\n")
        assert meta["link"] == "https://example.com:8080/x"

    def test_ignores_lines_without_colon(self) -> None:
        meta, _ = parse_front_matter("---\njust words\ntitle: Kept\n: orphan\n---\n")
        assert meta == {"title": "Kept"}

    def test_no_block_returns_input_as_body(self) -> None:
        text = "# Heading\n\nNo metadata here.\n"
        assert parse_front_matter(text) == ({}, text)

    def test_unclosed_block_returns_input_as_body(self) -> None:
        text = "---\ntitle: Open\nbody without end\n"
        assert parse_front_matter(text) == ({}, text)

    def test_empty_input(self) -> None:
        assert parse_front_matter("") == ({}, "")

    def test_tolerates_crlf_and_bom(self) -> None:
        meta, body = parse_front_matter("\ufeff---\r\ntitle: Win\r\n---\r\nText\r\n")
        assert meta == {"title": "Win"}
        assert body == "Text\r\n"


class TestParseTags:
    def test_splits_and_normalizes(self) -> None:
        assert parse_tags("Go, rust ,, PYTHON") == ["go", "rust", "python"]

    def test_case_variants_merge(self) -> None:
        assert parse_tags("Go, go") == ["go"]

    def test_non_string_is_empty(self) -> None:
        assert parse_tags(None) == []
        assert parse_tags(True) == []


class TestStripMarkdown:
    def test_removes_markup(self) -> None:
        text = "# Title\n\nSome *bold* and `code` with a [link](https://x.y).\n\n## Next\n~~gone~~ _it_"
        assert strip_markdown(text) == "Title Some bold and code with a link. Next gone it"

    def test_collapses_whitespace(self) -> None:
        assert strip_markdown("  a\n\n\tb   c \n") == "a b c"

    def test_heading_text_is_kept(self) -> None:
        assert strip_markdown("## Release notes\n\nShipped it.") == "Release notes Shipped it."


class TestReadingTime:
    def test_400_words_is_two_minutes(self) -> None:
        assert reading_time(" ".join(["word"] * 400)) == "2 min"

    def test_150_words_is_one_minute(self) -> None:
        assert reading_time(" ".join(["word"] * 150)) == "1 min"

    def test_rounds_up(self) -> None:
        assert reading_time(" ".join(["word"] * 201)) == "2 min"

    def test_empty_text_is_one_minute(self) -> None:
        assert reading_time("") == "1 min"


class TestMakeExcerpt:
    def test_long_text_is_truncated_with_ellipsis(self) -> None:
        excerpt = make_excerpt("x" * 200, 160)
        assert excerpt == "x" * 160 + "..."

    def test_short_text_is_unchanged(self) -> None:
        assert make_excerpt("short text", 160) == "short text"

    def test_exact_length_has_no_ellipsis(self) -> None:
        assert make_excerpt("y" * 160, 160) == "y" * 160


class TestSlugify:
    def test_basic(self) -> None:
        assert slugify("Hello World") == "hello-world"

    def test_empty_falls_back(self) -> None:
        assert slugify("!!!") == "tag"
