from __future__ import annotations

import math
import re

WORDS_PER_MINUTE = 200
EXCERPT_LENGTH = 160
HEADING_RE = re.compile(r"^[ \t]*#+[ \t]+", re.MULTILINE)
LINK_RE = re.compile(r"\[([^\]]+)\]\([^)]+\)")
EMPHASIS_RE = re.compile(r"[*_`~]")
WHITESPACE_RE = re.compile(r"\s+")


def slugify(text: str) -> str:
    text = text.lower()
    text = re.sub(r"[^\w]+", "-", text, flags=re.UNICODE)
    text = text.strip("-_").replace("_", "-")
    return text or "tag"


def parse_front_matter(text: str) -> tuple[dict, str]:
    """Split a document into its ``---`` delimited metadata block and body.

    Only ``key: value`` lines are read; ``true``/``false`` become booleans and
    every other value stays a string. Anything that does not look like a
    complete block leaves the text untouched as the body.
    """
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.splitlines(keepends=True)
    if not lines or lines[0].strip() != "---":
        return {}, text

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() == "---":
            end = i
            break
    if end is None:
        return {}, text

    meta: dict = {}
    for line in lines[1:end]:
        idx = line.find(":")
        if idx <= 0:
            continue
        key = line[:idx].strip()
        value = line[idx + 1 :].strip()
        if not key:
            continue
        if value == "true":
            meta[key] = True
        elif value == "false":
            meta[key] = False
        else:
            meta[key] = value
    body = "".join(lines[end + 1 :])
    return meta, body


def parse_tags(value: object) -> list[str]:
    if not isinstance(value, str):
        return []
    tags: list[str] = []
    for item in value.split(","):
        tag = item.strip().lower()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def strip_markdown(text: str) -> str:
    """Lossy plain-text rendition of a markdown body, for excerpts and word counts.

    Heading lines keep their text and lose only the leading ``#`` markers, so
    an excerpt may open with the first heading.
    """
    text = HEADING_RE.sub("", text)
    text = LINK_RE.sub(r"\1", text)
    text = EMPHASIS_RE.sub("", text)
    return WHITESPACE_RE.sub(" ", text).strip()


def count_words(text: str) -> int:
    return len(text.split())


def reading_time(text: str) -> str:
    minutes = max(1, math.ceil(count_words(text) / WORDS_PER_MINUTE))
    return f"{minutes} min"


def make_excerpt(text: str, length: int = EXCERPT_LENGTH) -> str:
    if len(text) <= length:
        return text
    return text[:length] + "..."
