"""Shared pytest fixtures for devlog tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from devlog.config import default_config


@pytest.fixture
def posts_dir(tmp_path: Path) -> Path:
    path = tmp_path / "posts"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "public"


@pytest.fixture
def config() -> dict:
    """Validated defaults with a fixed site URL."""
    cfg = default_config()
    cfg["siteUrl"] = "https://example.com"
    return cfg


@pytest.fixture
def write_post(posts_dir: Path) -> Callable[..., Path]:
    """Write a post with optional frontmatter fields into the posts directory."""

    def _write(name: str, body: str = "Some text.", **meta: str) -> Path:
        if meta:
            header = "\n".join(f"{key}: {value}" for key, value in meta.items())
            text = f"---\n{header}\n---\n\n{body}\n"
        else:
            text = f"{body}\n"
        path = posts_dir / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
