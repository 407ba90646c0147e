from __future__ import annotations

import argparse
import datetime as dt
import sys
import time
from pathlib import Path
from typing import Optional

from .config import build_config, resolve_paths
from .content import make_excerpt, parse_front_matter, parse_tags, reading_time, strip_markdown
from .deploy import DeployError, deploy_site
from .pages import (
    build_404,
    build_index,
    build_posts,
    build_rss,
    build_sitemap,
    build_tag_pages,
    build_tags,
)
from .redact import find_sensitive_rule
from .render import render_markdown, write_text
from .serve import DEFAULT_PORT, serve_site

SEED_POST_NAME = "001-hello.md"


class BuildError(Exception):
    pass


def seed_posts_dir(posts_dir: Path) -> None:
    today = dt.date.today().isoformat()
    write_text(
        posts_dir / SEED_POST_NAME,
        f"---\ntitle: Hello\ndate: {today}\ntags: meta\n---\n\nFirst post.\n",
    )
    print(f"Created {posts_dir} with an example post.")


def list_post_files(posts_dir: Path) -> list[Path]:
    """Markdown sources, newest first.

    "Newest" is the reverse lexicographic order of file names; dates in
    frontmatter are never consulted, so names need a sortable prefix such as
    ``001-`` or ``2024-05-01-``.
    """
    files = [
        path
        for path in posts_dir.iterdir()
        if path.is_file() and path.name.endswith(".md") and not path.name.startswith(".")
    ]
    return sorted(files, key=lambda p: p.name, reverse=True)


def make_post(path: Path, meta: dict, body: str, config: dict) -> dict:
    slug = path.name[: -len(".md")]
    title = meta.get("title")
    date = meta.get("date")
    plain = strip_markdown(body)
    return {
        "slug": slug,
        "title": str(title) if title else slug,
        "date": date if isinstance(date, str) else "",
        "tags": parse_tags(meta.get("tags")),
        "html": render_markdown(body),
        "excerpt": make_excerpt(plain, config.get("excerptLength", 160)),
        "time": reading_time(plain),
    }


def build_site(config: dict, posts_dir: Path, output_dir: Path) -> dict:
    if not posts_dir.exists():
        if config.get("missingSource") == "fail":
            raise BuildError(f"Posts directory not found: {posts_dir}")
        seed_posts_dir(posts_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    posts: list[dict] = []
    tag_map: dict[str, list[dict]] = {}
    skipped = 0
    drafts = 0
    for path in list_post_files(posts_dir):
        raw_text = path.read_text(encoding="utf-8")
        meta, body = parse_front_matter(raw_text)
        if config.get("redact"):
            rule = find_sensitive_rule(raw_text)
            if rule:
                print(f"Warning: skipped {path.name}: looks like sensitive data ({rule}).", file=sys.stderr)
                skipped += 1
                continue
        if meta.get("draft") is True:
            print(f"  - {path.name} (draft)")
            drafts += 1
            continue
        post = make_post(path, meta, body, config)
        posts.append(post)
        for tag in post["tags"]:
            tag_map.setdefault(tag, []).append(post)
        print(f"  ✓ {post['slug']}.html")

    build_posts(output_dir, posts, config)
    build_index(output_dir, posts, config)
    if config.get("tags", True):
        build_tags(output_dir, tag_map, config)
        build_tag_pages(output_dir, tag_map, config)
    build_404(output_dir, config)
    if config.get("sitemap", True):
        build_sitemap(output_dir, posts, tag_map, config)
    build_rss(output_dir, posts, config)

    print(f"Built {len(posts)} posts, {len(tag_map)} tags")
    return {"posts": len(posts), "tags": len(tag_map), "skipped": skipped, "drafts": drafts}


def run_build(config: dict, paths: dict[str, Path]) -> None:
    print("Building...")
    start = time.perf_counter()
    try:
        build_site(config, paths["posts"], paths["output"])
    except Exception as exc:
        print(f"Build failed: {exc}", file=sys.stderr)
        sys.exit(1)
    elapsed = time.perf_counter() - start
    print(f"Build completed in {elapsed:.2f}s.")
    print(f"Site generated in: {paths['output']}")


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default="", help="Site config file (JSON/TOML/YAML). Env: DEVLOG_CONFIG.")
    common.add_argument("--posts", default="", help="Directory containing Markdown posts. Env: DEVLOG_POSTS.")
    common.add_argument("--output", default="", help="Output directory for the site. Env: DEVLOG_OUTPUT.")
    common.add_argument(
        "--tags",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Generate tags.html and per-tag pages.",
    )
    common.add_argument(
        "--sitemap",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Generate sitemap.xml.",
    )
    common.add_argument(
        "--post-nav",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Link each post to its older and newer neighbours.",
    )
    common.add_argument(
        "--redact",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Skip posts that look like they contain credentials or keys.",
    )

    parser = argparse.ArgumentParser(description="Markdown devlog generator.")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("build", parents=[common], help="Build the site.")
    serve_parser = subparsers.add_parser("serve", parents=[common], help="Build, then serve the output directory.")
    serve_parser.add_argument("port", nargs="?", type=int, default=DEFAULT_PORT, help="Port to listen on.")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    subparsers.add_parser("deploy", parents=[common], help="Publish the output directory with gh-pages.")
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        sys.exit(1)

    paths = resolve_paths(args)
    config = build_config(
        paths["config"],
        overrides={
            "tags": args.tags,
            "sitemap": args.sitemap,
            "postNav": args.post_nav,
            "redact": args.redact,
        },
    )

    if args.command == "build":
        run_build(config, paths)
    elif args.command == "serve":
        run_build(config, paths)
        serve_site(paths["output"], args.port, host=args.host)
    elif args.command == "deploy":
        try:
            deploy_site(paths["output"])
        except DeployError as exc:
            print(f"Deploy failed: {exc}", file=sys.stderr)
            sys.exit(1)
