from __future__ import annotations

import html
from pathlib import Path

from .content import slugify
from .render import render_page, write_text
from .utils import join_url, parse_post_date, rfc822_date

FEED_LIMIT = 20


def tag_page_name(tag: str) -> str:
    return f"tag-{slugify(tag)}.html"


def post_page_name(post: dict) -> str:
    return f"{post['slug']}.html"


def cdata(text: str) -> str:
    return "<![CDATA[" + text.replace("]]>", "]]&gt;") + "]]>"


def build_tag_links(tags: list[str], config: dict) -> str:
    if not tags:
        return ""
    if config.get("tags", True):
        links = "".join(
            f'<a href="{html.escape(tag_page_name(tag))}" class="tag">{html.escape(tag)}</a>' for tag in tags
        )
    else:
        links = "".join(f'<span class="tag">{html.escape(tag)}</span>' for tag in tags)
    return f'<div class="tags">{links}</div>'


def build_meta(post: dict) -> str:
    date = html.escape(post["date"])
    separator = " · " if post["date"] and post["time"] else ""
    return f'<div class="meta">{date}{separator}{post["time"]}</div>'


def build_post_nav(posts: list[dict], index: int) -> str:
    """Links to the neighbouring entries: older on the left, newer on the right."""
    older = posts[index + 1] if index + 1 < len(posts) else None
    newer = posts[index - 1] if index > 0 else None
    parts = []
    if older:
        parts.append(f'<a href="{html.escape(post_page_name(older))}">← {html.escape(older["title"])}</a>')
    else:
        parts.append("<span></span>")
    if newer:
        parts.append(f'<a href="{html.escape(post_page_name(newer))}">{html.escape(newer["title"])} →</a>')
    else:
        parts.append("<span></span>")
    return f'<div class="post-nav">{"".join(parts)}</div>'


def build_posts(output_dir: Path, posts: list[dict], config: dict) -> None:
    show_nav = config.get("postNav", True)
    for index, post in enumerate(posts):
        nav_html = build_post_nav(posts, index) if show_nav else ""
        content = (
            "<article>"
            f'<h1>{html.escape(post["title"])}</h1>'
            f"{build_meta(post)}"
            f'{build_tag_links(post["tags"], config)}'
            f'<div class="content">{post["html"]}</div>'
            f"{nav_html}"
            "</article>"
        )
        write_text(output_dir / post_page_name(post), render_page(post["title"], content, config))


def build_index(output_dir: Path, posts: list[dict], config: dict) -> None:
    if not posts:
        content = "<p>No posts yet.</p>"
    else:
        articles = []
        for post in posts:
            articles.append(
                "<article>"
                f'<h2><a href="{html.escape(post_page_name(post))}">{html.escape(post["title"])}</a></h2>'
                f"{build_meta(post)}"
                f'{build_tag_links(post["tags"], config)}'
                f'<p class="excerpt">{html.escape(post["excerpt"])}</p>'
                "</article>"
            )
        content = "\n".join(articles)
    write_text(output_dir / "index.html", render_page("Home", content, config))


def build_tags(output_dir: Path, tag_map: dict, config: dict) -> None:
    if not tag_map:
        items = "<p>No tags yet.</p>"
    else:
        rows = []
        for tag in sorted(tag_map):
            rows.append(
                f'<li><a href="{html.escape(tag_page_name(tag))}">{html.escape(tag)}</a> ({len(tag_map[tag])})</li>'
            )
        items = f'<ul>{"".join(rows)}</ul>'
    write_text(output_dir / "tags.html", render_page("Tags", f"<h1>Tags</h1>{items}", config))


def build_tag_pages(output_dir: Path, tag_map: dict, config: dict) -> None:
    for tag in sorted(tag_map):
        articles = []
        for post in tag_map[tag]:
            articles.append(
                "<article>"
                f'<h2><a href="{html.escape(post_page_name(post))}">{html.escape(post["title"])}</a></h2>'
                f'<div class="meta">{html.escape(post["date"])}</div>'
                "</article>"
            )
        label = html.escape(f"#{tag}")
        content = f"<h1>{label}</h1>{''.join(articles)}"
        write_text(output_dir / tag_page_name(tag), render_page(f"#{tag}", content, config))


def build_404(output_dir: Path, config: dict) -> None:
    content = '<p>Page not found. <a href="index.html">Go home</a>.</p>'
    write_text(output_dir / "404.html", render_page("Not Found", content, config))


def build_sitemap(output_dir: Path, posts: list[dict], tag_map: dict, config: dict) -> None:
    site_url = config.get("siteUrl", "").rstrip("/")
    urls = [site_url + "/"]
    if config.get("tags", True):
        urls.append(join_url(site_url, "tags.html"))
    for post in posts:
        urls.append(join_url(site_url, post_page_name(post)))
    if config.get("tags", True):
        for tag in sorted(tag_map):
            urls.append(join_url(site_url, tag_page_name(tag)))
    sitemap = "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
            *[f"  <url><loc>{html.escape(url)}</loc></url>" for url in urls],
            "</urlset>",
            "",
        ]
    )
    write_text(output_dir / "sitemap.xml", sitemap)


def build_rss(output_dir: Path, posts: list[dict], config: dict, feed_limit: int = FEED_LIMIT) -> None:
    site_url = config.get("siteUrl", "").rstrip("/")
    items = []
    for post in posts[:feed_limit]:
        link = html.escape(join_url(site_url, post_page_name(post)))
        lines = [
            "    <item>",
            f"      <title>{cdata(post['title'])}</title>",
            f"      <link>{link}</link>",
            f"      <guid>{link}</guid>",
        ]
        published = parse_post_date(post["date"])
        if published is not None:
            lines.append(f"      <pubDate>{rfc822_date(published)}</pubDate>")
        lines.append(f"      <description>{cdata(post['html'])}</description>")
        lines.append("    </item>")
        items.append("\n".join(lines))
    channel = [
        f"    <title>{html.escape(config.get('title', ''))}</title>",
        f"    <link>{html.escape(site_url + '/')}</link>",
        f"    <description>{html.escape(config.get('tagline', ''))}</description>",
    ]
    if site_url:
        self_link = html.escape(join_url(site_url, "rss.xml"))
        channel.append(f'    <atom:link href="{self_link}" rel="self" type="application/rss+xml" />')
    rss = "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">',
            "  <channel>",
            *channel,
            *items,
            "  </channel>",
            "</rss>",
            "",
        ]
    )
    write_text(output_dir / "rss.xml", rss)
