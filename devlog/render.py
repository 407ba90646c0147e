from __future__ import annotations

import functools
import html
import re
from pathlib import Path
from typing import Optional

import markdown
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

CODE_BLOCK_RE = re.compile(
    r'<pre><code class="language-(?P<lang>[^"\s]+)">(?P<code>.*?)</code></pre>', re.DOTALL
)
HIGHLIGHT_STYLE = "github-dark"
HIGHLIGHT_CLASS = "hljs"

BASE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{{title}}</title>
    <link rel="alternate" type="application/rss+xml" title="RSS" href="rss.xml">
    <style>
        :root{--bg:#0d1117;--bg2:#161b22;--border:#30363d;--text:#c9d1d9;--muted:#8b949e;--accent:#58a6ff}
        *{box-sizing:border-box;margin:0;padding:0}
        body{font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,sans-serif;background:var(--bg);color:var(--text);max-width:680px;margin:0 auto;padding:2rem 1.5rem;line-height:1.7}
        a{color:var(--accent);text-decoration:none}a:hover{text-decoration:underline}
        .header{margin-bottom:2rem}.header h1{font-size:1.5rem;margin-bottom:.25rem}.header p{color:var(--muted);font-size:.9rem}
        nav{padding:1rem 0;border-bottom:1px solid var(--border);margin-bottom:2rem;font-size:.9rem}nav a{margin-right:1.5rem}
        article{margin-bottom:2.5rem}article h2{font-size:1.25rem;margin-bottom:.25rem}article h2 a{color:var(--text)}
        .meta{color:var(--muted);font-size:.85rem;margin-bottom:.5rem}
        .tags{margin-top:.5rem}.tag{display:inline-block;background:var(--bg2);padding:.15rem .5rem;border-radius:3px;font-size:.8rem;margin-right:.5rem;color:var(--muted)}
        .excerpt{color:var(--muted)}
        .content h1{font-size:1.5rem;color:var(--accent);margin:1.5rem 0 1rem}
        .content h2{font-size:1.2rem;color:var(--accent);margin:1.5rem 0 .75rem}
        .content p{margin:1rem 0}
        .content ul,.content ol{margin:1rem 0;padding-left:1.5rem}.content li{margin:.5rem 0}
        .content code{background:rgba(110,118,129,.4);padding:.15em .4em;border-radius:3px;font-size:.9em}
        .content pre{background:var(--bg2);padding:1rem;border-radius:6px;overflow-x:auto;margin:1rem 0}
        .content pre code{background:none;padding:0}
        .content blockquote{border-left:3px solid var(--accent);padding-left:1rem;color:var(--muted);margin:1rem 0}
        .content a{text-decoration:underline}
        .post-nav{display:flex;justify-content:space-between;margin-top:2rem;padding-top:1rem;border-top:1px solid var(--border);font-size:.9rem}
        .post-nav a{max-width:45%}
        footer{margin-top:3rem;padding-top:1.5rem;border-top:1px solid var(--border);color:var(--muted);font-size:.8rem}
{{highlight_css}}
    </style>
</head>
<body>
    <header class="header">
        <h1>{{site_title}}</h1>
        {{tagline}}
    </header>
    <nav>
        {{nav}}
    </nav>
    <main>{{content}}</main>
    <footer>{{footer}}</footer>
</body>
</html>
"""


def render_template(template: str, **context: str) -> str:
    output = template
    late_keys = {"content"}
    for key, value in context.items():
        if key in late_keys:
            continue
        output = output.replace(f"{{{{{key}}}}}", value)
    for key in late_keys:
        if key in context:
            output = output.replace(f"{{{{{key}}}}}", context[key])
    return output


@functools.lru_cache(maxsize=None)
def highlight_css() -> str:
    return HtmlFormatter(style=HIGHLIGHT_STYLE).get_style_defs(f".{HIGHLIGHT_CLASS}")


def highlight_code(code: str, lang: str) -> Optional[str]:
    """Highlight ``code`` as ``lang``; ``None`` when pygments has no such lexer."""
    try:
        lexer = get_lexer_by_name(lang, stripnl=False)
    except ClassNotFound:
        return None
    return highlight(code, lexer, HtmlFormatter(nowrap=True))


def highlight_code_blocks(html_text: str) -> str:
    def repl(match: re.Match) -> str:
        lang = match.group("lang")
        code = match.group("code")
        highlighted = highlight_code(html.unescape(code), lang)
        if highlighted is None:
            highlighted = code
        lang_attr = html.escape(lang, quote=True)
        return f'<pre><code class="{HIGHLIGHT_CLASS} language-{lang_attr}">{highlighted}</code></pre>'

    return CODE_BLOCK_RE.sub(repl, html_text)


def render_markdown(body: str) -> str:
    md = markdown.Markdown(extensions=["fenced_code", "tables"])
    html_content = md.convert(body)
    return highlight_code_blocks(html_content)


def build_nav(config: dict) -> str:
    links = ['<a href="index.html">Posts</a>']
    if config.get("tags", True):
        links.append('<a href="tags.html">Tags</a>')
    links.append('<a href="rss.xml">RSS</a>')
    author = config.get("author", "")
    author_url = config.get("authorUrl", "")
    if author and author_url:
        links.append(f'<a href="{html.escape(author_url)}">{html.escape(author)}</a>')
    return "\n        ".join(links)


def build_footer(config: dict) -> str:
    credit = html.escape(config.get("credit", "") or "devlog")
    credit_url = config.get("creditUrl", "")
    if credit_url:
        return f'<a href="{html.escape(credit_url)}">{credit}</a>'
    return f'<a href="index.html">{credit}</a>'


def render_page(title: str, body: str, config: dict) -> str:
    site_title = config.get("title", "") or "Devlog"
    page_title = f"{title} | {site_title}" if title else site_title
    tagline = config.get("tagline", "")
    return render_template(
        BASE_TEMPLATE,
        title=html.escape(page_title),
        site_title=html.escape(site_title),
        tagline=f"<p>{html.escape(tagline)}</p>" if tagline else "",
        nav=build_nav(config),
        footer=build_footer(config),
        highlight_css=highlight_css(),
        content=body,
    )


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
