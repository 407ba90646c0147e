from __future__ import annotations

import functools
from http import HTTPStatus
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

DEFAULT_PORT = 8080
EXTRA_MIME_TYPES = {
    ".xml": "application/xml",
    ".rss": "application/rss+xml",
    ".md": "text/markdown; charset=utf-8",
    ".webmanifest": "application/manifest+json",
    ".svg": "image/svg+xml",
}


class DevlogRequestHandler(SimpleHTTPRequestHandler):
    """Static file handler that answers missing paths with the site's 404 page."""

    extensions_map = {**SimpleHTTPRequestHandler.extensions_map, **EXTRA_MIME_TYPES}

    def send_error(self, code, message=None, explain=None):
        if code == HTTPStatus.NOT_FOUND:
            page = Path(self.directory) / "404.html"
            if page.is_file():
                body = page.read_bytes()
                self.send_response(HTTPStatus.NOT_FOUND, message)
                self.send_header("Content-Type", "text/html; charset=utf-8")
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                if self.command != "HEAD":
                    self.wfile.write(body)
                return
        super().send_error(code, message, explain)


def make_server(output_dir: Path, port: int, host: str = "127.0.0.1") -> ThreadingHTTPServer:
    handler = functools.partial(DevlogRequestHandler, directory=str(output_dir))
    return ThreadingHTTPServer((host, port), handler)


def serve_site(output_dir: Path, port: int = DEFAULT_PORT, host: str = "127.0.0.1") -> None:
    server = make_server(output_dir, port, host)
    bound_host, bound_port = server.server_address[:2]
    print(f"Serving {output_dir} at http://{bound_host}:{bound_port}/ (Ctrl+C to stop)")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\nStopped.")
    finally:
        server.server_close()
