"""Static HTTP server for the output tree, with the live-reload poll endpoint"""

import http.server
import logging
import threading
from functools import partial
from pathlib import Path

from sitebuild.server.notify import Notifier


logger = logging.getLogger(__name__)

RELOAD_PATH = "/__reload"
RELOAD_SCRIPT = (
    "<script>(function(){var g=null;setInterval(function(){"
    f"fetch('{RELOAD_PATH}').then(function(r){{return r.text()}}).then(function(t){{"
    "if(g!==null&&t!==g){location.reload()}g=t})},1000)})();</script>"
)


def inject_reload_script(page: str) -> str:
    """Insert the poll script before </body>, or append it."""
    idx = page.lower().rfind("</body>")
    if idx == -1:
        return page + RELOAD_SCRIPT
    return page[:idx] + RELOAD_SCRIPT + page[idx:]


class SiteHandler(http.server.SimpleHTTPRequestHandler):
    notifier: Notifier = None

    def log_message(self, format, *args):
        logger.debug("%s - %s", self.address_string(), format % args)

    def _send(self, body: bytes, content_type: str) -> None:
        self.send_response(200)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.send_header("Cache-Control", "no-store")
        self.end_headers()
        self.wfile.write(body)

    def do_GET(self):
        live = self.notifier is not None and self.notifier.live
        if live and self.path == RELOAD_PATH:
            return self._send(str(self.notifier.generation).encode(), "text/plain")

        path = Path(self.translate_path(self.path))
        if path.is_dir():
            path = path / "index.html"
        if live and path.suffix == ".html" and path.is_file():
            page = inject_reload_script(path.read_text(encoding="utf-8"))
            return self._send(page.encode("utf-8"), "text/html; charset=utf-8")
        return super().do_GET()


def make_server(root: Path, port: int, notifier: Notifier) -> http.server.ThreadingHTTPServer:
    handler = type("BoundSiteHandler", (SiteHandler,), {"notifier": notifier})
    return http.server.ThreadingHTTPServer(("", port), partial(handler, directory=str(root)))


def serve_in_background(server: http.server.ThreadingHTTPServer) -> threading.Thread:
    thread = threading.Thread(target=server.serve_forever, name="sitebuild-devserver", daemon=True)
    thread.start()
    logger.info("Serving at http://localhost:%d", server.server_address[1])
    return thread
