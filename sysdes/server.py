"""A minimal HTTP service that answers a greeting on its root path."""

from __future__ import annotations

import argparse
import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

GREETING = "Hello from Crow full repo!"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3013

logger = logging.getLogger(__name__)


class HelloHandler(BaseHTTPRequestHandler):
    """Serves the greeting on ``/`` and 404 everywhere else."""

    def do_GET(self) -> None:
        path = self.path.split("?", 1)[0]
        if path == "/":
            self._reply(200, GREETING)
        else:
            self._reply(404, "404 Not Found")

    def _reply(self, status: int, text: str) -> None:
        body = text.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args) -> None:  # noqa: A002
        """Send access lines to the module logger instead of stderr."""
        logger.debug("%s - %s", self.address_string(), format % args)


def create_server(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> ThreadingHTTPServer:
    """Build a threaded HTTP server bound to ``host:port``."""
    return ThreadingHTTPServer((host, port), HelloHandler)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Serve a greeting over HTTP.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)

    with create_server(args.host, args.port) as server:
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())