"""Shared fixtures: an upstream that answers, but far too slowly."""

import json
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

SLOW_DOCUMENT = {
    "events": {"in": 10, "out": 8, "filtered": 2},
    "flow": {"input_throughput": {"current": 5.5}},
}


class _TricklingStatsHandler(BaseHTTPRequestHandler):
    """Sends a valid stats document, one leading space every 0.2s first.

    Every socket read succeeds quickly, so only a whole-request deadline
    stops it. Left alone it finishes after ~6s.
    """

    padding = 30

    def do_GET(self):
        body = json.dumps(SLOW_DOCUMENT).encode()
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(self.padding + len(body)))
        self.end_headers()
        try:
            for _ in range(self.padding):
                self.wfile.write(b" ")
                self.wfile.flush()
                time.sleep(0.2)
            self.wfile.write(body)
        except (BrokenPipeError, ConnectionResetError):
            return

    def log_message(self, format, *args):
        pass


@pytest.fixture
def slow_upstream():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _TricklingStatsHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"127.0.0.1:{server.server_port}"
    finally:
        server.shutdown()
        server.server_close()
