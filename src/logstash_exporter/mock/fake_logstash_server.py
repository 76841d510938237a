"""
Fake Logstash /_node/stats server for testing without a real node.

    python -m logstash_exporter.mock.fake_logstash_server
    logstash-exporter --logstash-host localhost:9600
"""

from __future__ import annotations

import json
from http.server import BaseHTTPRequestHandler, HTTPServer

from logstash_exporter.mock.generator import MockLogstashNode

_node = MockLogstashNode(seed=42)


class _NodeStatsHandler(BaseHTTPRequestHandler):
    def do_GET(self):
        if self.path.split("?", 1)[0] == "/_node/stats":
            body = json.dumps(_node.snapshot()).encode()
            self.send_response(200)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)
        else:
            self.send_response(404)
            self.end_headers()

    def log_message(self, format, *args):
        pass  # Suppress request logging noise


def run_fake_server(host: str = "127.0.0.1", port: int = 9600):
    server = HTTPServer((host, port), _NodeStatsHandler)
    print(f"Fake Logstash node stats at http://{host}:{port}/_node/stats")
    print("Press Ctrl+C to stop.\n")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    server.server_close()
    print("\nServer stopped.")


if __name__ == "__main__":
    run_fake_server()
