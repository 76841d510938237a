"""
Scrape endpoint. Builds a private CollectorRegistry (no global REGISTRY,
no process/platform collectors) and serves it on a single path.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from prometheus_client import CollectorRegistry, make_wsgi_app
from prometheus_client.exposition import ThreadingWSGIServer
from prometheus_client.registry import Collector

log = logging.getLogger(__name__)

DEFAULT_LISTEN_ADDRESS = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_METRICS_PATH = "/metrics"

WSGIApp = Callable[[dict, Callable], Iterable[bytes]]


def build_registry(*collectors: Collector) -> CollectorRegistry:
    registry = CollectorRegistry()
    for collector in collectors:
        registry.register(collector)
    return registry


def create_app(registry: CollectorRegistry, path: str = DEFAULT_METRICS_PATH) -> WSGIApp:
    """WSGI app serving `registry` on `path` and 404 everywhere else."""
    metrics_app = make_wsgi_app(registry)

    def app(environ, start_response):
        if environ.get("PATH_INFO", "/") == path:
            return metrics_app(environ, start_response)
        body = b"Not Found\n"
        start_response("404 Not Found", [
            ("Content-Type", "text/plain; charset=utf-8"),
            ("Content-Length", str(len(body))),
        ])
        return [body]

    return app


class _LoggingHandler(WSGIRequestHandler):
    def log_message(self, format, *args):
        log.debug("%s - %s", self.address_string(), format % args)


def make_metrics_server(app: WSGIApp, address: str = DEFAULT_LISTEN_ADDRESS,
                        port: int = DEFAULT_PORT) -> WSGIServer:
    # One thread per scrape, so a slow upstream only stalls its own request
    return make_server(address, port, app, server_class=ThreadingWSGIServer,
                       handler_class=_LoggingHandler)


def serve(app: WSGIApp, address: str = DEFAULT_LISTEN_ADDRESS, port: int = DEFAULT_PORT):
    server = make_metrics_server(app, address, port)
    log.info("Serving metrics on http://%s:%d", address, server.server_port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        log.info("Interrupted, shutting down")
    finally:
        server.server_close()
