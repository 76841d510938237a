"""Prometheus exporter for Logstash node stats."""

__version__ = "0.1.0"
