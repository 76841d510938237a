"""
Mock Logstash node stats generator.

Produces fake but plausible /_node/stats documents so we can develop and
test without a running Logstash. Numbers loosely follow a single
beats -> grok -> elasticsearch pipeline under moderate traffic.
"""

import math
import random


class MockLogstashNode:

    def __init__(self, seed: int = 42):
        self._rng = random.Random(seed)
        self._tick = 0
        self._events_in = 0
        self._events_filtered = 0
        self._events_out = 0

    def snapshot(self) -> dict:
        """Generate one /_node/stats document, advancing the simulation clock."""
        self._tick += 1
        t = self._tick

        # Sinusoidal base load with occasional random spikes
        base_rate = 400 + 250 * math.sin(t * 0.05)
        spike = self._rng.random() * 600 if self._rng.random() > 0.9 else 0
        input_rate = max(1.0, base_rate + spike + self._rng.gauss(0, 20))

        # Filters drop a few percent (grok misses, dedupe), outputs lag slightly
        filter_rate = input_rate * self._rng.uniform(0.95, 1.0)
        output_rate = filter_rate * self._rng.uniform(0.97, 1.0)

        # Each tick represents ~2 seconds of wall time
        self._events_in += int(input_rate * 2)
        self._events_filtered += int(filter_rate * 2)
        self._events_out += int(output_rate * 2)

        return {
            "host": "mock-logstash",
            "version": "8.11.0",
            "status": "green",
            "pipeline": {"workers": 4, "batch_size": 125, "batch_delay": 50},
            "events": {
                "in": self._events_in,
                "filtered": self._events_filtered,
                "out": self._events_out,
                "duration_in_millis": self._events_out * 3,
                "queue_push_duration_in_millis": self._events_in // 10,
            },
            "flow": {
                "input_throughput": {"current": round(input_rate, 3), "lifetime": round(input_rate * 0.9, 3)},
                "filter_throughput": {"current": round(filter_rate, 3), "lifetime": round(filter_rate * 0.9, 3)},
                "output_throughput": {"current": round(output_rate, 3), "lifetime": round(output_rate * 0.9, 3)},
                "queue_backpressure": {"current": round(self._rng.uniform(0, 0.2), 3)},
                "worker_concurrency": {"current": round(self._rng.uniform(1, 4), 3)},
            },
        }
