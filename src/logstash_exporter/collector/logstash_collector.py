"""
Custom prometheus_client collector for a Logstash node.

Every scrape does one fetch of /_node/stats and translates the `events`
and `flow` sections into gauges. Nothing in collect() raises: a dead
upstream or a malformed section just means fewer samples this time.
The `up` gauge is always emitted, last.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Sequence, Tuple

import httpx
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector

from logstash_exporter.collector.node_stats import (
    DEFAULT_HOST,
    DEFAULT_TIMEOUT_SECONDS,
    NodeStatsClient,
)
from logstash_exporter.errors import FetchError, SectionExtractError
from logstash_exporter.stats import (
    EVENTS_SECTION,
    FLOW_SECTION,
    EventSection,
    FlowSection,
    StatsDocument,
)

log = logging.getLogger(__name__)

NAMESPACE = "logstash"


def fq_name(name: str) -> str:
    return f"{NAMESPACE}_{name}"


@dataclass(frozen=True)
class MetricDescriptor:
    """Name, help text and label schema of one exported metric."""

    name: str
    documentation: str
    label_names: Tuple[str, ...] = ()

    def family(self) -> GaugeMetricFamily:
        """An empty gauge family, used for describe()."""
        return GaugeMetricFamily(self.name, self.documentation, labels=list(self.label_names))

    def sample(self, value: float, labels: Optional[Dict[str, str]] = None) -> GaugeMetricFamily:
        labels = labels or {}
        family = self.family()
        family.add_metric([labels[name] for name in self.label_names], float(value))
        return family


class LogstashCollector(Collector):

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._client = NodeStatsClient(host, timeout_seconds=timeout_seconds, transport=transport)

        # Help text for `up` is historical; the value only says the scrape ran
        self.up = MetricDescriptor("up", "Was the last query successful.")
        self.events_in = MetricDescriptor(fq_name("events_in"), "Number of logstash input events.")
        self.events_filtered = MetricDescriptor(
            fq_name("events_filtered"), "Number of logstash filtered events."
        )
        self.events_out = MetricDescriptor(fq_name("events_out"), "Number of logstash output events.")
        self.flow_input_throughput = MetricDescriptor(
            fq_name("flow_input_throughput"), "Throughput of logstash event input."
        )
        self.flow_filter_throughput = MetricDescriptor(
            fq_name("flow_filter_throughput"), "Throughput of logstash event filter."
        )
        self.flow_output_throughput = MetricDescriptor(
            fq_name("flow_output_throughput"), "Throughput of logstash event output."
        )

    @property
    def url(self) -> str:
        return self._client.url

    @property
    def descriptors(self) -> Tuple[MetricDescriptor, ...]:
        return (
            self.up,
            self.events_in,
            self.events_filtered,
            self.events_out,
            self.flow_input_throughput,
            self.flow_filter_throughput,
            self.flow_output_throughput,
        )

    def describe(self) -> Iterator[GaugeMetricFamily]:
        for descriptor in self.descriptors:
            yield descriptor.family()

    def collect(self) -> Iterator[GaugeMetricFamily]:
        try:
            stats = self._client.fetch()
        except FetchError as exc:
            log.error("Fetching node stats failed: %s", exc)
        else:
            yield from self._collect_sections(stats)

        # Always 1, even when the fetch above failed
        yield self.up.sample(1)

    def name(self) -> str:
        return f"Logstash ({self.url})"

    def _collect_sections(self, stats: StatsDocument) -> Iterator[GaugeMetricFamily]:
        if EVENTS_SECTION in stats:
            yield from self._collect_events(stats[EVENTS_SECTION])
        if FLOW_SECTION in stats:
            yield from self._collect_flow(stats[FLOW_SECTION])

    def _collect_events(self, tree, labels: Optional[Dict[str, str]] = None) -> Sequence[GaugeMetricFamily]:
        try:
            events = EventSection.from_dict(tree)
        except SectionExtractError as exc:
            log.error("Skipping events metrics: %s", exc)
            return []
        return [
            self.events_in.sample(events.in_, labels),
            self.events_out.sample(events.out, labels),
            self.events_filtered.sample(events.filtered, labels),
        ]

    def _collect_flow(self, tree, labels: Optional[Dict[str, str]] = None) -> Sequence[GaugeMetricFamily]:
        try:
            flow = FlowSection.from_dict(tree)
        except SectionExtractError as exc:
            log.error("Skipping flow metrics: %s", exc)
            return []
        return [
            self.flow_input_throughput.sample(flow.input_throughput.current, labels),
            self.flow_filter_throughput.sample(flow.filter_throughput.current, labels),
            self.flow_output_throughput.sample(flow.output_throughput.current, labels),
        ]
