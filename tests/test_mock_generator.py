"""Basic sanity checks for the mock Logstash node."""

from logstash_exporter.mock.generator import MockLogstashNode
from logstash_exporter.stats import EventSection, FlowSection


def test_snapshot_parses_cleanly():
    doc = MockLogstashNode(seed=42).snapshot()

    events = EventSection.from_dict(doc["events"])
    flow = FlowSection.from_dict(doc["flow"])

    assert events.in_ > 0
    assert events.out <= events.filtered <= events.in_
    assert flow.input_throughput.current > 0
    assert flow.output_throughput.current <= flow.input_throughput.current


def test_snapshots_accumulate_events():
    node = MockLogstashNode(seed=42)
    first = node.snapshot()
    second = node.snapshot()

    assert second["events"]["in"] > first["events"]["in"]
    assert second["events"]["out"] > first["events"]["out"]


def test_deterministic_with_same_seed():
    assert MockLogstashNode(seed=99).snapshot() == MockLogstashNode(seed=99).snapshot()
