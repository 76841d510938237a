"""
Typed views over the sections of Logstash's /_node/stats document.

The top-level document is kept as a plain dict and sections are looked up
by key. Each section is then parsed on its own, so a malformed `flow`
block doesn't cost us the `events` numbers (and vice versa).

Fields missing from a present section default to zero -- Logstash adds
and drops fields between versions. Fields that are present but have the
wrong type fail the whole section. That includes an explicit `null`: rather
than reading it as zero we drop the section, so we never report a count
nobody measured. Integers too large to represent as a float sample
also fail the section.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from logstash_exporter.errors import SectionExtractError

# Decoded JSON body of /_node/stats
StatsDocument = Dict[str, Any]

EVENTS_SECTION = "events"
FLOW_SECTION = "flow"


def _require_object(section: str, tree: Any) -> Dict[str, Any]:
    if not isinstance(tree, dict):
        raise SectionExtractError(section, f"expected an object, got {_json_type(tree)}")
    return tree


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return type(value).__name__


def _counter(section: str, tree: Dict[str, Any], key: str) -> int:
    value = tree.get(key, 0)
    # bool is an int subclass, but `true` is not a count
    if isinstance(value, bool) or not isinstance(value, int):
        raise SectionExtractError(section, f"expected an integer, got {_json_type(value)}", key)
    if value < 0:
        raise SectionExtractError(section, f"counter is negative ({value})", key)
    _as_float(section, value, key)
    return value


def _rate(section: str, tree: Dict[str, Any], key: str, path: str) -> float:
    value = tree.get(key, 0.0)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SectionExtractError(section, f"expected a number, got {_json_type(value)}", path)
    return _as_float(section, value, path)


def _as_float(section: str, value: Any, path: str) -> float:
    # Samples are float64; a 400-digit JSON integer doesn't fit
    try:
        return float(value)
    except OverflowError:
        raise SectionExtractError(section, "value too large for a float sample", path) from None


@dataclass(frozen=True)
class EventSection:
    """Cumulative event counts since the Logstash process started."""

    in_: int = 0
    out: int = 0
    filtered: int = 0

    @classmethod
    def from_dict(cls, tree: Any) -> "EventSection":
        data = _require_object(EVENTS_SECTION, tree)
        return cls(
            in_=_counter(EVENTS_SECTION, data, "in"),
            out=_counter(EVENTS_SECTION, data, "out"),
            filtered=_counter(EVENTS_SECTION, data, "filtered"),
        )


@dataclass(frozen=True)
class Throughput:
    current: float = 0.0


@dataclass(frozen=True)
class FlowSection:
    """Instantaneous pipeline rates (events per second)."""

    input_throughput: Throughput = field(default_factory=Throughput)
    filter_throughput: Throughput = field(default_factory=Throughput)
    output_throughput: Throughput = field(default_factory=Throughput)

    @classmethod
    def from_dict(cls, tree: Any) -> "FlowSection":
        data = _require_object(FLOW_SECTION, tree)
        return cls(
            input_throughput=cls._throughput(data, "input_throughput"),
            filter_throughput=cls._throughput(data, "filter_throughput"),
            output_throughput=cls._throughput(data, "output_throughput"),
        )

    @staticmethod
    def _throughput(data: Dict[str, Any], key: str) -> Throughput:
        if key not in data:
            return Throughput()
        tree = data[key]
        if not isinstance(tree, dict):
            raise SectionExtractError(FLOW_SECTION, f"expected an object, got {_json_type(tree)}", key)
        return Throughput(current=_rate(FLOW_SECTION, tree, "current", f"{key}.current"))
