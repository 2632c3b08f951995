"""Metric translation settings, consumer interfaces and timeseries dimensions."""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional, Tuple, Union

from otlpmapping.attributes import as_string
from otlpmapping.source import Provider

__all__ = [
    "HistogramMode",
    "NumberMode",
    "InitialCumulMonoValueMode",
    "TranslatorConfig",
    "TranslatorOption",
    "with_remapping",
    "with_delta_ttl",
    "with_fallback_source_provider",
    "with_quantiles",
    "with_resource_attributes_as_tags",
    "with_instrumentation_library_metadata_as_tags",
    "with_instrumentation_scope_metadata_as_tags",
    "with_histogram_mode",
    "with_count_sum_metrics",
    "with_histogram_aggregations",
    "with_number_mode",
    "with_initial_cumul_mono_value_mode",
    "DataType",
    "parse_data_type",
    "TimeSeriesConsumer",
    "HostConsumer",
    "TagsConsumer",
    "Dimensions",
]

_DIMENSION_SEPARATOR = "\x00"
_DEFAULT_DELTA_TTL = 3600


class HistogramMode(str, enum.Enum):
    """Export mode for OTLP Histogram metrics."""

    NO_BUCKETS = "nobuckets"
    COUNTERS = "counters"
    DISTRIBUTIONS = "distributions"


class NumberMode(str, enum.Enum):
    """Export mode for OTLP Number metrics."""

    CUMULATIVE_TO_DELTA = "cumulative_to_delta"
    RAW_VALUE = "raw_value"


class InitialCumulMonoValueMode(str, enum.Enum):
    """What to do with the first value of a cumulative monotonic sum."""

    AUTO = "auto"
    DROP = "drop"
    KEEP = "keep"


@dataclass
class TranslatorConfig:
    """Settings that control how metrics are translated."""

    hist_mode: Optional[HistogramMode] = None
    send_histogram_aggregations: bool = False
    quantiles: bool = False
    number_mode: Union[NumberMode, str] = NumberMode.CUMULATIVE_TO_DELTA
    initial_cumul_mono_value_mode: Union[InitialCumulMonoValueMode, str] = (
        InitialCumulMonoValueMode.AUTO
    )
    resource_attributes_as_tags: bool = False
    instrumentation_library_metadata_as_tags: bool = False
    instrumentation_scope_metadata_as_tags: bool = False
    with_remapping: bool = False
    sweep_interval: int = _DEFAULT_DELTA_TTL // 2
    delta_ttl: int = _DEFAULT_DELTA_TTL
    fallback_source_provider: Optional[Provider] = None

    def apply(self, *args: "TranslatorOption") -> "TranslatorConfig":
        """Apply options in order; an invalid option raises ValueError."""
        for option in args:
            option(self)
        return self


TranslatorOption = Callable[[TranslatorConfig], None]


def with_remapping() -> TranslatorOption:
    """Remap OTel metrics (container.*, system.*) to their Datadog counterparts."""

    def option(cfg: TranslatorConfig) -> None:
        cfg.with_remapping = True

    return option


def with_delta_ttl(delta_ttl: int) -> TranslatorOption:
    """Set the delta TTL (seconds) for cumulative metric points."""

    def option(cfg: TranslatorConfig) -> None:
        if delta_ttl <= 0:
            raise ValueError(f"time to live must be positive: {delta_ttl}")
        cfg.delta_ttl = delta_ttl
        cfg.sweep_interval = delta_ttl // 2 if delta_ttl > 1 else 1

    return option


def with_fallback_source_provider(provider: Provider) -> TranslatorOption:
    """Set the source provider used when a resource has no source."""

    def option(cfg: TranslatorConfig) -> None:
        cfg.fallback_source_provider = provider

    return option


def with_quantiles() -> TranslatorOption:
    """Export quantiles for summary metrics."""

    def option(cfg: TranslatorConfig) -> None:
        cfg.quantiles = True

    return option


def with_resource_attributes_as_tags() -> TranslatorOption:
    """Add resource attributes as tags."""

    def option(cfg: TranslatorConfig) -> None:
        cfg.resource_attributes_as_tags = True

    return option


def with_instrumentation_library_metadata_as_tags() -> TranslatorOption:
    """Add instrumentation library metadata as tags (deprecated)."""

    def option(cfg: TranslatorConfig) -> None:
        cfg.instrumentation_library_metadata_as_tags = True

    return option


def with_instrumentation_scope_metadata_as_tags() -> TranslatorOption:
    """Add instrumentation scope metadata as tags."""

    def option(cfg: TranslatorConfig) -> None:
        cfg.instrumentation_scope_metadata_as_tags = True

    return option


def with_histogram_mode(mode: Union[HistogramMode, str]) -> TranslatorOption:
    """Set the histogram export mode."""

    def option(cfg: TranslatorConfig) -> None:
        try:
            cfg.hist_mode = HistogramMode(mode)
        except ValueError:
            raise ValueError(f'unknown histogram mode: "{mode}"') from None

    return option


def with_histogram_aggregations() -> TranslatorOption:
    """Export .count, .sum, .min and .max histogram metrics when available."""

    def option(cfg: TranslatorConfig) -> None:
        cfg.send_histogram_aggregations = True

    return option


def with_count_sum_metrics() -> TranslatorOption:
    """Deprecated alias of with_histogram_aggregations."""
    return with_histogram_aggregations()


def with_number_mode(mode: Union[NumberMode, str]) -> TranslatorOption:
    """Set the number export mode."""

    def option(cfg: TranslatorConfig) -> None:
        cfg.number_mode = mode

    return option


def with_initial_cumul_mono_value_mode(
    mode: Union[InitialCumulMonoValueMode, str]
) -> TranslatorOption:
    """Set the initial cumulative monotonic value mode."""

    def option(cfg: TranslatorConfig) -> None:
        cfg.initial_cumul_mono_value_mode = mode

    return option


class DataType(enum.IntEnum):
    """Timeseries-style Datadog metric type."""

    GAUGE = 0
    COUNT = 1

    def marshal_text(self) -> str:
        """Text form of the data type."""
        return self.name.lower()


def parse_data_type(text: Union[str, bytes]) -> DataType:
    """Parse 'gauge' or 'count' into a DataType."""
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("utf-8", errors="replace")
    if text == "gauge":
        return DataType.GAUGE
    if text == "count":
        return DataType.COUNT
    raise ValueError(f'invalid metric data type "{text}"')


class TimeSeriesConsumer(abc.ABC):
    """Consumer of timeseries-style metrics."""

    @abc.abstractmethod
    def consume_time_series(
        self, dimensions: "Dimensions", typ: DataType, timestamp: int, value: float
    ) -> None:
        """Consume one timeseries point."""


class HostConsumer(abc.ABC):
    """Consumer of hostnames."""

    @abc.abstractmethod
    def consume_host(self, host: str) -> None:
        """Consume a hostname."""


class TagsConsumer(abc.ABC):
    """Consumer of tags describing a resource running a collector."""

    @abc.abstractmethod
    def consume_tag(self, tag: str) -> None:
        """Consume a tag."""


def _format_key_value_tag(key: str, value: str) -> str:
    return f"{key}:{value if value else 'n/a'}"


@dataclass(frozen=True)
class Dimensions:
    """Dimensions that uniquely identify a metric timeseries."""

    name: str = ""
    tags: Tuple[str, ...] = field(default_factory=tuple)
    host: str = ""
    origin_id: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", tuple(self.tags))

    def add_tags(self, *args: str) -> "Dimensions":
        """New dimensions with the given tags prepended."""
        return Dimensions(self.name, tuple(args) + self.tags, self.host, self.origin_id)

    def with_attribute_map(self, labels: Mapping[str, Any]) -> "Dimensions":
        """New dimensions with tags made from an attribute map."""
        return self.add_tags(*_tags_from_labels(labels.items()))

    def with_suffix(self, suffix: str) -> "Dimensions":
        """New dimensions with '.<suffix>' appended to the name."""
        return Dimensions(f"{self.name}.{suffix}", self.tags, self.host, self.origin_id)

    def key(self) -> str:
        """Identifier string for these dimensions; tag order does not matter."""
        parts = sorted(
            [
                *self.tags,
                f"name:{self.name}",
                f"host:{self.host}",
                f"originID:{self.origin_id}",
            ]
        )
        return "".join(part + _DIMENSION_SEPARATOR for part in parts)

    def __str__(self) -> str:
        return self.key()


def _tags_from_labels(items: Iterable[Tuple[str, Any]]) -> list:
    return [_format_key_value_tag(key, as_string(value)) for key, value in items]