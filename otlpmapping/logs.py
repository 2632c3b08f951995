"""Translation of OTLP log records into Datadog HTTP log items."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Tuple

from otlpmapping.attributes import as_string, tags_from_attributes
from otlpmapping.hostname import source_from_attrs
from otlpmapping.source import Kind

__all__ = [
    "OTEL_TRACE_ID",
    "OTEL_SPAN_ID",
    "OTEL_SEVERITY_NUMBER",
    "OTEL_SEVERITY_TEXT",
    "OTEL_TIMESTAMP",
    "DD_TRACE_ID",
    "DD_SPAN_ID",
    "DD_STATUS",
    "DD_TIMESTAMP",
    "LogRecord",
    "HTTPLogItem",
    "transform",
    "decode_trace_id",
    "decode_span_id",
    "trace_id_to_uint64",
    "span_id_to_uint64",
    "status_from_severity_number",
]

# Keys preserving the original OpenTelemetry log fields.
OTEL_TRACE_ID = "otel.trace_id"
OTEL_SPAN_ID = "otel.span_id"
OTEL_SEVERITY_NUMBER = "otel.severity_number"
OTEL_SEVERITY_TEXT = "otel.severity_text"
OTEL_TIMESTAMP = "otel.timestamp"

# Keys of the Datadog counterparts.
DD_TRACE_ID = "dd.trace_id"
DD_SPAN_ID = "dd.span_id"
DD_STATUS = "status"
DD_TIMESTAMP = "@timestamp"

LOG_LEVEL_TRACE = "trace"
LOG_LEVEL_DEBUG = "debug"
LOG_LEVEL_INFO = "info"
LOG_LEVEL_WARN = "warn"
LOG_LEVEL_ERROR = "error"
LOG_LEVEL_FATAL = "fatal"

_ATTRIBUTE_SERVICE_NAME = "service.name"

_MESSAGE_KEYS = frozenset({"msg", "message", "log"})
_STATUS_KEYS = frozenset({"status", "severity", "level", "syslog.severity"})
_TRACE_ID_KEYS = frozenset({"traceid", "contextmap.traceid", "oteltraceid"})
_SPAN_ID_KEYS = frozenset({"spanid", "contextmap.spanid", "otelspanid"})

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]*")

_LOGGER = logging.getLogger(__name__)


@dataclass
class LogRecord:
    """An OTLP log record."""

    attributes: Dict[str, Any] = field(default_factory=dict)
    trace_id: bytes = bytes(16)
    span_id: bytes = bytes(8)
    severity_text: str = ""
    severity_number: int = 0
    timestamp: int = 0
    body: Any = None

    def __post_init__(self) -> None:
        self.trace_id = bytes(self.trace_id)
        self.span_id = bytes(self.span_id)
        if len(self.trace_id) != 16:
            raise ValueError("trace id must be 16 bytes long")
        if len(self.span_id) != 8:
            raise ValueError("span id must be 8 bytes long")


@dataclass
class HTTPLogItem:
    """A Datadog HTTP log item; additional properties are log attributes."""

    message: str = ""
    hostname: Optional[str] = None
    service: Optional[str] = None
    ddtags: Optional[str] = None
    ddsource: Optional[str] = None
    additional_properties: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """JSON form of the item; additional properties are flattened in."""
        out: Dict[str, Any] = {}
        if self.ddsource is not None:
            out["ddsource"] = self.ddsource
        if self.ddtags is not None:
            out["ddtags"] = self.ddtags
        if self.hostname is not None:
            out["hostname"] = self.hostname
        out["message"] = self.message
        if self.service is not None:
            out["service"] = self.service
        out.update(self.additional_properties)
        return out


def _decode_hex_id(text: str, size: int) -> bytes:
    if not _HEX_DIGITS.fullmatch(text):
        raise ValueError(f"invalid hexadecimal id: {text!r}")
    if len(text) % 2:
        raise ValueError(f"odd length hexadecimal id: {text!r}")
    raw = bytes.fromhex(text)
    if len(raw) > size:
        raise ValueError(f"hexadecimal id longer than {size} bytes: {text!r}")
    return raw.ljust(size, b"\x00")


def decode_trace_id(trace_id: str) -> bytes:
    """Decode a hex trace id into 16 bytes (shorter input is zero-padded)."""
    return _decode_hex_id(trace_id, 16)


def decode_span_id(span_id: str) -> bytes:
    """Decode a hex span id into 8 bytes (shorter input is zero-padded)."""
    return _decode_hex_id(span_id, 8)


def trace_id_to_uint64(trace_id: bytes) -> int:
    """Low 64 bits (big endian) of a 128-bit trace id."""
    return int.from_bytes(bytes(trace_id)[-8:], "big")


def span_id_to_uint64(span_id: bytes) -> int:
    """A 64-bit span id as an unsigned integer (big endian)."""
    return int.from_bytes(bytes(span_id)[:8], "big")


def status_from_severity_number(severity: int) -> str:
    """Log level derived from an OTLP severity number range."""
    for upper, level in (
        (4, LOG_LEVEL_TRACE),
        (8, LOG_LEVEL_DEBUG),
        (12, LOG_LEVEL_INFO),
        (16, LOG_LEVEL_WARN),
        (20, LOG_LEVEL_ERROR),
        (24, LOG_LEVEL_FATAL),
    ):
        if severity <= upper:
            return level
    return LOG_LEVEL_ERROR


def _hostname(attrs: Mapping[str, Any]) -> str:
    src = source_from_attrs(attrs)
    if src is not None and src.kind is Kind.HOSTNAME:
        return src.identifier
    return ""


def _extract_host_and_service(
    resource_attrs: Mapping[str, Any], log_attrs: Mapping[str, Any]
) -> Tuple[str, str]:
    host = _hostname(resource_attrs) or _hostname(log_attrs)
    service = ""
    if _ATTRIBUTE_SERVICE_NAME in resource_attrs:
        service = as_string(resource_attrs[_ATTRIBUTE_SERVICE_NAME])
    if not service and _ATTRIBUTE_SERVICE_NAME in log_attrs:
        service = as_string(log_attrs[_ATTRIBUTE_SERVICE_NAME])
    return host, service


def _rfc3339(nanos: int) -> str:
    moment = datetime.fromtimestamp(nanos // 1_000_000_000, tz=timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


def transform(
    lr: LogRecord,
    res: Mapping[str, Any],
    logger: Optional[logging.Logger] = None,
) -> HTTPLogItem:
    """Convert a log record, received with resource attributes res, to a Datadog log item."""
    log = logger or _LOGGER
    host, service = _extract_host_and_service(res, lr.attributes)

    item = HTTPLogItem(hostname=host or None, service=service or None)
    props = item.additional_properties

    status = ""
    for key, value in lr.attributes.items():
        text = as_string(value)
        lowered = key.lower()
        if lowered in _MESSAGE_KEYS:
            item.message = text
        elif lowered in _STATUS_KEYS:
            status = text
        elif lowered in _TRACE_ID_KEYS:
            try:
                trace_id = decode_trace_id(text)
            except ValueError as err:
                log.warning("failed to decode trace id %r: %s", text, err)
                continue
            if not props.get(DD_TRACE_ID):
                props[DD_TRACE_ID] = str(trace_id_to_uint64(trace_id))
                props[OTEL_TRACE_ID] = text
        elif lowered in _SPAN_ID_KEYS:
            try:
                span_id = decode_span_id(text)
            except ValueError as err:
                log.warning("failed to decode span id %r: %s", text, err)
                continue
            if not props.get(DD_SPAN_ID):
                props[DD_SPAN_ID] = str(span_id_to_uint64(span_id))
                props[OTEL_SPAN_ID] = text
        elif lowered == "ddtags":
            item.ddtags = ",".join([*tags_from_attributes(res), text])
        else:
            props[key] = text

    if any(lr.trace_id):
        props[DD_TRACE_ID] = str(trace_id_to_uint64(lr.trace_id))
        props[OTEL_TRACE_ID] = lr.trace_id.hex()
    if any(lr.span_id):
        props[DD_SPAN_ID] = str(span_id_to_uint64(lr.span_id))
        props[OTEL_SPAN_ID] = lr.span_id.hex()

    # The client's severity wins; the backend decides the final level.
    if lr.severity_text:
        if not status:
            status = lr.severity_text
        props[OTEL_SEVERITY_TEXT] = lr.severity_text
    if lr.severity_number != 0:
        if not status:
            status = status_from_severity_number(lr.severity_number)
        props[OTEL_SEVERITY_NUMBER] = str(int(lr.severity_number))
    props[DD_STATUS] = status

    if lr.timestamp != 0:
        props[OTEL_TIMESTAMP] = str(lr.timestamp)
        props[DD_TIMESTAMP] = _rfc3339(lr.timestamp)

    if not item.message:
        item.message = as_string(lr.body)

    if item.ddtags is None:
        item.ddtags = ",".join(tags_from_attributes(res))

    return item