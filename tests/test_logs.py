import logging

import pytest

from otlpmapping.logs import (
    DD_SPAN_ID,
    DD_TIMESTAMP,
    DD_TRACE_ID,
    OTEL_SEVERITY_NUMBER,
    OTEL_SEVERITY_TEXT,
    OTEL_SPAN_ID,
    OTEL_TIMESTAMP,
    OTEL_TRACE_ID,
    LogRecord,
    decode_span_id,
    decode_trace_id,
    span_id_to_uint64,
    status_from_severity_number,
    trace_id_to_uint64,
    transform,
)

TRACE_ID = bytes([0x08, 0x02, 0x03, 0x04, 0x05, 0x06, 0x07, 0x08, 0, 0, 0, 0, 0x0A, 0, 0, 0])
SPAN_ID = TRACE_ID[8:]
TRACE_HEX = TRACE_ID.hex()
SPAN_HEX = SPAN_ID.hex()
DD_TR = str(trace_id_to_uint64(TRACE_ID))
DD_SP = str(span_id_to_uint64(SPAN_ID))

CASES = [
    (
        "basic",
        LogRecord(attributes={"app": "test"}, severity_number=5),
        {},
        {
            "ddtags": "",
            "message": "",
            "app": "test",
            "status": "debug",
            OTEL_SEVERITY_NUMBER: "5",
        },
    ),
    (
        "resource",
        LogRecord(attributes={"app": "test"}, severity_number=5),
        {"service.name": "otlp_col"},
        {
            "ddtags": "service:otlp_col",
            "message": "",
            "service": "otlp_col",
            "app": "test",
            "status": "debug",
            OTEL_SEVERITY_NUMBER: "5",
        },
    ),
    (
        "append tags",
        LogRecord(attributes={"app": "test", "ddtags": "foo:bar"}, severity_number=5),
        {"service.name": "otlp_col"},
        {
            "ddtags": "service:otlp_col,foo:bar",
            "message": "",
            "service": "otlp_col",
            "app": "test",
            "status": "debug",
            OTEL_SEVERITY_NUMBER: "5",
        },
    ),
    (
        "service",
        LogRecord(attributes={"app": "test", "service.name": "otlp_col"}, severity_number=5),
        {},
        {
            "ddtags": "",
            "message": "",
            "service": "otlp_col",
            "app": "test",
            "status": "debug",
            OTEL_SEVERITY_NUMBER: "5",
            "service.name": "otlp_col",
        },
    ),
    (
        "trace",
        LogRecord(
            attributes={"app": "test", "service.name": "otlp_col"},
            span_id=SPAN_ID,
            trace_id=TRACE_ID,
            severity_number=5,
        ),
        {},
        {
            "ddtags": "",
            "message": "",
            "service": "otlp_col",
            "app": "test",
            "status": "debug",
            OTEL_SEVERITY_NUMBER: "5",
            OTEL_SPAN_ID: SPAN_HEX,
            OTEL_TRACE_ID: TRACE_HEX,
            DD_SPAN_ID: DD_SP,
            DD_TRACE_ID: DD_TR,
            "service.name": "otlp_col",
        },
    ),
    (
        "trace from attributes",
        LogRecord(
            attributes={
                "app": "test",
                "spanid": "2e26da881214cd7c",
                "traceid": "437ab4d83468c540bb0f3398a39faa59",
                "service.name": "otlp_col",
            },
            severity_number=5,
        ),
        {},
        {
            "ddtags": "",
            "message": "",
            "service": "otlp_col",
            "app": "test",
            "status": "debug",
            OTEL_SEVERITY_NUMBER: "5",
            OTEL_SPAN_ID: "2e26da881214cd7c",
            OTEL_TRACE_ID: "437ab4d83468c540bb0f3398a39faa59",
            DD_SPAN_ID: "3325585652813450620",
            DD_TRACE_ID: "13479048940416379481",
            "service.name": "otlp_col",
        },
    ),
    (
        "trace from attributes decode error",
        LogRecord(
            attributes={
                "app": "test",
                "spanid": "2e26da881214cd7c",
                "traceid": "invalidtraceid",
                "service.name": "otlp_col",
            },
            severity_number=5,
        ),
        {},
        {
            "ddtags": "",
            "message": "",
            "service": "otlp_col",
            "app": "test",
            "status": "debug",
            OTEL_SEVERITY_NUMBER: "5",
            OTEL_SPAN_ID: "2e26da881214cd7c",
            DD_SPAN_ID: "3325585652813450620",
            "service.name": "otlp_col",
        },
    ),
    (
        "SeverityText",
        LogRecord(
            attributes={"app": "test", "service.name": "otlp_col"},
            span_id=SPAN_ID,
            trace_id=TRACE_ID,
            severity_text="alert",
            severity_number=5,
        ),
        {},
        {
            "ddtags": "",
            "message": "",
            "service": "otlp_col",
            "app": "test",
            "status": "alert",
            OTEL_SEVERITY_TEXT: "alert",
            OTEL_SEVERITY_NUMBER: "5",
            OTEL_SPAN_ID: SPAN_HEX,
            OTEL_TRACE_ID: TRACE_HEX,
            DD_SPAN_ID: DD_SP,
            DD_TRACE_ID: DD_TR,
            "service.name": "otlp_col",
        },
    ),
    (
        "body",
        LogRecord(
            attributes={"app": "test", "service.name": "otlp_col"},
            span_id=SPAN_ID,
            trace_id=TRACE_ID,
            severity_number=13,
            body="This is log",
        ),
        {},
        {
            "ddtags": "",
            "service": "otlp_col",
            "message": "This is log",
            "app": "test",
            "status": "warn",
            OTEL_SEVERITY_NUMBER: "13",
            OTEL_SPAN_ID: SPAN_HEX,
            OTEL_TRACE_ID: TRACE_HEX,
            DD_SPAN_ID: DD_SP,
            DD_TRACE_ID: DD_TR,
            "service.name": "otlp_col",
        },
    ),
    (
        "log-level",
        LogRecord(
            attributes={"app": "test", "service.name": "otlp_col", "level": "error"},
            span_id=SPAN_ID,
            trace_id=TRACE_ID,
            body="This is log",
        ),
        {},
        {
            "ddtags": "",
            "service": "otlp_col",
            "message": "This is log",
            "app": "test",
            "status": "error",
            OTEL_SPAN_ID: SPAN_HEX,
            OTEL_TRACE_ID: TRACE_HEX,
            DD_SPAN_ID: DD_SP,
            DD_TRACE_ID: DD_TR,
            "service.name": "otlp_col",
        },
    ),
]


@pytest.mark.parametrize("lr,res,want", [c[1:] for c in CASES], ids=[c[0] for c in CASES])
def test_transform(lr, res, want):
    assert transform(lr, res, logging.getLogger("test")).to_dict() == want


@pytest.mark.parametrize(
    "severity,want",
    [
        (3, "trace"),
        (4, "trace"),
        (5, "debug"),
        (7, "debug"),
        (8, "debug"),
        (9, "info"),
        (12, "info"),
        (13, "warn"),
        (16, "warn"),
        (17, "error"),
        (20, "error"),
        (21, "fatal"),
        (24, "fatal"),
        (50, "error"),
    ],
)
def test_derive_status(severity, want):
    assert status_from_severity_number(severity) == want


def test_trace_and_span_ids_from_test_vectors():
    assert trace_id_to_uint64(decode_trace_id("437ab4d83468c540bb0f3398a39faa59")) == 13479048940416379481
    assert span_id_to_uint64(decode_span_id("2e26da881214cd7c")) == 3325585652813450620


def test_decode_trace_id_pads_short_input():
    decoded = decode_trace_id("0a0b")
    assert len(decoded) == 16
    assert decoded[:2] == bytes([0x0A, 0x0B])
    assert decoded[2:] == bytes(14)


@pytest.mark.parametrize("bad", ["invalidtraceid", "abc", "00" * 17])
def test_decode_trace_id_errors(bad):
    with pytest.raises(ValueError):
        decode_trace_id(bad)


def test_decode_span_id_error():
    with pytest.raises(ValueError):
        decode_span_id("zz")


def test_bad_trace_id_is_logged(caplog):
    lr = LogRecord(attributes={"traceid": "invalidtraceid"})
    with caplog.at_level(logging.WARNING):
        item = transform(lr, {})
    assert DD_TRACE_ID not in item.additional_properties
    assert any("trace id" in r.getMessage() for r in caplog.records)


def test_record_trace_id_overrides_attribute():
    lr = LogRecord(
        attributes={"TraceId": "437ab4d83468c540bb0f3398a39faa59"}, trace_id=TRACE_ID
    )
    item = transform(lr, {})
    assert item.additional_properties[DD_TRACE_ID] == DD_TR
    assert item.additional_properties[OTEL_TRACE_ID] == TRACE_HEX


def test_timestamp_properties():
    item = transform(LogRecord(timestamp=1_000_000_123), {})
    assert item.additional_properties[OTEL_TIMESTAMP] == "1000000123"
    assert item.additional_properties[DD_TIMESTAMP] == "1970-01-01T00:00:01Z"


def test_message_attribute_wins_over_body():
    item = transform(LogRecord(attributes={"msg": "from attr"}, body="from body"), {})
    assert item.message == "from attr"
    assert "msg" not in item.additional_properties


def test_hostname_from_resource_then_log():
    item = transform(LogRecord(), {"host.name": "res-host"})
    assert item.hostname == "res-host"
    item = transform(LogRecord(attributes={"host.name": "log-host"}), {})
    assert item.hostname == "log-host"
    assert item.to_dict()["hostname"] == "log-host"


def test_log_record_rejects_wrong_id_length():
    with pytest.raises(ValueError):
        LogRecord(trace_id=b"\x01\x02")