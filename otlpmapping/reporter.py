"""Periodic reporting of host metadata built from resource attributes."""

from __future__ import annotations

import abc
import logging
import threading
import time
from typing import Any, Callable, Dict, Mapping, Tuple

from otlpmapping.attributes import value_type_name
from otlpmapping.hostmap import AttributeTypeError, HostMap, HostMapUpdateError
from otlpmapping.hostname import source_from_attrs
from otlpmapping.payload import HostMetadata
from otlpmapping.source import Kind

__all__ = [
    "ATTRIBUTE_DATADOG_HOST_USE_AS_METADATA",
    "Pusher",
    "has_host_metadata",
    "Reporter",
]

# States whether a resource should be used for host metadata.
ATTRIBUTE_DATADOG_HOST_USE_AS_METADATA = "datadog.host.use_as_metadata"

# Whether resources are used when the attribute above is missing.
SHOULD_USE_BY_DEFAULT = False

_SAMPLE_TICK = 10.0
_SAMPLE_FIRST = 1
_SAMPLE_THEREAFTER = 100


class Pusher(abc.ABC):
    """Sends host metadata to a remote endpoint; must be thread-safe."""

    @abc.abstractmethod
    def push(self, metadata: HostMetadata) -> None:
        """Push one host metadata payload, raising on failure."""


class _SampledLogger:
    """Logs the first message of a kind per tick, then one in every hundred.

    No sampling is done when the wrapped logger has debug enabled.
    """

    def __init__(
        self,
        logger: logging.Logger,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._logger = logger
        self._clock = clock
        self._sampling = not logger.isEnabledFor(logging.DEBUG)
        self._lock = threading.Lock()
        self._counters: Dict[Tuple[int, str], Tuple[float, int]] = {}

    def _allowed(self, level: int, msg: str) -> bool:
        if not self._sampling:
            return True
        key = (level, msg)
        now = self._clock()
        with self._lock:
            start, count = self._counters.get(key, (now, 0))
            if now - start >= _SAMPLE_TICK:
                start, count = now, 0
            count += 1
            self._counters[key] = (start, count)
        if count <= _SAMPLE_FIRST:
            return True
        return (count - _SAMPLE_FIRST) % _SAMPLE_THEREAFTER == 0

    def log(self, level: int, msg: str, **fields: Any) -> None:
        if self._logger.isEnabledFor(level) and self._allowed(level, msg):
            self._logger.log(level, msg, extra=fields)


def has_host_metadata(attrs: Mapping[str, Any]) -> bool:
    """Whether a resource should be used for host metadata."""
    if ATTRIBUTE_DATADOG_HOST_USE_AS_METADATA not in attrs:
        return SHOULD_USE_BY_DEFAULT
    value = attrs[ATTRIBUTE_DATADOG_HOST_USE_AS_METADATA]
    type_name = value_type_name(value)
    if type_name != "Bool":
        raise AttributeTypeError(
            f'"{ATTRIBUTE_DATADOG_HOST_USE_AS_METADATA}" has type "{type_name}", '
            'expected "Bool"',
            key=ATTRIBUTE_DATADOG_HOST_USE_AS_METADATA,
            actual=type_name,
        )
    return value


class Reporter:
    """Merges resources into host metadata and pushes them periodically."""

    def __init__(self, logger: logging.Logger, pusher: Pusher, period: float) -> None:
        if period <= 0:
            raise ValueError(f"reporting period must be positive: {period}")
        self._logger = _SampledLogger(logger)
        self._host_map = HostMap()
        self._pusher = pusher
        self._period = period
        self._stopped = threading.Event()

    def consume_resource(self, attrs: Mapping[str, Any]) -> None:
        """Use a resource's attributes for host metadata, if it is usable.

        Raises TypeError if the resource cannot be checked, and
        HostMapUpdateError if some host fields could not be read.
        """
        try:
            usable = has_host_metadata(attrs)
        except AttributeTypeError as err:
            raise TypeError(f"failed to check resource: {err}") from err
        if not usable:
            return

        src = source_from_attrs(attrs)
        if src is None:
            self._logger.log(
                logging.WARNING,
                "resource does not have host-identifying attributes",
                attributes=dict(attrs),
            )
            return
        if src.kind is not Kind.HOSTNAME:
            # e.g. a serverless resource
            return

        try:
            changed = self._host_map.update(src.identifier, attrs)
        except HostMapUpdateError as err:
            self._log_changed(err.changed, src.identifier, attrs)
            raise
        self._log_changed(changed, src.identifier, attrs)

    def _log_changed(self, changed: bool, host: str, attrs: Mapping[str, Any]) -> None:
        if changed:
            self._logger.log(
                logging.DEBUG,
                "Host metadata changed for host after payload",
                host=host,
                attributes=dict(attrs),
            )

    def _report(self) -> None:
        for host, metadata in self._host_map.flush().items():
            self._logger.log(logging.INFO, "Sending host metadata", host=host)
            try:
                self._pusher.push(metadata)
            except Exception as err:  # a failed push must not stop reporting
                self._logger.log(
                    logging.ERROR,
                    "Failed to send host metadata",
                    host=host,
                    error=err,
                    payload=metadata.to_dict(),
                )

    def run(self) -> None:
        """Report every period until stop() is called."""
        next_tick = time.monotonic() + self._period
        while True:
            timeout = max(0.0, next_tick - time.monotonic())
            if self._stopped.wait(timeout):
                self._logger.log(logging.INFO, "Stopped reporter")
                return
            next_tick = max(next_tick + self._period, time.monotonic())
            self._report()

    def stop(self) -> None:
        """Stop the reporter."""
        self._stopped.set()