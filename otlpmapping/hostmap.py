"""Thread-safe map from hostnames to host metadata payloads."""

from __future__ import annotations

import threading
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from otlpmapping.attributes import value_type_name
from otlpmapping.gohai import new_empty
from otlpmapping.payload import HostMetadata, HostTags, Meta

__all__ = ["AttributeTypeError", "HostMapUpdateError", "HostMap"]

_ATTRIBUTE_CLOUD_PROVIDER = "cloud.provider"
_CLOUD_PROVIDER_AWS = "aws"
_ATTRIBUTE_HOST_ID = "host.id"
_ATTRIBUTE_HOST_NAME = "host.name"
_ATTRIBUTE_OS_DESCRIPTION = "os.description"
_ATTRIBUTE_HOST_ARCH = "host.arch"

# Custom attributes outside the OpenTelemetry specification.
_ATTRIBUTE_KERNEL_NAME = "os.kernel.name"
_ATTRIBUTE_KERNEL_RELEASE = "os.kernel.release"
_ATTRIBUTE_KERNEL_VERSION = "os.kernel.version"

_FLAVOR = "otelcol-contrib"

# Gohai platform fields and the resource attributes they are filled from.
_PLATFORM_ATTRIBUTES: Dict[str, str] = {
    "os": _ATTRIBUTE_OS_DESCRIPTION,
    "processor": _ATTRIBUTE_HOST_ARCH,
    "machine": _ATTRIBUTE_HOST_ARCH,
    "hardware_platform": _ATTRIBUTE_HOST_ARCH,
    "kernel_name": _ATTRIBUTE_KERNEL_NAME,
    "kernel_release": _ATTRIBUTE_KERNEL_RELEASE,
    "kernel_version": _ATTRIBUTE_KERNEL_VERSION,
}


class AttributeTypeError(TypeError):
    """A resource attribute has an unexpected value type."""

    def __init__(self, message: str, *, key: str, actual: str) -> None:
        super().__init__(message)
        self.key = key
        self.actual = actual


class HostMapUpdateError(Exception):
    """Non-fatal errors found while updating a host; the update was still applied."""

    def __init__(self, errors: Sequence[Exception], changed: bool) -> None:
        self.errors: List[Exception] = list(errors)
        self.changed = changed
        super().__init__("; ".join(str(err) for err in self.errors))


def _str_field(attrs: Mapping[str, Any], key: str) -> Optional[str]:
    """The string value of key, None if absent; raises on a non-string value."""
    if key not in attrs:
        return None
    value = attrs[key]
    type_name = value_type_name(value)
    if type_name != "Str":
        raise AttributeTypeError(
            f'"{key}" has type "{type_name}", expected type "Str" instead',
            key=key,
            actual=type_name,
        )
    return value


def _is_aws(attrs: Mapping[str, Any]) -> bool:
    return _str_field(attrs, _ATTRIBUTE_CLOUD_PROVIDER) == _CLOUD_PROVIDER_AWS


def _instance_id(attrs: Mapping[str, Any]) -> Optional[str]:
    if not _is_aws(attrs):
        return None
    return _str_field(attrs, _ATTRIBUTE_HOST_ID)


def _ec2_hostname(attrs: Mapping[str, Any]) -> Optional[str]:
    if not _is_aws(attrs):
        return None
    return _str_field(attrs, _ATTRIBUTE_HOST_NAME)


_META_FIELDS: Sequence[tuple] = (
    (_instance_id, "instance_id"),
    (_ec2_hostname, "ec2_hostname"),
)


class HostMap:
    """Maps hostnames to host metadata payloads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._hosts: Dict[str, HostMetadata] = {}

    def update(self, host: str, attrs: Mapping[str, Any]) -> bool:
        """Update a host from resource attributes; return whether it changed.

        Errors are local to the field they occur in: the field is left as it
        was and the other fields are still filled. If any occurred, a
        HostMapUpdateError is raised after the update has been stored.
        """
        errors: List[Exception] = []
        changed = False
        with self._lock:
            md = self._hosts.get(host)
            found = md is not None
            if md is None:
                md = HostMetadata(
                    meta=Meta(), tags=HostTags(), flavor=_FLAVOR, payload=new_empty()
                )
            md.internal_hostname = host
            md.meta.hostname = host

            getter: Callable[[Mapping[str, Any]], Optional[str]]
            for getter, name in _META_FIELDS:
                try:
                    value = getter(attrs)
                except AttributeTypeError as err:
                    errors.append(err)
                    continue
                if value is not None:
                    changed = changed or getattr(md.meta, name) != value
                    setattr(md.meta, name, value)

            platform = md.platform()
            platform["hostname"] = host
            for field_name, attribute in _PLATFORM_ATTRIBUTES.items():
                try:
                    value = _str_field(attrs, attribute)
                except AttributeTypeError as err:
                    errors.append(err)
                    continue
                if value is not None:
                    changed = changed or platform.get(field_name, "") != value
                    platform[field_name] = value

            self._hosts[host] = md

        changed = changed and found
        if errors:
            raise HostMapUpdateError(errors, changed)
        return changed

    def flush(self) -> Dict[str, HostMetadata]:
        """Return all host metadata payloads and clear them from the map."""
        with self._lock:
            hosts, self._hosts = self._hosts, {}
        return hosts