"""Hostname and host info resolution for Google Cloud resources."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

__all__ = ["HostInfo", "hostname_from_attrs", "host_info_from_attrs"]

_ATTRIBUTE_HOST_ID = "host.id"
_ATTRIBUTE_HOST_NAME = "host.name"
_ATTRIBUTE_HOST_TYPE = "host.type"
_ATTRIBUTE_CLOUD_ACCOUNT_ID = "cloud.account.id"
_ATTRIBUTE_CLOUD_AVAILABILITY_ZONE = "cloud.availability_zone"


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass
class HostInfo:
    """GCP host information."""

    host_aliases: List[str] = field(default_factory=list)
    gcp_tags: List[str] = field(default_factory=list)


def hostname_from_attrs(attrs: Mapping[str, Any]) -> Optional[str]:
    """Return the GCP integration hostname ('<name>.<project>'), or None."""
    if _ATTRIBUTE_HOST_NAME not in attrs:
        return None
    name = _str(attrs[_ATTRIBUTE_HOST_NAME])
    if name.count(".") >= 3:
        name = name.split(".", 1)[0]
    if _ATTRIBUTE_CLOUD_ACCOUNT_ID not in attrs:
        return None
    return f"{name}.{_str(attrs[_ATTRIBUTE_CLOUD_ACCOUNT_ID])}"


def host_info_from_attrs(attrs: Mapping[str, Any]) -> HostInfo:
    """Collect GCP host tags from semantic-convention attributes."""
    info = HostInfo()
    for attribute, tag_name in (
        (_ATTRIBUTE_HOST_ID, "instance-id"),
        (_ATTRIBUTE_CLOUD_AVAILABILITY_ZONE, "zone"),
        (_ATTRIBUTE_HOST_TYPE, "instance-type"),
        (_ATTRIBUTE_CLOUD_ACCOUNT_ID, "project"),
    ):
        if attribute in attrs:
            info.gcp_tags.append(f"{tag_name}:{_str(attrs[attribute])}")
    return info