"""Hostname, host info and cluster name resolution for AWS EC2 resources."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

__all__ = [
    "HostInfo",
    "is_default_hostname",
    "hostname_from_attrs",
    "host_info_from_attributes",
    "cluster_name_from_attributes",
]

_DEFAULT_PREFIXES = ("ip-", "domu", "ec2amaz-")
_EC2_TAG_PREFIX = "ec2.tag."
_CLUSTER_TAG_PREFIX = _EC2_TAG_PREFIX + "kubernetes.io/cluster/"

_ATTRIBUTE_HOST_ID = "host.id"
_ATTRIBUTE_HOST_NAME = "host.name"


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass
class HostInfo:
    """EC2 host information."""

    instance_id: str = ""
    ec2_hostname: str = ""
    ec2_tags: List[str] = field(default_factory=list)


def is_default_hostname(hostname: str) -> bool:
    """Whether the hostname is one EC2 assigns by default."""
    return hostname.startswith(_DEFAULT_PREFIXES)


def hostname_from_attrs(attrs: Mapping[str, Any]) -> Optional[str]:
    """Return the EC2 instance id to use as hostname, or None."""
    if _ATTRIBUTE_HOST_ID in attrs:
        return _str(attrs[_ATTRIBUTE_HOST_ID])
    return None


def host_info_from_attributes(attrs: Mapping[str, Any]) -> HostInfo:
    """Collect EC2 host info from semantic-convention attributes."""
    info = HostInfo()
    if _ATTRIBUTE_HOST_ID in attrs:
        info.instance_id = _str(attrs[_ATTRIBUTE_HOST_ID])
    if _ATTRIBUTE_HOST_NAME in attrs:
        info.ec2_hostname = _str(attrs[_ATTRIBUTE_HOST_NAME])
    info.ec2_tags = [
        f"{key[len(_EC2_TAG_PREFIX):]}:{_str(value)}"
        for key, value in attrs.items()
        if key.startswith(_EC2_TAG_PREFIX)
    ]
    return info


def cluster_name_from_attributes(attrs: Mapping[str, Any]) -> Optional[str]:
    """Return the cluster name found in the EC2 cluster tag keys, or None."""
    cluster_name = None
    for key in attrs:
        if key.startswith(_CLUSTER_TAG_PREFIX):
            cluster_name = key.split("/")[2]
    return cluster_name