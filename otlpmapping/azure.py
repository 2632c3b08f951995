"""Hostname and cluster name resolution for Azure resources."""

from __future__ import annotations

from typing import Any, Mapping, Optional

__all__ = [
    "ATTRIBUTE_RESOURCE_GROUP_NAME",
    "hostname_from_attrs",
    "cluster_name_from_attributes",
]

ATTRIBUTE_RESOURCE_GROUP_NAME = "azure.resourcegroup.name"

_ATTRIBUTE_HOST_ID = "host.id"
_ATTRIBUTE_HOST_NAME = "host.name"


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def hostname_from_attrs(attrs: Mapping[str, Any]) -> Optional[str]:
    """Return the Azure hostname (VM id first, then host name), or None."""
    if _ATTRIBUTE_HOST_ID in attrs:
        return _str(attrs[_ATTRIBUTE_HOST_ID])
    if _ATTRIBUTE_HOST_NAME in attrs:
        return _str(attrs[_ATTRIBUTE_HOST_NAME])
    return None


def cluster_name_from_attributes(attrs: Mapping[str, Any]) -> Optional[str]:
    """Return the AKS cluster name parsed from the resource group, or None."""
    if ATTRIBUTE_RESOURCE_GROUP_NAME not in attrs:
        return None
    parts = _str(attrs[ATTRIBUTE_RESOURCE_GROUP_NAME]).split("_")
    if len(parts) < 4 or parts[0].lower() != "mc":
        return None
    return parts[-2]