"""Hostname and source resolution from resource attributes."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from otlpmapping import azure, ec2, gcp
from otlpmapping.attributes import as_string
from otlpmapping.source import Kind, Source

__all__ = [
    "ATTRIBUTE_DATADOG_HOSTNAME",
    "ATTRIBUTE_K8S_NODE_NAME",
    "ATTRIBUTE_HOST",
    "get_cluster_name",
    "hostname_from_attributes",
    "source_from_attrs",
]

ATTRIBUTE_DATADOG_HOSTNAME = "datadog.host.name"
ATTRIBUTE_K8S_NODE_NAME = "k8s.node.name"
# Literal host tag; checked first to avoid double tagging.
ATTRIBUTE_HOST = "host"

_ATTRIBUTE_K8S_CLUSTER_NAME = "k8s.cluster.name"
_ATTRIBUTE_CLOUD_PROVIDER = "cloud.provider"
_ATTRIBUTE_AWS_ECS_LAUNCHTYPE = "aws.ecs.launchtype"
_ATTRIBUTE_AWS_ECS_TASK_ARN = "aws.ecs.task.arn"
_ATTRIBUTE_HOST_ID = "host.id"
_ATTRIBUTE_HOST_NAME = "host.name"

_CLOUD_PROVIDER_AWS = "aws"
_CLOUD_PROVIDER_GCP = "gcp"
_CLOUD_PROVIDER_AZURE = "azure"
_LAUNCHTYPE_FARGATE = "fargate"

_INVALID_HOSTS = frozenset(
    {
        "0.0.0.0",
        "127.0.0.1",
        "localhost",
        "localhost.localdomain",
        "localhost6.localdomain6",
        "ip6-localhost",
    }
)


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _cloud_provider(attrs: Mapping[str, Any]) -> Optional[str]:
    if _ATTRIBUTE_CLOUD_PROVIDER not in attrs:
        return None
    return _str(attrs[_ATTRIBUTE_CLOUD_PROVIDER])


def _on_fargate(attrs: Mapping[str, Any]) -> bool:
    return (
        _ATTRIBUTE_AWS_ECS_LAUNCHTYPE in attrs
        and _str(attrs[_ATTRIBUTE_AWS_ECS_LAUNCHTYPE]) == _LAUNCHTYPE_FARGATE
    )


def get_cluster_name(attrs: Mapping[str, Any]) -> Optional[str]:
    """Kubernetes cluster name from conventions or cloud provider data, or None."""
    if _ATTRIBUTE_K8S_CLUSTER_NAME in attrs:
        return _str(attrs[_ATTRIBUTE_K8S_CLUSTER_NAME])
    provider = _cloud_provider(attrs)
    if provider == _CLOUD_PROVIDER_AZURE:
        return azure.cluster_name_from_attributes(attrs)
    if provider == _CLOUD_PROVIDER_AWS:
        return ec2.cluster_name_from_attributes(attrs)
    return None


def _k8s_hostname_from_attributes(attrs: Mapping[str, Any]) -> Optional[str]:
    if ATTRIBUTE_K8S_NODE_NAME not in attrs:
        return None
    node = _str(attrs[ATTRIBUTE_K8S_NODE_NAME])
    cluster = get_cluster_name(attrs)
    if cluster is not None:
        return f"{node}-{cluster}"
    return node


def _unsanitized_hostname_from_attributes(attrs: Mapping[str, Any]) -> Optional[str]:
    if ATTRIBUTE_HOST in attrs:
        # Used even when not a string, to avoid double tagging.
        return as_string(attrs[ATTRIBUTE_HOST])

    if ATTRIBUTE_DATADOG_HOSTNAME in attrs:
        return _str(attrs[ATTRIBUTE_DATADOG_HOSTNAME])

    if _on_fargate(attrs):
        return None

    provider = _cloud_provider(attrs)
    if provider == _CLOUD_PROVIDER_AWS:
        return ec2.hostname_from_attrs(attrs)
    if provider == _CLOUD_PROVIDER_GCP:
        return gcp.hostname_from_attrs(attrs)
    if provider == _CLOUD_PROVIDER_AZURE:
        return azure.hostname_from_attrs(attrs)

    k8s_name = _k8s_hostname_from_attributes(attrs)
    if k8s_name is not None:
        return k8s_name

    if _ATTRIBUTE_HOST_ID in attrs:
        return _str(attrs[_ATTRIBUTE_HOST_ID])
    if _ATTRIBUTE_HOST_NAME in attrs:
        return _str(attrs[_ATTRIBUTE_HOST_NAME])
    return None


def hostname_from_attributes(attrs: Mapping[str, Any]) -> Optional[str]:
    """Resolve a hostname from attributes, discarding localhost-like names.

    Checked in order: literal 'host', 'datadog.host.name', cloud provider
    hostname, Kubernetes node (and cluster), host id, host name.
    """
    candidate = _unsanitized_hostname_from_attributes(attrs)
    if candidate in _INVALID_HOSTS:
        return None
    return candidate


def source_from_attrs(attrs: Mapping[str, Any]) -> Optional[Source]:
    """Telemetry source identified by the attributes, or None."""
    if _on_fargate(attrs) and _ATTRIBUTE_AWS_ECS_TASK_ARN in attrs:
        return Source(Kind.AWS_ECS_FARGATE, _str(attrs[_ATTRIBUTE_AWS_ECS_TASK_ARN]))
    host = hostname_from_attributes(attrs)
    if host is not None:
        return Source(Kind.HOSTNAME, host)
    return None