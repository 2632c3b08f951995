"""Mapping of OpenTelemetry resource attributes to Datadog tags."""

from __future__ import annotations

import base64
import json
import math
from decimal import Decimal
from typing import Any, Dict, List, Mapping

from otlpmapping.resource_tags import (
    ATTRIBUTE_OS_TYPE,
    ATTRIBUTE_PROCESS_COMMAND,
    ATTRIBUTE_PROCESS_COMMAND_LINE,
    ATTRIBUTE_PROCESS_EXECUTABLE_NAME,
    ATTRIBUTE_PROCESS_EXECUTABLE_PATH,
    ProcessAttributes,
    SystemAttributes,
)

__all__ = [
    "as_string",
    "value_type_name",
    "tags_from_attributes",
    "origin_id_from_attributes",
    "container_tag_from_attributes",
]

ATTRIBUTE_DEPLOYMENT_ENVIRONMENT = "deployment.environment"
ATTRIBUTE_SERVICE_NAME = "service.name"
ATTRIBUTE_SERVICE_VERSION = "service.version"
ATTRIBUTE_CONTAINER_ID = "container.id"
ATTRIBUTE_CONTAINER_NAME = "container.name"
ATTRIBUTE_CONTAINER_IMAGE_NAME = "container.image.name"
ATTRIBUTE_CONTAINER_IMAGE_TAG = "container.image.tag"
ATTRIBUTE_CONTAINER_RUNTIME = "container.runtime"
ATTRIBUTE_CLOUD_PROVIDER = "cloud.provider"
ATTRIBUTE_CLOUD_REGION = "cloud.region"
ATTRIBUTE_CLOUD_AVAILABILITY_ZONE = "cloud.availability_zone"
ATTRIBUTE_AWS_ECS_TASK_FAMILY = "aws.ecs.task.family"
ATTRIBUTE_AWS_ECS_TASK_ARN = "aws.ecs.task.arn"
ATTRIBUTE_AWS_ECS_CLUSTER_ARN = "aws.ecs.cluster.arn"
ATTRIBUTE_AWS_ECS_TASK_REVISION = "aws.ecs.task.revision"
ATTRIBUTE_AWS_ECS_CONTAINER_ARN = "aws.ecs.container.arn"
ATTRIBUTE_K8S_CONTAINER_NAME = "k8s.container.name"
ATTRIBUTE_K8S_CLUSTER_NAME = "k8s.cluster.name"
ATTRIBUTE_K8S_DEPLOYMENT_NAME = "k8s.deployment.name"
ATTRIBUTE_K8S_REPLICASET_NAME = "k8s.replicaset.name"
ATTRIBUTE_K8S_STATEFULSET_NAME = "k8s.statefulset.name"
ATTRIBUTE_K8S_DAEMONSET_NAME = "k8s.daemonset.name"
ATTRIBUTE_K8S_JOB_NAME = "k8s.job.name"
ATTRIBUTE_K8S_CRONJOB_NAME = "k8s.cronjob.name"
ATTRIBUTE_K8S_NAMESPACE_NAME = "k8s.namespace.name"
ATTRIBUTE_K8S_POD_NAME = "k8s.pod.name"
ATTRIBUTE_K8S_POD_UID = "k8s.pod.uid"
ATTRIBUTE_PROCESS_PID = "process.pid"
ATTRIBUTE_PROCESS_OWNER = "process.owner"

# OpenTelemetry semantic conventions to Datadog Agent conventions.
CONVENTIONS_MAPPING: Dict[str, str] = {
    ATTRIBUTE_DEPLOYMENT_ENVIRONMENT: "env",
    ATTRIBUTE_SERVICE_NAME: "service",
    ATTRIBUTE_SERVICE_VERSION: "version",
    ATTRIBUTE_CONTAINER_ID: "container_id",
    ATTRIBUTE_CONTAINER_NAME: "container_name",
    ATTRIBUTE_CONTAINER_IMAGE_NAME: "image_name",
    ATTRIBUTE_CONTAINER_IMAGE_TAG: "image_tag",
    ATTRIBUTE_CONTAINER_RUNTIME: "runtime",
    ATTRIBUTE_CLOUD_PROVIDER: "cloud_provider",
    ATTRIBUTE_CLOUD_REGION: "region",
    ATTRIBUTE_CLOUD_AVAILABILITY_ZONE: "zone",
    ATTRIBUTE_AWS_ECS_TASK_FAMILY: "task_family",
    ATTRIBUTE_AWS_ECS_TASK_ARN: "task_arn",
    ATTRIBUTE_AWS_ECS_CLUSTER_ARN: "ecs_cluster_name",
    ATTRIBUTE_AWS_ECS_TASK_REVISION: "task_version",
    ATTRIBUTE_AWS_ECS_CONTAINER_ARN: "ecs_container_name",
    ATTRIBUTE_K8S_CONTAINER_NAME: "kube_container_name",
    ATTRIBUTE_K8S_CLUSTER_NAME: "kube_cluster_name",
    ATTRIBUTE_K8S_DEPLOYMENT_NAME: "kube_deployment",
    ATTRIBUTE_K8S_REPLICASET_NAME: "kube_replica_set",
    ATTRIBUTE_K8S_STATEFULSET_NAME: "kube_stateful_set",
    ATTRIBUTE_K8S_DAEMONSET_NAME: "kube_daemon_set",
    ATTRIBUTE_K8S_JOB_NAME: "kube_job",
    ATTRIBUTE_K8S_CRONJOB_NAME: "kube_cronjob",
    ATTRIBUTE_K8S_NAMESPACE_NAME: "kube_namespace",
    ATTRIBUTE_K8S_POD_NAME: "pod_name",
}

# Attributes extracted as Datadog container tags, in this order.
CONTAINER_TAGS_ATTRIBUTES = (
    ATTRIBUTE_CONTAINER_ID,
    ATTRIBUTE_CONTAINER_NAME,
    ATTRIBUTE_CONTAINER_IMAGE_NAME,
    ATTRIBUTE_CONTAINER_IMAGE_TAG,
    ATTRIBUTE_CONTAINER_RUNTIME,
    ATTRIBUTE_K8S_CONTAINER_NAME,
    ATTRIBUTE_K8S_CLUSTER_NAME,
    ATTRIBUTE_K8S_DEPLOYMENT_NAME,
    ATTRIBUTE_K8S_REPLICASET_NAME,
    ATTRIBUTE_K8S_STATEFULSET_NAME,
    ATTRIBUTE_K8S_DAEMONSET_NAME,
    ATTRIBUTE_K8S_JOB_NAME,
    ATTRIBUTE_K8S_CRONJOB_NAME,
    ATTRIBUTE_K8S_NAMESPACE_NAME,
    ATTRIBUTE_K8S_POD_NAME,
    ATTRIBUTE_CLOUD_PROVIDER,
    ATTRIBUTE_CLOUD_REGION,
    ATTRIBUTE_CLOUD_AVAILABILITY_ZONE,
    ATTRIBUTE_AWS_ECS_TASK_FAMILY,
    ATTRIBUTE_AWS_ECS_TASK_ARN,
    ATTRIBUTE_AWS_ECS_CLUSTER_ARN,
    ATTRIBUTE_AWS_ECS_TASK_REVISION,
    ATTRIBUTE_AWS_ECS_CONTAINER_ARN,
)

# Kubernetes labels (general and Datadog specific) to Datadog Agent conventions.
KUBERNETES_MAPPING: Dict[str, str] = {
    "tags.datadoghq.com/env": "env",
    "tags.datadoghq.com/service": "service",
    "tags.datadoghq.com/version": "version",
    "app.kubernetes.io/name": "kube_app_name",
    "app.kubernetes.io/instance": "kube_app_instance",
    "app.kubernetes.io/version": "kube_app_version",
    "app.kuberenetes.io/component": "kube_app_component",
    "app.kubernetes.io/part-of": "kube_app_part_of",
    "app.kubernetes.io/managed-by": "kube_app_managed_by",
}


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _int(value: Any) -> int:
    return value if isinstance(value, int) and not isinstance(value, bool) else 0


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    text = repr(value)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    if text.endswith(".0"):
        text = text[:-2]
    return text


def _to_raw(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, Mapping):
        return {str(k): _to_raw(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_raw(v) for v in value]
    return value


def as_string(value: Any) -> str:
    """Render an attribute value as a string, whatever its type."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(
            _to_raw(value), sort_keys=True, separators=(",", ":"), ensure_ascii=False
        )
    return str(value)


def value_type_name(value: Any) -> str:
    """Name of the attribute value's type ("Str", "Bool", "Int", ...)."""
    if value is None:
        return "Empty"
    if isinstance(value, str):
        return "Str"
    if isinstance(value, bool):
        return "Bool"
    if isinstance(value, int):
        return "Int"
    if isinstance(value, float):
        return "Double"
    if isinstance(value, (bytes, bytearray)):
        return "Bytes"
    if isinstance(value, Mapping):
        return "Map"
    if isinstance(value, (list, tuple)):
        return "Slice"
    raise TypeError(f"unsupported attribute value type: {type(value).__name__}")


def tags_from_attributes(attrs: Mapping[str, Any]) -> List[str]:
    """Convert a selected set of attributes into Datadog tags."""
    tags: List[str] = []
    process = ProcessAttributes()
    system = SystemAttributes()

    for key, value in attrs.items():
        if key == ATTRIBUTE_PROCESS_EXECUTABLE_NAME:
            process.executable_name = _str(value)
        elif key == ATTRIBUTE_PROCESS_EXECUTABLE_PATH:
            process.executable_path = _str(value)
        elif key == ATTRIBUTE_PROCESS_COMMAND:
            process.command = _str(value)
        elif key == ATTRIBUTE_PROCESS_COMMAND_LINE:
            process.command_line = _str(value)
        elif key == ATTRIBUTE_PROCESS_PID:
            process.pid = _int(value)
        elif key == ATTRIBUTE_PROCESS_OWNER:
            process.owner = _str(value)
        elif key == ATTRIBUTE_OS_TYPE:
            system.os_type = _str(value)

        text = _str(value)
        if key in CONVENTIONS_MAPPING and text:
            tags.append(f"{CONVENTIONS_MAPPING[key]}:{text}")
        if key in KUBERNETES_MAPPING and text:
            tags.append(f"{KUBERNETES_MAPPING[key]}:{text}")

    tags.extend(process.extract_tags())
    tags.extend(system.extract_tags())
    return tags


def origin_id_from_attributes(attrs: Mapping[str, Any]) -> str:
    """Origin id from resource attributes; container id wins over pod UID."""
    if ATTRIBUTE_CONTAINER_ID in attrs:
        return "container_id://" + as_string(attrs[ATTRIBUTE_CONTAINER_ID])
    if ATTRIBUTE_K8S_POD_UID in attrs:
        return "kubernetes_pod_uid://" + as_string(attrs[ATTRIBUTE_K8S_POD_UID])
    return ""


def container_tag_from_attributes(attrs: Mapping[str, str]) -> Dict[str, str]:
    """Datadog container tags found in a string attribute map."""
    return {
        CONVENTIONS_MAPPING[key]: attrs[key]
        for key in CONTAINER_TAGS_ATTRIBUTES
        if key in attrs
    }