import pytest

from otlpmapping.attributes import (
    as_string,
    container_tag_from_attributes,
    origin_id_from_attributes,
    tags_from_attributes,
    value_type_name,
)


def test_tags_from_attributes():
    attrs = {
        "process.executable.name": "otelcol",
        "process.executable.path": "/usr/bin/cmd/otelcol",
        "process.command": "cmd/otelcol",
        "process.command_line": 'cmd/otelcol --config="/path/to/config.yaml"',
        "process.pid": 1,
        "process.owner": "root",
        "os.type": "linux",
        "k8s.daemonset.name": "daemon_set_name",
        "aws.ecs.cluster.arn": "cluster_arn",
        "container.runtime": "cro",
        "tags.datadoghq.com/service": "service_name",
    }
    assert sorted(tags_from_attributes(attrs)) == sorted(
        [
            "process.executable.name:otelcol",
            "os.type:linux",
            "kube_daemon_set:daemon_set_name",
            "ecs_cluster_name:cluster_arn",
            "service:service_name",
            "runtime:cro",
        ]
    )


def test_tags_from_attributes_empty():
    assert tags_from_attributes({}) == []


def test_tags_from_attributes_ignores_non_string_and_empty():
    attrs = {"service.name": 5, "deployment.environment": ""}
    assert tags_from_attributes(attrs) == []


def test_container_tag_from_attributes():
    attrs = {
        "container.name": "sample_app",
        "container.image.tag": "sample_app_image_tag",
        "container.runtime": "cro",
        "k8s.container.name": "kube_sample_app",
        "k8s.replicaset.name": "sample_replica_set",
        "k8s.daemonset.name": "sample_daemonset_name",
        "k8s.pod.name": "sample_pod_name",
        "cloud.provider": "sample_cloud_provider",
        "cloud.region": "sample_region",
        "cloud.availability_zone": "sample_zone",
        "aws.ecs.task.family": "sample_task_family",
        "aws.ecs.cluster.arn": "sample_ecs_cluster_name",
        "aws.ecs.container.arn": "sample_ecs_container_name",
        "custom_tag": "example_custom_tag",
        "": "empty_string_key",
        "empty_string_val": "",
    }
    assert container_tag_from_attributes(attrs) == {
        "container_name": "sample_app",
        "image_tag": "sample_app_image_tag",
        "runtime": "cro",
        "kube_container_name": "kube_sample_app",
        "kube_replica_set": "sample_replica_set",
        "kube_daemon_set": "sample_daemonset_name",
        "pod_name": "sample_pod_name",
        "cloud_provider": "sample_cloud_provider",
        "region": "sample_region",
        "zone": "sample_zone",
        "task_family": "sample_task_family",
        "ecs_cluster_name": "sample_ecs_cluster_name",
        "ecs_container_name": "sample_ecs_container_name",
    }


def test_container_tag_from_attributes_empty():
    assert container_tag_from_attributes({}) == {}


@pytest.mark.parametrize(
    "attrs,expected",
    [
        (
            {"container.id": "container_id_goes_here", "k8s.pod.uid": "k8s_pod_uid_goes_here"},
            "container_id://container_id_goes_here",
        ),
        ({"container.id": "container_id_goes_here"}, "container_id://container_id_goes_here"),
        ({"k8s.pod.uid": "k8s_pod_uid_goes_here"}, "kubernetes_pod_uid://k8s_pod_uid_goes_here"),
        ({}, ""),
    ],
)
def test_origin_id_from_attributes(attrs, expected):
    assert origin_id_from_attributes(attrs) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        ("text", "text"),
        (True, "true"),
        (False, "false"),
        (1000, "1000"),
        (1.5, "1.5"),
        (2.0, "2"),
        (None, ""),
        (b"\x00\x01", "AAE="),
        ({"b": 1, "a": "x"}, '{"a":"x","b":1}'),
        ([1, "a"], '[1,"a"]'),
    ],
)
def test_as_string(value, expected):
    assert as_string(value) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        ("s", "Str"),
        (True, "Bool"),
        (3, "Int"),
        (3.5, "Double"),
        (None, "Empty"),
        (b"x", "Bytes"),
        ({}, "Map"),
        ([], "Slice"),
    ],
)
def test_value_type_name(value, expected):
    assert value_type_name(value) == expected


def test_value_type_name_unsupported():
    with pytest.raises(TypeError):
        value_type_name(object())