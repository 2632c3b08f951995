from otlpmapping.ec2 import (
    cluster_name_from_attributes,
    host_info_from_attributes,
    hostname_from_attrs,
    is_default_hostname,
)

TEST_IP = "ip-12-34-56-78.us-west-2.compute.internal"
TEST_DOMU = "domu-12-34-56-78.us-west-2.compute.internal"
TEST_EC2 = "ec2amaz-12-34-56-78.us-west-2.compute.internal"
CUSTOM_HOST = "custom-hostname"
TEST_INSTANCE_ID = "i-0123456789"


def test_default_hostname():
    assert is_default_hostname(TEST_IP) is True
    assert is_default_hostname(TEST_DOMU) is True
    assert is_default_hostname(TEST_EC2) is True
    assert is_default_hostname(CUSTOM_HOST) is False


def test_hostname_from_attrs_host_id():
    attrs = {
        "cloud.provider": "aws",
        "host.id": TEST_INSTANCE_ID,
        "host.name": TEST_IP,
    }
    assert hostname_from_attrs(attrs) == TEST_INSTANCE_ID


def test_hostname_from_attrs_no_host_id():
    attrs = {"cloud.provider": "aws", "host.name": TEST_IP}
    assert hostname_from_attrs(attrs) is None


def test_host_info_from_attributes():
    attrs = {
        "cloud.provider": "aws",
        "host.id": TEST_INSTANCE_ID,
        "host.name": TEST_IP,
        "ec2.tag.tag1": "val1",
        "ec2.tag.tag2": "val2",
        "ignored": "ignored",
    }
    info = host_info_from_attributes(attrs)
    assert info.instance_id == TEST_INSTANCE_ID
    assert info.ec2_hostname == TEST_IP
    assert sorted(info.ec2_tags) == ["tag1:val1", "tag2:val2"]


def test_cluster_name_from_attributes():
    assert (
        cluster_name_from_attributes(
            {"ec2.tag.kubernetes.io/cluster/clustername": "dummy_value"}
        )
        == "clustername"
    )
    assert cluster_name_from_attributes({}) is None