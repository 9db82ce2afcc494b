"""
Pytest configuration and fixtures for the cluster operator tests
"""

import sys
from pathlib import Path

import pytest

# Add the repository root to the path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from components.base.errors import TransportError  # noqa: E402


class RecordingTransport:
    """Upsert transport that records every apply and can reject one kind."""

    def __init__(self, fail_on_kind=None):
        self.fail_on_kind = fail_on_kind
        self.applied = []

    def apply(self, resource, field_manager):
        if resource.kind == self.fail_on_kind:
            raise TransportError(f"rejected {resource.kind} {resource.name}")
        self.applied.append((resource.kind, resource.name, field_manager, resource.body))
        return resource.body


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def failing_transport():
    """Transport rejecting every Service."""
    return RecordingTransport(fail_on_kind="Service")


@pytest.fixture
def hdfs_cluster():
    """HdfsCluster object as returned by the API server."""
    return {
        "apiVersion": "hdfs.stackable.tech/v1alpha1",
        "kind": "HdfsCluster",
        "metadata": {
            "name": "hdfs1",
            "namespace": "ns",
            "uid": "0f5c7d2e-hdfs",
        },
        "spec": {
            "namenodeReplicas": 2,
            "datanodeReplicas": 3,
            "journalnodeReplicas": 3,
        },
    }


@pytest.fixture
def kerberized_hdfs_cluster(hdfs_cluster):
    hdfs_cluster["spec"]["kerberos"] = {
        "realm": "EXAMPLE.COM",
        "kdc": "kdc.example.com",
    }
    hdfs_cluster["spec"]["zookeeperConfigMapName"] = "hdfs1-zookeeper-brokers"
    return hdfs_cluster


@pytest.fixture
def zookeeper_cluster():
    """ZookeeperCluster object as returned by the API server."""
    return {
        "apiVersion": "zookeeper.stackable.tech/v1alpha1",
        "kind": "ZookeeperCluster",
        "metadata": {
            "name": "zk",
            "namespace": "ns",
            "uid": "7a1e93b4-zk",
        },
        "spec": {
            "replicas": 3,
        },
    }
