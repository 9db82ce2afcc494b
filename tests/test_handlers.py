"""
Tests for the kopf scheduler adapter
"""

import logging
from unittest.mock import MagicMock

import kopf
import pytest
from kubernetes.client.rest import ApiException

from controllers.handlers import ObjectLocks, fetch_owner, owning_cluster, reconcile_owner, run_reconcile
from components.hdfs_cluster.main import reconcile_hdfs
from components.zookeeper_cluster.main import reconcile_zookeeper


@pytest.fixture
def memo(transport):
    memo = kopf.Memo()
    memo.transport = transport
    return memo


class TestRunReconcile:
    """Tests for run_reconcile."""

    def test_success(self, hdfs_cluster, memo, transport):
        run_reconcile(reconcile_hdfs, hdfs_cluster, memo, logging.getLogger(__name__))

        assert len(transport.applied) == 7

    def test_failure_becomes_temporary_error(self, zookeeper_cluster, memo, failing_transport):
        memo.transport = failing_transport

        with pytest.raises(kopf.TemporaryError) as excinfo:
            run_reconcile(reconcile_zookeeper, zookeeper_cluster, memo, logging.getLogger(__name__))

        assert excinfo.value.delay == 5.0
        assert "failed to apply Service zk" in str(excinfo.value)

    def test_missing_namespace_is_retried(self, hdfs_cluster, memo):
        del hdfs_cluster["metadata"]["namespace"]

        with pytest.raises(kopf.TemporaryError) as excinfo:
            run_reconcile(reconcile_hdfs, hdfs_cluster, memo, logging.getLogger(__name__))

        assert excinfo.value.delay == 5.0


def owner_reference(kind="HdfsCluster", api_version="hdfs.stackable.tech/v1alpha1", controller=True):
    return {
        "apiVersion": api_version,
        "kind": kind,
        "name": "hdfs1",
        "uid": "0f5c7d2e-hdfs",
        "controller": controller,
    }


class TestOwningCluster:
    """Tests for finding the cluster behind a child object."""

    def test_hdfs_owner(self):
        owner = owning_cluster({"ownerReferences": [owner_reference()]})

        assert owner["name"] == "hdfs1"

    def test_zookeeper_owner(self):
        reference = owner_reference("ZookeeperCluster", "zookeeper.stackable.tech/v1alpha1")

        assert owning_cluster({"ownerReferences": [reference]}) == reference

    def test_no_owner(self):
        assert owning_cluster({}) is None

    def test_foreign_owner(self):
        reference = owner_reference("Deployment", "apps/v1")

        assert owning_cluster({"ownerReferences": [reference]}) is None

    def test_same_kind_other_group(self):
        reference = owner_reference(api_version="example.com/v1")

        assert owning_cluster({"ownerReferences": [reference]}) is None

    def test_non_controller_owner(self):
        assert owning_cluster({"ownerReferences": [owner_reference(controller=False)]}) is None


class TestFetchOwner:
    """Tests for reading the owning cluster object."""

    def test_found(self, hdfs_cluster):
        custom_objects = MagicMock()
        custom_objects.get_namespaced_custom_object.return_value = hdfs_cluster

        assert fetch_owner(custom_objects, owner_reference(), "ns") is hdfs_cluster
        custom_objects.get_namespaced_custom_object.assert_called_once_with(
            "hdfs.stackable.tech", "v1alpha1", "ns", "hdfsclusters", "hdfs1",
        )

    def test_gone(self):
        custom_objects = MagicMock()
        custom_objects.get_namespaced_custom_object.side_effect = ApiException(status=404, reason="Not Found")

        assert fetch_owner(custom_objects, owner_reference(), "ns") is None

    def test_replaced(self, hdfs_cluster):
        hdfs_cluster["metadata"]["uid"] = "another-uid"
        custom_objects = MagicMock()
        custom_objects.get_namespaced_custom_object.return_value = hdfs_cluster

        assert fetch_owner(custom_objects, owner_reference(), "ns") is None

    def test_other_errors_propagate(self):
        custom_objects = MagicMock()
        custom_objects.get_namespaced_custom_object.side_effect = ApiException(status=403, reason="Forbidden")

        with pytest.raises(ApiException):
            fetch_owner(custom_objects, owner_reference(), "ns")


class TestReconcileOwner:
    """Tests for reconciling a cluster when one of its children changes."""

    def test_reconciles_owning_cluster(self, hdfs_cluster, memo, transport):
        memo.custom_objects = MagicMock()
        memo.custom_objects.get_namespaced_custom_object.return_value = hdfs_cluster

        reconcile_owner({"ownerReferences": [owner_reference()]}, "ns", memo, logging.getLogger(__name__))

        assert len(transport.applied) == 7

    def test_ignores_unowned_children(self, memo, transport):
        memo.custom_objects = MagicMock()

        reconcile_owner({"name": "unrelated"}, "ns", memo, logging.getLogger(__name__))

        memo.custom_objects.get_namespaced_custom_object.assert_not_called()
        assert transport.applied == []

    def test_failure_is_logged_not_raised(self, zookeeper_cluster, memo, failing_transport, caplog):
        memo.transport = failing_transport
        memo.custom_objects = MagicMock()
        memo.custom_objects.get_namespaced_custom_object.return_value = zookeeper_cluster
        reference = owner_reference("ZookeeperCluster", "zookeeper.stackable.tech/v1alpha1")
        reference["name"] = "zk"
        reference["uid"] = "7a1e93b4-zk"

        with caplog.at_level(logging.WARNING):
            reconcile_owner({"ownerReferences": [reference]}, "ns", memo, logging.getLogger(__name__))

        assert "failed to apply Service zk" in caplog.text


class TestObjectLocks:
    """Tests for per-object reconcile locks."""

    def test_same_object_same_lock(self):
        locks = ObjectLocks()

        assert locks.get("HdfsCluster", "ns", "hdfs1") is locks.get("HdfsCluster", "ns", "hdfs1")
        assert locks.get("HdfsCluster", "ns", "hdfs1") is not locks.get("HdfsCluster", "ns", "hdfs2")

    def test_lock_released_after_failure(self, hdfs_cluster, memo):
        del hdfs_cluster["metadata"]["namespace"]

        with pytest.raises(kopf.TemporaryError):
            run_reconcile(reconcile_hdfs, hdfs_cluster, memo, logging.getLogger(__name__))

        assert not memo.locks.get("HdfsCluster", "", "hdfs1").locked()
