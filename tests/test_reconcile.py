"""
Tests for the convergence driver
"""

import pytest

from components.base.component_types import NextAction
from components.base.errors import (
    AddressResolutionFailure,
    ApplyFailure,
    MissingNamespace,
    TransportError,
)
from components.base.reconcile import error_policy
from components.hdfs_cluster.main import reconcile_hdfs


class TestReconcileHdfs:
    """Tests for reconcile_hdfs."""

    def test_applies_everything_in_order(self, hdfs_cluster, transport):
        action = reconcile_hdfs(hdfs_cluster, transport)

        assert action == NextAction()
        assert [(kind, name) for kind, name, _, _ in transport.applied][:3] == [
            ("ConfigMap", "hdfs1-config"),
            ("Service", "hdfs1-journalnode"),
            ("StatefulSet", "hdfs1-journalnode"),
        ]
        assert len(transport.applied) == 7

    def test_uses_field_manager(self, hdfs_cluster, transport):
        reconcile_hdfs(hdfs_cluster, transport)
        reconcile_hdfs(hdfs_cluster, transport, field_manager="test-manager")

        managers = [manager for _, _, manager, _ in transport.applied]
        assert managers[:7] == ["hdfs.stackable.tech/hdfscluster"] * 7
        assert managers[7:] == ["test-manager"] * 7

    def test_missing_namespace_applies_nothing(self, hdfs_cluster, transport):
        del hdfs_cluster["metadata"]["namespace"]

        with pytest.raises(MissingNamespace):
            reconcile_hdfs(hdfs_cluster, transport)

        assert transport.applied == []

    def test_negative_replicas(self, hdfs_cluster, transport):
        hdfs_cluster["spec"]["journalnodeReplicas"] = -1

        with pytest.raises(AddressResolutionFailure) as excinfo:
            reconcile_hdfs(hdfs_cluster, transport)

        assert excinfo.value.role == "journalnode"
        assert transport.applied == []

    def test_first_failure_stops(self, hdfs_cluster, failing_transport):
        with pytest.raises(ApplyFailure) as excinfo:
            reconcile_hdfs(hdfs_cluster, failing_transport)

        assert excinfo.value.kind == "Service"
        assert excinfo.value.name == "hdfs1-journalnode"
        assert isinstance(excinfo.value.__cause__, TransportError)
        # Only the config map went through, nothing is rolled back
        assert [kind for kind, _, _, _ in failing_transport.applied] == ["ConfigMap"]

    def test_converged_cluster_reapplies_same_bodies(self, hdfs_cluster, transport):
        reconcile_hdfs(hdfs_cluster, transport)
        first = [body for _, _, _, body in transport.applied]
        transport.applied.clear()

        reconcile_hdfs(hdfs_cluster, transport)
        second = [body for _, _, _, body in transport.applied]

        assert first == second


class TestErrorPolicy:
    """Tests for error_policy."""

    @pytest.mark.parametrize("error", [
        MissingNamespace("HdfsCluster/hdfs1"),
        AddressResolutionFailure("namenode"),
        ApplyFailure("StatefulSet", "hdfs1-namenode"),
    ])
    def test_flat_retry(self, error):
        assert error_policy(error) == NextAction(requeue_after=5.0)

    def test_injected_delay(self):
        assert error_policy(ApplyFailure("Service"), requeue_after=1.5).requeue_after == 1.5


class TestErrorMessages:
    """Tests for error formatting."""

    def test_apply_failure_without_name(self):
        assert str(ApplyFailure("ConfigMap")) == "failed to apply ConfigMap"

    def test_address_resolution_reason(self):
        error = AddressResolutionFailure("datanode", "cluster has no namespace")

        assert str(error) == "failed to resolve addresses for role datanode: cluster has no namespace"
