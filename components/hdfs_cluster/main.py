import logging
from typing import Any, List, Mapping

from components.base.component_types import ManagedResource, NextAction
from components.base.constants import HDFS_FIELD_MANAGER
from components.base.reconcile import ApplyTransport, apply_owned_resources
from components.hdfs_cluster.component_types import HdfsClusterSpec
from components.hdfs_cluster.resources import build_resource_set
from components.hdfs_cluster.topology import plan_topology

logger = logging.getLogger(__name__)


def desired_hdfs_resources(hdfs: Mapping[str, Any]) -> List[ManagedResource]:
    """
    Compute every child of an HdfsCluster object from scratch.

    Raises:
        MissingNamespace: if the object has no namespace
        AddressResolutionFailure: if a role's addresses cannot be derived
    """
    spec = HdfsClusterSpec.from_custom_object(hdfs)
    topology = plan_topology(spec)
    return build_resource_set(spec, topology)


def reconcile_hdfs(
    hdfs: Mapping[str, Any],
    transport: ApplyTransport,
    field_manager: str = HDFS_FIELD_MANAGER,
) -> NextAction:
    """
    Converge the children of an HdfsCluster to their desired state.

    Args:
        hdfs: HdfsCluster object as stored by the API server
        transport: Owned upsert implementation
        field_manager: Originator identifier for the upserts

    Returns:
        NextAction without requeue; the next event or resync triggers the
        following reconciliation

    Raises:
        ReconcileError: on the first failure, nothing applied is rolled back
    """
    resources = desired_hdfs_resources(hdfs)
    apply_owned_resources(resources, transport, field_manager)
    logger.info(
        "reconciled HdfsCluster %s/%s (%d resources)",
        resources[0].namespace, hdfs["metadata"]["name"], len(resources),
    )
    return NextAction()
