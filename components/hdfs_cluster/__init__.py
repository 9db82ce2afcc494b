"""
HDFS Cluster Components

Turns an HdfsCluster custom object into the config map, headless services and
stateful sets of a highly available HDFS cluster.
"""
from .main import desired_hdfs_resources, reconcile_hdfs
from .component_types import HdfsClusterSpec
from .topology import plan_topology
from .resources import build_resource_set
from .config_bundle import build_config_bundle

__all__ = [
    "reconcile_hdfs",
    "desired_hdfs_resources",
    "HdfsClusterSpec",
    "plan_topology",
    "build_resource_set",
    "build_config_bundle",
]
