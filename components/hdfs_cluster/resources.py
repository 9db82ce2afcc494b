"""
HDFS Resource Set

Builds the desired state of every child of an HdfsCluster from the per-role
table in constants.HDFS_ROLES: one config map, then a headless service and a
stateful set for each role with at least one replica.
"""
from typing import Any, Dict, List

from components.base.component_types import ManagedResource, RoleDefinition
from components.base.constants import HADOOP_IMAGE
from components.base.identity import role_group_name
from components.base.utils import config_map, container_ports, headless_service, stateful_set
from components.hdfs_cluster.component_types import HdfsClusterSpec, HdfsTopology
from components.hdfs_cluster.config_bundle import build_config_bundle
from components.hdfs_cluster.constants import (
    CONFIG_DIR,
    DATA_DIR,
    HADOOP_HOME,
    HDFS_BIN,
    HDFS_ROLES,
    KERBEROS_DIR,
    NAMENODE_BOOTSTRAP_SCRIPT,
    ZOOKEEPER_BROKERS_KEY,
)


def config_map_name(spec: HdfsClusterSpec) -> str:
    return f"{spec.name}-config"


def kerberos_secret_name(spec: HdfsClusterSpec, role: str) -> str:
    return f"{role_group_name(spec.name, role)}-kerberos"


def pod_labels(spec: HdfsClusterSpec, role: str) -> Dict[str, str]:
    return {
        "app": "hdfs",
        "hdfs.stackable.tech/cluster": spec.name,
        "role": role,
    }


def storage_size(spec: HdfsClusterSpec, role: RoleDefinition) -> str:
    return spec.storage.get(role.name) or role.storage_size


def hadoop_container(spec: HdfsClusterSpec, name: str, args: List[str]) -> Dict[str, Any]:
    """
    Create a container running a Hadoop process against the mounted config.
    """
    volume_mounts = [
        {"name": "data", "mountPath": DATA_DIR},
        {"name": "config", "mountPath": CONFIG_DIR, "readOnly": True},
    ]
    if spec.kerberos_enabled:
        volume_mounts.append({"name": "kerberos", "mountPath": KERBEROS_DIR, "readOnly": True})

    return {
        "name": name,
        "image": HADOOP_IMAGE,
        "args": list(args),
        "env": [
            {"name": "HADOOP_HOME", "value": HADOOP_HOME},
            {"name": "HADOOP_CONF_DIR", "value": CONFIG_DIR},
            {"name": "JAVA_TOOL_OPTIONS", "value": f"-Djava.security.krb5.conf={CONFIG_DIR}/krb5.conf"},
        ],
        "volumeMounts": volume_mounts,
    }


def with_zookeeper_brokers(spec: HdfsClusterSpec, container: Dict[str, Any]) -> Dict[str, Any]:
    """Expose the failover controller's ZooKeeper connect string to a container."""
    if not spec.automatic_failover:
        return container
    container["env"].append({
        "name": ZOOKEEPER_BROKERS_KEY,
        "valueFrom": {
            "configMapKeyRef": {
                "name": spec.zookeeper_config_map,
                "key": ZOOKEEPER_BROKERS_KEY,
            }
        },
    })
    return container


def pod_volumes(spec: HdfsClusterSpec, role: str) -> List[Dict[str, Any]]:
    volumes = [
        {
            "name": "config",
            "configMap": {
                "name": config_map_name(spec),
            },
        },
    ]
    if spec.kerberos_enabled:
        volumes.append({
            "name": "kerberos",
            "secret": {
                "secretName": kerberos_secret_name(spec, role),
            },
        })
    return volumes


def pod_spec(spec: HdfsClusterSpec, role: RoleDefinition) -> Dict[str, Any]:
    """
    Create the pod spec of a role.

    The namenode additionally gets the bootstrap init container and, when a
    ZooKeeper ConfigMap is referenced, the failover controller sidecar.
    """
    main_container = hadoop_container(spec, role.name, list(role.args))
    main_container["ports"] = container_ports(role)
    containers = [main_container]

    result = {
        "containers": containers,
        "volumes": pod_volumes(spec, role.name),
        "hostNetwork": True,
        "dnsPolicy": "ClusterFirstWithHostNet",
    }

    if role.name == "namenode":
        init_container = with_zookeeper_brokers(
            spec,
            hadoop_container(spec, "format-namenode", ["sh", "-c", NAMENODE_BOOTSTRAP_SCRIPT]),
        )
        result["initContainers"] = [init_container]
        if spec.automatic_failover:
            containers.append(with_zookeeper_brokers(
                spec,
                hadoop_container(spec, "zkfc", [HDFS_BIN, "zkfc"]),
            ))

    return result


def build_role_resources(spec: HdfsClusterSpec, role: RoleDefinition) -> List[ManagedResource]:
    name = role_group_name(spec.name, role.name)
    labels = pod_labels(spec, role.name)
    return [
        headless_service(name, spec.parent, role, labels),
        stateful_set(
            name,
            spec.parent,
            replicas=spec.replicas(role.name),
            labels=labels,
            pod_spec=pod_spec(spec, role),
            storage_size=storage_size(spec, role),
        ),
    ]


def build_resource_set(spec: HdfsClusterSpec, topology: HdfsTopology) -> List[ManagedResource]:
    """
    Build every child of an HDFS cluster in application order.

    Args:
        spec: Validated cluster spec
        topology: Planned topology of the cluster

    Returns:
        The config map, then service and stateful set per role for
        journalnodes, namenodes and datanodes. Roles scaled to zero are
        skipped.
    """
    resources = [config_map(config_map_name(spec), spec.parent, build_config_bundle(spec, topology))]
    for role in HDFS_ROLES.values():
        if spec.replicas(role.name) <= 0:
            continue
        resources.extend(build_role_resources(spec, role))
    return resources
