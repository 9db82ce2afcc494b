import logging
from typing import Any, Dict, List, Mapping

from components.base.component_types import ManagedResource, NextAction, ReplicaIdentity
from components.base.constants import DEFAULT_STORAGE_SIZE, ZOOKEEPER_FIELD_MANAGER, ZOOKEEPER_IMAGE
from components.base.identity import resolve_identities, role_group_name
from components.base.reconcile import ApplyTransport, apply_owned_resources
from components.base.utils import child_metadata, config_map, container_ports, headless_service, stateful_set
from components.zookeeper_cluster.component_types import ZookeeperClusterSpec
from components.zookeeper_cluster.constants import (
    CLIENT_PORT,
    DECIDE_MYID_SCRIPT,
    ELECTION_PORT,
    LEADER_PORT,
    READINESS_PROBE_SCRIPT,
    SERVER_ROLE,
    ZOO_CFG_HEADER,
)

logger = logging.getLogger(__name__)


def zoo_cfg(servers: List[ReplicaIdentity]) -> str:
    """
    Render zoo.cfg for an ensemble.

    Server ids are 1-based, matching the myid written by the init container.
    """
    lines = list(ZOO_CFG_HEADER)
    for server in servers:
        lines.append(f"server.{server.ordinal + 1}={server.fqdn}:{LEADER_PORT}:{ELECTION_PORT};{CLIENT_PORT}")
    return "\n".join(lines) + "\n"


def pod_labels(spec: ZookeeperClusterSpec) -> Dict[str, str]:
    return {
        "app": "zookeeper",
        "zookeeper.stackable.tech/cluster": spec.name,
        "role": SERVER_ROLE.name,
    }


def client_service(spec: ZookeeperClusterSpec) -> ManagedResource:
    """Cluster-wide client endpoint, reachable from outside through a node port."""
    return ManagedResource(
        api_version="v1",
        kind="Service",
        name=spec.name,
        namespace=spec.namespace,
        body={
            "apiVersion": "v1",
            "kind": "Service",
            "metadata": child_metadata(spec.name, spec.parent),
            "spec": {
                "type": "NodePort",
                "ports": [
                    {"name": "zk", "port": CLIENT_PORT, "protocol": "TCP"},
                ],
                "selector": pod_labels(spec),
            },
        },
    )


def server_pod_spec(config_map_name: str) -> Dict[str, Any]:
    decide_myid = {
        "name": "decide-myid",
        "image": "alpine",
        "args": ["sh", "-c", DECIDE_MYID_SCRIPT],
        "env": [
            {
                "name": "POD_NAME",
                "valueFrom": {
                    "fieldRef": {
                        "apiVersion": "v1",
                        "fieldPath": "metadata.name",
                    }
                },
            },
        ],
        "volumeMounts": [
            {"name": "data", "mountPath": "/data"},
        ],
    }
    zookeeper = {
        "name": "zookeeper",
        "image": ZOOKEEPER_IMAGE,
        "args": list(SERVER_ROLE.args),
        "ports": container_ports(SERVER_ROLE),
        "volumeMounts": [
            {"name": "data", "mountPath": "/data"},
            {"name": "config", "mountPath": "/config", "readOnly": True},
        ],
        "readinessProbe": {
            "exec": {
                "command": ["sh", "-c", READINESS_PROBE_SCRIPT],
            },
            "periodSeconds": 1,
        },
    }
    return {
        "initContainers": [decide_myid],
        "containers": [zookeeper],
        "volumes": [
            {
                "name": "config",
                "configMap": {
                    "name": config_map_name,
                },
            },
        ],
    }


def build_zookeeper_resources(spec: ZookeeperClusterSpec) -> List[ManagedResource]:
    """
    Build every child of a ZooKeeper ensemble in application order.

    Returns:
        The zoo.cfg config map, the client service, the headless peer service
        and the server stateful set

    Raises:
        AddressResolutionFailure: if the server addresses cannot be derived
    """
    servers = resolve_identities(spec.name, spec.namespace, SERVER_ROLE.name, spec.replicas)
    servers_name = role_group_name(spec.name, SERVER_ROLE.name)
    labels = pod_labels(spec)

    return [
        config_map(servers_name, spec.parent, {"zoo.cfg": zoo_cfg(servers)}),
        client_service(spec),
        headless_service(servers_name, spec.parent, SERVER_ROLE, labels),
        stateful_set(
            servers_name,
            spec.parent,
            replicas=0 if spec.stopped else spec.server_count,
            labels=labels,
            pod_spec=server_pod_spec(servers_name),
            storage_size=spec.storage_size or DEFAULT_STORAGE_SIZE,
        ),
    ]


def desired_zookeeper_resources(zk: Mapping[str, Any]) -> List[ManagedResource]:
    return build_zookeeper_resources(ZookeeperClusterSpec.from_custom_object(zk))


def reconcile_zookeeper(
    zk: Mapping[str, Any],
    transport: ApplyTransport,
    field_manager: str = ZOOKEEPER_FIELD_MANAGER,
) -> NextAction:
    """
    Converge the children of a ZookeeperCluster to their desired state.

    Raises:
        ReconcileError: on the first failure
    """
    resources = desired_zookeeper_resources(zk)
    apply_owned_resources(resources, transport, field_manager)
    logger.info(
        "reconciled ZookeeperCluster %s/%s (%d resources)",
        resources[0].namespace, zk["metadata"]["name"], len(resources),
    )
    return NextAction()
