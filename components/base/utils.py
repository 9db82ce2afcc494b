from typing import Any, Dict, List

from components.base.component_types import ManagedResource, ParentRef, RoleDefinition


def object_ref(obj: Dict[str, Any]) -> str:
    """Human readable reference to a Kubernetes object, e.g. HdfsCluster/hdfs1.ns"""
    metadata = obj.get("metadata") or {}
    kind = obj.get("kind", "object")
    name = metadata.get("name", "<unnamed>")
    namespace = metadata.get("namespace")
    if namespace:
        return f"{kind}/{name}.{namespace}"
    return f"{kind}/{name}"


def child_metadata(name: str, parent: ParentRef) -> Dict[str, Any]:
    """Metadata shared by every generated child: name, parent namespace and owner reference."""
    metadata = {
        "name": name,
        "namespace": parent.namespace,
    }
    # Objects rendered offline have no uid yet and cannot be referenced
    if parent.uid:
        metadata["ownerReferences"] = [parent.as_owner_reference]
    return metadata


def config_map(name: str, parent: ParentRef, data: Dict[str, str]) -> ManagedResource:
    return ManagedResource(
        api_version="v1",
        kind="ConfigMap",
        name=name,
        namespace=parent.namespace,
        body={
            "apiVersion": "v1",
            "kind": "ConfigMap",
            "metadata": child_metadata(name, parent),
            "data": dict(data),
        },
    )


def headless_service(
    name: str,
    parent: ParentRef,
    role: RoleDefinition,
    selector: Dict[str, str],
) -> ManagedResource:
    """
    Create the headless peer service of a role.

    Args:
        name: Service name, also the stateful set's serviceName
        parent: Owning cluster
        role: Role whose service ports are exposed
        selector: Pod labels of the role

    Returns:
        ManagedResource for a clusterIP-less service
    """
    ports = []
    for service_port in role.service_ports:
        port = {
            "name": service_port.name,
            "port": service_port.port,
            "protocol": "TCP",
        }
        if service_port.target_port is not None:
            port["targetPort"] = service_port.target_port
        ports.append(port)

    spec = {
        "clusterIP": "None",
        "ports": ports,
        "selector": dict(selector),
    }
    if role.publish_not_ready_addresses:
        spec["publishNotReadyAddresses"] = True

    return ManagedResource(
        api_version="v1",
        kind="Service",
        name=name,
        namespace=parent.namespace,
        body={
            "apiVersion": "v1",
            "kind": "Service",
            "metadata": child_metadata(name, parent),
            "spec": spec,
        },
    )


def container_ports(role: RoleDefinition) -> List[Dict[str, Any]]:
    return [
        {"name": port_name, "containerPort": port, "protocol": "TCP"}
        for port_name, port in role.container_ports
    ]


def local_disk_claim(name: str, size: str) -> Dict[str, Any]:
    return {
        "metadata": {
            "name": name,
        },
        "spec": {
            "accessModes": ["ReadWriteOnce"],
            "resources": {
                "requests": {
                    "storage": size,
                }
            },
        },
    }


def stateful_set(
    name: str,
    parent: ParentRef,
    replicas: int,
    labels: Dict[str, str],
    pod_spec: Dict[str, Any],
    storage_size: str,
) -> ManagedResource:
    """
    Create an ordered, parallel-startup stateful set with one data volume claim.

    Args:
        name: Stateful set name, also used as its governing service name
        parent: Owning cluster
        replicas: Desired replica count
        labels: Pod labels, also used as the selector
        pod_spec: Pod spec of the template
        storage_size: Requested size of the data volume claim

    Returns:
        ManagedResource for the stateful set
    """
    return ManagedResource(
        api_version="apps/v1",
        kind="StatefulSet",
        name=name,
        namespace=parent.namespace,
        body={
            "apiVersion": "apps/v1",
            "kind": "StatefulSet",
            "metadata": child_metadata(name, parent),
            "spec": {
                "podManagementPolicy": "Parallel",
                "replicas": replicas,
                "selector": {
                    "matchLabels": dict(labels),
                },
                "serviceName": name,
                "template": {
                    "metadata": {
                        "labels": dict(labels),
                    },
                    "spec": pod_spec,
                },
                "volumeClaimTemplates": [
                    local_disk_claim("data", storage_size),
                ],
            },
        },
    )
