"""
Replica Identity Resolution

Derives the stable DNS identity of every replica of a role. Replicas are pods
of a stateful set governed by a headless service of the same name, so the
address of replica i is a pure function of (cluster, role, i, namespace).
"""
from typing import List, Optional

from components.base.component_types import ReplicaIdentity
from components.base.constants import CLUSTER_DOMAIN
from components.base.errors import AddressResolutionFailure


def replica_count(replicas: Optional[int]) -> int:
    """Absent replica counts mean one replica, never zero."""
    if replicas is None:
        return 1
    return replicas


def role_group_name(cluster_name: str, role: str) -> str:
    return f"{cluster_name}-{role}"


def role_group_fqdn(cluster_name: str, role: str, namespace: str, cluster_domain: str = CLUSTER_DOMAIN) -> str:
    return f"{role_group_name(cluster_name, role)}.{namespace}.{cluster_domain}"


def resolve_identities(
    cluster_name: Optional[str],
    namespace: Optional[str],
    role: str,
    replicas: Optional[int] = None,
    cluster_domain: str = CLUSTER_DOMAIN,
) -> List[ReplicaIdentity]:
    """
    Resolve the identities of all replicas of a role.

    Args:
        cluster_name: Name of the parent cluster object
        namespace: Namespace of the parent cluster object
        role: Role name
        replicas: Replica count, 1 when unset
        cluster_domain: DNS suffix of in-cluster services

    Returns:
        Identities for ordinals 0..replicas-1, in ordinal order

    Raises:
        AddressResolutionFailure: if the cluster name or namespace is missing,
            or the replica count is negative
    """
    if not cluster_name:
        raise AddressResolutionFailure(role, "cluster has no name")
    if not namespace:
        raise AddressResolutionFailure(role, "cluster has no namespace")
    count = replica_count(replicas)
    if count < 0:
        raise AddressResolutionFailure(role, f"negative replica count {count}")

    group_name = role_group_name(cluster_name, role)
    group_fqdn = role_group_fqdn(cluster_name, role, namespace, cluster_domain)
    identities = []
    for ordinal in range(count):
        pod_name = f"{group_name}-{ordinal}"
        identities.append(ReplicaIdentity(
            role=role,
            ordinal=ordinal,
            pod_name=pod_name,
            fqdn=f"{pod_name}.{group_fqdn}",
            group_name=group_name,
            group_fqdn=group_fqdn,
        ))
    return identities
