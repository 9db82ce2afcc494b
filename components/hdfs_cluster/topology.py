"""
HDFS Topology Planning

Combines the per-role replica identities of a cluster into the cross-role
values every node must agree on: the nameservice, the namenode HA address
maps, the journal quorum URI and the Kerberos principals.
"""
from typing import List, Tuple

from components.base.component_types import ReplicaIdentity
from components.base.identity import resolve_identities, role_group_fqdn
from components.hdfs_cluster.component_types import (
    HdfsClusterSpec,
    HdfsTopology,
    JournalQuorum,
    KerberosPrincipal,
    KerberosPrincipalSet,
    NameserviceTopology,
)
from components.hdfs_cluster.constants import (
    DATA_DIR,
    DEFAULT_KERBEROS_REALM,
    FAILOVER_PROXY_PROVIDER,
    FENCING_METHODS,
    HDFS_ROLES,
    JOURNALNODE_RPC_PORT,
    KERBEROS_DIR,
    NAMENODE_HTTP_PORT,
    NAMENODE_RPC_PORT,
    ZOOKEEPER_BROKERS_KEY,
)


def namenode_id(ordinal: int) -> str:
    return f"name-{ordinal}"


def plan_nameservice(nameservice_id: str, namenodes: List[ReplicaIdentity]) -> NameserviceTopology:
    namenode_ids = [namenode_id(identity.ordinal) for identity in namenodes]
    return NameserviceTopology(
        nameservice_id=nameservice_id,
        namenode_ids=namenode_ids,
        rpc_addresses={
            namenode_id(identity.ordinal): identity.address(NAMENODE_RPC_PORT)
            for identity in namenodes
        },
        http_addresses={
            namenode_id(identity.ordinal): identity.address(NAMENODE_HTTP_PORT)
            for identity in namenodes
        },
    )


def plan_journal_quorum(nameservice_id: str, journalnodes: List[ReplicaIdentity]) -> JournalQuorum:
    return JournalQuorum(
        nameservice_id=nameservice_id,
        addresses=[identity.address(JOURNALNODE_RPC_PORT) for identity in journalnodes],
    )


def plan_principals(spec: HdfsClusterSpec, anchor_fqdn: str) -> KerberosPrincipalSet:
    """
    Derive one service principal and keytab per role.

    Every role's principal uses the namenode service fqdn as its host part,
    not the role's own replica addresses.
    """
    realm = spec.kerberos_realm or DEFAULT_KERBEROS_REALM
    principals = {}
    for role in HDFS_ROLES.values():
        short_name = role.kerberos_short_name
        principals[role.name] = KerberosPrincipal(
            short_name=short_name,
            principal=f"{short_name}/{anchor_fqdn}@{realm}",
            keytab_path=f"{KERBEROS_DIR}/{short_name}.service.keytab",
        )
    return KerberosPrincipalSet(realm=realm, anchor_fqdn=anchor_fqdn, principals=principals)


def plan_topology(spec: HdfsClusterSpec) -> HdfsTopology:
    """
    Plan the topology of an HDFS cluster from its replica counts.

    Args:
        spec: Validated cluster spec

    Returns:
        HdfsTopology with identities for every role

    Raises:
        AddressResolutionFailure: if a role's addresses cannot be derived
    """
    identities = {
        role: resolve_identities(spec.name, spec.namespace, role, spec.replicas(role))
        for role in HDFS_ROLES
    }
    nameservice_id = spec.name
    anchor_fqdn = role_group_fqdn(spec.name, "namenode", spec.namespace)

    return HdfsTopology(
        identities=identities,
        nameservice=plan_nameservice(nameservice_id, identities["namenode"]),
        journal_quorum=plan_journal_quorum(nameservice_id, identities["journalnode"]),
        principals=plan_principals(spec, anchor_fqdn),
    )


def hdfs_site_properties(spec: HdfsClusterSpec, topology: HdfsTopology) -> List[Tuple[str, str]]:
    """
    Key/value pairs of hdfs-site.xml, in rendering order.
    """
    nameservice = topology.nameservice
    nameservice_id = nameservice.nameservice_id
    automatic_failover = spec.automatic_failover

    properties = [
        ("dfs.namenode.name.dir", DATA_DIR),
        ("dfs.datanode.data.dir", DATA_DIR),
        ("dfs.journalnode.edits.dir", DATA_DIR),
        ("dfs.nameservices", nameservice_id),
        (f"dfs.ha.namenodes.{nameservice_id}", ", ".join(nameservice.namenode_ids)),
        ("dfs.namenode.shared.edits.dir", topology.journal_quorum.uri),
        (f"dfs.client.failover.proxy.provider.{nameservice_id}", FAILOVER_PROXY_PROVIDER),
        ("dfs.ha.fencing.methods", FENCING_METHODS),
        ("dfs.ha.nn.not-become-active-in-safemode", "true"),
        ("dfs.ha.automatic-failover.enabled", "true" if automatic_failover else "false"),
    ]
    if automatic_failover:
        properties.append(("ha.zookeeper.quorum", "${env.%s}" % ZOOKEEPER_BROKERS_KEY))
    properties += [
        ("dfs.block.access.token.enable", "true"),
        # Privileged ports mean nothing inside a pod network
        ("ignore.secure.ports.for.testing", "true"),
    ]

    for role in ("journalnode", "namenode", "datanode"):
        principal = topology.principals.principals[role]
        properties.append((f"dfs.{role}.kerberos.principal", principal.principal))
        properties.append((f"dfs.{role}.keytab.file", principal.keytab_path))

    for logical_id in nameservice.namenode_ids:
        properties.append((
            f"dfs.namenode.rpc-address.{nameservice_id}.{logical_id}",
            nameservice.rpc_addresses[logical_id],
        ))
        properties.append((
            f"dfs.namenode.http-address.{nameservice_id}.{logical_id}",
            nameservice.http_addresses[logical_id],
        ))
    return properties


def core_site_properties(spec: HdfsClusterSpec) -> List[Tuple[str, str]]:
    return [
        ("fs.defaultFS", f"hdfs://{spec.name}/"),
        ("hadoop.security.authentication", "kerberos" if spec.kerberos_enabled else "simple"),
        ("hadoop.security.authorization", "false"),
    ]
