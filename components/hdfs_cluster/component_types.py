from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, TypedDict

from components.base.component_types import ParentRef, ReplicaIdentity
from components.base.errors import MissingNamespace
from components.base.identity import replica_count
from components.base.utils import object_ref
from components.hdfs_cluster.constants import HDFS_API_VERSION, HDFS_KIND


class KerberosConfig(TypedDict, total=False):
    """
    Kerberos settings of an HDFS cluster.

    Attributes:
        realm: Kerberos realm; enables the Kerberos branch when set
        kdc: Address of the key distribution center
    """
    realm: Optional[str]
    kdc: Optional[str]


class HdfsClusterSpecConfig(TypedDict, total=False):
    """Shape of the spec section of an HdfsCluster custom object."""
    namenodeReplicas: Optional[int]
    datanodeReplicas: Optional[int]
    journalnodeReplicas: Optional[int]
    kerberos: KerberosConfig
    zookeeperConfigMapName: Optional[str]
    storage: Dict[str, str]


@dataclass(frozen=True)
class HdfsClusterSpec:
    """
    Validated view of an HdfsCluster custom object.

    Attributes:
        parent: Identity of the custom object, used for owner references
        namenode_replicas: Namenode count, None when unset
        datanode_replicas: Datanode count, None when unset
        journalnode_replicas: Journalnode count, None when unset
        kerberos_realm: Kerberos realm, None when Kerberos is disabled
        kerberos_kdc: KDC address
        zookeeper_config_map: ConfigMap with the ZOOKEEPER_BROKERS key for
            automatic failover
        storage: Per-role storage size overrides
    """
    parent: ParentRef
    namenode_replicas: Optional[int] = None
    datanode_replicas: Optional[int] = None
    journalnode_replicas: Optional[int] = None
    kerberos_realm: Optional[str] = None
    kerberos_kdc: Optional[str] = None
    zookeeper_config_map: Optional[str] = None
    storage: Dict[str, str] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.parent.name

    @property
    def namespace(self) -> str:
        return self.parent.namespace

    @property
    def kerberos_enabled(self) -> bool:
        return bool(self.kerberos_realm)

    @property
    def automatic_failover(self) -> bool:
        return bool(self.zookeeper_config_map)

    def replicas(self, role: str) -> int:
        """Replica count of a role; unset counts default to 1."""
        return replica_count(getattr(self, f"{role}_replicas"))

    @classmethod
    def from_custom_object(cls, obj: Mapping[str, Any]) -> "HdfsClusterSpec":
        """
        Build a spec from an HdfsCluster object as returned by the API server.

        Raises:
            MissingNamespace: if the object has no namespace
        """
        metadata = obj.get("metadata") or {}
        namespace = metadata.get("namespace")
        if not namespace:
            raise MissingNamespace(object_ref({"kind": HDFS_KIND, "metadata": metadata}))

        spec: HdfsClusterSpecConfig = obj.get("spec") or {}
        kerberos: KerberosConfig = spec.get("kerberos") or {}
        return cls(
            parent=ParentRef(
                api_version=obj.get("apiVersion", HDFS_API_VERSION),
                kind=obj.get("kind", HDFS_KIND),
                name=metadata.get("name", ""),
                namespace=namespace,
                uid=metadata.get("uid", ""),
            ),
            namenode_replicas=spec.get("namenodeReplicas"),
            datanode_replicas=spec.get("datanodeReplicas"),
            journalnode_replicas=spec.get("journalnodeReplicas"),
            kerberos_realm=kerberos.get("realm"),
            kerberos_kdc=kerberos.get("kdc"),
            zookeeper_config_map=spec.get("zookeeperConfigMapName"),
            storage=dict(spec.get("storage") or {}),
        )


@dataclass(frozen=True)
class NameserviceTopology:
    nameservice_id: str
    namenode_ids: List[str]
    rpc_addresses: Dict[str, str]
    http_addresses: Dict[str, str]


@dataclass(frozen=True)
class JournalQuorum:
    """Journalnodes holding the shared edit log of one nameservice."""
    nameservice_id: str
    addresses: List[str]

    @property
    def uri(self) -> str:
        return f"qjournal://{';'.join(self.addresses)}/{self.nameservice_id}"


@dataclass(frozen=True)
class KerberosPrincipal:
    short_name: str
    principal: str
    keytab_path: str


@dataclass(frozen=True)
class KerberosPrincipalSet:
    realm: str
    anchor_fqdn: str
    principals: Dict[str, KerberosPrincipal]


@dataclass(frozen=True)
class HdfsTopology:
    """Everything derived from the replica counts of a cluster."""
    identities: Dict[str, List[ReplicaIdentity]]
    nameservice: NameserviceTopology
    journal_quorum: JournalQuorum
    principals: KerberosPrincipalSet
