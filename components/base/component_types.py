from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union


@dataclass(frozen=True)
class ParentRef:
    """
    Identity of the custom object that owns every generated resource.

    Attributes:
        api_version: API version of the parent (e.g. hdfs.stackable.tech/v1alpha1)
        kind: Kind of the parent (e.g. HdfsCluster)
        name: Name of the parent object
        namespace: Namespace inherited by every child
        uid: UID of the parent, required for owner references
    """
    api_version: str
    kind: str
    name: str
    namespace: str
    uid: str

    @property
    def as_owner_reference(self) -> Dict[str, Any]:
        """
        Returns this parent as a controller owner reference for child metadata.
        """
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "name": self.name,
            "uid": self.uid,
            "controller": True,
        }


@dataclass(frozen=True)
class ReplicaIdentity:
    """
    Stable network identity of one replica of a role.

    Attributes:
        role: Role name (namenode, datanode, journalnode, server)
        ordinal: Replica ordinal, 0..n-1
        pod_name: Name of the pod backing the replica
        fqdn: Per-replica DNS name behind the role's headless service
        group_name: Role-level service name shared by all replicas
        group_fqdn: DNS name of the role-level service
    """
    role: str
    ordinal: int
    pod_name: str
    fqdn: str
    group_name: str
    group_fqdn: str

    def address(self, port: int) -> str:
        return f"{self.fqdn}:{port}"


@dataclass(frozen=True)
class ServicePortDef:
    name: str
    port: int
    # Named container port to forward to; defaults to the numeric port
    target_port: Optional[Union[int, str]] = None


@dataclass(frozen=True)
class RoleDefinition:
    """
    Declarative description of one cluster role.

    Attributes:
        name: Role name, also used in resource and pod names
        container_ports: (name, port) pairs exposed by the main container
        service_ports: Ports exposed on the role's headless service
        publish_not_ready_addresses: Whether peers must resolve before readiness
        args: Main process arguments
        kerberos_short_name: Service short name used in Kerberos principals
        storage_size: Default size of the data volume claim
    """
    name: str
    container_ports: Tuple[Tuple[str, int], ...]
    service_ports: Tuple[ServicePortDef, ...]
    publish_not_ready_addresses: bool
    args: Tuple[str, ...]
    kerberos_short_name: Optional[str] = None
    storage_size: str = "1Gi"


@dataclass
class ManagedResource:
    """
    Desired state of one generated child object.

    Attributes:
        api_version: API version of the child
        kind: Kind of the child (ConfigMap, Service, StatefulSet)
        name: Name of the child
        namespace: Namespace inherited from the parent
        body: Complete manifest, owner reference included
    """
    api_version: str
    kind: str
    name: str
    namespace: str
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def manifest_file_name(self) -> str:
        return f"{self.kind.lower()}-{self.name}.yaml"


@dataclass(frozen=True)
class NextAction:
    """What the scheduler should do after a reconciliation attempt."""
    requeue_after: Optional[float] = None


@dataclass
class Component:
    """
    Result of rendering a cluster to disk.

    Attributes:
        slug: Name of the rendered cluster
        namespace: Namespace of the rendered cluster
        dir_name: Directory name where the manifests are generated
        manifests: Manifest paths relative to dir_name, in apply order
    """
    slug: str
    namespace: str
    dir_name: str
    manifests: List[str] = field(default_factory=list)

    @property
    def as_skaffold_dependency(self) -> Dict[str, str]:
        """
        Returns this component as a dependency object for skaffold.
        """
        return {"path": f"{self.dir_name}/skaffold.yaml"}
