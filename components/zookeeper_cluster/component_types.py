from dataclasses import dataclass
from typing import Any, Mapping, Optional

from components.base.component_types import ParentRef
from components.base.errors import MissingNamespace
from components.base.identity import replica_count
from components.base.utils import object_ref
from components.zookeeper_cluster.constants import ZOOKEEPER_API_VERSION, ZOOKEEPER_KIND


@dataclass(frozen=True)
class ZookeeperClusterSpec:
    """
    Validated view of a ZookeeperCluster custom object.

    Attributes:
        parent: Identity of the custom object, used for owner references
        replicas: Ensemble size, None when unset
        stopped: Scale the servers to zero while keeping the ensemble config
        storage_size: Data volume size override
    """
    parent: ParentRef
    replicas: Optional[int] = None
    stopped: bool = False
    storage_size: Optional[str] = None

    @property
    def name(self) -> str:
        return self.parent.name

    @property
    def namespace(self) -> str:
        return self.parent.namespace

    @property
    def server_count(self) -> int:
        return replica_count(self.replicas)

    @classmethod
    def from_custom_object(cls, obj: Mapping[str, Any]) -> "ZookeeperClusterSpec":
        metadata = obj.get("metadata") or {}
        namespace = metadata.get("namespace")
        if not namespace:
            raise MissingNamespace(object_ref({"kind": ZOOKEEPER_KIND, "metadata": metadata}))

        spec = obj.get("spec") or {}
        return cls(
            parent=ParentRef(
                api_version=obj.get("apiVersion", ZOOKEEPER_API_VERSION),
                kind=obj.get("kind", ZOOKEEPER_KIND),
                name=metadata.get("name", ""),
                namespace=namespace,
                uid=metadata.get("uid", ""),
            ),
            replicas=spec.get("replicas"),
            stopped=bool(spec.get("stopped", False)),
            storage_size=spec.get("storage"),
        )
