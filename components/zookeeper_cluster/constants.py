# ZooKeeper ensemble constants
from components.base.component_types import RoleDefinition, ServicePortDef

ZOOKEEPER_GROUP = "zookeeper.stackable.tech"
ZOOKEEPER_VERSION = "v1alpha1"
ZOOKEEPER_API_VERSION = f"{ZOOKEEPER_GROUP}/{ZOOKEEPER_VERSION}"
ZOOKEEPER_KIND = "ZookeeperCluster"
ZOOKEEPER_PLURAL = "zookeeperclusters"

CLIENT_PORT = 2181
LEADER_PORT = 2888
ELECTION_PORT = 3888

SERVER_ROLE = RoleDefinition(
    name="server",
    container_ports=(("zk", CLIENT_PORT), ("zk-leader", LEADER_PORT), ("zk-election", ELECTION_PORT)),
    service_ports=(ServicePortDef("zk", CLIENT_PORT),),
    publish_not_ready_addresses=True,
    args=("bin/zkServer.sh", "start-foreground", "/config/zoo.cfg"),
)

ZOO_CFG_HEADER = (
    "tickTime=2000",
    "initLimit=10",
    "syncLimit=5",
    "dataDir=/data",
    f"clientPort={CLIENT_PORT}",
)

# myid must be 1-based; the pod ordinal is the suffix of the pod name
DECIDE_MYID_SCRIPT = "expr 1 + $(echo $POD_NAME | sed 's/.*-//') > /data/myid"
READINESS_PROBE_SCRIPT = f"exec 3<>/dev/tcp/localhost/{CLIENT_PORT} && echo srvr >&3 && grep '^Mode: ' <&3"
