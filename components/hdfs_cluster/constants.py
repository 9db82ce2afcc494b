# HDFS cluster constants
from components.base.component_types import RoleDefinition, ServicePortDef

HDFS_GROUP = "hdfs.stackable.tech"
HDFS_VERSION = "v1alpha1"
HDFS_API_VERSION = f"{HDFS_GROUP}/{HDFS_VERSION}"
HDFS_KIND = "HdfsCluster"
HDFS_PLURAL = "hdfsclusters"

HADOOP_HOME = "/opt/hadoop"
HDFS_BIN = f"{HADOOP_HOME}/bin/hdfs"
CONFIG_DIR = "/config"
DATA_DIR = "/data"
KERBEROS_DIR = "/kerberos"

NAMENODE_RPC_PORT = 8020
NAMENODE_HTTP_PORT = 9870
JOURNALNODE_RPC_PORT = 8485

DEFAULT_KERBEROS_REALM = "LOCAL"
FAILOVER_PROXY_PROVIDER = "org.apache.hadoop.hdfs.server.namenode.ha.ConfiguredFailoverProxyProvider"
# Lease-based failover is trusted; fencing always succeeds
FENCING_METHODS = "shell(/bin/true)"
ZOOKEEPER_BROKERS_KEY = "ZOOKEEPER_BROKERS"

# Roles in application order: dependencies before dependents
HDFS_ROLES = {
    "journalnode": RoleDefinition(
        name="journalnode",
        container_ports=(("ipc", JOURNALNODE_RPC_PORT),),
        service_ports=(ServicePortDef("ipc", JOURNALNODE_RPC_PORT),),
        publish_not_ready_addresses=True,
        args=(HDFS_BIN, "journalnode"),
        kerberos_short_name="jn",
    ),
    "namenode": RoleDefinition(
        name="namenode",
        container_ports=(("ipc", NAMENODE_RPC_PORT), ("http", NAMENODE_HTTP_PORT)),
        service_ports=(
            ServicePortDef("ipc", NAMENODE_RPC_PORT),
            ServicePortDef("http", 80, target_port="http"),
        ),
        publish_not_ready_addresses=True,
        args=(HDFS_BIN, "namenode"),
        kerberos_short_name="nn",
    ),
    "datanode": RoleDefinition(
        name="datanode",
        container_ports=(("ipc", 9867), ("data", 9866), ("http", 9864)),
        service_ports=(
            ServicePortDef("ipc", 9867),
            ServicePortDef("http", 80, target_port="http"),
        ),
        publish_not_ready_addresses=False,
        args=(HDFS_BIN, "datanode"),
        kerberos_short_name="dn",
    ),
}

# Standby bootstrap, else fresh format, else carry on; then register with the
# failover controller. Every step tolerates an already initialized node.
NAMENODE_BOOTSTRAP_SCRIPT = (
    f"{HDFS_BIN} namenode -bootstrapStandby -nonInteractive"
    f" || {HDFS_BIN} namenode -format -nonInteractive"
    " || true\n"
    f"{HDFS_BIN} zkfc -formatZK -nonInteractive || true"
)

LOG4J_PROPERTIES_FILE = "log4j.properties"
