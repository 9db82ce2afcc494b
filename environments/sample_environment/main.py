import os
import shutil
import sys

# Set config path before imports
current_dir = os.path.dirname(os.path.abspath(__file__))
config_path = os.path.join(current_dir, 'config_env.yaml')
os.environ['CONFIG_YAML_PATH'] = config_path

# Add the repository root to the Python path to enable absolute imports
project_root = os.path.dirname(os.path.dirname(current_dir))
sys.path.insert(0, project_root)

from components.base.apply import ManifestDirectoryTransport
from components.base.component_types import ParentRef
from components.base.constants import (
    CONFIG,
    GENERATED_MANIFESTS_DIR,
    HDFS_FIELD_MANAGER,
    ZOOKEEPER_FIELD_MANAGER,
)
from components.base.generate_skaffolds import generate_skaffolds, render_cluster
from components.base.identity import resolve_identities
from components.base.utils import config_map
from components.hdfs_cluster.constants import HDFS_API_VERSION, HDFS_KIND, ZOOKEEPER_BROKERS_KEY
from components.hdfs_cluster.main import desired_hdfs_resources
from components.zookeeper_cluster.constants import CLIENT_PORT, ZOOKEEPER_API_VERSION, ZOOKEEPER_KIND
from components.zookeeper_cluster.main import desired_zookeeper_resources


def zookeeper_brokers(zk_config: dict) -> str:
    servers = resolve_identities(zk_config['name'], zk_config['namespace'], "server", zk_config.get('replicas'))
    return ",".join(server.address(CLIENT_PORT) for server in servers)


# ===== MAIN GENERATION FUNCTION =====

def generate_all_manifests():
    """Render the sample HDFS cluster and its ZooKeeper ensemble"""
    shutil.rmtree(GENERATED_MANIFESTS_DIR, ignore_errors=True)
    os.makedirs(GENERATED_MANIFESTS_DIR, exist_ok=True)

    transport = ManifestDirectoryTransport(GENERATED_MANIFESTS_DIR)

    # ZooKeeper ensemble
    zk_config = CONFIG['components']['zookeeper']
    zookeeper_cluster = {
        "apiVersion": ZOOKEEPER_API_VERSION,
        "kind": ZOOKEEPER_KIND,
        "metadata": {
            "name": zk_config['name'],
            "namespace": zk_config['namespace'],
        },
        "spec": {
            "replicas": zk_config.get('replicas'),
        },
    }
    zookeeper = render_cluster(
        slug=zk_config['name'],
        namespace=zk_config['namespace'],
        resources=desired_zookeeper_resources(zookeeper_cluster),
        transport=transport,
        field_manager=ZOOKEEPER_FIELD_MANAGER,
    )

    # HDFS
    hdfs_config = CONFIG['components']['hdfs']
    hdfs_cluster = {
        "apiVersion": HDFS_API_VERSION,
        "kind": HDFS_KIND,
        "metadata": {
            "name": hdfs_config['name'],
            "namespace": hdfs_config['namespace'],
        },
        "spec": {
            "namenodeReplicas": hdfs_config.get('namenode_replicas'),
            "datanodeReplicas": hdfs_config.get('datanode_replicas'),
            "journalnodeReplicas": hdfs_config.get('journalnode_replicas'),
            "kerberos": hdfs_config.get('kerberos', {}),
            "zookeeperConfigMapName": hdfs_config.get('zookeeper_config_map'),
            "storage": hdfs_config.get('storage', {}),
        },
    }
    hdfs_resources = desired_hdfs_resources(hdfs_cluster)

    # Failover controllers find the ensemble through this ConfigMap
    if hdfs_config.get('zookeeper_config_map'):
        hdfs_parent = ParentRef(
            api_version=HDFS_API_VERSION,
            kind=HDFS_KIND,
            name=hdfs_config['name'],
            namespace=hdfs_config['namespace'],
            uid="",
        )
        hdfs_resources.insert(0, config_map(
            hdfs_config['zookeeper_config_map'],
            hdfs_parent,
            {ZOOKEEPER_BROKERS_KEY: zookeeper_brokers(zk_config)},
        ))

    hdfs = render_cluster(
        slug=hdfs_config['name'],
        namespace=hdfs_config['namespace'],
        resources=hdfs_resources,
        transport=transport,
        field_manager=HDFS_FIELD_MANAGER,
    )

    generate_skaffolds(
        components=[zookeeper, hdfs],
        output_dir=GENERATED_MANIFESTS_DIR,
    )


if __name__ == '__main__':
    generate_all_manifests()
