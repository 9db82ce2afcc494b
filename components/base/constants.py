import os
import yaml

# Optional YAML config; its "env" section is exported into the process environment
CONFIG_YAML_PATH = os.environ.get('CONFIG_YAML_PATH', '')
if CONFIG_YAML_PATH:
    CONFIG_YAML_PATH = os.path.abspath(CONFIG_YAML_PATH)

CONFIG = {}
if CONFIG_YAML_PATH and os.path.isfile(CONFIG_YAML_PATH):
    with open(CONFIG_YAML_PATH, "r") as file:
        CONFIG = yaml.load(file, Loader=yaml.FullLoader) or {}

CONFIG_YAML_DIR = os.path.dirname(CONFIG_YAML_PATH) if CONFIG_YAML_PATH else os.getcwd()

ABSOLUTE_PATH_ENV_VARIABLES = [
    'KUBECONFIG',
    'GENERATED_MANIFESTS_DIR',
]

# Explicitly set environment variables win over the config file
if "env" in CONFIG:
    env_vars = CONFIG["env"] or {}
    for key, value in env_vars.items():
        if os.environ.get(key) is not None:
            continue
        if key in ABSOLUTE_PATH_ENV_VARIABLES and value:
            os.environ[key] = os.path.abspath(os.path.join(CONFIG_YAML_DIR, str(value)))
        else:
            os.environ[key] = str(value)

# Owned upsert originators
HDFS_FIELD_MANAGER = os.environ.get('HDFS_FIELD_MANAGER', 'hdfs.stackable.tech/hdfscluster')
ZOOKEEPER_FIELD_MANAGER = os.environ.get('ZOOKEEPER_FIELD_MANAGER', 'zookeeper.stackable.tech/zookeepercluster')
# Annotation recording the field manager on offline manifests
FIELD_MANAGER_ANNOTATION = "stackable.tech/field-manager"

# Scheduling
REQUEUE_AFTER_SECONDS = float(os.environ.get('REQUEUE_AFTER_SECONDS', '5'))
RESYNC_INTERVAL_SECONDS = float(os.environ.get('RESYNC_INTERVAL_SECONDS', '60'))
APPLY_TIMEOUT_SECONDS = float(os.environ.get('APPLY_TIMEOUT_SECONDS', '30'))

# Addressing
CLUSTER_DOMAIN = os.environ.get('CLUSTER_DOMAIN', 'svc.cluster.local')

# Images
HADOOP_IMAGE = os.environ.get('HADOOP_IMAGE', 'teozkr/hadoop:3.3.1')
ZOOKEEPER_IMAGE = os.environ.get('ZOOKEEPER_IMAGE', 'docker.stackable.tech/stackable/zookeeper:3.5.8-stackable0')

# Offline rendering
GENERATED_MANIFESTS_DIR = os.environ.get('GENERATED_MANIFESTS_DIR', os.path.join(os.getcwd(), 'generated'))

DEFAULT_STORAGE_SIZE = "1Gi"


# All constants defined in this file can be exported as ENV variables in bash scripts
if __name__ == '__main__':
    export_variables_bash_script = ""
    for key, value in locals().copy().items():
        if key.isupper():
            export_variables_bash_script += f'export {key}="{value}"\n'

    print(export_variables_bash_script)
