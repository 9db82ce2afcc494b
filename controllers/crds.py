"""
CustomResourceDefinitions of the managed cluster kinds.
"""
from typing import Any, Dict, List

from components.hdfs_cluster.constants import HDFS_GROUP, HDFS_KIND, HDFS_PLURAL, HDFS_VERSION
from components.zookeeper_cluster.constants import (
    ZOOKEEPER_GROUP,
    ZOOKEEPER_KIND,
    ZOOKEEPER_PLURAL,
    ZOOKEEPER_VERSION,
)

CONDITIONS_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "required": ["type", "status"],
        "properties": {
            "type": {"type": "string"},
            "status": {"type": "string"},
            "reason": {"type": "string"},
            "message": {"type": "string"},
            "lastTransitionTime": {"type": "string", "format": "date-time"},
            "observedGeneration": {"type": "integer"},
        },
    },
}

OPTIONAL_REPLICAS = {"type": "integer", "minimum": 0, "nullable": True}


def custom_resource_definition(
    group: str,
    version: str,
    kind: str,
    plural: str,
    short_name: str,
    spec_properties: Dict[str, Any],
) -> Dict[str, Any]:
    return {
        "apiVersion": "apiextensions.k8s.io/v1",
        "kind": "CustomResourceDefinition",
        "metadata": {
            "name": f"{plural}.{group}",
        },
        "spec": {
            "group": group,
            "names": {
                "kind": kind,
                "plural": plural,
                "singular": kind.lower(),
                "shortNames": [short_name],
            },
            "scope": "Namespaced",
            "versions": [
                {
                    "name": version,
                    "served": True,
                    "storage": True,
                    "subresources": {
                        "status": {},
                    },
                    "schema": {
                        "openAPIV3Schema": {
                            "type": "object",
                            "required": ["spec"],
                            "properties": {
                                "spec": {
                                    "type": "object",
                                    "properties": spec_properties,
                                },
                                "status": {
                                    "type": "object",
                                    "nullable": True,
                                    "x-kubernetes-preserve-unknown-fields": True,
                                    "properties": {
                                        "conditions": CONDITIONS_SCHEMA,
                                    },
                                },
                            },
                        },
                    },
                },
            ],
        },
    }


def hdfs_cluster_crd() -> Dict[str, Any]:
    return custom_resource_definition(
        HDFS_GROUP, HDFS_VERSION, HDFS_KIND, HDFS_PLURAL, "hdfs",
        {
            "namenodeReplicas": OPTIONAL_REPLICAS,
            "datanodeReplicas": OPTIONAL_REPLICAS,
            "journalnodeReplicas": OPTIONAL_REPLICAS,
            "kerberos": {
                "type": "object",
                "properties": {
                    "realm": {"type": "string", "nullable": True},
                    "kdc": {"type": "string", "nullable": True},
                },
            },
            "zookeeperConfigMapName": {"type": "string", "nullable": True},
            "storage": {
                "type": "object",
                "additionalProperties": {"type": "string"},
            },
        },
    )


def zookeeper_cluster_crd() -> Dict[str, Any]:
    return custom_resource_definition(
        ZOOKEEPER_GROUP, ZOOKEEPER_VERSION, ZOOKEEPER_KIND, ZOOKEEPER_PLURAL, "zk",
        {
            "replicas": OPTIONAL_REPLICAS,
            "stopped": {"type": "boolean", "nullable": True},
            "storage": {"type": "string", "nullable": True},
        },
    )


def all_crds() -> List[Dict[str, Any]]:
    return [hdfs_cluster_crd(), zookeeper_cluster_crd()]
