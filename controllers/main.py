#!/usr/bin/env python3
"""CLI for the cluster operators."""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

import kopf
import yaml

from components.base.apply import ManifestDirectoryTransport
from components.base.component_types import Component
from components.base.constants import (
    GENERATED_MANIFESTS_DIR,
    HDFS_FIELD_MANAGER,
    ZOOKEEPER_FIELD_MANAGER,
)
from components.base.errors import ReconcileError
from components.base.generate_skaffolds import generate_skaffolds, render_cluster
from components.hdfs_cluster.constants import HDFS_KIND
from components.hdfs_cluster.main import desired_hdfs_resources
from components.zookeeper_cluster.constants import ZOOKEEPER_KIND
from components.zookeeper_cluster.main import desired_zookeeper_resources
from controllers.crds import all_crds

logger = logging.getLogger(__name__)

RENDERERS = {
    HDFS_KIND: (desired_hdfs_resources, HDFS_FIELD_MANAGER),
    ZOOKEEPER_KIND: (desired_zookeeper_resources, ZOOKEEPER_FIELD_MANAGER),
}


def print_crds() -> int:
    print(yaml.dump_all(all_crds(), default_flow_style=False), end="")
    return 0


def run_operator() -> int:
    # Registers the handlers with kopf's default registry
    import controllers.handlers  # noqa: F401

    kopf.run(clusterwide=True, standalone=True)
    return 0


def render_objects(objects: List[Dict[str, Any]], output_dir: str) -> List[Component]:
    """
    Render cluster objects to manifests and skaffold configs.

    Raises:
        ReconcileError: if an object cannot be rendered
        ValueError: for objects of an unknown kind
    """
    transport = ManifestDirectoryTransport(output_dir)
    components = []
    for obj in objects:
        kind = obj.get("kind")
        if kind not in RENDERERS:
            raise ValueError(f"unsupported kind {kind!r}")
        desired_resources, field_manager = RENDERERS[kind]
        resources = desired_resources(obj)
        components.append(render_cluster(
            slug=obj["metadata"]["name"],
            namespace=resources[0].namespace,
            resources=resources,
            transport=transport,
            field_manager=field_manager,
        ))
    generate_skaffolds(components, output_dir)
    return components


def render_file(path: str, output_dir: str) -> int:
    try:
        with open(path, "r") as file:
            objects = [obj for obj in yaml.safe_load_all(file) if obj]
    except (OSError, yaml.YAMLError) as e:
        logger.error("cannot read %s: %s", path, e)
        return 1

    try:
        components = render_objects(objects, output_dir)
    except (ReconcileError, ValueError) as e:
        logger.error("failed to render %s: %s", path, e)
        return 1

    for component in components:
        print(f"{component.namespace}/{component.slug}:")
        for manifest in component.manifests:
            print(f"  {manifest}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="HDFS and ZooKeeper cluster operators",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("crd", help="Print the CustomResourceDefinitions")
    subparsers.add_parser("run", help="Run the operator")

    render_parser = subparsers.add_parser("render", help="Render cluster objects into manifests")
    render_parser.add_argument("file", help="YAML file with HdfsCluster/ZookeeperCluster objects")
    render_parser.add_argument(
        "-o", "--output-dir",
        default=GENERATED_MANIFESTS_DIR,
        help="Directory receiving the manifests",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "crd":
        return print_crds()
    if args.command == "run":
        return run_operator()
    if args.command == "render":
        return render_file(args.file, args.output_dir)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
