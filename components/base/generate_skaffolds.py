import os
from typing import Dict, List, Sequence

import yaml
from ilio import write

from .apply import ManifestDirectoryTransport
from .component_types import Component, ManagedResource
from .reconcile import apply_owned_resources


def render_cluster(
    slug: str,
    namespace: str,
    resources: Sequence[ManagedResource],
    transport: ManifestDirectoryTransport,
    field_manager: str,
) -> Component:
    """
    Write the manifests of one cluster through a directory transport.

    Args:
        slug: Name of the cluster
        namespace: Namespace of the cluster, also its directory name
        resources: Desired resources in application order
        transport: Directory transport receiving the manifests
        field_manager: Originator recorded on every manifest

    Returns:
        Component listing the written manifests in application order
    """
    apply_owned_resources(resources, transport, field_manager)
    namespace_dir = os.path.join(transport.output_dir, namespace)
    return Component(
        slug=slug,
        namespace=namespace,
        dir_name=namespace,
        manifests=[
            "./" + os.path.relpath(transport.manifest_path(resource), namespace_dir)
            for resource in resources
        ],
    )


def generate_skaffolds(components: List[Component], output_dir: str) -> str:
    """
    Write one skaffold config per rendered cluster plus a main config requiring all of them.

    Returns:
        Path of the main skaffold config
    """
    print(f"components: {[f'{c.namespace}/{c.slug}' for c in components]}")
    os.makedirs(output_dir, exist_ok=True)

    components_by_dir: Dict[str, List[Component]] = {}
    for component in components:
        components_by_dir.setdefault(component.dir_name, []).append(component)

    global_skaffold_paths = []
    for dir_name, dir_components in components_by_dir.items():
        skaffold_paths = []
        for component in dir_components:
            skaffold_file = f"skaffold-{component.slug}.yaml"
            write(f"{output_dir}/{dir_name}/{skaffold_file}", yaml.dump({
                "apiVersion": "skaffold/v3",
                "kind": "Config",
                "manifests": {
                    "rawYaml": component.manifests,
                },
                "deploy": {
                    "kubectl": {
                        "defaultNamespace": component.namespace,
                    },
                },
            }, default_flow_style=False))
            skaffold_paths.append({"path": f"./{skaffold_file}"})

        write(f"{output_dir}/{dir_name}/skaffold.yaml", yaml.dump({
            "apiVersion": "skaffold/v3",
            "kind": "Config",
            "requires": skaffold_paths,
        }))
        global_skaffold_paths.append(dir_components[0].as_skaffold_dependency)

    main_skaffold_path = f"{output_dir}/skaffold--main--all.yaml"
    write(main_skaffold_path, yaml.dump({
        "apiVersion": "skaffold/v3",
        "kind": "Config",
        "requires": global_skaffold_paths,
    }))
    return main_skaffold_path
