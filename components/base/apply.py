"""
Owned Upsert Transports

A transport persists one ManagedResource with create-or-patch semantics where
the caller's computed value wins over conflicting edits made by other field
managers. KubernetesApplyTransport talks to the API server with server-side
apply; ManifestDirectoryTransport writes the same bodies to disk.
"""
import copy
import logging
import os
from typing import Any, Dict, Optional

import yaml
from ilio import write
from kubernetes import client, config, dynamic
from kubernetes.client.rest import ApiException
from kubernetes.dynamic.exceptions import ResourceNotFoundError
from urllib3.exceptions import HTTPError

from components.base.component_types import ManagedResource
from components.base.constants import APPLY_TIMEOUT_SECONDS, FIELD_MANAGER_ANNOTATION, GENERATED_MANIFESTS_DIR
from components.base.errors import TransportError

logger = logging.getLogger(__name__)


def load_kubernetes_config():
    """Load in-cluster credentials, falling back to the local kubeconfig."""
    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()


class KubernetesApplyTransport:
    """Server-side apply through the kubernetes dynamic client."""

    def __init__(
        self,
        dynamic_client: Optional[dynamic.DynamicClient] = None,
        request_timeout: float = APPLY_TIMEOUT_SECONDS,
    ):
        if dynamic_client is None:
            load_kubernetes_config()
            dynamic_client = dynamic.DynamicClient(client.ApiClient())
        self.dynamic_client = dynamic_client
        self.request_timeout = request_timeout

    def apply(self, resource: ManagedResource, field_manager: str) -> Dict[str, Any]:
        """
        Force-apply a resource as field_manager.

        Returns:
            The object as stored by the API server

        Raises:
            TransportError: if the API is unknown, the request is rejected or
                the server cannot be reached
        """
        try:
            api = self.dynamic_client.resources.get(api_version=resource.api_version, kind=resource.kind)
            applied = self.dynamic_client.server_side_apply(
                api,
                body=resource.body,
                name=resource.name,
                namespace=resource.namespace,
                field_manager=field_manager,
                force_conflicts=True,
                _request_timeout=self.request_timeout,
            )
        except ResourceNotFoundError as e:
            raise TransportError(f"no API for {resource.api_version}/{resource.kind}") from e
        except ApiException as e:
            raise TransportError(f"{resource.kind} {resource.namespace}/{resource.name}: {e.status} {e.reason}") from e
        except HTTPError as e:
            raise TransportError(f"{resource.kind} {resource.namespace}/{resource.name}: {e}") from e

        logger.debug("applied %s %s/%s", resource.kind, resource.namespace, resource.name)
        return applied.to_dict() if hasattr(applied, "to_dict") else applied


class ManifestDirectoryTransport:
    """
    Writes every applied resource as a YAML manifest.

    Manifests land in {output_dir}/{namespace}/{kind}-{name}.yaml; writing the
    same resource twice overwrites the file, which keeps the transport
    idempotent like a real apply.
    """

    def __init__(self, output_dir: str = GENERATED_MANIFESTS_DIR):
        self.output_dir = output_dir
        self.written = []

    def manifest_path(self, resource: ManagedResource) -> str:
        return os.path.join(self.output_dir, resource.namespace, resource.manifest_file_name)

    def apply(self, resource: ManagedResource, field_manager: str) -> Dict[str, Any]:
        body = copy.deepcopy(resource.body)
        annotations = body["metadata"].setdefault("annotations", {})
        annotations[FIELD_MANAGER_ANNOTATION] = field_manager

        path = self.manifest_path(resource)
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            write(path, yaml.dump(body, default_flow_style=False))
        except OSError as e:
            raise TransportError(f"cannot write {path}: {e}") from e

        if path not in self.written:
            self.written.append(path)
        return body
