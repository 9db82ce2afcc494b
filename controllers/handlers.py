"""
kopf handlers driving reconciliation of HdfsCluster and ZookeeperCluster objects.

kopf decides when to reconcile: create, update, operator restart, a change to
any owned child and a periodic resync. Reconciles of one object never overlap;
every failure is turned into a TemporaryError carrying the fixed retry delay of
the error policy.
"""
import logging
import threading
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import kopf
from kubernetes import client
from kubernetes.client.rest import ApiException

from components.base.apply import KubernetesApplyTransport
from components.base.component_types import NextAction
from components.base.constants import RESYNC_INTERVAL_SECONDS
from components.base.errors import ReconcileError
from components.base.reconcile import ApplyTransport, error_policy
from components.hdfs_cluster.constants import HDFS_GROUP, HDFS_KIND, HDFS_PLURAL, HDFS_VERSION
from components.hdfs_cluster.main import reconcile_hdfs
from components.zookeeper_cluster.constants import (
    ZOOKEEPER_GROUP,
    ZOOKEEPER_KIND,
    ZOOKEEPER_PLURAL,
    ZOOKEEPER_VERSION,
)
from components.zookeeper_cluster.main import reconcile_zookeeper

Reconciler = Callable[[Mapping[str, Any], ApplyTransport], NextAction]

# kind -> (group, version, plural, reconcile function)
OWNER_KINDS: Dict[str, Tuple[str, str, str, Reconciler]] = {
    HDFS_KIND: (HDFS_GROUP, HDFS_VERSION, HDFS_PLURAL, reconcile_hdfs),
    ZOOKEEPER_KIND: (ZOOKEEPER_GROUP, ZOOKEEPER_VERSION, ZOOKEEPER_PLURAL, reconcile_zookeeper),
}


class ObjectLocks:
    """One lock per reconciled object."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[Tuple[str, str, str], threading.Lock] = {}

    def get(self, kind: str, namespace: str, name: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault((kind, namespace, name), threading.Lock())


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, memo: kopf.Memo, **_):
    settings.posting.level = logging.WARNING
    settings.watching.server_timeout = 60
    memo.transport = KubernetesApplyTransport()
    memo.custom_objects = client.CustomObjectsApi()
    memo.locks = ObjectLocks()


def run_reconcile(reconcile: Reconciler, body: Mapping[str, Any], memo: kopf.Memo, logger: logging.Logger) -> None:
    metadata = body.get("metadata") or {}
    locks = memo.setdefault("locks", ObjectLocks())
    lock = locks.get(body.get("kind", ""), metadata.get("namespace") or "", metadata.get("name") or "")
    with lock:
        try:
            reconcile(body, memo.transport)
        except ReconcileError as error:
            action = error_policy(error)
            raise kopf.TemporaryError(str(error), delay=action.requeue_after) from error
    logger.info("Reconciled object")


def owning_cluster(metadata: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Find the managed cluster controlling a child object.

    Returns:
        The controller owner reference if it points at a managed cluster kind
        of a known API group, else None
    """
    for owner in metadata.get("ownerReferences") or []:
        if not owner.get("controller"):
            continue
        kind = owner.get("kind")
        if kind not in OWNER_KINDS:
            continue
        group, version, _, _ = OWNER_KINDS[kind]
        if owner.get("apiVersion") == f"{group}/{version}":
            return owner
    return None


def fetch_owner(custom_objects: client.CustomObjectsApi, owner: Mapping[str, Any], namespace: str) -> Optional[Dict[str, Any]]:
    """
    Read the cluster object behind an owner reference.

    Returns:
        The cluster object, or None when it is gone or has been replaced by
        another object of the same name
    """
    group, version, plural, _ = OWNER_KINDS[owner["kind"]]
    try:
        parent = custom_objects.get_namespaced_custom_object(group, version, namespace, plural, owner["name"])
    except ApiException as e:
        if e.status == 404:
            return None
        raise
    if parent.get("metadata", {}).get("uid") != owner.get("uid"):
        return None
    return parent


def reconcile_owner(meta: Mapping[str, Any], namespace: str, memo: kopf.Memo, logger: logging.Logger) -> None:
    owner = owning_cluster(meta)
    if owner is None:
        return
    parent = fetch_owner(memo.custom_objects, owner, namespace)
    if parent is None:
        return
    _, _, _, reconcile = OWNER_KINDS[owner["kind"]]
    try:
        run_reconcile(reconcile, parent, memo, logger)
    except kopf.TemporaryError as e:
        # Event handlers are not retried; the resync timer picks the cluster up again
        logger.warning("Reconciling %s %s failed: %s", owner["kind"], owner["name"], e)


@kopf.on.resume(HDFS_GROUP, HDFS_VERSION, HDFS_PLURAL)
@kopf.on.create(HDFS_GROUP, HDFS_VERSION, HDFS_PLURAL)
@kopf.on.update(HDFS_GROUP, HDFS_VERSION, HDFS_PLURAL)
def reconcile_hdfs_cluster(body: kopf.Body, memo: kopf.Memo, logger: logging.Logger, **_):
    run_reconcile(reconcile_hdfs, body, memo, logger)


@kopf.timer(HDFS_GROUP, HDFS_VERSION, HDFS_PLURAL, interval=RESYNC_INTERVAL_SECONDS, idle=RESYNC_INTERVAL_SECONDS)
def resync_hdfs_cluster(body: kopf.Body, memo: kopf.Memo, logger: logging.Logger, **_):
    run_reconcile(reconcile_hdfs, body, memo, logger)


@kopf.on.resume(ZOOKEEPER_GROUP, ZOOKEEPER_VERSION, ZOOKEEPER_PLURAL)
@kopf.on.create(ZOOKEEPER_GROUP, ZOOKEEPER_VERSION, ZOOKEEPER_PLURAL)
@kopf.on.update(ZOOKEEPER_GROUP, ZOOKEEPER_VERSION, ZOOKEEPER_PLURAL)
def reconcile_zookeeper_cluster(body: kopf.Body, memo: kopf.Memo, logger: logging.Logger, **_):
    run_reconcile(reconcile_zookeeper, body, memo, logger)


@kopf.timer(ZOOKEEPER_GROUP, ZOOKEEPER_VERSION, ZOOKEEPER_PLURAL, interval=RESYNC_INTERVAL_SECONDS, idle=RESYNC_INTERVAL_SECONDS)
def resync_zookeeper_cluster(body: kopf.Body, memo: kopf.Memo, logger: logging.Logger, **_):
    run_reconcile(reconcile_zookeeper, body, memo, logger)


@kopf.on.event("apps", "v1", "statefulsets")
@kopf.on.event("", "v1", "services")
@kopf.on.event("", "v1", "configmaps")
def owned_child_changed(type: Optional[str], meta: kopf.Meta, namespace: str, memo: kopf.Memo, logger: logging.Logger, **_):
    # The initial listing is covered by the resume handlers
    if type is None:
        return
    reconcile_owner(meta, namespace, memo, logger)
