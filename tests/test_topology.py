"""
Tests for HDFS topology planning
"""

import pytest

from components.base.component_types import ParentRef
from components.base.errors import MissingNamespace
from components.hdfs_cluster.component_types import HdfsClusterSpec
from components.hdfs_cluster.topology import core_site_properties, hdfs_site_properties, plan_topology


def make_spec(**kwargs):
    parent = ParentRef(
        api_version="hdfs.stackable.tech/v1alpha1",
        kind="HdfsCluster",
        name="hdfs1",
        namespace="ns",
        uid="uid-1",
    )
    return HdfsClusterSpec(parent=parent, **kwargs)


class TestHdfsClusterSpec:
    """Tests for reading HdfsCluster objects."""

    def test_from_custom_object(self, kerberized_hdfs_cluster):
        spec = HdfsClusterSpec.from_custom_object(kerberized_hdfs_cluster)

        assert spec.name == "hdfs1"
        assert spec.namespace == "ns"
        assert spec.parent.uid == "0f5c7d2e-hdfs"
        assert spec.replicas("namenode") == 2
        assert spec.kerberos_realm == "EXAMPLE.COM"
        assert spec.kerberos_kdc == "kdc.example.com"
        assert spec.kerberos_enabled is True
        assert spec.zookeeper_config_map == "hdfs1-zookeeper-brokers"

    def test_missing_namespace(self, hdfs_cluster):
        del hdfs_cluster["metadata"]["namespace"]

        with pytest.raises(MissingNamespace) as excinfo:
            HdfsClusterSpec.from_custom_object(hdfs_cluster)

        assert excinfo.value.obj_ref == "HdfsCluster/hdfs1"

    def test_omitted_counts_default_to_one(self):
        spec = HdfsClusterSpec.from_custom_object({
            "metadata": {"name": "hdfs1", "namespace": "ns"},
            "spec": {},
        })

        for role in ("namenode", "datanode", "journalnode"):
            assert spec.replicas(role) == 1
        assert spec.kerberos_enabled is False


class TestPlanTopology:
    """Tests for plan_topology."""

    def test_end_to_end_quorum(self):
        topology = plan_topology(make_spec(namenode_replicas=2, journalnode_replicas=3))

        assert topology.nameservice.nameservice_id == "hdfs1"
        assert topology.nameservice.namenode_ids == ["name-0", "name-1"]
        assert topology.journal_quorum.uri == (
            "qjournal://"
            "hdfs1-journalnode-0.hdfs1-journalnode.ns.svc.cluster.local:8485;"
            "hdfs1-journalnode-1.hdfs1-journalnode.ns.svc.cluster.local:8485;"
            "hdfs1-journalnode-2.hdfs1-journalnode.ns.svc.cluster.local:8485"
            "/hdfs1"
        )

    @pytest.mark.parametrize("journalnodes", [1, 3, 5])
    def test_quorum_entry_count(self, journalnodes):
        uri = plan_topology(make_spec(journalnode_replicas=journalnodes)).journal_quorum.uri

        hosts, nameservice = uri[len("qjournal://"):].split("/")
        entries = hosts.split(";")
        assert nameservice == "hdfs1"
        assert len(entries) == journalnodes
        assert all(entry.endswith(":8485") for entry in entries)

    def test_namenode_address_maps(self):
        nameservice = plan_topology(make_spec(namenode_replicas=2)).nameservice

        assert nameservice.rpc_addresses["name-1"] == "hdfs1-namenode-1.hdfs1-namenode.ns.svc.cluster.local:8020"
        assert nameservice.http_addresses["name-0"] == "hdfs1-namenode-0.hdfs1-namenode.ns.svc.cluster.local:9870"

    def test_principals_anchor_to_namenode_service(self):
        principals = plan_topology(make_spec(kerberos_realm="EXAMPLE.COM")).principals

        assert principals.anchor_fqdn == "hdfs1-namenode.ns.svc.cluster.local"
        assert principals.principals["datanode"].principal == "dn/hdfs1-namenode.ns.svc.cluster.local@EXAMPLE.COM"
        assert principals.principals["journalnode"].keytab_path == "/kerberos/jn.service.keytab"

    def test_realm_defaults_to_local(self):
        principals = plan_topology(make_spec()).principals

        assert principals.realm == "LOCAL"
        assert principals.principals["namenode"].principal.endswith("@LOCAL")


class TestSiteProperties:
    """Tests for the hdfs-site and core-site key/value sets."""

    def test_hdfs_site_order(self):
        spec = make_spec(namenode_replicas=2)
        keys = [key for key, _ in hdfs_site_properties(spec, plan_topology(spec))]

        assert keys[:4] == [
            "dfs.namenode.name.dir",
            "dfs.datanode.data.dir",
            "dfs.journalnode.edits.dir",
            "dfs.nameservices",
        ]
        assert keys[-4:] == [
            "dfs.namenode.rpc-address.hdfs1.name-0",
            "dfs.namenode.http-address.hdfs1.name-0",
            "dfs.namenode.rpc-address.hdfs1.name-1",
            "dfs.namenode.http-address.hdfs1.name-1",
        ]

    def test_namenode_ids_joined(self):
        spec = make_spec(namenode_replicas=2)
        properties = dict(hdfs_site_properties(spec, plan_topology(spec)))

        assert properties["dfs.ha.namenodes.hdfs1"] == "name-0, name-1"
        assert properties["dfs.ha.fencing.methods"] == "shell(/bin/true)"

    def test_automatic_failover_follows_zookeeper_reference(self):
        without = make_spec()
        with_zk = make_spec(zookeeper_config_map="brokers")

        manual = dict(hdfs_site_properties(without, plan_topology(without)))
        automatic = dict(hdfs_site_properties(with_zk, plan_topology(with_zk)))

        assert manual["dfs.ha.automatic-failover.enabled"] == "false"
        assert "ha.zookeeper.quorum" not in manual
        assert automatic["dfs.ha.automatic-failover.enabled"] == "true"
        assert automatic["ha.zookeeper.quorum"] == "${env.ZOOKEEPER_BROKERS}"

    def test_core_site_authentication(self):
        assert dict(core_site_properties(make_spec()))["hadoop.security.authentication"] == "simple"
        kerberized = dict(core_site_properties(make_spec(kerberos_realm="EXAMPLE.COM")))
        assert kerberized["hadoop.security.authentication"] == "kerberos"
        assert kerberized["fs.defaultFS"] == "hdfs://hdfs1/"
