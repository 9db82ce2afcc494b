"""
HDFS Configuration Bundle

Renders the documents mounted at /config in every HDFS pod. All renderers are
pure: the same spec and topology always produce byte-identical text.
"""
import os
from typing import Dict, Iterable, Optional, Tuple
from xml.sax.saxutils import escape

from components.hdfs_cluster.component_types import HdfsClusterSpec, HdfsTopology
from components.hdfs_cluster.constants import DEFAULT_KERBEROS_REALM, LOG4J_PROPERTIES_FILE
from components.hdfs_cluster.topology import core_site_properties, hdfs_site_properties

LOG4J_PROPERTIES_PATH = os.path.join(os.path.dirname(__file__), LOG4J_PROPERTIES_FILE)


def hadoop_config_xml(properties: Iterable[Tuple[str, str]]) -> str:
    """
    Render key/value pairs as a Hadoop configuration document.

    Pairs keep their insertion order. Keys and values are escaped so the
    document stays well-formed whatever they contain.
    """
    xml = "<configuration>\n"
    for key, value in properties:
        xml += f"<property><name>{escape(key)}</name><value>{escape(value)}</value></property>\n"
    xml += "</configuration>"
    return xml


def krb5_conf(realm: Optional[str], kdc: Optional[str]) -> str:
    """
    Render a krb5.conf.

    [libdefaults] names the default realm only when one is set. [realms] is
    always opened; its realm block lists the KDC only when one is set.
    """
    lines = ["[libdefaults]"]
    if realm:
        lines.append(f"default_realm = {realm}")
    lines.append("")
    lines.append("[realms]")
    # A KDC without a realm is filed under the default realm
    block_realm = realm or (DEFAULT_KERBEROS_REALM if kdc else None)
    if block_realm:
        lines.append(f"{block_realm} = {{")
        if kdc:
            lines.append(f"  kdc = {kdc}")
        lines.append("}")
    return "\n".join(lines) + "\n"


def log4j_properties() -> str:
    with open(LOG4J_PROPERTIES_PATH, "r") as file:
        return file.read()


def build_config_bundle(spec: HdfsClusterSpec, topology: HdfsTopology) -> Dict[str, str]:
    """
    Build the config bundle of a cluster.

    Returns:
        Ordered mapping of file name to rendered text
    """
    return {
        "core-site.xml": hadoop_config_xml(core_site_properties(spec)),
        "hdfs-site.xml": hadoop_config_xml(hdfs_site_properties(spec, topology)),
        "krb5.conf": krb5_conf(spec.kerberos_realm, spec.kerberos_kdc),
        "log4j.properties": log4j_properties(),
    }
