"""Render graph snapshots as Graphviz DOT text."""

import logging
from typing import Any, Mapping

from ..graph.models import Cluster, GraphSnapshot

LOG = logging.getLogger("tiny_graphviz.dot.writer")

INDENT = "  "


def node_ref(node_id: int) -> str:
    """Return the DOT identifier used for a node id."""
    return f"node_{node_id}"


def render_attrs(attrs: Mapping[str, Any]) -> str:
    """Render an attribute clause, or an empty string when there are none."""
    if not attrs:
        return ""
    pairs = ", ".join(f'{name}="{value}"' for name, value in attrs.items())
    return f" [{pairs}]"


def render(snapshot: GraphSnapshot, name: str = "G") -> str:
    """Render a snapshot as a directed graph.

    Nodes, edges and clusters are each emitted in ascending id order and
    separated by a blank line. Edges with an endpoint that is no longer a
    node, and cluster members that are no longer nodes, are left out.

    Args:
        snapshot: Graph snapshot to render
        name: Graph name used in the header

    Returns:
        DOT source text
    """
    lines = [f"digraph {name} {{"]

    for node_id in sorted(snapshot.nodes):
        node = snapshot.nodes[node_id]
        lines.append(f"{INDENT}{node_ref(node_id)}{render_attrs(node.attrs)};")

    lines.append("")

    for edge_id in sorted(snapshot.edges):
        edge = snapshot.edges[edge_id]
        if edge.source_id not in snapshot.nodes or edge.target_id not in snapshot.nodes:
            LOG.debug(
                "Skipping edge %s: %s -> %s has a missing endpoint",
                edge_id,
                edge.source_id,
                edge.target_id,
            )
            continue
        lines.append(
            f"{INDENT}{node_ref(edge.source_id)} -> {node_ref(edge.target_id)}"
            f"{render_attrs(edge.attrs)};"
        )

    lines.append("")

    for cluster_id in sorted(snapshot.clusters):
        lines.extend(_render_cluster(snapshot.clusters[cluster_id], snapshot))

    lines.append("}")
    return "\n".join(lines)


def _render_cluster(cluster: Cluster, snapshot: GraphSnapshot) -> list[str]:
    members = [node_ref(i) for i in cluster.node_ids if i in snapshot.nodes]
    if len(members) < len(cluster.node_ids):
        LOG.debug(
            "Cluster %s: skipping %d removed member(s)",
            cluster.id,
            len(cluster.node_ids) - len(members),
        )

    inner = INDENT * 2
    lines = [f"{INDENT}subgraph cluster_{cluster.id} {{"]
    if len(members) > 1:
        lines.append(f"{inner}{' -> '.join(members)} [style=invis];")
    rank = "".join(f" {member};" for member in members)
    lines.append(f'{inner}{{ rank = "same";{rank} }}')
    lines.append(f"{INDENT}}}")
    return lines
