"""PyVis-based interactive graph preview."""

import webbrowser
from pathlib import Path

from pyvis.network import Network

from ..dot.writer import node_ref
from ..graph.models import Edge, GraphSnapshot, Node

# Colors assigned to clusters in ascending cluster id order
CLUSTER_COLORS = [
    "#3498db",  # Blue
    "#2ecc71",  # Green
    "#e67e22",  # Orange
    "#9b59b6",  # Purple
    "#e74c3c",  # Red
]
DEFAULT_COLOR = "#95a5a6"  # Gray


class PyVisVisualizer:
    """Interactive HTML preview for graph snapshots using PyVis."""

    def __init__(
        self,
        snapshot: GraphSnapshot,
        cluster_ids: list[int] | None = None,
    ):
        """Initialize the visualizer.

        Args:
            snapshot: Graph snapshot to visualize
            cluster_ids: Only show nodes belonging to these clusters
        """
        self.snapshot = snapshot
        self.cluster_ids = set(cluster_ids) if cluster_ids else None
        self.network = None
        self._output_path = None

    def generate(self) -> None:
        """Generate the interactive network visualization."""
        self.network = Network(
            height="750px",
            width="100%",
            bgcolor="#ffffff",
            font_color="#000000",
            directed=True,
            notebook=False,
        )

        colors = self._cluster_colors()
        visible = self._filter_nodes()

        for node_id in visible:
            self._add_node(self.snapshot.nodes[node_id], colors.get(node_id))

        # Edges only between visible nodes; dangling edges are dropped
        visible_set = set(visible)
        for edge_id in sorted(self.snapshot.edges):
            edge = self.snapshot.edges[edge_id]
            if edge.source_id in visible_set and edge.target_id in visible_set:
                self._add_edge(edge)

    def _filter_nodes(self) -> list[int]:
        """Filter nodes based on the cluster filter.

        Returns:
            Ascending list of node ids that pass the filter
        """
        if not self.cluster_ids:
            return sorted(self.snapshot.nodes)

        members: set[int] = set()
        for cluster_id in self.cluster_ids:
            cluster = self.snapshot.clusters.get(cluster_id)
            if cluster:
                members.update(cluster.node_ids)
        return sorted(i for i in self.snapshot.nodes if i in members)

    def _cluster_colors(self) -> dict[int, str]:
        """Map node id to the color of the first cluster containing it."""
        colors: dict[int, str] = {}
        for index, cluster_id in enumerate(sorted(self.snapshot.clusters)):
            color = CLUSTER_COLORS[index % len(CLUSTER_COLORS)]
            for node_id in self.snapshot.clusters[cluster_id].node_ids:
                colors.setdefault(node_id, color)
        return colors

    def _add_node(self, node: Node, cluster_color: str | None) -> None:
        """Add a node to the network.

        Args:
            node: Node to add
            cluster_color: Color of the node's cluster, if any
        """
        label = str(node.attrs.get("label", node_ref(node.id)))
        color = node.attrs.get("color") or cluster_color or DEFAULT_COLOR

        title = f"<b>{node_ref(node.id)}</b><br>"
        title += "<br>".join(f"{name}: {value}" for name, value in node.attrs.items())

        self.network.add_node(
            node.id,
            label=label,
            title=title,
            color=str(color),
            borderWidth=2,
            borderWidthSelected=4,
        )

    def _add_edge(self, edge: Edge) -> None:
        """Add an edge to the network.

        Args:
            edge: Edge to add
        """
        options = {
            "title": ", ".join(f"{name}={value}" for name, value in edge.attrs.items()),
            "color": str(edge.attrs.get("color", "#888888")),
            "arrows": "to",
        }
        if "label" in edge.attrs:
            options["label"] = str(edge.attrs["label"])

        self.network.add_edge(edge.source_id, edge.target_id, **options)

    def save(self, path: str) -> None:
        """Save the visualization as an HTML file.

        Args:
            path: Output file path
        """
        if not self.network:
            raise ValueError("Generate visualization first by calling generate()")

        self._output_path = Path(path)
        self.network.save_graph(str(self._output_path))
        print(f"Visualization saved to {self._output_path}")

    def show(self) -> None:
        """Open the visualization in the default web browser."""
        if not self._output_path:
            raise ValueError("Save visualization first by calling save()")

        webbrowser.open(f"file://{self._output_path.absolute()}")
