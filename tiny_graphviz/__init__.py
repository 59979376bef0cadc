"""tiny-graphviz: build directed graphs in memory and render them with Graphviz."""

from pathlib import Path

from .config import Config
from .dot import SUPPORTED_FORMATS, DotCompiler, render
from .errors import (
    EntityNotFoundError,
    GraphError,
    InvalidTargetError,
    RenderError,
    UnsupportedFormatError,
)
from .graph import Cluster, Edge, GraphSnapshot, GraphStorage, GraphStore, Node


class Graph(GraphStore):
    """Main entry point: a graph store plus DOT output helpers."""

    def __init__(
        self,
        config: Config | None = None,
        snapshot: GraphSnapshot | None = None,
    ):
        """Initialize the graph.

        Args:
            config: Optional configuration. If not provided, loads from
                config.yaml and the environment.
            snapshot: Optional snapshot to start from
        """
        super().__init__(snapshot)
        self.config = config or Config.from_yaml()
        self.compiler = DotCompiler(
            output_dir=self.config.output_dir,
            dot_command=self.config.dot_command,
        )
        self.storage = GraphStorage()

    @classmethod
    def load(cls, path: str | Path, config: Config | None = None) -> "Graph":
        """Load a graph previously written by dump().

        Args:
            path: JSON file to load
            config: Optional configuration

        Returns:
            Graph holding the stored entities
        """
        return cls(config=config, snapshot=GraphStorage().load_json(path))

    def dump(self, path: str | Path) -> None:
        """Save the current graph contents as JSON.

        Args:
            path: File path to save to
        """
        self.storage.save_json(self.snapshot(), path)

    def write(self) -> str:
        """Return the DOT representation of the graph."""
        return render(self.snapshot(), name=self.config.graph_name)

    def save(self, base_name: str | None = None) -> Path:
        """Write the DOT representation to ``<base_name>.dot``.

        Args:
            base_name: File name without extension; defaults to the graph name

        Returns:
            Path of the written file
        """
        return self.compiler.save(self.write(), base_name or self.config.graph_name)

    def compile(self, base_name: str | None = None, fmt: str | None = None) -> Path:
        """Save the graph and render it with Graphviz.

        A supported format name may be passed as the only argument, so
        ``graph.compile("png")`` writes ``G.dot`` and ``G.png``.

        Args:
            base_name: File name without extension; defaults to the graph name
            fmt: Output format; defaults to the configured format

        Returns:
            Path of the rendered image
        """
        if fmt is None and base_name is not None and base_name.lower() in SUPPORTED_FORMATS:
            base_name, fmt = None, base_name
        return self.compiler.compile(
            self.write(),
            base_name or self.config.graph_name,
            fmt or self.config.default_format,
        )

    def visualize(
        self,
        output_path: str = "graph_viz.html",
        cluster_ids: list[int] | None = None,
        show: bool = True,
    ) -> None:
        """Visualize the graph as an interactive HTML file.

        Args:
            output_path: Path to save HTML visualization (default: graph_viz.html)
            cluster_ids: Only show members of these clusters
            show: Whether to open in browser automatically (default: True)
        """
        from .visualization import PyVisVisualizer

        viz = PyVisVisualizer(self.snapshot(), cluster_ids=cluster_ids)
        viz.generate()
        viz.save(output_path)

        if show:
            viz.show()

    def get_stats(self) -> dict:
        """Get statistics about the current graph.

        Returns:
            Dictionary with entity counts and dangling reference counts
        """
        snapshot = self.snapshot()
        dangling_edges = sum(
            1
            for edge in snapshot.edges.values()
            if edge.source_id not in snapshot.nodes or edge.target_id not in snapshot.nodes
        )
        dangling_members = sum(
            1
            for cluster in snapshot.clusters.values()
            for node_id in cluster.node_ids
            if node_id not in snapshot.nodes
        )
        return {
            "nodes": len(snapshot.nodes),
            "edges": len(snapshot.edges),
            "clusters": len(snapshot.clusters),
            "dangling_edges": dangling_edges,
            "dangling_cluster_members": dangling_members,
        }


__all__ = [
    "Cluster",
    "Config",
    "Edge",
    "EntityNotFoundError",
    "Graph",
    "GraphError",
    "GraphSnapshot",
    "GraphStore",
    "InvalidTargetError",
    "Node",
    "RenderError",
    "UnsupportedFormatError",
]
