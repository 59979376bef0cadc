"""CLI entry point for tiny-graphviz."""

import argparse
import logging
import sys

from tiny_graphviz import Graph
from tiny_graphviz.dot import SUPPORTED_FORMATS


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="tiny-graphviz: render stored graphs as Graphviz DOT"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Render command
    render_parser = subparsers.add_parser("render", help="Print the DOT source of a graph")
    render_parser.add_argument("graph", help="Path to the graph JSON file")

    # Save command
    save_parser = subparsers.add_parser("save", help="Write the DOT source to a file")
    save_parser.add_argument("graph", help="Path to the graph JSON file")
    save_parser.add_argument(
        "-n", "--name", help="Output file name without extension (default: graph name)"
    )

    # Compile command
    compile_parser = subparsers.add_parser("compile", help="Render the graph with Graphviz")
    compile_parser.add_argument("graph", help="Path to the graph JSON file")
    compile_parser.add_argument(
        "-n", "--name", help="Output file name without extension (default: graph name)"
    )
    compile_parser.add_argument(
        "-f", "--format", choices=SUPPORTED_FORMATS, help="Output format (default: from config)"
    )

    # Stats command
    stats_parser = subparsers.add_parser("stats", help="Show graph statistics")
    stats_parser.add_argument("graph", help="Path to the graph JSON file")

    # Visualize command
    visualize_parser = subparsers.add_parser("visualize", help="Open an interactive preview")
    visualize_parser.add_argument("graph", help="Path to the graph JSON file")
    visualize_parser.add_argument(
        "-o", "--output", default="graph_viz.html", help="Output HTML file (default: graph_viz.html)"
    )
    visualize_parser.add_argument(
        "--cluster", type=int, nargs="+", help="Only show members of these cluster ids"
    )
    visualize_parser.add_argument(
        "--no-show", action="store_true", help="Do not open the browser"
    )

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        graph = Graph.load(args.graph)
        if args.command == "render":
            print(graph.write())
        elif args.command == "save":
            print(f"DOT file written to {graph.save(args.name)}")
        elif args.command == "compile":
            # Explicit keywords so a name like "svg" is never read as a format
            output = graph.compile(
                base_name=args.name or graph.config.graph_name,
                fmt=args.format or graph.config.default_format,
            )
            print(f"Graph compiled to {output}")
        elif args.command == "stats":
            run_stats(graph)
        elif args.command == "visualize":
            graph.visualize(args.output, cluster_ids=args.cluster, show=not args.no_show)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def run_stats(graph):
    """Show statistics for a graph."""
    stats = graph.get_stats()
    print("Graph Statistics:")
    print(f"  Nodes: {stats['nodes']}")
    print(f"  Edges: {stats['edges']}")
    print(f"  Clusters: {stats['clusters']}")
    if stats["dangling_edges"] or stats["dangling_cluster_members"]:
        print(f"  Dangling edges: {stats['dangling_edges']}")
        print(f"  Dangling cluster members: {stats['dangling_cluster_members']}")


if __name__ == "__main__":
    main()
