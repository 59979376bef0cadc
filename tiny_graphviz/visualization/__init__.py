"""Interactive graph visualization."""

from .pyvis_visualizer import PyVisVisualizer

__all__ = ["PyVisVisualizer"]
