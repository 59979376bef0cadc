"""DOT rendering and Graphviz compilation."""

from .compiler import DEFAULT_FORMAT, SUPPORTED_FORMATS, DotCompiler
from .writer import node_ref, render, render_attrs

__all__ = [
    "DEFAULT_FORMAT",
    "SUPPORTED_FORMATS",
    "DotCompiler",
    "node_ref",
    "render",
    "render_attrs",
]
