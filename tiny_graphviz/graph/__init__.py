"""Graph store and storage module."""

from .models import Cluster, Edge, GraphSnapshot, Node, ref_id
from .storage import GraphStorage
from .store import GraphStore

__all__ = [
    "Cluster",
    "Edge",
    "GraphSnapshot",
    "GraphStorage",
    "GraphStore",
    "Node",
    "ref_id",
]
