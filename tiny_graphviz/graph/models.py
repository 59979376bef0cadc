"""Data models for the graph store."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar, Iterable, Mapping

from ..errors import GraphError


def freeze_attrs(attrs: Mapping[str, Any] | None) -> Mapping[str, Any]:
    """Copy attributes into a read-only mapping, dropping None values.

    Args:
        attrs: Attribute name to value mapping, in the order to keep

    Returns:
        Insertion-ordered read-only mapping
    """
    if not attrs:
        return MappingProxyType({})
    return MappingProxyType(
        {name: value for name, value in attrs.items() if value is not None}
    )


def ref_id(ref: Any) -> int:
    """Extract an identifier from a raw id or an entity value.

    Args:
        ref: An integer id or any object with an integer ``id`` attribute

    Returns:
        The identifier
    """
    if isinstance(ref, bool):
        raise TypeError(f"Expected an id or an entity, got {ref!r}")
    if isinstance(ref, int):
        return ref
    entity_id = getattr(ref, "id", None)
    if isinstance(entity_id, int) and not isinstance(entity_id, bool):
        return entity_id
    raise TypeError(f"Expected an id or an entity, got {ref!r}")


@dataclass(frozen=True)
class Node:
    """A node and its ordered attributes."""

    kind: ClassVar[str] = "node"

    id: int
    attrs: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "attrs", freeze_attrs(self.attrs))

    def to_dict(self) -> dict:
        """Convert node to dictionary."""
        return {"id": self.id, "attrs": dict(self.attrs)}

    @classmethod
    def from_dict(cls, data: dict) -> "Node":
        """Create node from dictionary."""
        return cls(id=data["id"], attrs=data.get("attrs", {}))


@dataclass(frozen=True)
class Edge:
    """A directed edge between two node ids.

    The endpoints are plain back references: nothing guarantees the nodes
    they name still exist.
    """

    kind: ClassVar[str] = "edge"

    id: int
    source_id: int
    target_id: int
    attrs: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "attrs", freeze_attrs(self.attrs))

    def to_dict(self) -> dict:
        """Convert edge to dictionary."""
        return {
            "id": self.id,
            "source_id": self.source_id,
            "target_id": self.target_id,
            "attrs": dict(self.attrs),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Edge":
        """Create edge from dictionary."""
        return cls(
            id=data["id"],
            source_id=data["source_id"],
            target_id=data["target_id"],
            attrs=data.get("attrs", {}),
        )


@dataclass(frozen=True)
class Cluster:
    """An ordered group of node ids laid out on the same rank."""

    kind: ClassVar[str] = "cluster"

    id: int
    node_ids: tuple[int, ...] = field(default=(), hash=False)

    def __post_init__(self):
        object.__setattr__(self, "node_ids", tuple(self.node_ids))

    def to_dict(self) -> dict:
        """Convert cluster to dictionary."""
        return {"id": self.id, "node_ids": list(self.node_ids)}

    @classmethod
    def from_dict(cls, data: dict) -> "Cluster":
        """Create cluster from dictionary."""
        return cls(id=data["id"], node_ids=data.get("node_ids", []))


Entity = Node | Edge | Cluster


def _index(entities: Mapping[int, Entity] | Iterable[Entity]) -> Mapping[int, Entity]:
    if isinstance(entities, Mapping):
        return MappingProxyType(dict(entities))
    return MappingProxyType({entity.id: entity for entity in entities})


@dataclass(frozen=True)
class GraphSnapshot:
    """Point-in-time, read-only view of a store's three entity maps."""

    nodes: Mapping[int, Node] = field(default_factory=dict)
    edges: Mapping[int, Edge] = field(default_factory=dict)
    clusters: Mapping[int, Cluster] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "nodes", _index(self.nodes))
        object.__setattr__(self, "edges", _index(self.edges))
        object.__setattr__(self, "clusters", _index(self.clusters))

        seen: set[int] = set()
        for ids in (self.nodes.keys(), self.edges.keys(), self.clusters.keys()):
            duplicates = seen.intersection(ids)
            if duplicates:
                raise GraphError(f"Duplicate entity ids: {sorted(duplicates)}")
            seen.update(ids)

    @property
    def max_id(self) -> int:
        """Largest identifier held, or 0 for an empty snapshot."""
        return max([*self.nodes, *self.edges, *self.clusters], default=0)

    def as_dict(self) -> dict[str, dict[int, Entity]]:
        """Return plain id -> entity dictionaries keyed by entity kind."""
        return {
            "nodes": dict(self.nodes),
            "edges": dict(self.edges),
            "clusters": dict(self.clusters),
        }

    def to_dict(self) -> dict:
        """Convert snapshot to dictionary, entities in ascending id order."""
        return {
            "nodes": [self.nodes[i].to_dict() for i in sorted(self.nodes)],
            "edges": [self.edges[i].to_dict() for i in sorted(self.edges)],
            "clusters": [self.clusters[i].to_dict() for i in sorted(self.clusters)],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GraphSnapshot":
        """Create snapshot from dictionary."""
        return cls(
            nodes=[Node.from_dict(item) for item in data.get("nodes", [])],
            edges=[Edge.from_dict(item) for item in data.get("edges", [])],
            clusters=[Cluster.from_dict(item) for item in data.get("clusters", [])],
        )
