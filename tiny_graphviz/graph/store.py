"""Thread-safe in-memory store for nodes, edges and clusters."""

from __future__ import annotations

import logging
from dataclasses import replace
from threading import Lock, RLock
from typing import Any, Iterable, Mapping

from ..errors import EntityNotFoundError, InvalidTargetError
from .models import Cluster, Edge, Entity, GraphSnapshot, Node, ref_id

LOG = logging.getLogger("tiny_graphviz.graph.store")

# Identifiers are shared by every kind of entity in every store of the process.
_id_lock = Lock()
_last_id = 0


def next_id() -> int:
    """Allocate the next process-wide identifier."""
    global _last_id
    with _id_lock:
        _last_id += 1
        return _last_id


def reserve_ids(upto: int) -> None:
    """Make sure identifiers up to ``upto`` are never allocated again."""
    global _last_id
    with _id_lock:
        _last_id = max(_last_id, upto)


def _as_refs(refs: Any) -> list[Any]:
    """Accept a single ref or an iterable of refs."""
    if isinstance(refs, int) or hasattr(refs, "id"):
        return [refs]
    return list(refs)


def _merge_attrs(attrs: Mapping[str, Any] | None, kwargs: dict[str, Any]) -> dict[str, Any]:
    merged = dict(attrs or {})
    merged.update(kwargs)
    return merged


class GraphStore:
    """Holds the entities of one graph.

    Every public method runs under the store lock, so operations on one store
    are atomic with respect to each other. Returned entities are immutable
    values; mutations replace the stored value.
    """

    def __init__(self, snapshot: GraphSnapshot | None = None):
        """Initialize the store.

        Args:
            snapshot: Optional snapshot to start from. Its identifiers are
                reserved so new entities never collide with them.
        """
        self._lock = RLock()
        self._nodes: dict[int, Node] = {}
        self._edges: dict[int, Edge] = {}
        self._clusters: dict[int, Cluster] = {}

        if snapshot is not None:
            self._nodes.update(snapshot.nodes)
            self._edges.update(snapshot.edges)
            self._clusters.update(snapshot.clusters)
            reserve_ids(snapshot.max_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._nodes) + len(self._edges) + len(self._clusters)

    def __contains__(self, ref: Any) -> bool:
        try:
            entity_id = ref_id(ref)
        except TypeError:
            return False
        with self._lock:
            return (
                entity_id in self._nodes
                or entity_id in self._edges
                or entity_id in self._clusters
            )

    def add_node(self, attrs: Mapping[str, Any] | None = None, /, **kwargs: Any) -> Node:
        """Add a node.

        Args:
            attrs: Ordered attributes; keyword arguments are appended after them

        Returns:
            The new node
        """
        with self._lock:
            node = Node(id=next_id(), attrs=_merge_attrs(attrs, kwargs))
            self._nodes[node.id] = node
            return node

    def add_edge(
        self,
        source: Any,
        target: Any,
        attrs: Mapping[str, Any] | None = None,
        /,
        **kwargs: Any,
    ) -> Edge:
        """Add a directed edge.

        Endpoints are not checked against the store, so an edge may point at
        a node that is added later or has already been removed.

        Args:
            source: Source node or node id
            target: Target node or node id
            attrs: Ordered attributes; keyword arguments are appended after them

        Returns:
            The new edge
        """
        source_id = ref_id(source)
        target_id = ref_id(target)
        with self._lock:
            edge = Edge(
                id=next_id(),
                source_id=source_id,
                target_id=target_id,
                attrs=_merge_attrs(attrs, kwargs),
            )
            self._edges[edge.id] = edge
            return edge

    def add_cluster(self, members: Iterable[Any] = ()) -> Cluster:
        """Add a cluster over existing nodes.

        Args:
            members: Nodes or node ids; repeated ids are kept once

        Returns:
            The new cluster
        """
        member_ids = [ref_id(ref) for ref in _as_refs(members)]
        with self._lock:
            node_ids = self._extend_members((), member_ids)
            cluster = Cluster(id=next_id(), node_ids=node_ids)
            self._clusters[cluster.id] = cluster
            return cluster

    def add_to_cluster(self, cluster_ref: Any, refs: Any) -> Cluster:
        """Append nodes to a cluster, skipping ones already in it.

        Args:
            cluster_ref: Cluster or cluster id
            refs: A node, a node id, or an iterable of either

        Returns:
            The updated cluster
        """
        cluster_id = ref_id(cluster_ref)
        member_ids = [ref_id(ref) for ref in _as_refs(refs)]
        with self._lock:
            cluster = self._get_cluster(cluster_id)
            node_ids = self._extend_members(cluster.node_ids, member_ids)
            cluster = replace(cluster, node_ids=node_ids)
            self._clusters[cluster_id] = cluster
            return cluster

    def remove_from_cluster(self, cluster_ref: Any, refs: Any) -> Cluster:
        """Remove nodes from a cluster, keeping the order of the rest.

        Ids that are not members are ignored.

        Args:
            cluster_ref: Cluster or cluster id
            refs: A node, a node id, or an iterable of either

        Returns:
            The updated cluster
        """
        cluster_id = ref_id(cluster_ref)
        removed = {ref_id(ref) for ref in _as_refs(refs)}
        with self._lock:
            cluster = self._get_cluster(cluster_id)
            cluster = replace(
                cluster,
                node_ids=[i for i in cluster.node_ids if i not in removed],
            )
            self._clusters[cluster_id] = cluster
            return cluster

    def find(self, ref: Any) -> Entity:
        """Look up a node, edge or cluster by id.

        Raises:
            EntityNotFoundError: If no entity has this id
        """
        entity_id = ref_id(ref)
        with self._lock:
            for table in (self._nodes, self._edges, self._clusters):
                if entity_id in table:
                    return table[entity_id]
        raise EntityNotFoundError(entity_id)

    def update(
        self,
        ref: Any,
        attrs: Mapping[str, Any] | None = None,
        /,
        **kwargs: Any,
    ) -> Node | Edge:
        """Set or delete attributes of a node or edge.

        A value of None deletes the attribute. Existing attributes are
        overwritten in place; new ones are appended.

        Raises:
            EntityNotFoundError: If no entity has this id
            InvalidTargetError: If the id belongs to a cluster
        """
        entity_id = ref_id(ref)
        changes = _merge_attrs(attrs, kwargs)
        with self._lock:
            entity = self.find(entity_id)
            if isinstance(entity, Cluster):
                raise InvalidTargetError(entity_id, entity.kind, "update attributes of")

            new_attrs = dict(entity.attrs)
            for name, value in changes.items():
                if value is None:
                    new_attrs.pop(name, None)
                else:
                    new_attrs[name] = value

            entity = replace(entity, attrs=new_attrs)
            self._table_for(entity)[entity_id] = entity
            return entity

    def remove(self, ref: Any) -> Entity | None:
        """Remove an entity of any kind.

        Edges and clusters referencing a removed node are left untouched.

        Returns:
            The removed entity, or None if the id was not in the store
        """
        entity_id = ref_id(ref)
        with self._lock:
            for table in (self._nodes, self._edges, self._clusters):
                if entity_id in table:
                    return table.pop(entity_id)
        LOG.debug("remove(%s): no such entity", entity_id)
        return None

    def snapshot(self) -> GraphSnapshot:
        """Copy the current entity maps into a read-only snapshot."""
        with self._lock:
            return GraphSnapshot(
                nodes=self._nodes,
                edges=self._edges,
                clusters=self._clusters,
            )

    def get(self) -> dict[str, dict[int, Entity]]:
        """Return the current nodes, edges and clusters as plain dictionaries."""
        return self.snapshot().as_dict()

    def _get_cluster(self, cluster_id: int) -> Cluster:
        cluster = self._clusters.get(cluster_id)
        if cluster is None:
            raise EntityNotFoundError(cluster_id, Cluster.kind)
        return cluster

    def _extend_members(
        self,
        node_ids: Iterable[int],
        new_ids: Iterable[int],
    ) -> list[int]:
        """Append node ids not yet present, checking each one is a live node."""
        result = list(node_ids)
        for node_id in new_ids:
            if node_id in result:
                continue
            if node_id not in self._nodes:
                raise EntityNotFoundError(node_id, Node.kind)
            result.append(node_id)
        return result

    def _table_for(self, entity: Entity) -> dict:
        if isinstance(entity, Node):
            return self._nodes
        if isinstance(entity, Edge):
            return self._edges
        return self._clusters
