"""Graph store.

The store is the single source of truth for the workflow graph: its nodes,
the edges between them and the data held by each node. It provides:
1. Node and edge registration with integrity checks
2. Cascading removal of a node's edges and data
3. ``update_node_data``, the only way node data changes, which hands any
   new ``output`` to the propagation engine before returning
4. Read-only snapshots for everyone else

Example:
    ```python
    store = GraphStore()
    store.add_node(Node(id="prompt", kind=NodeKind.INPUT))
    store.add_node(Node(id="llm", kind=NodeKind.LLM))
    store.add_node(Node(id="answer", kind=NodeKind.OUTPUT))
    store.add_edge(Edge(source="prompt", target="llm"))
    store.add_edge(Edge(source="llm", target="answer"))

    store.update_node_data("prompt", {"value": "Tell me a joke"})
    store.get_node_data("llm").input_value  # "Tell me a joke"
    ```
"""

import itertools
import threading
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from llmflow.core.errors import (
    DuplicateEdge,
    DuplicateNode,
    InvalidEdge,
    InvalidNodeData,
    UnknownNode,
)
from llmflow.core.logging import get_logger, LogComponent
from llmflow.core.graph.propagation import PropagationEngine
from llmflow.core.graph.state import (
    BaseNodeData,
    Edge,
    Node,
    OUTPUT_FIELD,
    default_node_data,
    merge_node_data,
)

logger = get_logger(LogComponent.GRAPH)

_epoch_counter = itertools.count(1)


class GraphStore(BaseModel):
    """Owns nodes, edges and node data.

    Writes are serialized with a re-entrant lock: propagation runs inside
    the writer's call and issues its own ``update_node_data`` calls.

    Attributes:
        engine: Propagation engine invoked after each committed output
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    engine: PropagationEngine = Field(default_factory=PropagationEngine)

    _nodes: Dict[str, Node] = PrivateAttr(default_factory=dict)
    _edges: List[Edge] = PrivateAttr(default_factory=list)
    _data: Dict[str, BaseNodeData] = PrivateAttr(default_factory=dict)
    _epochs: Dict[str, int] = PrivateAttr(default_factory=dict)
    _lock: Any = PrivateAttr(default_factory=threading.RLock)

    def add_node(self, node: Node, data: Optional[BaseNodeData] = None) -> None:
        """Register a node together with its data.

        Args:
            node: Node to add
            data: Initial data; defaults to the empty variant for the node's kind

        Raises:
            DuplicateNode: If a node with the same ID exists
            InvalidNodeData: If ``data`` is a variant of another kind
        """
        with self._lock:
            if node.id in self._nodes:
                raise DuplicateNode(node.id)
            if data is None:
                data = default_node_data(node.kind)
            elif data.kind != node.kind:
                raise InvalidNodeData(node.id, f"expected {node.kind.value} data, got {data.kind}")
            self._nodes[node.id] = node
            self._data[node.id] = data
            self._epochs[node.id] = next(_epoch_counter)
        logger.info(f"Added node: {node.id} ({node.kind.value})")

    def remove_node(self, node_id: str) -> None:
        """Remove a node, every edge touching it and its data.

        Raises:
            UnknownNode: If the node does not exist
        """
        with self._lock:
            if node_id not in self._nodes:
                raise UnknownNode(node_id)
            before = len(self._edges)
            self._edges = [
                edge for edge in self._edges
                if edge.source != node_id and edge.target != node_id
            ]
            del self._nodes[node_id]
            self._data.pop(node_id, None)
            self._epochs.pop(node_id, None)
            dropped = before - len(self._edges)
        logger.info(f"Removed node: {node_id} (and {dropped} edge(s))")

    def add_edge(self, edge: Edge) -> None:
        """Connect two existing nodes.

        Raises:
            InvalidEdge: If either endpoint does not exist
            DuplicateEdge: If the same (source, target) pair is already connected
        """
        with self._lock:
            if edge.source not in self._nodes:
                raise InvalidEdge(edge.source, edge.target, f"source node not found: {edge.source}")
            if edge.target not in self._nodes:
                raise InvalidEdge(edge.source, edge.target, f"target node not found: {edge.target}")
            if any(existing.key == edge.key for existing in self._edges):
                raise DuplicateEdge(edge.source, edge.target)
            self._edges.append(edge)
        logger.info(f"Added edge: {edge.source} --> {edge.target}")

    def remove_edge(self, source: str, target: str) -> None:
        """Disconnect two nodes.

        Raises:
            InvalidEdge: If no such edge exists
        """
        with self._lock:
            remaining = [edge for edge in self._edges if edge.key != (source, target)]
            if len(remaining) == len(self._edges):
                raise InvalidEdge(source, target, "edge not found")
            self._edges = remaining
        logger.info(f"Removed edge: {source} --> {target}")

    def update_node_data(self, node_id: str, partial: Dict[str, Any]) -> BaseNodeData:
        """Merge ``partial`` into a node's data and propagate any new output.

        Fields not named in ``partial`` keep their values. If the write
        includes ``output``, direct successors are updated before this call
        returns.

        Returns:
            The node's data after the merge.

        Raises:
            UnknownNode: If the node does not exist
            InvalidNodeData: If the partial does not fit the node's data variant
        """
        with self._lock:
            if node_id not in self._nodes:
                raise UnknownNode(node_id)
            merged, effective = merge_node_data(node_id, self._data[node_id], partial)
            self._data[node_id] = merged
            logger.debug(f"Updated node {node_id}: {sorted(effective)}")

            produced = effective.get(OUTPUT_FIELD)
            if produced is not None:
                self.engine.propagate(self, node_id, produced)
            return merged

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def get_node(self, node_id: str) -> Node:
        """Raises UnknownNode if the node does not exist."""
        try:
            return self._nodes[node_id]
        except KeyError:
            raise UnknownNode(node_id) from None

    def get_node_data(self, node_id: str) -> BaseNodeData:
        """Return the node's data. Data models are frozen, so this is a safe snapshot.

        Raises:
            UnknownNode: If the node does not exist
        """
        try:
            return self._data[node_id]
        except KeyError:
            raise UnknownNode(node_id) from None

    def node_epoch(self, node_id: str) -> int:
        """Counter assigned when the node was added; changes if the ID is removed and reused."""
        try:
            return self._epochs[node_id]
        except KeyError:
            raise UnknownNode(node_id) from None

    def list_nodes(self) -> List[Node]:
        return list(self._nodes.values())

    def list_edges(self) -> List[Edge]:
        return list(self._edges)

    def successors(self, node_id: str) -> List[str]:
        return [edge.target for edge in self._edges if edge.source == node_id]

    def predecessors(self, node_id: str) -> List[str]:
        return [edge.source for edge in self._edges if edge.target == node_id]

    def validate(self) -> List[str]:
        """Check the integrity invariants.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors: List[str] = []
        for edge in self._edges:
            if edge.source not in self._nodes:
                errors.append(f"Edge references unknown source: {edge.source}")
            if edge.target not in self._nodes:
                errors.append(f"Edge references unknown target: {edge.target}")
        for node_id in self._data:
            if node_id not in self._nodes:
                errors.append(f"Data entry references unknown node: {node_id}")
        for node_id, node in self._nodes.items():
            data = self._data.get(node_id)
            if data is None:
                errors.append(f"Node {node_id} has no data")
            elif data.kind != node.kind:
                errors.append(f"Node {node_id} holds {data.kind} data but is {node.kind.value}")
        return errors
