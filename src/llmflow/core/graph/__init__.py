"""Graph package initialization.

Exposes the graph store, node data variants, propagation and execution.
"""

from llmflow.core.graph.base import GraphStore
from llmflow.core.graph.state import (
    BaseNodeData,
    Edge,
    InputNodeData,
    LLMNodeData,
    Node,
    NodeData,
    NodeKind,
    OutputNodeData,
    default_node_data,
    parse_node_data,
)
from llmflow.core.graph.propagation import PropagationEngine
from llmflow.core.graph.executor import ExecutionResult, NodeExecutor

__all__ = [
    # Core classes
    "GraphStore",
    "PropagationEngine",
    "NodeExecutor",
    "ExecutionResult",

    # Entities
    "Node",
    "Edge",
    "NodeKind",
    "NodeData",
    "BaseNodeData",
    "InputNodeData",
    "LLMNodeData",
    "OutputNodeData",

    # Helpers
    "default_node_data",
    "parse_node_data",
]
