"""Execution of LLM nodes.

Executing a node reads a snapshot of its data, calls the dispatcher
without holding any store lock, and commits the outcome with a single
``update_node_data`` call. A successful output then fans out one hop
through the propagation engine.

Each execution stamps a version token for its node. When the call returns,
the outcome is committed only if no newer execution of the same node has
started and the node has not been removed (or removed and re-added) in
the meantime. Otherwise the result is stale and is dropped.
"""

import itertools
from typing import Dict, List, Optional

from pydantic import BaseModel

from llmflow.core.dispatch import Dispatcher
from llmflow.core.errors import NotExecutable
from llmflow.core.logging import get_logger, LogComponent
from llmflow.core.graph.base import GraphStore
from llmflow.core.graph.state import LLMNodeData, NodeKind
from llmflow.core.providers.base import (
    GenerationError,
    GenerationOutcome,
    GenerationRequest,
    GenerationResult,
)

logger = get_logger(LogComponent.EXECUTOR)


class ExecutionResult(BaseModel):
    """Outcome of one node execution.

    Attributes:
        node_id: Executed node
        outcome: What the dispatcher returned
        committed: False when the outcome was stale and not written back
    """
    node_id: str
    outcome: GenerationOutcome
    committed: bool

    @property
    def ok(self) -> bool:
        return isinstance(self.outcome, GenerationResult)


class NodeExecutor:
    """Runs LLM nodes against a dispatcher and writes results into a store."""

    def __init__(self, store: GraphStore, dispatcher: Dispatcher):
        self.store = store
        self.dispatcher = dispatcher
        self.active_node_id: Optional[str] = None
        self._tokens = itertools.count(1)
        self._latest: Dict[str, int] = {}

    def build_request(self, data: LLMNodeData) -> GenerationRequest:
        return GenerationRequest(
            provider=data.model,
            prompt=data.input_value or "",
            credential=data.api_key,
            max_tokens=data.max_tokens,
            temperature=data.temperature,
        )

    async def execute(self, node_id: str) -> ExecutionResult:
        """Execute an LLM node.

        Raises:
            UnknownNode: If the node does not exist
            NotExecutable: If the node is not an LLM node
        """
        node = self.store.get_node(node_id)
        if node.kind != NodeKind.LLM:
            raise NotExecutable(node_id, node.kind.value)

        snapshot = self.store.get_node_data(node_id)
        epoch = self.store.node_epoch(node_id)
        token = next(self._tokens)
        self._latest[node_id] = token
        self.active_node_id = node_id

        logger.info(f"Executing node {node_id} with {snapshot.model} (token {token})")
        try:
            outcome = await self.dispatcher.generate(self.build_request(snapshot))
            current = self._is_current(node_id, token, epoch)
        finally:
            if self._latest.get(node_id) == token:
                del self._latest[node_id]

        if not current:
            logger.info(f"Discarding stale result for node {node_id} (token {token})")
            return ExecutionResult(node_id=node_id, outcome=outcome, committed=False)

        if isinstance(outcome, GenerationError):
            self.store.update_node_data(node_id, {"error": outcome.message})
            logger.error(f"Node {node_id} failed: {outcome.kind.value}: {outcome.message}")
        else:
            self.store.update_node_data(node_id, {"output": outcome.text, "error": None})
            logger.info(f"Node {node_id} produced {len(outcome.text)} chars")
        return ExecutionResult(node_id=node_id, outcome=outcome, committed=True)

    def active_config(self) -> Optional[LLMNodeData]:
        """Data of the most recently executed LLM node, if it still exists."""
        if self.active_node_id is None or not self.store.has_node(self.active_node_id):
            return None
        data = self.store.get_node_data(self.active_node_id)
        return data if isinstance(data, LLMNodeData) else None

    @property
    def in_flight(self) -> List[str]:
        """Nodes whose most recent execution has not returned yet."""
        return list(self._latest)

    def _is_current(self, node_id: str, token: int, epoch: int) -> bool:
        if self._latest.get(node_id) != token:
            return False
        if not self.store.has_node(node_id):
            return False
        return self.store.node_epoch(node_id) == epoch
