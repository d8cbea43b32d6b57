"""One-hop propagation of a node's output to the nodes it feeds.

When a node's ``output`` is written, every edge leaving that node is
walked once and the value is written into the target according to the
target's kind:

    llm    -> ``input_value`` (configuration fields are untouched)
    output -> ``value``
    input  -> nothing; inputs are never computed

The writes go back through ``GraphStore.update_node_data`` and never name
``output`` themselves, so a propagation never triggers another one. A
target only fans out further when it is executed and writes its own
output.
"""

from typing import Dict, List, Optional, TYPE_CHECKING

from pydantic import BaseModel, Field

from llmflow.core.logging import get_logger, log_verbose, LogComponent, LoggingConfig
from llmflow.core.graph.state import NodeKind, OUTPUT_FIELD

if TYPE_CHECKING:
    from llmflow.core.graph.base import GraphStore

logger = get_logger(LogComponent.PROPAGATION)


def default_rules() -> Dict[NodeKind, Optional[str]]:
    return {
        NodeKind.LLM: "input_value",
        NodeKind.OUTPUT: "value",
        NodeKind.INPUT: None,
    }


class PropagationEngine(BaseModel):
    """Pushes a produced value to directly connected downstream nodes.

    Attributes:
        rules: Target kind -> name of the field the produced value is
            written into. ``None`` means the kind does not accept values.
        logging_config: Controls whether each hop is logged at INFO
    """
    rules: Dict[NodeKind, Optional[str]] = Field(default_factory=default_rules)
    logging_config: LoggingConfig = Field(default_factory=LoggingConfig)

    def propagate(self, store: "GraphStore", source_id: str, value: str) -> List[str]:
        """Write ``value`` into every direct successor of ``source_id``.

        Edges are visited in insertion order, so when several sources feed
        the same target the last write wins.

        Returns:
            IDs of the targets that were written.
        """
        updated: List[str] = []
        for edge in store.list_edges():
            if edge.source != source_id:
                continue
            target = store.get_node(edge.target)
            field = self.rules.get(target.kind)
            if field is None:
                log_verbose(logger, f"Skipping {source_id} -> {target.id}: {target.kind.value} nodes take no input")
                continue
            if field == OUTPUT_FIELD:
                raise ValueError(f"Propagation rule for '{target.kind.value}' must not write '{OUTPUT_FIELD}'")
            store.update_node_data(target.id, {field: value})
            updated.append(target.id)
            if self.logging_config.show_propagation:
                logger.info(f"Propagated {source_id} -> {target.id}.{field}")
            else:
                logger.debug(f"Propagated {source_id} -> {target.id}.{field}")
        return updated
