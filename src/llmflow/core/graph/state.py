"""Graph entities and per-node data.

This module provides:
1. NodeKind: the three node types a workflow is built from
2. Node and Edge: the graph shape
3. InputNodeData, LLMNodeData, OutputNodeData: one immutable data variant
   per node kind, tagged by ``kind``
4. merge_node_data: the shallow-merge rule behind ``GraphStore.update_node_data``
"""

from enum import Enum
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from llmflow.core.errors import InvalidNodeData

OUTPUT_FIELD = "output"


class NodeKind(str, Enum):
    """Node types."""
    INPUT = "input"
    LLM = "llm"
    OUTPUT = "output"


class Node(BaseModel):
    """A typed unit in the workflow graph."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique identifier for this node")
    kind: NodeKind
    label: Optional[str] = None

    @field_validator("id")
    @classmethod
    def validate_id(cls, value: str) -> str:
        if not value:
            raise ValueError("Node must have an ID")
        return value


class Edge(BaseModel):
    """A directed connection from one node's output to another node's input."""
    model_config = ConfigDict(frozen=True)

    source: str
    target: str

    @property
    def key(self) -> tuple:
        return (self.source, self.target)


class BaseNodeData(BaseModel):
    # camelCase names from the wire are accepted next to the Python names
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @classmethod
    def normalize_partial(cls, partial: Dict[str, Any]) -> Dict[str, Any]:
        """Rewrite camelCase keys to field names; unknown keys are kept for validation to reject."""
        by_alias = {field.alias: name for name, field in cls.model_fields.items() if field.alias}
        return {by_alias.get(key, key): value for key, value in partial.items()}

    def effective_partial(self, partial: Dict[str, Any]) -> Dict[str, Any]:
        """Return the fields an update actually writes. Variants may derive extra fields."""
        return partial


class InputNodeData(BaseNodeData):
    """Text typed by the user. The value is also the node's output."""
    kind: Literal["input"] = "input"
    value: str = ""
    output: Optional[str] = None

    def effective_partial(self, partial: Dict[str, Any]) -> Dict[str, Any]:
        if "value" in partial and OUTPUT_FIELD not in partial:
            return {**partial, OUTPUT_FIELD: partial["value"]}
        return partial


class LLMNodeData(BaseNodeData):
    """Configuration and last result of an LLM call node."""
    kind: Literal["llm"] = "llm"
    model: str = "gpt-3.5-turbo"
    api_key: str = Field(default="", repr=False)
    max_tokens: int = 1000
    temperature: float = 0.7
    input_value: Optional[str] = None
    output: Optional[str] = None
    error: Optional[str] = None


class OutputNodeData(BaseNodeData):
    """Text displayed by an output node."""
    kind: Literal["output"] = "output"
    value: str = ""


NodeData = Annotated[
    Union[InputNodeData, LLMNodeData, OutputNodeData],
    Field(discriminator="kind"),
]

_node_data_adapter = TypeAdapter(NodeData)

_DEFAULTS = {
    NodeKind.INPUT: InputNodeData,
    NodeKind.LLM: LLMNodeData,
    NodeKind.OUTPUT: OutputNodeData,
}


def default_node_data(kind: NodeKind) -> BaseNodeData:
    """Empty data variant for a node kind."""
    return _DEFAULTS[kind]()


def parse_node_data(payload: Dict[str, Any]) -> BaseNodeData:
    """Build a data variant from a tagged mapping such as ``{"kind": "llm", ...}``."""
    return _node_data_adapter.validate_python(payload)


def merge_node_data(node_id: str, current: BaseNodeData, partial: Dict[str, Any]) -> tuple:
    """Shallow-merge ``partial`` into ``current``.

    Returns:
        Tuple of (new data, effective partial). Fields absent from the
        partial keep their current values.

    Raises:
        InvalidNodeData: If the partial names an unknown field, changes the
            variant tag, or carries a value of the wrong type.
    """
    normalized = type(current).normalize_partial(partial)
    if "kind" in normalized and normalized["kind"] != current.kind:
        raise InvalidNodeData(node_id, "the data variant cannot change kind")
    effective = current.effective_partial(normalized)
    if not effective:
        return current, effective
    try:
        merged = type(current).model_validate({**current.model_dump(), **effective})
    except ValidationError as e:
        raise InvalidNodeData(node_id, str(e)) from e
    return merged, effective
