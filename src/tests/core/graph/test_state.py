"""Tests for graph entities and node data variants."""

import pytest
from pydantic import ValidationError

from llmflow.core.errors import InvalidNodeData
from llmflow.core.graph.state import (
    Edge,
    InputNodeData,
    LLMNodeData,
    Node,
    NodeKind,
    OutputNodeData,
    default_node_data,
    merge_node_data,
    parse_node_data,
)


class TestEntities:
    """Test suite for nodes and edges."""

    def test_node_requires_id(self):
        with pytest.raises(ValidationError):
            Node(id="", kind=NodeKind.INPUT)

    def test_node_is_frozen(self):
        node = Node(id="a", kind=NodeKind.LLM)
        with pytest.raises(ValidationError):
            node.id = "b"

    def test_edge_key(self):
        assert Edge(source="a", target="b").key == ("a", "b")


class TestNodeData:
    """Test suite for the data variants."""

    def test_defaults_per_kind(self):
        assert isinstance(default_node_data(NodeKind.INPUT), InputNodeData)
        assert isinstance(default_node_data(NodeKind.OUTPUT), OutputNodeData)
        llm = default_node_data(NodeKind.LLM)
        assert isinstance(llm, LLMNodeData)
        assert llm.model == "gpt-3.5-turbo"
        assert llm.max_tokens == 1000
        assert llm.temperature == 0.7
        assert llm.output is None

    def test_camel_case_aliases(self):
        data = LLMNodeData.model_validate({"apiKey": "sk-1", "maxTokens": 50, "inputValue": "hi"})
        assert data.api_key == "sk-1"
        assert data.max_tokens == 50
        assert data.input_value == "hi"

    def test_api_key_hidden_from_repr(self):
        assert "sk-secret" not in repr(LLMNodeData(api_key="sk-secret"))

    def test_parse_by_kind(self):
        data = parse_node_data({"kind": "output", "value": "done"})
        assert isinstance(data, OutputNodeData)
        assert data.value == "done"

    def test_parse_unknown_kind(self):
        with pytest.raises(ValidationError):
            parse_node_data({"kind": "image"})


class TestMerge:
    """Test suite for shallow merging."""

    def test_untouched_fields_survive(self):
        current = LLMNodeData(model="gpt-4", api_key="k", input_value="q")
        merged, effective = merge_node_data("llm", current, {"temperature": 0.2})
        assert merged.temperature == 0.2
        assert merged.model == "gpt-4"
        assert merged.input_value == "q"
        assert effective == {"temperature": 0.2}

    def test_empty_partial_is_identity(self):
        current = LLMNodeData(model="gpt-4")
        merged, effective = merge_node_data("llm", current, {})
        assert merged is current
        assert effective == {}

    def test_input_value_mirrors_to_output(self):
        merged, effective = merge_node_data("in", InputNodeData(), {"value": "hello"})
        assert merged.output == "hello"
        assert effective["output"] == "hello"

    def test_unknown_field_rejected(self):
        with pytest.raises(InvalidNodeData):
            merge_node_data("out", OutputNodeData(), {"colour": "red"})

    def test_kind_change_rejected(self):
        with pytest.raises(InvalidNodeData):
            merge_node_data("out", OutputNodeData(), {"kind": "llm"})

    def test_wrong_type_rejected(self):
        with pytest.raises(InvalidNodeData):
            merge_node_data("llm", LLMNodeData(), {"max_tokens": "many"})
