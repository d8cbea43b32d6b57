"""Tests for one-hop output propagation."""

import pytest

from llmflow.core.graph import (
    Edge,
    GraphStore,
    LLMNodeData,
    Node,
    NodeKind,
    PropagationEngine,
)
from llmflow.core.graph.propagation import default_rules


class TestPropagation:
    """Test suite for how produced values reach successors."""

    def test_output_target_receives_value(self, store: GraphStore):
        store.add_node(Node(id="A", kind=NodeKind.INPUT))
        store.add_node(Node(id="B", kind=NodeKind.OUTPUT))
        store.add_edge(Edge(source="A", target="B"))

        store.update_node_data("A", {"output": "hi"})
        assert store.get_node_data("B").value == "hi"

    def test_llm_target_keeps_its_configuration(self, store: GraphStore):
        store.add_node(Node(id="A", kind=NodeKind.INPUT))
        store.add_node(
            Node(id="B", kind=NodeKind.LLM),
            LLMNodeData(model="gpt-4", api_key="k", max_tokens=100, temperature=0.5),
        )
        store.add_edge(Edge(source="A", target="B"))

        store.update_node_data("A", {"output": "hi"})
        data = store.get_node_data("B")
        assert data.input_value == "hi"
        assert (data.model, data.api_key, data.max_tokens, data.temperature) == ("gpt-4", "k", 100, 0.5)

    def test_typing_into_input_propagates(self, pipeline: GraphStore):
        pipeline.update_node_data("input", {"value": "Tell me a joke"})
        assert pipeline.get_node_data("llm").input_value == "Tell me a joke"

    def test_one_hop_only(self, pipeline: GraphStore):
        pipeline.update_node_data("input", {"value": "question"})
        assert pipeline.get_node_data("llm").output is None
        assert pipeline.get_node_data("output").value == ""

    def test_llm_output_reaches_output_node(self, pipeline: GraphStore):
        pipeline.update_node_data("llm", {"output": "answer"})
        assert pipeline.get_node_data("output").value == "answer"

    def test_input_targets_are_skipped(self, store: GraphStore):
        store.add_node(Node(id="A", kind=NodeKind.INPUT))
        store.add_node(Node(id="B", kind=NodeKind.INPUT))
        store.add_edge(Edge(source="A", target="B"))

        store.update_node_data("A", {"value": "x"})
        assert store.get_node_data("B").value == ""

    def test_fan_out(self, store: GraphStore):
        store.add_node(Node(id="A", kind=NodeKind.INPUT))
        for target in ("B", "C"):
            store.add_node(Node(id=target, kind=NodeKind.OUTPUT))
            store.add_edge(Edge(source="A", target=target))

        store.update_node_data("A", {"value": "both"})
        assert store.get_node_data("B").value == "both"
        assert store.get_node_data("C").value == "both"

    def test_last_write_wins(self, store: GraphStore):
        for source in ("A", "B"):
            store.add_node(Node(id=source, kind=NodeKind.INPUT))
        store.add_node(Node(id="C", kind=NodeKind.OUTPUT))
        store.add_edge(Edge(source="A", target="C"))
        store.add_edge(Edge(source="B", target="C"))

        store.update_node_data("A", {"value": "from A"})
        store.update_node_data("B", {"value": "from B"})
        assert store.get_node_data("C").value == "from B"

    def test_empty_string_propagates(self, store: GraphStore):
        store.add_node(Node(id="A", kind=NodeKind.INPUT))
        store.add_node(Node(id="B", kind=NodeKind.OUTPUT))
        store.add_edge(Edge(source="A", target="B"))
        store.update_node_data("A", {"value": "x"})

        store.update_node_data("A", {"value": ""})
        assert store.get_node_data("B").value == ""

    def test_none_output_does_not_propagate(self, pipeline: GraphStore):
        pipeline.update_node_data("llm", {"output": "kept"})
        pipeline.update_node_data("llm", {"output": None})
        assert pipeline.get_node_data("output").value == "kept"

    def test_error_field_does_not_propagate(self, pipeline: GraphStore):
        pipeline.update_node_data("llm", {"error": "failed"})
        assert pipeline.get_node_data("output").value == ""

    def test_propagate_returns_targets(self, pipeline: GraphStore):
        engine = PropagationEngine()
        assert engine.propagate(pipeline, "input", "x") == ["llm"]


class TestRules:
    """Test suite for the per-kind rule table."""

    def test_custom_rule(self):
        rules = default_rules()
        rules[NodeKind.INPUT] = "value"
        store = GraphStore(engine=PropagationEngine(rules=rules))
        store.add_node(Node(id="A", kind=NodeKind.INPUT))
        store.add_node(Node(id="B", kind=NodeKind.INPUT))
        store.add_edge(Edge(source="A", target="B"))

        store.update_node_data("A", {"value": "copied"})
        assert store.get_node_data("B").value == "copied"

    def test_rule_cannot_write_output(self, pipeline: GraphStore):
        rules = default_rules()
        rules[NodeKind.LLM] = "output"
        with pytest.raises(ValueError):
            PropagationEngine(rules=rules).propagate(pipeline, "input", "x")
