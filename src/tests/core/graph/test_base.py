"""Tests for the graph store."""

import pytest

from llmflow.core.errors import (
    DuplicateEdge,
    DuplicateNode,
    GraphIntegrityError,
    InvalidEdge,
    InvalidNodeData,
    UnknownNode,
)
from llmflow.core.graph import (
    Edge,
    GraphStore,
    LLMNodeData,
    Node,
    NodeKind,
    OutputNodeData,
)


class TestNodeManagement:
    """Test suite for adding and removing nodes."""

    def test_add_node_with_default_data(self, store: GraphStore):
        store.add_node(Node(id="llm", kind=NodeKind.LLM))
        assert store.has_node("llm")
        assert isinstance(store.get_node_data("llm"), LLMNodeData)

    def test_add_node_with_data(self, store: GraphStore):
        store.add_node(Node(id="llm", kind=NodeKind.LLM), LLMNodeData(model="gpt-4"))
        assert store.get_node_data("llm").model == "gpt-4"

    def test_add_node_with_mismatched_data(self, store: GraphStore):
        with pytest.raises(InvalidNodeData):
            store.add_node(Node(id="llm", kind=NodeKind.LLM), OutputNodeData())
        assert not store.has_node("llm")

    def test_add_duplicate_node(self, store: GraphStore):
        store.add_node(Node(id="a", kind=NodeKind.INPUT))
        with pytest.raises(DuplicateNode):
            store.add_node(Node(id="a", kind=NodeKind.OUTPUT))

    def test_remove_node_cascades(self, pipeline: GraphStore):
        pipeline.remove_node("llm")
        assert not pipeline.has_node("llm")
        assert pipeline.list_edges() == []
        with pytest.raises(UnknownNode):
            pipeline.get_node_data("llm")
        assert pipeline.validate() == []

    def test_remove_missing_node(self, store: GraphStore):
        with pytest.raises(UnknownNode):
            store.remove_node("ghost")

    def test_epoch_changes_on_readd(self, store: GraphStore):
        store.add_node(Node(id="a", kind=NodeKind.LLM))
        first = store.node_epoch("a")
        store.remove_node("a")
        store.add_node(Node(id="a", kind=NodeKind.LLM))
        assert store.node_epoch("a") != first

    def test_integrity_errors_are_value_errors(self, store: GraphStore):
        with pytest.raises(ValueError):
            store.get_node("ghost")
        assert issubclass(UnknownNode, GraphIntegrityError)


class TestEdgeManagement:
    """Test suite for edges."""

    def test_edges_keep_insertion_order(self, pipeline: GraphStore):
        assert [edge.key for edge in pipeline.list_edges()] == [("input", "llm"), ("llm", "output")]
        assert pipeline.successors("llm") == ["output"]
        assert pipeline.predecessors("llm") == ["input"]

    def test_edge_to_missing_node(self, pipeline: GraphStore):
        with pytest.raises(InvalidEdge):
            pipeline.add_edge(Edge(source="llm", target="ghost"))
        with pytest.raises(InvalidEdge):
            pipeline.add_edge(Edge(source="ghost", target="llm"))

    def test_duplicate_edge(self, pipeline: GraphStore):
        with pytest.raises(DuplicateEdge):
            pipeline.add_edge(Edge(source="input", target="llm"))

    def test_remove_edge(self, pipeline: GraphStore):
        pipeline.remove_edge("input", "llm")
        assert [edge.key for edge in pipeline.list_edges()] == [("llm", "output")]
        with pytest.raises(InvalidEdge):
            pipeline.remove_edge("input", "llm")

    def test_list_edges_is_a_copy(self, pipeline: GraphStore):
        pipeline.list_edges().clear()
        assert len(pipeline.list_edges()) == 2


class TestUpdateNodeData:
    """Test suite for the single mutation path."""

    def test_update_missing_node(self, store: GraphStore):
        with pytest.raises(UnknownNode):
            store.update_node_data("ghost", {"value": "x"})

    def test_empty_partial_changes_nothing(self, pipeline: GraphStore):
        before = pipeline.get_node_data("llm")
        after = pipeline.update_node_data("llm", {})
        assert after == before
        assert pipeline.get_node_data("output").value == ""

    def test_snapshots_are_immutable(self, pipeline: GraphStore):
        snapshot = pipeline.get_node_data("llm")
        pipeline.update_node_data("llm", {"model": "gpt-4"})
        assert snapshot.model == "gpt-3.5-turbo"
        assert pipeline.get_node_data("llm").model == "gpt-4"

    def test_validate_clean_graph(self, pipeline: GraphStore):
        assert pipeline.validate() == []
