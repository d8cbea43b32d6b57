"""Shared test fixtures."""

import pytest

from llmflow.core.config import DispatchConfig
from llmflow.core.dispatch import Dispatcher
from llmflow.core.graph import Edge, GraphStore, Node, NodeKind
from llmflow.core.providers import DeclaredRange, ProviderRegistry, default_registry
from tests.fakes import EchoAdapter, FakeTransport, echo_responder


@pytest.fixture
def dispatch_config() -> DispatchConfig:
    """Dispatch policy with no wait between attempts."""
    return DispatchConfig(timeout=5.0, retry_count=1, retry_wait=0)


@pytest.fixture
def echo_adapter() -> EchoAdapter:
    return EchoAdapter(
        provider_id="echo",
        model="echo-1",
        base_url="http://echo.test",
        limits=DeclaredRange(max_tokens_range=(1, 100), temperature_range=(0.0, 1.0)),
    )


@pytest.fixture
def registry(echo_adapter: EchoAdapter) -> ProviderRegistry:
    """The default providers plus the echo provider."""
    registry = default_registry()
    registry.register(echo_adapter)
    return registry


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport(responder=echo_responder)


@pytest.fixture
def dispatcher(registry: ProviderRegistry, transport: FakeTransport, dispatch_config: DispatchConfig) -> Dispatcher:
    return Dispatcher(registry=registry, transport=transport, config=dispatch_config)


@pytest.fixture
def store() -> GraphStore:
    return GraphStore()


@pytest.fixture
def pipeline(store: GraphStore) -> GraphStore:
    """input -> llm -> output."""
    store.add_node(Node(id="input", kind=NodeKind.INPUT))
    store.add_node(Node(id="llm", kind=NodeKind.LLM))
    store.add_node(Node(id="output", kind=NodeKind.OUTPUT))
    store.add_edge(Edge(source="input", target="llm"))
    store.add_edge(Edge(source="llm", target="output"))
    return store
