from __future__ import annotations

import os
from collections.abc import Iterator

# Settings are instantiated at import time and require an API key.
os.environ.setdefault("GOOGLE_API_KEY", "test-google-api-key")

import pytest
from fastapi.testclient import TestClient

from catalog_rag.src.core.catalog import Product
from catalog_rag.src.core.rag_engine import CatalogQueryService
from catalog_rag.src.database.vector_store import RAGState
from catalog_rag.src.main import create_app
from tests.fakes import FakeChatModel, KeywordEmbedder


@pytest.fixture
def products() -> tuple[Product, ...]:
    return (
        Product(id=1, name="Wireless Headphones", description="Over-ear headphones with noise cancellation", category="Electronics", price=199.99),
        Product(id=2, name="Office Chair", description="Ergonomic chair with lumbar support", category="Furniture", price=249),
        Product(id=3, name="Bluetooth Speaker", description="Portable wireless speaker", category="Electronics", price=79.5),
        Product(id=4, name="Espresso Machine", description="Espresso and coffee maker", category="Kitchen", price=459),
        Product(id=5, name="Yoga Mat", description="Non-slip yoga mat", category="Fitness", price=34.99),
    )


@pytest.fixture
def embedder() -> KeywordEmbedder:
    return KeywordEmbedder()


@pytest.fixture
def chat_model() -> FakeChatModel:
    return FakeChatModel()


@pytest.fixture
def state() -> RAGState:
    return RAGState()


@pytest.fixture
def ready_state(state: RAGState, products: tuple[Product, ...], embedder: KeywordEmbedder) -> RAGState:
    state.initialize(products, embedder)
    return state


@pytest.fixture
def service(state: RAGState, chat_model: FakeChatModel) -> CatalogQueryService:
    return CatalogQueryService(state, llm=chat_model, top_k=3)


@pytest.fixture
def client(products: tuple[Product, ...], embedder: KeywordEmbedder, chat_model: FakeChatModel) -> Iterator[TestClient]:
    app = create_app(products=products, embedder=embedder, llm=chat_model)
    with TestClient(app) as test_client:
        yield test_client
