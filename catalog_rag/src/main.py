"""
Catalog RAG - Application Entry Point
=======================================
FastAPI application factory.  ``create_app`` registers the routes from
``catalog_rag.src.api.routes`` (at ``/`` and under ``/api``), mounts the
optional static front-end, and wires shared resources in the lifespan:

  1. Load the product catalog (fatal on a missing / malformed file).
  2. Create the embedder and an empty ``RAGState``.
  3. Create the ``CatalogQueryService`` around that state.

Collaborators can be injected for tests; anything left as ``None`` is
built from ``settings``.

Run:
    python -m catalog_rag.src.main
    uvicorn catalog_rag.src.main:app --port 3000
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from catalog_rag.config.settings import settings
from catalog_rag.src.api.routes import router
from catalog_rag.src.core.catalog import Product, load_catalog
from catalog_rag.src.core.rag_engine import CatalogQueryService, ChatModel
from catalog_rag.src.database.vector_store import Embedder, RAGState, create_embedder
from catalog_rag.src.utils.logger import get_logger

logger = get_logger(__name__)


def create_app(products: Sequence[Product] | None = None, embedder: Embedder | None = None, llm: ChatModel | None = None, static_dir: Path | str | None = None) -> FastAPI:
    """Build the FastAPI app.  Shared state lives on ``app.state``."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        catalog = tuple(products) if products is not None else load_catalog(settings.CATALOG_PATH)
        state = RAGState()

        app.state.catalog = catalog
        app.state.embedder = embedder if embedder is not None else create_embedder()
        app.state.rag_state = state
        app.state.query_service = CatalogQueryService(state, llm=llm)

        logger.info("Catalog RAG ready to serve %d products. POST /api/init to build the index.", len(catalog))
        yield

    app = FastAPI(title="Catalog RAG", lifespan=lifespan)
    app.include_router(router)
    app.include_router(router, prefix="/api")

    static_path = Path(static_dir) if static_dir is not None else settings.STATIC_DIR
    if static_path.is_dir():
        app.mount("/", StaticFiles(directory=static_path, html=True), name="static")
        logger.info("Serving static files from %s", static_path)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
