"""
Catalog RAG - API Route Definitions
=====================================
REST endpoints:
  - POST /init    → Build (or rebuild) the product vector index
  - POST /search  → Answer a product question, with retrieval once ready
  - GET  /health  → Liveness + readiness check

Each route handler is a thin controller: it validates the incoming
request, delegates to ``RAGState`` / ``CatalogQueryService`` pulled from
``app.state`` via dependencies, and formats the response.  No retrieval
or prompt logic lives in this file.

The router is mounted twice by ``catalog_rag.src.main``: at the root
and under ``/api``.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from catalog_rag.config.prompt_templates import INIT_FAILED_ERROR, INIT_SUCCESS_MESSAGE
from catalog_rag.src.core.catalog import Product
from catalog_rag.src.core.exceptions import CatalogRAGError
from catalog_rag.src.core.rag_engine import CatalogQueryService
from catalog_rag.src.database.vector_store import Embedder, RAGState
from catalog_rag.src.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


class SearchRequest(BaseModel):
    query: str


class SearchResponse(BaseModel):
    products: list[dict[str, Any]]
    response: str
    ragReady: bool


# ── Dependencies ───────────────────────────────────────────────────────

def get_rag_state(request: Request) -> RAGState:
    return request.app.state.rag_state


def get_catalog(request: Request) -> tuple[Product, ...]:
    return request.app.state.catalog


def get_embedder(request: Request) -> Embedder:
    return request.app.state.embedder


def get_query_service(request: Request) -> CatalogQueryService:
    return request.app.state.query_service


# ── Routes ─────────────────────────────────────────────────────────────

# Plain ``def``: the index build blocks on the embedding API, so FastAPI
# runs it in the threadpool.
@router.post("/init")
def init_index(state: RAGState = Depends(get_rag_state), catalog: tuple[Product, ...] = Depends(get_catalog), embedder: Embedder = Depends(get_embedder)):
    try:
        state.initialize(catalog, embedder)
    except CatalogRAGError:
        logger.exception("Initialization error.")
        return JSONResponse(status_code=500, content={"error": INIT_FAILED_ERROR})
    return {"message": INIT_SUCCESS_MESSAGE}


@router.post("/search", response_model=SearchResponse)
async def search(body: SearchRequest, service: CatalogQueryService = Depends(get_query_service)):
    outcome = await service.handle_search(body.query)
    payload = SearchResponse(products=outcome.products, response=outcome.response, ragReady=outcome.rag_ready)
    if outcome.failed:
        return JSONResponse(status_code=500, content={"error": outcome.error, **payload.model_dump()})
    return payload


@router.get("/health")
def health(state: RAGState = Depends(get_rag_state), catalog: tuple[Product, ...] = Depends(get_catalog)):
    return {"status": "ok", "ragReady": state.ready, "products": len(catalog)}
