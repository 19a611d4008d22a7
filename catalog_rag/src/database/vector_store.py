"""
Catalog RAG - ProductVectorIndex & RAGState
=============================================
In-memory vector index over the product catalog, plus the process state
object that owns the currently published index.

Design decisions:
  • **In-memory only** — the catalog is small and fixed, so vectors live
    in one row-normalised ``numpy`` matrix; similarity is a single
    matrix-vector product.
  • **Dependency Injection** — the embedder is injected, never
    hard-coded, making the index testable with fake embedders.
  • **Batch embedding** — catalog texts are embedded in batches of
    ``settings.EMBED_BATCH_SIZE``.
  • **All-or-nothing build** — ``ProductVectorIndex.build`` either
    returns a complete index or raises ``IndexBuildError``.
    ``RAGState`` publishes a finished index with one reference
    assignment, so readers never observe a half-built index.

Usage:
    from catalog_rag.src.database.vector_store import RAGState, create_embedder

    state = RAGState()
    state.initialize(products, create_embedder())
    hits = state.search("wireless headphones", k=3)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import numpy as np

from catalog_rag.config.settings import settings
from catalog_rag.src.core.catalog import Product, ProductDocument, to_documents
from catalog_rag.src.core.exceptions import IndexBuildError, InitializationError, NotReadyError, ProviderError
from catalog_rag.src.utils.logger import get_logger

logger = get_logger(__name__)


# ── Embedder Protocol ─────────────────────────────────────────────────

@runtime_checkable
class Embedder(Protocol):
    """Structural type for any LangChain-compatible embedding model."""

    def embed_documents(self, texts: list[str]) -> list[list[float]]: ...

    def embed_query(self, text: str) -> list[float]: ...


def create_embedder() -> Embedder:
    """Build the Gemini embedding model configured in settings."""
    from langchain_google_genai import GoogleGenerativeAIEmbeddings

    embedder = GoogleGenerativeAIEmbeddings(model=settings.EMBEDDING_MODEL, google_api_key=settings.GOOGLE_API_KEY.get_secret_value())
    logger.info("Embedder initialised: %s", settings.EMBEDDING_MODEL)
    return embedder


@dataclass(frozen=True, slots=True)
class SearchHit:
    document: ProductDocument
    score: float


def _normalize_rows(matrix: np.ndarray) -> np.ndarray:
    norms = np.linalg.norm(matrix, axis=1, keepdims=True)
    norms[norms == 0] = 1.0
    return matrix / norms


class ProductVectorIndex:
    """
    Immutable cosine-similarity index: one vector per ``ProductDocument``.

    Build instances with ``ProductVectorIndex.build``; the constructor
    expects already-validated, row-aligned inputs.
    """

    __slots__ = ("_documents", "_matrix", "_embedder")

    def __init__(self, documents: Sequence[ProductDocument], matrix: np.ndarray, embedder: Embedder) -> None:
        self._documents: tuple[ProductDocument, ...] = tuple(documents)
        self._matrix: np.ndarray = _normalize_rows(matrix)
        self._embedder: Embedder = embedder


    @classmethod
    def build(cls, documents: Sequence[ProductDocument], embedder: Embedder, batch_size: int | None = None) -> ProductVectorIndex:
        """
        Embed every document and return a complete index.

        Parameters
        ----------
        documents
            Documents in catalog order.  Order is preserved and used to
            break similarity ties.
        embedder
            Provider for ``embed_documents``; also kept for queries so
            both sides use the same model.
        batch_size
            Texts per embedding request.  Defaults to
            ``settings.EMBED_BATCH_SIZE``.

        Raises
        ------
        IndexBuildError
            If there are no documents, any batch fails, or the provider
            returns a wrong number of vectors, ragged dimensions or
            values that are not numbers.
        """
        if not documents:
            raise IndexBuildError("Cannot build an index from an empty catalog.")

        size = batch_size or settings.EMBED_BATCH_SIZE
        texts = [doc.content for doc in documents]
        logger.info("Embedding %d documents in batches of %d …", len(texts), size)

        vectors: list[list[float]] = []
        for i in range(0, len(texts), size):
            batch = texts[i : i + size]
            try:
                batch_vectors = list(embedder.embed_documents(batch))
            except Exception as exc:
                logger.error("Embedding batch %d–%d failed: %s", i, i + len(batch) - 1, exc)
                raise IndexBuildError(f"Embedding batch {i}–{i + len(batch) - 1} failed: {exc}") from exc
            if len(batch_vectors) != len(batch):
                raise IndexBuildError(f"Embedding batch {i}–{i + len(batch) - 1} returned {len(batch_vectors)} vectors for {len(batch)} texts.")
            vectors.extend(batch_vectors)

        try:
            dimensions = {len(v) for v in vectors}
        except TypeError as exc:
            raise IndexBuildError(f"Embedding provider returned a non-vector item: {exc}") from exc
        if len(dimensions) != 1 or 0 in dimensions:
            raise IndexBuildError(f"Embedding provider returned inconsistent dimensions: {sorted(dimensions)}.")

        try:
            matrix = np.asarray(vectors, dtype=np.float32)
        except (TypeError, ValueError) as exc:
            raise IndexBuildError(f"Embedding provider returned non-numeric vectors: {exc}") from exc
        if matrix.ndim != 2:
            raise IndexBuildError(f"Embedding provider returned nested vectors of shape {matrix.shape}.")
        logger.info("Index built: %d vectors × %d dimensions.", matrix.shape[0], matrix.shape[1])
        return cls(documents, matrix, embedder)


    def search(self, query_text: str, k: int = 3) -> list[SearchHit]:
        """
        Return the ``k`` documents most similar to ``query_text``.

        Hits are ordered by descending cosine similarity; equal scores
        keep catalog order.

        Raises
        ------
        ProviderError
            If the query embedding fails or has the wrong dimensionality.
        """
        if k <= 0:
            return []

        try:
            query_vector = np.asarray(self._embedder.embed_query(query_text), dtype=np.float32)
        except Exception as exc:
            logger.error("Failed to embed query: %s", exc)
            raise ProviderError(f"Query embedding failed: {exc}") from exc

        if query_vector.ndim != 1 or query_vector.shape[0] != self.dimension:
            raise ProviderError(f"Query vector has shape {query_vector.shape}, index expects ({self.dimension},).")

        norm = float(np.linalg.norm(query_vector))
        if norm > 0:
            query_vector = query_vector / norm

        scores = self._matrix @ query_vector
        order = np.argsort(-scores, kind="stable")[:k]
        hits = [SearchHit(document=self._documents[i], score=float(scores[i])) for i in order]
        logger.debug("Search returned %d hits (k=%d).", len(hits), k)
        return hits


    @property
    def documents(self) -> tuple[ProductDocument, ...]:
        return self._documents


    @property
    def dimension(self) -> int:
        return int(self._matrix.shape[1])


    def __len__(self) -> int:
        return len(self._documents)


    def __repr__(self) -> str:
        return f"ProductVectorIndex(vectors={len(self)}, dimension={self.dimension})"


class RAGState:
    """
    Owns the published index and the ready flag.

    One instance lives on the FastAPI application and is injected into
    request handlers.  ``initialize`` is the only writer; searches only
    read.  Concurrent ``initialize`` calls are last-write-wins.
    """

    __slots__ = ("_index", "_ready")

    def __init__(self) -> None:
        self._index: ProductVectorIndex | None = None
        self._ready: bool = False


    @property
    def ready(self) -> bool:
        return self._ready and self._index is not None


    @property
    def index(self) -> ProductVectorIndex | None:
        return self._index


    def initialize(self, products: Sequence[Product], embedder: Embedder, batch_size: int | None = None) -> ProductVectorIndex:
        """
        Rebuild the index from ``products`` and publish it.

        Raises
        ------
        InitializationError
            If the build fails.  The previously published index, if any,
            stays in place.
        """
        logger.info("Starting RAG initialization with %d products …", len(products))
        try:
            index = ProductVectorIndex.build(to_documents(products), embedder, batch_size=batch_size)
        except IndexBuildError as exc:
            logger.error("RAG initialization failed: %s", exc)
            raise InitializationError(str(exc)) from exc

        self._index = index
        self._ready = True
        logger.info("RAG index published: %r", index)
        return index


    def search(self, query_text: str, k: int = 3) -> list[SearchHit]:
        index = self._index
        if not self._ready or index is None:
            raise NotReadyError("RAG index has not been initialized.")
        return index.search(query_text, k)
