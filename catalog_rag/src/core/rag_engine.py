"""
Catalog RAG - Query Engine
===========================
Orchestrates one product search: retrieve → build prompt → generate →
normalise the reply.

Architecture
------------
``TextReply`` / ``StructuredReply`` / ``EmptyReply``
    Tagged union over the shapes a chat model reply can take.
    ``classify_reply`` picks the variant once; ``extract_response_text``
    turns any variant into the single string the API returns.

``CatalogQueryService``
    Request orchestrator.  Flow:
        1. Ready?  no  → generic system prompt, no products
                   yes → top-K search, product context system prompt
        2. Call Gemini → one async LLM invocation
        3. Normalise the reply → plain text
        4. Any failure → degraded ``SearchOutcome`` (logged, never raised)

Usage:
    from catalog_rag.src.core.rag_engine import CatalogQueryService
    service = CatalogQueryService(state)
    outcome = await service.handle_search("wireless headphones")
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from catalog_rag.config.prompt_templates import GENERIC_SYSTEM_PROMPT, NO_RESPONSE_TEXT, PRODUCT_SYSTEM_PROMPT_TEMPLATE, SEARCH_FAILED_ERROR, SEARCH_FAILED_RESPONSE
from catalog_rag.config.settings import settings
from catalog_rag.src.core.catalog import build_context
from catalog_rag.src.database.vector_store import RAGState, SearchHit
from catalog_rag.src.utils.logger import get_logger

logger = get_logger(__name__)

# ── Type aliases ───────────────────────────────────────────────────────
ProductPayload = dict[str, str | int | float]

# Reply attributes that may carry the generated text, in priority order.
_TEXT_FIELDS: tuple[str, ...] = ("content", "text")


# ══════════════════════════════════════════════════════════════════════
#  CHAT MODEL PROTOCOL
# ══════════════════════════════════════════════════════════════════════


@runtime_checkable
class ChatModel(Protocol):
    """Anything with LangChain's async ``ainvoke`` over a message list."""

    async def ainvoke(self, input: Sequence[BaseMessage], **kwargs: Any) -> Any: ...


def create_chat_model() -> ChatModel:
    """Initialise the Gemini LLM via LangChain."""
    from langchain_google_genai import ChatGoogleGenerativeAI

    llm = ChatGoogleGenerativeAI(model=settings.LLM_MODEL, temperature=settings.LLM_TEMPERATURE, google_api_key=settings.GOOGLE_API_KEY.get_secret_value())
    logger.info("LLM initialised: %s (temperature=%.1f)", settings.LLM_MODEL, settings.LLM_TEMPERATURE)
    return llm


# ══════════════════════════════════════════════════════════════════════
#  REPLY NORMALISATION
# ══════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class TextReply:
    text: str


@dataclass(frozen=True, slots=True)
class StructuredReply:
    """A reply object that exposed its text under ``field_name``."""

    field_name: str
    text: str


@dataclass(frozen=True, slots=True)
class EmptyReply:
    """No usable text; ``reason`` is for logs only."""

    reason: str


Reply = TextReply | StructuredReply | EmptyReply


def _content_to_text(value: object) -> str | None:
    """
    Flatten a LangChain ``content`` value into text.

    Gemini models may return ``content`` as a list of parts
    (``"text"`` strings or ``{"type": "text", "text": ...}`` dicts);
    only the text parts are kept.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        parts: list[str] = []
        for part in value:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, Mapping) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    return None


def classify_reply(reply: object) -> Reply:
    """Decide which shape a raw chat model reply has."""
    if reply is None:
        return EmptyReply("reply is None")
    if isinstance(reply, str):
        return TextReply(reply) if reply else EmptyReply("empty string")

    for field_name in _TEXT_FIELDS:
        if isinstance(reply, Mapping):
            value = reply.get(field_name)
        else:
            value = getattr(reply, field_name, None)
        text = _content_to_text(value)
        if text:
            return StructuredReply(field_name, text)

    return EmptyReply(f"no text in {type(reply).__name__}")


def extract_response_text(reply: Reply) -> str:
    if isinstance(reply, (TextReply, StructuredReply)):
        return reply.text
    return NO_RESPONSE_TEXT


# ══════════════════════════════════════════════════════════════════════
#  PROMPT CONSTRUCTION
# ══════════════════════════════════════════════════════════════════════


def build_generic_messages(query: str) -> list[BaseMessage]:
    return [SystemMessage(content=GENERIC_SYSTEM_PROMPT), HumanMessage(content=query)]


def build_product_messages(query: str, hits: Sequence[SearchHit]) -> list[BaseMessage]:
    context = build_context([hit.document.metadata for hit in hits])
    return [SystemMessage(content=PRODUCT_SYSTEM_PROMPT_TEMPLATE.format(context=context)), HumanMessage(content=query)]


def hit_to_payload(hit: SearchHit) -> ProductPayload:
    """Matched product attributes plus its cosine ``similarity``."""
    payload: ProductPayload = hit.document.metadata.model_dump()
    payload["similarity"] = round(hit.score, 4)
    return payload


# ══════════════════════════════════════════════════════════════════════
#  QUERY SERVICE
# ══════════════════════════════════════════════════════════════════════


@dataclass(slots=True)
class SearchOutcome:
    """Result of one search.  ``error`` is set only for degraded results."""

    products: list[ProductPayload] = field(default_factory=list)
    response: str = NO_RESPONSE_TEXT
    rag_ready: bool = False
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class CatalogQueryService:
    """
    Answers free-text product questions.

    Parameters
    ----------
    state
        The ``RAGState`` holding the published index (injected).
    llm
        Any ``ChatModel``.  Defaults to the Gemini model from settings.
    top_k
        Products retrieved per ready search.  Defaults to
        ``settings.SEARCH_TOP_K``.
    """

    __slots__ = ("_state", "_llm", "_top_k")

    def __init__(self, state: RAGState, llm: ChatModel | None = None, top_k: int | None = None) -> None:
        self._state = state
        self._llm = llm if llm is not None else create_chat_model()
        self._top_k = top_k if top_k is not None else settings.SEARCH_TOP_K


    @property
    def state(self) -> RAGState:
        return self._state


    async def handle_search(self, query: str) -> SearchOutcome:
        """
        Run the full search pipeline for ``query``.

        Never raises: provider and search failures are logged and turned
        into a degraded outcome with ``error`` set.
        """
        t_start = time.perf_counter()
        try:
            outcome = await self._answer(query)
        except Exception:
            logger.exception("[SEARCH] Search failed for query '%s'.", query[:50])
            return SearchOutcome(products=[], response=SEARCH_FAILED_RESPONSE, rag_ready=False, error=SEARCH_FAILED_ERROR)

        total_ms = (time.perf_counter() - t_start) * 1000
        logger.info("[SEARCH] Done in %.1fms (ragReady=%s, products=%d, %d chars).", total_ms, outcome.rag_ready, len(outcome.products), len(outcome.response))
        return outcome


    async def _answer(self, query: str) -> SearchOutcome:
        # Read the flag once so the branch and the reported ragReady agree
        ready = self._state.ready

        if ready:
            # embed_query is a blocking network call; keep it off the event loop
            hits = await asyncio.to_thread(self._state.search, query, self._top_k)
            logger.info("[SEARCH] Ready branch: %d match(es) for '%s'.", len(hits), query[:50])
            messages = build_product_messages(query, hits)
            products = [hit_to_payload(hit) for hit in hits]
        else:
            logger.info("[SEARCH] Index not ready — answering without product context.")
            messages = build_generic_messages(query)
            products = []

        raw_reply = await self._llm.ainvoke(messages)
        reply = classify_reply(raw_reply)
        if isinstance(reply, EmptyReply):
            logger.warning("[SEARCH] LLM returned no usable text: %s", reply.reason)

        return SearchOutcome(products=products, response=extract_response_text(reply), rag_ready=ready)
