"""Deterministic stand-ins for the Gemini embedding and chat models."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from langchain_core.messages import AIMessage, BaseMessage

VOCABULARY: tuple[str, ...] = ("wireless", "headphone", "speaker", "chair", "espresso", "coffee", "yoga", "desk")


class KeywordEmbedder:
    """Deterministic embedder: one dimension per vocabulary keyword."""

    def __init__(self, vocabulary: Sequence[str] = VOCABULARY, fail_after: int | None = None, short_by: int = 0) -> None:
        self.vocabulary = tuple(vocabulary)
        self.fail_after = fail_after
        self.short_by = short_by
        self.document_calls: list[list[str]] = []
        self.query_calls: list[str] = []

    def _vector(self, text: str) -> list[float]:
        lowered = text.lower()
        return [float(lowered.count(word)) for word in self.vocabulary]

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        if self.fail_after is not None and len(self.document_calls) >= self.fail_after:
            raise RuntimeError("embedding quota exceeded")
        self.document_calls.append(list(texts))
        vectors = [self._vector(t) for t in texts]
        return vectors[: len(vectors) - self.short_by] if self.short_by else vectors

    def embed_query(self, text: str) -> list[float]:
        self.query_calls.append(text)
        return self._vector(text)


class FakeChatModel:
    """Records every message list and answers with a canned reply."""

    def __init__(self, reply: Any = None, error: Exception | None = None) -> None:
        self.reply = reply if reply is not None else AIMessage(content="Try the Wireless Headphones.")
        self.error = error
        self.calls: list[list[BaseMessage]] = []

    async def ainvoke(self, input: Sequence[BaseMessage], **kwargs: Any) -> Any:
        self.calls.append(list(input))
        if self.error is not None:
            raise self.error
        return self.reply
