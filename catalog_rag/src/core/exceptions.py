"""
Catalog RAG - Exception Hierarchy
==================================
Every failure the service reports on purpose derives from
``CatalogRAGError`` so the HTTP layer and the CLI can tell expected
failures apart from programming errors.

``CatalogLoadError``
    Catalog file missing or malformed.  Fatal at startup.
``IndexBuildError``
    Embedding the catalog failed or returned an unusable result.
``InitializationError``
    ``RAGState.initialize`` could not publish a new index.  Wraps the
    underlying ``IndexBuildError``; the previous state is untouched.
``NotReadyError``
    A search was attempted before any index was published.
``ProviderError``
    The embedding or generation provider misbehaved during a search.
"""


class CatalogRAGError(Exception):
    """Base class for all catalog RAG errors."""


class CatalogLoadError(CatalogRAGError):
    pass


class IndexBuildError(CatalogRAGError):
    pass


class InitializationError(CatalogRAGError):
    pass


class NotReadyError(CatalogRAGError):
    pass


class ProviderError(CatalogRAGError):
    pass
