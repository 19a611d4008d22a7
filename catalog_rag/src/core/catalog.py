"""
Catalog RAG - Product Catalog
==============================
Loads the static product catalog and projects products into the text
forms the rest of the pipeline consumes.

Everything below ``load_catalog`` is a pure function: no I/O, no hidden
state, identical output for identical input.

    Product ──to_document──▶ ProductDocument ──(embed)──▶ vector
    Product ──context_line──▶ "{name}: {description} ($price)"

Usage:
    from catalog_rag.src.core.catalog import load_catalog, to_documents
    products  = load_catalog(settings.CATALOG_PATH)
    documents = to_documents(products)
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from catalog_rag.config.prompt_templates import CONTEXT_LINE_TEMPLATE, DOCUMENT_CONTENT_TEMPLATE
from catalog_rag.src.core.exceptions import CatalogLoadError
from catalog_rag.src.utils.logger import get_logger

logger = get_logger(__name__)


class Product(BaseModel):
    """One immutable catalog record.  Identity is ``id``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int | str
    name: str
    description: str
    category: str
    # Integral catalog prices stay int in JSON responses
    price: int | float = Field(ge=0)


@dataclass(frozen=True, slots=True)
class ProductDocument:
    """Embeddable projection of a ``Product``."""

    content: str
    metadata: Product


# ── Loading ────────────────────────────────────────────────────────────

def load_catalog(path: Path | str) -> tuple[Product, ...]:
    """
    Read and validate the product catalog.

    The file must hold a JSON array of product objects with unique ids.

    Raises:
        CatalogLoadError: If the file is missing, unreadable, not a JSON
            array, contains an invalid record, or repeats an id.
    """
    catalog_path = Path(path)
    try:
        raw = json.loads(catalog_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise CatalogLoadError(f"Catalog file not found: {catalog_path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise CatalogLoadError(f"Catalog file unreadable: {catalog_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogLoadError(f"Catalog is not valid JSON: {catalog_path}: {exc}") from exc

    if not isinstance(raw, list):
        raise CatalogLoadError(f"Catalog must be a JSON array, got {type(raw).__name__}.")

    products: list[Product] = []
    seen_ids: set[int | str] = set()
    for position, record in enumerate(raw):
        try:
            product = Product.model_validate(record)
        except ValidationError as exc:
            raise CatalogLoadError(f"Invalid product at index {position}: {exc}") from exc
        if product.id in seen_ids:
            raise CatalogLoadError(f"Duplicate product id {product.id!r} at index {position}.")
        seen_ids.add(product.id)
        products.append(product)

    logger.info("Loaded %d products from %s", len(products), catalog_path)
    return tuple(products)


# ── Pure projections ───────────────────────────────────────────────────

def format_price(price: int | float) -> str:
    """Render a price the way JavaScript prints numbers: ``199``, ``79.99``."""
    value = float(price)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def to_document(product: Product) -> ProductDocument:
    content = DOCUMENT_CONTENT_TEMPLATE.format(
        name=product.name,
        description=product.description,
        category=product.category,
        price=format_price(product.price),
    )
    return ProductDocument(content=content, metadata=product)


def to_documents(products: Iterable[Product]) -> list[ProductDocument]:
    return [to_document(p) for p in products]


def context_line(product: Product) -> str:
    return CONTEXT_LINE_TEMPLATE.format(name=product.name, description=product.description, price=format_price(product.price))


def build_context(products: Sequence[Product]) -> str:
    """Join one context line per product with newlines."""
    return "\n".join(context_line(p) for p in products)
