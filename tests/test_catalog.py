from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from catalog_rag.config.settings import settings
from catalog_rag.src.core.catalog import Product, build_context, format_price, load_catalog, to_document, to_documents
from catalog_rag.src.core.exceptions import CatalogLoadError


def _write(tmp_path: Path, payload: object) -> Path:
    path = tmp_path / "products.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_catalog_preserves_order_and_fields(tmp_path: Path) -> None:
    path = _write(tmp_path, [
        {"id": 7, "name": "Lamp", "description": "Desk lamp", "category": "Home", "price": 19.5},
        {"id": "sku-2", "name": "Mug", "description": "Ceramic mug", "category": "Kitchen", "price": 8},
    ])

    products = load_catalog(path)

    assert [p.id for p in products] == [7, "sku-2"]
    assert products[0].price == 19.5
    assert products[1].price == 8
    assert isinstance(products[1].price, int)
    assert isinstance(products, tuple)


def test_shipped_catalog_loads() -> None:
    products = load_catalog(settings.CATALOG_PATH)
    assert len(products) >= 10
    assert any("Headphones" in p.name for p in products)


def test_missing_catalog_raises(tmp_path: Path) -> None:
    with pytest.raises(CatalogLoadError, match="not found"):
        load_catalog(tmp_path / "nope.json")


def test_invalid_json_raises(tmp_path: Path) -> None:
    path = tmp_path / "products.json"
    path.write_text("[{not json", encoding="utf-8")
    with pytest.raises(CatalogLoadError, match="not valid JSON"):
        load_catalog(path)


def test_non_list_payload_raises(tmp_path: Path) -> None:
    path = _write(tmp_path, {"products": []})
    with pytest.raises(CatalogLoadError, match="JSON array"):
        load_catalog(path)


@pytest.mark.parametrize(
    "record",
    [
        {"id": 1, "name": "No price", "description": "d", "category": "c"},
        {"id": 1, "name": "Negative", "description": "d", "category": "c", "price": -1},
        {"name": "No id", "description": "d", "category": "c", "price": 1},
    ],
)
def test_invalid_record_raises(tmp_path: Path, record: dict) -> None:
    path = _write(tmp_path, [record])
    with pytest.raises(CatalogLoadError, match="index 0"):
        load_catalog(path)


def test_duplicate_ids_raise(tmp_path: Path) -> None:
    record = {"id": 1, "name": "A", "description": "d", "category": "c", "price": 1}
    path = _write(tmp_path, [record, {**record, "name": "B"}])
    with pytest.raises(CatalogLoadError, match="Duplicate product id"):
        load_catalog(path)


def test_products_are_immutable(products: tuple[Product, ...]) -> None:
    with pytest.raises(ValidationError):
        products[0].name = "Changed"  # type: ignore[misc]


@pytest.mark.parametrize(
    ("price", "expected"),
    [(199, "199"), (199.0, "199"), (79.99, "79.99"), (79.5, "79.5"), (0, "0"), (1299.99, "1299.99")],
)
def test_format_price_matches_javascript_rendering(price: float, expected: str) -> None:
    assert format_price(price) == expected


def test_document_content_template(products: tuple[Product, ...]) -> None:
    document = to_document(products[0])

    assert document.content == "Wireless Headphones: Over-ear headphones with noise cancellation. Category: Electronics. Price: $199.99"
    assert document.metadata is products[0]


def test_document_projection_is_deterministic(products: tuple[Product, ...]) -> None:
    first = to_documents(products)
    second = to_documents(products)

    assert first == second
    assert len(first) == len(products)
    assert [d.metadata.id for d in first] == [p.id for p in products]


def test_build_context_joins_lines(products: tuple[Product, ...]) -> None:
    context = build_context(products[:2])

    assert context == (
        "Wireless Headphones: Over-ear headphones with noise cancellation ($199.99)\n"
        "Office Chair: Ergonomic chair with lumbar support ($249)"
    )


def test_build_context_empty() -> None:
    assert build_context([]) == ""
