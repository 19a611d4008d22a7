from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from catalog_rag.config.settings import Settings, settings
from catalog_rag.scripts import search_catalog
from catalog_rag.src.core import rag_engine
from catalog_rag.src.database import vector_store
from tests.fakes import FakeChatModel, KeywordEmbedder


@pytest.fixture
def fake_providers(monkeypatch: pytest.MonkeyPatch) -> FakeChatModel:
    chat_model = FakeChatModel()
    monkeypatch.setattr(vector_store, "create_embedder", lambda: KeywordEmbedder())
    monkeypatch.setattr(rag_engine, "create_chat_model", lambda: chat_model)
    return chat_model


def test_cli_prints_matches_and_answer(fake_providers: FakeChatModel, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = search_catalog.main(["wireless headphones", "--top-k", "2"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "RAG ready  : True" in out
    assert "[1] Wireless Noise-Cancelling Headphones" in out
    assert "[3]" not in out
    assert "Try the Wireless Headphones." in out


def test_cli_without_rag(fake_providers: FakeChatModel, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = search_catalog.main(["hello", "--no-rag"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "RAG ready  : False" in out
    assert "(no matched products)" in out


def test_cli_reports_bad_catalog(fake_providers: FakeChatModel, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    broken = tmp_path / "products.json"
    broken.write_text(json.dumps({"not": "a list"}), encoding="utf-8")
    monkeypatch.setattr(settings, "CATALOG_PATH", broken)

    assert search_catalog.main(["anything"]) == 1


def test_cli_exit_code_on_generation_failure(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(vector_store, "create_embedder", lambda: KeywordEmbedder())
    monkeypatch.setattr(rag_engine, "create_chat_model", lambda: FakeChatModel(error=RuntimeError("down")))

    assert search_catalog.main(["headphones"]) == 1
    assert "Search encountered an error" in capsys.readouterr().out


@pytest.mark.parametrize(
    "overrides",
    [{"SEARCH_TOP_K": 0}, {"EMBED_BATCH_SIZE": 0}, {"EMBED_BATCH_SIZE": 500}, {"LLM_TEMPERATURE": 3.0}, {"ENV": "staging"}],
)
def test_settings_validation(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(GOOGLE_API_KEY="k", **overrides)


def test_settings_hide_api_key() -> None:
    configured = Settings(GOOGLE_API_KEY="super-secret")

    assert "super-secret" not in repr(configured)
    assert configured.GOOGLE_API_KEY.get_secret_value() == "super-secret"
    assert configured.SEARCH_TOP_K == 3


def test_cli_top_k_zero_searches_without_products(fake_providers: FakeChatModel, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = search_catalog.main(["wireless headphones", "--top-k", "0"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "RAG ready  : True" in out
    assert "(no matched products)" in out


@pytest.mark.parametrize("value", ["-1", "three"])
def test_cli_rejects_invalid_top_k(fake_providers: FakeChatModel, value: str, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        search_catalog.main(["wireless headphones", "--top-k", value])

    assert excinfo.value.code == 2
    assert "--top-k" in capsys.readouterr().err


def test_settings_reject_unknown_log_level() -> None:
    with pytest.raises(ValidationError):
        Settings(GOOGLE_API_KEY="k", LOG_LEVEL="VERBOSE")
