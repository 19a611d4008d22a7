"""
Catalog RAG - Centralized Configuration
========================================
Uses ``pydantic-settings`` (``BaseSettings``) to load *all* configuration
from environment variables and the project-level ``.env`` file.

Security
--------
- ``GOOGLE_API_KEY`` is typed as ``SecretStr`` and has **no default value**.
  If the key is missing at startup, Pydantic will raise a ``ValidationError``
  with a clear error message.  The raw value is never exposed in repr,
  logs, or tracebacks.

Paths
-----
All filesystem paths are ``Path.resolve()``-d at class level so they
work identically on Windows, WSL, and Linux.

Retrieval
---------
``SEARCH_TOP_K`` is the number of catalog products handed to the LLM as
context on every ready search (default 3).  ``EMBED_BATCH_SIZE`` bounds
how many product texts go into one ``embed_documents`` call while the
index is being built.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application-wide settings.

    Every field is loaded from environment variables (or ``.env``).
    Fields *without* a default are **required** — the app will refuse
    to start until they are provided.

    Attributes
    ----------
    GOOGLE_API_KEY : SecretStr
        API key for Google AI Studio (Gemini).  **Required.**
        Access the raw value with ``settings.GOOGLE_API_KEY.get_secret_value()``.
    ENV : Literal["dev", "prod"]
        Environment mode; picks the default logging verbosity.
    LOG_LEVEL : Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None
        Overrides the ENV-derived log level when set.
    EMBEDDING_MODEL : str
        Model identifier passed to ``GoogleGenerativeAIEmbeddings``.
    LLM_MODEL : str
        Model identifier for the response-generation LLM.
    LLM_TEMPERATURE : float
        Sampling temperature for the response-generation LLM.
    CATALOG_PATH : Path
        JSON file holding the product catalog.
    STATIC_DIR : Path
        Directory served at ``/`` when it exists.
    SEARCH_TOP_K : int
        Products retrieved per ready search.
    EMBED_BATCH_SIZE : int
        Product texts per embedding request during index build.
    HOST, PORT
        Bind address for ``python -m catalog_rag.src.main``.
    """

    # ── Resolved Absolute Paths ────────────────────────────────────────
    BASE_DIR: Path = Path(__file__).resolve().parent.parent
    CATALOG_PATH: Path = BASE_DIR / "data" / "products.json"
    STATIC_DIR: Path = BASE_DIR / "public"

    # ── Environment Mode ───────────────────────────────────────────────
    ENV: Literal["dev", "prod"] = "dev"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None

    # ── API Keys (REQUIRED — no default) ───────────────────────────────
    GOOGLE_API_KEY: SecretStr

    # ── Model Configuration ────────────────────────────────────────────
    EMBEDDING_MODEL: str = "models/gemini-embedding-001"
    LLM_MODEL: str = "gemini-2.5-flash"
    LLM_TEMPERATURE: float = 1.0

    # ── Retrieval ──────────────────────────────────────────────────────
    SEARCH_TOP_K: int = 3
    EMBED_BATCH_SIZE: int = 64

    # ── HTTP Server ────────────────────────────────────────────────────
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # ── Validators ─────────────────────────────────────────────────────

    @field_validator("SEARCH_TOP_K")
    @classmethod
    def _top_k_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"SEARCH_TOP_K must be ≥ 1, got {v}")
        return v


    @field_validator("EMBED_BATCH_SIZE")
    @classmethod
    def _batch_size_range(cls, v: int) -> int:
        if not 1 <= v <= 250:
            raise ValueError(f"EMBED_BATCH_SIZE must be 1–250, got {v}")
        return v


    @field_validator("LLM_TEMPERATURE")
    @classmethod
    def _temperature_range(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError(f"LLM_TEMPERATURE must be 0.0–2.0, got {v}")
        return v

    # ── Pydantic Settings Configuration ────────────────────────────────
    model_config = SettingsConfigDict(env_file=Path(__file__).resolve().parent.parent.parent / ".env", env_file_encoding="utf-8", extra="ignore")


# ── Singleton Instance ─────────────────────────────────────────────────
# Import this throughout the project:
#     from catalog_rag.config.settings import settings
settings = Settings()
