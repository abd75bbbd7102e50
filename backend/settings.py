from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from dotenv import load_dotenv

APP_DIR = Path(__file__).resolve().parent

# Load .env early so every module sees the same environment
load_dotenv(dotenv_path=APP_DIR / ".env", override=False)


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the suggestion generator, catalog and HTTP layer."""
    google_api_key: str
    gemini_model: str
    suggestion_backend: str
    ollama_base_url: str
    ollama_model: str
    llm_temperature: float
    llm_max_tokens: int
    llm_timeout_seconds: int
    history_window: int
    preview_limit: int
    catalog_path: Path
    log_level: str
    cors_allow_origins: List[str]


def load_settings() -> Settings:
    """Read settings from the environment. Bad numeric values raise ValueError."""
    catalog_path = os.getenv("CATALOG_PATH")
    cors = os.getenv("CORS_ALLOW_ORIGINS", "*").strip()
    backend = os.getenv("SUGGESTION_BACKEND", "gemini").strip().lower()
    if backend not in ("gemini", "ollama"):
        raise ValueError(f"SUGGESTION_BACKEND must be 'gemini' or 'ollama', got {backend!r}")

    return Settings(
        google_api_key=os.getenv("GOOGLE_API_KEY", ""),
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-1.5-flash"),
        suggestion_backend=backend,
        ollama_base_url=os.getenv("OLLAMA_BASE_URL", "http://127.0.0.1:11434"),
        ollama_model=os.getenv("OLLAMA_MODEL", "llama3.1:8b"),
        llm_temperature=float(os.getenv("LLM_TEMPERATURE", "0.7")),
        llm_max_tokens=int(os.getenv("LLM_MAX_TOKENS", "1024")),
        llm_timeout_seconds=int(os.getenv("LLM_TIMEOUT_SECONDS", "30")),
        history_window=int(os.getenv("HISTORY_WINDOW", "10")),
        preview_limit=int(os.getenv("PREVIEW_LIMIT", "20")),
        catalog_path=Path(catalog_path) if catalog_path else APP_DIR / "data" / "products.json",
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        cors_allow_origins=[o.strip() for o in cors.split(",") if o.strip()] or ["*"],
    )
