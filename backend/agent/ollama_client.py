from __future__ import annotations
from typing import List
import logging

import requests

from schemas import Message
from services.errors import UpstreamServiceError
from settings import Settings

log = logging.getLogger(__name__)


class OllamaSuggestionGenerator:
    """Local Ollama backend for the same request/response contract."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def generate(self, system_prompt: str, messages: List[Message]) -> str:
        url = f"{self.settings.ollama_base_url}/api/chat"
        payload = {
            "model": self.settings.ollama_model,
            "messages": [{"role": "system", "content": system_prompt}]
                        + [{"role": m.role, "content": m.content} for m in messages],
            "stream": False,
            "format": "json",
            "options": {"temperature": self.settings.llm_temperature},
        }
        try:
            resp = requests.post(url, json=payload, timeout=self.settings.llm_timeout_seconds)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise UpstreamServiceError(f"Ollama request failed: {e}") from e

        text = ""
        if isinstance(data, dict):
            # new-ish Ollama responses
            text = (data.get("message") or {}).get("content") or data.get("response") or ""
        if not text.strip():
            raise UpstreamServiceError("Ollama returned an empty response")
        log.info(f"OLLAMA_OK | model={self.settings.ollama_model} | chars={len(text)}")
        return text.strip()
