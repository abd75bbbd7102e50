from __future__ import annotations
from typing import List
import logging

import google.generativeai as genai

from schemas import Message
from services.errors import UpstreamServiceError
from settings import Settings

log = logging.getLogger(__name__)


def _contents(messages: List[Message]) -> list:
    # Gemini calls the assistant side "model"
    return [
        {"role": "model" if m.role == "assistant" else "user", "parts": [m.content]}
        for m in messages
    ]


class GeminiSuggestionGenerator:
    """One blocking Gemini call per turn; the system prompt carries the catalog vocabulary."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._configured = False

    def _ensure_configured(self):
        if self._configured:
            return
        if not self.settings.google_api_key:
            raise UpstreamServiceError("GOOGLE_API_KEY missing. Set it in .env or environment.")
        genai.configure(api_key=self.settings.google_api_key)
        self._configured = True

    def generate(self, system_prompt: str, messages: List[Message]) -> str:
        try:
            self._ensure_configured()
            model = genai.GenerativeModel(
                model_name=self.settings.gemini_model,
                system_instruction=system_prompt,
                generation_config={
                    "temperature": self.settings.llm_temperature,
                    "max_output_tokens": self.settings.llm_max_tokens,
                    "response_mime_type": "application/json",
                },
            )
            resp = model.generate_content(
                _contents(messages),
                request_options={"timeout": self.settings.llm_timeout_seconds},
            )
            text = (getattr(resp, "text", None) or "").strip()
        except UpstreamServiceError:
            raise
        except Exception as e:
            raise UpstreamServiceError(f"Gemini request failed: {e}") from e
        if not text:
            raise UpstreamServiceError("Gemini returned an empty response")
        log.info(f"GEMINI_OK | model={self.settings.gemini_model} | chars={len(text)}")
        return text
