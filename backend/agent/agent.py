from __future__ import annotations
from typing import List, Optional, Tuple
import asyncio, logging

from schemas import (
    AppliedFilters, CatalogFacets, ChatRequest, ChatResponse, Message,
    PriceRange, Product, Selection,
)
from services.color_policy import apply_color_policy
from services.errors import UpstreamServiceError
from services.facets import build_facets
from services.filter_engine import find_products_matching_any_chip
from services.intent import classify_intent, new_chips, reconcile_selection
from services.price_range import reconcile_price
from services.prompts import build_filter_prompt, build_regenerate_prompt
from services.validator import normalize_chip, validate
from settings import Settings

log = logging.getLogger(__name__)

FALLBACK_MESSAGE = (
    "Sorry, I couldn't work that out just now. Here's the full catalog; "
    "try describing what you're looking for again."
)
# user turns scanned for color-family words (current message included)
COLOR_INTENT_TURNS = 3


def build_generator(settings: Settings):
    """Suggestion generator for the configured backend."""
    if settings.suggestion_backend == "ollama":
        from agent.ollama_client import OllamaSuggestionGenerator
        return OllamaSuggestionGenerator(settings)
    from agent.gemini_client import GeminiSuggestionGenerator
    return GeminiSuggestionGenerator(settings)


class Agent:
    """
    One conversational turn:
      prompt -> generator -> validate -> normalize -> colors -> intent -> price -> preview.
    Holds only the catalog; the selection travels in the request and response.
    Turns of the same session must be serialized by the caller.
    """
    def __init__(self, products: List[Product], generator, history_window: int = 10,
                 preview_limit: int = 20):
        self.generator = generator
        self.history_window = history_window
        self.preview_limit = preview_limit
        self.reload(products)

    def reload(self, products: List[Product]) -> CatalogFacets:
        self.products = list(products)
        self.facets = build_facets(self.products)
        return self.facets

    # ---------------- helpers ----------------

    def _held_price(self, request: ChatRequest) -> Optional[PriceRange]:
        bounds = self.facets.price_range
        if request.current_price_range is not None:
            return request.current_price_range
        f = request.current_filters
        if bounds is not None and f is not None and (f.min_price is not None or f.max_price is not None):
            return PriceRange(
                min_price=f.min_price if f.min_price is not None else bounds.min_price,
                max_price=f.max_price if f.max_price is not None else bounds.max_price,
            )
        return bounds

    def _messages(self, request: ChatRequest) -> List[Message]:
        history = request.conversation_history[-self.history_window:] if self.history_window else []
        return [*history, Message(role="user", content=request.message)]

    def _color_texts(self, request: ChatRequest) -> List[str]:
        earlier = [m.content for m in reversed(request.conversation_history) if m.role == "user"]
        return [request.message, *earlier[:COLOR_INTENT_TURNS - 1]]

    def _effective_price(self, price: Optional[PriceRange]) -> Tuple[Optional[int], Optional[int]]:
        if price is None or price.is_default(self.facets.price_range):
            return None, None
        return price.min_price, price.max_price

    def _fallback(self, held: Selection, errors: List[str]) -> ChatResponse:
        """Apologize and show everything: no chips, no price constraint."""
        log.warning(f"TURN_FALLBACK | errors={errors}")
        return ChatResponse(
            message=FALLBACK_MESSAGE,
            errors=errors,
            intent_mode="replace",
            replace_categories=["all"],
            selected_chips=[],
            price_range=self.facets.price_range,
            selection_version=held.version + 1,
            matching_products=self.products[:self.preview_limit],
            applied_filters=AppliedFilters(
                total_products_before_filter=len(self.products),
                total_products_after_filter=len(self.products),
            ),
        )

    # ---------------- turn ----------------

    async def chat(self, request: ChatRequest, regenerate: bool = False) -> ChatResponse:
        if not request.message.strip():
            raise ValueError("Message is required")

        bounds = self.facets.price_range
        held = Selection(
            version=request.selection_version,
            selected_chips=request.selected_chips,
            price_range=self._held_price(request),
        )

        if regenerate:
            prompt = build_regenerate_prompt(
                self.facets, request.current_filters, [c.id for c in request.selected_chips])
        else:
            prompt = build_filter_prompt(self.facets, request.current_filters, request.selected_chips)

        try:
            raw = await asyncio.to_thread(self.generator.generate, prompt, self._messages(request))
        except UpstreamServiceError as e:
            log.error(f"UPSTREAM_ERROR | error={e}", exc_info=True)
            return self._fallback(held, [str(e)])

        result = validate(raw, self.facets)
        if not result.success:
            return self._fallback(held, result.errors)

        accepted = [normalize_chip(c, self.facets) for c in result.accepted]

        subcategories = [c.filter_value for c in accepted if c.type == "subcategory"]
        chips = apply_color_policy(accepted, self.products, subcategories, self._color_texts(request))

        if regenerate:
            mode, categories = "explore", []
        else:
            mode, categories = classify_intent(result.intent_mode, result.replace_categories, request.message)
        selection = reconcile_selection(held, mode, categories, bounds)

        price = reconcile_price(selection.price_range, result.min_price, result.max_price, bounds)
        selection = selection.model_copy(update={"price_range": price})

        suggested = new_chips(selection.selected_chips, chips)

        eff_min, eff_max = self._effective_price(price)
        pool = [
            p for p in self.products
            if (eff_min is None or p.price >= eff_min) and (eff_max is None or p.price <= eff_max)
        ]
        matching = find_products_matching_any_chip(pool, suggested) if suggested else []

        log.info(
            f"TURN_DONE | mode={mode} | suggested={len(suggested)} | invalid={len(result.rejected)} | "
            f"price={eff_min}-{eff_max} | matches={len(matching)}"
        )
        return ChatResponse(
            message=result.assistant_message,
            suggested_chips=suggested,
            invalid=result.rejected,
            errors=result.errors,
            intent_mode=mode,
            replace_categories=categories,
            min_price=result.min_price,
            max_price=result.max_price,
            price_question=result.price_question,
            selected_chips=selection.selected_chips,
            price_range=selection.price_range,
            selection_version=selection.version,
            matching_products=matching[:self.preview_limit],
            applied_filters=AppliedFilters(
                suggested_chip_count=len(suggested),
                effective_min_price=eff_min,
                effective_max_price=eff_max,
                total_products_before_filter=len(self.products),
                total_products_after_filter=len(matching),
            ),
        )
