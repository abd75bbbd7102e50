from __future__ import annotations
from typing import List, Optional, Sequence, Tuple
import logging, re

from schemas import PriceRange, Selection, chip_key
from services.mappings import EXPLORE_KEYWORDS, REPLACE_CATEGORY_CHIP_TYPE, RESET_KEYWORDS

log = logging.getLogger(__name__)


def _mentions(text: str, keywords: Sequence[str]) -> bool:
    return any(re.search(rf"\b{re.escape(k)}\b", text) for k in keywords)


def classify_intent(suggested_mode: Optional[str], suggested_categories: Sequence[str],
                    user_text: str = "") -> Tuple[str, List[str]]:
    """
    Decide this turn's (intent mode, replace categories).
    A recognized mode from the suggestion wins; otherwise a keyword pass over
    the user's text. Anything ambiguous, including `replace` with nothing to
    replace, resolves to `refine`.
    """
    categories = list(suggested_categories or [])
    if suggested_mode == "replace":
        if categories:
            return "replace", categories
        log.info("INTENT_AMBIGUOUS | mode=replace | categories=[] | resolved=refine")
        return "refine", []
    if suggested_mode in ("refine", "explore"):
        return suggested_mode, []

    t = (user_text or "").lower()
    if _mentions(t, RESET_KEYWORDS):
        return "replace", ["all"]
    if _mentions(t, EXPLORE_KEYWORDS):
        return "explore", []
    return "refine", []


def reconcile_selection(selection: Selection, intent_mode: str,
                        replace_categories: Sequence[str],
                        bounds: Optional[PriceRange]) -> Selection:
    """
    Apply the turn's intent to the held selection and return the next version.
      refine / explore          -> chips and price unchanged
      replace + all             -> no chips, price back to catalog bounds
      replace + all_except_price-> no chips, price unchanged
      replace + price           -> price back to catalog bounds
      replace + facet categories-> drop chips of those facets only
    """
    chips = list(selection.selected_chips)
    price = selection.price_range

    if intent_mode == "replace":
        cats = set(replace_categories)
        if "all" in cats:
            chips, price = [], bounds
        else:
            if "all_except_price" in cats:
                chips = []
            else:
                drop = {REPLACE_CATEGORY_CHIP_TYPE[c] for c in cats if c in REPLACE_CATEGORY_CHIP_TYPE}
                chips = [c for c in chips if c.type not in drop]
            if "price" in cats:
                price = bounds

    log.info(
        f"INTENT_APPLIED | mode={intent_mode} | categories={sorted(replace_categories)} | "
        f"chips={len(selection.selected_chips)}->{len(chips)} | version={selection.version + 1}"
    )
    return Selection(version=selection.version + 1, selected_chips=chips, price_range=price)


def new_chips(selected: Sequence, suggested: Sequence) -> List:
    """Suggested chips that are not already selected (one per facet/value)."""
    seen = {chip_key(c) for c in selected}
    out = []
    for chip in suggested:
        key = chip_key(chip)
        if key in seen:
            continue
        seen.add(key)
        out.append(chip)
    return out
