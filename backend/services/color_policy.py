from __future__ import annotations
from typing import List, Optional, Sequence, Tuple, Union
import logging, re

from schemas import Product, make_chip
from services.mappings import COLOR_FAMILIES

log = logging.getLogger(__name__)

# order chips are presented in after color derivation
_CHIP_ORDER = ("subcategory", "occasion", "material", "color", "style_tag", "size")


def _keyword_hit(keyword: str, text: str) -> bool:
    return re.search(rf"\b{re.escape(keyword)}\b", text) is not None


def detect_color_family(texts: Union[str, Sequence[str], None]) -> Optional[Tuple[str, Tuple[str, ...]]]:
    """
    Find a color-family keyword in free text.
    `texts` is ordered most recent first. Tie-break: the earliest text with any
    hit wins; inside one text, the first family in COLOR_FAMILIES wins.
    Returns (family, member colors) or None.
    """
    if not texts:
        return None
    if isinstance(texts, str):
        texts = [texts]
    for text in texts:
        t = (text or "").lower()
        if not t:
            continue
        for family, keywords, colors in COLOR_FAMILIES:
            if any(_keyword_hit(k, t) for k in keywords):
                return family, colors
    return None


def colors_for_subcategories(products: List[Product], subcategories: Sequence[str]) -> List[str]:
    """Colors actually present among products in the given subcategories, sorted."""
    if not subcategories:
        return []
    wanted = {s.casefold() for s in subcategories}
    return sorted({p.color for p in products if p.subcategory.casefold() in wanted})


def derive_colors(accepted_chips: Sequence, products: List[Product],
                  subcategory_selections: Sequence[str],
                  free_text: Union[str, Sequence[str], None] = None) -> List:
    """
    Color chips for this turn.
    Explicit color chips in the suggestion are returned as-is and nothing is
    added, even when they match no product. Otherwise colors come from the
    catalog rows in the selected subcategories, narrowed by a detected color
    family. No subcategory anchor means no derived colors.
    """
    explicit = [c for c in accepted_chips if c.type == "color"]
    if explicit:
        log.info(f"COLOR_POLICY | mode=explicit | colors={[c.filter_value for c in explicit]}")
        return explicit

    if not subcategory_selections:
        log.info("COLOR_POLICY | mode=none | reason=no_subcategory")
        return []

    colors = colors_for_subcategories(products, subcategory_selections)
    family = detect_color_family(free_text)
    if family:
        name, members = family
        allowed = {m.casefold() for m in members}
        colors = [c for c in colors if c.casefold() in allowed]
        log.info(f"COLOR_POLICY | mode=derived | family={name} | colors={colors}")
    else:
        log.info(f"COLOR_POLICY | mode=derived | colors={colors}")

    return [make_chip("color", c) for c in colors]


def apply_color_policy(accepted_chips: Sequence, products: List[Product],
                       subcategory_selections: Sequence[str],
                       free_text: Union[str, Sequence[str], None] = None) -> List:
    """Replace the color part of the accepted chips with derive_colors() and order by facet."""
    colors = derive_colors(accepted_chips, products, subcategory_selections, free_text)
    others = [c for c in accepted_chips if c.type != "color"]
    merged = others + list(colors)
    return sorted(merged, key=lambda c: _CHIP_ORDER.index(c.type))
