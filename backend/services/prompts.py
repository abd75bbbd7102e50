from __future__ import annotations
from typing import List, Optional, Sequence

from schemas import CatalogFacets, FilterState
from services.mappings import COLOR_FAMILIES, CONCEPT_MAPPINGS

RULE = "=" * 75

HIERARCHY_RULES = """HIERARCHY RULES (follow strictly):
1. SPECIFIC SUBCATEGORY MENTIONED -> use it directly, then suggest attributes
   "blue sweater" -> subcategory: sweaters, color: blue
2. VAGUE CONCEPT (warm, casual, professional) -> suggest SUBCATEGORIES FIRST
   "something warm" -> sweaters, coats, hoodies
3. SPECIFIC ATTRIBUTE ONLY (just a color or size) -> use it, ask about type
4. TRULY AMBIGUOUS -> ask a clarifying question, DO NOT GUESS"""

INTENT_RULES = """INTENT (how this turn relates to what is already selected):
- "refine": adds to or narrows the current selection (DEFAULT when unsure)
- "explore": user wants alternatives without changing the selection
- "replace": user changes their mind; list what to clear in replaceCategories:
    all, all_except_price, subcategory, occasions, materials, colors, style_tags, sizes, price
  "actually show me dresses instead" -> replace, ["subcategory"]
  "start over" -> replace, ["all"]
  "forget the colors" -> replace, ["colors"]"""

FEW_SHOT_EXAMPLES = """REASONING EXAMPLES:
"cozy weekend wear" -> sweaters, hoodies | fleece, wool | cozy, casual, relaxed
"something for a job interview" -> blouses, pants | formal, classic | occasion: professional
"running clothes under $60" -> occasion: athletic | maxPrice: 60
"something" -> no chips, ask "What are you looking for?\""""

RESPONSE_FORMAT = """RESPONSE FORMAT (strict JSON only, no markdown, no extra text):
{
  "message": "Brief, friendly response (1-2 sentences)",
  "intentMode": "refine",
  "replaceCategories": [],
  "chips": [
    {"id": "chip-subcategory-sweaters", "type": "subcategory", "label": "Sweaters", "filterKey": "subcategory", "filterValue": "sweaters"},
    {"id": "chip-material-wool", "type": "material", "label": "Wool", "filterKey": "materials", "filterValue": "wool"},
    {"id": "chip-style_tag-cozy", "type": "style_tag", "label": "Cozy", "filterKey": "styleTags", "filterValue": "cozy"}
  ],
  "minPrice": null,
  "maxPrice": null,
  "priceQuestion": "What's your budget?"
}

CHIP TYPES AND FILTER KEYS:
- subcategory -> subcategory | occasion -> occasions | color -> colors
- material -> materials | style_tag -> styleTags | size -> sizes

RULES:
1. id format: "chip-{type}-{value}"
2. label is user-facing and capitalized
3. filterValue must EXACTLY match an available value
4. minPrice / maxPrice only for explicit numbers ("under 80", "between 50 and 120")
5. Only emit color chips when the user names a color; otherwise colors are added automatically
6. Suggest 6-10 chips when the request is clear"""


def format_available_filters(facets: CatalogFacets) -> str:
    pr = facets.price_range
    price = f"${pr.min_price} - ${pr.max_price}" if pr else "n/a"
    return "\n".join([
        f"Subcategories: {', '.join(facets.subcategories)}",
        f"Occasions: {', '.join(facets.occasions)}",
        f"Colors: {', '.join(facets.colors)}",
        f"Materials: {', '.join(facets.materials)}",
        f"Style Tags: {', '.join(facets.style_tags)}",
        f"Sizes: {', '.join(facets.sizes)}",
        f"Price Range: {price}",
    ])


def format_current_filters(filters: Optional[FilterState], selected_chips: Sequence = ()) -> str:
    filters = filters or FilterState()
    parts: List[str] = []
    subcats = filters.subcategories or ([filters.subcategory] if filters.subcategory else [])
    for name, values in (
        ("Subcategories", subcats),
        ("Occasions", filters.occasions),
        ("Colors", filters.colors),
        ("Materials", filters.materials),
        ("Style Tags", filters.style_tags),
        ("Sizes", filters.sizes),
    ):
        if values:
            parts.append(f"{name}: {', '.join(values)}")
    if filters.min_price is not None or filters.max_price is not None:
        lo = filters.min_price if filters.min_price is not None else "any"
        hi = filters.max_price if filters.max_price is not None else "any"
        parts.append(f"Price: ${lo} - ${hi}")
    if filters.in_stock is not None:
        parts.append(f"In Stock Only: {'yes' if filters.in_stock else 'no'}")
    if selected_chips:
        parts.append("Selected chips (do not suggest again): " + ", ".join(c.id for c in selected_chips))
    return "\n".join(parts) if parts else "No filters applied yet."


def format_concept_mappings() -> str:
    lines = ["CORE CONCEPT MAPPINGS:"]
    for section, rows in CONCEPT_MAPPINGS.items():
        lines.append(f"\n{section}:")
        lines.extend(f"- {term} -> {target}" for term, target in rows)
    lines.append("\nCOLOR FAMILIES (context only):")
    lines.extend(f"- {' / '.join(kw)} = {', '.join(colors)}" for _, kw, colors in COLOR_FAMILIES)
    return "\n".join(lines)


def build_filter_prompt(facets: CatalogFacets, current_filters: Optional[FilterState] = None,
                        selected_chips: Sequence = ()) -> str:
    return f"""You are a helpful shopping assistant for a clothing store.
Your job: understand what the user wants and suggest clickable filter chips.

{RULE}
AVAILABLE FILTERS (ONLY these exact values - anything else is rejected)
{RULE}
{format_available_filters(facets)}

{RULE}
{HIERARCHY_RULES}

{RULE}
{format_concept_mappings()}

{RULE}
{FEW_SHOT_EXAMPLES}

{RULE}
{INTENT_RULES}

{RULE}
CURRENT FILTERS (already applied by user)
{RULE}
{format_current_filters(current_filters, selected_chips)}

{RULE}
{RESPONSE_FORMAT}
"""


def build_regenerate_prompt(facets: CatalogFacets, current_filters: Optional[FilterState],
                            previous_chips: Sequence[str]) -> str:
    """Prompt for a second round of different suggestions."""
    return f"""You are a shopping assistant. The user wants DIFFERENT suggestions than before.

AVAILABLE FILTERS (only use these exact values):
{format_available_filters(facets)}

CURRENT FILTERS:
{format_current_filters(current_filters)}

PREVIOUS SUGGESTIONS (do NOT repeat these):
{', '.join(previous_chips) or 'none'}

Suggest 3-5 ALTERNATIVE filter chips that complement the current filters.
Use intentMode "explore".

{RESPONSE_FORMAT}
"""
