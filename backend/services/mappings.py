"""
Declarative keyword tables used by the reconciliation logic and the prompt.

Pure data: extend these without touching the code that consumes them.
Order matters where noted: the first entry that matches wins.
"""
from __future__ import annotations
from typing import Dict, List, Tuple

# ---- Color families ----
# (family, trigger keywords, member colors). Checked in this order; the
# first family with a keyword hit wins.
COLOR_FAMILIES: List[Tuple[str, Tuple[str, ...], Tuple[str, ...]]] = [
    ("earth_tones",
     ("earth tones", "earth tone", "earthy"),
     ("brown", "beige", "olive", "cream", "tan", "khaki", "rust", "camel")),
    ("brights",
     ("brights", "bright", "bold", "vibrant", "colorful"),
     ("red", "yellow", "orange", "pink", "green", "blue", "purple")),
    ("neutrals",
     ("neutrals", "neutral"),
     ("black", "white", "gray", "grey", "beige", "navy", "cream")),
    ("pastels",
     ("pastels", "pastel"),
     ("pink", "lavender", "mint", "light blue", "peach", "cream", "lilac")),
    ("dark",
     ("dark", "moody"),
     ("black", "navy", "gray", "grey", "charcoal", "burgundy")),
]

# ---- Intent keywords ----
# Used only when the suggestion itself carries no recognized intentMode.
EXPLORE_KEYWORDS: Tuple[str, ...] = (
    "alternatives", "alternative", "what else", "other options",
    "something different", "show me more", "anything else", "instead of just",
)
RESET_KEYWORDS: Tuple[str, ...] = (
    "start over", "start again", "clear everything", "clear all",
    "reset", "from scratch", "forget all that", "forget everything",
)

# ---- Replace category -> chip type ----
REPLACE_CATEGORY_CHIP_TYPE: Dict[str, str] = {
    "subcategory": "subcategory",
    "occasions": "occasion",
    "materials": "material",
    "colors": "color",
    "style_tags": "style_tag",
    "sizes": "size",
}

# ---- Chip filterKey -> FilterState attribute ----
FILTER_KEY_FIELD: Dict[str, str] = {
    "subcategory": "subcategory",
    "subcategories": "subcategories",
    "occasions": "occasions",
    "colors": "colors",
    "materials": "materials",
    "sizes": "sizes",
    "styleTags": "style_tags",
    "inStock": "in_stock",
}

# ---- Chip type -> legal filterKeys ----
CHIP_TYPE_FILTER_KEYS: Dict[str, Tuple[str, ...]] = {
    "subcategory": ("subcategory", "subcategories"),
    "occasion": ("occasions",),
    "color": ("colors",),
    "material": ("materials",),
    "style_tag": ("styleTags",),
    "size": ("sizes",),
}

# ---- Availability sections (UI order) ----
# (section name, chip type, filterKey)
FILTER_SECTIONS: List[Tuple[str, str, str]] = [
    ("CATEGORIES", "subcategory", "subcategories"),
    ("COLORS", "color", "colors"),
    ("MATERIALS", "material", "materials"),
    ("STYLE", "style_tag", "styleTags"),
    ("OCCASION", "occasion", "occasions"),
    ("SIZE", "size", "sizes"),
]

# ---- Concept mappings fed to the suggestion generator ----
CONCEPT_MAPPINGS: Dict[str, List[Tuple[str, str]]] = {
    "TEMPERATURE / SEASON": [
        ('"warm"', "subcategories: sweaters, coats, hoodies | materials: wool, fleece, cashmere"),
        ('"cool" / "light" / "lightweight"', "subcategories: t-shirts, blouses | materials: linen, cotton"),
        ('"summer"', "subcategories: dresses, t-shirts | materials: linen, cotton | style: casual"),
        ('"winter"', "subcategories: coats, sweaters | materials: wool, fleece | style: cozy"),
        ('"fall" / "autumn"', "subcategories: sweaters, jackets | materials: wool, denim | colors: earth tones"),
        ('"spring"', "subcategories: blouses, dresses | materials: cotton, linen | colors: pastels"),
    ],
    "FORMALITY / OCCASION": [
        ('"casual"', "subcategories: t-shirts, jeans, hoodies | style: casual, relaxed"),
        ('"professional" / "work"', "subcategories: blouses, pants | style: formal, classic | occasion: professional"),
        ('"formal" / "dressy"', "subcategories: dresses, blouses | materials: silk | style: elegant | occasion: formal"),
        ('"date night"', "subcategories: dresses, blouses | style: elegant, fitted, romantic | occasion: date"),
        ('"running" / "gym" / "workout"', "occasion: athletic | materials: polyester, cotton"),
        ('"loungewear" / "comfy"', "subcategories: hoodies, pants | materials: fleece, cotton | style: cozy, relaxed"),
    ],
    "AESTHETIC / VIBE": [
        ('"minimalist"', "style: minimalist, modern | colors: neutrals"),
        ('"boho" / "bohemian"', "subcategories: dresses, blouses | materials: linen, cotton | style: relaxed"),
        ('"streetwear"', "subcategories: hoodies, jeans | style: casual, oversized"),
        ('"vintage" / "retro"', "subcategories: dresses, jeans | materials: denim | style: vintage"),
        ('"edgy"', "subcategories: jackets, jeans | materials: leather, denim | style: edgy"),
        ('"cozy"', "subcategories: sweaters, hoodies | materials: wool, fleece, cashmere | style: cozy, oversized"),
    ],
    "FIT / STYLE": [
        ('"oversized" / "baggy"', "style: oversized, relaxed"),
        ('"fitted" / "slim"', "style: fitted, modern"),
        ('"flowy" / "loose"', "style: relaxed"),
    ],
}
