from __future__ import annotations
from typing import Annotated, Any, Dict, List, Literal, Optional, Union, get_args
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, TypeAdapter, field_validator

ChipType = Literal["subcategory", "occasion", "color", "material", "style_tag", "size"]
FilterKey = Literal[
    "subcategory", "subcategories", "occasions", "colors",
    "materials", "styleTags", "sizes", "inStock",
]
IntentMode = Literal["replace", "refine", "explore"]
ReplaceCategory = Literal[
    "all", "all_except_price", "subcategory", "occasions",
    "materials", "colors", "style_tags", "sizes", "price",
]

CHIP_TYPES = get_args(ChipType)
FILTER_KEYS = get_args(FilterKey)
INTENT_MODES = get_args(IntentMode)
REPLACE_CATEGORIES = get_args(ReplaceCategory)


class _Wire(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(populate_by_name=True)


class _Frozen(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


# ---------------- catalog ----------------

class Product(_Frozen):
    id: str
    title: str
    description: str = ""
    image_url: str = ""
    price: int
    in_stock: bool = True
    category: str = "apparel"
    subcategory: str
    color: str
    material: str
    size: str
    style_tags: List[str] = Field(default_factory=list)
    occasions: List[str] = Field(default_factory=list, alias="occasion")


class PriceRange(_Frozen):
    min_price: int = Field(0, alias="min")
    max_price: int = Field(0, alias="max")

    def is_default(self, bounds: Optional["PriceRange"]) -> bool:
        return bounds is not None and self == bounds


class CatalogFacets(_Frozen):
    subcategories: List[str] = Field(default_factory=list)
    occasions: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    materials: List[str] = Field(default_factory=list)
    style_tags: List[str] = Field(default_factory=list, alias="styleTags")
    sizes: List[str] = Field(default_factory=list)
    # None for an empty catalog: no price filtering possible
    price_range: Optional[PriceRange] = Field(None, alias="priceRange")

    def values_for(self, chip_type: str) -> List[str]:
        return {
            "subcategory": self.subcategories,
            "occasion": self.occasions,
            "color": self.colors,
            "material": self.materials,
            "style_tag": self.style_tags,
            "size": self.sizes,
        }.get(chip_type, [])


# ---------------- filter chips ----------------
# One variant per chip type; each pins the FilterState keys it may target.

class _ChipBase(_Frozen):
    id: str
    label: str
    filter_value: str = Field(alias="filterValue")


class SubcategoryChip(_ChipBase):
    type: Literal["subcategory"] = "subcategory"
    filter_key: Literal["subcategory", "subcategories"] = Field("subcategory", alias="filterKey")


class OccasionChip(_ChipBase):
    type: Literal["occasion"] = "occasion"
    filter_key: Literal["occasions"] = Field("occasions", alias="filterKey")


class ColorChip(_ChipBase):
    type: Literal["color"] = "color"
    filter_key: Literal["colors"] = Field("colors", alias="filterKey")


class MaterialChip(_ChipBase):
    type: Literal["material"] = "material"
    filter_key: Literal["materials"] = Field("materials", alias="filterKey")


class StyleTagChip(_ChipBase):
    type: Literal["style_tag"] = "style_tag"
    filter_key: Literal["styleTags"] = Field("styleTags", alias="filterKey")


class SizeChip(_ChipBase):
    type: Literal["size"] = "size"
    filter_key: Literal["sizes"] = Field("sizes", alias="filterKey")


FilterChip = Annotated[
    Union[SubcategoryChip, OccasionChip, ColorChip, MaterialChip, StyleTagChip, SizeChip],
    Field(discriminator="type"),
]
CHIP_ADAPTER = TypeAdapter(FilterChip)

CHIP_CLASSES: Dict[str, type] = {
    "subcategory": SubcategoryChip,
    "occasion": OccasionChip,
    "color": ColorChip,
    "material": MaterialChip,
    "style_tag": StyleTagChip,
    "size": SizeChip,
}


def chip_label(chip_type: str, value: str) -> str:
    if chip_type == "size":
        return value.upper()
    return value[:1].upper() + value[1:]


def make_chip(chip_type: str, value: str, label: Optional[str] = None,
              filter_key: Optional[str] = None):
    """Build a chip with the canonical `chip-{type}-{value}` id."""
    cls = CHIP_CLASSES[chip_type]
    kwargs: Dict[str, Any] = {
        "id": f"chip-{chip_type}-{value}",
        "label": label or chip_label(chip_type, value),
        "filter_value": value,
    }
    if filter_key:
        kwargs["filter_key"] = filter_key
    return cls(**kwargs)


def chip_key(chip) -> tuple:
    """Identity used for de-duplication: subcategory/subcategories count as one facet."""
    return (chip.type, chip.filter_value.lower())


class RawChip(_Wire):
    """Chip exactly as the suggestion generator sent it (before catalog checks)."""
    id: StrictStr
    type: ChipType
    label: StrictStr
    filter_key: FilterKey = Field(alias="filterKey")
    filter_value: Union[StrictBool, StrictStr] = Field(alias="filterValue")


class SuggestionPayload(_Wire):
    message: StrictStr
    chips: List[RawChip]
    # loosely typed on purpose: bad values degrade per field instead of failing the turn
    intent_mode: Optional[Any] = Field(None, alias="intentMode")
    replace_categories: Optional[Any] = Field(None, alias="replaceCategories")
    min_price: Optional[Any] = Field(None, alias="minPrice")
    max_price: Optional[Any] = Field(None, alias="maxPrice")
    price_question: Optional[Any] = Field(None, alias="priceQuestion")


# ---------------- filter state ----------------

class FilterState(_Wire):
    subcategory: Optional[str] = None
    subcategories: List[str] = Field(default_factory=list)
    colors: List[str] = Field(default_factory=list)
    materials: List[str] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)
    style_tags: List[str] = Field(default_factory=list, alias="styleTags")
    occasions: List[str] = Field(default_factory=list)
    in_stock: Optional[bool] = Field(None, alias="inStock")
    min_price: Optional[int] = Field(None, alias="minPrice")
    max_price: Optional[int] = Field(None, alias="maxPrice")

    @field_validator("subcategories", "colors", "materials", "sizes", "style_tags", "occasions")
    @classmethod
    def _no_duplicates(cls, v: List[str]) -> List[str]:
        return list(dict.fromkeys(v))


class Selection(_Frozen):
    """Session-held selection, passed into and returned from every reconciliation."""
    version: int = 0
    selected_chips: List[FilterChip] = Field(default_factory=list, alias="selectedChips")
    price_range: Optional[PriceRange] = Field(None, alias="priceRange")


# ---------------- validation ----------------

class ValidationResult(_Wire):
    success: bool
    accepted: List[FilterChip] = Field(default_factory=list)
    rejected: List[RawChip] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    assistant_message: str = ""
    intent_mode: Optional[IntentMode] = None
    replace_categories: List[ReplaceCategory] = Field(default_factory=list)
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    price_question: Optional[str] = None


# ---------------- API ----------------

class Message(_Wire):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(_Wire):
    message: str
    conversation_history: List[Message] = Field(default_factory=list, alias="conversationHistory")
    selected_chips: List[FilterChip] = Field(default_factory=list, alias="selectedChips")
    current_filters: Optional[FilterState] = Field(None, alias="currentFilters")
    current_price_range: Optional[PriceRange] = Field(None, alias="currentPriceRange")
    selection_version: int = Field(0, alias="selectionVersion")


class AppliedFilters(_Wire):
    suggested_chip_count: int = Field(0, alias="suggestedChipCount")
    effective_min_price: Optional[int] = Field(None, alias="effectiveMinPrice")
    effective_max_price: Optional[int] = Field(None, alias="effectiveMaxPrice")
    total_products_before_filter: int = Field(0, alias="totalProductsBeforeFilter")
    total_products_after_filter: int = Field(0, alias="totalProductsAfterFilter")


class ChatResponse(_Wire):
    message: str
    suggested_chips: List[FilterChip] = Field(default_factory=list, alias="suggestedChips")
    invalid: List[RawChip] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    intent_mode: IntentMode = Field("refine", alias="intentMode")
    replace_categories: List[ReplaceCategory] = Field(default_factory=list, alias="replaceCategories")
    min_price: Optional[int] = Field(None, alias="minPrice")
    max_price: Optional[int] = Field(None, alias="maxPrice")
    price_question: Optional[str] = Field(None, alias="priceQuestion")
    selected_chips: List[FilterChip] = Field(default_factory=list, alias="selectedChips")
    price_range: Optional[PriceRange] = Field(None, alias="priceRange")
    selection_version: int = Field(0, alias="selectionVersion")
    matching_products: List[Product] = Field(default_factory=list, alias="matchingProducts")
    applied_filters: Optional[AppliedFilters] = Field(None, alias="appliedFilters")


class FilterRequest(_Wire):
    filters: FilterState = Field(default_factory=FilterState)


class PreviewRequest(_Wire):
    chips: List[FilterChip] = Field(default_factory=list)
    limit: int = 20


class AvailabilityRequest(_Wire):
    filters: FilterState = Field(default_factory=FilterState)
    selected_chips: List[FilterChip] = Field(default_factory=list, alias="selectedChips")


class CatalogResponse(_Wire):
    items: List[Product]


class ProductsResponse(_Wire):
    count: int
    items: List[Product]
