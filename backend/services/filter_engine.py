"""
Filter engine.

Strict mode (`apply_filters`): OR within a facet, AND across facets.
  colors=["blue","green"] & materials=["wool"]  ->  (blue OR green) AND wool
An empty list / None field never excludes a product.

Preview mode (`find_products_matching_any_chip`): rank products by how many
candidate chips they satisfy. Occasion chips act as a hard gate first.
"""
from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Sequence
import logging

from schemas import CatalogFacets, FilterState, PriceRange, Product, chip_key, make_chip
from services.mappings import FILTER_KEY_FIELD, FILTER_SECTIONS

log = logging.getLogger(__name__)

# ---------------- strict mode ----------------

def _intersects(a: Iterable[str], b: Iterable[str]) -> bool:
    return not set(a).isdisjoint(b)


def matches_filters(product: Product, filters: FilterState) -> bool:
    # subcategory: array form takes precedence over the single value
    if filters.subcategories:
        if product.subcategory not in filters.subcategories:
            return False
    elif filters.subcategory:
        if product.subcategory != filters.subcategory:
            return False

    if filters.occasions and not _intersects(product.occasions, filters.occasions):
        return False

    if filters.colors:
        color = product.color.casefold()
        if not any(color == c.casefold() for c in filters.colors):
            return False

    if filters.materials and product.material not in filters.materials:
        return False

    if filters.sizes and product.size not in filters.sizes:
        return False

    if filters.style_tags and not _intersects(product.style_tags, filters.style_tags):
        return False

    if filters.in_stock is not None and product.in_stock != filters.in_stock:
        return False

    if filters.min_price is not None and product.price < filters.min_price:
        return False
    if filters.max_price is not None and product.price > filters.max_price:
        return False

    return True


def apply_filters(products: Sequence[Product], filters: FilterState) -> List[Product]:
    return [p for p in products if matches_filters(p, filters)]

# ---------------- chip <-> filter state ----------------

def _with(values: List[str], value: str) -> List[str]:
    return values if value in values else [*values, value]


def _without(values: List[str], value: str) -> List[str]:
    return [v for v in values if v != value]


def apply_chip_to_filters(filters: FilterState, chip) -> FilterState:
    """New FilterState with the chip's value added (no duplicates)."""
    value = chip.filter_value
    if chip.filter_key == "subcategory":
        # single value and array form stay in sync
        update = {"subcategory": value, "subcategories": _with(filters.subcategories, value)}
    else:
        field = FILTER_KEY_FIELD[chip.filter_key]
        update = {field: _with(getattr(filters, field), value)}
    return filters.model_copy(update=update)


def remove_chip_from_filters(filters: FilterState, chip) -> FilterState:
    value = chip.filter_value
    if chip.type == "subcategory":
        update = {
            "subcategories": _without(filters.subcategories, value),
            "subcategory": None if filters.subcategory == value else filters.subcategory,
        }
    else:
        field = FILTER_KEY_FIELD[chip.filter_key]
        update = {field: _without(getattr(filters, field), value)}
    return filters.model_copy(update=update)


def filters_from_chips(chips: Sequence, price_range: Optional[PriceRange] = None,
                       base: Optional[FilterState] = None) -> FilterState:
    state = base or FilterState()
    for chip in chips:
        state = apply_chip_to_filters(state, chip)
    if price_range is not None:
        state = state.model_copy(update={"min_price": price_range.min_price,
                                         "max_price": price_range.max_price})
    return state

# ---------------- preview mode ----------------

def chip_matches(product: Product, chip) -> bool:
    value = chip.filter_value
    if chip.type == "subcategory":
        return product.subcategory == value
    if chip.type == "occasion":
        return value in product.occasions
    if chip.type == "color":
        return product.color.casefold() == value.casefold()
    if chip.type == "material":
        return product.material == value
    if chip.type == "style_tag":
        return value in product.style_tags
    if chip.type == "size":
        return product.size == value
    return False


def find_products_matching_any_chip(products: Sequence[Product], chips: Sequence) -> List[Product]:
    """
    Products satisfying at least one chip, most chips first, catalog order on ties.

    Occasion chips are a hard gate: only products with one of the requested
    occasions are considered, and the remaining chips are scored inside that
    pool. With occasion chips only, the gated pool is ranked by occasion hits.
    """
    if not chips:
        return []
    occasions = {c.filter_value for c in chips if c.type == "occasion"}
    pool: Sequence[Product] = products
    scoring = list(chips)
    if occasions:
        pool = [p for p in products if _intersects(p.occasions, occasions)]
        rest = [c for c in chips if c.type != "occasion"]
        if rest:
            scoring = rest
        log.debug(f"OCCASION_GATE | occasions={sorted(occasions)} | pool={len(pool)}/{len(products)}")

    scored = []
    for p in pool:
        n = sum(1 for c in scoring if chip_matches(p, c))
        if n > 0:
            scored.append((n, p))
    scored.sort(key=lambda s: -s[0])  # stable: ties keep catalog order
    return [p for _, p in scored]

# ---------------- availability ----------------

def _is_active(chip, filters: FilterState, selected: Sequence) -> bool:
    if chip_key(chip) in {chip_key(c) for c in selected}:
        return True
    if chip.type == "subcategory":
        return chip.filter_value in filters.subcategories or chip.filter_value == filters.subcategory
    return chip.filter_value in getattr(filters, FILTER_KEY_FIELD[chip.filter_key])


def is_chip_available(products: Sequence[Product], filters: FilterState, chip,
                      selected: Sequence = ()) -> bool:
    """A chip is offered iff adding it still leaves results, or it is already active."""
    if _is_active(chip, filters, selected):
        return True
    hypothetical = apply_chip_to_filters(filters, chip)
    return any(matches_filters(p, hypothetical) for p in products)


def facet_availability(products: Sequence[Product], facets: CatalogFacets,
                       filters: FilterState, selected: Sequence = ()) -> Dict[str, bool]:
    """Availability for every facet value, keyed `{type}-{value}`."""
    out: Dict[str, bool] = {}
    for _section, chip_type, filter_key in FILTER_SECTIONS:
        for value in facets.values_for(chip_type):
            chip = make_chip(chip_type, value, filter_key=filter_key)
            out[f"{chip_type}-{value}"] = is_chip_available(products, filters, chip, selected)
    return out
