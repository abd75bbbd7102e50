from __future__ import annotations
from typing import Iterable, List

from schemas import CatalogFacets, PriceRange, Product


def _sorted_unique(values: Iterable[str]) -> List[str]:
    return sorted({v for v in values if v})


def build_facets(products: List[Product]) -> CatalogFacets:
    """
    Controlled vocabulary of the catalog: sorted distinct values per facet
    (array fields flattened) plus the catalog-wide price bounds.
    An empty catalog yields empty lists and no price range.
    """
    price_range = None
    if products:
        prices = [p.price for p in products]
        price_range = PriceRange(min_price=min(prices), max_price=max(prices))

    return CatalogFacets(
        subcategories=_sorted_unique(p.subcategory for p in products),
        occasions=_sorted_unique(o for p in products for o in p.occasions),
        colors=_sorted_unique(p.color for p in products),
        materials=_sorted_unique(p.material for p in products),
        style_tags=_sorted_unique(t for p in products for t in p.style_tags),
        sizes=_sorted_unique(p.size for p in products),
        price_range=price_range,
    )
