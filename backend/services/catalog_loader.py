from __future__ import annotations
from pathlib import Path
from typing import List
import json, logging

from pydantic import TypeAdapter

from schemas import Product

log = logging.getLogger(__name__)

_PRODUCTS = TypeAdapter(List[Product])


def load_catalog(path: Path) -> List[Product]:
    """
    Read the static catalog (a JSON array of product records) into immutable Products.
    Raises FileNotFoundError / pydantic.ValidationError on a broken catalog:
    the service should not start on bad data.
    """
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    products = _PRODUCTS.validate_python(raw)
    ids = [p.id for p in products]
    if len(set(ids)) != len(ids):
        dupes = sorted({i for i in ids if ids.count(i) > 1})
        raise ValueError(f"Duplicate product ids in catalog: {', '.join(dupes)}")
    log.info(f"CATALOG_LOADED | path={path} | products={len(products)}")
    return products
