from __future__ import annotations
import json
from typing import List

import pytest

from schemas import Product
from services.facets import build_facets


def _p(pid, sub, color, material, size, price, tags, occasions, in_stock=True) -> Product:
    return Product(
        id=pid, title=f"{color} {material} {sub}", price=price, in_stock=in_stock,
        subcategory=sub, color=color, material=material, size=size,
        style_tags=tags, occasions=occasions,
    )


@pytest.fixture
def products() -> List[Product]:
    return [
        _p("p1", "sweaters", "blue", "wool", "M", 80, ["cozy", "classic"], ["casual"]),
        _p("p2", "sweaters", "green", "wool", "L", 120, ["cozy"], ["casual", "lounge"]),
        _p("p3", "sweaters", "cream", "cashmere", "S", 250, ["elegant"], ["professional"]),
        _p("p4", "pants", "black", "polyester", "M", 50, ["modern"], ["athletic"]),
        _p("p5", "t-shirts", "red", "cotton", "S", 25, ["casual"], ["athletic", "casual"]),
        _p("p6", "jackets", "brown", "leather", "L", 275, ["edgy"], ["casual", "date"]),
        _p("p7", "jackets", "black", "leather", "M", 200, ["edgy", "classic"], ["casual"]),
        _p("p8", "dresses", "red", "silk", "S", 150, ["elegant"], ["date", "formal"], in_stock=False),
    ]


@pytest.fixture
def facets(products):
    return build_facets(products)


def chip_dict(chip_type, value, filter_key=None, label=None, chip_id=None):
    keys = {
        "subcategory": "subcategory", "occasion": "occasions", "color": "colors",
        "material": "materials", "style_tag": "styleTags", "size": "sizes",
    }
    return {
        "id": chip_id or f"chip-{chip_type}-{value}",
        "type": chip_type,
        "label": label or str(value).capitalize(),
        "filterKey": filter_key or keys[chip_type],
        "filterValue": value,
    }


def suggestion(chips, message="Here you go!", **extra) -> str:
    return json.dumps({"message": message, "chips": chips, **extra})


class FakeGenerator:
    """Returns canned suggestion text and records what it was asked."""

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def generate(self, system_prompt, messages):
        self.calls.append((system_prompt, list(messages)))
        if self.error is not None:
            raise self.error
        return self.reply
