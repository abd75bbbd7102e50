"""
Quick validator: checks every catalog record against the Product schema
and prints the facet vocabulary the assistant will accept.
Usage: python scripts/validate_catalog.py [path/to/products.json]
"""
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from pydantic import ValidationError  # noqa: E402

from services.catalog_loader import load_catalog  # noqa: E402
from services.facets import build_facets  # noqa: E402

CAT = ROOT / "data" / "products.json"


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    path = Path(argv[0]) if argv else CAT
    try:
        products = load_catalog(path)
    except (OSError, ValueError, ValidationError) as e:
        print(f"Catalog invalid: {e}")
        return 1

    facets = build_facets(products)
    print(f"Validated {len(products)} items from {path}")
    for name in ("subcategories", "occasions", "colors", "materials", "style_tags", "sizes"):
        values = getattr(facets, name)
        print(f"  {name:<14} ({len(values):>2}) {', '.join(values)}")
    pr = facets.price_range
    print(f"  price range    {f'${pr.min_price} - ${pr.max_price}' if pr else 'n/a'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
