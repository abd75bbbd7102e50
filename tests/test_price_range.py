import logging

from schemas import PriceRange
from services.price_range import reconcile_price

BOUNDS = PriceRange(min_price=0, max_price=500)


def _pr(lo, hi):
    return PriceRange(min_price=lo, max_price=hi)


def test_nothing_extracted_keeps_current():
    current = _pr(40, 90)
    assert reconcile_price(current, None, None, BOUNDS) is current


def test_both_bounds_replace_held_range():
    assert reconcile_price(_pr(0, 500), 50, 120, BOUNDS) == _pr(50, 120)


def test_inverted_extraction_is_ignored(caplog):
    current = _pr(40, 90)
    with caplog.at_level(logging.WARNING):
        assert reconcile_price(current, 200, 100, BOUNDS) == current
    assert "PRICE_CONFLICT" in caplog.text


def test_min_above_held_max_resets_max_to_catalog():
    assert reconcile_price(_pr(0, 275), 300, None, BOUNDS) == _pr(300, 500)


def test_max_below_held_min_resets_min_to_catalog():
    assert reconcile_price(_pr(100, 400), None, 60, BOUNDS) == _pr(0, 60)


def test_single_bound_keeps_the_other():
    assert reconcile_price(_pr(20, 300), 50, None, BOUNDS) == _pr(50, 300)
    assert reconcile_price(_pr(20, 300), None, 80, BOUNDS) == _pr(20, 80)


def test_extraction_outside_catalog_collapses():
    assert reconcile_price(_pr(0, 500), 800, None, BOUNDS) == _pr(800, 800)
    small = _pr(25, 275)
    assert reconcile_price(small, None, 10, small) == _pr(10, 10)


def test_inverted_held_range_falls_back_to_bounds():
    broken = PriceRange.model_construct(min_price=300, max_price=100)
    assert reconcile_price(broken, None, 200, BOUNDS) == _pr(0, 200)


def test_missing_held_range_starts_from_bounds():
    assert reconcile_price(None, 75, None, BOUNDS) == _pr(75, 500)


def test_empty_catalog_means_no_price_filtering():
    assert reconcile_price(None, 50, 100, None) is None


def test_result_is_ordered():
    for lo, hi in [(10, None), (None, 10), (600, None), (None, 0), (5, 5)]:
        out = reconcile_price(_pr(100, 200), lo, hi, BOUNDS)
        assert out.min_price <= out.max_price
