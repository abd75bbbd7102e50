from schemas import FilterState, PriceRange, make_chip
from services.filter_engine import (
    apply_chip_to_filters, apply_filters, facet_availability, filters_from_chips,
    find_products_matching_any_chip, is_chip_available, remove_chip_from_filters,
)


def _ids(products):
    return [p.id for p in products]


def test_empty_filters_keep_everything(products):
    assert _ids(apply_filters(products, FilterState())) == _ids(products)


def test_or_within_and_across_facets(products):
    f = FilterState(colors=["blue", "green"], materials=["wool"])
    assert _ids(apply_filters(products, f)) == ["p1", "p2"]
    f = FilterState(colors=["blue", "black"], materials=["wool"])
    assert _ids(apply_filters(products, f)) == ["p1"]


def test_subcategories_array_wins_over_single(products):
    f = FilterState(subcategory="pants", subcategories=["jackets"])
    assert _ids(apply_filters(products, f)) == ["p6", "p7"]
    assert _ids(apply_filters(products, FilterState(subcategory="pants"))) == ["p4"]


def test_color_is_case_insensitive(products):
    assert _ids(apply_filters(products, FilterState(colors=["RED"]))) == ["p5", "p8"]


def test_array_facets_intersect(products):
    assert _ids(apply_filters(products, FilterState(occasions=["date", "lounge"]))) == ["p2", "p6", "p8"]
    assert _ids(apply_filters(products, FilterState(style_tags=["classic"]))) == ["p1", "p7"]


def test_stock_and_price_are_inclusive(products):
    assert "p8" not in _ids(apply_filters(products, FilterState(in_stock=True)))
    f = FilterState(min_price=80, max_price=200)
    assert _ids(apply_filters(products, f)) == ["p1", "p2", "p7", "p8"]


def test_filter_state_drops_duplicate_values():
    assert FilterState(colors=["red", "red", "blue"]).colors == ["red", "blue"]


def test_apply_subcategory_chip_keeps_forms_in_sync():
    f = apply_chip_to_filters(FilterState(), make_chip("subcategory", "sweaters"))
    assert f.subcategory == "sweaters" and f.subcategories == ["sweaters"]
    f = apply_chip_to_filters(f, make_chip("subcategory", "sweaters"))
    assert f.subcategories == ["sweaters"]


def test_apply_and_remove_chip():
    chip = make_chip("style_tag", "cozy")
    f = apply_chip_to_filters(FilterState(), chip)
    assert f.style_tags == ["cozy"]
    assert remove_chip_from_filters(f, chip).style_tags == []

    sub = make_chip("subcategory", "pants")
    f = filters_from_chips([sub, make_chip("subcategory", "jackets", filter_key="subcategories")])
    f = remove_chip_from_filters(f, sub)
    assert f.subcategories == ["jackets"] and f.subcategory is None


def test_filters_from_chips_with_price():
    f = filters_from_chips([make_chip("color", "red")], PriceRange(min_price=10, max_price=90))
    assert f.colors == ["red"] and (f.min_price, f.max_price) == (10, 90)


def test_any_match_ranks_by_hits(products):
    chips = [make_chip("subcategory", "sweaters"), make_chip("material", "wool"), make_chip("color", "blue")]
    out = find_products_matching_any_chip(products, chips)
    assert _ids(out) == ["p1", "p2", "p3"]


def test_any_match_ties_keep_catalog_order(products):
    chips = [make_chip("material", "leather"), make_chip("size", "S")]
    assert _ids(find_products_matching_any_chip(products, chips)) == ["p3", "p5", "p6", "p7", "p8"]


def test_occasion_is_a_hard_gate(products):
    chips = [make_chip("occasion", "athletic"), make_chip("material", "leather")]
    assert find_products_matching_any_chip(products, chips) == []


def test_occasion_gate_scores_the_rest(products):
    chips = [make_chip("occasion", "casual"), make_chip("material", "leather")]
    assert _ids(find_products_matching_any_chip(products, chips)) == ["p6", "p7"]


def test_occasion_only(products):
    chips = [make_chip("occasion", "date")]
    assert _ids(find_products_matching_any_chip(products, chips)) == ["p6", "p8"]


def test_no_chips_no_preview(products):
    assert find_products_matching_any_chip(products, []) == []


def test_chip_availability(products):
    f = FilterState(subcategories=["sweaters"])
    assert is_chip_available(products, f, make_chip("material", "cashmere"))
    assert not is_chip_available(products, f, make_chip("material", "leather"))
    # already selected stays available even when it would empty the results
    leather = make_chip("material", "leather")
    assert is_chip_available(products, f, leather, selected=[leather])


def test_facet_availability_covers_every_value(products, facets):
    f = FilterState(subcategories=["jackets"])
    out = facet_availability(products, facets, f)
    assert out["material-leather"] is True
    assert out["material-wool"] is False
    assert out["subcategory-jackets"] is True
    # OR within subcategory: adding another subcategory widens the results
    assert out["subcategory-dresses"] is True
    n = sum(len(facets.values_for(t)) for t in ("subcategory", "color", "material", "style_tag", "occasion", "size"))
    assert len(out) == n


def test_adding_a_constraint_never_grows_results(products, facets):
    base = FilterState(occasions=["casual"])
    before = len(apply_filters(products, base))
    for chip_type, key in (("color", "colors"), ("material", "materials"), ("size", "sizes")):
        for value in facets.values_for(chip_type):
            narrowed = base.model_copy(update={key: [value]})
            assert len(apply_filters(products, narrowed)) <= before
    assert len(apply_filters(products, base.model_copy(update={"in_stock": True}))) <= before
    assert len(apply_filters(products, base.model_copy(update={"max_price": 100}))) <= before
