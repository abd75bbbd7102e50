from schemas import make_chip
from services.color_policy import (
    apply_color_policy, colors_for_subcategories, derive_colors, detect_color_family,
)


def _values(chips):
    return [c.filter_value for c in chips]


def test_colors_come_from_selected_subcategories(products):
    assert colors_for_subcategories(products, ["sweaters"]) == ["blue", "cream", "green"]
    assert colors_for_subcategories(products, ["sweaters", "jackets"]) == [
        "black", "blue", "brown", "cream", "green"]
    assert colors_for_subcategories(products, []) == []


def test_explicit_color_wins_exclusively(products):
    # no red sweater exists; the explicit color is still honored as-is
    accepted = [make_chip("subcategory", "sweaters"), make_chip("color", "red")]
    colors = derive_colors(accepted, products, ["sweaters"], "a red sweater please")
    assert _values(colors) == ["red"]


def test_no_subcategory_means_no_colors(products):
    accepted = [make_chip("material", "wool")]
    assert derive_colors(accepted, products, [], "something earthy") == []


def test_derived_colors_without_family(products):
    colors = derive_colors([make_chip("subcategory", "sweaters")], products, ["sweaters"], "warm stuff")
    assert _values(colors) == ["blue", "cream", "green"]
    assert all(c.id == f"chip-color-{c.filter_value}" for c in colors)


def test_family_narrows_derived_colors(products):
    colors = derive_colors([], products, ["sweaters"], "earthy sweaters")
    assert _values(colors) == ["cream"]


def test_family_with_no_overlap_gives_nothing(products):
    assert derive_colors([], products, ["pants"], "pastel pants") == []


def test_detect_family_word_boundaries():
    assert detect_color_family("bold jackets")[0] == "brights"
    assert detect_color_family("boldly going") is None
    assert detect_color_family("darkness falls") is None


def test_detect_family_table_order_breaks_ties_within_text():
    # both neutral and dark appear; earlier table entry wins
    assert detect_color_family("dark or neutral tones")[0] == "neutrals"


def test_detect_family_prefers_most_recent_text():
    family, _ = detect_color_family(["something pastel", "earth tones earlier"])
    assert family == "pastels"
    family, _ = detect_color_family(["just sweaters", "earth tones earlier"])
    assert family == "earth_tones"


def test_detect_family_nothing():
    assert detect_color_family(None) is None
    assert detect_color_family(["", "plain"]) is None


def test_apply_policy_orders_by_facet(products):
    accepted = [
        make_chip("style_tag", "cozy"),
        make_chip("material", "wool"),
        make_chip("subcategory", "sweaters"),
        make_chip("occasion", "casual"),
    ]
    chips = apply_color_policy(accepted, products, ["sweaters"], "earthy")
    assert [c.type for c in chips] == ["subcategory", "occasion", "material", "color", "style_tag"]
    assert [c.filter_value for c in chips if c.type == "color"] == ["cream"]
