import pytest

from storefront.recommendations import related_products

from conftest import make_product


def ids(products):
    return [p["id"] for p in products]


def test_shoes_and_bags_example():
    a = make_product("A", "shoes", 100)
    b = make_product("B", "shoes", 110)
    c = make_product("C", "shoes", 500)
    d = make_product("D", "bags", 105)
    assert ids(related_products(a, [a, b, c, d])) == ["B", "C", "D"]


def test_tiers_are_ordered_and_exclusive():
    focal = make_product("F", "shoes", 100)
    catalog = [
        make_product("x-out", "bags", 300),   # other category, outside band: never
        make_product("x-band", "bags", 90),   # tier 3
        make_product("s-far", "shoes", 10),   # tier 2
        make_product("s-band", "shoes", 120),  # tier 1 (upper bound inclusive)
        focal,
    ]
    result = ids(related_products(focal, catalog))
    assert result == ["s-band", "s-far", "x-band"]
    assert len(result) == len(set(result))


def test_catalog_order_kept_within_tier_and_limit_applied():
    focal = make_product("F", "shoes", 100)
    catalog = [make_product(f"s{i}", "shoes", 100) for i in range(6)]
    assert ids(related_products(focal, [focal] + catalog)) == ["s0", "s1", "s2", "s3"]
    assert ids(related_products(focal, catalog, limit=2)) == ["s0", "s1"]


def test_band_edges():
    focal = make_product("F", "shoes", 100)
    low = make_product("low", "bags", "89.99")
    edge = make_product("edge", "bags", 90)
    high = make_product("high", "bags", "120.01")
    assert ids(related_products(focal, [low, edge, high])) == ["edge"]


@pytest.mark.parametrize("focal,catalog", [(None, []), ({"id": "A"}, []), ({}, [{"id": "B"}])])
def test_empty_inputs(focal, catalog):
    assert related_products(focal, catalog) == []
