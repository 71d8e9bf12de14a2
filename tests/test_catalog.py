"""
Tests for the catalogue filter engine.
"""
from datetime import datetime, timezone

import pytest

from storefront.catalog import (
    FacetType,
    UnknownFacetError,
    active_filter_count,
    clear_filters,
    facet_counts,
    festivals_in,
    filter_and_sort,
    filter_state_from_navigation,
    is_new_arrival,
    toggle_filter,
)
from storefront.models import FilterState, Product

NOW = datetime(2026, 10, 18, 15, 0)


def ids(items):
    return [p.id for p in items]


def run(products, **kwargs):
    return ids(filter_and_sort(products, FilterState(**kwargs), now=NOW))


class TestFacets:
    """One facet at a time."""

    def test_no_filters_is_pass_through(self, products):
        assert run(products) == ["p-001", "p-002", "p-003", "p-004", "p-005"]

    def test_empty_catalogue(self):
        assert filter_and_sort([], FilterState(essentials=True), now=NOW) == []

    def test_essentials(self, products):
        assert run(products, essentials=True) == ["p-001", "p-003"]

    def test_new_in_same_calendar_day(self, products):
        # p-002 was created yesterday evening, p-004/p-005 have no timestamp
        assert run(products, new_in=True) == ["p-001", "p-003"]

    def test_category_exact(self, products):
        assert run(products, category={"Shirts", "Knitwear"}) == ["p-001", "p-003"]
        assert run(products, category={"shirts"}) == []

    def test_gender_includes_unisex(self, products):
        # p-004 is stored lower-case; p-005 has no gender at all
        assert run(products, gender={"Men"}) == ["p-001", "p-003", "p-004"]
        assert run(products, gender={"women"}) == ["p-002", "p-003"]

    def test_fabric_and_fit(self, products):
        assert run(products, fabric={"Wool", "Linen"}) == ["p-004", "p-005"]
        assert run(products, fit={"Slim Fit"}) == ["p-001", "p-002"]
        # bare values are the caller's job to suffix
        assert run(products, fit={"Slim"}) == []

    def test_size_intersection(self, products):
        assert run(products, size={"S", "XL"}) == ["p-001", "p-002", "p-003", "p-004"]

    def test_missing_field_never_matches(self, products):
        assert "p-005" not in run(products, category={"Outerwear", "Shirts"})
        assert "p-005" not in run(products, festival={"Diwali"})


class TestPriceBrackets:

    def test_single_brackets(self, products):
        assert run(products, price={"Under 200"}) == ["p-001"]
        assert run(products, price={"200-400"}) == ["p-003", "p-004"]
        assert run(products, price={"400-600"}) == ["p-005"]
        assert run(products, price={"Over 600"}) == ["p-002"]

    def test_en_dash_label(self, products):
        assert run(products, price={"200–400"}) == ["p-003", "p-004"]

    def test_brackets_are_ored(self, products):
        assert run(products, price={"Under 200", "Over 600"}) == ["p-001", "p-002"]

    def test_boundaries(self):
        at_200 = Product(id="a", name="A", price=200)
        at_400 = Product(id="b", name="B", price=400)
        assert run([at_200], price={"200-400"}) == ["a"]
        assert run([at_200], price={"Under 200"}) == []
        assert run([at_400], price={"200-400"}) == ["b"]
        assert run([at_400], price={"400-600"}) == []

    def test_unknown_bracket_matches_nothing(self, products):
        assert run(products, price={"Cheap"}) == []


class TestFestival:

    def test_sidebar_case_insensitive(self, products):
        assert run(products, festival={"DIWALI"}) == ["p-001", "p-004"]

    def test_quick_filter(self, products):
        assert run(products, festival_quick="eid") == ["p-002"]
        assert len(run(products, festival_quick="all")) == 5

    def test_both_must_pass(self, products):
        assert run(products, festival={"Diwali"}, festival_quick="Eid") == []
        assert run(products, festival={"Diwali", "Eid"}, festival_quick="Eid") == ["p-002"]


class TestSorting:

    def test_price_asc(self, products):
        assert run(products, sort_by="price-asc") == ["p-001", "p-004", "p-003", "p-005", "p-002"]

    def test_price_desc(self, products):
        assert run(products, sort_by="price-desc") == ["p-002", "p-005", "p-003", "p-004", "p-001"]

    @pytest.mark.parametrize("sort_by", ["new", "popular"])
    def test_new_and_popular_keep_order(self, products, sort_by):
        reversed_input = list(reversed(products))
        assert ids(filter_and_sort(reversed_input, FilterState(sort_by=sort_by), now=NOW)) == ids(reversed_input)

    def test_sort_is_stable(self):
        items = [Product(id=str(i), name="x", price=100) for i in range(4)]
        assert run(items, sort_by="price-desc") == ["0", "1", "2", "3"]


class TestProperties:

    def test_input_untouched_and_idempotent(self, products):
        snapshot = list(products)
        filters = FilterState(sort_by="price-desc", gender={"Men"})
        first = filter_and_sort(products, filters, now=NOW)
        second = filter_and_sort(products, filters, now=NOW)
        assert first == second
        assert products == snapshot
        assert first is not products

    def test_monotonic_narrowing(self, products):
        loose = FilterState(gender={"Men"})
        tight = FilterState(gender={"Men"}, size={"L"}, essentials=True, price={"Under 200", "200-400"})
        assert set(run(products, **tight.model_dump())) <= set(run(products, **loose.model_dump()))

    def test_combined_facets(self, products):
        assert run(products, gender={"Men"}, essentials=True, size={"L"}) == ["p-001", "p-003"]

    def test_end_to_end_price_scenario(self):
        catalogue = [
            Product(id="cheap", name="A", price=150),
            Product(id="mid", name="B", price=250),
            Product(id="dear", name="C", price=450),
        ]
        assert run(catalogue, price={"Under 200"}) == ["cheap"]
        assert run(catalogue, sort_by="price-desc") == ["dear", "mid", "cheap"]


class TestNewArrival:

    def test_aware_timestamps(self):
        now = datetime(2026, 10, 18, 9, 45, tzinfo=timezone.utc)
        fresh = Product(id="a", name="A", price=1, created_at="2026-10-18T09:30:00Z")
        assert is_new_arrival(fresh, now)

    def test_unparseable_timestamp(self):
        junk = Product(id="a", name="A", price=1, created_at="yesterday")
        assert not is_new_arrival(junk, NOW)


class TestFacetCounts:

    def test_counts_ignore_own_facet(self, products):
        counts = facet_counts(products, FilterState(category={"Shirts"}), now=NOW)
        assert counts["category"]["Shirts"] == 1
        assert counts["category"]["Knitwear"] == 1
        assert counts["category"]["Outerwear"] == 0
        # other facets are counted inside the Shirts selection
        assert counts["gender"] == {"Men": 1, "Women": 0, "Unisex": 0}
        assert counts["price"]["Under 200"] == 1
        assert counts["price"]["Over 600"] == 0

    def test_festival_options_from_catalogue(self, products):
        assert festivals_in(products) == ["Diwali", "Eid"]
        counts = facet_counts(products, FilterState(), now=NOW)
        assert counts["festival"] == {"Diwali": 2, "Eid": 1}
        assert counts["size"]["M"] == 4


class TestStateHelpers:

    def test_toggle_adds_then_removes(self):
        start = FilterState()
        on = toggle_filter(start, "size", "M")
        off = toggle_filter(on, "size", "M")
        assert on.size == {"M"}
        assert off.size == set()
        assert start.size == set()

    def test_toggle_unknown_facet(self):
        with pytest.raises(UnknownFacetError):
            toggle_filter(FilterState(), "colour", "red")

    def test_clear_keeps_sort(self):
        busy = FilterState(size={"M"}, essentials=True, sort_by="price-asc")
        cleared = clear_filters(busy)
        assert cleared == FilterState(sort_by="price-asc")

    def test_active_filter_count(self):
        state = FilterState(size={"M", "L"}, price={"Under 200"}, new_in=True, festival_quick="Eid")
        assert active_filter_count(state) == 5
        assert active_filter_count(FilterState()) == 0


class TestNavigation:

    def test_fit_gets_suffix(self):
        assert filter_state_from_navigation("fit", "Slim").fit == {"Slim Fit"}
        assert filter_state_from_navigation("fit", "Relaxed Fit").fit == {"Relaxed Fit"}

    def test_fit_suffix_any_case(self):
        assert filter_state_from_navigation("fit", "Slim fit").fit == {"Slim Fit"}
        assert filter_state_from_navigation("fit", "regular FIT").fit == {"regular Fit"}
        assert filter_state_from_navigation("fit", " Relaxed ").fit == {"Relaxed Fit"}

    def test_women_essentials(self):
        state = filter_state_from_navigation("essentials", "true", gender="Women")
        assert state.essentials is True
        assert state.gender == {"Women"}
        assert state.category == set()

    def test_new_in(self):
        assert filter_state_from_navigation(FacetType.NEW_IN.value, "true").new_in is True

    def test_plain_facets(self):
        assert filter_state_from_navigation("gender", "Men").gender == {"Men"}
        assert filter_state_from_navigation("category", "Knitwear").category == {"Knitwear"}
        assert filter_state_from_navigation("fabric", "Silk").fabric == {"Silk"}

    def test_unknown_facet_rejected(self):
        with pytest.raises(UnknownFacetError):
            filter_state_from_navigation("colour", "red")
