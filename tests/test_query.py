import pytest

from store_atlas.directory import query
from store_atlas.models import StoreRecord


@pytest.fixture
def stores():
    return [
        StoreRecord(id="1", name="Acme Market", city="Accra", country="Ghana", status="active"),
        StoreRecord(id="2", display_name="Beta Books", name="beta", city="Lagos", country="Nigeria", contract_status="Inactive"),
        StoreRecord(id="3", name="Gamma", city="Kumasi", country="ghana ", public_description="Fresh produce daily"),
        StoreRecord(id="4", name="Delta", country=None, contract_status="Pending"),
    ]


def test_filter_by_search_term(stores):
    assert [s.id for s in query.filter_stores(stores, "  LAGOS ")] == ["2"]
    assert [s.id for s in query.filter_stores(stores, "produce")] == ["3"]
    assert [s.id for s in query.filter_stores(stores, "")] == ["1", "2", "3", "4"]


def test_filter_by_country(stores):
    assert [s.id for s in query.filter_stores(stores, country="ghana")] == ["1", "3"]
    assert [s.id for s in query.filter_stores(stores, "acme", "nigeria")] == []


def test_paginate_clamps_page():
    items = list(range(50))

    first = query.paginate(items, 1, 24)
    last = query.paginate(items, 9, 24)

    assert first.items == list(range(24))
    assert first.total_pages == 3
    assert last.page == 3
    assert last.items == [48, 49]
    assert query.paginate([], 0, 24).total_pages == 1


def test_paginate_rejects_bad_page_size():
    with pytest.raises(ValueError):
        query.paginate([1], 1, 0)


def test_country_options_dedupes_case_insensitively(stores):
    assert query.country_options(stores) == [
        {"value": "ghana", "label": "Ghana"},
        {"value": "nigeria", "label": "Nigeria"},
    ]


def test_summarize_counts_active_and_countries(stores):
    # "Inactive" contains "active", matching the listing's substring rule.
    assert query.summarize(stores) == {"total": 4, "active": 2, "countries": 2}


def test_display_title_fallbacks():
    assert query.display_title(StoreRecord(id="1", display_name="Shown", name="n")) == "Shown"
    assert query.display_title(StoreRecord(id="1", name="n")) == "n"
    assert query.display_title(StoreRecord(id="1")) == "Store"
