from store_atlas.geo.address import normalize
from store_atlas.models import StoreRecord


def test_normalize_joins_fields_in_order():
    record = StoreRecord(id="s1", address_line1="12 Oxford St", city="Accra", region="Greater Accra", country="Ghana")
    assert normalize(record) == "12 Oxford St, Accra, Greater Accra, Ghana"


def test_normalize_skips_blank_fields_and_trims():
    record = StoreRecord(id="s1", address_line1="  ", city=" Kumasi ", region=None, country="Ghana")
    assert normalize(record) == "Kumasi, Ghana"


def test_normalize_returns_none_without_address():
    assert normalize(StoreRecord(id="s1")) is None
    assert normalize(StoreRecord(id="s2", city="   ")) is None


def test_normalize_is_deterministic_for_identical_fields():
    first = StoreRecord(id="a", address_line1="1 Main St", city="Lagos", country="Nigeria")
    second = StoreRecord(id="b", address_line1="1 Main St", city="Lagos", country="Nigeria", name="Other")
    assert normalize(first) == normalize(second) == normalize(first)


def test_normalize_accepts_row_mappings():
    assert normalize({"addressLine1": "1 Main St", "city": "Lagos"}) == "1 Main St, Lagos"
    assert normalize({"address_line1": "2 High St", "country": "Kenya", "city": 42}) == "2 High St, Kenya"
