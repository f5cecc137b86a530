from datetime import datetime, timezone

from store_atlas.etl import transform


def test_to_nullable_string_and_number():
    assert transform.to_nullable_string("  Accra ") == "Accra"
    assert transform.to_nullable_string("   ") is None
    assert transform.to_nullable_string(12) is None
    assert transform.to_number("4.5") == 4.5
    assert transform.to_number(3) == 3.0
    assert transform.to_number("abc") is None
    assert transform.to_number(float("nan")) is None
    assert transform.to_number(True) is None


def test_to_store_product_falls_back_across_fields():
    product = transform.to_store_product(
        {"id": "p1", "name": "Bread", "type": "Bakery", "price": "2.50", "unit": "GHS"}
    )

    assert product.id == "p1"
    assert product.title == "Bread"
    assert product.category == "Bakery"
    assert product.price == 2.5
    assert product.currency == "GHS"


def test_to_store_product_drops_empty_rows():
    assert transform.to_store_product({"id": "p1", "price": 3}) is None
    assert transform.to_store_products([{"id": "p1"}, {"id": "p2", "label": "Soap"}])[0].title == "Soap"


def test_to_store_record_maps_row():
    created = datetime(2024, 1, 1, tzinfo=timezone.utc)
    row = {
        "id": "s1",
        "name": "Acme",
        "display_name": " Acme Market ",
        "addressLine1": "12 Oxford St",
        "city": "Accra",
        "country": "Ghana",
        "latitude": "5.6",
        "longitude": None,
        "created_at": created,
        "updated_at": "not-a-date",
    }

    record = transform.to_store_record(row, [{"id": "p1", "title": "Bread"}])

    assert record.id == "s1"
    assert record.display_name == "Acme Market"
    assert record.address_line1 == "12 Oxford St"
    assert record.latitude == 5.6
    assert record.longitude is None
    assert record.created_at == created
    assert record.updated_at is None
    assert [product.title for product in record.products] == ["Bread"]
    assert record.raw is row


def test_to_store_payload_serializes_nullable_coordinates():
    record = transform.to_store_record(
        {"id": "s1", "name": "Acme", "city": "Accra", "geocoded_at": datetime(2024, 5, 1, tzinfo=timezone.utc)},
        [{"id": "p1", "title": "Bread", "price": 2}],
    )

    payload = transform.to_store_payload(record)

    assert payload["id"] == "s1"
    assert payload["latitude"] is None
    assert payload["longitude"] is None
    assert payload["geocoded_at"] == "2024-05-01T00:00:00+00:00"
    assert payload["products"] == [
        {"id": "p1", "title": "Bread", "category": None, "description": None, "price": 2.0, "currency": None}
    ]
