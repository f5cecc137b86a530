"""Canonical address strings used as geocode cache keys."""

from typing import Any, Mapping, Optional, Tuple

ADDRESS_FIELDS: Tuple[str, ...] = ("address_line1", "city", "region", "country")

# camelCase keys used by document-store exports.
_CAMEL_CASE = {"address_line1": "addressLine1"}


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        value = record.get(name)
        if value is None and name in _CAMEL_CASE:
            value = record.get(_CAMEL_CASE[name])
        return value
    return getattr(record, name, None)


def normalize(record: Any) -> Optional[str]:
    """Join the non-blank address fields of ``record`` with ``", "``.

    ``record`` may be a :class:`~store_atlas.models.StoreRecord` or a row
    mapping. Returns ``None`` when every field is empty.
    """
    parts = []
    for name in ADDRESS_FIELDS:
        value = _field(record, name)
        if not isinstance(value, str):
            continue
        value = value.strip()
        if value:
            parts.append(value)
    return ", ".join(parts) or None
