"""Address formatting helpers."""

from __future__ import annotations

from typing import Any, Mapping

# Each slot lists the field aliases used by stored address records, in priority order.
_ADDRESS_FIELDS: tuple[tuple[str, ...], ...] = (
    ("address_line_1", "street", "line1"),
    ("address_line_2", "street2", "line2"),
    ("city",),
    ("state",),
    ("postal_code", "zip", "zip_code", "zipCode"),
    ("country",),
)


def format_address(address: Any) -> str:
    """Flatten a structured address into a single ``", "``-separated line.

    Strings are returned stripped. Mappings contribute street, street2, city,
    state, postal code and country in that order, skipping empty fields.
    """
    if not address:
        return ""
    if isinstance(address, str):
        return address.strip()
    if not isinstance(address, Mapping):
        raise TypeError(f"Unsupported address type: {type(address).__name__}")

    parts: list[str] = []
    for aliases in _ADDRESS_FIELDS:
        for alias in aliases:
            value = address.get(alias)
            if value is not None and str(value).strip():
                parts.append(str(value).strip())
                break
    return ", ".join(parts)


def normalize_address(address: str) -> str:
    """Cache key form of an address: trimmed and lower-cased."""
    return address.strip().lower()
