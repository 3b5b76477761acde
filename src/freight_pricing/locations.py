from __future__ import annotations

from dataclasses import dataclass

from .models.location import Location, LocationRef
from .models.price_list import LocationPriceRecord
from .models.pricing import PricingMethod

NOT_AVAILABLE = {
    "en": "N/A",
    "ar": "غير متوفر",
}


@dataclass(frozen=True)
class AddressLabel:
    english: str
    arabic: str


def format_location(location: LocationRef | None, language: str = "en") -> str:
    """Join the non-empty village, city, area and country parts with commas.

    A reference that was not expanded by the API (a bare id) is shown as-is.
    """
    fallback = NOT_AVAILABLE.get(language, NOT_AVAILABLE["en"])
    if location is None:
        return fallback
    if isinstance(location, str):
        return location.strip() or fallback
    parts = [part.strip() for part in location.parts(language) if part and part.strip()]
    return ", ".join(parts) or fallback


def format_location_price(row: LocationPriceRecord) -> AddressLabel:
    single_place = row.pricing_method is PricingMethod.per_location or (
        row.pricing_method is None and row.location is not None
    )
    if single_place:
        return AddressLabel(
            english=f"Location: {format_location(row.location)}",
            arabic=f"الموقع: {format_location(row.location, 'ar')}",
        )
    return AddressLabel(
        english=f"From: {format_location(row.from_location)} → To: {format_location(row.to_location)}",
        arabic=(
            f"من: {format_location(row.from_location, 'ar')}"
            f" → إلى: {format_location(row.to_location, 'ar')}"
        ),
    )


def is_location_active(location: LocationRef | None) -> bool:
    return isinstance(location, Location) and location.is_active


__all__ = [
    "AddressLabel",
    "NOT_AVAILABLE",
    "format_location",
    "format_location_price",
    "is_location_active",
]
