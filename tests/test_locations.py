from freight_pricing.locations import format_location, format_location_price, is_location_active
from freight_pricing.models.location import Location
from freight_pricing.models.price_list import LocationPriceRecord


def test_location_parts_are_joined_most_specific_first():
    location = Location(village="Al Khumrah", city="Jeddah", area="Makkah", country="Saudi Arabia")

    assert format_location(location) == "Al Khumrah, Jeddah, Makkah, Saudi Arabia"


def test_empty_parts_are_skipped():
    location = Location(city="Riyadh", area="", country="Saudi Arabia")

    assert format_location(location) == "Riyadh, Saudi Arabia"


def test_arabic_parts():
    location = Location.model_validate({"cityAr": "جدة", "countryAr": "السعودية", "city": "Jeddah"})

    assert format_location(location, "ar") == "جدة, السعودية"


def test_missing_location_falls_back_per_language():
    assert format_location(None) == "N/A"
    assert format_location(None, "ar") == "غير متوفر"
    assert format_location(Location(), "en") == "N/A"
    assert format_location(Location(country="  "), "ar") == "غير متوفر"


def test_unexpanded_reference_is_shown_as_id():
    assert format_location("LOC-RUH") == "LOC-RUH"


def test_per_location_row_label():
    row = LocationPriceRecord.model_validate(
        {"location": {"city": "Dammam", "cityAr": "الدمام"}, "price": 10, "pricingMethod": "perLocation"}
    )

    label = format_location_price(row)

    assert label.english == "Location: Dammam"
    assert label.arabic == "الموقع: الدمام"


def test_per_trip_row_label():
    row = LocationPriceRecord.model_validate(
        {
            "fromLocation": {"city": "Jeddah", "country": "Saudi Arabia"},
            "toLocation": {"city": "Riyadh", "country": "Saudi Arabia"},
            "cost": 1800,
            "pricingMethod": "perTrip",
        }
    )

    label = format_location_price(row)

    assert label.english == "From: Jeddah, Saudi Arabia → To: Riyadh, Saudi Arabia"
    assert label.arabic == "من: غير متوفر → إلى: غير متوفر"


def test_location_activity_flag():
    assert is_location_active(Location(is_active=True))
    assert not is_location_active(Location.model_validate({"isActive": False}))
    assert not is_location_active("LOC-1")
