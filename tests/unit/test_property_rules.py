from listings_service.utils.property_rules import (
    RESIDENTIAL_ONLY_DEFAULTS,
    PropertyType,
    is_residential,
    sanitize_property_data,
)


def test_residential_types():
    assert is_residential("2-СТАЕН")
    assert is_residential(PropertyType.HOUSE)
    assert not is_residential("ОФИС")
    assert not is_residential(None)


def test_strings_are_trimmed_and_blank_optionals_become_none():
    cleaned = sanitize_property_data(
        {
            "title": "  Sea view flat ",
            "district": "   ",
            "address": "",
            "property_code": " ",
            "property_type": "2-СТАЕН",
        }
    )
    assert cleaned["title"] == "Sea view flat"
    assert cleaned["district"] is None
    assert cleaned["address"] is None
    assert cleaned["property_code"] is None


def test_required_strings_stay_blank_for_validation():
    # Blank required fields are left for the schema to reject
    cleaned = sanitize_property_data({"title": "  ", "property_type": "2-СТАЕН"})
    assert cleaned["title"] == ""


def test_non_residential_types_drop_residential_fields():
    cleaned = sanitize_property_data(
        {
            "property_type": "ОФИС",
            "bedrooms": 3,
            "bathrooms": 2,
            "floor_number": 4,
            "heating": "central",
            "has_elevator": True,
        }
    )
    for key, default in RESIDENTIAL_ONLY_DEFAULTS.items():
        assert cleaned[key] == default
    # Shared amenities are kept
    assert cleaned["has_elevator"] is True


def test_residential_types_keep_details():
    cleaned = sanitize_property_data({"property_type": "КЪЩА", "bedrooms": 4, "floors": 2})
    assert cleaned["bedrooms"] == 4
    assert cleaned["floors"] == 2


def test_unknown_type_is_not_forced():
    cleaned = sanitize_property_data({"bedrooms": 2})
    assert cleaned == {"bedrooms": 2}
