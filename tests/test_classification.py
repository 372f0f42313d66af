import pytest

from isocity import BuildingType, classify_tag


@pytest.mark.parametrize("tag, expected", [
    ("hotel", BuildingType.HOTEL),
    ("fast_food", BuildingType.RESTAURANT),
    ("supermarket", BuildingType.RETAIL),
    ("commercial", BuildingType.OFFICE),
    ("warehouse", BuildingType.INDUSTRIAL),
    ("detached", BuildingType.RESIDENTIAL),
    ("university", BuildingType.CULTURAL),
    ("garden", BuildingType.PARK),
    ("garage", BuildingType.PARKING),
])
def test_exact_tags(tag, expected):
    assert classify_tag(tag) is expected


def test_matching_ignores_case_and_whitespace():
    assert classify_tag("Parking_Garage") is BuildingType.PARKING
    assert classify_tag("  HOTEL ") is BuildingType.HOTEL


@pytest.mark.parametrize("tag, expected", [
    ("boutique_hotel", BuildingType.HOTEL),
    ("rooftop_cafe", BuildingType.RESTAURANT),
    ("office_tower", BuildingType.OFFICE),
    ("apartment_block", BuildingType.RESIDENTIAL),
])
def test_substring_fallbacks(tag, expected):
    assert classify_tag(tag) is expected


@pytest.mark.parametrize("tag", ["zoo", "", None, "   "])
def test_unknown_tags_are_commercial(tag):
    assert classify_tag(tag) is BuildingType.COMMERCIAL
