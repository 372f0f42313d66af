"""Map free-form OSM ``building`` tag values onto BuildingType."""

from typing import Optional

from .constants import EXACT_TAG_TYPES, SUBSTRING_TAG_TYPES
from .models import BuildingType


def classify_tag(tag: Optional[str]) -> BuildingType:
    """Classify a source tag; matching is case-insensitive and trims whitespace.

    >>> classify_tag(" Parking_Garage ")
    <BuildingType.PARKING: 'parking'>
    >>> classify_tag("zoo")
    <BuildingType.COMMERCIAL: 'commercial'>
    """
    if not tag:
        return BuildingType.COMMERCIAL

    normalized = tag.strip().lower()
    exact = EXACT_TAG_TYPES.get(normalized)
    if exact is not None:
        return exact

    for needles, building_type in SUBSTRING_TAG_TYPES:
        if any(needle in normalized for needle in needles):
            return building_type
    return BuildingType.COMMERCIAL
