import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from isocity import VENUE_PRESETS, get_venue
from isocity.errors import UnknownVenueError

from backend.models import VenueInfo
from backend.session import MapSession, get_session, reset_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/venues", tags=["venues"])


def _venue_info(key: str, active: str) -> VenueInfo:
    preset = VENUE_PRESETS[key]
    return VenueInfo(
        key=preset.key,
        display_name=preset.display_name,
        lat=preset.origin.lat,
        lng=preset.origin.lng,
        world_offset=list(preset.world_offset),
        active=(key == active),
    )


@router.get("", response_model=List[VenueInfo])
async def list_venues(session: MapSession = Depends(get_session)):
    """Return every preset venue anchor, flagging the active one."""
    return [_venue_info(key, session.venue) for key in VENUE_PRESETS]


@router.post("/{key}", response_model=VenueInfo)
async def activate_venue(key: str):
    """Switch the map session to another venue.  Loaded buildings are dropped."""
    try:
        preset = get_venue(key)
    except UnknownVenueError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    session = reset_session(preset.key)
    return _venue_info(preset.key, session.venue)
