from pydantic import BaseModel
from typing import Any, Dict, List, Optional


class FeatureCollectionRequest(BaseModel):
    type: str = "FeatureCollection"
    features: List[Dict[str, Any]]
    crs: Optional[Dict[str, Any]] = None


class ViewportRequest(BaseModel):
    x: float
    y: float
    width: float
    height: float


class StatsResponse(BaseModel):
    total: int
    visible: int
    highlighted: int
    by_type: Dict[str, int]


class LoadResponse(BaseModel):
    accepted: int
    stats: StatsResponse


class VisibilityResponse(BaseModel):
    changed: int
    stats: StatsResponse


class BuildingInfo(BaseModel):
    id: str
    type: str
    name: Optional[str] = None
    source_tag: Optional[str] = None
    height: Optional[float] = None
    levels: Optional[int] = None
    area: Optional[float] = None
    footprint: List[List[float]]


class VenueInfo(BaseModel):
    key: str
    display_name: str
    lat: float
    lng: float
    world_offset: List[float]
    active: bool = False
