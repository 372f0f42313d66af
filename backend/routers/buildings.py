import io
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from isocity import Bounds, BuildingType
from isocity.errors import IsoCityError
from isocity.raster import render_image, render_png

from backend import config
from backend.models import (
    BuildingInfo, FeatureCollectionRequest, LoadResponse, StatsResponse,
    ViewportRequest, VisibilityResponse,
)
from backend.session import MapSession, building_info, get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["buildings"])


@router.post("/buildings/load", response_model=LoadResponse)
async def load_buildings(request: FeatureCollectionRequest,
                         session: MapSession = Depends(get_session)):
    """Ingest a GeoJSON FeatureCollection into the active venue's map."""
    try:
        accepted = session.system.load_geojson(request.model_dump(exclude_none=True))
    except IsoCityError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return LoadResponse(accepted=accepted, stats=session.system.get_stats())


@router.get("/buildings", response_model=List[BuildingInfo])
async def list_buildings(type: Optional[List[BuildingType]] = Query(None),
                         session: MapSession = Depends(get_session)):
    """List rendered buildings, optionally restricted to one or more types."""
    if type:
        buildings = session.system.get_buildings_by_type(type)
    else:
        buildings = session.system.get_all_buildings()
    return [building_info(b) for b in buildings]


@router.get("/buildings/at", response_model=BuildingInfo)
async def building_at(x: float, y: float, session: MapSession = Depends(get_session)):
    """Pick the top-most visible building under a world-space point."""
    building = session.system.get_building_at(x, y)
    if building is None:
        raise HTTPException(status_code=404, detail="No building at that position")
    return building_info(building)


@router.get("/buildings/{building_id:path}", response_model=BuildingInfo)
async def get_building(building_id: str, session: MapSession = Depends(get_session)):
    building = session.system.get_building(building_id)
    if building is None:
        raise HTTPException(status_code=404, detail="Building not found")
    return building_info(building)


@router.delete("/buildings", response_model=StatsResponse)
async def clear_buildings(session: MapSession = Depends(get_session)):
    session.system.clear()
    return session.system.get_stats()


@router.post("/buildings/visibility", response_model=VisibilityResponse)
async def update_visibility(viewport: ViewportRequest,
                            session: MapSession = Depends(get_session)):
    """Cull buildings against a camera rectangle given in world units."""
    bounds = Bounds.from_rect(viewport.x, viewport.y, viewport.width, viewport.height)
    changed = session.system.update_visibility(bounds)
    return VisibilityResponse(changed=changed, stats=session.system.get_stats())


@router.get("/stats", response_model=StatsResponse)
async def get_stats(session: MapSession = Depends(get_session)):
    return session.system.get_stats()


@router.get("/render.png")
async def render_map(width: int = Query(1024, ge=16, le=4096),
                     height: int = Query(768, ge=16, le=4096),
                     session: MapSession = Depends(get_session)):
    """Render the visible buildings to a PNG image."""
    image = render_image(session.scene, size=(width, height))
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return Response(content=buf.getvalue(), media_type="image/png")


@router.post("/buildings/load-file", response_model=LoadResponse)
async def load_buildings_file(name: str, session: MapSession = Depends(get_session)):
    """Ingest a GeoJSON file from the configured data directory."""
    path = (config.DATA_DIR / name).resolve()
    if config.DATA_DIR.resolve() not in path.parents:
        raise HTTPException(status_code=400, detail="File must live in the data directory")
    if not path.is_file():
        raise HTTPException(status_code=404, detail=f"No data file named {name}")
    try:
        accepted = session.system.load_geojson(path)
    except IsoCityError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return LoadResponse(accepted=accepted, stats=session.system.get_stats())


@router.post("/render")
async def export_map(name: str = "map.png",
                     width: int = Query(1024, ge=16, le=4096),
                     height: int = Query(768, ge=16, le=4096),
                     session: MapSession = Depends(get_session)):
    """Write the rendered map into the configured output directory."""
    path = (config.OUTPUT_DIR / name).resolve()
    if config.OUTPUT_DIR.resolve() not in path.parents:
        raise HTTPException(status_code=400, detail="File must live in the output directory")
    written = render_png(session.scene, path, size=(width, height))
    return {"path": str(written), "buildings": len(session.system.get_all_buildings())}
