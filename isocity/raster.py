"""PNG export of a Scene's display list with Pillow."""

import logging
import pathlib
from typing import Optional, Tuple, Union

from PIL import Image, ImageDraw

from .models import Bounds
from .scene import Graphics, Scene

logger = logging.getLogger(__name__)

DEFAULT_BACKGROUND = (0xf5, 0xf0, 0xe6)   # cream


def _rgba(color: int, alpha: float) -> Tuple[int, int, int, int]:
    a = max(0, min(255, round(alpha * 255)))
    return (color >> 16) & 0xff, (color >> 8) & 0xff, color & 0xff, a


def scene_extent(scene: Scene) -> Optional[Bounds]:
    """Union of the extents of all visible handles."""
    extent = None
    for graphics in scene.display_list():
        if not graphics.visible:
            continue
        e = graphics.extent()
        if e is not None:
            extent = e if extent is None else extent.union(e)
    return extent


def _scaled(graphics: Graphics, points, pivot: Tuple[float, float]):
    if graphics.scale_x == 1.0 and graphics.scale_y == 1.0:
        return points
    px, py = pivot
    return [(px + (x - px) * graphics.scale_x, py + (y - py) * graphics.scale_y)
            for x, y in points]


def render_image(scene: Scene, viewport: Optional[Bounds] = None,
                 size: Tuple[int, int] = (1024, 768),
                 background: Tuple[int, int, int] = DEFAULT_BACKGROUND,
                 padding: int = 16) -> Image.Image:
    """Paint visible handles in depth order, fitting ``viewport`` into ``size``.

    The viewport defaults to the scene extent.  Aspect ratio is preserved.
    """
    width, height = size
    image = Image.new("RGB", (width, height), background)

    viewport = viewport or scene_extent(scene)
    if viewport is None:
        return image

    span_x = max(viewport.width, 1e-9)
    span_y = max(viewport.height, 1e-9)
    scale = min((width - 2 * padding) / span_x, (height - 2 * padding) / span_y)
    off_x = padding + ((width - 2 * padding) - span_x * scale) / 2
    off_y = padding + ((height - 2 * padding) - span_y * scale) / 2

    def to_px(pt):
        return (off_x + (pt[0] - viewport.min_x) * scale,
                off_y + (pt[1] - viewport.min_y) * scale)

    # RGBA draw mode blends each fill against what is already painted
    draw = ImageDraw.Draw(image, "RGBA")
    painted = 0
    for graphics in scene.display_list():
        if not graphics.visible or not graphics.commands:
            continue
        extent = graphics.extent()
        pivot = (extent.center_x, extent.center_y)
        for cmd in graphics.commands:
            pts = [to_px(p) for p in _scaled(graphics, cmd.points, pivot)]
            if len(pts) < 2:
                continue
            if cmd.kind == 'fill' and len(pts) >= 3:
                draw.polygon(pts, fill=_rgba(cmd.color, cmd.alpha))
            elif cmd.kind == 'stroke':
                draw.line(pts + [pts[0]], fill=_rgba(cmd.color, cmd.alpha),
                          width=max(1, round(cmd.width)))
        painted += 1

    logger.debug(f"Painted {painted} graphics into {width}x{height} image")
    return image


def render_png(scene: Scene, path: Union[str, pathlib.Path],
               viewport: Optional[Bounds] = None,
               size: Tuple[int, int] = (1024, 768),
               background: Tuple[int, int, int] = DEFAULT_BACKGROUND) -> pathlib.Path:
    path = pathlib.Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    image = render_image(scene, viewport=viewport, size=size, background=background)
    image.save(path, format="PNG")
    logger.info(f"Wrote {path}")
    return path
