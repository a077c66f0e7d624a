from typing import Optional, Sequence, Tuple, Union
from PIL import ImageDraw
from pydantic import BaseModel
import math
from .geometry import Circle, Freehand

ANNOTATION_COLOR = "#ff3b30"


class StrokeStyle(BaseModel):
    color: str = ANNOTATION_COLOR
    width: int = 3
    dash: Optional[Tuple[float, float]] = None  # (on, off) in px along the outline

    def heavier(self, extra: int = 2) -> "StrokeStyle":
        return self.model_copy(update={"width": self.width + extra})


OVERLAY_STYLES = {
    "freehand": StrokeStyle(),
    "circle": StrokeStyle(dash=(8.0, 6.0)),
}


def _cap(draw: ImageDraw.ImageDraw, x: float, y: float, style: StrokeStyle):
    r = style.width / 2
    draw.ellipse([x - r, y - r, x + r, y + r], fill=style.color)


def stroke_freehand(draw: ImageDraw.ImageDraw, shape: Freehand, style: StrokeStyle):
    pts = [(p.x, p.y) for p in shape.points]
    if len(pts) < 2:
        return
    draw.line(pts, fill=style.color, width=style.width, joint="curve")
    if style.width > 2:
        # round line caps
        _cap(draw, *pts[0], style)
        _cap(draw, *pts[-1], style)


def stroke_circle(draw: ImageDraw.ImageDraw, shape: Circle, style: StrokeStyle):
    cx, cy, r = shape.center.x, shape.center.y, shape.radius
    if r < 1:
        return
    box = [cx - r, cy - r, cx + r, cy + r]
    if not style.dash:
        draw.ellipse(box, outline=style.color, width=style.width)
        return

    # Dash lengths are arc lengths; convert to degrees at this radius
    on, off = style.dash
    on_deg = math.degrees(on / r)
    step = on_deg + math.degrees(off / r)
    start = 0.0
    while start < 360.0:
        end = min(start + on_deg, 360.0)
        draw.arc(box, start=start, end=end, fill=style.color, width=style.width)
        start += step


def stroke_shape(draw: ImageDraw.ImageDraw, shape: Union[Freehand, Circle], style: StrokeStyle):
    if shape.kind == "freehand":
        stroke_freehand(draw, shape, style)
    elif shape.kind == "circle":
        stroke_circle(draw, shape, style)


def stroke_all(draw: ImageDraw.ImageDraw, shapes: Sequence[Union[Freehand, Circle]], extra_width: int = 0):
    for shape in shapes:
        style = OVERLAY_STYLES[shape.kind]
        if extra_width:
            style = style.heavier(extra_width)
        stroke_shape(draw, shape, style)
