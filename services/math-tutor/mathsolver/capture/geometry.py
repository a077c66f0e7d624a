from typing import Annotated, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field
import math

# Circles at or below this radius (display px) are treated as accidental clicks
MIN_CIRCLE_RADIUS = 10.0
MIN_FREEHAND_POINTS = 2


class Point(BaseModel):
    """Pixel position in the displayed (CSS-scaled) video element."""
    model_config = ConfigDict(frozen=True)

    x: float
    y: float


def dist(p1: Point, p2: Point) -> float:
    return math.sqrt((p1.x - p2.x)**2 + (p1.y - p2.y)**2)


def midpoint(p1: Point, p2: Point) -> Point:
    return Point(x=(p1.x + p2.x) / 2, y=(p1.y + p2.y) / 2)


class Freehand(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["freehand"] = "freehand"
    points: List[Point]

    def is_committable(self) -> bool:
        return len(self.points) >= MIN_FREEHAND_POINTS

    def scaled(self, sx: float, sy: float) -> "Freehand":
        return Freehand(points=[Point(x=p.x * sx, y=p.y * sy) for p in self.points])


class Circle(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["circle"] = "circle"
    center: Point
    radius: float

    def is_committable(self) -> bool:
        return self.radius > MIN_CIRCLE_RADIUS

    def scaled(self, sx: float, sy: float) -> "Circle":
        # Larger axis wins so the ring never shrinks inside the annotated region
        return Circle(
            center=Point(x=self.center.x * sx, y=self.center.y * sy),
            radius=self.radius * max(sx, sy),
        )


Shape = Annotated[Union[Freehand, Circle], Field(discriminator="kind")]
Tool = Literal["freehand", "circle"]


class ShapeSet:
    """Committed shapes in draw order plus the one being dragged, if any."""

    def __init__(self):
        self.committed: List[Union[Freehand, Circle]] = []
        self.in_progress: Optional[Union[Freehand, Circle]] = None

    def __len__(self) -> int:
        return len(self.committed)

    def drawable(self) -> List[Union[Freehand, Circle]]:
        # in-progress last so it renders on top
        if self.in_progress is None:
            return list(self.committed)
        return self.committed + [self.in_progress]

    def reset(self):
        self.committed = []
        self.in_progress = None
