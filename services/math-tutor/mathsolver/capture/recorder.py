import logging
from typing import Callable, List, Optional
from .geometry import Circle, Freehand, Point, ShapeSet, Tool, dist, midpoint

logger = logging.getLogger("capture.recorder")


class PathRecorder:
    """
    Turns pointer input into shapes on a ShapeSet.

    `gate` decides whether input is accepted at all (draw mode on and a
    session sharing). `on_change` runs after every mutation so the overlay
    can redraw.
    """

    def __init__(
        self,
        shapes: ShapeSet,
        gate: Callable[[], bool] = lambda: True,
        on_change: Optional[Callable[[], None]] = None,
        tool: Tool = "freehand",
    ):
        self.shapes = shapes
        self.tool: Tool = tool
        self._gate = gate
        self._on_change = on_change
        self._anchor: Optional[Point] = None
        self._points: List[Point] = []

    @property
    def drawing(self) -> bool:
        return self._anchor is not None

    def set_tool(self, tool: Tool):
        if tool not in ("freehand", "circle"):
            raise ValueError(f"Unknown tool: {tool}")
        self.cancel()
        self.tool = tool

    def begin(self, p: Point):
        if not self._gate():
            return
        self._anchor = p
        if self.tool == "freehand":
            self._points = [p]
            self.shapes.in_progress = Freehand(points=list(self._points))
        else:
            self.shapes.in_progress = Circle(center=p, radius=0.0)
        self._changed()

    def extend(self, p: Point):
        if self._anchor is None or not self._gate():
            return
        if self.tool == "freehand":
            self._points.append(p)
            self.shapes.in_progress = Freehand(points=list(self._points))
        else:
            self.shapes.in_progress = Circle(
                center=midpoint(self._anchor, p),
                radius=dist(self._anchor, p) / 2,
            )
        self._changed()

    def commit(self):
        shape = self.shapes.in_progress
        if shape is None:
            return
        if shape.is_committable():
            self.shapes.committed.append(shape)
        else:
            logger.debug("Discarded %s below commit threshold", shape.kind)
        self._release()
        self._changed()

    def cancel(self):
        if self.shapes.in_progress is None and self._anchor is None:
            return
        self._release()
        self._changed()

    def clear(self):
        self.shapes.committed = []
        self._changed()

    def _release(self):
        self.shapes.in_progress = None
        self._anchor = None
        self._points = []

    def _changed(self):
        if self._on_change:
            self._on_change()
