from typing import Optional, Tuple
from PIL import Image, ImageDraw
from .geometry import ShapeSet
from .strokes import stroke_all


class OverlayRenderer:
    """
    Live feedback layer drawn over the video. Purely cosmetic: the exported
    capture is rebuilt by the compositor and never reads this canvas.
    """

    def __init__(self):
        self.canvas: Optional[Image.Image] = None

    def redraw(self, shapes: ShapeSet, display_size: Tuple[int, int]) -> Image.Image:
        # Layout can change between redraws, so size is taken fresh every time
        w, h = max(0, int(display_size[0])), max(0, int(display_size[1]))
        canvas = Image.new("RGBA", (w, h), (0, 0, 0, 0))
        if w and h:
            stroke_all(ImageDraw.Draw(canvas), shapes.drawable())
        self.canvas = canvas
        return canvas
