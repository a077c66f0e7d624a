import logging
from typing import Optional, Sequence, Union
from PIL import Image, ImageDraw
from ..utils import image_to_data_url
from .geometry import Circle, Freehand
from .media import VideoElement
from .strokes import stroke_all

logger = logging.getLogger("capture.compositor")

# Burned-in strokes are heavier than the live overlay so they stay legible at native size
COMPOSITE_EXTRA_WIDTH = 2


class FrameCompositor:
    def __init__(self, extra_width: int = COMPOSITE_EXTRA_WIDTH):
        self.extra_width = extra_width

    def render(self, video: VideoElement, shapes: Sequence[Union[Freehand, Circle]]) -> Optional[Image.Image]:
        """
        Current frame at native resolution with every committed shape
        rescaled from display space and stroked onto it. None when there
        is nothing to capture.
        """
        if video.src_object is None or not video.playing:
            return None
        frame = video.current_frame()
        if frame is None:
            return None
        w, h = frame.size
        if not w or not h:
            return None

        bitmap = Image.new("RGB", (w, h))
        bitmap.paste(frame, (0, 0))

        dw, dh = video.display_size
        if dw <= 0 or dh <= 0:
            logger.warning("Display size unknown; exporting %dx%d frame without annotations", w, h)
            return bitmap

        sx = w / dw
        sy = h / dh
        scaled = [s.scaled(sx, sy) for s in shapes]
        stroke_all(ImageDraw.Draw(bitmap), scaled, extra_width=self.extra_width)
        return bitmap

    def capture(self, video: VideoElement, shapes: Sequence[Union[Freehand, Circle]]) -> Optional[str]:
        bitmap = self.render(video, shapes)
        if bitmap is None:
            return None
        return image_to_data_url(bitmap, "PNG")
