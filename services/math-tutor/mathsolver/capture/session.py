import logging
from enum import Enum
from typing import Callable, Optional

from PIL import Image

from ..notifications import Notifier
from .compositor import FrameCompositor
from .geometry import Point, ShapeSet, Tool
from .media import CaptureError, MediaStream, ScreenSource, VideoElement
from .overlay import OverlayRenderer
from .recorder import PathRecorder

logger = logging.getLogger("capture.session")


class SessionState(str, Enum):
    IDLE = "idle"
    SHARING = "sharing"


class CaptureSession:
    """
    Owns the screen stream, the annotations drawn over it and the capture
    operation. All mutation goes through the methods below; the overlay is
    redrawn synchronously after each one.
    """

    def __init__(
        self,
        source: ScreenSource,
        notifier: Optional[Notifier] = None,
        compositor: Optional[FrameCompositor] = None,
        overlay: Optional[OverlayRenderer] = None,
        on_capture: Optional[Callable[[str], None]] = None,
        tool: Tool = "freehand",
    ):
        self.source = source
        self.notifier = notifier or Notifier()
        self.compositor = compositor or FrameCompositor()
        self.overlay = overlay or OverlayRenderer()
        self.on_capture = on_capture

        self.state = SessionState.IDLE
        self.draw_mode = False
        self.video = VideoElement()
        self.shapes = ShapeSet()
        self.recorder = PathRecorder(self.shapes, gate=self._can_draw, on_change=self.redraw, tool=tool)
        self._stream: Optional[MediaStream] = None

    @property
    def is_sharing(self) -> bool:
        return self.state == SessionState.SHARING

    @property
    def stream(self) -> Optional[MediaStream]:
        return self._stream

    def _can_draw(self) -> bool:
        return self.draw_mode and self.is_sharing

    # ---------- lifecycle ----------
    async def start(self) -> bool:
        if self.is_sharing:
            logger.info("start() ignored: already sharing")
            return True
        try:
            stream = await self.source.get_display_media(surface="monitor", audio=False)
        except CaptureError as e:
            logger.error("Error starting screen share: %s", e)
            self.notifier.toast("Screen sharing failed", "Please allow screen sharing permission", variant="destructive")
            return False

        self._stream = stream
        self.video.attach(stream)
        self.video.play()
        self.state = SessionState.SHARING
        self._reset_shapes()

        tracks = stream.get_video_tracks()
        if tracks:
            tracks[0].on_ended = lambda: self._on_stream_ended(stream)

        logger.info("Screen sharing started (stream %s)", stream.id)
        self.notifier.toast("Screen sharing started", "Click 'Capture' to analyze the math problem")
        return True

    def stop(self):
        stream = self._stream
        if stream is not None:
            for track in stream.get_tracks():
                track.on_ended = None
                track.stop()
        self._teardown("stopped")

    def _on_stream_ended(self, stream: MediaStream):
        if stream is not self._stream or not self.is_sharing:
            logger.debug("Late stream-ended signal for %s ignored", stream.id)
            return
        self._teardown("ended by source")

    def _teardown(self, reason: str):
        was_sharing = self.is_sharing
        self._stream = None
        self.video.detach()
        self.state = SessionState.IDLE
        self._reset_shapes()
        if was_sharing:
            logger.info("Screen sharing %s", reason)

    def _reset_shapes(self):
        self.recorder.cancel()
        self.recorder.clear()

    # ---------- annotation ----------
    def toggle_draw_mode(self) -> bool:
        self.draw_mode = not self.draw_mode
        if not self.draw_mode:
            self.recorder.cancel()
        return self.draw_mode

    def set_tool(self, tool: Tool):
        self.recorder.set_tool(tool)

    def set_display_size(self, width: int, height: int):
        self.video.set_display_size(width, height)
        self.redraw()

    def pointer_down(self, x: float, y: float):
        self.recorder.begin(Point(x=x, y=y))

    def pointer_move(self, x: float, y: float):
        self.recorder.extend(Point(x=x, y=y))

    def pointer_up(self):
        self.recorder.commit()

    def erase(self):
        self.recorder.clear()

    def redraw(self) -> Image.Image:
        return self.overlay.redraw(self.shapes, self.video.display_size)

    # ---------- capture ----------
    def capture(self) -> Optional[str]:
        if not self.is_sharing:
            return None
        image = self.compositor.capture(self.video, self.shapes.committed)
        if image is None:
            logger.debug("Capture skipped: no frame available")
            return None
        self.notifier.toast("Screen captured!", "Analyzing the math problem...")
        if self.on_capture:
            self.on_capture(image)
        return image

    def status(self) -> dict:
        return {
            "state": self.state.value,
            "draw_mode": self.draw_mode,
            "tool": self.recorder.tool,
            "shapes": len(self.shapes),
            "drawing": self.shapes.in_progress is not None,
            "display": {"width": self.video.display_width, "height": self.video.display_height},
            "native": {"width": self.video.video_width, "height": self.video.video_height},
        }
