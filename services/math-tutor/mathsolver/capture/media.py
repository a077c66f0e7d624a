"""
Screen-capture media model.

Mirrors the small part of the browser media API the capture pipeline relies
on: a stream of video tracks that can be stopped by us or ended by the OS,
and a video element that knows both the native frame size and the size it is
displayed at.
"""
import abc
import asyncio
import logging
import uuid
from typing import Callable, List, Optional, Tuple

from PIL import Image

from ..utils import Frame, to_pil

logger = logging.getLogger("capture.media")


class CaptureError(Exception):
    """Screen capture was refused or is not available on this host."""


class VideoTrack:
    kind = "video"

    def __init__(self, read_frame: Callable[[], Frame], label: str = "screen"):
        self.id = uuid.uuid4().hex
        self.label = label
        self.ready_state = "live"
        self.on_ended: Optional[Callable[[], None]] = None
        self._read_frame = read_frame

    @property
    def ended(self) -> bool:
        return self.ready_state == "ended"

    def stop(self):
        """Release the track. Safe to call repeatedly; does not fire on_ended."""
        if self.ended:
            return
        self.ready_state = "ended"
        logger.debug("Track %s stopped", self.label)

    def end(self):
        """The source went away (e.g. sharing revoked from the OS chrome)."""
        if self.ended:
            return
        self.ready_state = "ended"
        logger.info("Track %s ended by source", self.label)
        callback = self.on_ended
        if callback:
            callback()

    def read_frame(self) -> Optional[Image.Image]:
        if self.ended:
            return None
        try:
            frame = self._read_frame()
        except OSError as e:
            logger.warning("Frame grab failed on %s: %s", self.label, e)
            self.end()
            return None
        if frame is None:
            return None
        return to_pil(frame)


class MediaStream:
    def __init__(self, tracks: List[VideoTrack]):
        self.id = uuid.uuid4().hex
        self._tracks = list(tracks)

    def get_tracks(self) -> List[VideoTrack]:
        return list(self._tracks)

    def get_video_tracks(self) -> List[VideoTrack]:
        return [t for t in self._tracks if t.kind == "video"]

    @property
    def active(self) -> bool:
        return any(not t.ended for t in self._tracks)


class VideoElement:
    """
    Playback surface for a stream. `video_width/height` is the native size of
    the last frame read, `display_width/height` is what the client reports as
    its on-screen size (pointer coordinates live in that space).
    """

    def __init__(self):
        self.src_object: Optional[MediaStream] = None
        self.display_width = 0
        self.display_height = 0
        self.video_width = 0
        self.video_height = 0
        self._playing = False

    @property
    def display_size(self) -> Tuple[int, int]:
        return self.display_width, self.display_height

    @property
    def playing(self) -> bool:
        return self._playing and self.src_object is not None and self.src_object.active

    def attach(self, stream: MediaStream):
        self.src_object = stream
        self._playing = False
        self.video_width = self.video_height = 0

    def detach(self):
        self.src_object = None
        self._playing = False
        self.video_width = self.video_height = 0

    def play(self) -> bool:
        if self.src_object is None or not self.src_object.get_video_tracks():
            return False
        self._playing = True
        return self.playing

    def set_display_size(self, width: int, height: int):
        self.display_width = max(0, int(width))
        self.display_height = max(0, int(height))

    def current_frame(self) -> Optional[Image.Image]:
        if not self.playing:
            return None
        tracks = self.src_object.get_video_tracks()
        frame = tracks[0].read_frame() if tracks else None
        if frame is not None:
            self.video_width, self.video_height = frame.size
        return frame


class ScreenSource(abc.ABC):
    """Capability that hands out a live screen stream, or refuses."""

    @abc.abstractmethod
    async def get_display_media(self, surface: str = "monitor", audio: bool = False) -> MediaStream:
        """Raises CaptureError when the user or the host refuses."""


class ScreenGrabSource(ScreenSource):
    """Primary monitor via Pillow's ImageGrab. Needs a desktop session (or X display)."""

    def __init__(self, xdisplay: Optional[str] = None):
        self.xdisplay = xdisplay

    def _grab(self) -> Image.Image:
        from PIL import ImageGrab
        return ImageGrab.grab(all_screens=False, xdisplay=self.xdisplay)

    async def get_display_media(self, surface: str = "monitor", audio: bool = False) -> MediaStream:
        if audio:
            raise CaptureError("Audio capture is not supported")
        if surface != "monitor":
            raise CaptureError(f"Unsupported display surface: {surface}")
        try:
            # A first grab doubles as the permission / availability probe
            await asyncio.to_thread(self._grab)
        except (OSError, ImportError) as e:
            raise CaptureError(f"Screen capture unavailable: {e}") from e
        return MediaStream([VideoTrack(self._grab, label=f"screen:{surface}")])


class FeedSource(ScreenSource):
    """Streams frames from any callable; used for headless runs and tests."""

    def __init__(self, read_frame: Callable[[], Frame], label: str = "feed"):
        self._read_frame = read_frame
        self.label = label

    async def get_display_media(self, surface: str = "monitor", audio: bool = False) -> MediaStream:
        if audio:
            raise CaptureError("Audio capture is not supported")
        return MediaStream([VideoTrack(self._read_frame, label=f"{self.label}:{surface}")])
