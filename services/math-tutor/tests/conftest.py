import asyncio
import base64
import io
from types import SimpleNamespace

import httpx
import numpy as np
import openai
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from mathsolver import deps
from mathsolver.capture.media import CaptureError, FeedSource, ScreenSource
from mathsolver.capture.session import CaptureSession
from mathsolver.main import app
from mathsolver.notifications import Notifier
from mathsolver.relay.chat import chat_with_david
from mathsolver.relay.solver import solve_math_problem
from mathsolver.tutor.conversation import Conversation
from mathsolver.tutor.history import SolutionHistory
from mathsolver.tutor.workbench import Workbench

RED = (255, 59, 48)
BLACK = (0, 0, 0)
PNG_DATA_URL = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


class FakeCompletions:
    def __init__(self, content="Answer: x = 4", error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeClient:
    def __init__(self, content="Answer: x = 4", error=None):
        self.completions = FakeCompletions(content, error)
        self.chat = SimpleNamespace(completions=self.completions)


class FakeRegistry:
    def __init__(self, client):
        self.client = client

    def get_openai(self):
        return self.client


class DeniedSource(ScreenSource):
    async def get_display_media(self, surface="monitor", audio=False):
        raise CaptureError("Permission denied")


def gateway_error(status: int) -> openai.APIStatusError:
    request = httpx.Request("POST", "https://gateway.test/v1/chat/completions")
    response = httpx.Response(status, request=request)
    if status == 429:
        return openai.RateLimitError("rate limited", response=response, body=None)
    return openai.APIStatusError("gateway failure", response=response, body=None)


def black_frame(width: int, height: int) -> Image.Image:
    return Image.new("RGB", (width, height), BLACK)


def decode_image(data_url: str) -> Image.Image:
    _, _, payload = data_url.partition(",")
    return Image.open(io.BytesIO(base64.b64decode(payload)))


def start(session: CaptureSession) -> bool:
    return asyncio.run(session.start())


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def make_session(notifier):
    def factory(width=200, height=100, frame=None, **kwargs):
        frame = frame if frame is not None else black_frame(width, height)
        return CaptureSession(FeedSource(lambda: frame), notifier=notifier, **kwargs)
    return factory


@pytest.fixture
def sharing_session(make_session):
    """Sharing session with native size == displayed size, draw mode on."""
    session = make_session(200, 100)
    assert start(session)
    session.set_display_size(200, 100)
    session.toggle_draw_mode()
    return session


@pytest.fixture
def workbench(fake_client, notifier):
    solve = lambda image, source: solve_math_problem(image, source, fake_client, "test-model")
    return Workbench(solve, SolutionHistory(limit=20), notifier)


@pytest.fixture
def conversation(fake_client):
    return Conversation(lambda messages: chat_with_david(messages, fake_client, "test-model"))


@pytest.fixture
def api(fake_client, notifier, workbench, conversation):
    frame = np.zeros((720, 1280, 3), dtype=np.uint8)
    session = CaptureSession(FeedSource(lambda: frame), notifier=notifier)
    app.dependency_overrides[deps.get_clients] = lambda: FakeRegistry(fake_client)
    app.dependency_overrides[deps.get_notifier] = lambda: notifier
    app.dependency_overrides[deps.get_workbench] = lambda: workbench
    app.dependency_overrides[deps.get_conversation] = lambda: conversation
    app.dependency_overrides[deps.get_capture_session] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()
