"""
Process-wide singletons. The app serves one local user, so the capture
session, solve panel and chat live here and routes reach them through the
getters below (tests swap them with dependency_overrides).
"""
from typing import List, Optional
from .config import Settings, settings
from .clients import ClientRegistry
from .notifications import Notifier
from .capture.media import ScreenGrabSource
from .capture.session import CaptureSession
from .relay.chat import RelayMessage, chat_with_david
from .relay.solver import solve_math_problem
from .tutor.conversation import Conversation
from .tutor.history import SolutionHistory
from .tutor.workbench import Workbench

clients = ClientRegistry(settings)
notifier = Notifier()


def _solve(image: str, source: str) -> str:
    return solve_math_problem(image, source, clients.get_openai(), settings.model)


def _reply(messages: List[RelayMessage]) -> Optional[str]:
    return chat_with_david(messages, clients.get_openai(), settings.model)


workbench = Workbench(_solve, SolutionHistory(limit=settings.history_limit), notifier)
conversation = Conversation(_reply)
capture_session = CaptureSession(ScreenGrabSource(), notifier=notifier)


def get_settings() -> Settings:
    return settings


def get_clients() -> ClientRegistry:
    return clients


def get_notifier() -> Notifier:
    return notifier


def get_workbench() -> Workbench:
    return workbench


def get_conversation() -> Conversation:
    return conversation


def get_capture_session() -> CaptureSession:
    return capture_session
