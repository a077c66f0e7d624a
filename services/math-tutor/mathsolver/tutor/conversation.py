import logging
import uuid
from typing import Callable, List, Literal, Optional
from pydantic import BaseModel, Field
from ..relay.chat import RelayMessage
from ..relay.errors import RelayError

logger = logging.getLogger("tutor.conversation")

WELCOME_MESSAGE = "Hey! I'm David, your math tutor. Send me pictures of math problems and I'll learn from them!"
DEFAULT_USER_CONTENT = "Check this problem"
EMPTY_REPLY = "Sorry, I couldn't process that. Try again!"
FAILED_REPLY = "Oops! Something went wrong. Please try again."


class ChatMessage(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    role: Literal["user", "assistant"]
    content: str
    image: Optional[str] = None


class Conversation:
    """Chat with David: the transcript plus at most one image waiting to be sent."""

    def __init__(self, reply: Callable[[List[RelayMessage]], Optional[str]]):
        self._reply = reply
        self.messages: List[ChatMessage] = [ChatMessage(id="welcome", role="assistant", content=WELCOME_MESSAGE)]
        self.pending_image: Optional[str] = None
        self.is_loading = False

    def attach_image(self, data_url: str):
        self.pending_image = data_url

    def discard_image(self):
        self.pending_image = None

    def send(self, text: str = "") -> Optional[ChatMessage]:
        """
        Appends the user's message and David's reply. Returns the reply, or
        None when there was nothing to send or a reply is still pending.
        """
        text = (text or "").strip()
        if (not text and not self.pending_image) or self.is_loading:
            return None

        user_message = ChatMessage(role="user", content=text or DEFAULT_USER_CONTENT, image=self.pending_image)
        self.messages.append(user_message)
        self.pending_image = None
        self.is_loading = True

        payload = [RelayMessage(role=m.role, content=m.content, image=m.image) for m in self.messages]
        try:
            content = self._reply(payload) or EMPTY_REPLY
        except RelayError as e:
            logger.error("Error sending message: %s", e.message)
            content = FAILED_REPLY
        finally:
            self.is_loading = False

        reply = ChatMessage(role="assistant", content=content)
        self.messages.append(reply)
        return reply
