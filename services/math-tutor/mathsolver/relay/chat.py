import logging
from typing import List, Literal, Optional
from pydantic import BaseModel
from .errors import NOT_CONFIGURED_MESSAGE, RelayError, translate_gateway_error
from .prompts import DAVID_SYSTEM_PROMPT, DEFAULT_IMAGE_QUESTION

logger = logging.getLogger("relay.chat")


class RelayMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str = ""
    image: Optional[str] = None  # data URL


class ChatRequest(BaseModel):
    messages: List[RelayMessage]


class ChatResponse(BaseModel):
    response: Optional[str] = None
    error: Optional[str] = None


def format_messages(messages: List[RelayMessage]) -> List[dict]:
    """Messages carrying an image become multimodal [image, text] content."""
    formatted = []
    for m in messages:
        if m.image:
            formatted.append({
                "role": m.role,
                "content": [
                    {"type": "image_url", "image_url": {"url": m.image}},
                    {"type": "text", "text": m.content or DEFAULT_IMAGE_QUESTION},
                ],
            })
        else:
            formatted.append({"role": m.role, "content": m.content})
    return formatted


def chat_with_david(messages: List[RelayMessage], client, model: str) -> Optional[str]:
    if not messages:
        raise RelayError("No messages provided", 400)
    if client is None:
        raise RelayError(NOT_CONFIGURED_MESSAGE, 500)

    logger.info("David chat - processing message")
    try:
        response = client.chat.completions.create(
            model=model,
            messages=[{"role": "system", "content": DAVID_SYSTEM_PROMPT}] + format_messages(messages),
        )
    except Exception as e:
        raise translate_gateway_error(e) from e

    logger.info("David chat - response generated")
    if not response.choices:
        return None
    return response.choices[0].message.content
