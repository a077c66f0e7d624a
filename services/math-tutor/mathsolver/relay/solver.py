import logging
from typing import Literal, Optional
from pydantic import BaseModel
from ..utils import is_image_data_url
from .errors import NOT_CONFIGURED_MESSAGE, RelayError, translate_gateway_error
from .prompts import SOLVER_SYSTEM_PROMPT, SOLVER_USER_PROMPT

logger = logging.getLogger("relay.solver")


class SolveRequest(BaseModel):
    image: str  # data URL
    type: Literal["capture", "upload"] = "capture"


class SolveResponse(BaseModel):
    solution: Optional[str] = None
    error: Optional[str] = None


def solve_math_problem(image: str, source: str, client, model: str) -> str:
    """
    Sends one image to the gateway and returns the solution text.
    Raises RelayError with the HTTP status the caller should surface.
    """
    if not image or not is_image_data_url(image):
        raise RelayError("No image provided", 400)
    if client is None:
        raise RelayError(NOT_CONFIGURED_MESSAGE, 500)

    logger.info("Analyzing math problem (%s, %d bytes)", source, len(image))
    try:
        response = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": SOLVER_SYSTEM_PROMPT},
                {"role": "user", "content": [
                    {"type": "text", "text": SOLVER_USER_PROMPT.get(source, SOLVER_USER_PROMPT["upload"])},
                    {"type": "image_url", "image_url": {"url": image}},
                ]},
            ],
        )
    except Exception as e:
        raise translate_gateway_error(e) from e

    content = response.choices[0].message.content if response.choices else None
    if not content:
        raise RelayError("No solution returned by the AI gateway", 500)
    logger.info("Solution generated")
    return content
