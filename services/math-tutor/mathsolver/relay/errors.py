import logging
import openai

logger = logging.getLogger("relay")

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again in a moment."
USAGE_LIMIT_MESSAGE = "Usage limit reached. Please add credits to continue."
NOT_CONFIGURED_MESSAGE = "AI gateway API key is not configured"


class RelayError(Exception):
    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def translate_gateway_error(exc: Exception) -> RelayError:
    """Map an SDK failure onto the message/status pair the clients expect."""
    if isinstance(exc, RelayError):
        return exc
    if isinstance(exc, openai.APIStatusError):
        logger.error("AI gateway error: %s %s", exc.status_code, exc.message)
        if exc.status_code == 429:
            return RelayError(RATE_LIMIT_MESSAGE, 429)
        if exc.status_code == 402:
            return RelayError(USAGE_LIMIT_MESSAGE, 402)
        return RelayError(f"AI gateway error: {exc.status_code}", 500)
    logger.error("AI gateway call failed: %s", exc)
    return RelayError(str(exc) or "An error occurred", 500)
