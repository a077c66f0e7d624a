import logging
from .config import Settings

logger = logging.getLogger("clients")


class ClientRegistry:
    """Lazily builds the AI gateway client so the app boots without credentials."""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._openai = None

    def get_openai(self):
        if self._openai is None:
            if not self._settings.api_key:
                logger.warning("AI gateway API key missing; set AI_GATEWAY_API_KEY to enable solving")
                return None
            try:
                from openai import OpenAI
                self._openai = OpenAI(
                    api_key=self._settings.api_key,
                    base_url=self._settings.gateway_url,
                )
                logger.info("Gateway client ready (%s)", self._settings.gateway_url)
            except Exception as e:
                logger.exception("Gateway client init failed: %s", e)
                self._openai = None
        return self._openai
