import logging
import time
from collections import deque
from typing import Deque, List, Literal
from pydantic import BaseModel

logger = logging.getLogger("notifications")


class Toast(BaseModel):
    title: str
    description: str = ""
    variant: Literal["default", "destructive"] = "default"
    timestamp: float


class Notifier:
    """
    One-shot user-visible messages. Clients poll and drain them;
    nothing here is retried or acknowledged.
    """

    def __init__(self, max_pending: int = 50):
        self._pending: Deque[Toast] = deque(maxlen=max_pending)

    def toast(self, title: str, description: str = "", variant: str = "default") -> Toast:
        item = Toast(title=title, description=description, variant=variant, timestamp=time.time())
        self._pending.append(item)
        if variant == "destructive":
            logger.warning("%s: %s", title, description)
        else:
            logger.info("%s: %s", title, description)
        return item

    def pending(self) -> List[Toast]:
        return list(self._pending)

    def drain(self) -> List[Toast]:
        items = list(self._pending)
        self._pending.clear()
        return items
