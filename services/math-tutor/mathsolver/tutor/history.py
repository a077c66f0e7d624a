import uuid
from datetime import datetime
from typing import List
from pydantic import BaseModel, Field

PREVIEW_CHARS = 50


class HistoryItem(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    image: str
    solution: str
    timestamp: datetime = Field(default_factory=datetime.now)

    @property
    def preview(self) -> str:
        return f"{self.solution[:PREVIEW_CHARS]}..."


class SolutionHistory:
    """Solved problems, newest first, capped at `limit`."""

    def __init__(self, limit: int = 20):
        self.limit = limit
        self._items: List[HistoryItem] = []

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> List[HistoryItem]:
        return list(self._items)

    def add(self, image: str, solution: str) -> HistoryItem:
        item = HistoryItem(image=image, solution=solution)
        self._items = [item] + self._items[: max(0, self.limit - 1)]
        return item

    def get(self, item_id: str) -> HistoryItem:
        for item in self._items:
            if item.id == item_id:
                return item
        raise KeyError(item_id)

    def clear(self):
        self._items = []
