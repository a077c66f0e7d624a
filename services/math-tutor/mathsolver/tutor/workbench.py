import logging
from typing import Callable, Optional
from pydantic import BaseModel
from ..notifications import Notifier
from ..relay.errors import RelayError
from .history import HistoryItem, SolutionHistory

logger = logging.getLogger("tutor.workbench")

DEFAULT_FAILURE = "Failed to analyze the math problem. Please try again."


class AnalysisResult(BaseModel):
    solution: Optional[str] = None
    error: Optional[str] = None
    status_code: int = 200
    history_id: Optional[str] = None


class Workbench:
    """
    The solve panel: the image being worked on, its solution, and the
    history of previous answers.
    """

    def __init__(self, solve: Callable[[str, str], str], history: SolutionHistory, notifier: Notifier):
        self._solve = solve
        self.history = history
        self.notifier = notifier
        self.is_loading = False
        self.solution: Optional[str] = None
        self.captured_image: Optional[str] = None

    def analyze(self, image: str, source: str = "capture") -> AnalysisResult:
        if self.is_loading:
            return AnalysisResult(error="Analysis already in progress", status_code=409)

        self.is_loading = True
        self.solution = None
        self.captured_image = image
        try:
            solution = self._solve(image, source)
        except RelayError as e:
            logger.error("Error analyzing math problem: %s", e.message)
            self.notifier.toast("Analysis failed", e.message or DEFAULT_FAILURE, variant="destructive")
            return AnalysisResult(error=e.message or DEFAULT_FAILURE, status_code=e.status_code)
        finally:
            self.is_loading = False

        self.solution = solution
        item = self.history.add(image, solution)
        self.notifier.toast("Answer found!", "Check out the answer below")
        return AnalysisResult(solution=solution, history_id=item.id)

    def select(self, item_id: str) -> HistoryItem:
        item = self.history.get(item_id)
        self.captured_image = item.image
        self.solution = item.solution
        return item

    def clear_history(self):
        self.history.clear()
        self.notifier.toast("History cleared", "All previous solutions have been removed")
