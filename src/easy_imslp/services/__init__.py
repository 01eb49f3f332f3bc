"""Domain services that fetch IMSLP pages and run them through the parsers."""

from easy_imslp.services.composer import ComposerService
from easy_imslp.services.score import ScoreService
from easy_imslp.services.search import CombinedResults, SearchService
from easy_imslp.services.validation import validate_score, validate_work
from easy_imslp.services.work import WorkService

__all__ = [
    "CombinedResults",
    "ComposerService",
    "ScoreService",
    "SearchService",
    "WorkService",
    "validate_score",
    "validate_work",
]
