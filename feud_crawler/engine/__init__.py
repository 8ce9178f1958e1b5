"""Engine components orchestrating fetch → extract → store."""

from .extractor import (
    PairedPointsStrategy,
    QuestionExtractor,
    RankedRowsStrategy,
    StrategyChain,
)
from .fetcher import FetchResponse, Fetcher
from .parser import Document, Parser
from .records import QuestionRecord, TranslatedRecord, VariantRecord
from .store import QuestionStore

__all__ = [
    "Document",
    "FetchResponse",
    "Fetcher",
    "PairedPointsStrategy",
    "Parser",
    "QuestionExtractor",
    "QuestionRecord",
    "QuestionStore",
    "RankedRowsStrategy",
    "StrategyChain",
    "TranslatedRecord",
    "VariantRecord",
]
