"""Pivoted term-frequency normalization scoring."""

from pivot_rank.cache import CorpusStatisticsCache, shared_cache
from pivot_rank.config import Combination, ModelConfiguration, Pivotization, Quantification
from pivot_rank.corpus import Corpus, tokenize
from pivot_rank.errors import (
    DomainError,
    InvalidConfigurationError,
    PivotRankError,
    StatisticsUnavailableError,
)
from pivot_rank.models import LMDScorer, LMTFIDFScorer, PivotedScorer, TFIDFScorer
from pivot_rank.normalization import (
    combine,
    pivoted_length,
    pivoted_term_burstiness,
    pivoted_term_length,
    pivoted_verboseness,
    quantify,
)
from pivot_rank.ranking import PivotedRanker, select_top_k
from pivot_rank.statistics import (
    DocumentStatEntry,
    Posting,
    StatisticsProvider,
    TermAggregate,
    TermStatEntry,
)

__all__ = [
    "Combination",
    "Corpus",
    "CorpusStatisticsCache",
    "DocumentStatEntry",
    "DomainError",
    "InvalidConfigurationError",
    "LMDScorer",
    "LMTFIDFScorer",
    "ModelConfiguration",
    "PivotRankError",
    "PivotedRanker",
    "PivotedScorer",
    "Pivotization",
    "Posting",
    "Quantification",
    "StatisticsProvider",
    "StatisticsUnavailableError",
    "TFIDFScorer",
    "TermAggregate",
    "TermStatEntry",
    "combine",
    "pivoted_length",
    "pivoted_term_burstiness",
    "pivoted_term_length",
    "pivoted_verboseness",
    "quantify",
    "select_top_k",
    "shared_cache",
    "tokenize",
]
