"""
Document-at-a-time ranking of a Corpus with any pivoted scorer.

Usage:
    corpus = Corpus.from_texts(texts)
    ranker = PivotedRanker(corpus, TFIDFScorer(ModelConfiguration(quantification="bm25"), corpus))
    indices, scores = ranker.rank(tokenize("pivoted normalization"), top_k=10)
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

import numpy as np

from pivot_rank.models import PivotedScorer
from pivot_rank.statistics import Posting

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from pivot_rank.corpus import Corpus

NUM_QUERY_WORKERS = min(int(os.environ.get("PIVOT_QUERY_WORKERS", 32)), 64)
MIN_QUERIES_FOR_PARALLEL = 10


def select_top_k(
    scores: NDArray[np.float64],
    top_k: int | None,
) -> tuple[NDArray[np.int64], NDArray[np.float64]]:
    """
    Select top-k documents, highest score first.

    Uses np.argpartition when k < n and a full sort otherwise.
    """
    n = len(scores)

    if top_k is not None and top_k < n:
        top_k_indices = np.argpartition(-scores, top_k)[:top_k]
        sorted_top_k = top_k_indices[np.argsort(-scores[top_k_indices], kind="stable")]
        return sorted_top_k.astype(np.int64), scores[sorted_top_k]
    sorted_indices = np.argsort(-scores, kind="stable").astype(np.int64)
    return sorted_indices, scores[sorted_indices]


class PivotedRanker:
    """
    Sums per-posting scores over the query terms (duplicates included).

    Documents that contain no query term score 0.0.

    Args:
        corpus: In-memory index supplying postings and term statistics.
        scorer: Any PivotedScorer bound to ``corpus``.
    """

    def __init__(self, corpus: Corpus, scorer: PivotedScorer):
        self.corpus = corpus
        self.scorer = scorer

    def score(self, query: list[str], index: int) -> float:
        """Score a single document."""
        score = 0.0
        length = self.corpus.document_length(index)
        for term in query:
            tid = self.corpus.get_term_id(term)
            if tid is None:
                continue
            tf = self.corpus.tf_matrix[tid, index]
            if tf > 0:
                posting = Posting(doc_id=index, frequency=int(tf), document_length=length)
                score += self.scorer.score(posting, self.corpus.term_aggregate(term))
        return score

    def get_scores(self, query: list[str]) -> NDArray[np.float64]:
        scores = np.zeros(len(self.corpus), dtype=np.float64)
        for term in query:
            aggregate = self.corpus.term_aggregate(term)
            for posting in self.corpus.postings(term):
                scores[posting.doc_id] += self.scorer.score(posting, aggregate)
        return scores

    def rank(
        self,
        query: list[str],
        top_k: int | None = None,
    ) -> tuple[NDArray[np.int64], NDArray[np.float64]]:
        """Rank all documents by relevance."""
        return select_top_k(self.get_scores(query), top_k)

    def batch_rank(
        self,
        queries: list[list[str]],
        top_k: int | None = None,
    ) -> list[tuple[NDArray[np.int64], NDArray[np.float64]]]:
        if len(queries) < MIN_QUERIES_FOR_PARALLEL:
            return [self.rank(query, top_k) for query in queries]
        with ThreadPoolExecutor(max_workers=NUM_QUERY_WORKERS) as executor:
            return list(executor.map(lambda q: self.rank(q, top_k), queries))
