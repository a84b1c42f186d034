"""
Lazily computed corpus-wide statistics.

Three aggregates need a full pass over the index: the number of documents
with non-zero length, the average document verboseness and the average term
burstiness. Each is computed at most once per cache, under a lock, and then
read without locking. ``shared_cache`` hands out one cache per provider for
the lifetime of the process.
"""

from __future__ import annotations

import logging
import threading
import weakref
from collections.abc import Callable
from typing import Generic, TypeVar

import numpy as np

from pivot_rank.errors import DomainError, StatisticsUnavailableError
from pivot_rank.statistics import StatisticsProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNCOMPUTED = object()


class _ComputeOnce(Generic[T]):
    """Double-checked single-initialization cell."""

    def __init__(self, name: str, compute: Callable[[], T]):
        self.name = name
        self._compute = compute
        self._value: object = _UNCOMPUTED
        self._lock = threading.Lock()

    @property
    def computed(self) -> bool:
        return self._value is not _UNCOMPUTED

    def get(self) -> T:
        value = self._value
        if value is _UNCOMPUTED:
            with self._lock:
                value = self._value
                if value is _UNCOMPUTED:
                    logger.debug("Scanning index for %s", self.name)
                    value = self._compute()
                    logger.info("Computed %s = %s", self.name, value)
                    self._value = value
        return value  # type: ignore[return-value]


class CorpusStatisticsCache:
    """
    Memoized collection aggregates over one statistics provider.

    Args:
        provider: The index view to scan on first access.
    """

    def __init__(self, provider: StatisticsProvider):
        self.provider = provider
        self._non_zero_length_documents = _ComputeOnce(
            "non_zero_length_document_count", self._count_non_zero_length_documents
        )
        self._average_verboseness = _ComputeOnce(
            "average_verboseness", self._scan_average_verboseness
        )
        self._average_term_burstiness = _ComputeOnce(
            "average_term_burstiness", self._scan_average_term_burstiness
        )

    def non_zero_length_document_count(self) -> int:
        return self._non_zero_length_documents.get()

    def average_verboseness(self) -> float:
        """Mean of length / unique terms over documents with non-zero length."""
        return self._average_verboseness.get()

    def average_term_burstiness(self) -> float:
        """Mean of collection frequency / document frequency over the lexicon."""
        return self._average_term_burstiness.get()

    @property
    def is_warm(self) -> bool:
        return (
            self._non_zero_length_documents.computed
            and self._average_verboseness.computed
            and self._average_term_burstiness.computed
        )

    # ------------------------------------------------------------------
    # Scans
    # ------------------------------------------------------------------

    def _document_arrays(self) -> tuple[np.ndarray, np.ndarray]:
        try:
            entries = list(self.provider.iter_documents())
        except Exception as exc:
            logger.exception("Could not read the document index")
            raise StatisticsUnavailableError("document index could not be read") from exc
        lengths = np.fromiter((e.length for e in entries), dtype=np.float64, count=len(entries))
        unique = np.fromiter((e.unique_terms for e in entries), dtype=np.float64, count=len(entries))
        return lengths, unique

    def _count_non_zero_length_documents(self) -> int:
        lengths, _ = self._document_arrays()
        return int(np.count_nonzero(lengths > 0))

    def _scan_average_verboseness(self) -> float:
        lengths, unique = self._document_arrays()
        mask = lengths > 0
        if not mask.any():
            raise DomainError("average verboseness is undefined without non-zero-length documents")
        if np.any(unique[mask] <= 0):
            raise DomainError("document with non-zero length reports zero unique terms")
        return float(np.mean(lengths[mask] / unique[mask]))

    def _scan_average_term_burstiness(self) -> float:
        try:
            entries = list(self.provider.iter_terms())
        except Exception as exc:
            logger.exception("Could not read the lexicon")
            raise StatisticsUnavailableError("lexicon could not be read") from exc
        if not entries:
            raise DomainError("average term burstiness is undefined for an empty lexicon")
        frequency = np.fromiter((e.frequency for e in entries), dtype=np.float64, count=len(entries))
        df = np.fromiter((e.document_frequency for e in entries), dtype=np.float64, count=len(entries))
        if np.any(df <= 0):
            raise DomainError("lexicon entry with zero document frequency")
        return float(np.mean(frequency / df))


_SHARED_CACHES: weakref.WeakKeyDictionary[StatisticsProvider, CorpusStatisticsCache] = (
    weakref.WeakKeyDictionary()
)
_SHARED_LOCK = threading.Lock()


def shared_cache(provider: StatisticsProvider) -> CorpusStatisticsCache:
    """
    Return the process-wide cache for ``provider``, creating it on first use.

    The entry lives as long as ``provider`` does; ``provider`` must be hashable
    and weak-referenceable.
    """
    cache = _SHARED_CACHES.get(provider)
    if cache is None:
        with _SHARED_LOCK:
            cache = _SHARED_CACHES.get(provider)
            if cache is None:
                # a weak proxy, or the registry entry would keep its own key alive
                cache = CorpusStatisticsCache(weakref.proxy(provider))
                _SHARED_CACHES[provider] = cache
    return cache
