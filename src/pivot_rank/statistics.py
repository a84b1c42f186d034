"""
Value types and the statistics provider interface consumed by the scorers.

The index layer owns postings and all per-document/per-term counts; the
scoring core only reads them through these types.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class Posting:
    """One occurrence record of a query term in a document."""

    doc_id: int
    frequency: int
    document_length: int


@dataclass(frozen=True)
class DocumentStatEntry:
    length: int
    unique_terms: int


@dataclass(frozen=True)
class TermStatEntry:
    frequency: int
    document_frequency: int


@dataclass(frozen=True)
class TermAggregate:
    """
    Per query-term statistics resolved by the caller before scoring.

    Attributes:
        term_frequency: Occurrences of the term in the whole collection (l_t).
        document_frequency: Number of documents containing the term (df).
        average_document_length: Mean document length of the collection.
        number_of_tokens: Total tokens in the collection. Not read by the scorers,
            which derive l_c from average_document_length and the non-zero-length
            document count; carried so the aggregate matches what an index reports.
        number_of_unique_terms: Size of the lexicon (nT).
    """

    term_frequency: float
    document_frequency: float
    average_document_length: float
    number_of_tokens: float
    number_of_unique_terms: float


@runtime_checkable
class StatisticsProvider(Protocol):
    """Read-only view of an index's document and lexicon statistics."""

    def document_count(self) -> int: ...

    def document_length(self, doc_id: int) -> int: ...

    def document_unique_term_count(self, doc_id: int) -> int: ...

    def iter_documents(self) -> Iterator[DocumentStatEntry]: ...

    def term_total_occurrences(self, term: str) -> int: ...

    def term_document_frequency(self, term: str) -> int: ...

    def iter_terms(self) -> Iterator[TermStatEntry]: ...

    def collection_total_tokens(self) -> int: ...

    def collection_unique_term_count(self) -> int: ...
