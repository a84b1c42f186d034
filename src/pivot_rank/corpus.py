"""
In-memory index statistics.

``Corpus`` precomputes everything a StatisticsProvider must answer from a list
of tokenized documents: a sparse term-document count matrix, document lengths,
unique terms per document, document and collection frequencies per term.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterator
from typing import TYPE_CHECKING

import numpy as np
from scipy.sparse import csr_matrix, lil_matrix

from pivot_rank.statistics import DocumentStatEntry, Posting, TermAggregate, TermStatEntry

if TYPE_CHECKING:
    from numpy.typing import NDArray


def tokenize(text: str) -> list[str]:
    """Tokenizes the input text into a list of terms."""
    return re.findall(r"\w+", text.lower())


class Corpus:
    """
    A preprocessed collection of tokenized documents.

    Args:
        documents: Tokenized documents. Each document is a list of terms.
        ids: Optional external document IDs, one per document.
    """

    def __init__(self, documents: list[list[str]], ids: list[str] | None = None):
        self.ids = ids or [str(i) for i in range(len(documents))]
        self._id_to_idx = {doc_id: i for i, doc_id in enumerate(self.ids)}
        self.N = len(documents)
        self.doc_lengths = np.array([len(d) for d in documents], dtype=np.float64)
        self.total_tokens = int(self.doc_lengths.sum())
        self.avgdl = self.total_tokens / self.N if self.N > 0 else 0.0

        # Build vocabulary
        self._vocab: dict[str, int] = {}
        for doc in documents:
            for term in doc:
                if term not in self._vocab:
                    self._vocab[term] = len(self._vocab)
        self.vocab_size = len(self._vocab)

        tf_matrix_lil = lil_matrix((self.vocab_size, self.N), dtype=np.float64)
        self.unique_terms = np.zeros(self.N, dtype=np.int64)
        for doc_idx, doc in enumerate(documents):
            term_counts = Counter(doc)
            self.unique_terms[doc_idx] = len(term_counts)
            for term, count in term_counts.items():
                tf_matrix_lil[self._vocab[term], doc_idx] = count

        self.tf_matrix = csr_matrix(tf_matrix_lil)
        # Row-wise: nonzeros are documents containing the term, sums are occurrences.
        self.df_array: NDArray[np.int64] = np.diff(self.tf_matrix.indptr).astype(np.int64)
        self.cf_array: NDArray[np.int64] = np.asarray(
            self.tf_matrix.sum(axis=1), dtype=np.int64
        ).ravel()

    def __len__(self) -> int:
        return self.N

    @classmethod
    def from_texts(cls, texts: list[str], ids: list[str] | None = None) -> Corpus:
        return cls([tokenize(text) for text in texts], ids)

    @classmethod
    def from_huggingface_dataset(cls, dataset) -> Corpus:
        ids = [doc["id"] for doc in dataset]
        documents = [tokenize(doc["content"]) for doc in dataset]
        return cls(documents, ids)

    def get_term_id(self, term: str) -> int | None:
        return self._vocab.get(term)

    def id_to_idx(self, ids: list[str]) -> list[int]:
        return [self._id_to_idx[doc_id] for doc_id in ids]

    # ------------------------------------------------------------------
    # StatisticsProvider
    # ------------------------------------------------------------------

    def document_count(self) -> int:
        return self.N

    def document_length(self, doc_id: int) -> int:
        return int(self.doc_lengths[doc_id])

    def document_unique_term_count(self, doc_id: int) -> int:
        return int(self.unique_terms[doc_id])

    def iter_documents(self) -> Iterator[DocumentStatEntry]:
        for length, unique in zip(self.doc_lengths, self.unique_terms):
            yield DocumentStatEntry(length=int(length), unique_terms=int(unique))

    def term_total_occurrences(self, term: str) -> int:
        tid = self._vocab.get(term)
        return 0 if tid is None else int(self.cf_array[tid])

    def term_document_frequency(self, term: str) -> int:
        tid = self._vocab.get(term)
        return 0 if tid is None else int(self.df_array[tid])

    def iter_terms(self) -> Iterator[TermStatEntry]:
        for cf, df in zip(self.cf_array, self.df_array):
            yield TermStatEntry(frequency=int(cf), document_frequency=int(df))

    def collection_total_tokens(self) -> int:
        return self.total_tokens

    def collection_unique_term_count(self) -> int:
        return self.vocab_size

    # ------------------------------------------------------------------
    # Per-query-term access
    # ------------------------------------------------------------------

    def term_aggregate(self, term: str) -> TermAggregate:
        return TermAggregate(
            term_frequency=float(self.term_total_occurrences(term)),
            document_frequency=float(self.term_document_frequency(term)),
            average_document_length=self.avgdl,
            number_of_tokens=float(self.total_tokens),
            number_of_unique_terms=float(self.vocab_size),
        )

    def postings(self, term: str) -> Iterator[Posting]:
        """Postings of ``term`` in increasing document order."""
        tid = self._vocab.get(term)
        if tid is None:
            return
        start, end = self.tf_matrix.indptr[tid], self.tf_matrix.indptr[tid + 1]
        for doc_idx, tf in zip(self.tf_matrix.indices[start:end], self.tf_matrix.data[start:end]):
            yield Posting(
                doc_id=int(doc_idx),
                frequency=int(tf),
                document_length=int(self.doc_lengths[doc_idx]),
            )
