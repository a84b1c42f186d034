import threading
import time

import pytest

from pivot_rank.statistics import DocumentStatEntry, TermStatEntry


class FakeProvider:
    """In-memory statistics provider that counts full scans."""

    def __init__(self, documents, terms=None, scan_delay=0.0, fail=False):
        self.documents = [DocumentStatEntry(length, unique) for length, unique in documents]
        self.terms = {
            term: TermStatEntry(frequency, df) for term, (frequency, df) in (terms or {}).items()
        }
        self.scan_delay = scan_delay
        self.fail = fail
        self.document_scans = 0
        self.term_scans = 0
        self._lock = threading.Lock()

    def document_count(self):
        return len(self.documents)

    def document_length(self, doc_id):
        return self.documents[doc_id].length

    def document_unique_term_count(self, doc_id):
        if self.fail:
            raise OSError("index unavailable")
        return self.documents[doc_id].unique_terms

    def iter_documents(self):
        with self._lock:
            self.document_scans += 1
        if self.fail:
            raise OSError("index unavailable")
        time.sleep(self.scan_delay)
        return iter(self.documents)

    def term_total_occurrences(self, term):
        return self.terms[term].frequency

    def term_document_frequency(self, term):
        return self.terms[term].document_frequency

    def iter_terms(self):
        with self._lock:
            self.term_scans += 1
        if self.fail:
            raise OSError("lexicon unavailable")
        time.sleep(self.scan_delay)
        return iter(self.terms.values())

    def collection_total_tokens(self):
        return sum(d.length for d in self.documents)

    def collection_unique_term_count(self):
        return len(self.terms)


@pytest.fixture
def toy_provider():
    # doc A: 10 tokens / 5 unique, doc B: 20 / 10, plus an empty document
    return FakeProvider(
        documents=[(10, 5), (20, 10), (0, 0)],
        terms={"x": (6, 2), "y": (3, 3), "z": (21, 1)},
    )


@pytest.fixture
def fake_provider_factory():
    return FakeProvider
