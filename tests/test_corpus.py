import pytest

from pivot_rank.cache import CorpusStatisticsCache
from pivot_rank.corpus import Corpus, tokenize
from pivot_rank.statistics import Posting, StatisticsProvider


@pytest.fixture
def corpus():
    return Corpus(
        [
            "a a b".split(),
            "b c".split(),
            [],
        ],
        ids=["d0", "d1", "d2"],
    )


def test_is_statistics_provider(corpus):
    assert isinstance(corpus, StatisticsProvider)


def test_document_statistics(corpus):
    assert corpus.document_count() == 3
    assert [corpus.document_length(i) for i in range(3)] == [3, 2, 0]
    assert [corpus.document_unique_term_count(i) for i in range(3)] == [2, 2, 0]
    assert corpus.collection_total_tokens() == 5
    assert corpus.collection_unique_term_count() == 3


def test_term_statistics(corpus):
    assert corpus.term_total_occurrences("a") == 2
    assert corpus.term_document_frequency("a") == 1
    assert corpus.term_total_occurrences("b") == 2
    assert corpus.term_document_frequency("b") == 2
    assert corpus.term_document_frequency("missing") == 0


def test_term_aggregate(corpus):
    aggregate = corpus.term_aggregate("b")
    assert aggregate.term_frequency == 2
    assert aggregate.document_frequency == 2
    assert aggregate.average_document_length == pytest.approx(5 / 3)
    assert aggregate.number_of_unique_terms == 3


def test_postings(corpus):
    assert list(corpus.postings("b")) == [
        Posting(doc_id=0, frequency=1, document_length=3),
        Posting(doc_id=1, frequency=1, document_length=2),
    ]
    assert list(corpus.postings("missing")) == []


def test_cache_over_corpus_skips_empty_documents(corpus):
    cache = CorpusStatisticsCache(corpus)

    assert cache.non_zero_length_document_count() == 2
    assert cache.average_verboseness() == pytest.approx((3 / 2 + 2 / 2) / 2)
    # a: 2/1, b: 2/2, c: 1/1
    assert cache.average_term_burstiness() == pytest.approx(4 / 3)


def test_id_to_idx(corpus):
    assert corpus.id_to_idx(["d1", "d0"]) == [1, 0]


def test_tokenize():
    assert tokenize("Hello, World! 42") == ["hello", "world", "42"]
