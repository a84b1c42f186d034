import gc
import weakref
from concurrent.futures import ThreadPoolExecutor

import pytest

from pivot_rank.cache import CorpusStatisticsCache, shared_cache
from pivot_rank.corpus import Corpus
from pivot_rank.errors import DomainError, StatisticsUnavailableError
from pivot_rank.models import LMDScorer


def test_toy_corpus_statistics(toy_provider):
    cache = CorpusStatisticsCache(toy_provider)

    assert cache.non_zero_length_document_count() == 2
    assert cache.average_verboseness() == pytest.approx(2.0)
    # mean(6/2, 3/3, 21/1) = 25/3
    assert cache.average_term_burstiness() == pytest.approx(25 / 3)
    assert cache.is_warm


def test_statistics_are_memoized(toy_provider):
    cache = CorpusStatisticsCache(toy_provider)

    for _ in range(5):
        cache.average_verboseness()
        cache.average_term_burstiness()

    assert toy_provider.document_scans == 1
    assert toy_provider.term_scans == 1


def test_lazy_until_first_access(toy_provider):
    cache = CorpusStatisticsCache(toy_provider)

    assert not cache.is_warm
    assert toy_provider.document_scans == 0
    assert toy_provider.term_scans == 0


def test_concurrent_first_access_scans_once(fake_provider_factory):
    provider = fake_provider_factory([(10, 5), (20, 10)], scan_delay=0.05)
    cache = CorpusStatisticsCache(provider)

    with ThreadPoolExecutor(max_workers=16) as executor:
        values = list(executor.map(lambda _: cache.average_verboseness(), range(16)))

    assert provider.document_scans == 1
    assert len(set(values)) == 1
    assert values[0] == pytest.approx(2.0)


def test_concurrent_term_burstiness_scans_once(fake_provider_factory):
    provider = fake_provider_factory([(1, 1)], terms={"a": (4, 2), "b": (1, 1)}, scan_delay=0.05)
    cache = CorpusStatisticsCache(provider)

    with ThreadPoolExecutor(max_workers=8) as executor:
        values = list(executor.map(lambda _: cache.average_term_burstiness(), range(8)))

    assert provider.term_scans == 1
    assert values == [pytest.approx(1.5)] * 8


def test_provider_failure_is_statistics_unavailable(fake_provider_factory):
    cache = CorpusStatisticsCache(fake_provider_factory([(10, 5)], fail=True))

    with pytest.raises(StatisticsUnavailableError) as excinfo:
        cache.average_verboseness()
    assert isinstance(excinfo.value.__cause__, OSError)

    with pytest.raises(StatisticsUnavailableError):
        cache.average_term_burstiness()


@pytest.mark.parametrize(
    "documents",
    [
        [(0, 0), (0, 0)],
        [(5, 0)],
    ],
)
def test_degenerate_documents_raise_domain_error(fake_provider_factory, documents):
    cache = CorpusStatisticsCache(fake_provider_factory(documents, {"a": (1, 1)}))

    with pytest.raises(DomainError):
        cache.average_verboseness()


def test_empty_lexicon_raises_domain_error(fake_provider_factory):
    cache = CorpusStatisticsCache(fake_provider_factory([(1, 1)], terms={}))

    with pytest.raises(DomainError):
        cache.average_term_burstiness()


def test_shared_cache_is_per_provider(fake_provider_factory):
    first = fake_provider_factory([(1, 1)])
    second = fake_provider_factory([(1, 1)])

    assert shared_cache(first) is shared_cache(first)
    assert shared_cache(first) is not shared_cache(second)


def test_shared_cache_releases_dropped_providers(fake_provider_factory):
    providers = [fake_provider_factory([(10, 5), (20, 10)]) for _ in range(20)]
    refs = [weakref.ref(provider) for provider in providers]
    scorers = [LMDScorer(provider=provider) for provider in providers]

    assert scorers[0].cache.average_verboseness() == pytest.approx(2.0)

    del providers, scorers
    gc.collect()

    assert [ref() for ref in refs] == [None] * 20


def test_shared_cache_releases_dropped_corpus():
    corpus = Corpus([["a", "b"], ["b"]])
    ref = weakref.ref(corpus)
    shared_cache(corpus).non_zero_length_document_count()

    del corpus
    gc.collect()

    assert ref() is None
