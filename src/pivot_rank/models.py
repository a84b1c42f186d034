"""
Pivoted-normalization weighting models.

Every model follows the same recipe: two pivoted ratios are blended into a
normalization factor K, K shapes a term-frequency (or smoothing) component,
and the result is multiplied by an informativeness term.

    LMDScorer     document length + verboseness, LM smoothing weight K/(K+1)
    LMTFIDFScorer term length + burstiness, smoothed IDF weight K/(K+1)
    TFIDFScorer   document length + verboseness, k1-scaled K, quantified TF x IDF

The collection length is l_c = average document length x nD, where nD is the
number of non-zero-length documents taken from the statistics cache.
"""

from __future__ import annotations

from pivot_rank.cache import CorpusStatisticsCache, shared_cache
from pivot_rank.config import ModelConfiguration, Pivotization, resolve
from pivot_rank.errors import DomainError, InvalidConfigurationError, StatisticsUnavailableError
from pivot_rank.normalization import (
    COMBINATION_OPTION,
    LAMBDAQ_COMBINATION_OPTION,
    LAMBDAQ_PIVOTIZATION_OPTION,
    PIVOTIZATION_OPTION,
    combine,
    log_or_raise,
    pivoted_length,
    pivoted_term_burstiness,
    pivoted_term_length,
    pivoted_verboseness,
    quantify,
    smoothing_weight,
)
from pivot_rank.statistics import Posting, StatisticsProvider, TermAggregate


class PivotedScorer:
    """
    Shared plumbing for the pivoted-normalization models.

    Args:
        config: Model parameters; defaults to ModelConfiguration().
        provider: Index statistics. Needed by ``score`` and by elite pivotization.
        cache: Corpus statistics cache; defaults to the process-wide cache of ``provider``.
    """

    name = "PivotedScorer"
    combination_option = COMBINATION_OPTION
    pivotization_option = PIVOTIZATION_OPTION

    def __init__(
        self,
        config: ModelConfiguration | None = None,
        provider: StatisticsProvider | None = None,
        cache: CorpusStatisticsCache | None = None,
    ):
        self.config = config or ModelConfiguration()
        self.provider = provider
        if cache is None and provider is not None:
            cache = shared_cache(provider)
        self.cache = cache

    @property
    def info(self) -> str:
        c = self.config
        return f"{self.name}.nc_{c.combination}.np_{c.pivotization}.b_{c.b:.1f}.a_{c.a:.2f}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.info!r})"

    def score(self, posting: Posting, term: TermAggregate) -> float:
        raise NotImplementedError

    def _require_cache(self) -> CorpusStatisticsCache:
        if self.cache is None:
            raise ValueError(f"{self.name} needs a statistics provider or cache for this call")
        return self.cache

    def _is_elite(self) -> bool:
        return resolve(Pivotization, self.config.pivotization, self.pivotization_option) is Pivotization.ELITE

    def _average_verboseness(self) -> float | None:
        return self._require_cache().average_verboseness() if self._is_elite() else None

    def _average_term_burstiness(self) -> float | None:
        return self._require_cache().average_term_burstiness() if self._is_elite() else None

    def _collection(self, term: TermAggregate) -> tuple[float, float]:
        """Return (nD, l_c) for a scoring call."""
        nD = float(self._require_cache().non_zero_length_document_count())
        return nD, term.average_document_length * nD

    def _document_unique_terms(self, doc_id: int) -> float:
        if self.provider is None:
            raise ValueError(f"{self.name} needs a statistics provider to look up documents")
        try:
            return float(self.provider.document_unique_term_count(doc_id))
        except Exception as exc:
            raise StatisticsUnavailableError(
                f"unique term count of document {doc_id} could not be read"
            ) from exc

    def _document_k(self, l_d: float, nT_d: float, l_c: float, nD: float, nT: float) -> float:
        """K from the document-centric pivots (length, verboseness)."""
        c = self.config
        pivdv = pivoted_verboseness(l_d, nT_d, l_c, nT, c.pivotization, self._average_verboseness())
        pivdl = pivoted_length(l_d, l_c, nD)
        return combine(pivdl, pivdv, c.b, c.a, c.combination)


class LMDScorer(PivotedScorer):
    """Language model whose smoothing weight comes from pivoted document normalization."""

    name = "LMDs_EPs"

    def score(self, posting: Posting, term: TermAggregate) -> float:
        nD, l_c = self._collection(term)
        return self.score_terms(
            tfd=posting.frequency,
            l_d=posting.document_length,
            nD=nD,
            l_c=l_c,
            nT=term.number_of_unique_terms,
            l_t=term.term_frequency,
            nT_d=self._document_unique_terms(posting.doc_id),
        )

    def score_terms(
        self,
        tfd: float,
        l_d: float,
        nD: float,
        l_c: float,
        nT: float,
        l_t: float,
        nT_d: float,
    ) -> float:
        """log(1 - λ + λ (tfd / l_d) (l_c / l_t)) with λ = K / (K + 1)."""
        lam = smoothing_weight(self._document_k(l_d, nT_d, l_c, nD, nT))
        if l_d == 0:
            raise DomainError("LM term frequency is undefined for a zero-length document")
        if l_t == 0:
            raise DomainError("LM informativeness is undefined for a term absent from the collection")
        tf = tfd / l_d
        ilf = l_c / l_t
        return log_or_raise(1.0 - lam + lam * tf * ilf, "LM score")


class LMTFIDFScorer(PivotedScorer):
    """TF times an IDF smoothed by a pivoted term-normalization weight."""

    name = "LM_TFs_IDF_EPs"
    combination_option = LAMBDAQ_COMBINATION_OPTION
    pivotization_option = LAMBDAQ_PIVOTIZATION_OPTION

    def score(self, posting: Posting, term: TermAggregate) -> float:
        nD, l_c = self._collection(term)
        return self.score_terms(
            tfd=posting.frequency,
            nD=nD,
            df=term.document_frequency,
            l_c=l_c,
            l_t=term.term_frequency,
        )

    def score_terms(self, tfd: float, nD: float, df: float, l_c: float, l_t: float) -> float:
        """tfd * log(1 - λq + λq nD / df) with λq = K / (K + 1) from term pivots."""
        c = self.config
        pivtb = pivoted_term_burstiness(
            l_t, df, l_c, nD, c.pivotization, self._average_term_burstiness(), self.pivotization_option
        )
        pivtl = pivoted_term_length(l_t, l_c, nD)
        lam = smoothing_weight(combine(pivtl, pivtb, c.b, c.a, c.combination, self.combination_option))
        return tfd * log_or_raise(1.0 - lam + lam * nD / df, "smoothed IDF")


class TFIDFScorer(PivotedScorer):
    """Quantified, pivot-normalized TF times log(nD / df)."""

    name = "TFs_IDF_EPs"

    def __init__(
        self,
        config: ModelConfiguration | None = None,
        provider: StatisticsProvider | None = None,
        cache: CorpusStatisticsCache | None = None,
    ):
        super().__init__(config, provider, cache)
        if not self.config.k1 > 0:
            raise InvalidConfigurationError("k1", self.config.k1)

    @property
    def info(self) -> str:
        c = self.config
        return (
            f"{self.name}.q_{c.quantification}.nc_{c.combination}.np_{c.pivotization}"
            f".k1_{c.k1:.4f}.b_{c.b:.1f}.a_{c.a:.1f}"
        )

    def score(self, posting: Posting, term: TermAggregate) -> float:
        nD, l_c = self._collection(term)
        return self.score_terms(
            tfd=posting.frequency,
            l_d=posting.document_length,
            nD=nD,
            nT_d=self._document_unique_terms(posting.doc_id),
            df=term.document_frequency,
            l_c=l_c,
            nT=term.number_of_unique_terms,
        )

    def score_terms(
        self,
        tfd: float,
        l_d: float,
        nD: float,
        nT_d: float,
        df: float,
        l_c: float,
        nT: float,
    ) -> float:
        K = self.config.k1 * self._document_k(l_d, nT_d, l_c, nD, nT)
        tf = quantify(tfd, K, self.config.quantification)
        if df == 0:
            raise DomainError("IDF is undefined for zero document frequency")
        return tf * log_or_raise(nD / df, "IDF")
