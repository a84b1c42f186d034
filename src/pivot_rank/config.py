"""
Scorer configuration.

A ModelConfiguration is read once when a scorer is built and never changes
afterwards. Enum fields are stored as lower-cased strings and validated the
first time a normalization function sees them, so an unknown value surfaces
as InvalidConfigurationError from the scoring call rather than at load time.

Environment variables:
    TF_NORMALIZATION_COMBINATION   linear | product        (default linear)
    TF_NORMALIZATION_PIVOTIZATION  non_elite | elite       (default non_elite)
    LAMBDAQ_NORMALIZATION_*        the same two settings for the hybrid model
    TF_QUANTIFICATION              total | log | bm25 | constant (default total)
    PIVOT_B, PIVOT_A, PIVOT_K1     floats (defaults 0.5, 0.5, 1.2)
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from pivot_rank.errors import InvalidConfigurationError


class Combination(str, Enum):
    LINEAR = "linear"
    PRODUCT = "product"


class Pivotization(str, Enum):
    NON_ELITE = "non_elite"
    ELITE = "elite"


class Quantification(str, Enum):
    TOTAL = "total"
    LOG = "log"
    BM25 = "bm25"
    CONSTANT = "constant"


DEFAULT_COMBINATION = Combination.LINEAR.value
DEFAULT_PIVOTIZATION = Pivotization.NON_ELITE.value
DEFAULT_QUANTIFICATION = Quantification.TOTAL.value
DEFAULT_B = 0.5
DEFAULT_A = 0.5
DEFAULT_K1 = 1.2


def resolve(enum_cls: type[Enum], value: object, option: str) -> Enum:
    """Map a string (or enum member) onto ``enum_cls`` or raise InvalidConfigurationError."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        raise InvalidConfigurationError(option, value) from None


def _normalize(value: object) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value).lower()


@dataclass(frozen=True)
class ModelConfiguration:
    """
    Parameters of one scorer instance.

    Args:
        combination: How the two pivoted ratios are blended ("linear" or "product").
        pivotization: Baseline for the verboseness/burstiness pivot ("non_elite" or "elite").
        b: Overall normalization strength.
        a: Balance between the two pivoted ratios.
        quantification: TF quantification, used by the TF-IDF scorer only.
        k1: Saturation scale applied to K, used by the TF-IDF scorer only.
    """

    combination: str = DEFAULT_COMBINATION
    pivotization: str = DEFAULT_PIVOTIZATION
    b: float = DEFAULT_B
    a: float = DEFAULT_A
    quantification: str = DEFAULT_QUANTIFICATION
    k1: float = DEFAULT_K1

    def __post_init__(self) -> None:
        # frozen: bypass __setattr__ to store the canonical spelling
        object.__setattr__(self, "combination", _normalize(self.combination))
        object.__setattr__(self, "pivotization", _normalize(self.pivotization))
        object.__setattr__(self, "quantification", _normalize(self.quantification))
        object.__setattr__(self, "b", float(self.b))
        object.__setattr__(self, "a", float(self.a))
        object.__setattr__(self, "k1", float(self.k1))

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        normalization: str = "tf",
    ) -> ModelConfiguration:
        """
        Read a configuration from environment variables.

        ``normalization`` selects the variable prefix: "tf" for the document-centric
        models, "lambdaq" for the hybrid LM/TF-IDF model.
        """
        env = os.environ if environ is None else environ
        prefix = normalization.upper()
        return cls(
            combination=env.get(f"{prefix}_NORMALIZATION_COMBINATION", DEFAULT_COMBINATION),
            pivotization=env.get(f"{prefix}_NORMALIZATION_PIVOTIZATION", DEFAULT_PIVOTIZATION),
            b=float(env.get("PIVOT_B", DEFAULT_B)),
            a=float(env.get("PIVOT_A", DEFAULT_A)),
            quantification=env.get("TF_QUANTIFICATION", DEFAULT_QUANTIFICATION),
            k1=float(env.get("PIVOT_K1", DEFAULT_K1)),
        )
