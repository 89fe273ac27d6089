#!/usr/bin/env python3
"""
gaussian_cdt.py - Discrete Gaussian sampling by cumulative distribution table

Implements a truncated discrete Gaussian D_θ over displacements from zero:
- Support: d ∈ [-D, D] with D = ceil(13·θ), roughly 2^-125 mass outside
- Weight: ρ_θ(d) = exp(-d² / (2θ²)), normalized by the total mass
- Sampling: uniform r ∈ [0, 1), linear scan of the cumulative thresholds

A displacement is a signed distance from the zero element. In Z_101 the
element 0 is at displacement 0, element 1 at displacement 1 and element 100
at displacement -1. Sampled displacements are embedded into the field with
Element.at_displacement().

Tables are immutable and shared: one table per (p, round(θ·10^5)) lives in a
CDTCache. The default cache is created on import and lives for the process.
"""

import logging
import math
import random
import threading
from typing import Callable, Dict, Optional, Tuple, Type

import numpy as np

from ..core.field_math import Element
from ..core.linalg import Vector
from ..errors import InvariantViolation, ParameterDegenerate

logger = logging.getLogger(__name__)

# ============================================================================
# PARAMETERS
# ============================================================================

# Tail cut: 13·θ leaves ~2^-125 probability of a sample outside the table
CDT_TAIL_FACTOR = 13

# θ is keyed with 5 decimals of precision, independent of float accuracy
CDT_THETA_DECIMALS = 5
_THETA_SCALE = 10 ** CDT_THETA_DECIMALS
_MAX_THETA_KEY = 2 ** 32 - 1

# Tables wider than 2·50+1 entries are logged as a warning
CDT_WARN_DISTANCE = 50


def theta_key(theta: float) -> int:
    """
    Scale θ to its integer cache key, round(θ·10^5).

    Raises:
        ParameterDegenerate: θ not finite, needs more than 5 decimals, or
            the key does not fit in 32 bits
    """
    if not math.isfinite(theta):
        raise ParameterDegenerate(f"CDT: theta must be finite, got {theta}")
    scaled = theta * _THETA_SCALE
    key = round(scaled)
    if not math.isclose(scaled, key, rel_tol=0.0, abs_tol=1e-3):
        raise ParameterDegenerate(
            f"CDT: theta {theta} is too precise (max {CDT_THETA_DECIMALS} decimals)"
        )
    if key > _MAX_THETA_KEY:
        raise ParameterDegenerate(f"CDT: theta {theta} is too large")
    return key


# ============================================================================
# CACHE
# ============================================================================

class CDTCache:
    """
    Get-or-build store of GaussianCDT tables keyed by (p, θ key).

    Lookups take no lock (single dict reads are atomic). Inserts are
    serialized. Two threads missing on the same key may both build the
    table; the tables are identical and the last insert wins.
    """

    def __init__(self):
        self._tables: Dict[Tuple[int, int], "GaussianCDT"] = {}
        self._write_lock = threading.Lock()

    def get(self, key: Tuple[int, int]) -> Optional["GaussianCDT"]:
        return self._tables.get(key)

    def insert(self, key: Tuple[int, int], cdt: "GaussianCDT") -> "GaussianCDT":
        with self._write_lock:
            self._tables[key] = cdt
        return cdt

    def get_or_build(self, key: Tuple[int, int],
                     build: Callable[[], "GaussianCDT"]) -> "GaussianCDT":
        cdt = self.get(key)
        if cdt is None:
            cdt = self.insert(key, build())
        return cdt

    def clear(self) -> None:
        with self._write_lock:
            self._tables.clear()

    def __len__(self) -> int:
        return len(self._tables)

    def __contains__(self, key: Tuple[int, int]) -> bool:
        return key in self._tables


DEFAULT_CDT_CACHE = CDTCache()


# ============================================================================
# CUMULATIVE DISTRIBUTION TABLE
# ============================================================================

class GaussianCDT:
    """
    Cumulative distribution table for D_θ over a finite field.

    Attributes:
        field: element type samples are embedded into
        cardinality: field.CARDINALITY
        theta: Gaussian parameter θ (standard deviation)
        tail: D, the largest |displacement| in the table
        displacements: int64 array [-D, ..., D]
        thresholds: float64 array of length 2D+2; bucket i is
            [thresholds[i], thresholds[i+1]) and maps to displacements[i]
        total_mass: Σ ρ_θ(d) before normalization
    """

    def __init__(self, field: Type[Element], theta: float, displacements: np.ndarray,
                 thresholds: np.ndarray, total_mass: float):
        self.field = field
        self.cardinality = field.CARDINALITY
        self.theta = theta
        self.tail = int(displacements[-1])
        self.displacements = displacements
        self.thresholds = thresholds
        self.total_mass = total_mass
        # plain lists for the per-sample scan
        self._disps = displacements.tolist()
        self._edges = thresholds.tolist()

    @classmethod
    def new(cls, field: Type[Element], theta: float,
            cache: Optional[CDTCache] = None) -> "GaussianCDT":
        """
        Shared table for (field.CARDINALITY, θ).

        Args:
            field: element type to sample into
            theta: Gaussian parameter, at most 5 decimals
            cache: table store (DEFAULT_CDT_CACHE if None)

        Returns:
            The cached table, built on first request. A field other than the
            one the table was built for gets a view sharing its arrays.

        Raises:
            ParameterDegenerate: θ out of supported precision/range
        """
        cache = DEFAULT_CDT_CACHE if cache is None else cache
        key = (field.CARDINALITY, theta_key(theta))
        cdt = cache.get_or_build(key, lambda: cls._build(field, theta))
        return cdt if cdt.field is field else cdt.bind(field)

    @classmethod
    def _build(cls, field: Type[Element], theta: float) -> "GaussianCDT":
        dist = math.ceil(CDT_TAIL_FACTOR * theta)
        if dist < 1:
            raise ParameterDegenerate(f"CDT: theta {theta} is too small")

        logger.info("[CDT] Building CDT with max %d elements (p=%d, theta=%s)",
                    2 * dist + 1, field.CARDINALITY, theta)
        if dist > CDT_WARN_DISTANCE:
            logger.warning("[CDT] Building CDT with more than %d elements. "
                           "Consider adjusting tail bounds.", 2 * CDT_WARN_DISTANCE)
        if 2 * dist + 1 > field.CARDINALITY:
            logger.warning("[CDT] %d displacements alias in a field of %d elements",
                           2 * dist + 1, field.CARDINALITY)

        displacements = np.arange(-dist, dist + 1, dtype=np.int64)
        weights = np.exp(-(displacements.astype(np.float64) ** 2) / (2.0 * theta * theta))
        total_mass = float(weights.sum())
        if logger.isEnabledFor(logging.DEBUG):
            for d, w in zip(displacements.tolist(), weights.tolist()):
                logger.debug("[CDT] theta %s, disp: %d prob: %.6e", theta, d, w)

        probs = weights / total_mass
        thresholds = np.concatenate(([0.0], np.cumsum(probs)))

        if np.any(np.diff(thresholds) < 0.0):
            raise InvariantViolation("CDT thresholds are not non-decreasing")
        if thresholds[-1] > 1.0 + 1e-12:
            raise InvariantViolation(f"CDT cumulative mass {thresholds[-1]} exceeds 1")

        return cls(field, theta, displacements, thresholds, total_mass)

    def bind(self, field: Type[Element]) -> "GaussianCDT":
        """Same table, sampling into `field` (equal cardinality)"""
        if field.CARDINALITY != self.cardinality:
            raise ValueError(f"Field mismatch: table is for p={self.cardinality}, "
                             f"{field.__name__} has p={field.CARDINALITY}")
        view = GaussianCDT(field, self.theta, self.displacements, self.thresholds,
                           self.total_mass)
        view._disps = self._disps
        view._edges = self._edges
        return view

    # ----- sampling -----

    def sample_displacement(self, rng: Optional[random.Random] = None) -> int:
        """
        Signed displacement d ~ D_θ.

        Raises:
            InvariantViolation: the uniform draw is outside every bucket
        """
        r = (rng or random).random()
        edges = self._edges
        for i, disp in enumerate(self._disps):
            if edges[i] <= r < edges[i + 1]:
                return disp
        raise InvariantViolation(f"sampled probability {r} is outside CDT")

    def sample(self, rng: Optional[random.Random] = None,
               field: Optional[Type[Element]] = None) -> Element:
        """
        Element at a Gaussian displacement from zero.

        `field` defaults to the field the table was built for; any field of
        the same cardinality shares the table.
        """
        field = self.field if field is None else field
        return field.at_displacement(self.sample_displacement(rng))

    def sample_vector(self, length: int, rng: Optional[random.Random] = None,
                      field: Optional[Type[Element]] = None) -> Vector:
        """Vector of independent samples"""
        field = self.field if field is None else field
        return Vector([self.sample(rng, field) for _ in range(length)], field)

    def prob(self, disp: int) -> float:
        """Probability of selecting `disp` (width of its bucket), 0.0 if absent"""
        edges = self._edges
        for i, d in enumerate(self._disps):
            if d == disp:
                return edges[i + 1] - edges[i]
        return 0.0

    def __len__(self) -> int:
        return len(self._disps)

    def __repr__(self) -> str:
        return f"GaussianCDT(p={self.cardinality}, theta={self.theta}, tail={self.tail})"


# ============================================================================
# TESTING
# ============================================================================

if __name__ == '__main__':
    from ..core.field_math import OxfoiScalar

    print("\n[TEST] Gaussian CDT sampling")
    print("=" * 60)

    theta = 2.0
    cdt = GaussianCDT.new(OxfoiScalar, theta)
    rng = random.Random(1)
    samples = np.array([cdt.sample(rng).zero_disp() for _ in range(20000)])

    print(f"   - Table: {cdt}")
    print(f"   - Mean: {samples.mean():.4f} (should ≈ 0)")
    print(f"   - Std dev: {samples.std():.4f} (should ≈ {theta})")
    print(f"   - Shared: {GaussianCDT.new(OxfoiScalar, theta) is cdt}")
