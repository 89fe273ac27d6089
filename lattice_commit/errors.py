#!/usr/bin/env python3
"""
errors.py - Exception hierarchy for lattice_commit

Contract violations (wrong dimensions, degenerate CDT parameters, broken
sampler invariants) propagate as soon as they are detected. Opening failures
are raised for the caller to branch on; every scheme also offers a
bool-returning verify() for callers that prefer not to catch.
"""


class LatticeError(Exception):
    """Base class for every error raised by this package."""


class DimensionMismatch(LatticeError, ValueError):
    """Vector/matrix operands disagree in length or shape."""


class MismatchedLattice(LatticeError, ValueError):
    """Homomorphic combination of commitments built over different lattices."""


class CommitmentOpenFailure(LatticeError):
    """lattice·secret does not reproduce the stored commitment."""


class ErrorBoundExceeded(CommitmentOpenFailure):
    """
    LWE opening recovered a noise entry larger than the allowed bound.

    Attributes:
        distance: zero-distance of the offending noise entry
        bound: the bound it was checked against
        index: position of the entry in the noise vector
    """

    def __init__(self, distance: int, bound: int, index: int = -1):
        self.distance = distance
        self.bound = bound
        self.index = index
        super().__init__(
            f"Error opening LWE commitment, noise entry {index} is beyond bound: "
            f"{distance} > {bound}"
        )


class InvariantViolation(LatticeError, RuntimeError):
    """Internal invariant broken, e.g. a CDT draw landed outside every bucket."""


class ParameterDegenerate(LatticeError, ValueError):
    """Construction parameter outside the supported precision or range."""
