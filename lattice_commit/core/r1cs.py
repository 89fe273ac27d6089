#!/usr/bin/env python3
"""
r1cs.py - Rank-1 constraint system evaluation

A witness w satisfies (A, B, C) when (A·w) ∘ (B·w) - C·w = 0.
"""

from typing import Tuple, Type

from ..errors import DimensionMismatch
from .field_math import Element
from .linalg import Matrix, Vector


class R1CS:
    """Three constraint matrices of identical (height, width)."""

    def __init__(self, a: Matrix, b: Matrix, c: Matrix):
        self.a = a
        self.b = b
        self.c = c

    @classmethod
    def zero(cls, width: int, height: int, field: Type[Element]) -> "R1CS":
        """Trivial system, every witness satisfies it"""
        return cls(
            Matrix.zero(width, height, field),
            Matrix.zero(width, height, field),
            Matrix.zero(width, height, field),
        )

    def dimension(self) -> Tuple[int, int]:
        return self.a.dimension()

    def eval(self, witness: Vector) -> Vector:
        """
        Evaluate (A·w) ∘ (B·w) - C·w.

        Args:
            witness: vector of length width

        Returns:
            Vector of length height, all zero iff every constraint holds
        """
        self._assert_consistency()
        ab = self.a.mul_vector(witness).hadamard(self.b.mul_vector(witness))
        return ab.sub(self.c.mul_vector(witness))

    def is_satisfied(self, witness: Vector) -> bool:
        return self.eval(witness).is_zero()

    def _assert_consistency(self) -> None:
        dimension = self.a.dimension()
        if self.b.dimension() != dimension:
            raise DimensionMismatch(
                f"R1CS A and B dimension mismatch, expected {dimension}, got {self.b.dimension()}"
            )
        if self.c.dimension() != dimension:
            raise DimensionMismatch(
                f"R1CS A and C dimension mismatch, expected {dimension}, got {self.c.dimension()}"
            )
