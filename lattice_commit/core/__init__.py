"""
Core algebra for the lattice commitment schemes

This package contains:
- field_math: Element base class and the prime fields (Binary, Seven, Mod101, Oxfoi)
- linalg: Vector and Matrix over those fields
- r1cs: rank-1 constraint evaluation on top of linalg
"""

from .field_math import (
    Element,
    prime_field,
    BinaryScalar,
    SevenScalar,
    Mod101Scalar,
    OxfoiScalar,
)
from .linalg import Vector, Matrix
from .r1cs import R1CS

__all__ = [
    'Element',
    'prime_field',
    'BinaryScalar',
    'SevenScalar',
    'Mod101Scalar',
    'OxfoiScalar',
    'Vector',
    'Matrix',
    'R1CS',
]
