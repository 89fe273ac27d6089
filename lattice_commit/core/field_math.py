#!/usr/bin/env python3
"""
field_math.py - Scalar elements of Z_p for the lattice commitment schemes

Contains:
1. Element: base class every scalar field derives from
2. prime_field(): builds a concrete Element subclass for a modulus p
3. The fields shipped with the package (Binary, Seven, Mod101, Oxfoi)

Elements are plain integers in [0, CARDINALITY). Distance from zero
(zero_dist / zero_disp) is measured on the representative integers and is
NOT a field operation; it is the metric used to bound LWE noise.
"""

import random
from typing import TYPE_CHECKING, Optional, Type

from ..errors import ParameterDegenerate

if TYPE_CHECKING:
    from .linalg import Vector

# Largest cardinality a field may have (moduli must fit in 128 bits)
MAX_CARDINALITY = 1 << 128

# Goldilocks / "Oxfoi" prime: 2^64 - 2^32 + 1
OXFOI_P = (1 << 64) - (1 << 32) + 1


# =============================
# ELEMENT BASE CLASS
# =============================
class Element:
    """
    Element of a finite ring Z_p.

    Subclasses set CARDINALITY (p) and BIT_WIDTH (ceil(log2 p)); use
    prime_field() rather than subclassing by hand.
    """

    CARDINALITY: int = 0
    BIT_WIDTH: int = 0

    def __init__(self, val: int = 0):
        if self.CARDINALITY < 2:
            raise TypeError(f"{type(self).__name__} has no cardinality, use prime_field()")
        self.val = int(val) % self.CARDINALITY

    # ----- constructors -----

    @classmethod
    def from_int(cls, n: int) -> "Element":
        """Element n mod CARDINALITY"""
        return cls(n)

    @classmethod
    def zero(cls) -> "Element":
        """Additive identity"""
        return cls(0)

    @classmethod
    def one(cls) -> "Element":
        """Multiplicative identity"""
        return cls(1)

    @classmethod
    def negone(cls) -> "Element":
        """Additive inverse of one, computed as zero - one"""
        return cls.zero().sub(cls.one())

    @classmethod
    def sample_rand(cls, rng: Optional[random.Random] = None) -> "Element":
        """Uniform element in [0, CARDINALITY)"""
        r = rng or random
        return cls(r.randrange(0, cls.CARDINALITY))

    @classmethod
    def at_displacement(cls, disp: int) -> "Element":
        """
        Element at signed distance `disp` from zero.

        disp >= 0 maps to disp, disp < 0 wraps to CARDINALITY + disp.
        Inverse of zero_disp() whenever |disp| <= CARDINALITY // 2.
        """
        if disp >= 0:
            return cls(disp)
        return cls(cls.CARDINALITY + disp)

    @classmethod
    def from_le_bits_vec(cls, parts: "Vector", bits: int) -> "Element":
        """
        Recompose little-endian digits of width `bits`.

        Digit i carries place value (2^bits)^i:
            x = Σ parts[i] · 2^(bits·i)

        Args:
            parts: Vector of digits, least significant first
            bits: digit width used by as_le_bits_vec

        Returns:
            The recomposed element
        """
        if bits < 1:
            raise ValueError(f"Digit width must be >= 1, got {bits}")
        out = cls.zero()
        weight = 1
        for part in parts:
            out = out.add(part.mul(cls(weight)))
            weight <<= bits
        return out

    # ----- predicates and metrics -----

    def is_zero(self) -> bool:
        """Is the element the additive identity?"""
        return self.val == 0

    def zero_dist(self) -> int:
        """Unsigned distance from zero: min(v, p - v)"""
        return min(self.val, self.CARDINALITY - self.val)

    def zero_disp(self) -> int:
        """
        Signed displacement from zero.

        Positive when the element is closer to zero going forward,
        negative when it is closer going backward (centered representation).
        """
        inverse = self.CARDINALITY - self.val
        if self.val <= inverse:
            return self.val
        return -inverse

    # ----- digit decomposition -----

    def as_le_bits_vec(self, bits: int) -> "Vector":
        """
        Decompose into ceil(BIT_WIDTH / bits) little-endian digits.

        Each digit lies in [0, 2^bits); digits past the most significant
        non-zero digit are zero.

        Args:
            bits: digit width (>= 1)

        Returns:
            Vector of digits in the same field
        """
        from .linalg import Vector  # avoid circular import

        if bits < 1:
            raise ValueError(f"Digit width must be >= 1, got {bits}")
        parts_len = -(-self.BIT_WIDTH // bits)
        mask = (1 << bits) - 1
        out = Vector.zeros(parts_len, type(self))
        v = self.val
        for i in range(parts_len):
            if v == 0:
                break
            out[i] = type(self)(v & mask)
            v >>= bits
        return out

    # ----- field arithmetic -----

    def add(self, other: "Element") -> "Element":
        self._check_same(other)
        return type(self)(self.val + other.val)

    def sub(self, other: "Element") -> "Element":
        self._check_same(other)
        return type(self)(self.val - other.val)

    def mul(self, other: "Element") -> "Element":
        self._check_same(other)
        return type(self)(self.val * other.val)

    def neg(self) -> "Element":
        return type(self)(-self.val)

    def inverse(self) -> "Element":
        """Multiplicative inverse (prime moduli only)"""
        if self.val == 0:
            raise ZeroDivisionError(f"{type(self).__name__}: zero has no inverse")
        return type(self)(pow(self.val, -1, self.CARDINALITY))

    def _check_same(self, other: "Element") -> None:
        """Verify both operands live in the same field"""
        if type(self) is not type(other):
            raise ValueError(
                f"Field mismatch: {type(self).__name__} vs {type(other).__name__}"
            )

    # ----- dunder -----

    def __int__(self) -> int:
        return self.val

    def __eq__(self, other) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        return type(self) is type(other) and self.val == other.val

    def __hash__(self) -> int:
        return hash((self.CARDINALITY, self.val))

    def __str__(self) -> str:
        return str(self.val)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.val})"


# =============================
# FIELD CONSTRUCTION
# =============================
def prime_field(name: str, modulus: int) -> Type[Element]:
    """
    Build an Element subclass for Z_modulus.

    Args:
        name: class name of the new field
        modulus: cardinality p, 2 <= p <= 2^128

    Returns:
        Element subclass with CARDINALITY = p and BIT_WIDTH = ceil(log2 p)
    """
    if modulus < 2:
        raise ParameterDegenerate(f"Field modulus must be >= 2, got {modulus}")
    if modulus > MAX_CARDINALITY:
        raise ParameterDegenerate(f"Field modulus {modulus} does not fit in 128 bits")
    return type(name, (Element,), {
        "CARDINALITY": modulus,
        # (p - 1).bit_length() == ceil(log2 p) for p >= 2
        "BIT_WIDTH": (modulus - 1).bit_length(),
        "__module__": __name__,
    })


BinaryScalar = prime_field("BinaryScalar", 2)
SevenScalar = prime_field("SevenScalar", 7)
Mod101Scalar = prime_field("Mod101Scalar", 101)
OxfoiScalar = prime_field("OxfoiScalar", OXFOI_P)
