#!/usr/bin/env python3
"""
linalg.py - Dense linear algebra over Z_p

Định nghĩa toán học:
- Z_p^n: vectors of n field elements
- Z_p^(h×w): matrices stored as h row vectors of length w
- Naming convention: bold symbols in the math become snake_case in code
  - A (matrix) → lattice / a_1
  - v (vector) → val / r_1
  - A·v (matvec) → A.mul_vector(v)

All arithmetic is exact modular arithmetic; mat-vec products accumulate in
Python integers and reduce once per row.
"""

import hashlib
import random
from typing import Iterable, Iterator, Optional, Tuple, Type

from ..errors import DimensionMismatch
from .field_math import Element


# =============================
# VECTOR (Z_p^n)
# =============================
class Vector:
    """
    Fixed-length vector of elements of one field.

    Length is fixed at construction, entries are mutable through v[i] = e.
    Each assignment bumps `version`, which lets a Matrix notice changed rows.
    Binary operations return new vectors and raise DimensionMismatch when the
    operand lengths differ.
    """

    def __init__(self, entries: Iterable[Element], field: Optional[Type[Element]] = None):
        entries = list(entries)
        if field is None:
            if not entries:
                raise ValueError("Cannot infer the field of an empty vector")
            field = type(entries[0])
        for e in entries:
            if type(e) is not field:
                raise ValueError(f"Vector entry {e!r} is not in {field.__name__}")
        self.field = field
        self.entries = entries
        self.version = 0

    @classmethod
    def zeros(cls, length: int, field: Type[Element]) -> "Vector":
        """Zero vector of given length"""
        return cls([field.zero() for _ in range(length)], field)

    @classmethod
    def random(cls, length: int, field: Type[Element],
               rng: Optional[random.Random] = None) -> "Vector":
        """Vector of uniform elements"""
        return cls([field.sample_rand(rng) for _ in range(length)], field)

    @classmethod
    def from_ints(cls, values: Iterable[int], field: Type[Element]) -> "Vector":
        """Vector from integers reduced mod p"""
        return cls([field(v) for v in values], field)

    # ----- componentwise algebra -----

    def add(self, other: "Vector") -> "Vector":
        """self + other (componentwise)"""
        self._check_len(other)
        return Vector([a.add(b) for a, b in zip(self.entries, other.entries)], self.field)

    def sub(self, other: "Vector") -> "Vector":
        """self - other (componentwise)"""
        self._check_len(other)
        return Vector([a.sub(b) for a, b in zip(self.entries, other.entries)], self.field)

    def neg(self) -> "Vector":
        return Vector([a.neg() for a in self.entries], self.field)

    def add_scalar(self, c: Element) -> "Vector":
        """Add c to every entry"""
        return Vector([a.add(c) for a in self.entries], self.field)

    def scale(self, c: Element) -> "Vector":
        """c·v"""
        return Vector([a.mul(c) for a in self.entries], self.field)

    def hadamard(self, other: "Vector") -> "Vector":
        """
        Hadamard (elementwise) product: a ∘ b = [a[0]·b[0], ..., a[n-1]·b[n-1]].
        """
        self._check_len(other)
        return Vector([a.mul(b) for a, b in zip(self.entries, other.entries)], self.field)

    def dot(self, other: "Vector") -> Element:
        """Inner product ⟨a, b⟩ = Σ a_i·b_i"""
        self._check_len(other)
        p = self.field.CARDINALITY
        return self.field(sum(a.val * b.val for a, b in zip(self.entries, other.entries)) % p)

    # ----- reductions -----

    def sum(self) -> Element:
        """Fold entries by addition"""
        out = self.field.zero()
        for e in self.entries:
            out = out.add(e)
        return out

    # No ownership transfer in Python; kept for callers written against it
    into_sum = sum

    def is_zero(self) -> bool:
        """All entries equal the additive identity"""
        return all(e.is_zero() for e in self.entries)

    def max_zero_dist(self) -> int:
        """Largest zero-distance among the entries (infinity norm)"""
        return max((e.zero_dist() for e in self.entries), default=0)

    def copy(self) -> "Vector":
        return Vector(list(self.entries), self.field)

    def _check_len(self, other: "Vector") -> None:
        if len(self.entries) != len(other.entries):
            raise DimensionMismatch(
                f"Vector length mismatch: {len(self.entries)} vs {len(other.entries)}"
            )

    # ----- container protocol -----

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Element]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> Element:
        if not 0 <= index < len(self.entries):
            raise IndexError(f"requested index {index} outside of vector of length {len(self.entries)}")
        return self.entries[index]

    def __setitem__(self, index: int, value: Element) -> None:
        if not 0 <= index < len(self.entries):
            raise IndexError(f"requested index {index} outside of vector of length {len(self.entries)}")
        if type(value) is not self.field:
            raise ValueError(f"Vector entry {value!r} is not in {self.field.__name__}")
        self.entries[index] = value
        self.version += 1

    def __eq__(self, other) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return self.field is other.field and self.entries == other.entries

    def __str__(self) -> str:
        return ",".join(str(e) for e in self.entries)

    def __repr__(self) -> str:
        return f"Vector[{self.field.__name__}]({self})"


# =============================
# MATRIX (Z_p^(h×w))
# =============================
class Matrix:
    """
    Dense row-major matrix: `height` rows, each a Vector of length `width`.

    The (height, width) shape is fixed after construction.
    The fingerprint is cached and recomputed only after a row is replaced or
    one of its entries is assigned.
    """

    def __init__(self, rows: Iterable[Vector], width: Optional[int] = None,
                 field: Optional[Type[Element]] = None):
        rows = list(rows)
        if rows:
            width = len(rows[0]) if width is None else width
            field = rows[0].field if field is None else field
        if width is None or field is None:
            raise ValueError("An empty matrix needs an explicit width and field")
        for i, row in enumerate(rows):
            if len(row) != width:
                raise DimensionMismatch(f"Row {i} has length {len(row)}, expected width {width}")
            if row.field is not field:
                raise ValueError(f"Row {i} is over {row.field.__name__}, expected {field.__name__}")
        self.width = width
        self.height = len(rows)
        self.field = field
        self.rows = rows
        self._fp_cache = None

    # ----- constructors -----

    @classmethod
    def zero(cls, width: int, height: int, field: Type[Element]) -> "Matrix":
        """All-zero matrix"""
        return cls([Vector.zeros(width, field) for _ in range(height)], width, field)

    @classmethod
    def identity(cls, n: int, field: Type[Element]) -> "Matrix":
        """n×n identity: ones on the diagonal, zero elsewhere"""
        out = cls.zero(n, n, field)
        for i in range(n):
            out.rows[i][i] = field.one()
        return out

    @classmethod
    def random(cls, width: int, height: int, field: Type[Element],
               rng: Optional[random.Random] = None) -> "Matrix":
        """Every entry drawn with Element.sample_rand"""
        return cls([Vector.random(width, field, rng) for _ in range(height)], width, field)

    @classmethod
    def expand(cls, seed: bytes, width: int, height: int,
               field: Type[Element]) -> "Matrix":
        """
        Deterministic uniform matrix from a seed.

        Row i is read from SHAKE-128(seed || i). Each entry takes
        ceil(BIT_WIDTH / 8) bytes, masked to BIT_WIDTH bits, and is kept only
        if it is below p (rejection sampling, acceptance >= 1/2).

        Args:
            seed: arbitrary-length seed
            width: number of columns
            height: number of rows
            field: element type

        Returns:
            height×width matrix; same seed gives the same matrix
        """
        p = field.CARDINALITY
        nbytes = (field.BIT_WIDTH + 7) // 8
        mask = (1 << field.BIT_WIDTH) - 1
        rows = []
        for i in range(height):
            shake = hashlib.shake_128(seed + i.to_bytes(4, 'little'))
            buf_size = nbytes * width * 2 + 16
            stream = shake.digest(buf_size)
            idx = 0
            entries = []
            while len(entries) < width:
                if idx + nbytes > len(stream):
                    # SHAKE output is a prefix-stable stream, ask for more
                    buf_size *= 2
                    stream = shake.digest(buf_size)
                t = int.from_bytes(stream[idx:idx + nbytes], 'little') & mask
                idx += nbytes
                if t < p:
                    entries.append(field(t))
            rows.append(Vector(entries, field))
        return cls(rows, width, field)

    def compose_horizontal(self, other: "Matrix") -> "Matrix":
        """
        [self | other]: append the columns of `other` (equal heights).
        """
        if self.height != other.height:
            raise DimensionMismatch(
                f"Cannot compose matrices of height {self.height} and {other.height}"
            )
        if self.field is not other.field:
            raise ValueError(f"Field mismatch: {self.field.__name__} vs {other.field.__name__}")
        rows = [Vector(a.entries + b.entries, self.field) for a, b in zip(self.rows, other.rows)]
        return Matrix(rows, self.width + other.width, self.field)

    # ----- shape -----

    def dimension(self) -> Tuple[int, int]:
        """(height, width), also known as (rows, columns)"""
        return (self.height, self.width)

    def row(self, i: int) -> Vector:
        if not 0 <= i < self.height:
            raise IndexError(f"requested row {i} outside of matrix of height {self.height}")
        return self.rows[i]

    # ----- algebra -----

    def add(self, other: "Matrix") -> "Matrix":
        """Entrywise sum, row i of self with row i of other"""
        self._check_shape(other, "add")
        return Matrix([a.add(b) for a, b in zip(self.rows, other.rows)], self.width, self.field)

    def hadamard(self, other: "Matrix") -> "Matrix":
        """Entrywise product, row i of self with row i of other"""
        self._check_shape(other, "mul")
        return Matrix([a.hadamard(b) for a, b in zip(self.rows, other.rows)], self.width, self.field)

    def mul_vector(self, v: Vector) -> Vector:
        """
        Matrix-vector multiplication: A·v.

        A ∈ Z_p^(h×w), v ∈ Z_p^w → A·v ∈ Z_p^h

        Example:
            A = [[a11, a12], [a21, a22]], v = [v1, v2]
            Result: [a11·v1 + a12·v2, a21·v1 + a22·v2]
        """
        if len(v) != self.width:
            raise DimensionMismatch(
                f"Dimension mismatch: A is {self.height}×{self.width}, v has length {len(v)}"
            )
        if v.field is not self.field:
            raise ValueError(f"Field mismatch: {self.field.__name__} vs {v.field.__name__}")
        p = self.field.CARDINALITY
        vals = [e.val for e in v.entries]
        out = []
        for row in self.rows:
            acc = 0
            for a, b in zip(row.entries, vals):
                acc += a.val * b
            out.append(self.field(acc % p))
        return Vector(out, self.field)

    def fingerprint(self) -> bytes:
        """
        SHA3-256 over shape, modulus and entries.

        Two matrices have equal fingerprints iff they are equal (up to hash
        collisions); used to tell lattices apart without keeping them around.
        """
        state = [(row, row.version) for row in self.rows]
        cached = self._fp_cache
        if cached is not None and _same_rows(cached[0], state):
            return cached[1]

        nbytes = (self.field.BIT_WIDTH + 7) // 8
        h = hashlib.sha3_256()
        h.update(b"LATTICE|")
        h.update(self.field.CARDINALITY.to_bytes(17, 'little'))
        h.update(self.height.to_bytes(8, 'little'))
        h.update(self.width.to_bytes(8, 'little'))
        for row in self.rows:
            h.update(b"".join(e.val.to_bytes(nbytes, 'little') for e in row.entries))
        digest = h.digest()
        self._fp_cache = (state, digest)
        return digest

    def _check_shape(self, other: "Matrix", op: str) -> None:
        if self.width != other.width:
            raise DimensionMismatch(f"cannot {op} matrices of different width")
        if self.height != other.height:
            raise DimensionMismatch(f"cannot {op} matrices of different height")

    # ----- container protocol -----

    def __getitem__(self, i: int) -> Vector:
        return self.row(i)

    def __iter__(self) -> Iterator[Vector]:
        return iter(self.rows)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return (self.field is other.field and self.dimension() == other.dimension()
                and self.rows == other.rows)

    def __str__(self) -> str:
        return "\n".join(str(row) for row in self.rows)

    def __repr__(self) -> str:
        return f"Matrix[{self.field.__name__}]({self.height}×{self.width})"


def _same_rows(old, new) -> bool:
    """Row objects and their versions unchanged"""
    return len(old) == len(new) and all(
        a is c and v == w for (a, v), (c, w) in zip(old, new)
    )
