#!/usr/bin/env python3
"""
sis_commitment.py - Short Integer Solution commitments over Z_p

COMMITMENT SCHEME STRUCTURE:
- Setup: lattice A ∈ Z_p^{h×n}, h = n·BIT_WIDTH (uniform, or shared by caller)
- Commit: com = A·x, where x ∈ Z_p^n is short (digits from as_le_bits_vec)
- Open: recompute A·x' and compare with com

SECURITY PROPERTIES:
- Binding: two short openings of one com give a short SIS solution A·(x - x') = 0
- Not hiding: com is a deterministic function of x

HOMOMORPHISM:
A·x + A·y = A·(x + y), so commitments over the SAME lattice add up to a
commitment to the sum of their digit vectors. Recompose the resulting digits
with Element.from_le_bits_vec to read the committed field element.
"""

import random
from typing import Optional

from ..core.field_math import Element
from ..core.linalg import Matrix, Vector
from ..errors import CommitmentOpenFailure, MismatchedLattice


class SISCommitment:
    """
    SIS commitment to a vector of short digits.

    Attributes:
        lattice: commitment matrix A
        secret: committed digits x (None once no preimage is known)
        commitment: A·x
        lattice_id: SHA3-256 fingerprint of A
    """

    def __init__(self, lattice: Matrix, secret: Optional[Vector], commitment: Vector,
                 lattice_id: Optional[bytes] = None):
        self.lattice = lattice
        self.secret = secret
        self.commitment = commitment
        self.lattice_id = lattice.fingerprint() if lattice_id is None else lattice_id

    @classmethod
    def commit(cls, val: Vector, lattice: Optional[Matrix] = None,
               rng: Optional[random.Random] = None,
               seed: Optional[bytes] = None) -> "SISCommitment":
        """
        Commit to `val`, generating a random lattice when none is given.

        Args:
            val: short digits, typically element.as_le_bits_vec(bits)
            lattice: shared lattice of width len(val); None draws a fresh one
                of height len(val)·BIT_WIDTH
            rng: random source for the lattice
            seed: expand the fresh lattice from this seed instead of rng, so
                parties holding the seed rebuild the same lattice

        Returns:
            SISCommitment storing val as its secret
        """
        if lattice is None:
            lattice = default_lattice(val, rng, seed)
        elif seed is not None:
            raise ValueError("Pass either a lattice or a seed, not both")
        return cls(lattice, val.copy(), lattice.mul_vector(val))

    # ----- opening -----

    def verify(self, claimed: Vector) -> bool:
        """True iff lattice·claimed equals the stored commitment"""
        return self.lattice.mul_vector(claimed) == self.commitment

    def try_open(self, claimed: Vector) -> Vector:
        """
        Open against a claimed secret.

        Raises:
            CommitmentOpenFailure: lattice·claimed != commitment
        """
        if not self.verify(claimed):
            raise CommitmentOpenFailure("Failed to open SIS commitment, secret is incorrect")
        return claimed

    # ----- homomorphism -----
    # The result keeps self's lattice; secrets follow the same operation.

    def add(self, other: "SISCommitment") -> "SISCommitment":
        """Commitment to self.secret + other.secret"""
        self._check_lattice(other)
        return SISCommitment(
            self.lattice,
            _combine(self.secret, other.secret, Vector.add),
            self.commitment.add(other.commitment),
            self.lattice_id,
        )

    def sub(self, other: "SISCommitment") -> "SISCommitment":
        """Commitment to self.secret - other.secret"""
        self._check_lattice(other)
        return SISCommitment(
            self.lattice,
            _combine(self.secret, other.secret, Vector.sub),
            self.commitment.sub(other.commitment),
            self.lattice_id,
        )

    def scale(self, scalar: Element) -> "SISCommitment":
        """Commitment to scalar·secret"""
        secret = None if self.secret is None else self.secret.scale(scalar)
        return SISCommitment(self.lattice, secret, self.commitment.scale(scalar), self.lattice_id)

    def hadamard(self, v: Vector) -> "SISCommitment":
        """
        Componentwise product of the commitment vector with `v` (length = height).

        No short preimage is known afterwards, so the secret is dropped.
        """
        return SISCommitment(self.lattice, None, self.commitment.hadamard(v), self.lattice_id)

    def _check_lattice(self, other: "SISCommitment") -> None:
        if self.lattice_id != other.lattice_id:
            raise MismatchedLattice("Cannot combine SIS commitments over different lattices")

    def __repr__(self) -> str:
        h, w = self.lattice.dimension()
        return f"SISCommitment({h}×{w}, id={self.lattice_id.hex()[:12]})"


def _combine(a: Optional[Vector], b: Optional[Vector], op) -> Optional[Vector]:
    if a is None or b is None:
        return None
    return op(a, b)


def default_lattice(val: Vector, rng: Optional[random.Random] = None,
                    seed: Optional[bytes] = None) -> Matrix:
    """
    Fresh lattice for committing to `val`: width len(val), height len(val)·BIT_WIDTH.

    Uniform from `rng`, or Matrix.expand(seed) when a seed is given.
    """
    height = len(val) * val.field.BIT_WIDTH
    if seed is not None:
        return Matrix.expand(seed, len(val), height, val.field)
    return Matrix.random(len(val), height, val.field, rng)
