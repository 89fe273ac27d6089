#!/usr/bin/env python3
"""
bdlop_commitment.py - BDLOP commitments over a scalar field

Implements Baum et al.'s commitment scheme (https://eprint.iacr.org/2016/997.pdf,
pages 10-11) with scalar entries instead of ring elements.

COMMITMENT SCHEME STRUCTURE:
- Setup: two lattice bases sharing one width
    A_1 = [ I_{h1} | R_1 ]                  (h1 × w)
    A_2 = [ 0_{m×h1} | I_m | R_2 ]          (m × w)
  with h1 = m·BIT_WIDTH - m and w = h1 + 2m
- Commit: c_1 = A_1·r_1         (SIS commitment to zero, hides)
          c_2 = A_2·r_2 + x     (SIS commitment to x, binds)
- Open: check A_1·r_1 = c_1, then read x = c_2 - A_2·r_2

BINDING CAVEAT:
try_open() only checks r_1. A correct r_1 is taken to imply a correct r_2;
r_2 itself is never verified. Protocols that need the stronger property must
check r_2 themselves.
"""

import logging
import random
from typing import Optional, Tuple, Type

from ..core.field_math import Element
from ..core.linalg import Matrix, Vector
from ..errors import CommitmentOpenFailure

logger = logging.getLogger(__name__)

Lattice = Tuple[Matrix, Matrix]
Secret = Tuple[Vector, Vector]


class BDLOPCommitment:
    """
    BDLOP commitment (c_1, c_2) under the bases (A_1, A_2).

    Attributes:
        a_1, a_2: lattice bases
        c_1: A_1·r_1
        c_2: A_2·r_2 + x
    """

    def __init__(self, a_1: Matrix, a_2: Matrix, c_1: Vector, c_2: Vector):
        self.a_1 = a_1
        self.a_2 = a_2
        self.c_1 = c_1
        self.c_2 = c_2

    @staticmethod
    def dimension(msg_len: int, field: Type[Element]) -> Tuple[int, int]:
        """
        (height of A_1, common width) for a message of `msg_len` elements.

        The message should be mixed with about msg_len·log(p) random vectors.
        A_2 supplies msg_len of them, so A_1 gets msg_len·BIT_WIDTH - msg_len
        rows. The width is shifted 2·msg_len past A_1's identity block;
        otherwise the identity part of A_2 would output the message in the
        plain.
        """
        a_1_height = msg_len * field.BIT_WIDTH - msg_len
        width = a_1_height + 2 * msg_len
        return a_1_height, width

    @classmethod
    def lattice_for(cls, msg_len: int, field: Type[Element],
                    rng: Optional[random.Random] = None,
                    seed: Optional[bytes] = None) -> Lattice:
        """
        Fresh (A_1, A_2) for messages of `msg_len` elements.

        Share the returned pair between every commitment that should use the
        same public parameters.

        With `seed`, the random blocks R_1 and R_2 are expanded from it
        (domain-separated per block) and rng is unused.
        """
        a_1_height, width = cls.dimension(msg_len, field)

        def block(tag: bytes, w: int, h: int) -> Matrix:
            if seed is None:
                return Matrix.random(width=w, height=h, field=field, rng=rng)
            return Matrix.expand(seed + tag, w, h, field)

        # A_1 = [ I | R_1 ]
        a_1 = Matrix.identity(a_1_height, field).compose_horizontal(
            block(b"|R_1", width - a_1_height, a_1_height)
        )

        # A_2 = [ 0 | I | R_2 ]
        a_2 = (
            Matrix.zero(width=a_1_height, height=msg_len, field=field)
            .compose_horizontal(Matrix.identity(msg_len, field))
            .compose_horizontal(block(b"|R_2", width - a_1_height - msg_len, msg_len))
        )
        return a_1, a_2

    @classmethod
    def commit(cls, val: Vector, lattice: Lattice,
               rng: Optional[random.Random] = None) -> Tuple[Secret, "BDLOPCommitment"]:
        """
        Commit to `val` under (A_1, A_2).

        Args:
            val: message, length = height of A_2
            lattice: (A_1, A_2) from lattice_for()
            rng: random source for r_1, r_2

        Returns:
            ((r_1, r_2), commitment); keep the secret to open later
        """
        a_1, a_2 = lattice
        # secret committing to the zero component
        r_1 = Vector.random(a_1.width, val.field, rng)
        # secret committing to the message component, independent of r_1
        r_2 = Vector.random(a_2.width, val.field, rng)

        c_1 = a_1.mul_vector(r_1)
        c_2 = a_2.mul_vector(r_2).add(val)
        return (r_1, r_2), cls(a_1, a_2, c_1, c_2)

    def try_open(self, secret: Secret) -> Vector:
        """
        Open with the stored randomness.

        c_1 is opened to zero first; if that succeeds c_2 is opened to
        whatever value it holds. r_2 is assumed correct whenever r_1 is.

        Raises:
            CommitmentOpenFailure: A_1·r_1 != c_1
        """
        r_1, r_2 = secret
        if self.a_1.mul_vector(r_1) != self.c_1:
            logger.debug("[BDLOP] REJECT - A_1·r_1 does not match c_1")
            raise CommitmentOpenFailure("Failed to open commitment, secret is incorrect")
        return self.c_2.sub(self.a_2.mul_vector(r_2))

    def verify(self, secret: Secret, val: Vector) -> bool:
        """True iff `secret` opens the commitment to `val`"""
        try:
            return self.try_open(secret) == val
        except CommitmentOpenFailure:
            return False

    def try_open_zk(self, rng: Optional[random.Random] = None) -> Vector:
        """
        Non-interactive ZK proof of opening (page 15 of the BDLOP paper).

        Not implemented: the response would be a vector of small elements
        instead of a single ring element, and the remaining protocol details
        are not settled.
        """
        raise NotImplementedError("BDLOP zero-knowledge opening is not implemented")

    def __repr__(self) -> str:
        return (f"BDLOPCommitment(A_1={self.a_1.height}×{self.a_1.width}, "
                f"A_2={self.a_2.height}×{self.a_2.width})")


# ============================================================================
# TESTING
# ============================================================================

if __name__ == '__main__':
    from ..core.field_math import Mod101Scalar

    print("\n[TEST] BDLOP Commitment Scheme (Baum et al.)")
    print("=" * 60)

    rng = random.Random(7)
    m = 4
    lattice = BDLOPCommitment.lattice_for(m, Mod101Scalar, rng)
    print(f"   ✓ A_1 shape: {lattice[0].dimension()}, A_2 shape: {lattice[1].dimension()}")

    x = Vector.random(m, Mod101Scalar, rng)
    secret, com = BDLOPCommitment.commit(x, lattice, rng)
    print(f"   Open with correct secret: {com.verify(secret, x)} (expected: True)")

    r_1, r_2 = secret
    tampered = r_1.copy()
    tampered[0] = tampered[0].add(Mod101Scalar.one())
    print(f"   Open with tampered r_1: {com.verify((tampered, r_2), x)} (expected: False)")
