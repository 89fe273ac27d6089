#!/usr/bin/env python3
"""
lwe_commitment.py - Learning With Errors commitments over Z_p

COMMITMENT SCHEME STRUCTURE:
- Setup: lattice A ∈ Z_p^{h×n}, h = n·BIT_WIDTH
- Commit: com = A·x + e, e ∈ Z_p^h with every |e_i| small
- Open(x, B): e' = com - A·x, accept iff ‖e'‖_∞ ≤ B (distance from zero)

NOISE POLICIES:
- NOISE_BINARY: e_i ∈ {0, 1} (fair coin), bound 1
- NOISE_TERNARY: e_i ∈ {-1, 0, 1} (uniform trit, centered), bound 1 [default]
- GaussianCDT instance: e_i ~ D_θ, bound = table tail D

NOISE GROWTH:
Adding k commitments adds their noise, scaling by s multiplies it by |s|.
Every commitment carries `noise_bound`, an upper bound on ‖e‖_∞ updated by
each homomorphic operation; try_open() uses it when no explicit bound is
given. A caller passing max_err explicitly owns the growth accounting. Past
p/2 the bound is meaningless and the commitment no longer binds.
"""

import logging
import random
from typing import Optional, Tuple, Type, Union

from ..core.field_math import Element
from ..core.linalg import Matrix, Vector
from ..errors import ErrorBoundExceeded, MismatchedLattice
from .gaussian_cdt import GaussianCDT
from .sis_commitment import default_lattice

logger = logging.getLogger(__name__)

NOISE_BINARY = "binary"
NOISE_TERNARY = "ternary"
DEFAULT_NOISE = NOISE_TERNARY

NoisePolicy = Union[str, GaussianCDT]


def sample_noise(length: int, field: Type[Element], noise: NoisePolicy = DEFAULT_NOISE,
                 rng: Optional[random.Random] = None) -> Tuple[Vector, int]:
    """
    Draw an LWE error vector.

    Args:
        length: number of entries (lattice height)
        field: element type
        noise: NOISE_BINARY, NOISE_TERNARY or a GaussianCDT
        rng: random source

    Returns:
        (error vector, bound on the zero-distance of each entry)
    """
    if isinstance(noise, GaussianCDT):
        return noise.sample_vector(length, rng, field), noise.tail
    r = rng or random
    if noise == NOISE_BINARY:
        return Vector([field(r.getrandbits(1)) for _ in range(length)], field), 1
    if noise == NOISE_TERNARY:
        return Vector([field.at_displacement(r.randint(-1, 1)) for _ in range(length)], field), 1
    raise ValueError(f"Unknown LWE noise policy: {noise!r}")


class LWECommitment:
    """
    LWE commitment com = A·x + e.

    Attributes:
        lattice: commitment matrix A
        commitment: A·x + e
        noise_bound: upper bound on ‖e‖_∞ through all combinations so far
        lattice_id: SHA3-256 fingerprint of A
    """

    def __init__(self, lattice: Matrix, commitment: Vector, noise_bound: int,
                 lattice_id: Optional[bytes] = None):
        self.lattice = lattice
        self.commitment = commitment
        self.noise_bound = noise_bound
        self.lattice_id = lattice.fingerprint() if lattice_id is None else lattice_id

    @classmethod
    def commit(cls, val: Vector, lattice: Optional[Matrix] = None,
               rng: Optional[random.Random] = None,
               noise: NoisePolicy = DEFAULT_NOISE,
               seed: Optional[bytes] = None) -> "LWECommitment":
        """
        Commit to `val` with fresh noise.

        Args:
            val: message vector of length width(lattice)
            lattice: shared lattice; None draws one of height len(val)·BIT_WIDTH
            rng: random source for lattice and noise
            noise: noise policy (see module docstring)
            seed: expand the fresh lattice from this seed (noise still uses rng)

        Returns:
            LWECommitment with noise_bound set by the policy
        """
        if lattice is None:
            lattice = default_lattice(val, rng, seed)
        elif seed is not None:
            raise ValueError("Pass either a lattice or a seed, not both")
        err, bound = sample_noise(lattice.height, val.field, noise, rng)
        return cls(lattice, lattice.mul_vector(val).add(err), bound)

    # ----- opening -----

    def try_open(self, val: Vector, max_err: Optional[int] = None) -> Vector:
        """
        Open against `val`, returning the recovered error vector.

        Args:
            val: claimed message
            max_err: largest acceptable zero-distance per noise entry;
                defaults to self.noise_bound

        Raises:
            ErrorBoundExceeded: some |e_i| > max_err
        """
        bound = self.noise_bound if max_err is None else max_err
        err = self.commitment.sub(self.lattice.mul_vector(val))
        for i, e in enumerate(err):
            dist = e.zero_dist()
            if dist > bound:
                logger.debug("[LWE] REJECT - noise entry %d: |e|=%d > B=%d", i, dist, bound)
                raise ErrorBoundExceeded(dist, bound, i)
        return err

    def verify(self, val: Vector, max_err: Optional[int] = None) -> bool:
        """try_open() as a bool"""
        try:
            self.try_open(val, max_err)
        except ErrorBoundExceeded:
            return False
        return True

    # ----- homomorphism -----
    # The result keeps self's lattice; noise bounds grow with each operation.

    def add(self, other: "LWECommitment") -> "LWECommitment":
        """Commitment to x + y with noise e_x + e_y"""
        self._check_lattice(other)
        return LWECommitment(
            self.lattice,
            self.commitment.add(other.commitment),
            self.noise_bound + other.noise_bound,
            self.lattice_id,
        )

    def sub(self, other: "LWECommitment") -> "LWECommitment":
        """Commitment to x - y with noise e_x - e_y"""
        self._check_lattice(other)
        return LWECommitment(
            self.lattice,
            self.commitment.sub(other.commitment),
            self.noise_bound + other.noise_bound,
            self.lattice_id,
        )

    def scale(self, scalar: Element) -> "LWECommitment":
        """Commitment to s·x with noise s·e"""
        return LWECommitment(
            self.lattice,
            self.commitment.scale(scalar),
            self.noise_bound * scalar.zero_dist(),
            self.lattice_id,
        )

    def hadamard(self, v: Vector) -> "LWECommitment":
        """Componentwise product of the commitment with `v` (length = height)"""
        return LWECommitment(
            self.lattice,
            self.commitment.hadamard(v),
            self.noise_bound * v.max_zero_dist(),
            self.lattice_id,
        )

    def _check_lattice(self, other: "LWECommitment") -> None:
        if self.lattice_id != other.lattice_id:
            raise MismatchedLattice("Cannot combine LWE commitments over different lattices")

    def __repr__(self) -> str:
        h, w = self.lattice.dimension()
        return f"LWECommitment({h}×{w}, noise_bound={self.noise_bound})"
