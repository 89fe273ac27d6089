"""
lattice_commit - Lattice-based commitment primitives

This package contains:
- core: Z_p elements, vectors, matrices, R1CS evaluation
- commitments: SIS, LWE and BDLOP commitments, discrete Gaussian CDT
- errors: exception hierarchy shared by both
"""

__version__ = "1.0.0"

from .core import (
    Element,
    prime_field,
    BinaryScalar,
    SevenScalar,
    Mod101Scalar,
    OxfoiScalar,
    Vector,
    Matrix,
    R1CS,
)

from .commitments import (
    GaussianCDT,
    CDTCache,
    DEFAULT_CDT_CACHE,
    SISCommitment,
    LWECommitment,
    NOISE_BINARY,
    NOISE_TERNARY,
    BDLOPCommitment,
)

from .errors import (
    LatticeError,
    DimensionMismatch,
    MismatchedLattice,
    CommitmentOpenFailure,
    ErrorBoundExceeded,
    InvariantViolation,
    ParameterDegenerate,
)

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
    'GaussianCDT',
    'CDTCache',
    'DEFAULT_CDT_CACHE',
    'SISCommitment',
    'LWECommitment',
    'NOISE_BINARY',
    'NOISE_TERNARY',
    'BDLOPCommitment',
    'LatticeError',
    'DimensionMismatch',
    'MismatchedLattice',
    'CommitmentOpenFailure',
    'ErrorBoundExceeded',
    'InvariantViolation',
    'ParameterDegenerate',
]
