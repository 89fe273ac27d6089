"""
commitments - Lattice commitment schemes over Z_p

Implements:
- SIS commitments (binding, additively homomorphic)
- LWE commitments with bounded noise and noise-bound tracking
- BDLOP commitments (hiding SIS-to-zero + binding SIS-to-message)
- Discrete Gaussian CDT sampler for LWE noise
"""

from .gaussian_cdt import (
    GaussianCDT,
    CDTCache,
    DEFAULT_CDT_CACHE,
    theta_key,
)

from .sis_commitment import SISCommitment

from .lwe_commitment import (
    LWECommitment,
    sample_noise,
    NOISE_BINARY,
    NOISE_TERNARY,
    DEFAULT_NOISE,
)

from .bdlop_commitment import BDLOPCommitment

__all__ = [
    'GaussianCDT',
    'CDTCache',
    'DEFAULT_CDT_CACHE',
    'theta_key',
    'SISCommitment',
    'LWECommitment',
    'sample_noise',
    'NOISE_BINARY',
    'NOISE_TERNARY',
    'DEFAULT_NOISE',
    'BDLOPCommitment',
]
