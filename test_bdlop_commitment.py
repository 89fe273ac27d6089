#!/usr/bin/env python3
"""
Test BDLOP commitments: lattice structure, correctness, binding, hiding
"""
import random

import numpy as np
import pytest

from lattice_commit.commitments.bdlop_commitment import BDLOPCommitment
from lattice_commit.core.field_math import Mod101Scalar, OxfoiScalar, SevenScalar
from lattice_commit.core.linalg import Matrix, Vector
from lattice_commit.errors import CommitmentOpenFailure

F = Mod101Scalar


@pytest.fixture
def rng():
    return random.Random(4242)


def test_dimension():
    # BIT_WIDTH(Z_101) = 7
    assert BDLOPCommitment.dimension(3, F) == (18, 24)
    assert BDLOPCommitment.dimension(1, OxfoiScalar) == (63, 65)
    assert BDLOPCommitment.dimension(2, SevenScalar) == (4, 8)


def test_lattice_structure(rng):
    m = 3
    a_1, a_2 = BDLOPCommitment.lattice_for(m, F, rng)
    h1, width = BDLOPCommitment.dimension(m, F)
    assert a_1.dimension() == (h1, width)
    assert a_2.dimension() == (m, width)

    ident = Matrix.identity(h1, F)
    for i in range(h1):
        assert list(a_1[i])[:h1] == list(ident[i])

    for i in range(m):
        row = list(a_2[i])
        assert all(e.is_zero() for e in row[:h1])
        assert row[h1:h1 + m] == list(Matrix.identity(m, F)[i])


def test_bdlop_commit_var_dimension(rng):
    """Dimensions line up in every matrix/vector op for a range of message sizes"""
    for field in (SevenScalar, F, OxfoiScalar):
        for m in range(1, 6):
            lattice = BDLOPCommitment.lattice_for(m, field, rng)
            val = Vector.random(m, field, rng)
            (r_1, r_2), com = BDLOPCommitment.commit(val, lattice, rng)
            assert len(r_1) == lattice[0].width
            assert len(r_2) == lattice[1].width
            assert len(com.c_1) == lattice[0].height
            assert len(com.c_2) == m


def test_open_recovers_message(rng):
    m = 4
    lattice = BDLOPCommitment.lattice_for(m, F, rng)
    for _ in range(10):
        val = Vector.random(m, F, rng)
        secret, com = BDLOPCommitment.commit(val, lattice, rng)
        assert com.try_open(secret) == val
        assert com.verify(secret, val)


def test_tampered_r1_fails(rng):
    m = 3
    lattice = BDLOPCommitment.lattice_for(m, F, rng)
    val = Vector.random(m, F, rng)
    (r_1, r_2), com = BDLOPCommitment.commit(val, lattice, rng)

    for i in (0, len(r_1) - 1):
        tampered = r_1.copy()
        tampered[i] = tampered[i].add(F.one())
        with pytest.raises(CommitmentOpenFailure):
            com.try_open((tampered, r_2))
        assert not com.verify((tampered, r_2), val)


def test_r2_is_not_checked(rng):
    """A correct r_1 is trusted; a wrong r_2 opens to a different value without error"""
    m = 3
    lattice = BDLOPCommitment.lattice_for(m, F, rng)
    val = Vector.random(m, F, rng)
    (r_1, r_2), com = BDLOPCommitment.commit(val, lattice, rng)

    h1, _ = BDLOPCommitment.dimension(m, F)
    tampered = r_2.copy()
    # column h1 of A_2 is the first identity column: shifts message entry 0
    tampered[h1] = tampered[h1].add(F.one())
    opened = com.try_open((r_1, tampered))
    expected = val.copy()
    expected[0] = expected[0].sub(F.one())
    assert opened == expected
    assert not com.verify((r_1, tampered), val)


def test_c1_independent_of_message(rng):
    """Same randomness, different messages: c_1 is identical"""
    m = 2
    lattice = BDLOPCommitment.lattice_for(m, F, rng)
    val_a = Vector.from_ints([0, 0], F)
    val_b = Vector.from_ints([1, 100], F)
    _, com_a = BDLOPCommitment.commit(val_a, lattice, random.Random(5))
    _, com_b = BDLOPCommitment.commit(val_b, lattice, random.Random(5))
    assert com_a.c_1 == com_b.c_1
    assert com_a.c_2 != com_b.c_2


def test_hiding_no_correlation(rng):
    """Over many commitments, c_1 entries are uncorrelated with the message"""
    m = 2
    lattice = BDLOPCommitment.lattice_for(m, F, rng)
    n = 400
    msgs = []
    c1_first = []
    for _ in range(n):
        val = Vector.random(m, F, rng)
        _, com = BDLOPCommitment.commit(val, lattice, rng)
        msgs.append(int(val[0]))
        c1_first.append(int(com.c_1[0]))

    corr = np.corrcoef(np.array(msgs, dtype=np.float64), np.array(c1_first, dtype=np.float64))[0, 1]
    # |corr| of independent uniforms has std ≈ 1/sqrt(n) = 0.05
    assert abs(corr) < 0.2
    # c_1 entries cover the field roughly uniformly
    assert abs(np.mean(c1_first) - 50.0) < 8.0


def test_zk_opening_not_implemented(rng):
    lattice = BDLOPCommitment.lattice_for(1, F, rng)
    _, com = BDLOPCommitment.commit(Vector.from_ints([5], F), lattice, rng)
    with pytest.raises(NotImplementedError):
        com.try_open_zk(rng)


def test_seeded_lattice_is_reproducible():
    m = 3
    lat_a = BDLOPCommitment.lattice_for(m, F, seed=b"bdlop-params")
    lat_b = BDLOPCommitment.lattice_for(m, F, seed=b"bdlop-params")
    lat_c = BDLOPCommitment.lattice_for(m, F, seed=b"other")
    assert lat_a[0] == lat_b[0] and lat_a[1] == lat_b[1]
    assert lat_a[0] != lat_c[0]

    h1, width = BDLOPCommitment.dimension(m, F)
    assert lat_a[0].dimension() == (h1, width)
    assert lat_a[1].dimension() == (m, width)
    for i in range(m):
        assert list(lat_a[1][i])[h1:h1 + m] == list(Matrix.identity(m, F)[i])

    rng = random.Random(11)
    val = Vector.random(m, F, rng)
    secret, com = BDLOPCommitment.commit(val, lat_a, rng)
    assert com.verify(secret, val)
