#!/usr/bin/env python3
"""
Test SIS commitments: shape, opening, additive and scalar homomorphism
"""
import random

import pytest

from lattice_commit.commitments.sis_commitment import SISCommitment
from lattice_commit.core.field_math import OxfoiScalar, SevenScalar
from lattice_commit.core.linalg import Matrix, Vector
from lattice_commit.errors import CommitmentOpenFailure, MismatchedLattice

PART_BITS = 8


@pytest.fixture
def rng():
    return random.Random(99)


def test_default_lattice_shape(rng):
    val = OxfoiScalar.sample_rand(rng).as_le_bits_vec(PART_BITS)
    comm = SISCommitment.commit(val, rng=rng)
    assert comm.lattice.dimension() == (len(val) * OxfoiScalar.BIT_WIDTH, len(val))
    assert len(comm.commitment) == len(val) * OxfoiScalar.BIT_WIDTH
    assert comm.secret == val


def test_should_be_additively_homomorphic(rng):
    """commit(a) + commit(b) == commit(a + b) over one lattice"""
    field = SevenScalar
    a = field.sample_rand(rng)
    b = field.sample_rand(rng)

    comm_a = SISCommitment.commit(a.as_le_bits_vec(PART_BITS), None, rng)
    lattice = comm_a.lattice
    comm_b = SISCommitment.commit(b.as_le_bits_vec(PART_BITS), lattice, rng)
    comm_c = SISCommitment.commit(a.as_le_bits_vec(PART_BITS).add(b.as_le_bits_vec(PART_BITS)),
                                  lattice, rng)

    assert comm_a.add(comm_b).commitment == comm_c.commitment


def test_should_compute_w3(rng):
    """a + r·b computed on commitments, then recomposed from digits"""
    field = OxfoiScalar
    r = field.sample_rand(rng)

    a = field.sample_rand(rng).as_le_bits_vec(PART_BITS)
    b = field.sample_rand(rng).as_le_bits_vec(PART_BITS)
    c = b.scale(r).add(a)

    comm_a = SISCommitment.commit(a, None, rng)
    lattice = comm_a.lattice
    comm_b = SISCommitment.commit(b, lattice, rng)
    comm_c = SISCommitment.commit(c, lattice, rng)

    combined = comm_a.add(comm_b.scale(r))
    assert combined.commitment == comm_c.commitment
    assert combined.secret == c
    assert combined.verify(c)

    a_val = field.from_le_bits_vec(a, PART_BITS)
    b_val = field.from_le_bits_vec(b, PART_BITS)
    c_val = field.from_le_bits_vec(c, PART_BITS)
    assert c_val == a_val.add(b_val.mul(r))


def test_sub(rng):
    field = OxfoiScalar
    a = field.sample_rand(rng).as_le_bits_vec(PART_BITS)
    b = field.sample_rand(rng).as_le_bits_vec(PART_BITS)
    comm_a = SISCommitment.commit(a, None, rng)
    comm_b = SISCommitment.commit(b, comm_a.lattice, rng)
    diff = comm_a.sub(comm_b)
    assert diff.verify(a.sub(b))


def test_open(rng):
    val = OxfoiScalar.sample_rand(rng).as_le_bits_vec(PART_BITS)
    comm = SISCommitment.commit(val, None, rng)
    assert comm.verify(val)
    assert comm.try_open(val) == val

    wrong = val.copy()
    wrong[0] = wrong[0].add(OxfoiScalar.one())
    assert not comm.verify(wrong)
    with pytest.raises(CommitmentOpenFailure):
        comm.try_open(wrong)


def test_different_lattices_cannot_combine(rng):
    val = SevenScalar(3).as_le_bits_vec(1)
    comm_a = SISCommitment.commit(val, None, rng)
    comm_b = SISCommitment.commit(val, None, rng)
    with pytest.raises(MismatchedLattice):
        comm_a.add(comm_b)


def test_equal_lattice_copies_can_combine(rng):
    """Identity is by content, not by object"""
    val = SevenScalar(3).as_le_bits_vec(1)
    comm_a = SISCommitment.commit(val, None, rng)
    lattice_copy = Matrix([row.copy() for row in comm_a.lattice])
    comm_b = SISCommitment.commit(val, lattice_copy, rng)
    assert comm_a.add(comm_b).verify(val.add(val))


def test_hadamard_drops_secret(rng):
    val = OxfoiScalar.sample_rand(rng).as_le_bits_vec(PART_BITS)
    comm = SISCommitment.commit(val, None, rng)
    v = Vector.random(len(comm.commitment), OxfoiScalar, rng)
    out = comm.hadamard(v)
    assert out.secret is None
    assert out.commitment == comm.commitment.hadamard(v)


def test_seeded_lattice_is_shared_by_seed(rng):
    """Commitments from the same seed land on the same lattice and combine"""
    a = OxfoiScalar.sample_rand(rng).as_le_bits_vec(PART_BITS)
    b = OxfoiScalar.sample_rand(rng).as_le_bits_vec(PART_BITS)
    comm_a = SISCommitment.commit(a, seed=b"public-params")
    comm_b = SISCommitment.commit(b, seed=b"public-params")
    assert comm_a.lattice == Matrix.expand(b"public-params", len(a),
                                           len(a) * OxfoiScalar.BIT_WIDTH, OxfoiScalar)
    assert comm_a.add(comm_b).verify(a.add(b))

    comm_c = SISCommitment.commit(a, seed=b"other-params")
    with pytest.raises(MismatchedLattice):
        comm_a.add(comm_c)


def test_lattice_and_seed_are_exclusive(rng):
    val = SevenScalar(3).as_le_bits_vec(1)
    comm = SISCommitment.commit(val, None, rng)
    with pytest.raises(ValueError):
        SISCommitment.commit(val, comm.lattice, rng, seed=b"s")
