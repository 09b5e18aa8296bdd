import pytest

from latticezk.bdlop import (
    CommitKey,
    CommitParams,
    Commitment,
    commit,
    commit_ciphertext,
    keygen,
    norm_within_bound,
    open_commitment,
    sample_challenge,
    sample_rand,
)
from latticezk.bgv import Ciphertext
from latticezk.prng import FastRandom
from latticezk.ring import Ring

RING = Ring(32, [12289, 40961])


def make_params(size=2):
    return CommitParams(ring=RING, height=1, width=5, size=size, nonzero=4, sigma_c=1)


@pytest.fixture
def rng():
    return FastRandom(b"seed")


def test_single_message_commit_and_open(rng):
    params = make_params(size=1)
    key = keygen(params, rng)
    m = [RING.uniform(rng)]
    r = sample_rand(params, params.width, rng)
    com = commit(params, key, m, r)
    one = RING.constant(1).ntt()
    assert open_commitment(params, com, key, m, r, one) is True

    f = sample_challenge(params, rng)
    s = [f * x for x in r]
    assert open_commitment(params, com, key, m, s, f) is True

    # Linearity: subtract a commitment made with zero randomness.
    rho = [RING.uniform(rng)]
    zeros = [RING.zero()] * params.width
    other = commit(params, key, rho, zeros)
    diff = com - other
    assert open_commitment(params, diff, key, [m[0] - rho[0]], s, f) is True


def test_multiple_messages_commit_and_open(rng):
    params = make_params()
    key = keygen(params, rng)
    m = [RING.uniform(rng), RING.uniform(rng)]
    r = sample_rand(params, params.width, rng)
    com = commit(params, key, m, r)
    assert len(com.c2) == 2
    assert open_commitment(params, com, key, m, r, RING.constant(1).ntt()) is True
    f = sample_challenge(params, rng)
    s = [f * x for x in r]
    assert open_commitment(params, com, key, m, s, f) is True


def test_wrong_key_does_not_open(rng):
    params = make_params()
    key = keygen(params, rng)
    m = [RING.uniform(rng), RING.uniform(rng)]
    r = sample_rand(params, params.width, rng)
    com = commit(params, key, m, r)
    f = sample_challenge(params, rng)
    s = [f * x for x in r]
    other_key = keygen(params, rng)
    assert open_commitment(params, com, other_key, m, s, f) is False


def test_wrong_message_does_not_open(rng):
    params = make_params()
    key = keygen(params, rng)
    m = [RING.uniform(rng), RING.uniform(rng)]
    r = sample_rand(params, params.width, rng)
    com = commit(params, key, m, r)
    wrong = [m[0], m[1] + RING.constant(1)]
    assert open_commitment(params, com, key, wrong, r, RING.constant(1).ntt()) is False


def test_multiple_messages_linearly_homomorphic(rng):
    params = make_params()
    key = keygen(params, rng)
    m = [RING.uniform(rng), RING.uniform(rng)]
    rho = [RING.uniform(rng), RING.uniform(rng)]
    r = sample_rand(params, params.width, rng)
    com = commit(params, key, m, r)
    f = sample_challenge(params, rng)
    s = [f * x for x in r]
    zero_com = commit(params, key, rho, [RING.zero()] * params.width)
    diff_m = [m[0] - rho[0], m[1] - rho[1]]
    assert open_commitment(params, com - zero_com, key, diff_m, s, f) is True
    assert (com - zero_com) + zero_com == com

    # Fold two messages into one with coefficients (1, rho1) and adjust the key.
    coeffs = [RING.constant(1).ntt(), RING.uniform(rng)]
    folded_m = (m[0].ntt() * coeffs[0] + m[1].ntt() * coeffs[1]).intt()
    folded = Commitment(com.c1, (com.c2[0] * coeffs[0] + com.c2[1] * coeffs[1],))
    row = list(key.a2[0])
    for i in range(1, params.size):
        row[i + params.height] = coeffs[i]
        for j in range(params.size + params.height, params.width):
            row[j] = row[j] + coeffs[i] * key.a2[i][j]
    folded_key = CommitKey(key.a1, (tuple(row),))
    assert open_commitment(params, folded, folded_key, [folded_m], s, f) is True


def test_norm_within_bound_edges():
    params = make_params()
    # Bound is 16 * sigma_sqr * n = 512 for n = 32 and sigma_sqr = 1.
    inside = RING.from_integers([22] + [0] * 31)
    outside = RING.from_integers([23] + [0] * 31)
    negative = RING.from_integers([-23] + [0] * 31)
    assert norm_within_bound(params, RING.zero(), 1) is True
    assert norm_within_bound(params, inside, 1) is True
    assert norm_within_bound(params, outside, 1) is False
    assert norm_within_bound(params, negative, 1) is False


def test_open_rejects_long_randomness(rng):
    params = make_params()
    key = keygen(params, rng)
    m = [RING.uniform(rng), RING.uniform(rng)]
    r = sample_rand(params, params.width, rng)
    com = commit(params, key, m, r)
    big = [x * 1000 for x in r]
    assert open_commitment(params, com, key, m, big, RING.constant(1000).ntt()) is False


def test_sample_rand_is_short(rng):
    params = make_params()
    r = sample_rand(params, 3, rng)
    assert len(r) == 3
    for x in r:
        assert set(x.intt().centered()) <= {-1, 0, 1}


def test_sample_challenge_shape(rng):
    params = make_params()
    f = sample_challenge(params, rng)
    coeffs = f.intt().centered()
    assert all(-2 <= c <= 2 for c in coeffs)
    assert sum(1 for c in coeffs if c) <= 2 * params.nonzero
    assert sum(coeffs) % 2 == 0


def test_keygen_structure(rng):
    params = make_params()
    key = keygen(params, rng)
    one = RING.constant(1).ntt()
    assert len(key.a1) == params.height
    assert all(len(row) == params.width - params.height for row in key.a1)
    assert len(key.a2) == params.size
    for i, row in enumerate(key.a2):
        assert len(row) == params.width
        for j in range(params.height + params.size):
            assert row[j] == (one if j == i + params.height else RING.zero())


def test_commit_ciphertext_with_zero_randomness(rng):
    params = make_params()
    key = keygen(params, rng)
    c = Ciphertext(RING.uniform(rng), RING.uniform(rng))
    com = commit_ciphertext(params, key, c, [RING.zero()] * params.width)
    assert com.c1 == RING.zero()
    assert com.c2 == (c.u, c.v)


def test_commit_ciphertext_difference(rng):
    params = make_params()
    key = keygen(params, rng)
    r = sample_rand(params, params.width, rng)
    c = Ciphertext(RING.uniform(rng), RING.uniform(rng))
    d = Ciphertext(RING.uniform(rng), RING.uniform(rng))
    diff = commit_ciphertext(params, key, c, r) - commit_ciphertext(params, key, d, r)
    assert diff.c1 == RING.zero()
    assert diff.c2 == (c.u - d.u, c.v - d.v)


def test_commit_ciphertext_needs_four_randomness(rng):
    params = CommitParams(ring=RING, height=1, width=3, size=1, nonzero=4, sigma_c=1)
    key = keygen(params, rng)
    c = Ciphertext(RING.zero(), RING.zero())
    with pytest.raises(ValueError):
        commit_ciphertext(params, key, c, sample_rand(params, 3, rng))


def test_too_many_messages_rejected(rng):
    params = make_params(size=1)
    key = keygen(params, rng)
    r = sample_rand(params, params.width, rng)
    with pytest.raises(ValueError):
        commit(params, key, [RING.zero(), RING.zero()], r)


def test_randomness_length_checked(rng):
    params = make_params()
    key = keygen(params, rng)
    with pytest.raises(ValueError):
        commit(params, key, [RING.zero()], sample_rand(params, params.width + 1, rng))
    with pytest.raises(ValueError):
        commit(params, key, [RING.zero()], sample_rand(params, 1, rng))


def test_commitment_arithmetic_length_mismatch():
    a = Commitment(RING.zero(), (RING.zero(),))
    b = Commitment(RING.zero(), (RING.zero(), RING.zero()))
    c = Commitment(RING.constant(1), (RING.constant(2),))
    assert c - c == a
    assert a + c == c
    with pytest.raises(ValueError):
        _ = a - b
    with pytest.raises(ValueError):
        _ = a + b


@pytest.mark.parametrize(
    "kwargs",
    [
        {"height": 0, "width": 5, "size": 2, "nonzero": 4, "sigma_c": 1},
        {"height": 1, "width": 5, "size": 0, "nonzero": 4, "sigma_c": 1},
        {"height": 1, "width": 2, "size": 2, "nonzero": 4, "sigma_c": 1},
        {"height": 1, "width": 5, "size": 2, "nonzero": 33, "sigma_c": 1},
        {"height": 1, "width": 5, "size": 2, "nonzero": 4, "sigma_c": 0},
    ],
)
def test_invalid_params(kwargs):
    with pytest.raises(ValueError):
        CommitParams(ring=RING, **kwargs)