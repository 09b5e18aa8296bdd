"""Lattice-based commitments in the BDLOP style.

Commitment keys, randomness and commitments are kept in NTT form; messages
are polynomials in coefficient form. A commitment to messages ``m`` with
randomness ``r`` is ``c1 = r[0] + A1 * r[height:]`` and
``c2[i] = A2[i] * r + m[i]``. It opens under a challenge factor ``f`` to
randomness ``s`` when ``f * c`` matches the commitment recomputed from ``s``
with ``f * m`` and every ``s[i]`` is short.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from .bgv import Ciphertext
from .prng import FastRandom
from .ring import Poly, Ring

__all__ = [
    "CommitParams",
    "CommitKey",
    "Commitment",
    "norm_within_bound",
    "sample_rand",
    "sample_challenge",
    "keygen",
    "commit",
    "open_commitment",
    "commit_ciphertext",
]

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommitParams:
    """Commitment parameters.

    ``height`` rows of ``A1``, ``size`` messages per commitment, ``width``
    randomness polynomials, ``nonzero`` the Hamming weight of each half of a
    challenge and ``sigma_c`` the scale of the opening norm bound.
    """

    ring: Ring
    height: int
    width: int
    size: int
    nonzero: int
    sigma_c: int

    def __post_init__(self) -> None:
        if self.height < 1:
            raise ValueError("height must be at least 1")
        if self.size < 1:
            raise ValueError("size must be at least 1")
        if self.width < self.height + self.size:
            raise ValueError("width must be at least height + size")
        if not 0 <= self.nonzero <= self.ring.degree:
            raise ValueError(f"nonzero must lie in [0, {self.ring.degree}]")
        if self.sigma_c <= 0:
            raise ValueError("sigma_c must be positive")


@dataclass(frozen=True)
class CommitKey:
    """Commitment key: ``a1`` is height x (width - height), ``a2`` is size x width."""

    a1: tuple[tuple[Poly, ...], ...]
    a2: tuple[tuple[Poly, ...], ...]


@dataclass(frozen=True)
class Commitment:
    """A commitment ``(c1, c2)``; commitments add and subtract component-wise."""

    c1: Poly
    c2: tuple[Poly, ...]

    def _combine(self, other: Commitment, op) -> Commitment:
        if not isinstance(other, Commitment):
            return NotImplemented
        if len(self.c2) != len(other.c2):
            raise ValueError("commitments hold different numbers of messages")
        return Commitment(
            op(self.c1, other.c1),
            tuple(op(a, b) for a, b in zip(self.c2, other.c2)),
        )

    def __add__(self, other: Commitment) -> Commitment:
        return self._combine(other, lambda a, b: a + b)

    def __sub__(self, other: Commitment) -> Commitment:
        return self._combine(other, lambda a, b: a - b)


def norm_within_bound(params: CommitParams, r: Poly, sigma_sqr: int) -> bool:
    """Return whether ``||r||^2 < 16 * sigma_sqr * n`` for ``r`` in coefficient form."""
    norm = sum(c * c for c in r.centered())
    return norm < 16 * sigma_sqr * params.ring.degree


def sample_rand(
    params: CommitParams, count: int, rng: FastRandom | None = None
) -> list[Poly]:
    """Return ``count`` short randomness polynomials in NTT form."""
    if count < 0:
        raise ValueError("count must be non-negative")
    return [params.ring.zero_one(rng).ntt() for _ in range(count)]


def sample_challenge(params: CommitParams, rng: FastRandom | None = None) -> Poly:
    """Return a challenge ``c0 - c1`` of two fixed-weight polynomials, in NTT form."""
    ring = params.ring
    c0 = ring.hamming_weight(params.nonzero, rng)
    c1 = ring.hamming_weight(params.nonzero, rng)
    return (c0 - c1).ntt()


def keygen(params: CommitParams, rng: FastRandom | None = None) -> CommitKey:
    """Return a fresh commitment key."""
    ring = params.ring
    one = ring.constant(1).ntt()
    zero = ring.zero()
    a1 = tuple(
        tuple(ring.uniform(rng) for _ in range(params.width - params.height))
        for _ in range(params.height)
    )
    fixed = params.height + params.size
    a2 = []
    for i in range(params.size):
        row = [zero] * fixed
        row[i + params.height] = one
        row.extend(ring.uniform(rng) for _ in range(params.width - fixed))
        a2.append(tuple(row))
    return CommitKey(a1, tuple(a2))


def _check_randomness(params: CommitParams, r: Sequence[Poly]) -> None:
    if not params.height < len(r) <= params.width:
        raise ValueError(
            f"randomness must hold between {params.height + 1} and {params.width} polynomials"
        )


def _check_messages(params: CommitParams, key: CommitKey, m: Sequence[Poly]) -> None:
    if len(m) > min(params.size, len(key.a2)):
        raise ValueError(f"at most {params.size} messages fit in one commitment")


def _first_part(params: CommitParams, key: CommitKey, r: Sequence[Poly]) -> Poly:
    total = r[0]
    tail = r[params.height:]
    for row in key.a1:
        for a, x in zip(row, tail):
            total = total + a * x
    return total


def _row_product(params: CommitParams, row: Sequence[Poly], r: Sequence[Poly]) -> Poly:
    return sum((a * x for a, x in zip(row, r)), params.ring.zero())


def commit(
    params: CommitParams, key: CommitKey, m: Sequence[Poly], r: Sequence[Poly]
) -> Commitment:
    """Commit to the messages ``m`` with randomness ``r``."""
    _check_randomness(params, r)
    _check_messages(params, key, m)
    c1 = _first_part(params, key, r)
    c2 = tuple(
        _row_product(params, key.a2[i], r) + msg.ntt() for i, msg in enumerate(m)
    )
    return Commitment(c1, c2)


def open_commitment(
    params: CommitParams,
    com: Commitment,
    key: CommitKey,
    m: Sequence[Poly],
    r: Sequence[Poly],
    f: Poly,
) -> bool:
    """Return whether ``com`` opens to ``m`` with randomness ``r`` and factor ``f``."""
    _check_randomness(params, r)
    _check_messages(params, key, m)
    c1 = _first_part(params, key, r)
    expected = [
        _row_product(params, key.a2[i], r) + f * msg.ntt() for i, msg in enumerate(m)
    ]

    if f * com.c1 != c1 or len(com.c2) != len(m):
        _log.warning("commitment opening failed test for c1")
        return False

    result = True
    for i, (c, e) in enumerate(zip(com.c2, expected)):
        if f * c != e:
            _log.warning("commitment opening failed test for c2 (position %d)", i)
            result = False

    sigma_sqr = 16 * params.sigma_c
    for x in r:
        if not norm_within_bound(params, x.intt(), sigma_sqr):
            _log.warning("commitment opening failed norm test")
            result = False
            break
    return result


def commit_ciphertext(
    params: CommitParams, key: CommitKey, c: Ciphertext, r: Sequence[Poly]
) -> Commitment:
    """Commit to the two components of a ciphertext with randomness ``r``."""
    _check_randomness(params, r)
    if len(r) < 4:
        raise ValueError("committing to a ciphertext needs at least 4 randomness polynomials")
    if not key.a2 or len(key.a2[0]) < 3:
        raise ValueError("commitment key is too narrow for a ciphertext")
    c1 = _first_part(params, key, r)
    row = key.a2[0]
    c2 = (
        r[1] + row[1] * r[3] + c.u,
        r[2] + row[2] * r[3] + c.v,
    )
    return Commitment(c1, c2)