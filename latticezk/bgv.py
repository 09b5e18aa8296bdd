"""BGV-style public-key encryption with additive homomorphism and threshold decryption.

Ciphertexts and keys live in the ring given by :class:`BgvParams.ring` and are
kept in NTT form. Messages are polynomials of :attr:`BgvParams.plain_ring` in
coefficient form, with coefficients in ``[0, plaintext_modulus)``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import reduce as _fold

from .prng import FastRandom, random_bytes
from .ring import Poly, Ring

__all__ = [
    "BgvParams",
    "PublicKey",
    "Ciphertext",
    "sample_message",
    "sample_half_message",
    "reduce_message",
    "keygen",
    "keyshare",
    "encrypt",
    "add",
    "decrypt",
    "distdec",
    "combine",
]


@dataclass(frozen=True)
class BgvParams:
    """Scheme parameters.

    ``ring`` holds keys and ciphertexts, ``plaintext_modulus`` is the small
    prime ``p`` messages are reduced by, ``bound_d`` bounds the smudging
    noise of distributed decryption, and ``plain_ring`` holds messages
    (the ciphertext ring when not given).
    """

    ring: Ring
    plaintext_modulus: int
    bound_d: int
    plain_ring: Ring | None = field(default=None)

    def __post_init__(self) -> None:
        if self.plain_ring is None:
            object.__setattr__(self, "plain_ring", self.ring)
        if self.plaintext_modulus < 2:
            raise ValueError("plaintext modulus must be at least 2")
        if self.bound_d <= 0:
            raise ValueError("decryption noise bound must be positive")
        if self.plain_ring.degree != self.ring.degree:
            raise ValueError("plaintext and ciphertext rings must have the same degree")
        if self.plaintext_modulus > min(self.plain_ring.moduli):
            raise ValueError("plaintext modulus exceeds the plaintext ring's moduli")


@dataclass(frozen=True)
class PublicKey:
    """Public key ``(a, b = a*s + p*e)`` in NTT form."""

    a: Poly
    b: Poly


@dataclass(frozen=True)
class Ciphertext:
    """Ciphertext ``(u, v)`` in NTT form."""

    u: Poly
    v: Poly


def _small_coefficients(count: int, modulus: int, rng: FastRandom | None) -> list[int]:
    """Draw ``count`` 2-bit values, each reduced modulo ``modulus``."""
    nbytes = (2 * count + 7) // 8
    data = rng.random_bytes(nbytes) if rng is not None else random_bytes(nbytes)
    bits = int.from_bytes(data, "little")
    return [((bits >> (2 * i)) & 3) % modulus for i in range(count)]


def sample_message(params: BgvParams, rng: FastRandom | None = None) -> Poly:
    """Return a random message with every coefficient short modulo ``p``."""
    ring = params.plain_ring
    values = _small_coefficients(ring.degree, params.plaintext_modulus, rng)
    return ring.from_integers(values)


def sample_half_message(params: BgvParams, rng: FastRandom | None = None) -> Poly:
    """Return a short random polynomial of the ciphertext ring whose upper half is zero."""
    ring = params.ring
    half = ring.degree // 2
    values = _small_coefficients(half, params.plaintext_modulus, rng)
    return ring.from_integers(values + [0] * (ring.degree - half))


def reduce_message(params: BgvParams, m: Poly) -> Poly:
    """Return ``m`` with its coefficients reduced modulo ``p``."""
    p = params.plaintext_modulus
    return m.ring.from_integers(c % p for c in m.to_integers())


def keygen(params: BgvParams, rng: FastRandom | None = None) -> tuple[PublicKey, Poly]:
    """Return a public key and the matching secret key (NTT form)."""
    ring = params.ring
    e = ring.zero_one(rng).ntt()
    a = ring.uniform(rng)
    sk = ring.zero_one(rng).ntt()
    b = a * sk + e * params.plaintext_modulus
    return PublicKey(a, b), sk


def keyshare(
    params: BgvParams, sk: Poly, shares: int, rng: FastRandom | None = None
) -> list[Poly]:
    """Split ``sk`` into ``shares`` additive shares."""
    if shares < 1:
        raise ValueError("at least one share is required")
    ring = params.ring
    rest = [ring.uniform(rng).ntt() for _ in range(shares - 1)]
    first = _fold(lambda acc, s: acc - s, rest, sk)
    return [first, *rest]


def _lift_message(params: BgvParams, m: Poly) -> Poly:
    if m.ring.degree != params.ring.degree:
        raise ValueError("message degree does not match the ring")
    return params.ring.from_integers(m.to_integers())


def encrypt(
    params: BgvParams, pk: PublicKey, m: Poly, rng: FastRandom | None = None
) -> Ciphertext:
    """Encrypt the message ``m`` under ``pk``."""
    ring = params.ring
    p = params.plaintext_modulus
    e1 = ring.zero_one(rng).ntt()
    e2 = ring.zero_one(rng).ntt()
    r = ring.zero_one(rng).ntt()
    u = pk.a * r + e1 * p
    v = pk.b * r + e2 * p + _lift_message(params, m).ntt()
    return Ciphertext(u, v)


def add(c: Ciphertext, d: Ciphertext) -> Ciphertext:
    """Return an encryption of the sum of the two plaintexts."""
    return Ciphertext(c.u + d.u, c.v + d.v)


def _to_plaintext(params: BgvParams, t: Poly) -> Poly:
    p = params.plaintext_modulus
    return params.plain_ring.from_integers(c % p for c in t.intt().centered())


def decrypt(params: BgvParams, c: Ciphertext, sk: Poly) -> Poly:
    """Decrypt ``c`` with the secret key ``sk``."""
    return _to_plaintext(params, c.v - sk * c.u)


def distdec(
    params: BgvParams, c: Ciphertext, share: Poly, rng: FastRandom | None = None
) -> Poly:
    """Return one party's partial decryption, smudged with bounded noise."""
    ring = params.ring
    bound = params.bound_d
    smudge = ring.from_integers(x % bound for x in ring.uniform(rng).centered()).ntt()
    return share * c.u + smudge * params.plaintext_modulus


def combine(params: BgvParams, c: Ciphertext, shares: list[Poly]) -> Poly:
    """Combine partial decryptions of ``c`` into the plaintext."""
    shares = list(shares)
    if not shares:
        raise ValueError("at least one partial decryption is required")
    v = _fold(lambda acc, t: acc - t, shares, c.v)
    return _to_plaintext(params, v)