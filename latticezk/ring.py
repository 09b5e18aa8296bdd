"""Polynomials in Z_Q[x]/(x^n + 1) stored as residues modulo several primes.

A :class:`Ring` fixes the degree ``n`` (a power of two) and a tuple of
distinct primes ``p_i`` with ``p_i = 1 (mod 2n)``; ``Q`` is their product.
A :class:`Poly` holds one row of ``n`` residues per prime. Addition,
subtraction and multiplication act coefficient by coefficient, so ``a * b``
is the ring product when both operands are in NTT form (see :meth:`Poly.ntt`).
"""

from __future__ import annotations

from dataclasses import dataclass
from math import prod
from typing import Iterable, Iterator

from .modarith import addmod, mulmod, submod
from .prng import FastRandom

__all__ = ["Ring", "Poly"]

_MAX_MODULUS_BITS = 62
_MR_BASES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37)
_DEFAULT_RNG = FastRandom()


def _is_prime(n: int) -> bool:
    if n < 2:
        return False
    for small in _MR_BASES:
        if n % small == 0:
            return n == small
    d, s = n - 1, 0
    while d % 2 == 0:
        d //= 2
        s += 1
    for base in _MR_BASES:
        x = pow(base, d, n)
        if x in (1, n - 1):
            continue
        for _ in range(s - 1):
            x = x * x % n
            if x == n - 1:
                break
        else:
            return False
    return True


def _find_psi(p: int, degree: int) -> int:
    """Return a primitive 2n-th root of unity modulo the prime ``p``."""
    exponent = (p - 1) // (2 * degree)
    for g in range(2, p):
        candidate = pow(g, exponent, p)
        if pow(candidate, degree, p) == p - 1:
            return candidate
    raise ValueError(f"no primitive {2 * degree}-th root of unity modulo {p}")


@dataclass(frozen=True)
class _NttTable:
    p: int
    psi_powers: tuple[int, ...]
    inv_psi_powers: tuple[int, ...]
    omega: int
    omega_inv: int
    n_inv: int

    @classmethod
    def build(cls, p: int, degree: int) -> _NttTable:
        psi = _find_psi(p, degree)
        psi_inv = pow(psi, -1, p)
        psi_powers = tuple(pow(psi, i, p) for i in range(degree))
        inv_psi_powers = tuple(pow(psi_inv, i, p) for i in range(degree))
        omega = psi * psi % p
        return cls(
            p=p,
            psi_powers=psi_powers,
            inv_psi_powers=inv_psi_powers,
            omega=omega,
            omega_inv=pow(omega, -1, p),
            n_inv=pow(degree, -1, p),
        )


def _bit_reversal(n: int) -> tuple[int, ...]:
    bits = n.bit_length() - 1
    return tuple(int(format(i, f"0{bits}b")[::-1], 2) if bits else 0 for i in range(n))


def _cyclic_ntt(values: list[int], root: int, p: int, bitrev: tuple[int, ...]) -> list[int]:
    n = len(values)
    a = [values[j] for j in bitrev]
    length = 2
    while length <= n:
        half = length // 2
        step = pow(root, n // length, p)
        twiddles = [1] * half
        for k in range(1, half):
            twiddles[k] = twiddles[k - 1] * step % p
        for start in range(0, n, length):
            for k, w in enumerate(twiddles):
                u = a[start + k]
                v = a[start + k + half] * w % p
                a[start + k] = (u + v) % p
                a[start + k + half] = (u - v) % p
        length *= 2
    return a


class Ring:
    """The ring Z_Q[x]/(x^n + 1) with Q the product of NTT-friendly primes."""

    def __init__(self, degree: int, moduli: Iterable[int]) -> None:
        if degree < 2 or degree & (degree - 1):
            raise ValueError("degree must be a power of two, at least 2")
        moduli = tuple(int(p) for p in moduli)
        if not moduli:
            raise ValueError("at least one modulus is required")
        if len(set(moduli)) != len(moduli):
            raise ValueError("moduli must be distinct")
        for p in moduli:
            if p.bit_length() > _MAX_MODULUS_BITS:
                raise ValueError(f"modulus {p} exceeds {_MAX_MODULUS_BITS} bits")
            if not _is_prime(p):
                raise ValueError(f"modulus {p} is not prime")
            if (p - 1) % (2 * degree):
                raise ValueError(f"modulus {p} is not 1 modulo {2 * degree}")
        self.degree = degree
        self.moduli = moduli
        self.modulus = prod(moduli)
        largest = max(moduli)
        self.word_bits = next(bits for bits in (16, 32, 64) if largest < 1 << (bits - 2))
        self._crt = tuple(
            (self.modulus // p, pow(self.modulus // p, -1, p)) for p in moduli
        )
        self._bitrev = _bit_reversal(degree)
        self._tables = tuple(_NttTable.build(p, degree) for p in moduli)

    @property
    def nmoduli(self) -> int:
        return len(self.moduli)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ring):
            return NotImplemented
        return self.degree == other.degree and self.moduli == other.moduli

    def __hash__(self) -> int:
        return hash((self.degree, self.moduli))

    def __repr__(self) -> str:
        return f"Ring(degree={self.degree}, moduli={self.moduli})"

    def _poly(self, rows: Iterable[Iterable[int]]) -> Poly:
        return Poly(self, rows)

    def _replicate(self, small: list[int]) -> Poly:
        return self._poly([v % p for v in small] for p in self.moduli)

    def zero(self) -> Poly:
        """Return the zero polynomial."""
        return self._poly([0] * self.degree for _ in self.moduli)

    def constant(self, value: int) -> Poly:
        """Return the constant polynomial ``value`` (coefficient form)."""
        return self._replicate([value] + [0] * (self.degree - 1))

    def from_values(self, values: Iterable[int], reduce: bool = True) -> Poly:
        """Build a polynomial from word values.

        ``values`` holds either ``degree`` coefficients, used for every
        modulus, or ``nmoduli * degree`` residues, row by row. With
        ``reduce`` false the values are stored as given and must fit a word.
        """
        values = [int(v) for v in values]
        n = self.degree
        if len(values) == n:
            rows = [values] * self.nmoduli
        elif len(values) == n * self.nmoduli:
            rows = [values[cm * n:(cm + 1) * n] for cm in range(self.nmoduli)]
        else:
            raise ValueError(
                f"expected {n} or {n * self.nmoduli} values, got {len(values)}"
            )
        if reduce:
            return self._poly([v % p for v in row] for row, p in zip(rows, self.moduli))
        limit = 1 << self.word_bits
        if any(not 0 <= v < limit for v in values):
            raise ValueError(f"unreduced values must lie in [0, 2**{self.word_bits})")
        return self._poly(rows)

    def from_integers(self, values: Iterable[int]) -> Poly:
        """Build a polynomial from big integers.

        ``degree`` integers are reduced modulo every prime (integers modulo
        Q); ``nmoduli * degree`` integers give each row its own residues.
        """
        values = [int(v) for v in values]
        n = self.degree
        if len(values) == n:
            return self._replicate(values)
        if len(values) == n * self.nmoduli:
            return self._poly(
                [v % p for v in values[cm * n:(cm + 1) * n]]
                for cm, p in enumerate(self.moduli)
            )
        raise ValueError(f"expected {n} or {n * self.nmoduli} integers, got {len(values)}")

    def uniform(self, rng: FastRandom | None = None) -> Poly:
        """Return a polynomial with residues uniform modulo each prime."""
        rng = rng if rng is not None else _DEFAULT_RNG
        return self._poly([rng.randbelow(p) for _ in range(self.degree)] for p in self.moduli)

    def zero_one(self, rng: FastRandom | None = None) -> Poly:
        """Return a polynomial with coefficients 0 (prob. 1/2) or +-1 (1/4 each)."""
        rng = rng if rng is not None else _DEFAULT_RNG
        bits = int.from_bytes(rng.random_bytes((2 * self.degree + 7) // 8), "little")
        small = []
        for i in range(self.degree):
            pair = (bits >> (2 * i)) & 3
            small.append(0 if not pair & 1 else (1 if pair >> 1 else -1))
        return self._replicate(small)

    def hamming_weight(self, weight: int, rng: FastRandom | None = None) -> Poly:
        """Return a polynomial with exactly ``weight`` coefficients equal to +-1."""
        if not 0 <= weight <= self.degree:
            raise ValueError(f"weight must lie in [0, {self.degree}]")
        rng = rng if rng is not None else _DEFAULT_RNG
        positions = list(range(self.degree))
        small = [0] * self.degree
        for k in range(weight):
            j = k + rng.randbelow(self.degree - k)
            positions[k], positions[j] = positions[j], positions[k]
            small[positions[k]] = 1 if rng.randbelow(2) else -1
        return self._replicate(small)

    def deserialize(self, data: bytes) -> Poly:
        """Read a polynomial written by :meth:`Poly.serialize`."""
        width = self.word_bits // 8
        expected = width * self.degree * self.nmoduli
        data = bytes(data)
        if len(data) != expected:
            raise ValueError(f"expected {expected} bytes, got {len(data)}")
        words = [
            int.from_bytes(data[i:i + width], "little") for i in range(0, expected, width)
        ]
        n = self.degree
        return self._poly(words[cm * n:(cm + 1) * n] for cm in range(self.nmoduli))


class Poly:
    """An immutable element of a :class:`Ring`, one residue row per prime."""

    __slots__ = ("ring", "_rows")

    def __init__(self, ring: Ring, rows: Iterable[Iterable[int]]) -> None:
        rows = tuple(tuple(int(v) for v in row) for row in rows)
        if len(rows) != ring.nmoduli or any(len(row) != ring.degree for row in rows):
            raise ValueError("residue rows do not match the ring's shape")
        self.ring = ring
        self._rows = rows

    @property
    def rows(self) -> tuple[tuple[int, ...], ...]:
        return self._rows

    def _check(self, other: Poly) -> None:
        if not isinstance(other, Poly):
            raise TypeError("operand must be a polynomial")
        if self.ring != other.ring:
            raise ValueError("polynomials belong to different rings")

    def _combine(self, other: Poly, op) -> Poly:
        self._check(other)
        return Poly(
            self.ring,
            (
                [op(a, b, p) for a, b in zip(ra, rb)]
                for ra, rb, p in zip(self._rows, other._rows, self.ring.moduli)
            ),
        )

    def __add__(self, other: Poly) -> Poly:
        return self._combine(other, addmod)

    def __sub__(self, other: Poly) -> Poly:
        return self._combine(other, submod)

    def __mul__(self, other: Poly | int) -> Poly:
        if isinstance(other, int):
            return Poly(
                self.ring,
                ([mulmod(a, other % p, p) for a in row] for row, p in zip(self._rows, self.ring.moduli)),
            )
        return self._combine(other, mulmod)

    def __rmul__(self, other: int) -> Poly:
        if not isinstance(other, int):
            return NotImplemented
        return self * other

    def __neg__(self) -> Poly:
        return Poly(
            self.ring,
            ([submod(0, a, p) for a in row] for row, p in zip(self._rows, self.ring.moduli)),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Poly):
            return NotImplemented
        return self.ring == other.ring and self._rows == other._rows

    def __hash__(self) -> int:
        return hash((self.ring, self._rows))

    def __bool__(self) -> bool:
        return any(any(row) for row in self._rows)

    def __getitem__(self, index):
        """``p[cm, i]`` is residue ``i`` modulo prime ``cm``; ``p[i]`` all residues of ``i``."""
        if isinstance(index, tuple):
            cm, i = index
            return self._rows[cm][i]
        return tuple(row[index] for row in self._rows)

    def __iter__(self) -> Iterator[int]:
        for row in self._rows:
            yield from row

    def __len__(self) -> int:
        return self.ring.degree * self.ring.nmoduli

    def ntt(self) -> Poly:
        """Return the evaluations at the odd powers of a 2n-th root of unity."""
        ring = self.ring
        rows = []
        for row, table in zip(self._rows, ring._tables):
            p = table.p
            twisted = [a * w % p for a, w in zip(row, table.psi_powers)]
            rows.append(_cyclic_ntt(twisted, table.omega, p, ring._bitrev))
        return Poly(ring, rows)

    def intt(self) -> Poly:
        """Return the coefficient form of a polynomial given in NTT form."""
        ring = self.ring
        rows = []
        for row, table in zip(self._rows, ring._tables):
            p = table.p
            values = _cyclic_ntt([a % p for a in row], table.omega_inv, p, ring._bitrev)
            rows.append(
                [v * table.n_inv % p * w % p for v, w in zip(values, table.inv_psi_powers)]
            )
        return Poly(ring, rows)

    def to_integers(self) -> list[int]:
        """Return the coefficients as integers in ``[0, Q)`` by CRT."""
        ring = self.ring
        q = ring.modulus
        return [
            sum(r * qi * inv for r, (qi, inv) in zip(residues, ring._crt)) % q
            for residues in zip(*self._rows)
        ]

    def centered(self) -> list[int]:
        """Return the coefficients lifted to ``(-Q/2, Q/2]``."""
        q = self.ring.modulus
        half = q // 2
        return [c - q if c > half else c for c in self.to_integers()]

    def serialize(self) -> bytes:
        """Return the residues as little-endian words, row by row."""
        width = self.ring.word_bits // 8
        return b"".join(v.to_bytes(width, "little") for v in self)

    def __str__(self) -> str:
        return "{ " + ", ".join(f"{v}U" for v in self) + " }"

    def __repr__(self) -> str:
        return f"Poly(ring={self.ring!r}, rows={self._rows!r})"