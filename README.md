# latticezk

Lattice-based building blocks: a polynomial ring Z_Q[x]/(x^n + 1) with a
number-theoretic transform, BGV-style public-key encryption with additive
homomorphism and threshold decryption, and BDLOP-style commitments.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `latticezk.prng`: `random_bytes(n)` reads from the operating system.
  `FastRandom(seed=None)` is a deterministic AES-256 counter-mode stream with
  `random_bytes(n)`, `randbelow(bound)`, `seed(key)` (up to 32 bytes, zero
  padded) and `reseed()`. Without a seed it draws a key from the operating
  system on first use.
- `latticezk.modarith`: scalar helpers `addmod`, `submod`, `mulmod`,
  `muladd`, and Shoup multiplication through `compute_shoup(y, p, bits)`,
  `mulmod_shoup` and `muladd_shoup`. Inputs that are not reduced raise
  `ValueError`.
- `latticezk.ring`: `Ring(degree, moduli)` takes a power-of-two degree and
  distinct primes each equal to 1 modulo `2 * degree` (at most 62 bits). It
  builds polynomials with `zero()`, `constant(value)`,
  `from_values(values, reduce=True)`, `from_integers(values)`,
  `uniform(rng)`, `zero_one(rng)`, `hamming_weight(weight, rng)` and
  `deserialize(data)`. A `Poly` is immutable and supports `+`, `-`, `*`
  (coefficient-wise, so the ring product when both operands are in NTT form;
  also by an `int`), negation, equality, indexing (`p[cm, i]` or `p[i]`),
  `ntt()`, `intt()`, `to_integers()`, `centered()`, `serialize()` and `str()`.
- `latticezk.bgv`: `BgvParams(ring, plaintext_modulus, bound_d, plain_ring=None)`,
  `PublicKey`, `Ciphertext`, and the functions `sample_message`,
  `sample_half_message`, `reduce_message`, `keygen`, `encrypt`, `add`,
  `decrypt`, plus threshold decryption through `keyshare`, `distdec` and
  `combine`.
- `latticezk.bdlop`: `CommitParams(ring, height, width, size, nonzero, sigma_c)`,
  `CommitKey`, `Commitment` (commitments add and subtract component-wise), and
  `norm_within_bound`, `sample_rand`, `sample_challenge`, `keygen`, `commit`,
  `open_commitment` and `commit_ciphertext`. A failed opening returns `False`
  and logs a warning through the `latticezk.bdlop` logger.
- `latticezk.bench`: `Bench`, a timer that sums the nanoseconds between
  `before()` and `after()` (or across a `with` block), averages them with
  `compute(runs)`, returns the total from `measure()` and prints it with
  `report()`.

## Example

```python
from latticezk import bgv
from latticezk.prng import FastRandom
from latticezk.ring import Ring

rng = FastRandom(bytes(32))
ring = Ring(16, [12289, 40961, 65537])
params = bgv.BgvParams(ring, plaintext_modulus=3, bound_d=1 << 20)

pk, sk = bgv.keygen(params, rng)
m = bgv.sample_message(params, rng)
c = bgv.encrypt(params, pk, m, rng)
assert bgv.decrypt(params, c, sk) == m

shares = bgv.keyshare(params, sk, 3, rng)
partials = [bgv.distdec(params, c, s, rng) for s in shares]
assert bgv.combine(params, c, partials) == m
```

Committing to a message and opening it:

```python
from latticezk import bdlop
from latticezk.prng import FastRandom
from latticezk.ring import Ring

rng = FastRandom(bytes(32))
ring = Ring(16, [12289, 40961, 65537])
params = bdlop.CommitParams(ring, height=1, width=4, size=1, nonzero=4, sigma_c=1)

key = bdlop.keygen(params, rng)
m = [ring.uniform(rng)]
r = bdlop.sample_rand(params, params.width, rng)
com = bdlop.commit(params, key, m, r)
one = ring.constant(1).ntt()
assert bdlop.open_commitment(params, com, key, m, r, one)
```

## What it does not do

The package is a library only: it has no command-line program, and `Bench`
is a timer rather than a benchmark suite. It provides encryption and
commitments but no proof protocols built on them, no Gaussian sampling, and
no fixed parameter sets; every `Ring`, `BgvParams` and `CommitParams` is
chosen by the caller.