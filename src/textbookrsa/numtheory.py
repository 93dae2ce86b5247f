"""Number-theory primitives behind textbook RSA, mainly focusing on probable primes and modular inverses.

Everything here works on plain Python integers, which already give us arbitrary precision and a fast modular
exponentiation through `pow`. Randomness is always taken from an injectable `rng` (anything exposing the
`random.Random` interface), defaulting to the operating system's CSPRNG, so seeded runs are reproducible.

Typical usage example:

    p = generate_random_prime(512)
    is_prime(p)
    d = multiplicative_inverse(17, 3120)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import random
import secrets
import warnings

logger = logging.getLogger(__name__)

_SYSTEM_RANDOM = secrets.SystemRandom()

# Miller-Rabin rounds by candidate bit length, as per FIPS 186-5 Appendix C.1
_ROUNDS_TABLE: tuple[tuple[int, int], ...] = ((512, 40), (1024, 56), (1536, 64), (2048, 70))
_ROUNDS_MAX: int = 74


class NotInvertibleError(ValueError):
    """Raised when a modular inverse is requested for a non-coprime pair.

    Attributes:
        gcd: The greatest common divisor that prevented the inversion.
    """

    def __init__(self, a: int, b: int, gcd_: int) -> None:
        super().__init__(f"{a} is not invertible modulo {b} (gcd is {gcd_})")
        self.gcd = gcd_


class PrimeGenerationError(RuntimeError):
    """Raised when a capped prime search runs out of attempts."""


class KeyGenerationError(RuntimeError):
    """Raised when a capped public exponent search runs out of attempts."""


def _rng(rng: random.Random | None) -> random.Random:
    return _SYSTEM_RANDOM if rng is None else rng


def gcd(a: int, b: int) -> int:
    """Greatest common divisor by the Euclidean algorithm.

    Args:
        a: First integer.
        b: Second integer.

    Returns:
        The non-negative GCD of `a` and `b`. `gcd(a, 0)` is `abs(a)`.
    """
    r0, r1 = abs(a), abs(b)
    if r0 < r1:
        r0, r1 = r1, r0
    while r1 != 0:
        r0, r1 = r1, r0 % r1
    return r0


def multiplicative_inverse(a: int, b: int) -> int:
    """Computes the inverse of `a` modulo `b` with the Extended Euclidean Algorithm.

    Only the Bezout coefficient of `a` is tracked, as the one for `b` is never needed.

    Args:
        a: The value to invert.
        b: The modulus. Must be >= 1.

    Returns:
        `d` in `[0, b)` such that `(a * d) % b == 1 % b`.

    Raises:
        ValueError: If `b` < 1.
        NotInvertibleError: If `a` and `b` are not coprime.
    """
    if b < 1:
        raise ValueError("Modulus must be >= 1")
    r0, r1 = a % b, b
    t0, t1 = 1, 0
    while r1 != 0:
        q = r0 // r1
        r0, r1 = r1, r0 - q * r1
        t0, t1 = t1, t0 - q * t1
    if r0 != 1:
        raise NotInvertibleError(a, b, r0)
    if t0 < 0:
        t0 += b
    return t0 % b


def factor_power_2(n: int) -> tuple[int, int]:
    """Splits `n` into `2**k * m` with `m` odd.

    Args:
        n: Non-zero integer to factor.

    Returns:
        Tuple of (m, k).

    Raises:
        ValueError: If `n` is zero, as it has no odd part.
    """
    if n == 0:
        raise ValueError("Cannot factor powers of two out of zero")
    k = 0
    while n % 2 == 0:
        n //= 2
        k += 1
    return n, k


def miller_test(n: int, base: int) -> bool:
    """Performs a single Miller-Rabin round of `n` against witness `base`.

    Args:
        n: Odd integer > 2 to be tested.
        base: The witness. Reduced modulo `n`; bases congruent to 0, 1 or -1 say nothing and pass.

    Returns:
        True if `n` is probably prime with respect to `base`, False if `base` proves `n` composite.
    """
    base %= n
    if base in (0, 1, n - 1):
        return True
    d, s = factor_power_2(n - 1)
    x = pow(base, d, n)
    if x == 1 or x == n - 1:
        return True
    for _ in range(s - 1):
        x = pow(x, 2, n)
        if x == n - 1:
            return True
    return False


def _default_rounds(candidate: int) -> int:
    size = candidate.bit_length()
    for cap, rounds in _ROUNDS_TABLE:
        if size <= cap:
            return rounds
    return _ROUNDS_MAX


def is_prime(p: int, max_bases: int | None = None) -> bool:
    """Probabilistic primality decision using consecutive Miller-Rabin bases.

    Tests bases 2, 3, ... in order. A larger `max_bases` lowers the false positive rate but never proves
    primality.

    Args:
        p: The candidate.
        max_bases: Bases are drawn from `2..max_bases` (at most `max_bases - 1` of them, stopping short of `p - 1`).
            If not provided, uses the round count of FIPS 186-5 Appendix C.1 for the size of `p`.

    Returns:
        True if `p` is probably prime, False otherwise.

    Raises:
        ValueError: If `max_bases` < 2.
    """
    if max_bases is None:
        max_bases = _default_rounds(p)
    if max_bases < 2:
        raise ValueError("max_bases must be >= 2")
    if p < 2:
        return False
    if p == 2:
        return True
    if p % 2 == 0:
        return False
    for base in range(2, min(max_bases + 1, p - 1)):
        if not miller_test(p, base):
            return False
    return True


def generate_random_prime(bits: int, rng: random.Random | None = None, max_tries: int | None = None) -> int:
    """Generates a probable prime of at most `bits` bits by rejection sampling.

    Candidates are uniformly drawn, forced odd and tested with `bits` bases. The search is unbounded unless
    `max_tries` is provided; by the prime number theorem it takes O(bits) draws on average.

    Args:
        bits: Bit width of the prime. Must be >= 2.
        rng: Source of randomness. Defaults to the system CSPRNG.
        max_tries: Optional cap on the number of candidates drawn.

    Returns:
        An odd probable prime.

    Raises:
        ValueError: If `bits` < 2.
        PrimeGenerationError: If `max_tries` candidates were drawn without finding a prime.
    """
    if bits < 2:
        raise ValueError("bits must be >= 2")
    rng = _rng(rng)
    tries = 0
    while max_tries is None or tries < max_tries:
        tries += 1
        candidate = rng.getrandbits(bits) | 1
        if is_prime(candidate, bits):
            logger.debug("Found %d-bit prime after %d candidates", bits, tries)
            return candidate
    raise PrimeGenerationError(f"No {bits}-bit prime found in {max_tries} candidates. Check the random source.")


def choose_public_exponent(phi: int, rng: random.Random | None = None, max_tries: int | None = None) -> int:
    """Picks a random public exponent `e` with `1 < e < phi` and `gcd(e, phi) == 1`.

    Args:
        phi: The totient of the modulus. Must be > 2.
        rng: Source of randomness. Defaults to the system CSPRNG.
        max_tries: Optional cap on the number of exponents drawn.

    Returns:
        A valid public exponent.

    Raises:
        ValueError: If `phi` leaves no room for an exponent.
        KeyGenerationError: If `max_tries` draws were all rejected.
    """
    if phi <= 2:
        raise ValueError("Totient too small to pick a public exponent")
    rng = _rng(rng)
    tries = 0
    while max_tries is None or tries < max_tries:
        tries += 1
        e = rng.randrange(2, phi)
        if gcd(e, phi) == 1:
            logger.debug("Public exponent accepted after %d draws", tries)
            return e
    raise KeyGenerationError(f"No public exponent coprime to the totient found in {max_tries} draws.")


def generate_primes(bits: int, rng: random.Random | None = None, max_tries: int | None = None) -> tuple[int, int]:
    """Generates the prime pair for a `bits`-sized modulus.

    Args:
        bits: The key size. Must be even and >= 4.
        rng: Source of randomness. Defaults to the system CSPRNG.
        max_tries: Optional cap, passed to `generate_random_prime`.

    Returns:
        A pair of probable primes, each of at most `bits // 2` bits.

    Raises:
        ValueError: If `bits` is odd or too small.
    """
    if bits < 4:
        raise ValueError("Size must be at least 4.")
    if bits % 2 != 0:
        raise ValueError("Size must be an even number.")
    p = generate_random_prime(bits // 2, rng, max_tries)
    q = generate_random_prime(bits // 2, rng, max_tries)
    if p == q:  # (Un)Likely story, unless the size is tiny.
        warnings.warn(f"Generated identical primes for a {bits}-bit key! The key is degenerate.", RuntimeWarning)
    return p, q
