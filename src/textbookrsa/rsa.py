"""Provides core RSA functionalities, such as encryption, decryption, signing and verification.

Facilitates "textbook" RSA only: every operation is a single modular exponentiation over plain integers, with no
padding and no marshalling. Messages, ciphertexts and signatures are integers that the caller keeps in `[0, n)`;
values outside of that range are silently reduced by the modulus and will not round-trip.

Typical usage example:

    key = RSAKey.generate_random_key(1024)
    c = key.pub.encrypt(42)
    m = key.decrypt(c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import random
import typing

from textbookrsa import numtheory

logger = logging.getLogger(__name__)

DEFAULT_KEY_SIZE: int = 1024


class RSAPublicKey(typing.NamedTuple):
    """The public half of a keypair.

    Attributes:
        n: The modulus of the keypair.
        e: The public exponent.
    """
    n: int
    e: int

    @property
    def bit_length(self) -> int:
        return self.n.bit_length()

    def encrypt(self, message: int) -> int:
        """Encrypts `message` (in `[0, n)`) as `message**e mod n`."""
        return pow(message, self.e, self.n)

    def verify(self, signature: int) -> int:
        """Recovers the signed message from `signature` as `signature**e mod n`.

        The caller compares the result with the expected message.
        """
        return pow(signature, self.e, self.n)


class RSAKey(typing.NamedTuple):
    """A full RSA keypair, as the triple (n, e, d).

    Immutable once constructed, either by generation or directly from known values to load an existing key.
    The primes are not retained.

    Attributes:
        n: The modulus of the keypair.
        e: The public exponent.
        d: The private exponent.
    """
    n: int
    e: int
    d: int

    @property
    def pub(self) -> RSAPublicKey:
        return RSAPublicKey(self.n, self.e)

    @property
    def bit_length(self) -> int:
        return self.n.bit_length()

    def encrypt(self, message: int) -> int:
        """Encrypts `message` (in `[0, n)`) as `message**e mod n`."""
        return pow(message, self.e, self.n)

    def decrypt(self, ciphertext: int) -> int:
        """Decrypts `ciphertext` as `ciphertext**d mod n`."""
        return pow(ciphertext, self.d, self.n)

    def sign(self, message: int) -> int:
        """Signs `message` (in `[0, n)`) as `message**d mod n`."""
        return pow(message, self.d, self.n)

    def verify(self, signature: int) -> int:
        """Recovers the signed message from `signature` as `signature**e mod n`."""
        return pow(signature, self.e, self.n)

    @classmethod
    def generate_keypair(cls,
                         p: int,
                         q: int,
                         e: int | None = None,
                         rng: random.Random | None = None,
                         max_tries: int | None = None) -> "RSAKey":
        """Generates a keypair from two primes.

        Args:
            p: A prime number.
            q: Another prime number.
            e: The public exponent to use. Randomly chosen if not provided.
                Must satisfy `1 < e < phi` and be coprime to `phi`.
            rng: Source of randomness for choosing `e`. Defaults to the system CSPRNG.
            max_tries: Optional cap on the exponent search.

        Returns:
            A new RSAKey.

        Raises:
            ValueError: If the provided `e` does not meet requirements or the primes are too small.
        """
        n = p * q
        phi = (p - 1) * (q - 1)
        if e is None:
            e = numtheory.choose_public_exponent(phi, rng, max_tries)
        elif not 1 < e < phi or numtheory.gcd(e, phi) != 1:
            raise ValueError("Public exponent does not meet requirements.")
        d = numtheory.multiplicative_inverse(e, phi)
        logger.info("Generated %d-bit keypair", n.bit_length())
        return cls(n, e, d)

    @classmethod
    def generate_random_key(cls,
                            bits: int = DEFAULT_KEY_SIZE,
                            rng: random.Random | None = None,
                            max_tries: int | None = None) -> "RSAKey":
        """Generates a whole RSA keypair from fresh random primes.

        Small sizes are accepted but produce weak, possibly degenerate keys.

        Args:
            bits: The size of the key. Must be even and >= 4.
            rng: Source of randomness. Defaults to the system CSPRNG.
            max_tries: Optional cap on every internal retry loop.

        Returns:
            A new RSAKey.
        """
        p, q = numtheory.generate_primes(bits, rng, max_tries)
        return cls.generate_keypair(p, q, rng=rng, max_tries=max_tries)
