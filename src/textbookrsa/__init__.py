"""Textbook RSA in an Academic Sense.

Provides the number-theory kernel behind RSA (GCD, modular inverses, Miller-Rabin, prime generation) and the
four raw RSA primitives: Encryption, Decryption, Signing and Verification. No padding, no key formats.

Typical usage example:

    key = RSAKey.generate_random_key(1024)
    c = key.encrypt(1234)
    m = key.decrypt(c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging

from textbookrsa.numtheory import choose_public_exponent
from textbookrsa.numtheory import factor_power_2
from textbookrsa.numtheory import gcd
from textbookrsa.numtheory import generate_primes
from textbookrsa.numtheory import generate_random_prime
from textbookrsa.numtheory import is_prime
from textbookrsa.numtheory import KeyGenerationError
from textbookrsa.numtheory import miller_test
from textbookrsa.numtheory import multiplicative_inverse
from textbookrsa.numtheory import NotInvertibleError
from textbookrsa.numtheory import PrimeGenerationError
from textbookrsa.rsa import RSAKey
from textbookrsa.rsa import RSAPublicKey

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "RSAKey",
    "RSAPublicKey",
    "gcd",
    "multiplicative_inverse",
    "factor_power_2",
    "miller_test",
    "is_prime",
    "generate_random_prime",
    "generate_primes",
    "choose_public_exponent",
    "NotInvertibleError",
    "PrimeGenerationError",
    "KeyGenerationError",
]
