# pylint: disable=missing-module-docstring,redefined-outer-name
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import math
import random

from cryptography.hazmat.primitives.asymmetric import rsa
import pytest

import textbookrsa
from textbookrsa import numtheory
import textbookrsa.rsa as rsau

TARGET_SIZES = [
    64,
    128,
    256,
    pytest.param(1024, marks=pytest.mark.slow),
    pytest.param(2048, marks=pytest.mark.extreme),
]
REFERENCE_SIZES = [1024, 2048]


@pytest.fixture(scope="module", params=REFERENCE_SIZES)
def reference_key(request) -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=request.param)


def localize_key(pk: rsa.RSAPrivateKey) -> rsau.RSAKey:
    privs = pk.private_numbers()
    pubs = pk.public_key().public_numbers()
    return rsau.RSAKey(pubs.n, pubs.e, privs.d)


def sample_messages(n: int, count: int = 25, seed: int = 17) -> list[int]:
    src = random.Random(seed)
    return [0, 1, n - 1] + [src.randrange(n) for _ in range(count)]


def test_key_is_immutable():
    key = rsau.RSAKey(3233, 17, 2753)
    with pytest.raises(AttributeError):
        key.d = 1
    n, e, d = key
    assert (n, e, d) == (3233, 17, 2753)


def test_public_half():
    key = rsau.RSAKey(3233, 17, 2753)
    assert key.pub == rsau.RSAPublicKey(3233, 17)
    assert key.pub.bit_length == key.bit_length == 12


def test_textbook_scenario():
    key = rsau.RSAKey.generate_keypair(61, 53, 17)
    assert key == (3233, 17, 2753)
    assert key.encrypt(65) == 2790
    assert key.decrypt(2790) == 65
    for m in range(key.n):
        assert key.decrypt(key.encrypt(m)) == m
        assert key.verify(key.sign(m)) == m


@pytest.mark.parametrize("seed", range(10))
def test_random_exponent(seed):
    key = rsau.RSAKey.generate_keypair(61, 53, rng=random.Random(seed))
    phi = 60 * 52
    assert key.n == 3233
    assert 1 < key.e < phi
    assert math.gcd(key.e, phi) == 1
    assert (key.e * key.d) % phi == 1
    for m in sample_messages(key.n):
        assert key.decrypt(key.encrypt(m)) == m


@pytest.mark.parametrize("seed", range(10))
def test_degenerate_small_primes(seed):
    # 15 is 0 mod 5 and 1 mod 7, so every exponent maps it onto itself.
    key = rsau.RSAKey.generate_keypair(5, 7, rng=random.Random(seed))
    ciphertext = key.encrypt(15)
    assert ciphertext == 15
    assert key.decrypt(ciphertext) == 15


@pytest.mark.parametrize("e", [0, 1, 3120, 3121, 4, 65, -17])
def test_generate_keypair_validates(e):
    with pytest.raises(ValueError, match="Public exponent does not meet requirements."):
        rsau.RSAKey.generate_keypair(61, 53, e)


def test_generate_keypair_too_small():
    with pytest.raises(ValueError):
        rsau.RSAKey.generate_keypair(2, 3)


def test_generate_keypair_propagates(mocker):
    mocker.patch("textbookrsa.numtheory.multiplicative_inverse", side_effect=numtheory.NotInvertibleError(4, 8, 4))
    with pytest.raises(numtheory.NotInvertibleError):
        rsau.RSAKey.generate_keypair(61, 53)


def test_generate_keypair_capped(mocker):
    src = mocker.Mock()
    src.randrange.return_value = 6
    with pytest.raises(numtheory.KeyGenerationError):
        rsau.RSAKey.generate_keypair(61, 53, rng=src, max_tries=3)


def test_generate_keypair_logs(caplog):
    with caplog.at_level(logging.INFO, logger="textbookrsa"):
        key = rsau.RSAKey.generate_keypair(61, 53, 17)
    assert "Generated 12-bit keypair" in caplog.text
    assert str(key.d) not in caplog.text


@pytest.mark.parametrize("keysize", TARGET_SIZES)
def test_random_key_roundtrip(rng, keysize):
    key = rsau.RSAKey.generate_random_key(keysize, rng)
    assert key.bit_length <= keysize
    for m in sample_messages(key.n):
        assert key.decrypt(key.encrypt(m)) == m
        assert key.verify(key.sign(m)) == m
        assert key.pub.encrypt(m) == key.encrypt(m)
        assert key.pub.verify(key.sign(m)) == m


def test_random_key_uses_primes(mocker):
    mocker.patch("textbookrsa.numtheory.generate_primes", return_value=(61, 53))
    key = rsau.RSAKey.generate_random_key(12, random.Random(3))
    numtheory.generate_primes.assert_called_once()
    assert key.n == 3233
    assert (key.e * key.d) % 3120 == 1


def test_random_key_reproducible():
    assert rsau.RSAKey.generate_random_key(128, random.Random(9)) == rsau.RSAKey.generate_random_key(
        128, random.Random(9))


def test_random_key_default_size(mocker):
    mocker.patch("textbookrsa.numtheory.generate_primes", return_value=(61, 53))
    rsau.RSAKey.generate_random_key()
    assert numtheory.generate_primes.call_args.args[0] == rsau.DEFAULT_KEY_SIZE == 1024


def test_random_key_validates():
    with pytest.raises(ValueError):
        rsau.RSAKey.generate_random_key(129)


def test_reference_key_roundtrip(reference_key):
    key = localize_key(reference_key)
    for m in sample_messages(key.n, count=5):
        assert key.decrypt(key.encrypt(m)) == m
        assert key.verify(key.sign(m)) == m


def test_reference_key_exponent(reference_key):
    privs = reference_key.private_numbers()
    p, q = privs.p, privs.q
    key = rsau.RSAKey.generate_keypair(p, q, 65537)
    assert key.n == reference_key.public_key().public_numbers().n
    # The reference may reduce d modulo lcm(p - 1, q - 1), we reduce it modulo the totient.
    assert key.d % math.lcm(p - 1, q - 1) == privs.d % math.lcm(p - 1, q - 1)
    assert key.d == numtheory.multiplicative_inverse(65537, (p - 1) * (q - 1))


def test_package_exports():
    assert textbookrsa.RSAKey is rsau.RSAKey
    assert textbookrsa.gcd(8, 4) == 4
    assert textbookrsa.multiplicative_inverse(10, 17) == 12
    assert textbookrsa.is_prime(7)
    assert not textbookrsa.is_prime(10)
