"""The Paillier cryptosystem and the random sampling helpers used with it."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from math import gcd

_SMALL_PRIMES = tuple(
    n for n in range(3, 2000) if all(n % d for d in range(2, int(n**0.5) + 1))
)
_MILLER_RABIN_ROUNDS = 40


@dataclass(frozen=True)
class EncryptionKey:
    """Public Paillier key: the modulus n."""

    n: int

    @property
    def nn(self) -> int:
        return self.n * self.n


@dataclass(frozen=True)
class DecryptionKey:
    """Private Paillier key: the two primes of the modulus."""

    p: int
    q: int

    @property
    def n(self) -> int:
        return self.p * self.q

    @property
    def nn(self) -> int:
        return self.n * self.n

    @property
    def phi(self) -> int:
        return (self.p - 1) * (self.q - 1)

    @property
    def ek(self) -> EncryptionKey:
        return EncryptionKey(self.n)


def sample_below(upper: int) -> int:
    """Uniform integer in [0, upper)."""
    if upper <= 0:
        raise ValueError("upper bound must be positive")
    return secrets.randbelow(upper)


def sample_bits(bits: int) -> int:
    """Uniform integer of at most the given number of bits."""
    if bits < 0:
        raise ValueError("bit count must not be negative")
    return secrets.randbits(bits) if bits else 0


def sample_range(low: int, high: int) -> int:
    """Uniform integer in [low, high)."""
    if high <= low:
        raise ValueError("empty range")
    return low + secrets.randbelow(high - low)


def sample_coprime(n: int) -> int:
    """Uniform element of the multiplicative group modulo n."""
    while True:
        r = sample_below(n)
        if gcd(r, n) == 1:
            return r


def _is_probable_prime(candidate: int) -> bool:
    if candidate < 2:
        return False
    for prime in (2, *_SMALL_PRIMES):
        if candidate == prime:
            return True
        if candidate % prime == 0:
            return False
    d, s = candidate - 1, 0
    while d % 2 == 0:
        d //= 2
        s += 1
    for _ in range(_MILLER_RABIN_ROUNDS):
        x = pow(sample_range(2, candidate - 1), d, candidate)
        if x in (1, candidate - 1):
            continue
        for _ in range(s - 1):
            x = x * x % candidate
            if x == candidate - 1:
                break
        else:
            return False
    return True


def _random_prime(bits: int) -> int:
    while True:
        candidate = secrets.randbits(bits) | (1 << (bits - 1)) | (1 << (bits - 2)) | 1
        if _is_probable_prime(candidate):
            return candidate


def keypair(bits: int = 2048) -> tuple[EncryptionKey, DecryptionKey]:
    """Generate a key pair whose modulus has exactly `bits` bits."""
    if bits < 16:
        raise ValueError("modulus must have at least 16 bits")
    half = bits // 2
    while True:
        p = _random_prime(half)
        q = _random_prime(bits - half)
        if p == q:
            continue
        n = p * q
        if n.bit_length() != bits or gcd(n, (p - 1) * (q - 1)) != 1:
            continue
        return EncryptionKey(n), DecryptionKey(p, q)


def sample_randomness(ek: EncryptionKey) -> int:
    """Encryption randomness for the given key."""
    return sample_coprime(ek.n)


def encrypt_with_randomness(ek: EncryptionKey, m: int, r: int) -> int:
    n, nn = ek.n, ek.nn
    return ((m % n) * n + 1) * pow(r, n, nn) % nn


def encrypt(ek: EncryptionKey, m: int) -> int:
    return encrypt_with_randomness(ek, m, sample_randomness(ek))


def _decrypt_component(c: int, prime: int, n: int) -> int:
    square = prime * prime
    h = pow((pow(n + 1, prime - 1, square) - 1) // prime, -1, prime)
    return (pow(c, prime - 1, square) - 1) // prime * h % prime


def decrypt(dk: DecryptionKey, c: int) -> int:
    """Recover the plaintext in [0, n)."""
    p, q, n = dk.p, dk.q, dk.n
    mp = _decrypt_component(c, p, n)
    mq = _decrypt_component(c, q, n)
    return mq + q * ((mp - mq) * pow(q, -1, p) % p)


def add(ek: EncryptionKey, c1: int, c2: int) -> int:
    """Ciphertext of the sum of the two plaintexts."""
    return c1 * c2 % ek.nn


def mul(ek: EncryptionKey, c: int, m: int) -> int:
    """Ciphertext of the plaintext of c multiplied by m."""
    return pow(c, m, ek.nn)