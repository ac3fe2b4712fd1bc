"""Zero-knowledge proofs over Paillier keys and RSA-style moduli."""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass
from functools import lru_cache
from math import gcd

from .ecc import int_from_bytes, int_to_bytes
from .errors import ProtocolError
from .paillier import (
    DecryptionKey,
    EncryptionKey,
    encrypt_with_randomness,
    sample_below,
    sample_coprime,
    sample_range,
)
from .sigma import hash_bigints

SALT_STRING = b"correct-key-proof"

_CHALLENGE_BITS = 128
_HIDING_BITS = 128
_SECRET_BITS = 256
_CORRECT_KEY_ROUNDS = 11
_SMALL_PRIME_BOUND = 6370
_RANGE_ROUNDS = 40


class IncorrectProof(ProtocolError):
    """A proof over a Paillier key or modulus failed to verify."""

    default_message = "incorrect proof"


@dataclass(frozen=True)
class DLogStatement:
    """Statement ni = g^(-x) mod n for an RSA-style modulus n."""

    n: int
    g: int
    ni: int


@dataclass(frozen=True)
class CompositeDLogProof:
    """Proof of knowledge of the discrete log in a DLogStatement."""

    x: int
    y: int

    @staticmethod
    def _challenge(x: int, statement: DLogStatement) -> int:
        digest = hash_bigints(x, statement.g, statement.n, statement.ni)
        return digest % (1 << _CHALLENGE_BITS)

    @classmethod
    def prove(cls, statement: DLogStatement, secret: int) -> CompositeDLogProof:
        r = sample_below(1 << (_CHALLENGE_BITS + _HIDING_BITS + _SECRET_BITS))
        x = pow(statement.g, r, statement.n)
        e = cls._challenge(x, statement)
        return cls(x, r + e * secret)

    def verify(self, statement: DLogStatement) -> None:
        n, g, ni = statement.n, statement.g, statement.ni
        if not (0 < g < n and 0 < ni < n) or gcd(g, n) != 1 or gcd(ni, n) != 1:
            raise IncorrectProof("statement is not over units of the modulus")
        if self.y < 0:
            raise IncorrectProof("negative response")
        e = self._challenge(self.x, statement)
        if pow(g, self.y, n) * pow(ni, e, n) % n != self.x:
            raise IncorrectProof("composite discrete log proof failed")


@lru_cache(maxsize=None)
def _small_primorial() -> int:
    sieve = bytearray([1]) * _SMALL_PRIME_BOUND
    sieve[0:2] = b"\x00\x00"
    for i in range(2, int(_SMALL_PRIME_BOUND**0.5) + 1):
        if sieve[i]:
            sieve[i * i :: i] = bytearray(len(sieve[i * i :: i]))
    product = 1
    for value, is_prime in enumerate(sieve):
        if is_prime:
            product *= value
    return product


def _hash_to_modulus(n: int, salt: bytes, index: int) -> int:
    needed = (n.bit_length() + 7) // 8 + 16
    prefix = salt + int_to_bytes(n) + index.to_bytes(4, "big")
    blocks = bytearray()
    counter = 0
    while len(blocks) < needed:
        blocks += hashlib.sha256(prefix + counter.to_bytes(4, "big")).digest()
        counter += 1
    return int_from_bytes(bytes(blocks[:needed])) % n


@dataclass(frozen=True)
class NiCorrectKeyProof:
    """Non-interactive proof that a Paillier modulus n is coprime to phi(n)."""

    sigma_vec: tuple[int, ...]

    @classmethod
    def proof(cls, dk: DecryptionKey, salt: bytes | None = None) -> NiCorrectKeyProof:
        salt = SALT_STRING if salt is None else salt
        n = dk.n
        exponent = pow(n, -1, dk.phi)
        return cls(
            tuple(
                pow(_hash_to_modulus(n, salt, i), exponent, n)
                for i in range(_CORRECT_KEY_ROUNDS)
            )
        )

    def verify(self, ek: EncryptionKey, salt: bytes | None = None) -> None:
        salt = SALT_STRING if salt is None else salt
        n = ek.n
        if n <= 1 or gcd(n, _small_primorial()) != 1:
            raise IncorrectProof("modulus has small factors")
        if len(self.sigma_vec) != _CORRECT_KEY_ROUNDS:
            raise IncorrectProof("wrong number of proof elements")
        for index, sigma in enumerate(self.sigma_vec):
            if pow(sigma, n, n) != _hash_to_modulus(n, salt, index):
                raise IncorrectProof("correct key proof failed")


@dataclass(frozen=True)
class _OpenedPair:
    w1: int
    r1: int
    w2: int
    r2: int


@dataclass(frozen=True)
class _MaskedShare:
    index: int
    value: int
    randomness: int


def _range_challenge(ek, ciphertext, range_, pairs) -> int:
    flat = [value for pair in pairs for value in pair]
    digest = hash_bigints(ek.n, ciphertext, range_, *flat)
    return digest % (1 << _RANGE_ROUNDS)


@dataclass(frozen=True)
class RangeProofNi:
    """Non-interactive proof that a ciphertext encrypts a value below range_/3."""

    range_: int
    encrypted_pairs: tuple[tuple[int, int], ...]
    responses: tuple[_OpenedPair | _MaskedShare, ...]

    @classmethod
    def prove(
        cls,
        ek: EncryptionKey,
        range_: int,
        ciphertext: int,
        secret: int,
        randomness: int,
    ) -> RangeProofNi:
        third = range_ // 3
        if third < 1:
            raise ValueError("range is too small")
        openings = []
        pairs = []
        for _ in range(_RANGE_ROUNDS):
            w1 = sample_range(third, 2 * third)
            w2 = w1 - third
            if secrets.randbits(1):
                w1, w2 = w2, w1
            r1, r2 = sample_coprime(ek.n), sample_coprime(ek.n)
            openings.append(_OpenedPair(w1, r1, w2, r2))
            pairs.append(
                (encrypt_with_randomness(ek, w1, r1), encrypt_with_randomness(ek, w2, r2))
            )
        challenge = _range_challenge(ek, ciphertext, range_, pairs)
        responses = []
        for round_index, opening in enumerate(openings):
            if not (challenge >> round_index) & 1:
                responses.append(opening)
                continue
            shares = ((opening.w1, opening.r1), (opening.w2, opening.r2))
            index = next(
                (i for i, (w, _) in enumerate(shares) if third <= secret + w <= 2 * third),
                0,
            )
            w, r = shares[index]
            responses.append(_MaskedShare(index, secret + w, randomness * r % ek.n))
        return cls(range_, tuple(pairs), tuple(responses))

    def verify(self, ek: EncryptionKey, ciphertext: int) -> None:
        third = self.range_ // 3
        if len(self.encrypted_pairs) != _RANGE_ROUNDS or len(self.responses) != _RANGE_ROUNDS:
            raise IncorrectProof("wrong number of rounds")
        challenge = _range_challenge(ek, ciphertext, self.range_, self.encrypted_pairs)
        for round_index, (pair, response) in enumerate(
            zip(self.encrypted_pairs, self.responses)
        ):
            if not (challenge >> round_index) & 1:
                self._check_opened(ek, pair, response, third)
            else:
                self._check_masked(ek, ciphertext, pair, response, third)

    @staticmethod
    def _check_opened(ek, pair, response, third) -> None:
        if not isinstance(response, _OpenedPair):
            raise IncorrectProof("expected an opened pair")
        if (
            encrypt_with_randomness(ek, response.w1, response.r1) != pair[0]
            or encrypt_with_randomness(ek, response.w2, response.r2) != pair[1]
        ):
            raise IncorrectProof("opened pair does not match its encryption")
        low, high = sorted((response.w1, response.w2))
        if high - low != third or not third <= high < 2 * third:
            raise IncorrectProof("opened pair out of range")

    @staticmethod
    def _check_masked(ek, ciphertext, pair, response, third) -> None:
        if not isinstance(response, _MaskedShare) or response.index not in (0, 1):
            raise IncorrectProof("expected a masked share")
        if not third <= response.value <= 2 * third:
            raise IncorrectProof("masked value out of range")
        combined = ciphertext * pair[response.index] % ek.nn
        if encrypt_with_randomness(ek, response.value, response.randomness) != combined:
            raise IncorrectProof("masked value does not match the ciphertext")