"""Hashing helpers, hash commitments and sigma proofs of discrete logs."""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass

from .ecc import Point, Scalar, int_from_bytes, int_to_bytes
from .errors import ProtocolError


class ProofError(ProtocolError):
    """A zero-knowledge proof over the curve failed to verify."""

    default_message = "proof failed to verify"


def hash_bigints(*args: int) -> int:
    """SHA-256 over the big-endian encodings of the integers."""
    digest = hashlib.sha256()
    for value in args:
        digest.update(int_to_bytes(value))
    return int_from_bytes(digest.digest())


def hash_points(*args: Point) -> int:
    """SHA-256 over the compressed encodings of the points."""
    digest = hashlib.sha256()
    for point in args:
        digest.update(point.to_bytes(True))
    return int_from_bytes(digest.digest())


def hash_commitment(message: int, blinding: int) -> int:
    """Commit to `message` with the blinding factor `blinding`."""
    return hash_bigints(message, blinding)


@dataclass(frozen=True)
class DLogProof:
    """Schnorr proof of knowledge of the discrete log of `pk`."""

    pk: Point
    pk_t_rand_commitment: Point
    challenge_response: Scalar

    @staticmethod
    def _challenge(commitment: Point, pk: Point) -> Scalar:
        return Scalar(hash_points(commitment, Point.generator(), pk))

    @classmethod
    def prove(cls, secret: Scalar) -> DLogProof:
        generator = Point.generator()
        nonce = Scalar.random()
        commitment = generator * nonce
        pk = generator * secret
        challenge = cls._challenge(commitment, pk)
        return cls(pk, commitment, nonce - challenge * secret)

    def verify(self) -> None:
        challenge = self._challenge(self.pk_t_rand_commitment, self.pk)
        expected = Point.generator() * self.challenge_response + self.pk * challenge
        if expected != self.pk_t_rand_commitment:
            raise ProofError("discrete log proof failed to verify")


@dataclass(frozen=True)
class ECDDHStatement:
    g1: Point
    h1: Point
    g2: Point
    h2: Point


@dataclass(frozen=True)
class ECDDHWitness:
    x: Scalar


@dataclass(frozen=True)
class ECDDHProof:
    """Proof that h1 = x*g1 and h2 = x*g2 for the same x."""

    a1: Point
    a2: Point
    z: Scalar

    @staticmethod
    def _challenge(statement: ECDDHStatement, a1: Point, a2: Point) -> Scalar:
        return Scalar(
            hash_points(statement.g1, statement.h1, statement.g2, statement.h2, a1, a2)
        )

    @classmethod
    def prove(cls, witness: ECDDHWitness, statement: ECDDHStatement) -> ECDDHProof:
        nonce = Scalar.random()
        a1 = statement.g1 * nonce
        a2 = statement.g2 * nonce
        e = cls._challenge(statement, a1, a2)
        return cls(a1, a2, nonce + e * witness.x)

    def verify(self, statement: ECDDHStatement) -> None:
        e = self._challenge(statement, self.a1, self.a2)
        if (
            statement.g1 * self.z != self.a1 + statement.h1 * e
            or statement.g2 * self.z != self.a2 + statement.h2 * e
        ):
            raise ProofError("DDH proof failed to verify")


def _random_blinding(bits: int) -> int:
    return secrets.randbits(bits)