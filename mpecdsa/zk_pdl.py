"""Interactive proof that a Paillier ciphertext decrypts to the discrete log of a point.

Statement ``(c, ek, Q, G)`` with witness ``(x, r, dk)`` such that ``Q = x*G``,
``c = Enc(ek, x, r)`` and ``Dec(dk, c) = x``. Because of the range proof the
protocol is sound only for ``x < q/3``.
"""

from __future__ import annotations

from dataclasses import dataclass

from . import paillier
from .ecc import CURVE_ORDER, Point, Scalar, int_from_bytes
from .errors import ProtocolError
from .paillier import DecryptionKey, EncryptionKey
from .sigma import hash_commitment
from .zkproofs import IncorrectProof, RangeProofNi


class ZkPdlError(ProtocolError):
    """A step of the PDL protocol failed."""

    default_message = "zk pdl failed"


@dataclass(frozen=True)
class PDLStatement:
    ciphertext: int
    ek: EncryptionKey
    Q: Point
    G: Point


@dataclass(frozen=True)
class PDLWitness:
    x: Scalar
    r: int
    dk: DecryptionKey


@dataclass
class PDLVerifierState:
    """What the verifier keeps between its messages."""

    c_tag: int
    c_tag_tag: int
    a: int
    b: int
    blindness: int
    q_tag: Point
    c_hat: int = 0


@dataclass(frozen=True)
class PDLProverDecommit:
    q_hat: Point
    blindness: int


@dataclass(frozen=True)
class PDLProverState:
    decommit: PDLProverDecommit
    alpha: int


@dataclass(frozen=True)
class PDLVerifierFirstMessage:
    c_tag: int
    c_tag_tag: int


@dataclass(frozen=True)
class PDLProverFirstMessage:
    c_hat: int
    range_proof: RangeProofNi


@dataclass(frozen=True)
class PDLVerifierSecondMessage:
    a: int
    b: int
    blindness: int


@dataclass(frozen=True)
class PDLProverSecondMessage:
    decommit: PDLProverDecommit


def _point_int(point: Point) -> int:
    return int_from_bytes(point.to_bytes(True))


def _concat(a: int, b: int) -> int:
    # b|a, low bits hold a
    return a + (b << a.bit_length())


class Verifier:
    """The verifier's side of the protocol."""

    @staticmethod
    def message1(
        statement: PDLStatement,
    ) -> tuple[PDLVerifierFirstMessage, PDLVerifierState]:
        q = CURVE_ORDER
        a_fe = Scalar.random()
        a = a_fe.to_int()
        b = paillier.sample_below(q * q)
        b_fe = Scalar(b)
        b_enc = paillier.encrypt(statement.ek, b)
        ac = paillier.mul(statement.ek, statement.ciphertext, a)
        c_tag = paillier.add(statement.ek, ac, b_enc)
        blindness = paillier.sample_below(q)
        c_tag_tag = hash_commitment(_concat(a, b), blindness)
        q_tag = statement.Q * a_fe + statement.G * b_fe
        return (
            PDLVerifierFirstMessage(c_tag=c_tag, c_tag_tag=c_tag_tag),
            PDLVerifierState(
                c_tag=c_tag,
                c_tag_tag=c_tag_tag,
                a=a,
                b=b,
                blindness=blindness,
                q_tag=q_tag,
            ),
        )

    @staticmethod
    def message2(
        prover_first_message: PDLProverFirstMessage,
        statement: PDLStatement,
        state: PDLVerifierState,
    ) -> PDLVerifierSecondMessage:
        """Record the prover's commitment and open the challenge."""
        state.c_hat = prover_first_message.c_hat
        try:
            prover_first_message.range_proof.verify(statement.ek, statement.ciphertext)
        except IncorrectProof as exc:
            raise ZkPdlError("zk pdl message2 failed") from exc
        return PDLVerifierSecondMessage(a=state.a, b=state.b, blindness=state.blindness)

    @staticmethod
    def finalize(
        prover_first_message: PDLProverFirstMessage,
        prover_second_message: PDLProverSecondMessage,
        state: PDLVerifierState,
    ) -> None:
        decommit = prover_second_message.decommit
        c_hat_test = hash_commitment(_point_int(decommit.q_hat), decommit.blindness)
        if prover_first_message.c_hat != c_hat_test or decommit.q_hat != state.q_tag:
            raise ZkPdlError("zk pdl finalize failed")


class Prover:
    """The prover's side of the protocol."""

    @staticmethod
    def message1(
        witness: PDLWitness,
        statement: PDLStatement,
        verifier_first_message: PDLVerifierFirstMessage,
    ) -> tuple[PDLProverFirstMessage, PDLProverState]:
        alpha = paillier.decrypt(witness.dk, verifier_first_message.c_tag)
        q_hat = statement.G * Scalar(alpha)
        blindness = paillier.sample_below(CURVE_ORDER)
        c_hat = hash_commitment(_point_int(q_hat), blindness)
        range_proof = RangeProofNi.prove(
            statement.ek,
            CURVE_ORDER,
            statement.ciphertext,
            witness.x.to_int(),
            witness.r,
        )
        return (
            PDLProverFirstMessage(c_hat=c_hat, range_proof=range_proof),
            PDLProverState(
                decommit=PDLProverDecommit(q_hat=q_hat, blindness=blindness),
                alpha=alpha,
            ),
        )

    @staticmethod
    def message2(
        verifier_first_message: PDLVerifierFirstMessage,
        verifier_second_message: PDLVerifierSecondMessage,
        witness: PDLWitness,
        state: PDLProverState,
    ) -> PDLProverSecondMessage:
        a, b = verifier_second_message.a, verifier_second_message.b
        c_tag_tag_test = hash_commitment(_concat(a, b), verifier_second_message.blindness)
        alpha_test = a * witness.x.to_int() + b
        if alpha_test != state.alpha or verifier_first_message.c_tag_tag != c_tag_tag_test:
            raise ZkPdlError("zk pdl message2 failed")
        return PDLProverSecondMessage(decommit=state.decommit)