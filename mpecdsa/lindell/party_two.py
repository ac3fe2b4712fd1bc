"""Party two of two-party ECDSA key generation and signing with Paillier encryption."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .. import paillier
from ..ecc import CURVE_ORDER, Point, Scalar, int_from_bytes
from ..errors import ProtocolError
from ..mta import MessageA, MessageB
from ..paillier import EncryptionKey
from ..sigma import (
    DLogProof,
    ECDDHProof,
    ECDDHStatement,
    ECDDHWitness,
    ProofError,
    hash_commitment,
    hash_points,
)
from ..zk_pdl_with_slack import PDLwSlackProof, PDLwSlackStatement, ZkPdlWithSlackError
from ..zkproofs import (
    SALT_STRING,
    CompositeDLogProof,
    DLogStatement,
    IncorrectProof,
    NiCorrectKeyProof,
)

if TYPE_CHECKING:
    from .party_one import EphKeyGenFirstMsg as Party1EphKeyGenFirstMsg
    from .party_one import KeyGenFirstMsg as Party1KeyGenFirstMessage
    from .party_one import KeyGenSecondMsg as Party1KeyGenSecondMessage

SECURITY_BITS = 256
PAILLIER_KEY_SIZE = 2048


class PartyTwoError(ProtocolError):
    """Party two rejected party one's PDL proof."""

    default_message = "party two pdl verify failed (lindell 2017)"


def _point_int(point: Point) -> int:
    return int_from_bytes(point.to_bytes(True))


@dataclass(frozen=True)
class EcKeyPair:
    public_share: Point
    secret_share: Scalar


@dataclass(frozen=True)
class KeyGenFirstMsg:
    d_log_proof: DLogProof
    public_share: Point

    @classmethod
    def create(cls) -> tuple[KeyGenFirstMsg, EcKeyPair]:
        return cls.create_with_fixed_secret_share(Scalar.random())

    @classmethod
    def create_with_fixed_secret_share(
        cls, secret_share: Scalar
    ) -> tuple[KeyGenFirstMsg, EcKeyPair]:
        public_share = Point.generator() * secret_share
        d_log_proof = DLogProof.prove(secret_share)
        return (
            cls(d_log_proof=d_log_proof, public_share=public_share),
            EcKeyPair(public_share=public_share, secret_share=secret_share),
        )


@dataclass(frozen=True)
class KeyGenSecondMsg:
    @classmethod
    def verify_commitments_and_dlog_proof(
        cls,
        party_one_first_message: Party1KeyGenFirstMessage,
        party_one_second_message: Party1KeyGenSecondMessage,
    ) -> KeyGenSecondMsg:
        """Open party one's commitments and check its proof; raise ProofError if not."""
        witness = party_one_second_message.comm_witness
        proof = witness.d_log_proof
        pk_ok = party_one_first_message.pk_commitment == hash_commitment(
            _point_int(witness.public_share), witness.pk_commitment_blind_factor
        )
        zk_ok = party_one_first_message.zk_pok_commitment == hash_commitment(
            _point_int(proof.pk_t_rand_commitment), witness.zk_pok_blind_factor
        )
        if not (pk_ok and zk_ok):
            raise ProofError("commitments of party one do not open")
        proof.verify()
        return cls()


def compute_pubkey(local_share: EcKeyPair, other_share_public_share: Point) -> Point:
    return other_share_public_share * local_share.secret_share


@dataclass(frozen=True)
class PaillierPublic:
    ek: EncryptionKey
    encrypted_secret_share: int

    @staticmethod
    def pdl_verify(
        composite_dlog_proof: CompositeDLogProof,
        pdl_w_slack_statement: PDLwSlackStatement,
        pdl_w_slack_proof: PDLwSlackProof,
        paillier_public: PaillierPublic,
        q1: Point,
    ) -> None:
        """Raise PartyTwoError unless the statement matches and both proofs hold."""
        if (
            pdl_w_slack_statement.ek != paillier_public.ek
            or pdl_w_slack_statement.ciphertext != paillier_public.encrypted_secret_share
            or pdl_w_slack_statement.Q != q1
        ):
            raise PartyTwoError()
        dlog_statement = DLogStatement(
            n=pdl_w_slack_statement.n_tilde,
            g=pdl_w_slack_statement.h1,
            ni=pdl_w_slack_statement.h2,
        )
        try:
            composite_dlog_proof.verify(dlog_statement)
            pdl_w_slack_proof.verify(pdl_w_slack_statement)
        except (IncorrectProof, ZkPdlWithSlackError) as exc:
            raise PartyTwoError() from exc

    @staticmethod
    def verify_ni_proof_correct_key(proof: NiCorrectKeyProof, ek: EncryptionKey) -> None:
        """Raise IncorrectProof for a short modulus or a failing proof."""
        if ek.n.bit_length() < PAILLIER_KEY_SIZE - 1:
            raise IncorrectProof("Paillier modulus is too short")
        proof.verify(ek, SALT_STRING)


@dataclass(frozen=True)
class PartialSig:
    c3: int

    @classmethod
    def compute(
        cls,
        ek: EncryptionKey,
        encrypted_secret_share: int,
        local_share: Party2Private,
        ephemeral_local_share: EphEcKeyPair,
        ephemeral_other_public_share: Point,
        message: int,
    ) -> PartialSig:
        q = CURVE_ORDER
        r = ephemeral_other_public_share * ephemeral_local_share.secret_share
        if r.is_zero:
            raise ValueError("ephemeral point is the point at infinity")
        rx = r.x % q
        rho = paillier.sample_below(q * q)
        k2_inv = pow(ephemeral_local_share.secret_share.to_int(), -1, q)
        partial_sig = rho * q + k2_inv * message % q
        c1 = paillier.encrypt(ek, partial_sig)
        v = k2_inv * (rx * local_share.x2.to_int() % q) % q
        c2 = paillier.mul(ek, encrypted_secret_share, v)
        return cls(c3=paillier.add(ek, c2, c1))


@dataclass(frozen=True)
class Party2Private:
    x2: Scalar

    @classmethod
    def set_private_key(cls, ec_key: EcKeyPair) -> Party2Private:
        return cls(x2=ec_key.secret_share)

    @classmethod
    def update_private_key(cls, party_two_private: Party2Private, factor: int) -> Party2Private:
        return cls(x2=party_two_private.x2 * Scalar(factor))

    def to_mta_message_b(
        self, ek: EncryptionKey, ciphertext: int
    ) -> tuple[MessageB, Scalar]:
        """Answer an encrypted share as Bob in MtA, without range proofs."""
        message_a = MessageA(c=ciphertext, range_proofs=())
        message_b, beta, _, _ = MessageB.b(self.x2, ek, message_a, ())
        return message_b, beta


@dataclass(frozen=True)
class PDLchallenge:
    c_tag: int
    c_tag_tag: int
    a: int
    b: int
    blindness: int
    q_tag: Point


@dataclass(frozen=True)
class PDLFirstMessage:
    c_tag: int
    c_tag_tag: int


@dataclass(frozen=True)
class PDLdecommit:
    a: int
    b: int
    blindness: int


@dataclass(frozen=True)
class PDLSecondMessage:
    decommit: PDLdecommit


@dataclass(frozen=True)
class EphEcKeyPair:
    public_share: Point
    secret_share: Scalar


@dataclass(frozen=True)
class EphCommWitness:
    pk_commitment_blind_factor: int
    zk_pok_blind_factor: int
    public_share: Point
    d_log_proof: ECDDHProof
    c: Point  # secret_share * base_point2


@dataclass(frozen=True)
class EphKeyGenFirstMsg:
    pk_commitment: int
    zk_pok_commitment: int

    @classmethod
    def create_commitments(
        cls,
    ) -> tuple[EphKeyGenFirstMsg, EphCommWitness, EphEcKeyPair]:
        base = Point.generator()
        h = Point.base_point2()
        secret_share = Scalar.random()
        public_share = base * secret_share
        c = h * secret_share
        statement = ECDDHStatement(g1=base, h1=public_share, g2=h, h2=c)
        d_log_proof = ECDDHProof.prove(ECDDHWitness(x=secret_share), statement)

        pk_commitment_blind_factor = paillier.sample_bits(SECURITY_BITS)
        pk_commitment = hash_commitment(
            _point_int(public_share), pk_commitment_blind_factor
        )
        zk_pok_blind_factor = paillier.sample_bits(SECURITY_BITS)
        zk_pok_commitment = hash_commitment(
            hash_points(d_log_proof.a1, d_log_proof.a2), zk_pok_blind_factor
        )
        return (
            cls(pk_commitment=pk_commitment, zk_pok_commitment=zk_pok_commitment),
            EphCommWitness(
                pk_commitment_blind_factor=pk_commitment_blind_factor,
                zk_pok_blind_factor=zk_pok_blind_factor,
                public_share=public_share,
                d_log_proof=d_log_proof,
                c=c,
            ),
            EphEcKeyPair(public_share=public_share, secret_share=secret_share),
        )


@dataclass(frozen=True)
class EphKeyGenSecondMsg:
    comm_witness: EphCommWitness

    @classmethod
    def verify_and_decommit(
        cls,
        comm_witness: EphCommWitness,
        party_one_first_message: Party1EphKeyGenFirstMsg,
    ) -> EphKeyGenSecondMsg:
        """Check party one's DDH proof, then reveal the commitment witness."""
        statement = ECDDHStatement(
            g1=Point.generator(),
            h1=party_one_first_message.public_share,
            g2=Point.base_point2(),
            h2=party_one_first_message.c,
        )
        party_one_first_message.d_log_proof.verify(statement)
        return cls(comm_witness=comm_witness)