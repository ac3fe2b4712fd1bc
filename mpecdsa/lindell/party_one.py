"""Party one of two-party ECDSA key generation and signing with Paillier encryption."""

from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .. import paillier
from ..ecc import CURVE_ORDER, Point, Scalar, int_from_bytes, int_to_bytes
from ..errors import InvalidSig
from ..mta import MessageB
from ..paillier import DecryptionKey, EncryptionKey
from ..sigma import (
    DLogProof,
    ECDDHProof,
    ECDDHStatement,
    ECDDHWitness,
    ProofError,
    hash_commitment,
    hash_points,
)
from ..zk_pdl_with_slack import PDLwSlackProof, PDLwSlackStatement, PDLwSlackWitness
from ..zkproofs import CompositeDLogProof, DLogStatement, NiCorrectKeyProof

if TYPE_CHECKING:
    from .party_two import EphKeyGenFirstMsg as Party2EphKeyGenFirstMessage
    from .party_two import EphKeyGenSecondMsg as Party2EphKeyGenSecondMessage

SECURITY_BITS = 256


def _point_int(point: Point) -> int:
    return int_from_bytes(point.to_bytes(True))


@dataclass(frozen=True)
class EcKeyPair:
    public_share: Point
    secret_share: Scalar


@dataclass(frozen=True)
class CommWitness:
    pk_commitment_blind_factor: int
    zk_pok_blind_factor: int
    public_share: Point
    d_log_proof: DLogProof


@dataclass(frozen=True)
class KeyGenFirstMsg:
    pk_commitment: int
    zk_pok_commitment: int

    @classmethod
    def create_commitments(cls) -> tuple[KeyGenFirstMsg, CommWitness, EcKeyPair]:
        return cls.create_commitments_with_fixed_secret_share(Scalar.random())

    @classmethod
    def create_commitments_with_fixed_secret_share(
        cls, secret_share: Scalar
    ) -> tuple[KeyGenFirstMsg, CommWitness, EcKeyPair]:
        """Commit to the public share and to the proof of its discrete log."""
        public_share = Point.generator() * secret_share
        d_log_proof = DLogProof.prove(secret_share)

        pk_commitment_blind_factor = paillier.sample_bits(SECURITY_BITS)
        pk_commitment = hash_commitment(
            _point_int(public_share), pk_commitment_blind_factor
        )
        zk_pok_blind_factor = paillier.sample_bits(SECURITY_BITS)
        zk_pok_commitment = hash_commitment(
            _point_int(d_log_proof.pk_t_rand_commitment), zk_pok_blind_factor
        )
        return (
            cls(pk_commitment=pk_commitment, zk_pok_commitment=zk_pok_commitment),
            CommWitness(
                pk_commitment_blind_factor=pk_commitment_blind_factor,
                zk_pok_blind_factor=zk_pok_blind_factor,
                public_share=public_share,
                d_log_proof=d_log_proof,
            ),
            EcKeyPair(public_share=public_share, secret_share=secret_share),
        )


@dataclass(frozen=True)
class KeyGenSecondMsg:
    comm_witness: CommWitness

    @classmethod
    def verify_and_decommit(
        cls, comm_witness: CommWitness, proof: DLogProof
    ) -> KeyGenSecondMsg:
        """Check party two's proof, then reveal the commitment witness."""
        proof.verify()
        return cls(comm_witness=comm_witness)


@dataclass(frozen=True)
class SignatureRecid:
    s: int
    r: int
    recid: int


@dataclass(frozen=True)
class PDLFirstMessage:
    c_hat: int


@dataclass(frozen=True)
class PDLdecommit:
    q_hat: Point
    blindness: int


@dataclass(frozen=True)
class PDLSecondMessage:
    decommit: PDLdecommit


@dataclass(frozen=True)
class EphEcKeyPair:
    public_share: Point
    secret_share: Scalar


@dataclass(frozen=True)
class PaillierKeyPair:
    ek: EncryptionKey
    dk: DecryptionKey
    encrypted_share: int
    randomness: int

    @classmethod
    def generate_keypair_and_encrypted_share(cls, keygen: EcKeyPair) -> PaillierKeyPair:
        ek, dk = paillier.keypair()
        return cls.generate_encrypted_share_from_fixed_paillier_keypair(ek, dk, keygen)

    @classmethod
    def generate_encrypted_share_from_fixed_paillier_keypair(
        cls, ek: EncryptionKey, dk: DecryptionKey, keygen: EcKeyPair
    ) -> PaillierKeyPair:
        randomness = paillier.sample_randomness(ek)
        encrypted_share = paillier.encrypt_with_randomness(
            ek, keygen.secret_share.to_int(), randomness
        )
        return cls(ek=ek, dk=dk, encrypted_share=encrypted_share, randomness=randomness)

    @staticmethod
    def generate_ni_proof_correct_key(paillier_context: PaillierKeyPair) -> NiCorrectKeyProof:
        return NiCorrectKeyProof.proof(paillier_context.dk, None)

    @staticmethod
    def pdl_proof(
        party1_private: Party1Private, paillier_key_pair: PaillierKeyPair
    ) -> tuple[PDLwSlackStatement, PDLwSlackProof, CompositeDLogProof]:
        """Prove that the encrypted share is the discrete log of party one's public share."""
        n_tilde, h1, h2, xhi = generate_h1_h2_n_tilde()
        dlog_statement = DLogStatement(n=n_tilde, g=h1, ni=h2)
        composite_dlog_proof = CompositeDLogProof.prove(dlog_statement, xhi)

        statement = PDLwSlackStatement(
            ciphertext=paillier_key_pair.encrypted_share,
            ek=paillier_key_pair.ek,
            Q=Point.generator() * party1_private.x1,
            G=Point.generator(),
            h1=dlog_statement.g,
            h2=dlog_statement.ni,
            n_tilde=dlog_statement.n,
        )
        witness = PDLwSlackWitness(
            x=party1_private.x1, r=party1_private.c_key_randomness
        )
        proof = PDLwSlackProof.prove(witness, statement)
        return statement, proof, composite_dlog_proof


@dataclass(frozen=True)
class Party1Private:
    x1: Scalar
    paillier_priv: DecryptionKey
    c_key_randomness: int

    @classmethod
    def set_private_key(
        cls, ec_key: EcKeyPair, paillier_key: PaillierKeyPair
    ) -> Party1Private:
        return cls(
            x1=ec_key.secret_share,
            paillier_priv=paillier_key.dk,
            c_key_randomness=paillier_key.randomness,
        )

    @classmethod
    def refresh_private_key(
        cls, party_one_private: Party1Private, factor: int
    ) -> tuple[
        EncryptionKey,
        int,
        Party1Private,
        NiCorrectKeyProof,
        PDLwSlackStatement,
        PDLwSlackProof,
        CompositeDLogProof,
    ]:
        """Multiply the share by ``factor`` under a fresh Paillier key, with proofs."""
        ek_new, dk_new = paillier.keypair()
        randomness = paillier.sample_randomness(ek_new)
        x1_new = party_one_private.x1 * Scalar(factor)
        c_key_new = paillier.encrypt_with_randomness(ek_new, x1_new.to_int(), randomness)
        correct_key_proof_new = NiCorrectKeyProof.proof(dk_new, None)

        paillier_key_pair = PaillierKeyPair(
            ek=ek_new, dk=dk_new, encrypted_share=c_key_new, randomness=randomness
        )
        private_new = cls(x1=x1_new, paillier_priv=dk_new, c_key_randomness=randomness)
        pdl_statement, pdl_proof, composite_dlog_proof = PaillierKeyPair.pdl_proof(
            private_new, paillier_key_pair
        )
        return (
            ek_new,
            c_key_new,
            private_new,
            correct_key_proof_new,
            pdl_statement,
            pdl_proof,
            composite_dlog_proof,
        )

    def to_mta_message_b(self, message_b: MessageB) -> tuple[Scalar, int]:
        """Finish MtA as Alice with the share x1; raise InvalidKey on bad proofs."""
        return message_b.verify_proofs_get_alpha(self.paillier_priv, self.x1)


def _signature_parts(
    party_one_private: Party1Private,
    partial_sig_c3: int,
    ephemeral_local_share: EphEcKeyPair,
    ephemeral_other_public_share: Point,
) -> tuple[Point, int]:
    r = ephemeral_other_public_share * ephemeral_local_share.secret_share
    if r.is_zero:
        raise ValueError("ephemeral point is the point at infinity")
    k1_inv = ephemeral_local_share.secret_share.invert()
    if k1_inv is None:
        raise ValueError("ephemeral secret share is zero")
    s_tag = paillier.decrypt(party_one_private.paillier_priv, partial_sig_c3)
    s_tag_tag = (Scalar(s_tag) * k1_inv).to_int()
    return r, s_tag_tag


@dataclass(frozen=True)
class Signature:
    s: int
    r: int

    @classmethod
    def compute(
        cls,
        party_one_private: Party1Private,
        partial_sig_c3: int,
        ephemeral_local_share: EphEcKeyPair,
        ephemeral_other_public_share: Point,
    ) -> Signature:
        r, s_tag_tag = _signature_parts(
            party_one_private,
            partial_sig_c3,
            ephemeral_local_share,
            ephemeral_other_public_share,
        )
        s = min(s_tag_tag, CURVE_ORDER - s_tag_tag)
        return cls(s=s, r=r.x % CURVE_ORDER)

    @classmethod
    def compute_with_recid(
        cls,
        party_one_private: Party1Private,
        partial_sig_c3: int,
        ephemeral_local_share: EphEcKeyPair,
        ephemeral_other_public_share: Point,
    ) -> SignatureRecid:
        """Like compute, adding the recovery id: R.y parity, flipped if s was negated."""
        r, s_tag_tag = _signature_parts(
            party_one_private,
            partial_sig_c3,
            ephemeral_local_share,
            ephemeral_other_public_share,
        )
        negated = CURVE_ORDER - s_tag_tag
        s = min(s_tag_tag, negated)
        recid = (r.y % CURVE_ORDER) & 1
        if s_tag_tag > negated:
            recid ^= 1
        return SignatureRecid(s=s, r=r.x % CURVE_ORDER, recid=recid)


@dataclass(frozen=True)
class EphKeyGenFirstMsg:
    d_log_proof: ECDDHProof
    public_share: Point
    c: Point  # secret_share * base_point2

    @classmethod
    def create(cls) -> tuple[EphKeyGenFirstMsg, EphEcKeyPair]:
        base = Point.generator()
        h = Point.base_point2()
        secret_share = Scalar.random()
        public_share = base * secret_share
        c = h * secret_share
        statement = ECDDHStatement(g1=base, h1=public_share, g2=h, h2=c)
        d_log_proof = ECDDHProof.prove(ECDDHWitness(x=secret_share), statement)
        return (
            cls(d_log_proof=d_log_proof, public_share=public_share, c=c),
            EphEcKeyPair(public_share=public_share, secret_share=secret_share),
        )


@dataclass(frozen=True)
class EphKeyGenSecondMsg:
    @classmethod
    def verify_commitments_and_dlog_proof(
        cls,
        party_two_first_message: Party2EphKeyGenFirstMessage,
        party_two_second_message: Party2EphKeyGenSecondMessage,
    ) -> EphKeyGenSecondMsg:
        """Open party two's commitments and check its DDH proof; raise ProofError if not."""
        witness = party_two_second_message.comm_witness
        proof = witness.d_log_proof
        pk_ok = party_two_first_message.pk_commitment == hash_commitment(
            _point_int(witness.public_share), witness.pk_commitment_blind_factor
        )
        zk_ok = party_two_first_message.zk_pok_commitment == hash_commitment(
            hash_points(proof.a1, proof.a2), witness.zk_pok_blind_factor
        )
        if not (pk_ok and zk_ok):
            raise ProofError("commitments of party two do not open")
        statement = ECDDHStatement(
            g1=Point.generator(),
            h1=witness.public_share,
            g2=Point.base_point2(),
            h2=witness.c,
        )
        proof.verify(statement)
        return cls()


def compute_pubkey(party_one_private: Party1Private, other_share_public_share: Point) -> Point:
    return other_share_public_share * party_one_private.x1


def verify(signature: Signature, pubkey: Point, message: int) -> None:
    """Raise InvalidSig unless ``signature`` is a low-s ECDSA signature of ``message``."""
    s_inv = Scalar(signature.s).invert()
    if s_inv is None:
        raise InvalidSig("s is zero")
    rx_fe = Scalar(signature.r)
    e_fe = Scalar(message % CURVE_ORDER)
    u1 = Point.generator() * e_fe * s_inv
    u2 = pubkey * rx_fe * s_inv
    total = u1 + u2
    if total.is_zero or signature.r < 0:
        raise InvalidSig()
    same_r = hmac.compare_digest(int_to_bytes(signature.r), int_to_bytes(total.x))
    if not (same_r and signature.s < CURVE_ORDER - signature.s):
        raise InvalidSig()


def generate_h1_h2_n_tilde() -> tuple[int, int, int, int]:
    """Return (N_tilde, h1, h2, xhi) with h2 = h1^(-xhi) mod N_tilde."""
    ek_tilde, dk_tilde = paillier.keypair()
    h1 = paillier.sample_below(dk_tilde.phi)
    xhi = paillier.sample_below(1 << 256)
    h1_inv = pow(h1, -1, ek_tilde.n)
    h2 = pow(h1_inv, xhi, ek_tilde.n)
    return ek_tilde.n, h1, h2, xhi