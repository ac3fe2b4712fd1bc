from types import SimpleNamespace

import pytest

from mpecdsa import paillier
from mpecdsa.ecc import CURVE_ORDER, Point, Scalar, int_from_bytes
from mpecdsa.lindell.party_two import (
    EphKeyGenFirstMsg,
    EphKeyGenSecondMsg,
    KeyGenFirstMsg,
    KeyGenSecondMsg,
    PaillierPublic,
    PartialSig,
    Party2Private,
    PartyTwoError,
    compute_pubkey,
)
from mpecdsa.sigma import (
    DLogProof,
    ECDDHProof,
    ECDDHStatement,
    ECDDHWitness,
    ProofError,
    hash_commitment,
    hash_points,
)
from mpecdsa.zk_pdl_with_slack import PDLwSlackProof, PDLwSlackStatement, PDLwSlackWitness
from mpecdsa.zkproofs import CompositeDLogProof, DLogStatement, IncorrectProof, NiCorrectKeyProof


@pytest.fixture(scope="module")
def alice_keys():
    return paillier.keypair(1024)


def _party_one_keygen_messages(secret):
    proof = DLogProof.prove(secret)
    public = Point.generator() * secret
    pk_blind = paillier.sample_bits(256)
    zk_blind = paillier.sample_bits(256)
    first = SimpleNamespace(
        pk_commitment=hash_commitment(int_from_bytes(public.to_bytes(True)), pk_blind),
        zk_pok_commitment=hash_commitment(
            int_from_bytes(proof.pk_t_rand_commitment.to_bytes(True)), zk_blind
        ),
    )
    witness = SimpleNamespace(
        pk_commitment_blind_factor=pk_blind,
        zk_pok_blind_factor=zk_blind,
        public_share=public,
        d_log_proof=proof,
    )
    return first, SimpleNamespace(comm_witness=witness)


def _party_one_eph_message(secret, c=None):
    base, h = Point.generator(), Point.base_point2()
    public = base * secret
    c_true = h * secret
    proof = ECDDHProof.prove(
        ECDDHWitness(x=secret), ECDDHStatement(g1=base, h1=public, g2=h, h2=c_true)
    )
    return SimpleNamespace(d_log_proof=proof, public_share=public, c=c or c_true)


def test_create_gives_consistent_key_pair():
    message, key_pair = KeyGenFirstMsg.create()
    assert message.public_share == Point.generator() * key_pair.secret_share
    assert message.d_log_proof.pk == message.public_share


def test_create_with_fixed_secret_share():
    message, key_pair = KeyGenFirstMsg.create_with_fixed_secret_share(Scalar(10))
    assert key_pair.secret_share == Scalar(10)
    assert message.public_share == Point.generator() * Scalar(10)


def test_verify_commitments_and_dlog_proof():
    first, second = _party_one_keygen_messages(Scalar.random())
    assert KeyGenSecondMsg.verify_commitments_and_dlog_proof(first, second) == KeyGenSecondMsg()


def test_verify_commitments_rejects_wrong_blinding():
    first, second = _party_one_keygen_messages(Scalar.random())
    second.comm_witness.pk_commitment_blind_factor += 1
    with pytest.raises(ProofError):
        KeyGenSecondMsg.verify_commitments_and_dlog_proof(first, second)


def test_compute_pubkey_is_symmetric():
    _, pair_a = KeyGenFirstMsg.create()
    _, pair_b = KeyGenFirstMsg.create()
    assert compute_pubkey(pair_a, pair_b.public_share) == compute_pubkey(
        pair_b, pair_a.public_share
    )


def test_update_private_key():
    _, key_pair = KeyGenFirstMsg.create()
    private = Party2Private.set_private_key(key_pair)
    assert private.x2 == key_pair.secret_share
    assert Party2Private.update_private_key(private, 1) == private
    assert Party2Private.update_private_key(private, 2).x2 == private.x2 + private.x2


def test_ephemeral_commitments_open():
    first, witness, key_pair = EphKeyGenFirstMsg.create_commitments()
    assert witness.c == Point.base_point2() * key_pair.secret_share
    assert first.pk_commitment == hash_commitment(
        int_from_bytes(witness.public_share.to_bytes(True)),
        witness.pk_commitment_blind_factor,
    )
    assert first.zk_pok_commitment == hash_commitment(
        hash_points(witness.d_log_proof.a1, witness.d_log_proof.a2),
        witness.zk_pok_blind_factor,
    )


def test_ephemeral_verify_and_decommit():
    _, witness, _ = EphKeyGenFirstMsg.create_commitments()
    message = _party_one_eph_message(Scalar.random())
    second = EphKeyGenSecondMsg.verify_and_decommit(witness, message)
    assert second.comm_witness == witness


def test_ephemeral_verify_rejects_bad_proof():
    _, witness, _ = EphKeyGenFirstMsg.create_commitments()
    secret = Scalar.random()
    message = _party_one_eph_message(secret, c=Point.base_point2() * (secret + 1))
    with pytest.raises(ProofError):
        EphKeyGenSecondMsg.verify_and_decommit(witness, message)


def test_partial_signature_completes_to_valid_ecdsa(alice_keys):
    ek, dk = alice_keys
    x1 = Scalar.random()
    _, pair2 = KeyGenFirstMsg.create()
    private2 = Party2Private.set_private_key(pair2)
    _, _, eph2 = EphKeyGenFirstMsg.create_commitments()
    k1 = Scalar.random()
    message = 1234

    partial = PartialSig.compute(
        ek,
        paillier.encrypt(ek, x1.to_int()),
        private2,
        eph2,
        Point.generator() * k1,
        message,
    )
    s = Scalar(paillier.decrypt(dk, partial.c3)) * k1.invert()
    r = (eph2.public_share * k1).x % CURVE_ORDER
    pubkey = pair2.public_share * x1
    s_inv = s.invert()
    check = Point.generator() * (Scalar(message) * s_inv) + pubkey * (Scalar(r) * s_inv)
    assert check.x % CURVE_ORDER == r


def test_to_mta_message_b(alice_keys):
    ek, dk = alice_keys
    _, pair2 = KeyGenFirstMsg.create()
    private2 = Party2Private.set_private_key(pair2)
    a = Scalar.random()
    message_b, beta = private2.to_mta_message_b(ek, paillier.encrypt(ek, a.to_int()))
    alpha, _ = message_b.verify_proofs_get_alpha(dk, a)
    assert alpha + beta == a * private2.x2


def _pdl_setup(ek):
    ek_tilde, _ = paillier.keypair(1024)
    n_tilde = ek_tilde.n
    h1 = paillier.sample_coprime(n_tilde)
    xhi = paillier.sample_below(2**256)
    h2 = pow(pow(h1, -1, n_tilde), xhi, n_tilde)
    composite = CompositeDLogProof.prove(DLogStatement(n=n_tilde, g=h1, ni=h2), xhi)
    x = Scalar.random()
    randomness = paillier.sample_randomness(ek)
    c = paillier.encrypt_with_randomness(ek, x.to_int(), randomness)
    statement = PDLwSlackStatement(
        ciphertext=c,
        ek=ek,
        Q=Point.generator() * x,
        G=Point.generator(),
        h1=h1,
        h2=h2,
        n_tilde=n_tilde,
    )
    proof = PDLwSlackProof.prove(PDLwSlackWitness(x=x, r=randomness), statement)
    return composite, statement, proof


def test_pdl_verify(alice_keys):
    ek, _ = alice_keys
    composite, statement, proof = _pdl_setup(ek)
    public = PaillierPublic(ek=ek, encrypted_secret_share=statement.ciphertext)
    assert PaillierPublic.pdl_verify(composite, statement, proof, public, statement.Q) is None
    with pytest.raises(PartyTwoError):
        PaillierPublic.pdl_verify(
            composite, statement, proof, public, statement.Q + Point.generator()
        )
    wrong_share = PaillierPublic(ek=ek, encrypted_secret_share=statement.ciphertext + 1)
    with pytest.raises(PartyTwoError):
        PaillierPublic.pdl_verify(composite, statement, proof, wrong_share, statement.Q)


def test_verify_ni_proof_correct_key_rejects_short_key(alice_keys):
    ek, dk = alice_keys
    proof = NiCorrectKeyProof.proof(dk)
    with pytest.raises(IncorrectProof):
        PaillierPublic.verify_ni_proof_correct_key(proof, ek)


def test_verify_ni_proof_correct_key_full_size():
    ek, dk = paillier.keypair(2048)
    proof = NiCorrectKeyProof.proof(dk)
    assert PaillierPublic.verify_ni_proof_correct_key(proof, ek) is None
    wrong_salt = NiCorrectKeyProof.proof(dk, b"other")
    with pytest.raises(IncorrectProof):
        PaillierPublic.verify_ni_proof_correct_key(wrong_salt, ek)