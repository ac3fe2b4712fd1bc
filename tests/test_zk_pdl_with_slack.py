import pytest

from mpecdsa import paillier
from mpecdsa.ecc import Point, Scalar
from mpecdsa.zk_pdl_with_slack import (
    PDLwSlackProof,
    PDLwSlackStatement,
    PDLwSlackWitness,
    ZkPdlWithSlackError,
    commitment_unknown_order,
)
from mpecdsa.zkproofs import CompositeDLogProof, DLogStatement

KEY_BITS = 1024


def _setup_n_tilde():
    ek_tilde, dk_tilde = paillier.keypair(KEY_BITS)
    phi = dk_tilde.phi
    while True:
        h1 = paillier.sample_below(phi)
        if h1 > 1:
            try:
                h1_inv = pow(h1, -1, ek_tilde.n)
            except ValueError:
                continue
            break
    xhi = paillier.sample_below(2**256)
    h2 = pow(h1_inv, xhi, ek_tilde.n)
    statement = DLogStatement(n=ek_tilde.n, g=h1, ni=h2)
    return statement, xhi


@pytest.fixture(scope="module")
def keys():
    dlog_statement, xhi = _setup_n_tilde()
    ek, dk = paillier.keypair(KEY_BITS)
    return dlog_statement, xhi, ek, dk


def _statement_and_witness(keys, plaintext_offset=0):
    dlog_statement, _, ek, _ = keys
    randomness = paillier.sample_randomness(ek)
    x = Scalar.random()
    q_point = Point.generator() * x
    c = paillier.encrypt_with_randomness(ek, x.to_int() + plaintext_offset, randomness)
    statement = PDLwSlackStatement(
        ciphertext=c,
        ek=ek,
        Q=q_point,
        G=Point.generator(),
        h1=dlog_statement.g,
        h2=dlog_statement.ni,
        n_tilde=dlog_statement.n,
    )
    return statement, PDLwSlackWitness(x=x, r=randomness)


def test_zk_pdl_with_slack(keys):
    dlog_statement, xhi, _, _ = keys
    composite_dlog_proof = CompositeDLogProof.prove(dlog_statement, xhi)
    statement, witness = _statement_and_witness(keys)
    proof = PDLwSlackProof.prove(witness, statement)
    assert composite_dlog_proof.verify(dlog_statement) is None
    assert proof.verify(statement) is None


def test_zk_pdl_with_slack_soundness(keys):
    dlog_statement, xhi, _, _ = keys
    composite_dlog_proof = CompositeDLogProof.prove(dlog_statement, xhi)
    statement, witness = _statement_and_witness(keys, plaintext_offset=1)
    proof = PDLwSlackProof.prove(witness, statement)
    assert composite_dlog_proof.verify(dlog_statement) is None
    with pytest.raises(ZkPdlWithSlackError):
        proof.verify(statement)


def test_wrong_public_point_rejected(keys):
    statement, witness = _statement_and_witness(keys)
    proof = PDLwSlackProof.prove(witness, statement)
    other = PDLwSlackStatement(
        ciphertext=statement.ciphertext,
        ek=statement.ek,
        Q=statement.Q + Point.generator(),
        G=statement.G,
        h1=statement.h1,
        h2=statement.h2,
        n_tilde=statement.n_tilde,
    )
    with pytest.raises(ZkPdlWithSlackError):
        proof.verify(other)


def test_commitment_unknown_order_positive():
    assert commitment_unknown_order(2, 3, 11, 2, 1) == 1


def test_commitment_unknown_order_negative_exponent():
    assert commitment_unknown_order(2, 3, 11, 1, -1) == 8


def test_commitment_unknown_order_not_invertible():
    with pytest.raises(ValueError):
        commitment_unknown_order(2, 3, 9, 1, -1)