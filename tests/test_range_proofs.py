import dataclasses
from math import gcd

import pytest

from mpecdsa import paillier
from mpecdsa.ecc import CURVE_ORDER, Point, Scalar
from mpecdsa.range_proofs import (
    AliceProof,
    BobCheck,
    BobProof,
    BobProofExt,
    sample_from_modulo,
    sample_from_paillier_key,
)
from mpecdsa.zkproofs import DLogStatement


@pytest.fixture(scope="module")
def setup():
    ek_tilde, dk_tilde = paillier.keypair(512)
    phi = dk_tilde.phi
    h1 = paillier.sample_below(ek_tilde.n)
    while True:
        xhi = paillier.sample_below(phi)
        if gcd(xhi, phi) == 1:
            break
    h2 = pow(h1, xhi, ek_tilde.n)
    ek, dk = paillier.keypair(1024)
    return DLogStatement(n=ek_tilde.n, g=h1, ni=h2), ek, dk


def _alice(ek):
    a = Scalar.random().to_int()
    r = sample_from_paillier_key(ek)
    cipher = paillier.encrypt_with_randomness(ek, a, r)
    return a, r, cipher


def _mta(ek):
    a = Scalar.random().to_int()
    encrypted_a = paillier.encrypt(ek, a)
    b = Scalar.random()
    b_times_enc_a = paillier.mul(ek, encrypted_a, b.to_int())
    beta_prim = paillier.sample_below(ek.n)
    r = paillier.sample_randomness(ek)
    enc_beta_prim = paillier.encrypt_with_randomness(ek, beta_prim, r)
    mta_out = paillier.add(ek, b_times_enc_a, enc_beta_prim)
    return encrypted_a, mta_out, b, beta_prim, r


def test_alice_zkp(setup):
    dlog_statement, ek, _ = setup
    a, r, cipher = _alice(ek)
    proof = AliceProof.generate(a, cipher, ek, dlog_statement, r)
    assert proof.verify(cipher, ek, dlog_statement) is True


def test_alice_zkp_rejects_other_ciphertext(setup):
    dlog_statement, ek, _ = setup
    a, r, cipher = _alice(ek)
    proof = AliceProof.generate(a, cipher, ek, dlog_statement, r)
    other = paillier.encrypt(ek, a)
    assert proof.verify(other, ek, dlog_statement) is False


def test_alice_zkp_rejects_large_s1(setup):
    dlog_statement, ek, _ = setup
    a, r, cipher = _alice(ek)
    proof = AliceProof.generate(a, cipher, ek, dlog_statement, r)
    forged = dataclasses.replace(proof, s1=CURVE_ORDER**3 + 1)
    assert forged.verify(cipher, ek, dlog_statement) is False


def test_alice_zkp_rejects_non_invertible_z(setup):
    dlog_statement, ek, _ = setup
    a, r, cipher = _alice(ek)
    proof = AliceProof.generate(a, cipher, ek, dlog_statement, r)
    forged = dataclasses.replace(proof, z=0)
    assert forged.verify(cipher, ek, dlog_statement) is False


@pytest.mark.parametrize("round_", range(3))
def test_bob_zkp(setup, round_):
    dlog_statement, ek, _ = setup
    encrypted_a, mta_out, b, beta_prim, r = _mta(ek)

    proof, u = BobProof.generate(
        encrypted_a, mta_out, b, beta_prim, ek, dlog_statement, r, False
    )
    assert u is None
    assert proof.verify(encrypted_a, mta_out, ek, dlog_statement, None) is True

    ext = BobProofExt.generate(encrypted_a, mta_out, b, beta_prim, ek, dlog_statement, r)
    X = Point.generator() * b
    assert ext.verify(encrypted_a, mta_out, ek, dlog_statement, X) is True


def test_bob_proof_with_check_needs_check_to_verify(setup):
    dlog_statement, ek, _ = setup
    encrypted_a, mta_out, b, beta_prim, r = _mta(ek)
    proof, u = BobProof.generate(
        encrypted_a, mta_out, b, beta_prim, ek, dlog_statement, r, True
    )
    X = Point.generator() * b
    assert proof.verify(encrypted_a, mta_out, ek, dlog_statement, BobCheck(u=u, X=X))
    assert proof.verify(encrypted_a, mta_out, ek, dlog_statement, None) is False


def test_bob_proof_rejects_other_output(setup):
    dlog_statement, ek, _ = setup
    encrypted_a, mta_out, b, beta_prim, r = _mta(ek)
    proof, _ = BobProof.generate(
        encrypted_a, mta_out, b, beta_prim, ek, dlog_statement, r, False
    )
    tampered = paillier.add(ek, mta_out, paillier.encrypt(ek, 1))
    assert proof.verify(encrypted_a, tampered, ek, dlog_statement, None) is False


def test_bob_ext_rejects_wrong_public_point(setup):
    dlog_statement, ek, _ = setup
    encrypted_a, mta_out, b, beta_prim, r = _mta(ek)
    ext = BobProofExt.generate(encrypted_a, mta_out, b, beta_prim, ek, dlog_statement, r)
    wrong_x = Point.generator() * (b + 1)
    assert ext.verify(encrypted_a, mta_out, ek, dlog_statement, wrong_x) is False


def test_sample_from_modulo_is_unit():
    n = 3 * 5 * 7 * 11
    values = [sample_from_modulo(n) for _ in range(50)]
    assert all(gcd(v, n) == 1 and 0 <= v < n for v in values)


def test_sample_from_paillier_key_is_unit(setup):
    _, ek, _ = setup
    value = sample_from_paillier_key(ek)
    assert gcd(value, ek.n) == 1
    assert 0 < value < ek.n