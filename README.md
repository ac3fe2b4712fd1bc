# mpecdsa

Two-party ECDSA signing over secp256k1. Party one holds its share of the key
together with a Paillier key under which that share is encrypted. Party two
holds the other share and the ciphertext. Together they produce an ordinary
ECDSA signature, and neither of them ever sees the whole key.

The package also contains the building blocks the protocol uses:

- `mpecdsa.ecc`: secp256k1 `Scalar` and `Point` arithmetic, with
  `int_from_bytes` and `int_to_bytes`.
- `mpecdsa.paillier`: Paillier `keypair`, `encrypt`, `decrypt`, homomorphic
  `add` and `mul`, and the sampling helpers (`sample_below`, `sample_bits`,
  `sample_range`, `sample_coprime`, `sample_randomness`).
- `mpecdsa.sigma`: Schnorr discrete-log proofs (`DLogProof`), EC-DDH proofs
  (`ECDDHProof`), `hash_commitment`, `hash_bigints` and `hash_points`.
- `mpecdsa.zkproofs`: composite discrete-log proofs (`CompositeDLogProof`
  over a `DLogStatement`), proofs that a Paillier key is correct
  (`NiCorrectKeyProof`) and Paillier range proofs (`RangeProofNi`).
- `mpecdsa.range_proofs`: Alice's and Bob's range proofs for MtA
  (`AliceProof`, `BobProof`, `BobProofExt`).
- `mpecdsa.mta`: multiplicative-to-additive share conversion (`MessageA`,
  `MessageB`).
- `mpecdsa.zk_pdl`: an interactive `Prover`/`Verifier` proof that a Paillier
  ciphertext decrypts to the discrete log of a curve point.
- `mpecdsa.zk_pdl_with_slack`: a non-interactive proof of the same statement
  with slack in the range (`PDLwSlackProof`).
- `mpecdsa.lindell.party_one` and `mpecdsa.lindell.party_two`: the two sides
  of key generation and signing.

It is written in pure Python and needs nothing outside the standard library.

## Install

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Key generation

```python
from mpecdsa.lindell import party_one, party_two

p1_msg1, comm_witness, p1_keys = party_one.KeyGenFirstMsg.create_commitments()
p2_msg1, p2_keys = party_two.KeyGenFirstMsg.create()

p1_msg2 = party_one.KeyGenSecondMsg.verify_and_decommit(
    comm_witness, p2_msg1.d_log_proof
)
party_two.KeyGenSecondMsg.verify_commitments_and_dlog_proof(p1_msg1, p1_msg2)

paillier_keys = party_one.PaillierKeyPair.generate_keypair_and_encrypted_share(p1_keys)
p1_private = party_one.Party1Private.set_private_key(p1_keys, paillier_keys)

p2_paillier = party_two.PaillierPublic(
    ek=paillier_keys.ek,
    encrypted_secret_share=paillier_keys.encrypted_share,
)

# Party one proves that its Paillier key is well formed ...
key_proof = party_one.PaillierKeyPair.generate_ni_proof_correct_key(paillier_keys)
party_two.PaillierPublic.verify_ni_proof_correct_key(key_proof, p2_paillier.ek)

# ... and that the ciphertext holds its key share.
statement, proof, dlog_proof = party_one.PaillierKeyPair.pdl_proof(p1_private, paillier_keys)
party_two.PaillierPublic.pdl_verify(
    dlog_proof, statement, proof, p2_paillier, p1_msg2.comm_witness.public_share
)
```

`verify_ni_proof_correct_key` rejects a Paillier modulus shorter than 2047
bits. `paillier.keypair()` makes 2048-bit keys by default.

A failed check raises an exception. All of them derive from
`mpecdsa.errors.ProtocolError`:

- `ProofError` from `mpecdsa.sigma`
- `IncorrectProof` from `mpecdsa.zkproofs`
- `PartyTwoError` from `mpecdsa.lindell.party_two`
- `ZkPdlError` from `mpecdsa.zk_pdl`
- `ZkPdlWithSlackError` from `mpecdsa.zk_pdl_with_slack`
- `InvalidKey` and `InvalidSig` from `mpecdsa.errors`

Party one can later multiply its share by a factor under a fresh Paillier key
with `Party1Private.refresh_private_key`. This returns the new key, the
ciphertext, the proofs and the new private state. Party two does the same on
its side with `Party2Private.update_private_key`.

## Signing

```python
eph_p2_msg1, eph_witness, eph_p2_keys = party_two.EphKeyGenFirstMsg.create_commitments()
eph_p1_msg1, eph_p1_keys = party_one.EphKeyGenFirstMsg.create()

eph_p2_msg2 = party_two.EphKeyGenSecondMsg.verify_and_decommit(eph_witness, eph_p1_msg1)
party_one.EphKeyGenSecondMsg.verify_commitments_and_dlog_proof(eph_p2_msg1, eph_p2_msg2)

p2_private = party_two.Party2Private.set_private_key(p2_keys)
message = 1234

partial = party_two.PartialSig.compute(
    paillier_keys.ek,
    paillier_keys.encrypted_share,
    p2_private,
    eph_p2_keys,
    eph_p1_msg1.public_share,
    message,
)

signature = party_one.Signature.compute(
    p1_private,
    partial.c3,
    eph_p1_keys,
    eph_p2_msg2.comm_witness.public_share,
)

pubkey = party_one.compute_pubkey(p1_private, p2_msg1.public_share)
party_one.verify(signature, pubkey, message)  # raises InvalidSig if it does not verify
```

`Signature.compute_with_recid` returns a `SignatureRecid`. It also carries the
recovery id: the parity of R's y coordinate, flipped when `s` was negated.
Signatures are always produced in low-`s` form, and `verify` accepts only
that form.

## MtA on its own

```python
from mpecdsa import mta, paillier
from mpecdsa.ecc import Scalar

ek, dk = paillier.keypair(2048)
a, b = Scalar.random(), Scalar.random()

m_a, _ = mta.MessageA.a(a, ek, [])
m_b, beta, _, _ = mta.MessageB.b(b, ek, m_a, [])
alpha, _ = m_b.verify_proofs_get_alpha(dk, a)
# alpha + beta == a * b
```

To attach Alice's range proofs and check them, pass a list of
`DLogStatement`s from `mpecdsa.zkproofs` to `MessageA.a` and `MessageB.b`.
`MessageB.b` raises `InvalidKey` when the number of proofs does not match the
number of statements, or when a proof fails.

The lindell parties can take part in MtA with their key shares.
`Party2Private.to_mta_message_b` answers an encrypted share as Bob, and
`Party1Private.to_mta_message_b` finishes the exchange as Alice.

## What it does not do

- It carries no messages between the parties. Every message is a plain
  frozen dataclass, and moving it from one party to the other is left to the
  caller.
- It has no serialisation format, no storage for keys and no command-line
  tool.
- `paillier.keypair` and `generate_h1_h2_n_tilde` use ordinary random primes,
  not safe primes.

## Note

This is a pure Python implementation. It is slow: making a 2048-bit Paillier
key can take seconds. Big-integer arithmetic in Python does not run in
constant time. The package suits experiments, testing and reference use, not
the protection of real funds.