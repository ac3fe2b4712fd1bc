"""Two-party ECDSA over secp256k1 with Paillier-based MtA and zero-knowledge proofs."""

__version__ = "0.8.1"