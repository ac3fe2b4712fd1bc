"""Zero-knowledge range proofs for the multiplicative-to-additive protocol.

Alice proves that her Paillier ciphertext holds a small plaintext. Bob proves
that his answer to it was formed correctly. Both proofs are non-interactive,
with the challenge derived by Fiat-Shamir. Bob's ``gamma`` is drawn from
``[0, q^2 * N)`` and ``tau`` from ``[0, q^3 * N_tilde)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import gcd

from .ecc import CURVE_ORDER, Point, Scalar
from .paillier import EncryptionKey, sample_below
from .sigma import hash_bigints
from .zkproofs import DLogStatement

_Q = CURVE_ORDER
_Q3 = _Q**3


def sample_from_modulo(n: int) -> int:
    """Uniform element of the multiplicative group modulo n."""
    while True:
        r = sample_below(n)
        if gcd(r, n) == 1:
            return r


def sample_from_paillier_key(ek: EncryptionKey) -> int:
    """Uniform unit modulo the Paillier modulus of ``ek``."""
    return sample_from_modulo(ek.n)


def _inverse_or_none(value: int, modulus: int) -> int | None:
    try:
        return pow(value, -1, modulus)
    except ValueError:
        return None


def _pedersen(h1: int, h2: int, n_tilde: int, x: int, r: int) -> int:
    return pow(h1, x, n_tilde) * pow(h2, r, n_tilde) % n_tilde


def _point_coords(point: Point) -> tuple[int, int]:
    if point.is_zero:
        raise ValueError("point at infinity has no coordinates")
    return point.x, point.y


@dataclass(frozen=True)
class AliceProof:
    """Proof that Alice's ciphertext encrypts a value below q^3."""

    z: int
    e: int
    s: int
    s1: int
    s2: int

    @staticmethod
    def _challenge(n: int, cipher: int, z: int, u: int, w: int) -> int:
        return hash_bigints(n, n + 1, cipher, z, u, w)

    @classmethod
    def generate(
        cls,
        a: int,
        cipher: int,
        alice_ek: EncryptionKey,
        dlog_statement: DLogStatement,
        r: int,
    ) -> AliceProof:
        """Prove that ``cipher`` encrypts ``a`` with randomness ``r``."""
        h1, h2, n_tilde = dlog_statement.g, dlog_statement.ni, dlog_statement.n
        n, nn = alice_ek.n, alice_ek.nn

        alpha = sample_below(_Q3)
        beta = sample_from_paillier_key(alice_ek)
        gamma = sample_below(_Q3 * n_tilde)
        ro = sample_below(_Q * n_tilde)
        z = _pedersen(h1, h2, n_tilde, a, ro)
        u = (alpha * n + 1) * pow(beta, n, nn) % nn
        w = _pedersen(h1, h2, n_tilde, alpha, gamma)

        e = cls._challenge(n, cipher, z, u, w)
        return cls(
            z=z,
            e=e,
            s=pow(r, e, n) * beta % n,
            s1=e * a + alpha,
            s2=e * ro + gamma,
        )

    def verify(
        self, cipher: int, alice_ek: EncryptionKey, dlog_statement: DLogStatement
    ) -> bool:
        n, nn = alice_ek.n, alice_ek.nn
        h1, h2, n_tilde = dlog_statement.g, dlog_statement.ni, dlog_statement.n

        if self.s1 > _Q3:
            return False
        z_e_inv = _inverse_or_none(pow(self.z, self.e, n_tilde), n_tilde)
        if z_e_inv is None:
            return False
        w = pow(h1, self.s1, n_tilde) * pow(h2, self.s2, n_tilde) * z_e_inv % n_tilde

        cipher_e_inv = _inverse_or_none(pow(cipher, self.e, nn), nn)
        if cipher_e_inv is None:
            return False
        gs1 = (self.s1 * n + 1) % nn
        u = gs1 * pow(self.s, n, nn) * cipher_e_inv % nn

        return self._challenge(n, cipher, self.z, u, w) == self.e


@dataclass(frozen=True)
class BobCheck:
    """Extra values bound into Bob's challenge when MtA runs with a check."""

    u: Point
    X: Point


def _bob_challenge(values: list[int], check: BobCheck | None) -> int:
    if check is not None:
        values = [*values, *_point_coords(check.X), *_point_coords(check.u)]
    return hash_bigints(*values)


@dataclass(frozen=True)
class BobProof:
    """Proof that Bob's MtA ciphertext is b * E(a) + E(beta') with small b."""

    t: int
    z: int
    e: int
    s: int
    s1: int
    s2: int
    t1: int
    t2: int

    def verify(
        self,
        a_enc: int,
        mta_avc_out: int,
        alice_ek: EncryptionKey,
        dlog_statement: DLogStatement,
        check: BobCheck | None = None,
    ) -> bool:
        n, nn = alice_ek.n, alice_ek.nn
        h1, h2, n_tilde = dlog_statement.g, dlog_statement.ni, dlog_statement.n

        if self.s1 > _Q3:
            return False
        z_e_inv = _inverse_or_none(pow(self.z, self.e, n_tilde), n_tilde)
        if z_e_inv is None:
            return False
        z_prim = (
            pow(h1, self.s1, n_tilde) * pow(h2, self.s2, n_tilde) * z_e_inv % n_tilde
        )

        mta_e_inv = _inverse_or_none(pow(mta_avc_out, self.e, nn), nn)
        if mta_e_inv is None:
            return False
        v = (
            pow(a_enc, self.s1, nn)
            * pow(self.s, n, nn)
            * (self.t1 * n + 1)
            * mta_e_inv
            % nn
        )

        t_e_inv = _inverse_or_none(pow(self.t, self.e, n_tilde), n_tilde)
        if t_e_inv is None:
            return False
        w = pow(h1, self.t1, n_tilde) * pow(h2, self.t2, n_tilde) * t_e_inv % n_tilde

        values = [n, n + 1, a_enc, mta_avc_out, self.z, z_prim, self.t, v, w]
        if check is not None and (check.X.is_zero or check.u.is_zero):
            return False
        return _bob_challenge(values, check) == self.e

    @classmethod
    def generate(
        cls,
        a_encrypted: int,
        mta_encrypted: int,
        b: Scalar,
        beta_prim: int,
        alice_ek: EncryptionKey,
        dlog_statement: DLogStatement,
        r: int,
        check: bool,
    ) -> tuple[BobProof, Point | None]:
        """Build the proof; with ``check`` also return the point u = alpha*G."""
        h1, h2, n_tilde = dlog_statement.g, dlog_statement.ni, dlog_statement.n
        n, nn = alice_ek.n, alice_ek.nn
        b_bn = b.to_int()

        alpha = sample_below(_Q3)
        beta = sample_from_paillier_key(alice_ek)
        gamma = sample_below(_Q**2 * n)
        ro = sample_below(_Q * n_tilde)
        ro_prim = sample_below(_Q3 * n_tilde)
        sigma = sample_below(_Q * n_tilde)
        tau = sample_below(_Q3 * n_tilde)
        z = _pedersen(h1, h2, n_tilde, b_bn, ro)
        z_prim = _pedersen(h1, h2, n_tilde, alpha, ro_prim)
        t = _pedersen(h1, h2, n_tilde, beta_prim, sigma)
        w = _pedersen(h1, h2, n_tilde, gamma, tau)
        v = pow(a_encrypted, alpha, nn) * (gamma * n + 1) * pow(beta, n, nn) % nn

        values = [n, n + 1, a_encrypted, mta_encrypted, z, z_prim, t, v, w]
        check_u = None
        bob_check = None
        if check:
            generator = Point.generator()
            check_u = generator * Scalar(alpha)
            bob_check = BobCheck(u=check_u, X=generator * b)
        e = _bob_challenge(values, bob_check)

        proof = cls(
            t=t,
            z=z,
            e=e,
            s=pow(r, e, n) * beta % n,
            s1=e * b_bn + alpha,
            s2=e * ro + ro_prim,
            t1=e * beta_prim + gamma,
            t2=e * sigma + tau,
        )
        return proof, check_u


@dataclass(frozen=True)
class BobProofExt:
    """Bob's proof extended with knowledge of b for the public point X = b*G."""

    proof: BobProof
    u: Point

    @classmethod
    def generate(
        cls,
        a_encrypted: int,
        mta_encrypted: int,
        b: Scalar,
        beta_prim: int,
        alice_ek: EncryptionKey,
        dlog_statement: DLogStatement,
        r: int,
    ) -> BobProofExt:
        proof, u = BobProof.generate(
            a_encrypted,
            mta_encrypted,
            b,
            beta_prim,
            alice_ek,
            dlog_statement,
            r,
            True,
        )
        return cls(proof=proof, u=u)

    def verify(
        self,
        a_enc: int,
        mta_avc_out: int,
        alice_ek: EncryptionKey,
        dlog_statement: DLogStatement,
        X: Point,
    ) -> bool:
        if not self.proof.verify(
            a_enc, mta_avc_out, alice_ek, dlog_statement, BobCheck(u=self.u, X=X)
        ):
            return False
        x1 = Point.generator() * Scalar(self.proof.s1)
        x2 = X * Scalar(self.proof.e) + self.u
        return x1 == x2