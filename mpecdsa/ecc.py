"""Arithmetic on the secp256k1 curve: scalars modulo the group order and points."""

from __future__ import annotations

import hashlib
import secrets
from functools import lru_cache

FIELD_PRIME = 2**256 - 2**32 - 977
CURVE_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
CURVE_B = 7
_GX = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798
_GY = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8

_INFINITY = (1, 1, 0)


def int_from_bytes(data: bytes) -> int:
    """Read an unsigned big-endian integer."""
    return int.from_bytes(data, "big")


def int_to_bytes(value: int) -> bytes:
    """Write a non-negative integer as minimal big-endian bytes."""
    if value < 0:
        raise ValueError("cannot encode a negative integer")
    return value.to_bytes((value.bit_length() + 7) // 8, "big")


class Scalar:
    """An element of the scalar field of secp256k1."""

    __slots__ = ("_value",)

    def __init__(self, value: int = 0) -> None:
        self._value = int(value) % CURVE_ORDER

    @classmethod
    def random(cls) -> Scalar:
        return cls(secrets.randbelow(CURVE_ORDER - 1) + 1)

    def invert(self) -> Scalar | None:
        """Multiplicative inverse, or None for zero."""
        if self._value == 0:
            return None
        return Scalar(pow(self._value, -1, CURVE_ORDER))

    def to_int(self) -> int:
        return self._value

    def is_zero(self) -> bool:
        return self._value == 0

    def __int__(self) -> int:
        return self._value

    @staticmethod
    def _coerce(other) -> int | None:
        if isinstance(other, Scalar):
            return other._value
        if isinstance(other, int) and not isinstance(other, bool):
            return other
        return None

    def __add__(self, other):
        value = self._coerce(other)
        if value is None:
            return NotImplemented
        return Scalar(self._value + value)

    __radd__ = __add__

    def __sub__(self, other):
        value = self._coerce(other)
        if value is None:
            return NotImplemented
        return Scalar(self._value - value)

    def __rsub__(self, other):
        value = self._coerce(other)
        if value is None:
            return NotImplemented
        return Scalar(value - self._value)

    def __mul__(self, other):
        if isinstance(other, Point):
            return other * self
        value = self._coerce(other)
        if value is None:
            return NotImplemented
        return Scalar(self._value * value)

    __rmul__ = __mul__

    def __neg__(self) -> Scalar:
        return Scalar(-self._value)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Scalar):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(("Scalar", self._value))

    def __repr__(self) -> str:
        return f"Scalar({self._value:#x})"


def _jacobian_double(pt):
    x, y, z = pt
    if z == 0 or y == 0:
        return _INFINITY
    p = FIELD_PRIME
    yy = y * y % p
    s = 4 * x * yy % p
    m = 3 * x * x % p
    nx = (m * m - 2 * s) % p
    ny = (m * (s - nx) - 8 * yy * yy) % p
    nz = 2 * y * z % p
    return nx, ny, nz


def _jacobian_add(a, b):
    x1, y1, z1 = a
    x2, y2, z2 = b
    if z1 == 0:
        return b
    if z2 == 0:
        return a
    p = FIELD_PRIME
    z1z1 = z1 * z1 % p
    z2z2 = z2 * z2 % p
    u1 = x1 * z2z2 % p
    u2 = x2 * z1z1 % p
    s1 = y1 * z2 * z2z2 % p
    s2 = y2 * z1 * z1z1 % p
    if u1 == u2:
        if s1 != s2:
            return _INFINITY
        return _jacobian_double(a)
    h = (u2 - u1) % p
    r = (s2 - s1) % p
    hh = h * h % p
    hhh = h * hh % p
    v = u1 * hh % p
    x3 = (r * r - hhh - 2 * v) % p
    y3 = (r * (v - x3) - s1 * hhh) % p
    z3 = h * z1 * z2 % p
    return x3, y3, z3


def _to_jacobian(xy):
    return _INFINITY if xy is None else (xy[0], xy[1], 1)


def _to_affine(pt):
    x, y, z = pt
    if z == 0:
        return None
    zi = pow(z, -1, FIELD_PRIME)
    zi2 = zi * zi % FIELD_PRIME
    return x * zi2 % FIELD_PRIME, y * zi2 * zi % FIELD_PRIME


def _lift_x(x: int, odd: bool) -> int | None:
    rhs = (pow(x, 3, FIELD_PRIME) + CURVE_B) % FIELD_PRIME
    y = pow(rhs, (FIELD_PRIME + 1) // 4, FIELD_PRIME)
    if y * y % FIELD_PRIME != rhs:
        return None
    return y if (y & 1) == odd else FIELD_PRIME - y


def _on_curve(x: int, y: int) -> bool:
    return (y * y - pow(x, 3, FIELD_PRIME) - CURVE_B) % FIELD_PRIME == 0


@lru_cache(maxsize=None)
def _base_point2_coords() -> tuple[int, int]:
    seed = hashlib.sha256(Point.generator().to_bytes(True)).digest()
    counter = 0
    while True:
        digest = hashlib.sha256(seed + counter.to_bytes(4, "big")).digest()
        x = int_from_bytes(digest) % FIELD_PRIME
        y = _lift_x(x, odd=False)
        if y is not None:
            return x, y
        counter += 1


class Point:
    """A point of secp256k1; Point() is the point at infinity."""

    __slots__ = ("_xy",)

    def __init__(self, x: int | None = None, y: int | None = None) -> None:
        if (x is None) != (y is None):
            raise ValueError("both coordinates or neither must be given")
        if x is None:
            self._xy = None
            return
        if not (0 <= x < FIELD_PRIME and 0 <= y < FIELD_PRIME) or not _on_curve(x, y):
            raise ValueError("point is not on secp256k1")
        self._xy = (x, y)

    @classmethod
    def _trusted(cls, xy) -> Point:
        point = object.__new__(cls)
        point._xy = xy
        return point

    @classmethod
    def zero(cls) -> Point:
        return cls._trusted(None)

    @classmethod
    def generator(cls) -> Point:
        return cls._trusted((_GX, _GY))

    @classmethod
    def base_point2(cls) -> Point:
        """A second generator whose discrete log with respect to G is unknown."""
        return cls._trusted(_base_point2_coords())

    @property
    def is_zero(self) -> bool:
        return self._xy is None

    @property
    def x(self) -> int | None:
        return None if self._xy is None else self._xy[0]

    @property
    def y(self) -> int | None:
        return None if self._xy is None else self._xy[1]

    def to_bytes(self, compressed: bool = True) -> bytes:
        if self._xy is None:
            return b"\x00"
        x, y = self._xy
        if compressed:
            return bytes([2 + (y & 1)]) + x.to_bytes(32, "big")
        return b"\x04" + x.to_bytes(32, "big") + y.to_bytes(32, "big")

    @classmethod
    def from_bytes(cls, data: bytes) -> Point:
        data = bytes(data)
        if data == b"\x00":
            return cls.zero()
        if len(data) == 33 and data[0] in (2, 3):
            x = int_from_bytes(data[1:])
            if x >= FIELD_PRIME:
                raise ValueError("x coordinate out of range")
            y = _lift_x(x, odd=data[0] == 3)
            if y is None:
                raise ValueError("no point with this x coordinate")
            return cls._trusted((x, y))
        if len(data) == 65 and data[0] == 4:
            return cls(int_from_bytes(data[1:33]), int_from_bytes(data[33:]))
        raise ValueError("malformed point encoding")

    def __add__(self, other):
        if not isinstance(other, Point):
            return NotImplemented
        total = _jacobian_add(_to_jacobian(self._xy), _to_jacobian(other._xy))
        return Point._trusted(_to_affine(total))

    def __neg__(self) -> Point:
        if self._xy is None:
            return self
        x, y = self._xy
        return Point._trusted((x, (-y) % FIELD_PRIME))

    def __sub__(self, other):
        if not isinstance(other, Point):
            return NotImplemented
        return self + (-other)

    def __mul__(self, other):
        if isinstance(other, Scalar):
            k = other.to_int()
        elif isinstance(other, int) and not isinstance(other, bool):
            k = other % CURVE_ORDER
        else:
            return NotImplemented
        if k == 0 or self._xy is None:
            return Point.zero()
        addend = _to_jacobian(self._xy)
        result = _INFINITY
        for bit in bin(k)[2:]:
            result = _jacobian_double(result)
            if bit == "1":
                result = _jacobian_add(result, addend)
        return Point._trusted(_to_affine(result))

    __rmul__ = __mul__

    def __eq__(self, other) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self._xy == other._xy

    def __hash__(self) -> int:
        return hash(("Point", self._xy))

    def __repr__(self) -> str:
        if self._xy is None:
            return "Point()"
        return f"Point({self._xy[0]:#x}, {self._xy[1]:#x})"