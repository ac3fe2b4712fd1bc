import pytest

from mpecdsa.ecc import (
    CURVE_ORDER,
    Point,
    Scalar,
    int_from_bytes,
    int_to_bytes,
)

G = Point.generator()


def test_generator_compressed_encoding():
    expected = bytes.fromhex(
        "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
    )
    assert G.to_bytes(True) == expected


def test_uncompressed_round_trip():
    data = G.to_bytes(False)
    assert len(data) == 65
    assert data[0] == 4
    assert Point.from_bytes(data) == G


def test_compressed_round_trip_random_point():
    point = G * Scalar.random()
    assert Point.from_bytes(point.to_bytes(True)) == point


def test_zero_round_trip():
    restored = Point.from_bytes(Point.zero().to_bytes())
    assert restored == Point.zero()
    assert restored.is_zero is True


def test_doubling_matches_addition():
    assert G * 2 == G + G
    assert G * Scalar(3) == G + G + G


def test_distributive():
    a, b = Scalar.random(), Scalar.random()
    assert G * (a + b) == G * a + G * b
    assert (G * a) * b == G * (a * b)


def test_order_annihilates():
    assert G * (CURVE_ORDER - 1) + G == Point.zero()
    assert G * Scalar(0) == Point.zero()
    assert G.is_zero is False


def test_negation_and_subtraction():
    assert G - G == Point.zero()
    assert -G + G == Point.zero()
    assert -(-G) == G


def test_scalar_times_point_commutes():
    s = Scalar.random()
    assert s * G == G * s


def test_base_point2_is_valid_and_distinct():
    h = Point.base_point2()
    assert Point.from_bytes(h.to_bytes(False)) == h
    assert h != G
    assert Point.base_point2() == h


def test_invalid_point_rejected():
    with pytest.raises(ValueError):
        Point(1, 1)


def test_malformed_bytes_rejected():
    with pytest.raises(ValueError):
        Point.from_bytes(b"\x05" + bytes(32))


def test_scalar_invert():
    s = Scalar.random()
    assert s * s.invert() == Scalar(1)
    assert Scalar(0).invert() is None


def test_scalar_reduces_modulo_order():
    assert Scalar(CURVE_ORDER + 5).to_int() == 5
    assert (Scalar(0) - Scalar(1)).to_int() == CURVE_ORDER - 1


def test_random_scalar_in_range():
    s = Scalar.random()
    assert 0 < s.to_int() < CURVE_ORDER


def test_int_bytes_round_trip():
    value = 2**200 + 12345
    assert int_from_bytes(int_to_bytes(value)) == value
    assert int_to_bytes(256) == b"\x01\x00"


def test_int_to_bytes_rejects_negative():
    with pytest.raises(ValueError):
        int_to_bytes(-1)