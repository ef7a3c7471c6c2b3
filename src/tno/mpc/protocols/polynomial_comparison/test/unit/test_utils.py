"""
Unit tests for the helper functions of the tno.mpc.protocols.polynomial_comparison library.
"""

from __future__ import annotations

import pytest

from tno.mpc.protocols.polynomial_comparison import DomainOutOfRange, encode_text
from tno.mpc.protocols.polynomial_comparison.utils import (
    check_in_domain,
    half_modulus,
    to_bits,
    to_signed,
)

BIT_LENGTH = 9


@pytest.mark.parametrize("number", [0, 1, 2, 5, 128, 255, 256, 511])
def test_bit_conversion(number: int) -> None:
    """
    Assert that the bits of a non-negative integer match its binary notation, read from the
    least significant end.

    :param number: Number to be converted.
    """
    expected = [int(bit) for bit in reversed(bin(number)[2:].zfill(BIT_LENGTH))]
    assert to_bits(number, BIT_LENGTH) == expected


def test_to_bits_least_significant_first() -> None:
    """
    Assert that the least significant bit comes first.
    """
    assert to_bits(6, 4) == [0, 1, 1, 0]


@pytest.mark.parametrize(
    "value, modulus, expected",
    [
        (0, 257, 0),
        (128, 257, 128),
        (129, 257, -128),
        (256, 257, -1),
        (-1, 257, -1),
        (260, 257, 3),
    ],
)
def test_to_signed(value: int, modulus: int, expected: int) -> None:
    """
    Assert that residues are mapped to the representative closest to zero.

    :param value: Residue.
    :param modulus: Plaintext modulus.
    :param expected: Signed representative.
    """
    assert to_signed(value, modulus) == expected


@pytest.mark.parametrize("value", [-128, -1, 0, 1, 128])
def test_check_in_domain_accepts(value: int) -> None:
    """
    Assert that values within the signed domain are accepted.

    :param value: Value to check.
    """
    assert check_in_domain(value, 257) == value


@pytest.mark.parametrize("value", [-129, 129, 256, -1000])
def test_check_in_domain_rejects(value: int) -> None:
    """
    Assert that values outside the signed domain raise a DomainOutOfRange, which is also a
    ValueError.

    :param value: Value to check.
    """
    with pytest.raises(DomainOutOfRange):
        check_in_domain(value, 257)
    with pytest.raises(ValueError):
        check_in_domain(value, 257)


def test_half_modulus() -> None:
    """
    Assert that the bound of the signed domain is (p-1)/2.
    """
    assert half_modulus(257) == 128
    assert half_modulus(7) == 3


def test_encode_text() -> None:
    """
    Assert that a word is encoded as its code points.
    """
    assert encode_text("hola", 257) == [104, 111, 108, 97]


def test_encode_text_rejects_characters_outside_domain() -> None:
    """
    Assert that a character with a code point above (p-1)/2 is rejected.
    """
    with pytest.raises(DomainOutOfRange):
        encode_text("ñ", 257)
