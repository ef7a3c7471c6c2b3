"""Functions that don't belong to one of the protocol components."""

from __future__ import annotations

from .errors import DomainOutOfRange


def to_bits(integer: int, bit_length: int) -> list[int]:
    """
    Convert a given integer to a list of bits, with the least significant bit first, and the most
    significant bit last.

    :param integer: Integer to be converted to bits.
    :param bit_length: Amount of bits to which the integer should be converted.
    :return: Bit representation of the integer in bit_length bits. Least significant bit first,
        most significant last.
    """
    assert 0 <= integer < (1 << bit_length)
    bits = [0 for _ in range(bit_length)]
    for bit_index in range(bit_length):
        bits[bit_index] = integer & 1
        integer >>= 1
    return bits


def half_modulus(modulus: int) -> int:
    r"""
    The largest absolute value that is representable in $\mathbb{Z}_p$ as a signed integer.

    :param modulus: Odd plaintext modulus $p$.
    :return: $(p - 1) / 2$.
    """
    return (modulus - 1) // 2


def to_signed(value: int, modulus: int) -> int:
    r"""
    Map a residue to its signed representative in $[-(p-1)/2, (p-1)/2]$.

    :param value: Any integer.
    :param modulus: Odd plaintext modulus $p$.
    :return: The representative of value mod $p$ closest to zero.
    """
    value %= modulus
    if value > half_modulus(modulus):
        return value - modulus
    return value


def check_in_domain(value: int, modulus: int) -> int:
    r"""
    Check that a plaintext integer can be encoded in $\mathbb{Z}_p$ without ambiguity.

    :param value: Integer supplied by a caller.
    :param modulus: Odd plaintext modulus $p$.
    :return: The value itself.
    :raise DomainOutOfRange: raised when value lies outside $[-(p-1)/2, (p-1)/2]$.
    """
    bound = half_modulus(modulus)
    if not -bound <= value <= bound:
        raise DomainOutOfRange(
            f"Integer {value} is outside the plaintext domain [{-bound}, {bound}] of p={modulus}."
        )
    return value


def encode_text(text: str, modulus: int) -> list[int]:
    """
    Encode a string as the list of its code points, such that two words can be compared
    slot-wise.

    :param text: Word to encode.
    :param modulus: Odd plaintext modulus $p$.
    :return: Code points of the characters of text.
    :raise DomainOutOfRange: raised when a character does not fit in the plaintext domain.
    """
    return [check_in_domain(ord(character), modulus) for character in text]
