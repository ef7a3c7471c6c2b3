r"""
Polynomial arithmetic over the finite field $\mathbb{Z}_p$ and Lagrange interpolation.

Polynomials are lists of coefficients, the constant term first. Interpolation points are lists of
pairs $(x_i, f(x_i))$; any integer representatives are accepted and reduced modulo $p$.
"""

from __future__ import annotations

import logging

from tno.mpc.encryption_schemes.utils import pow_mod

from .errors import DivisionUndefined
from .utils import to_bits

logger = logging.getLogger(__name__)

Points = list[tuple[int, int]]


def poly_mul(poly_a: list[int], poly_b: list[int], modulus: int) -> list[int]:
    """
    Multiply two polynomials modulo $p$.

    :param poly_a: First polynomial.
    :param poly_b: Second polynomial.
    :param modulus: Prime modulus $p$.
    :return: Product polynomial of length len(poly_a) + len(poly_b) - 1.
    """
    product = [0] * (len(poly_a) + len(poly_b) - 1)
    for i, coefficient_a in enumerate(poly_a):
        for j, coefficient_b in enumerate(poly_b):
            product[i + j] = (product[i + j] + coefficient_a * coefficient_b) % modulus
    return product


def poly_add(poly_a: list[int], poly_b: list[int], modulus: int) -> list[int]:
    """
    Add two polynomials modulo $p$. Missing coefficients of the shorter polynomial count as zero.

    :param poly_a: First polynomial.
    :param poly_b: Second polynomial.
    :param modulus: Prime modulus $p$.
    :return: Sum polynomial of length max(len(poly_a), len(poly_b)).
    """
    length = max(len(poly_a), len(poly_b))
    poly_a = poly_a + [0] * (length - len(poly_a))
    poly_b = poly_b + [0] * (length - len(poly_b))
    return [(a + b) % modulus for a, b in zip(poly_a, poly_b)]


def normalize(poly: list[int], modulus: int) -> list[int]:
    """
    Map every coefficient to its representative in $[0, p-1]$.

    :param poly: Polynomial with arbitrary integer coefficients.
    :param modulus: Prime modulus $p$.
    :return: Normalized polynomial.
    """
    return [coefficient % modulus for coefficient in poly]


def clear_power(base: int, exponent: int, modulus: int) -> int:
    """
    Compute base^exponent mod $p$ by square-and-multiply, the clear counterpart of the encrypted
    power ladder.

    :param base: Base of the power.
    :param exponent: Non-negative exponent.
    :param modulus: Modulus $p$.
    :return: base^exponent mod $p$.
    """
    result = 1 % modulus
    square = base % modulus
    for bit in to_bits(exponent, exponent.bit_length()):
        if bit == 1:
            result = result * square % modulus
        square = square * square % modulus
    return result


def mod_inverse(value: int, modulus: int) -> int:
    r"""
    Compute the multiplicative inverse of value modulo the prime $p$ as $value^{p-2} \bmod p$
    (Fermat's little theorem).

    :param value: Value to invert.
    :param modulus: Prime modulus $p$.
    :return: Inverse of value modulo $p$.
    :raise DivisionUndefined: raised when value is congruent to zero modulo $p$.
    """
    value %= modulus
    if value == 0:
        raise DivisionUndefined(f"0 has no multiplicative inverse modulo {modulus}.")
    return int(pow_mod(value, modulus - 2, modulus))


def evaluate(poly: list[int], x: int, modulus: int) -> int:
    """
    Evaluate a polynomial in the clear using Horner's rule.

    :param poly: Polynomial, constant term first.
    :param x: Point of evaluation.
    :param modulus: Prime modulus $p$.
    :return: poly(x) mod $p$ in $[0, p-1]$.
    """
    result = 0
    for coefficient in reversed(poly):
        result = (result * x + coefficient) % modulus
    return result


def _divide_by_root(poly: list[int], root: int, modulus: int) -> list[int]:
    """
    Synthetic division of poly by the monomial (x - root). The remainder is dropped, it is zero
    whenever root is a root of poly.

    :param poly: Polynomial of degree at least one.
    :param root: Root of the monomial.
    :param modulus: Prime modulus $p$.
    :return: Quotient polynomial, one coefficient shorter than poly.
    """
    quotient = [0] * (len(poly) - 1)
    carry = 0
    for degree in range(len(poly) - 1, 0, -1):
        carry = (poly[degree] + root * carry) % modulus
        quotient[degree - 1] = carry
    return quotient


def lagrange_interpolate(points: Points, modulus: int) -> list[int]:
    r"""
    Compute the unique polynomial of degree smaller than the number of points that passes through
    all points, using Lagrange's interpolation formula
    $$f(x) = \sum_i f(x_i) \prod_{j \neq i} \frac{x - x_j}{x_i - x_j} \bmod p.$$

    The numerators $\prod_{j \neq i}(x - x_j)$ are obtained from $\prod_j (x - x_j)$ by synthetic
    division. Points with $f(x_i) = 0$ do not contribute and are skipped.

    :param points: Interpolation points $(x_i, f(x_i))$ with pairwise distinct $x_i \bmod p$.
    :param modulus: Prime modulus $p$.
    :return: Coefficients of the interpolating polynomial in $[0, p-1]$, one per point.
    :raise DivisionUndefined: raised when two points share the same $x_i \bmod p$.
    """
    abscissas = [x % modulus for x, _ in points]
    if len(set(abscissas)) != len(abscissas):
        raise DivisionUndefined(
            "Interpolation points should have pairwise distinct x-values modulo "
            f"{modulus}, the Lagrange denominator would be zero."
        )

    master = [1]
    for x_j in abscissas:
        master = poly_mul(master, [-x_j % modulus, 1], modulus)

    result = [0] * len(points)
    for i, (x_i, (_, f_x_i)) in enumerate(zip(abscissas, points)):
        if f_x_i % modulus == 0:
            continue
        numerator = _divide_by_root(master, x_i, modulus)
        denominator = 1
        for j, x_j in enumerate(abscissas):
            if i != j:
                denominator = denominator * (x_i - x_j) % modulus
        scalar = mod_inverse(denominator, modulus) * f_x_i % modulus
        result = poly_add(result, poly_mul(numerator, [scalar], modulus), modulus)
    logger.debug("Interpolated %d points modulo %d", len(points), modulus)
    return normalize(result, modulus)
