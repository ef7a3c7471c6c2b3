"""
Homomorphic evaluation of interpolation polynomials.
"""

from __future__ import annotations

import logging

from .context import EvaluationContext
from .engine import Ciphertext
from .polynomial import Points, lagrange_interpolate

logger = logging.getLogger(__name__)


def encrypt_interpolator(
    poly: list[int], context: EvaluationContext, batch_size: int = 1
) -> list[Ciphertext]:
    """
    Encrypt every coefficient of a polynomial separately.

    :param poly: Polynomial, constant term first.
    :param context: Evaluation context.
    :param batch_size: Number of slots each coefficient is replicated over.
    :return: List of encrypted coefficients.
    """
    return [context.encrypt_constant(coefficient, batch_size) for coefficient in poly]


def eval_interpolator(
    powers: list[Ciphertext],
    encrypted_poly: list[Ciphertext],
    context: EvaluationContext,
) -> Ciphertext:
    r"""
    Evaluate an encrypted polynomial at an encrypted point $c$, given the powers of $c$:
    $$[f(c)] = [a_0] + \sum_{i=1}^{p-1} [c^i] \cdot [a_i].$$

    :param powers: Encryptions of $c, c^2, \ldots$ as produced by the power ladder.
    :param encrypted_poly: Encrypted coefficients $[a_0], [a_1], \ldots$.
    :param context: Evaluation context.
    :return: Encryption of $f(c)$.
    :raise ValueError: raised when the number of powers does not match the degree of the
        polynomial.
    """
    if len(encrypted_poly) != len(powers) + 1:
        raise ValueError(
            f"A polynomial with {len(encrypted_poly)} coefficients needs "
            f"{len(encrypted_poly) - 1} powers, received {len(powers)}."
        )
    engine = context.engine
    result = encrypted_poly[0]
    for power_enc, coefficient_enc in zip(powers, encrypted_poly[1:]):
        result = engine.add(result, engine.multiply(power_enc, coefficient_enc))
    return result


def evaluate_table(
    points: Points,
    powers: list[Ciphertext],
    context: EvaluationContext,
    batch_size: int = 1,
) -> Ciphertext:
    r"""
    Interpolate a full-domain table, encrypt the resulting polynomial and evaluate it at the
    point whose powers are given.

    :param points: Interpolation table with one entry per residue modulo $p$.
    :param powers: Encryptions of $c, c^2, \ldots, c^{p-1}$.
    :param context: Evaluation context.
    :param batch_size: Number of slots the coefficients are replicated over.
    :return: Encryption of $f(c)$, where $f$ is described by points.
    """
    poly = lagrange_interpolate(points, context.plaintext_modulus)
    logger.debug("Evaluating interpolation polynomial of degree < %d", len(poly))
    return eval_interpolator(
        powers, encrypt_interpolator(poly, context, batch_size), context
    )
