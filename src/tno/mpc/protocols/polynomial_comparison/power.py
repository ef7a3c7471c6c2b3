r"""
Power ladder: encrypted powers $c^e$ by square-and-multiply.

Computing all powers $c, c^2, \ldots, c^{p-1}$ takes $O(p \log p)$ homomorphic multiplications.
This dominates the cost of every operator in this package and grows linearly with $p$.
"""

from __future__ import annotations

import logging

from .context import EvaluationContext
from .engine import Ciphertext
from .utils import to_bits

logger = logging.getLogger(__name__)


def powers_of_two(
    ciphertext: Ciphertext, bit_length: int, context: EvaluationContext
) -> list[Ciphertext]:
    r"""
    Compute $[c, c^2, c^4, \ldots, c^{2^{l}}]$ by repeated squaring.

    :param ciphertext: Encryption of $c$.
    :param bit_length: Number of squarings $l$.
    :param context: Evaluation context.
    :return: List of $l + 1$ ciphertexts, entry $i$ encrypting $c^{2^i}$.
    """
    squares = [ciphertext]
    for _ in range(bit_length):
        squares.append(context.engine.multiply(squares[-1], squares[-1]))
    return squares


def _combine(
    exponent: int,
    squares: list[Ciphertext],
    context: EvaluationContext,
    batch_size: int,
) -> Ciphertext:
    """
    Multiply the squares at the set bits of exponent, starting from an encryption of one.
    """
    result = context.encrypt_constant(1, batch_size)
    for bit, square in zip(to_bits(exponent, exponent.bit_length()), squares):
        if bit == 1:
            result = context.engine.multiply(result, square)
    return result


def power(
    ciphertext: Ciphertext,
    exponent: int,
    context: EvaluationContext,
    batch_size: int = 1,
) -> Ciphertext:
    r"""
    Compute a single encrypted power $c^e$.

    :param ciphertext: Encryption of $c$.
    :param exponent: Exponent $e \geq 1$.
    :param context: Evaluation context.
    :param batch_size: Number of slots the power is computed in.
    :return: Encryption of $c^e$.
    :raise ValueError: raised when the exponent is smaller than one.
    """
    if exponent < 1:
        raise ValueError(f"Exponent should be at least 1, received {exponent}.")
    squares = powers_of_two(ciphertext, exponent.bit_length() - 1, context)
    return _combine(exponent, squares, context, batch_size)


def power_vector(
    ciphertext: Ciphertext, context: EvaluationContext, batch_size: int
) -> list[Ciphertext]:
    r"""
    Compute $[c, c^2, \ldots, c^{p-1}]$ slot-wise for a batched ciphertext. The ladder is seeded
    with an encryption of a vector of ones of width batch_size.

    :param ciphertext: Batched encryption of $c$.
    :param context: Evaluation context.
    :param batch_size: Number of slots that take part in the evaluation.
    :return: List of $p - 1$ ciphertexts, entry $i$ encrypting $c^{i+1}$.
    :raise ValueError: raised when the batch size is not positive.
    """
    if batch_size < 1:
        raise ValueError(f"Batch size should be positive, received {batch_size}.")
    max_exponent = context.plaintext_modulus - 1
    squares = powers_of_two(ciphertext, max_exponent.bit_length(), context)
    logger.debug(
        "Computing %d powers over %d slot(s) from %d squares",
        max_exponent,
        batch_size,
        len(squares),
    )
    return [
        _combine(exponent, squares, context, batch_size)
        for exponent in range(1, max_exponent + 1)
    ]


def powers(ciphertext: Ciphertext, context: EvaluationContext) -> list[Ciphertext]:
    r"""
    Compute $[c, c^2, \ldots, c^{p-1}]$.

    :param ciphertext: Encryption of $c$.
    :param context: Evaluation context.
    :return: List of $p - 1$ ciphertexts, entry $i$ encrypting $c^{i+1}$.
    """
    return power_vector(ciphertext, context, 1)
