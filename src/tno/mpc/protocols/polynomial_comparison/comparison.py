r"""
Comparison, sign, maximum and minimum of encrypted integers.

Every predicate is a function $\mathbb{Z}_p \to \mathbb{Z}_p$ of a single value, described by a
full-domain interpolation table and evaluated homomorphically. Two-operand predicates are applied
to the difference of their operands. Integers are represented by their signed representatives in
$[-(p-1)/2, (p-1)/2]$; the ordering predicates are exact whenever the difference of the operands
lies in that range too, which holds for operands in $[-(p-1)/4, (p-1)/4]$. Equality and sign are
exact on the whole domain.
"""

from __future__ import annotations

import logging
from typing import Callable

from .context import EvaluationContext
from .engine import Ciphertext
from .interpolation import evaluate_table
from .polynomial import Points
from .power import power, power_vector, powers
from .utils import half_modulus

logger = logging.getLogger(__name__)


def indicator_points(
    modulus: int, at_zero: int, positive: int, negative: int
) -> Points:
    r"""
    Build a full-domain table that only depends on the sign of its argument.

    :param modulus: Prime modulus $p$.
    :param at_zero: Value at $x = 0$.
    :param positive: Value at $1 \leq x \leq (p-1)/2$.
    :param negative: Value at $-(p-1)/2 \leq x \leq -1$.
    :return: Interpolation points for all residues modulo $p$.
    """
    points = [(0, at_zero)]
    for i in range(1, modulus):
        if i <= half_modulus(modulus):
            points.append((i, positive))
        else:
            points.append((-(modulus - i), negative))
    return points


def sign_points(modulus: int) -> Points:
    """
    :param modulus: Prime modulus $p$.
    :return: Table of the sign function.
    """
    return indicator_points(modulus, 0, 1, -1)


def equal_zero_points(modulus: int) -> Points:
    """
    :param modulus: Prime modulus $p$.
    :return: Table of $x = 0$.
    """
    return indicator_points(modulus, 1, 0, 0)


def not_equal_zero_points(modulus: int) -> Points:
    """
    :param modulus: Prime modulus $p$.
    :return: Table of $x \\neq 0$.
    """
    return indicator_points(modulus, 0, 1, 1)


def greater_than_zero_points(modulus: int) -> Points:
    """
    :param modulus: Prime modulus $p$.
    :return: Table of $x > 0$.
    """
    return indicator_points(modulus, 0, 1, 0)


def greater_equal_zero_points(modulus: int) -> Points:
    """
    :param modulus: Prime modulus $p$.
    :return: Table of $x \\geq 0$.
    """
    return indicator_points(modulus, 1, 1, 0)


def lower_than_zero_points(modulus: int) -> Points:
    """
    :param modulus: Prime modulus $p$.
    :return: Table of $x < 0$.
    """
    return indicator_points(modulus, 0, 0, 1)


def lower_equal_zero_points(modulus: int) -> Points:
    """
    :param modulus: Prime modulus $p$.
    :return: Table of $x \\leq 0$.
    """
    return indicator_points(modulus, 1, 0, 1)


def _apply_table(
    table: Callable[[int], Points], ciphertext: Ciphertext, context: EvaluationContext
) -> Ciphertext:
    """
    Evaluate the table produced by table at the encrypted value.
    """
    logger.debug("Applying %s", table.__name__)
    return evaluate_table(
        table(context.plaintext_modulus), powers(ciphertext, context), context
    )


def sign(ciphertext: Ciphertext, context: EvaluationContext) -> Ciphertext:
    """
    Compute the encrypted sign of an encrypted integer.

    :param ciphertext: Encryption of $x$.
    :param context: Evaluation context.
    :return: Encryption of 1 if $x > 0$, -1 if $x < 0$ and 0 if $x = 0$.
    """
    return _apply_table(sign_points, ciphertext, context)


def equal_zero(ciphertext: Ciphertext, context: EvaluationContext) -> Ciphertext:
    """
    :param ciphertext: Encryption of $x$.
    :param context: Evaluation context.
    :return: Encryption of the bit $x = 0$.
    """
    return _apply_table(equal_zero_points, ciphertext, context)


def greater_than_zero(ciphertext: Ciphertext, context: EvaluationContext) -> Ciphertext:
    """
    :param ciphertext: Encryption of $x$.
    :param context: Evaluation context.
    :return: Encryption of the bit $x > 0$.
    """
    return _apply_table(greater_than_zero_points, ciphertext, context)


def greater_equal_zero(
    ciphertext: Ciphertext, context: EvaluationContext
) -> Ciphertext:
    r"""
    :param ciphertext: Encryption of $x$.
    :param context: Evaluation context.
    :return: Encryption of the bit $x \geq 0$.
    """
    return _apply_table(greater_equal_zero_points, ciphertext, context)


def lower_than_zero(ciphertext: Ciphertext, context: EvaluationContext) -> Ciphertext:
    """
    :param ciphertext: Encryption of $x$.
    :param context: Evaluation context.
    :return: Encryption of the bit $x < 0$.
    """
    return _apply_table(lower_than_zero_points, ciphertext, context)


def lower_equal_zero(ciphertext: Ciphertext, context: EvaluationContext) -> Ciphertext:
    r"""
    :param ciphertext: Encryption of $x$.
    :param context: Evaluation context.
    :return: Encryption of the bit $x \leq 0$.
    """
    return _apply_table(lower_equal_zero_points, ciphertext, context)


def equal(
    x_enc: Ciphertext, y_enc: Ciphertext, context: EvaluationContext
) -> Ciphertext:
    """
    :param x_enc: Encryption of $x$.
    :param y_enc: Encryption of $y$.
    :param context: Evaluation context.
    :return: Encryption of the bit $x = y$.
    """
    return equal_zero(context.engine.subtract(x_enc, y_enc), context)


def gt(x_enc: Ciphertext, y_enc: Ciphertext, context: EvaluationContext) -> Ciphertext:
    """
    :param x_enc: Encryption of $x$.
    :param y_enc: Encryption of $y$.
    :param context: Evaluation context.
    :return: Encryption of the bit $x > y$.
    """
    return greater_than_zero(context.engine.subtract(x_enc, y_enc), context)


def gteq(
    x_enc: Ciphertext, y_enc: Ciphertext, context: EvaluationContext
) -> Ciphertext:
    r"""
    :param x_enc: Encryption of $x$.
    :param y_enc: Encryption of $y$.
    :param context: Evaluation context.
    :return: Encryption of the bit $x \geq y$.
    """
    return greater_equal_zero(context.engine.subtract(x_enc, y_enc), context)


def lt(x_enc: Ciphertext, y_enc: Ciphertext, context: EvaluationContext) -> Ciphertext:
    """
    :param x_enc: Encryption of $x$.
    :param y_enc: Encryption of $y$.
    :param context: Evaluation context.
    :return: Encryption of the bit $x < y$.
    """
    return lower_than_zero(context.engine.subtract(x_enc, y_enc), context)


def lteq(
    x_enc: Ciphertext, y_enc: Ciphertext, context: EvaluationContext
) -> Ciphertext:
    r"""
    :param x_enc: Encryption of $x$.
    :param y_enc: Encryption of $y$.
    :param context: Evaluation context.
    :return: Encryption of the bit $x \leq y$.
    """
    return lower_equal_zero(context.engine.subtract(x_enc, y_enc), context)


def maximum(
    x_enc: Ciphertext, y_enc: Ciphertext, context: EvaluationContext
) -> Ciphertext:
    r"""
    Compute $[\max(x, y)] = [x \geq y] \cdot [x] + [y > x] \cdot [y]$. Exactly one of the two
    selector bits is one, also when $x = y$.

    :param x_enc: Encryption of $x$.
    :param y_enc: Encryption of $y$.
    :param context: Evaluation context.
    :return: Encryption of $\max(x, y)$.
    """
    engine = context.engine
    x_selected = greater_equal_zero(engine.subtract(x_enc, y_enc), context)
    y_selected = greater_than_zero(engine.subtract(y_enc, x_enc), context)
    return engine.add(
        engine.multiply(x_selected, x_enc), engine.multiply(y_selected, y_enc)
    )


def minimum(
    x_enc: Ciphertext, y_enc: Ciphertext, context: EvaluationContext
) -> Ciphertext:
    r"""
    Compute $[\min(x, y)] = [x \leq y] \cdot [x] + [y < x] \cdot [y]$.

    :param x_enc: Encryption of $x$.
    :param y_enc: Encryption of $y$.
    :param context: Evaluation context.
    :return: Encryption of $\min(x, y)$.
    """
    engine = context.engine
    x_selected = lower_equal_zero(engine.subtract(x_enc, y_enc), context)
    y_selected = lower_than_zero(engine.subtract(y_enc, x_enc), context)
    return engine.add(
        engine.multiply(x_selected, x_enc), engine.multiply(y_selected, y_enc)
    )


def equal_fermat(
    x_enc: Ciphertext, y_enc: Ciphertext, context: EvaluationContext
) -> Ciphertext:
    r"""
    Equality test without an interpolation table. By Fermat's little theorem
    $(x - y)^{p-1}$ is 0 if $x = y$ and 1 otherwise, so equality is $1 - (x - y)^{p-1}$. This
    needs $O(\log p)$ instead of $O(p \log p)$ multiplications.

    :param x_enc: Encryption of $x$.
    :param y_enc: Encryption of $y$.
    :param context: Evaluation context.
    :return: Encryption of the bit $x = y$.
    """
    engine = context.engine
    differs = power(
        engine.subtract(x_enc, y_enc), context.plaintext_modulus - 1, context
    )
    return engine.subtract(context.encrypt_constant(1), differs)


def equal_vector(
    x_enc: Ciphertext,
    y_enc: Ciphertext,
    context: EvaluationContext,
    batch_size: int,
) -> Ciphertext:
    r"""
    Compare two batched ciphertexts slot by slot and count the positions in which they differ,
    e.g. to compare two words encoded with
    :func:`~tno.mpc.protocols.polynomial_comparison.utils.encode_text`.

    :param x_enc: Batched encryption of $x_0, \ldots, x_{b-1}$.
    :param y_enc: Batched encryption of $y_0, \ldots, y_{b-1}$.
    :param context: Evaluation context.
    :param batch_size: Number of slots $b$ that are compared.
    :return: Encryption of $|\{i : x_i \neq y_i\}|$ in the first slot; zero iff the vectors are
        equal.
    """
    difference = context.engine.subtract(x_enc, y_enc)
    differs = evaluate_table(
        not_equal_zero_points(context.plaintext_modulus),
        power_vector(difference, context, batch_size),
        context,
        batch_size,
    )
    return context.engine.sum_slots(differs, batch_size)
