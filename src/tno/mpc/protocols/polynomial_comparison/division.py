r"""
Integer division of an encrypted dividend by a public or an encrypted divisor.

Quotients are rounded toward zero on the signed representatives, so $-7 / 2 = -3$ and
$7 / -2 = -3$. Division by zero does not raise; it yields an encryption of zero.
"""

from __future__ import annotations

import logging
import warnings

from .context import EvaluationContext
from .engine import Ciphertext
from .errors import DivisionUndefinedWarning, DomainOutOfRange
from .interpolation import evaluate_table
from .polynomial import Points
from .power import powers
from .utils import check_in_domain, to_signed

logger = logging.getLogger(__name__)


def truncated_division(dividend: int, divisor: int) -> int:
    """
    Divide two integers and round the quotient toward zero.

    :param dividend: Dividend.
    :param divisor: Non-zero divisor.
    :return: Quotient rounded toward zero.
    """
    quotient = abs(dividend) // abs(divisor)
    if (dividend < 0) != (divisor < 0):
        return -quotient
    return quotient


def division_points(divisor: int, modulus: int) -> Points:
    r"""
    Full-domain table $x \mapsto x / d$ on the signed representatives of $\mathbb{Z}_p$.

    :param divisor: Non-zero divisor $d$.
    :param modulus: Prime modulus $p$.
    :return: Interpolation points for all residues modulo $p$.
    """
    points = []
    for residue in range(modulus):
        dividend = to_signed(residue, modulus)
        points.append((dividend, truncated_division(dividend, divisor)))
    return points


def positive_division_points(divisor: int, modulus: int) -> Points:
    r"""
    Full-domain table $x \mapsto \lfloor x / d \rfloor$ that interprets residues as the
    non-negative integers $0, \ldots, p-1$.

    :param divisor: Divisor $1 \leq d \leq p-1$.
    :param modulus: Prime modulus $p$.
    :return: Interpolation points for all residues modulo $p$.
    """
    return [(residue, residue // divisor) for residue in range(modulus)]


def _point_indicator(value: int, modulus: int) -> Points:
    """
    Table that is one at the residue of value and zero elsewhere.
    """
    target = value % modulus
    return [(residue, int(residue == target)) for residue in range(modulus)]


def divide_public(
    dividend: Ciphertext,
    divisor: int,
    context: EvaluationContext,
    signed: bool = True,
) -> Ciphertext:
    r"""
    Divide an encrypted integer by a public integer.

    :param dividend: Encryption of the dividend $x$.
    :param divisor: Public divisor $d$.
    :param context: Evaluation context.
    :param signed: If True, $x$ and $d$ are signed and the quotient is rounded toward zero. If
        False, $x$ is read as a residue in $[0, p-1]$, $d$ should lie in $[0, p-1]$ and the
        result is the residue $\lfloor x / d \rfloor$.
    :return: Encryption of $x / d$, or an encryption of zero if $d = 0$.
    :raise DomainOutOfRange: raised when the divisor can not be represented.
    """
    modulus = context.plaintext_modulus
    if signed:
        check_in_domain(divisor, modulus)
    elif not 0 <= divisor < modulus:
        raise DomainOutOfRange(
            f"Unsigned divisor {divisor} is outside [0, {modulus - 1}]."
        )
    if divisor == 0:
        warnings.warn(
            "Division by zero, returning an encryption of zero.",
            DivisionUndefinedWarning,
        )
        return context.encrypt_constant(0)

    points = (
        division_points(divisor, modulus)
        if signed
        else positive_division_points(divisor, modulus)
    )
    logger.debug("Dividing by public divisor %d (signed=%s)", divisor, signed)
    return evaluate_table(points, powers(dividend, context), context)


def divide_private(
    dividend: Ciphertext, divisor: Ciphertext, context: EvaluationContext
) -> Ciphertext:
    r"""
    Divide an encrypted integer by an encrypted integer.

    Every candidate divisor $i = 1, \ldots, p-1$ is tried obliviously:
    $$[x / d] = \sum_{i=1}^{p-1} [x / i] \cdot [d = i].$$
    This takes $2(p-1)$ full polynomial evaluations and is by far the most expensive operator
    in this package. An encrypted divisor of zero selects no candidate and yields zero.

    :param dividend: Encryption of the dividend $x$.
    :param divisor: Encryption of the divisor $d$.
    :param context: Evaluation context.
    :return: Encryption of $x / d$ rounded toward zero.
    """
    engine = context.engine
    modulus = context.plaintext_modulus
    dividend_powers = powers(dividend, context)
    divisor_powers = powers(divisor, context)

    result = context.encrypt_constant(0)
    for candidate in range(1, modulus):
        quotient = evaluate_table(
            division_points(to_signed(candidate, modulus), modulus),
            dividend_powers,
            context,
        )
        selected = evaluate_table(
            _point_indicator(candidate, modulus), divisor_powers, context
        )
        result = engine.add(result, engine.multiply(quotient, selected))
        logger.debug("Processed candidate divisor %d of %d", candidate, modulus - 1)
    return result
