"""
Exceptions and warnings raised by the polynomial comparison protocols.
"""


class PolynomialComparisonError(Exception):
    """
    Base class for all errors raised by this package.
    """


class DivisionUndefined(PolynomialComparisonError, ZeroDivisionError):
    r"""
    Raised when a multiplicative inverse of $0 \bmod p$ is requested.
    """


class DomainOutOfRange(PolynomialComparisonError, ValueError):
    r"""
    Raised when a plaintext integer lies outside $[-(p-1)/2, (p-1)/2]$ and can therefore not be
    represented unambiguously in $\mathbb{Z}_p$.
    """


class ProtocolSequenceViolation(PolynomialComparisonError, RuntimeError):
    """
    Raised when a step of the key-combination or decryption-combination protocol is performed
    out of order, by the wrong key holder, twice, or on a state that was already consumed.
    """


class DivisionUndefinedWarning(UserWarning):
    """
    Issued when an encrypted value is divided by a public divisor of zero. The result of such a
    division is the documented sentinel (an encryption of zero), not a quotient.
    """
