"""
Comparison, sign and integer division of homomorphically encrypted integers through polynomial
interpolation over $\\mathbb{Z}_p$, with a threshold key-combination and decryption protocol.
"""

# Explicit re-export of all functionalities, such that they can be imported properly. Following
# https://www.python.org/dev/peps/pep-0484/#stub-files and
# https://mypy.readthedocs.io/en/stable/command_line.html#cmdoption-mypy-no-implicit-reexport

from tno.mpc.protocols.polynomial_comparison.comparison import equal as equal
from tno.mpc.protocols.polynomial_comparison.comparison import (
    equal_fermat as equal_fermat,
)
from tno.mpc.protocols.polynomial_comparison.comparison import (
    equal_vector as equal_vector,
)
from tno.mpc.protocols.polynomial_comparison.comparison import gt as gt
from tno.mpc.protocols.polynomial_comparison.comparison import gteq as gteq
from tno.mpc.protocols.polynomial_comparison.comparison import lt as lt
from tno.mpc.protocols.polynomial_comparison.comparison import lteq as lteq
from tno.mpc.protocols.polynomial_comparison.comparison import maximum as maximum
from tno.mpc.protocols.polynomial_comparison.comparison import minimum as minimum
from tno.mpc.protocols.polynomial_comparison.comparison import sign as sign
from tno.mpc.protocols.polynomial_comparison.context import (
    EvaluationContext as EvaluationContext,
)
from tno.mpc.protocols.polynomial_comparison.context import (
    SinglePartyKeys as SinglePartyKeys,
)
from tno.mpc.protocols.polynomial_comparison.context import (
    ThresholdKeys as ThresholdKeys,
)
from tno.mpc.protocols.polynomial_comparison.decryption import (
    PartialDecryption as PartialDecryption,
)
from tno.mpc.protocols.polynomial_comparison.division import (
    divide_private as divide_private,
)
from tno.mpc.protocols.polynomial_comparison.division import (
    divide_public as divide_public,
)
from tno.mpc.protocols.polynomial_comparison.engine import (
    ArithmeticEngine as ArithmeticEngine,
)
from tno.mpc.protocols.polynomial_comparison.engine import KeyPair as KeyPair
from tno.mpc.protocols.polynomial_comparison.engine import (
    ThresholdEngine as ThresholdEngine,
)
from tno.mpc.protocols.polynomial_comparison.errors import (
    DivisionUndefined as DivisionUndefined,
)
from tno.mpc.protocols.polynomial_comparison.errors import (
    DivisionUndefinedWarning as DivisionUndefinedWarning,
)
from tno.mpc.protocols.polynomial_comparison.errors import (
    DomainOutOfRange as DomainOutOfRange,
)
from tno.mpc.protocols.polynomial_comparison.errors import (
    PolynomialComparisonError as PolynomialComparisonError,
)
from tno.mpc.protocols.polynomial_comparison.errors import (
    ProtocolSequenceViolation as ProtocolSequenceViolation,
)
from tno.mpc.protocols.polynomial_comparison.polynomial import (
    lagrange_interpolate as lagrange_interpolate,
)
from tno.mpc.protocols.polynomial_comparison.power import powers as powers
from tno.mpc.protocols.polynomial_comparison.threshold import (
    KeyCombination as KeyCombination,
)
from tno.mpc.protocols.polynomial_comparison.threshold import KeyHolder as KeyHolder
from tno.mpc.protocols.polynomial_comparison.threshold import Ready as Ready
from tno.mpc.protocols.polynomial_comparison.utils import encode_text as encode_text

__version__ = "1.0.0"
