"""
Normalizer: expression trees to canonical polynomials and strings.

POLYEQ - Polynomial Equality via canonical forms

A tree is mapped to a Polynomial: a list of Terms, each an integer
coefficient times a sorted tuple of opaque factor-strings. After
normalization a Polynomial is

    - sorted by (factors, coeff),
    - free of like terms (no two terms share the same factors),
    - free of zero coefficients (the empty list is 0).

Two expressions are equal iff their serialized polynomials are the same
string. The equivalence this implements is deliberately narrow:

    honored       + and * commutative/associative, * distributes over
                  + and -, unary minus, x^2 and x^3 expansion, like-term
                  merging
    not honored   division, other powers, and function calls become
                  opaque factors: "(x)/(x)", "(x)^(y)", "sin(1+x)"

Examples:
    canonical(parse_expression("(x+1)*(x-1)"))  -> "-1+xx"
    canonical(parse_expression("(x+y)^2"))      -> "xx+2xy+yy"
    canonical(parse_expression("x/x"))          -> "(x)/(x)"
"""

import logging
from typing import AbstractSet, List, NamedTuple, Optional, Tuple

from .errors import NormalizeError, NestingError
from .lexer import TokenType
from .parser import Node, Number, Variable, Unary, Binary, Function

logger = logging.getLogger(__name__)


class Term(NamedTuple):
    """One addend: coeff * factors[0] * factors[1] * ..."""
    coeff: int
    factors: Tuple[str, ...] = ()


# Type aliases
Polynomial = List[Term]

# Exponents that are expanded by repeated multiplication; every other
# power stays an opaque factor.
EXPANDABLE_EXPONENTS: AbstractSet[int] = frozenset({2, 3})


# ============================================================
# Polynomial Algebra
# ============================================================

def term_key(term: Term) -> Tuple[Tuple[str, ...], int]:
    """Sort key for terms: factors first, then coefficient."""
    return term.factors, term.coeff


def sort_and_merge(terms: List[Term]) -> Polynomial:
    """
    Bring a list of terms into canonical order.

    Sorts by (factors, coeff), sums the coefficients of adjacent like
    terms and drops terms whose coefficient ends up zero.
    """
    merged: Polynomial = []
    for term in sorted(terms, key=term_key):
        if merged and merged[-1].factors == term.factors:
            merged[-1] = Term(merged[-1].coeff + term.coeff, term.factors)
        else:
            merged.append(term)
    return [t for t in merged if t.coeff != 0]


def constant(value: int) -> Polynomial:
    """The polynomial for an integer constant."""
    return sort_and_merge([Term(value)])


def atom(factor: str) -> Polynomial:
    """A polynomial made of one factor-string with coefficient 1."""
    return [Term(1, (factor,))]


def negate(poly: Polynomial) -> Polynomial:
    """Negate every coefficient."""
    return sort_and_merge([Term(-t.coeff, t.factors) for t in poly])


def add(a: Polynomial, b: Polynomial) -> Polynomial:
    return sort_and_merge(a + b)


def subtract(a: Polynomial, b: Polynomial) -> Polynomial:
    return sort_and_merge(a + [Term(-t.coeff, t.factors) for t in b])


def multiply(a: Polynomial, b: Polynomial) -> Polynomial:
    """Distribute a over b: every term of a times every term of b."""
    return sort_and_merge([
        Term(t.coeff * u.coeff, tuple(sorted(t.factors + u.factors)))
        for t in a
        for u in b
    ])


def as_integer(poly: Polynomial) -> Optional[int]:
    """Return the value of a constant polynomial, or None if not constant."""
    if not poly:
        return 0
    if len(poly) == 1 and not poly[0].factors:
        return poly[0].coeff
    return None


def power(base: Polynomial, exponent: int) -> Polynomial:
    """Expand base ** exponent (exponent >= 1) by repeated multiplication."""
    result = base
    for _ in range(exponent - 1):
        result = multiply(result, base)
    return result


def opaque(template: str, *operands: Polynomial) -> Polynomial:
    """Wrap serialized operands into a single opaque factor-string."""
    return atom(template.format(*(serialize(p) for p in operands)))


# ============================================================
# Normalization
# ============================================================

def normalize(node: Node, expand: AbstractSet[int] = EXPANDABLE_EXPONENTS) -> Polynomial:
    """
    Map an expression tree to its canonical Polynomial.

    Args:
        node: Root of the expression tree
        expand: Integer exponents to expand by repeated multiplication

    Raises:
        NormalizeError: If the tree contains a node type or operator the
                        normalizer has no rule for
        NestingError: If the tree is nested past the recursion limit
    """
    try:
        return _normalize(node, expand)
    except RecursionError:
        raise NestingError("normalize") from None


def _normalize(node: Node, expand: AbstractSet[int]) -> Polynomial:
    if isinstance(node, Number):
        return constant(int(node.digits))

    if isinstance(node, Variable):
        return atom(node.name)

    if isinstance(node, Unary):
        if node.op != TokenType.MINUS:
            raise NormalizeError(node)
        return negate(_normalize(node.operand, expand))

    if isinstance(node, Function):
        return opaque(node.name + "({})", _normalize(node.arg, expand))

    if isinstance(node, Binary):
        left = _normalize(node.left, expand)
        right = _normalize(node.right, expand)

        if node.op == TokenType.PLUS:
            return add(left, right)
        if node.op == TokenType.MINUS:
            return subtract(left, right)
        if node.op == TokenType.MUL:
            return multiply(left, right)
        if node.op == TokenType.DIV:
            return opaque("({})/({})", left, right)
        if node.op == TokenType.POW:
            n = as_integer(right)
            if n is not None and n >= 1 and n in expand:
                return power(left, n)
            return opaque("({})^({})", left, right)

    raise NormalizeError(node)


# ============================================================
# Serialization and Equality
# ============================================================

def serialize_term(term: Term, first: bool) -> str:
    """Serialize one term including its sign."""
    out = ""
    if term.coeff > 0 and not first:
        out += "+"
    elif term.coeff < 0:
        out += "-"

    magnitude = abs(term.coeff)
    if magnitude != 1 or not term.factors:
        out += str(magnitude)

    for i, factor in enumerate(term.factors):
        # Keep two factor-strings apart when the first ends in a digit.
        # Normalized factors end in a letter or ")", so only hand-built
        # Terms reach this.
        if i > 0 and out[-1:].isdigit():
            out += "*"
        out += factor
    return out


def serialize(poly: Polynomial) -> str:
    """
    Serialize a canonical Polynomial.

    Examples:
        []                                   -> "0"
        [Term(1), Term(1, ("x",))]           -> "1+x"
        [Term(-1), Term(1, ("x", "x"))]      -> "-1+xx"
        [Term(5, ("x",))]                    -> "5x"
    """
    out = "".join(serialize_term(t, i == 0) for i, t in enumerate(poly))
    return out or "0"


def canonical(node: Node, expand: AbstractSet[int] = EXPANDABLE_EXPONENTS) -> str:
    """Canonical string of a tree: serialize(normalize(node))."""
    result = serialize(normalize(node, expand))
    logger.debug("canonical form of %r is %r", node, result)
    return result


def equal(a: Node, b: Node, expand: AbstractSet[int] = EXPANDABLE_EXPONENTS) -> bool:
    """Check whether two trees have the same canonical form."""
    return canonical(a, expand) == canonical(b, expand)


def is_canonical(poly: Polynomial) -> bool:
    """Check the Polynomial invariants (sorted, merged, zero-free)."""
    for term in poly:
        if term.coeff == 0 or list(term.factors) != sorted(term.factors):
            return False
    keys = [term_key(t) for t in poly]
    if keys != sorted(keys):
        return False
    factor_lists = [t.factors for t in poly]
    return len(set(factor_lists)) == len(factor_lists)
