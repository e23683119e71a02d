"""
POLYEQ - Polynomial Equality via canonical forms

Decides whether two arithmetic expressions are equal under a small,
exact equivalence theory by reducing each to a canonical string.

Quick Start:
    from polyeq import ExpressionEngine

    engine = ExpressionEngine()

    engine.equal("1 + x", "x + 1")              # => True
    engine.canonical("(x+y)^2")                 # => "xx+2xy+yy"
    engine.equal("x/x", "1")                    # => False (division is opaque)

Expression Syntax:
    12, x              integer literals, single-letter variables
    + - * / ^          binary operators (^ is right-associative)
    -x                 prefix negation
    3x  2(x+1)  xy     implicit multiplication
    sin cos tan cot    functions; sin(x)^2 is (sin x)^2,
    ln sqrt            while sin x^2 is sin(x^2)

Equivalence Theory:
    + and * are commutative and associative, * distributes over + and -,
    x^2 and x^3 are expanded, like terms are merged. Division, any other
    power and function calls are kept as opaque factors whose operands
    are themselves canonicalized: sin(x+1) == sin(1+x), but x/x != 1.
"""

__version__ = "0.1.0"

# Errors
from .errors import (
    PolyeqError,
    LexError,
    ParseError,
    NormalizeError,
    NestingError,
    EvaluationError,
)

# Tokenizer
from .lexer import (
    Token,
    TokenType,
    KEYWORDS,
    tokenize,
    scan,
    insert_implicit_mul,
    needs_implicit_mul,
    format_tokens,
)

# Parser and tree
from .parser import (
    Node,
    Number,
    Variable,
    Unary,
    Binary,
    Function,
    Parser,
    parse,
    parse_expression,
    format_expr,
    format_tree,
)

# Normalizer and serializer
from .normalizer import (
    Term,
    Polynomial,
    EXPANDABLE_EXPONENTS,
    normalize,
    serialize,
    canonical,
    equal,
    sort_and_merge,
    is_canonical,
)

# Engine
from .engine import (
    ExpressionEngine,
    Analysis,
    Comparison,
    analyze,
    compare,
)

# Diagnostics
from .evaluator import evaluate, FUNCTIONS
from .generator import ExpressionGenerator, EDGE_CASES

# Public API
__all__ = [
    # Version
    "__version__",
    # Errors
    "PolyeqError",
    "LexError",
    "ParseError",
    "NormalizeError",
    "NestingError",
    "EvaluationError",
    # Tokenizer
    "Token",
    "TokenType",
    "KEYWORDS",
    "tokenize",
    "scan",
    "insert_implicit_mul",
    "needs_implicit_mul",
    "format_tokens",
    # Tree
    "Node",
    "Number",
    "Variable",
    "Unary",
    "Binary",
    "Function",
    # Parser
    "Parser",
    "parse",
    "parse_expression",
    "format_expr",
    "format_tree",
    # Normalizer
    "Term",
    "Polynomial",
    "EXPANDABLE_EXPONENTS",
    "normalize",
    "serialize",
    "canonical",
    "equal",
    "sort_and_merge",
    "is_canonical",
    # Engine
    "ExpressionEngine",
    "Analysis",
    "Comparison",
    "analyze",
    "compare",
    # Diagnostics
    "evaluate",
    "FUNCTIONS",
    "ExpressionGenerator",
    "EDGE_CASES",
]
