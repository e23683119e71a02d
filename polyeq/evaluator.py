"""
Numeric evaluation of expression trees.

Evaluation is a diagnostic aid only: the equality check never evaluates.
It is handy for spot-checking that two expressions with the same canonical
form also agree on concrete values.

    evaluate(parse_expression("2x + sin(0)"), {"x": 1.5})  # => 3.0
"""

import math
from typing import Callable, Dict, Mapping

from .errors import EvaluationError
from .lexer import TokenType
from .parser import Node, Number, Variable, Unary, Binary, Function

NumericType = float
UnaryHandler = Callable[[NumericType], NumericType]
BinaryHandler = Callable[[NumericType, NumericType], NumericType]


# ============================================================
# Handler Builders
# ============================================================

def checked(name: str, f: Callable[..., NumericType]) -> Callable[..., NumericType]:
    """Wrap f so math errors surface as EvaluationError naming the operation."""
    def handler(*args: NumericType) -> NumericType:
        try:
            return f(*args)
        except (ValueError, OverflowError, ZeroDivisionError) as e:
            raise EvaluationError(f"{name}{args}: {e}") from e
    return handler


def safe_div() -> BinaryHandler:
    """Division that reports a zero divisor instead of returning inf."""
    def handler(a: NumericType, b: NumericType) -> NumericType:
        if b == 0:
            raise EvaluationError("division by zero")
        return a / b
    return handler


def to_float(digits: str) -> NumericType:
    """Convert an integer literal, reporting literals beyond float range."""
    try:
        return float(int(digits))
    except (OverflowError, ValueError) as e:
        raise EvaluationError(f"literal {digits[:20]}... out of range: {e}") from e


def cot(x: NumericType) -> NumericType:
    t = math.tan(x)
    if t == 0:
        raise ZeroDivisionError("cot undefined where tan is 0")
    return 1.0 / t


# Keyed by the function name used in source text
FUNCTIONS: Dict[str, UnaryHandler] = {
    "sin": checked("sin", math.sin),
    "cos": checked("cos", math.cos),
    "tan": checked("tan", math.tan),
    "cot": checked("cot", cot),
    "ln": checked("ln", math.log),
    "sqrt": checked("sqrt", math.sqrt),
}

OPERATORS: Dict[TokenType, BinaryHandler] = {
    TokenType.PLUS: lambda a, b: a + b,
    TokenType.MINUS: lambda a, b: a - b,
    TokenType.MUL: lambda a, b: a * b,
    TokenType.DIV: safe_div(),
    TokenType.POW: checked("pow", math.pow),
}


def evaluate(node: Node, env: Mapping[str, NumericType]) -> NumericType:
    """
    Evaluate a tree with variables bound by env.

    Raises:
        EvaluationError: On an unbound variable, division by zero, a value
                         outside a function's domain, a literal too large
                         for a float, or a tree nested too deeply
    """
    try:
        return _evaluate(node, env)
    except RecursionError:
        raise EvaluationError("expression nested too deeply to evaluate") from None


def _evaluate(node: Node, env: Mapping[str, NumericType]) -> NumericType:
    if isinstance(node, Number):
        return to_float(node.digits)

    if isinstance(node, Variable):
        if node.name not in env:
            raise EvaluationError(f"unbound variable {node.name!r}")
        return float(env[node.name])

    if isinstance(node, Unary):
        return -_evaluate(node.operand, env)

    if isinstance(node, Binary):
        handler = OPERATORS[node.op]
        return handler(_evaluate(node.left, env), _evaluate(node.right, env))

    if isinstance(node, Function):
        return FUNCTIONS[node.name](_evaluate(node.arg, env))

    raise EvaluationError(f"cannot evaluate {node!r}")


def variables(node: Node) -> set:
    """Collect the variable names used in a tree."""
    if isinstance(node, Variable):
        return {node.name}
    if isinstance(node, Unary):
        return variables(node.operand)
    if isinstance(node, Binary):
        return variables(node.left) | variables(node.right)
    if isinstance(node, Function):
        return variables(node.arg)
    return set()
