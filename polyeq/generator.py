"""
Random expression generation for exercising the pipeline.

ExpressionGenerator produces well-formed expression strings: every string
it returns tokenizes and parses. Pass a seeded random.Random for
reproducible output:

    gen = ExpressionGenerator(rng=random.Random(42))
    gen.expression(max_depth=3)   # e.g. "sin(x + 17) * -y"
"""

import random
from typing import Iterator, List, Optional, Sequence

DEFAULT_VARIABLES = ("x", "y", "z", "a", "b")
DEFAULT_FUNCTIONS = ("sin", "cos", "tan", "ln", "sqrt")
DEFAULT_OPERATORS = ("+", "-", "*", "/", "^")

# Hand-picked inputs covering the tricky corners of the grammar
EDGE_CASES: List[str] = [
    "-5",
    "-x",
    "--5",
    "2(x+1)",
    "sin(x)^2",
    "sinxlnx",
    "sqrt(x^2 + y^2)",
    "((((x))))",
    "1 + 2 * 3^4",
    "x-yzsinxy",
    "sinx^2xsiny",
    "x -y - z",
]


class ExpressionGenerator:
    """
    Generates random expression strings.

    The shape mix per level is: 10% parenthesized, 15% function call,
    10% unary minus, 50% binary operation, 15% plain atom. Atoms are
    integers in [0, 100] 60% of the time, variables otherwise.
    """

    def __init__(self, rng: Optional[random.Random] = None,
                 variables: Sequence[str] = DEFAULT_VARIABLES,
                 functions: Sequence[str] = DEFAULT_FUNCTIONS,
                 operators: Sequence[str] = DEFAULT_OPERATORS):
        self.rng = rng or random.Random()
        self.variables = list(variables)
        self.functions = list(functions)
        self.operators = list(operators)

    def atom(self) -> str:
        """A random integer literal or variable."""
        if self.rng.random() < 0.6 or not self.variables:
            return str(self.rng.randint(0, 100))
        return self.rng.choice(self.variables)

    def expression(self, max_depth: int = 3, depth: int = 0) -> str:
        """A random expression nested at most max_depth levels."""
        if depth >= max_depth:
            return self.atom()

        p = self.rng.random()
        if p < 0.10:
            return f"({self.expression(max_depth, depth + 1)})"
        if p < 0.25 and self.functions:
            func = self.rng.choice(self.functions)
            return f"{func}({self.expression(max_depth, depth + 1)})"
        if p < 0.35:
            return "-" + self.expression(max_depth, depth + 1)
        if p < 0.85 and self.operators:
            left = self.expression(max_depth, depth + 1)
            op = self.rng.choice(self.operators)
            right = self.expression(max_depth, depth + 1)
            return f"{left} {op} {right}"
        return self.atom()

    def expressions(self, count: int, max_depth: int = 3) -> Iterator[str]:
        """Yield count random expressions."""
        for _ in range(count):
            yield self.expression(max_depth)

    def __repr__(self) -> str:
        return (f"ExpressionGenerator(variables={self.variables}, "
                f"functions={self.functions}, operators={self.operators})")
