"""
Expression engine: the driver-facing surface of POLYEQ.

POLYEQ - Polynomial Equality via canonical forms

Wraps the tokenizer, parser and normalizer behind two operations:

    analyze(text)   -> Analysis    tokens, tree, polynomial, canonical form
    compare(a, b)   -> Comparison  both analyses plus the verdict

Both result objects format themselves for humans (format()) and for JSON
(to_dict()). Errors from any stage (LexError, ParseError, NormalizeError)
propagate unchanged.

Example:
    from polyeq import ExpressionEngine

    engine = ExpressionEngine()
    result = engine.compare("(x+1)*(x-1)", "x*x - 1")
    bool(result)          # => True
    result.a.canonical    # => "-1+xx"
"""

import logging
from typing import AbstractSet, Any, Dict, List, Union

from .lexer import Token, tokenize, format_tokens
from .parser import Node, parse, format_expr, format_tree
from .normalizer import (
    Polynomial, EXPANDABLE_EXPONENTS, normalize, serialize,
)

logger = logging.getLogger(__name__)

TreeOrText = Union[Node, str]


class Analysis:
    """The result of running one expression through the pipeline."""

    def __init__(self, text: str, tokens: List[Token], tree: Node,
                 polynomial: Polynomial, canonical: str):
        self.text = text
        self.tokens = tokens
        self.tree = tree
        self.polynomial = polynomial
        self.canonical = canonical

    def format(self, style: str = "canonical") -> str:
        """
        Format the analysis.

        Args:
            style: One of "canonical", "tokens", "tree", "verbose"
                - "canonical": just the canonical form (default)
                - "tokens": the token stream on one line
                - "tree": the indented parse tree
                - "verbose": input, tokens, tree and canonical form
        """
        if style == "tokens":
            return format_tokens(self.tokens)

        elif style == "tree":
            return format_tree(self.tree)

        elif style == "verbose":
            return "\n".join([
                f"Input:     {self.text}",
                f"Tokens:    {format_tokens(self.tokens)}",
                f"Parsed:    {format_expr(self.tree)}",
                "Tree:",
                format_tree(self.tree, indent=1),
                f"Canonical: {self.canonical}",
            ])

        else:  # canonical (default)
            return self.canonical

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "input": self.text,
            "tokens": [t.value or t.type.name for t in self.tokens],
            "tree": format_expr(self.tree),
            "terms": [[t.coeff, list(t.factors)] for t in self.polynomial],
            "canonical": self.canonical,
        }

    def __repr__(self) -> str:
        return f"Analysis({self.text!r} -> {self.canonical!r})"


class Comparison:
    """
    The verdict of comparing two expressions.

    Comparisons are truthy when the expressions are equal:

        if engine.compare("1 + x", "x + 1"):
            ...
    """

    def __init__(self, a: Analysis, b: Analysis):
        self.a = a
        self.b = b
        self.equal = a.canonical == b.canonical

    def __bool__(self) -> bool:
        return self.equal

    def format(self, style: str = "brief") -> str:
        """
        Format the comparison.

        Args:
            style: "brief" (one line, default) or "verbose" (both analyses)
        """
        verdict = "EQUAL" if self.equal else "NOT EQUAL"
        if style == "verbose":
            return "\n".join([
                self.a.format("verbose"),
                "",
                self.b.format("verbose"),
                "",
                f"Verdict: {verdict}",
            ])
        op = "≡" if self.equal else "≢"
        return f"{self.a.canonical} {op} {self.b.canonical}  [{verdict}]"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "a": self.a.to_dict(),
            "b": self.b.to_dict(),
            "equal": self.equal,
        }

    def __repr__(self) -> str:
        return f"Comparison({self.a.text!r}, {self.b.text!r}, equal={self.equal})"


class ExpressionEngine:
    """
    Configured entry point for tokenizing, parsing and comparing.

    Args:
        expand: Integer exponents expanded by repeated multiplication
                (default {2, 3}); every other power stays opaque.

    Methods accepting TreeOrText take either source text or a tree
    returned by parse().
    """

    def __init__(self, expand: AbstractSet[int] = EXPANDABLE_EXPONENTS):
        self.expand = frozenset(expand)

    def tokenize(self, text: str) -> List[Token]:
        return tokenize(text)

    def parse(self, text: str) -> Node:
        return parse(tokenize(text))

    def _tree(self, expr: TreeOrText) -> Node:
        if isinstance(expr, str):
            return self.parse(expr)
        return expr

    def normalize(self, expr: TreeOrText) -> Polynomial:
        return normalize(self._tree(expr), self.expand)

    def canonical(self, expr: TreeOrText) -> str:
        """Canonical form of an expression (text or tree)."""
        return serialize(self.normalize(expr))

    def equal(self, a: TreeOrText, b: TreeOrText) -> bool:
        """Check whether two expressions share a canonical form."""
        return self.canonical(a) == self.canonical(b)

    def analyze(self, text: str) -> Analysis:
        """Run text through every stage and keep the intermediate results."""
        tokens = tokenize(text)
        tree = parse(tokens)
        polynomial = normalize(tree, self.expand)
        result = Analysis(text, tokens, tree, polynomial, serialize(polynomial))
        logger.debug("analyzed %r", result)
        return result

    def compare(self, a: str, b: str) -> Comparison:
        """Analyze both texts and compare their canonical forms."""
        result = Comparison(self.analyze(a), self.analyze(b))
        logger.debug("compared %r", result)
        return result

    def __repr__(self) -> str:
        return f"ExpressionEngine(expand={sorted(self.expand)})"

    def __call__(self, a: TreeOrText, b: TreeOrText) -> bool:
        return self.equal(a, b)


# Shared default engine for the module-level helpers
_default_engine = ExpressionEngine()


def analyze(text: str) -> Analysis:
    """Analyze text with the default engine."""
    return _default_engine.analyze(text)


def compare(a: str, b: str) -> Comparison:
    """Compare two texts with the default engine."""
    return _default_engine.compare(a, b)
