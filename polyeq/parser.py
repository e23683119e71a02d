"""
Recursive-descent parser producing expression trees.

Grammar (lowest to highest precedence):

    expression := term (("+" | "-") term)*        left-associative
    term       := factor (("*" | "/") factor)*     left-associative
    factor     := primary ("^" factor)?            right-associative
    primary    := INT | VAR | "(" expression ")"
                | FUNC "(" expression ")"          sin(x)^2 == (sin x)^2
                | FUNC factor                      sin x^2 == sin(x^2)
                | "-" factor                       prefix negation

A function followed by a parenthesized group takes that group as its
argument, so a power after the closing paren applies to the function
value. Without parentheses the function binds the whole next factor.

Tree nodes:
    Number("12")                  integer literal, kept as digits
    Variable("x")                 single-letter variable
    Unary(MINUS, operand)         negation
    Binary(op, left, right)       op in PLUS MINUS MUL DIV POW
    Function(func, arg)           func in SIN COS TAN COT LN SQRT
"""

import logging
from typing import List

from .errors import ParseError, NestingError
from .lexer import Token, TokenType, FUNCTION_TYPES, tokenize

logger = logging.getLogger(__name__)


# ============================================================
# Tree Nodes
# ============================================================

class Node:
    """Base class for tree nodes: immutable, compared by structure."""

    __slots__ = ()

    def _key(self) -> tuple:
        raise NotImplementedError

    def __eq__(self, other):
        if type(self) is not type(other):
            return False
        return self._key() == other._key()

    def __hash__(self):
        return hash((type(self).__name__,) + self._key())

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def _init(self, **fields):
        for name, value in fields.items():
            object.__setattr__(self, name, value)


class Number(Node):
    __slots__ = ('digits',)

    def __init__(self, digits: str):
        self._init(digits=digits)

    def _key(self) -> tuple:
        return (self.digits,)

    def __repr__(self) -> str:
        return f"Number({self.digits!r})"


class Variable(Node):
    __slots__ = ('name',)

    def __init__(self, name: str):
        self._init(name=name)

    def _key(self) -> tuple:
        return (self.name,)

    def __repr__(self) -> str:
        return f"Variable({self.name!r})"


class Unary(Node):
    __slots__ = ('op', 'operand')

    def __init__(self, op: TokenType, operand: Node):
        self._init(op=op, operand=operand)

    def _key(self) -> tuple:
        return (self.op, self.operand)

    def __repr__(self) -> str:
        return f"Unary({self.op.name}, {self.operand!r})"


class Binary(Node):
    __slots__ = ('op', 'left', 'right')

    def __init__(self, op: TokenType, left: Node, right: Node):
        self._init(op=op, left=left, right=right)

    def _key(self) -> tuple:
        return (self.op, self.left, self.right)

    def __repr__(self) -> str:
        return f"Binary({self.op.name}, {self.left!r}, {self.right!r})"


class Function(Node):
    __slots__ = ('func', 'arg')

    def __init__(self, func: TokenType, arg: Node):
        self._init(func=func, arg=arg)

    @property
    def name(self) -> str:
        """Source name of the function, e.g. "sqrt"."""
        return self.func.value

    def _key(self) -> tuple:
        return (self.func, self.arg)

    def __repr__(self) -> str:
        return f"Function({self.func.name}, {self.arg!r})"


ADD_OPS = frozenset({TokenType.PLUS, TokenType.MINUS})
MUL_OPS = frozenset({TokenType.MUL, TokenType.DIV})


# ============================================================
# Parser
# ============================================================

class Parser:
    """
    Recursive-descent parser over a token list.

    The token list must end with END (as produced by tokenize()); a
    missing END is treated as if it were there.
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    @property
    def current(self) -> Token:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return Token(TokenType.END, "")

    def advance(self) -> Token:
        tok = self.current
        self.pos += 1
        return tok

    def expect(self, type: TokenType, description: str) -> Token:
        if self.current.type != type:
            raise ParseError(self.current, description)
        return self.advance()

    def parse(self) -> Node:
        """
        Parse a whole expression and require END after it.

        Raises:
            ParseError: On the first unexpected or missing token
            NestingError: If the input is nested past the recursion limit
        """
        try:
            node = self.parse_expression()
        except RecursionError:
            raise NestingError("parse") from None
        self.expect(TokenType.END, "end of input")
        return node

    def parse_expression(self) -> Node:
        node = self.parse_term()
        while self.current.type in ADD_OPS:
            op = self.advance().type
            node = Binary(op, node, self.parse_term())
        return node

    def parse_term(self) -> Node:
        node = self.parse_factor()
        while self.current.type in MUL_OPS:
            op = self.advance().type
            node = Binary(op, node, self.parse_factor())
        return node

    def parse_factor(self) -> Node:
        base = self.parse_primary()
        if self.current.type == TokenType.POW:
            self.advance()
            # Recurse into factor (not primary) for right associativity
            return Binary(TokenType.POW, base, self.parse_factor())
        return base

    def parse_primary(self) -> Node:
        tok = self.current

        if tok.type == TokenType.INT:
            self.advance()
            return Number(tok.value)

        if tok.type == TokenType.VAR:
            self.advance()
            return Variable(tok.value)

        if tok.type == TokenType.LPAREN:
            self.advance()
            node = self.parse_expression()
            self.expect(TokenType.RPAREN, "')'")
            return node

        if tok.type in FUNCTION_TYPES:
            self.advance()
            if self.current.type == TokenType.LPAREN:
                # sin(x)^2: the group is the whole argument
                return Function(tok.type, self.parse_primary())
            return Function(tok.type, self.parse_factor())

        if tok.type == TokenType.MINUS:
            self.advance()
            return Unary(TokenType.MINUS, self.parse_factor())

        raise ParseError(tok, "a number, variable, function, '(' or '-'")


def parse(tokens: List[Token]) -> Node:
    """
    Parse a token list into an expression tree.

    Raises:
        ParseError: On the first unexpected or missing token
        NestingError: If the input is nested past the recursion limit
    """
    tree = Parser(tokens).parse()
    logger.debug("parsed tree %r", tree)
    return tree


def parse_expression(text: str) -> Node:
    """Tokenize and parse text in one step."""
    return parse(tokenize(text))


# ============================================================
# Formatting
# ============================================================

def format_expr(node: Node) -> str:
    """
    Format a tree as infix text that parses back to the same tree.

    Every compound subexpression is parenthesized, so the output does not
    depend on precedence rules.

    Examples:
        Binary(PLUS, Number("1"), Variable("x"))  -> "(1 + x)"
        Function(SIN, Variable("x"))              -> "sin(x)"
        Unary(MINUS, Variable("x"))               -> "(-x)"
    """
    if isinstance(node, Number):
        return node.digits
    if isinstance(node, Variable):
        return node.name
    if isinstance(node, Unary):
        return f"(-{format_expr(node.operand)})"
    if isinstance(node, Binary):
        return f"({format_expr(node.left)} {node.op.value} {format_expr(node.right)})"
    if isinstance(node, Function):
        arg = format_expr(node.arg)
        if not arg.startswith("("):
            arg = f"({arg})"
        return f"{node.name}{arg}"
    raise TypeError(f"format_expr: not a tree node: {node!r}")


def format_tree(node: Node, indent: int = 0) -> str:
    """
    Format a tree as an indented outline, one node per line.

    Example:
        format_tree(parse_expression("sin(x) + 2")) ->
            BinaryOp: +
              Function: sin
                Var: x
              Num: 2
    """
    pad = "  " * indent
    if isinstance(node, Number):
        return f"{pad}Num: {node.digits}"
    if isinstance(node, Variable):
        return f"{pad}Var: {node.name}"
    if isinstance(node, Unary):
        return f"{pad}UnaryOp: -\n{format_tree(node.operand, indent + 1)}"
    if isinstance(node, Binary):
        return "\n".join([
            f"{pad}BinaryOp: {node.op.value}",
            format_tree(node.left, indent + 1),
            format_tree(node.right, indent + 1),
        ])
    if isinstance(node, Function):
        return f"{pad}Function: {node.name}\n{format_tree(node.arg, indent + 1)}"
    raise TypeError(f"format_tree: not a tree node: {node!r}")


