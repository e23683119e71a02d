"""
Tokenizer for infix arithmetic expressions.

Turns a string such as "2(x+1) - sinxy" into a flat list of Tokens ending
with END. Scanning happens in two passes:

    1. scan() reads literals, operators, parentheses and identifiers.
       Identifiers are matched greedily against KEYWORDS; letters that do
       not start a keyword become single-letter variables, so "sinxy"
       scans as SIN x y.
    2. insert_implicit_mul() adds a MUL token wherever two adjacent tokens
       denote a product without a written operator ("3x", "2(x+1)", "xy").

Examples:
    tokenize("3x")     -> [INT '3', MUL '*', VAR 'x', END]
    tokenize("sinxy")  -> [SIN 'sin', VAR 'x', MUL '*', VAR 'y', END]
"""

import logging
import string
from enum import Enum
from typing import Dict, List, Optional

from .errors import LexError

logger = logging.getLogger(__name__)


class TokenType(Enum):
    INT = "INT"
    VAR = "VAR"
    PLUS = "+"
    MINUS = "-"
    MUL = "*"
    DIV = "/"
    POW = "^"
    LPAREN = "("
    RPAREN = ")"
    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    COT = "cot"
    LN = "ln"
    SQRT = "sqrt"
    END = "END"


# Reserved function names, tried in this order at every letter.
# Adding a function here (and to evaluator.FUNCTIONS) is all it takes.
KEYWORDS: Dict[str, TokenType] = {
    "sin": TokenType.SIN,
    "cos": TokenType.COS,
    "tan": TokenType.TAN,
    "cot": TokenType.COT,
    "ln": TokenType.LN,
    "sqrt": TokenType.SQRT,
}

FUNCTION_TYPES = frozenset(KEYWORDS.values())

OPERATORS: Dict[str, TokenType] = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MUL,
    "/": TokenType.DIV,
    "^": TokenType.POW,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}

WHITESPACE = frozenset(string.whitespace)
DIGITS = frozenset(string.digits)
LETTERS = frozenset(string.ascii_letters)

# Implicit multiplication: a MUL goes between prev and curr iff
# prev is in IMPLICIT_LEFT and curr is in IMPLICIT_RIGHT.
IMPLICIT_LEFT = frozenset({TokenType.INT, TokenType.VAR, TokenType.RPAREN})
IMPLICIT_RIGHT = frozenset({TokenType.INT, TokenType.VAR, TokenType.LPAREN}) | FUNCTION_TYPES


class Token:
    """
    A single lexical token.

    Tokens compare by (type, value) only, so an inserted implicit "*"
    equals a written one. The offset is kept for error messages; it is -1
    for tokens that do not come from the source text.
    """

    __slots__ = ('type', 'value', 'offset')

    def __init__(self, type: TokenType, value: str, offset: int = -1):
        self.type = type
        self.value = value
        self.offset = offset

    def __eq__(self, other):
        if isinstance(other, Token):
            return self.type == other.type and self.value == other.value
        return False

    def __hash__(self):
        return hash((self.type, self.value))

    def __repr__(self) -> str:
        if self.type in (TokenType.INT, TokenType.VAR):
            return f"{self.type.name}({self.value!r})"
        return self.type.name


def _match_keyword(text: str, i: int) -> Optional[Token]:
    """Return the keyword token starting at text[i], or None."""
    for word, type in KEYWORDS.items():
        if text.startswith(word, i):
            return Token(type, word, i)
    return None


def scan(text: str) -> List[Token]:
    """
    Primary scan: split text into tokens without implicit multiplication.

    Raises:
        LexError: On any character that is not whitespace, an ASCII digit
                  or letter, or one of + - * / ^ ( )
    """
    tokens: List[Token] = []
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        if ch in WHITESPACE:
            i += 1
            continue

        if ch in DIGITS:
            j = i
            while j < n and text[j] in DIGITS:
                j += 1
            tokens.append(Token(TokenType.INT, text[i:j], i))
            i = j
            continue

        if ch in LETTERS:
            keyword = _match_keyword(text, i)
            if keyword is not None:
                tokens.append(keyword)
                i += len(keyword.value)
            else:
                tokens.append(Token(TokenType.VAR, ch, i))
                i += 1
            continue

        if ch in OPERATORS:
            tokens.append(Token(OPERATORS[ch], ch, i))
            i += 1
            continue

        raise LexError(i, ch)

    tokens.append(Token(TokenType.END, "", n))
    return tokens


def needs_implicit_mul(prev: Token, curr: Token) -> bool:
    """Check whether a MUL token belongs between prev and curr."""
    return prev.type in IMPLICIT_LEFT and curr.type in IMPLICIT_RIGHT


def insert_implicit_mul(tokens: List[Token]) -> List[Token]:
    """Return a copy of tokens with implicit MUL tokens inserted."""
    if not tokens:
        return []
    out = [tokens[0]]
    for prev, curr in zip(tokens, tokens[1:]):
        if needs_implicit_mul(prev, curr):
            out.append(Token(TokenType.MUL, "*"))
        out.append(curr)
    return out


def tokenize(text: str) -> List[Token]:
    """
    Tokenize text, inserting implicit multiplication.

    The result always ends with an END token.

    Raises:
        LexError: On an unrecognized character
    """
    tokens = insert_implicit_mul(scan(text))
    logger.debug("tokenized %r into %d tokens", text, len(tokens))
    return tokens


def format_tokens(tokens: List[Token]) -> str:
    """Format tokens on one line, e.g. "INT('3') MUL VAR('x') END"."""
    return " ".join(repr(t) for t in tokens)
