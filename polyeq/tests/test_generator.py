"""Tests for random expression generation."""

import random

import pytest
from polyeq.generator import ExpressionGenerator, EDGE_CASES
from polyeq.lexer import TokenType, tokenize
from polyeq.normalizer import canonical
from polyeq.parser import parse_expression


class TestExpressionGenerator:
    """Tests for ExpressionGenerator."""

    def test_reproducible_with_rng(self):
        """Same seed, same expressions."""
        gen1 = ExpressionGenerator(rng=random.Random(42))
        gen2 = ExpressionGenerator(rng=random.Random(42))
        assert list(gen1.expressions(20)) == list(gen2.expressions(20))

    def test_different_seeds_differ(self):
        """Different seeds usually give different output."""
        a = list(ExpressionGenerator(rng=random.Random(1)).expressions(20))
        b = list(ExpressionGenerator(rng=random.Random(2)).expressions(20))
        assert a != b

    def test_everything_parses(self):
        """Every generated expression tokenizes, parses and normalizes."""
        gen = ExpressionGenerator(rng=random.Random(7))
        for text in gen.expressions(300, max_depth=3):
            canonical(parse_expression(text))

    def test_depth_zero_is_atom(self):
        """At depth limit only atoms are produced."""
        gen = ExpressionGenerator(rng=random.Random(3))
        for _ in range(50):
            tokens = tokenize(gen.expression(max_depth=0))
            assert len(tokens) == 2
            assert tokens[0].type in (TokenType.INT, TokenType.VAR)

    def test_atom_range(self):
        """Integer atoms lie in [0, 100]."""
        gen = ExpressionGenerator(rng=random.Random(5))
        for _ in range(200):
            atom = gen.atom()
            if atom.isdigit():
                assert 0 <= int(atom) <= 100
            else:
                assert atom in gen.variables

    def test_custom_alphabet(self):
        """Only the configured variables, functions and operators appear."""
        gen = ExpressionGenerator(rng=random.Random(11), variables=("q",),
                                  functions=("sqrt",), operators=("+",))
        allowed = {TokenType.INT, TokenType.VAR, TokenType.SQRT, TokenType.PLUS,
                   TokenType.MINUS, TokenType.MUL, TokenType.LPAREN,
                   TokenType.RPAREN, TokenType.END}
        for text in gen.expressions(100):
            for tok in tokenize(text):
                assert tok.type in allowed
                if tok.type == TokenType.VAR:
                    assert tok.value == "q"

    def test_no_variables(self):
        """Without variables every atom is a number."""
        gen = ExpressionGenerator(rng=random.Random(0), variables=())
        assert all(gen.atom().isdigit() for _ in range(50))

    def test_repr(self):
        """Repr lists the alphabets."""
        assert "sqrt" in repr(ExpressionGenerator())


class TestEdgeCases:
    """Tests for the built-in edge case list."""

    @pytest.mark.parametrize("text", EDGE_CASES)
    def test_edge_case_parses(self, text):
        """Every edge case goes through the whole pipeline."""
        canonical(parse_expression(text))

    def test_known_results(self):
        """A few edge cases have well-known canonical forms."""
        results = {text: canonical(parse_expression(text)) for text in EDGE_CASES}
        assert results["-5"] == "-5"
        assert results["--5"] == "5"
        assert results["2(x+1)"] == "2+2x"
        assert results["((((x))))"] == "x"
        assert results["1 + 2 * 3^4"] == "1+2(3)^(4)"
        assert results["x -y - z"] == "x-y-z"
