"""Tests for numeric evaluation."""

import math

import pytest
from polyeq.errors import EvaluationError
from polyeq.evaluator import evaluate, variables, FUNCTIONS
from polyeq.lexer import KEYWORDS, TokenType
from polyeq.parser import Variable, Unary, parse_expression


def ev(text, **env):
    return evaluate(parse_expression(text), env)


class TestEvaluate:
    """Tests for evaluate()."""

    def test_arithmetic(self):
        """Operators follow the parsed precedence."""
        assert ev("1 + 2 * 3^2") == 19.0
        assert ev("x -y - z", x=10, y=3, z=2) == 5.0
        assert ev("2^3^2") == 512.0
        assert ev("7/2") == 3.5

    def test_unary_minus(self):
        """Negation and double negation."""
        assert ev("-x^2", x=3) == -9.0
        assert ev("--5") == 5.0

    def test_implicit_multiplication(self):
        """2(x+1) evaluates as a product."""
        assert ev("2(x+1)", x=4) == 10.0

    def test_functions(self):
        """Each function maps to its math counterpart."""
        assert ev("sin(0)") == 0.0
        assert ev("cos(0)") == 1.0
        assert ev("tan(x)", x=0.5) == pytest.approx(math.tan(0.5))
        assert ev("cot(x)", x=0.5) == pytest.approx(1 / math.tan(0.5))
        assert ev("ln(x)", x=math.e) == pytest.approx(1.0)
        assert ev("sqrt(16)") == 4.0

    def test_function_power_binding(self):
        """sin(x)^2 squares the sine."""
        assert ev("sin(x)^2 + cos(x)^2", x=0.3) == pytest.approx(1.0)

    def test_every_keyword_has_a_function(self):
        """The keyword table and function table agree."""
        assert set(FUNCTIONS) == set(KEYWORDS)


class TestEvaluationErrors:
    """Tests for EvaluationError."""

    def test_unbound_variable(self):
        """Unbound variables are reported by name."""
        with pytest.raises(EvaluationError, match="'y'"):
            ev("x + y", x=1)

    def test_division_by_zero(self):
        """Division by zero raises instead of returning inf."""
        with pytest.raises(EvaluationError):
            ev("1/(x-x)", x=2)

    @pytest.mark.parametrize("text", ["ln(0)", "ln(-1)", "sqrt(-4)", "cot(0)", "0^-1"])
    def test_domain_errors(self, text):
        """Values outside a function's domain raise."""
        with pytest.raises(EvaluationError):
            ev(text)

    def test_literal_too_large(self):
        """Literals beyond float range raise instead of OverflowError."""
        with pytest.raises(EvaluationError):
            ev("1" + "0" * 400)

    def test_deeply_nested_tree(self):
        """Trees nested past the recursion limit raise EvaluationError."""
        node = Variable("x")
        for _ in range(5000):
            node = Unary(TokenType.MINUS, node)
        with pytest.raises(EvaluationError):
            evaluate(node, {"x": 1})


class TestVariables:
    """Tests for variables()."""

    def test_collects_names(self):
        """All variable names are collected once."""
        assert variables(parse_expression("x*y + sin(x)/z - 3")) == {"x", "y", "z"}

    def test_constant(self):
        """Constant expressions use no variables."""
        assert variables(parse_expression("2 + 3")) == set()
