"""Algebraic properties checked over seeded random expressions."""

import random

import pytest
from polyeq.evaluator import evaluate
from polyeq.generator import ExpressionGenerator
from polyeq.lexer import TokenType, needs_implicit_mul, Token
from polyeq.normalizer import canonical, normalize, is_canonical
from polyeq.parser import parse_expression

SEEDS = range(30)


def C(text):
    return canonical(parse_expression(text))


def sample(seed, count=3, max_depth=2, **kwargs):
    """count random expressions for a given seed, each parenthesized."""
    gen = ExpressionGenerator(rng=random.Random(seed), **kwargs)
    return [f"({e})" for e in gen.expressions(count, max_depth)]


class TestInvariants:
    """Properties that hold for every expression."""

    @pytest.mark.parametrize("seed", SEEDS)
    def test_determinism(self, seed):
        """Canonicalizing twice gives the same string."""
        (a,) = sample(seed, 1, max_depth=3)
        assert C(a) == C(a)

    @pytest.mark.parametrize("seed", SEEDS)
    def test_normalized_is_canonical(self, seed):
        """normalize() output satisfies the polynomial invariants."""
        (a,) = sample(seed, 1, max_depth=3)
        assert is_canonical(normalize(parse_expression(a)))


class TestRingLaws:
    """Commutativity, associativity and distributivity."""

    @pytest.mark.parametrize("seed", SEEDS)
    def test_add_commutative(self, seed):
        """a+b == b+a."""
        a, b = sample(seed, 2)
        assert C(f"{a}+{b}") == C(f"{b}+{a}")

    @pytest.mark.parametrize("seed", SEEDS)
    def test_mul_commutative(self, seed):
        """a*b == b*a."""
        a, b = sample(seed, 2)
        assert C(f"{a}*{b}") == C(f"{b}*{a}")

    @pytest.mark.parametrize("seed", SEEDS)
    def test_add_associative(self, seed):
        """(a+b)+c == a+(b+c)."""
        a, b, c = sample(seed)
        assert C(f"({a}+{b})+{c}") == C(f"{a}+({b}+{c})")

    @pytest.mark.parametrize("seed", SEEDS)
    def test_mul_associative(self, seed):
        """(a*b)*c == a*(b*c)."""
        a, b, c = sample(seed)
        assert C(f"({a}*{b})*{c}") == C(f"{a}*({b}*{c})")

    @pytest.mark.parametrize("seed", SEEDS)
    def test_distributive(self, seed):
        """a*(b+c) == a*b + a*c."""
        a, b, c = sample(seed)
        assert C(f"{a}*({b}+{c})") == C(f"{a}*{b} + {a}*{c}")

    @pytest.mark.parametrize("seed", SEEDS)
    def test_sign_rule(self, seed):
        """a-b == -b+a."""
        a, b = sample(seed, 2)
        assert C(f"{a}-{b}") == C(f"-{b}+{a}")

    @pytest.mark.parametrize("seed", SEEDS)
    def test_self_cancellation(self, seed):
        """a-a == 0."""
        (a,) = sample(seed, 1)
        assert C(f"{a}-{a}") == "0"


class TestLikeTerms:
    """n*E equals E added to itself n times."""

    @pytest.mark.parametrize("seed", SEEDS)
    def test_merge(self, seed):
        """n*E == E+...+E for n in 1..4."""
        rng = random.Random(seed)
        atoms = [rng.choice("xyzab") for _ in range(rng.randint(1, 3))]
        if rng.random() < 0.5:
            atoms.append(f"sin({rng.choice('xyz')})")
        e = "*".join(atoms)
        for n in range(1, 5):
            assert C(f"{n}*{e}") == C("+".join([e] * n))


class TestExpansion:
    """Square and cube expansion."""

    @pytest.mark.parametrize("seed", SEEDS)
    def test_square(self, seed):
        """(a+b)^2 == a*a + 2*a*b + b*b."""
        a, b = sample(seed, 2)
        assert C(f"({a}+{b})^2") == C(f"{a}*{a} + 2*{a}*{b} + {b}*{b}")

    @pytest.mark.parametrize("seed", SEEDS)
    def test_cube(self, seed):
        """(a+b)^3 == a^3 + 3a^2b + 3ab^2 + b^3."""
        a, b = sample(seed, 2, max_depth=1)
        assert C(f"({a}+{b})^3") == C(
            f"{a}^3 + 3*{a}^2*{b} + 3*{a}*{b}^2 + {b}^3")


# One representative source snippet per token type that can sit on either
# side of an implicit multiplication
LEFT_SNIPPETS = {
    TokenType.INT: "2",
    TokenType.VAR: "x",
    TokenType.RPAREN: "(y+1)",
}

RIGHT_SNIPPETS = {
    TokenType.INT: "3",
    TokenType.VAR: "z",
    TokenType.LPAREN: "(w-1)",
    TokenType.SIN: "sin(v)",
    TokenType.COS: "cos(v)",
    TokenType.TAN: "tan(v)",
    TokenType.COT: "cot(v)",
    TokenType.LN: "ln(v)",
    TokenType.SQRT: "sqrt(v)",
}


class TestImplicitMulCompleteness:
    """Every implicit pair parses like the explicit product."""

    @pytest.mark.parametrize("left", list(LEFT_SNIPPETS))
    @pytest.mark.parametrize("right", list(RIGHT_SNIPPETS))
    def test_pair(self, left, right):
        """Joined source parses like source with an explicit '*'."""
        assert needs_implicit_mul(Token(left, ""), Token(right, ""))
        a, b = LEFT_SNIPPETS[left], RIGHT_SNIPPETS[right]
        assert parse_expression(f"{a} {b}") == parse_expression(f"{a}*{b}")


class TestNumericAgreement:
    """Canonical forms of polynomial expressions evaluate like the input."""

    @pytest.mark.parametrize("seed", SEEDS)
    def test_canonical_evaluates_the_same(self, seed):
        """Re-parsing the canonical form preserves the value."""
        gen = ExpressionGenerator(rng=random.Random(seed), variables=("x", "y", "z"),
                                  functions=(), operators=("+", "-", "*"))
        text = gen.expression(max_depth=2)
        # Small integers keep every intermediate float exact
        env = {"x": 2, "y": -3, "z": 5}
        original = evaluate(parse_expression(text), env)
        reparsed = evaluate(parse_expression(C(text)), env)
        assert reparsed == pytest.approx(original)

    @pytest.mark.parametrize("seed", SEEDS)
    def test_canonical_is_a_fixed_point(self, seed):
        """Canonicalizing a canonical form changes nothing."""
        gen = ExpressionGenerator(rng=random.Random(seed), variables=("x", "y", "z"),
                                  functions=("sin", "cos"), operators=("+", "-", "*"))
        text = gen.expression(max_depth=3)
        assert C(C(text)) == C(text)
