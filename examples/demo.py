#!/usr/bin/env python3
"""
POLYEQ Feature Demonstration

This script walks through tokenizing, parsing, canonical forms,
comparison, numeric spot checks and random testing.
"""

import random

from polyeq import (
    ExpressionEngine, ExpressionGenerator, EDGE_CASES,
    tokenize, format_tokens, parse_expression, format_tree, evaluate,
    PolyeqError,
)


def section(title: str):
    """Print a section header."""
    print(f"\n{'='*60}")
    print(f" {title}")
    print('='*60)


def demo_tokenizing():
    """Demonstrate keywords and implicit multiplication."""
    section("Tokenizing")

    for text in ["3x", "2(x+1)", "sinxlnx", "x-yzsinxy"]:
        print(f"  {text:12} => {format_tokens(tokenize(text))}")


def demo_parsing():
    """Demonstrate precedence and associativity."""
    section("Parsing")

    for text in ["1 + 2 * 3^4", "sin(x)^2", "sinx^2xsiny"]:
        print(f"\n  {text}")
        print(format_tree(parse_expression(text), indent=2))


def demo_canonical_forms():
    """Demonstrate canonical forms."""
    section("Canonical Forms")

    engine = ExpressionEngine()
    examples = [
        "2*x + 3*x",
        "(x+1)*(x-1)",
        "(x+y)^2",
        "(a-b)^3",
        "sin(1+x) - sin(x+1)",
        "x/x",
    ]

    for text in examples:
        print(f"  {text:20} => {engine.canonical(text)}")


def demo_comparison():
    """Demonstrate equality checks."""
    section("Comparison")

    engine = ExpressionEngine()
    pairs = [
        ("1 + x", "x + 1"),
        ("(x+y)^2", "x^2 + 2xy + y^2"),
        ("x/x", "1"),
        ("x^4", "x*x*x*x"),
    ]

    for a, b in pairs:
        print(f"  {engine.compare(a, b).format()}")

    print("\n  With fourth powers expanded:")
    wide = ExpressionEngine(expand={2, 3, 4})
    print(f"  {wide.compare('x^4', 'x*x*x*x').format()}")


def demo_evaluation():
    """Demonstrate numeric spot checks of a canonical form."""
    section("Numeric Spot Check")

    engine = ExpressionEngine()
    text = "(x+2)(x-3) + sin(y)^2"
    env = {"x": 1.5, "y": 0.25}
    before = evaluate(parse_expression(text), env)
    after = evaluate(parse_expression(engine.canonical(text)), env)
    print(f"  {text} at {env}")
    print(f"    original:  {before:.6f}")
    print(f"    canonical: {after:.6f}")

    try:
        evaluate(parse_expression("ln(x)"), {"x": 0})
    except PolyeqError as e:
        print(f"  ln(0): {e}")


def demo_random_testing():
    """Demonstrate seeded random expressions and edge cases."""
    section("Random Testing")

    engine = ExpressionEngine()
    gen = ExpressionGenerator(rng=random.Random(2024))
    for text in gen.expressions(5, max_depth=2):
        print(f"  {text}")
        print(f"    => {engine.canonical(text)}")

    print("\n  Edge cases:")
    for text in EDGE_CASES:
        print(f"    {text:18} => {engine.canonical(text)}")


def main():
    """Run all demonstrations."""
    print("POLYEQ - Polynomial Equality via canonical forms")
    print("Feature Demonstration")

    demo_tokenizing()
    demo_parsing()
    demo_canonical_forms()
    demo_comparison()
    demo_evaluation()
    demo_random_testing()

    print("\n" + "="*60)
    print(" Demo complete!")
    print("="*60)


if __name__ == "__main__":
    main()
