#!/usr/bin/env python3
"""
REDEX Feature Demonstration

Shows matching, substitution, single-step rewriting and tokenizing.
"""

from redex import E, match, substitute, apply_all, tokenize, FunctorBindingError


def section(title: str):
    """Print a section header."""
    print(f"\n{'='*60}")
    print(f" {title}")
    print('='*60)


def demo_matching():
    """Demonstrate pattern matching and consistent bindings."""
    section("Matching")

    pattern = E.fun("f", "x", "x")
    for subject in [E.fun("f", "a", "a"), E.fun("f", "a", "b")]:
        print(f"  match({pattern}, {subject}) = {match(pattern, subject)!r}")


def demo_substitution():
    """Demonstrate substitution, including functor names."""
    section("Substitution")

    bindings = {"f": E.sym("g"), "x": E.fun("h", "a")}
    template = E.fun("f", "x", "y")
    print(f"  {template} => {substitute(bindings, template)}")

    try:
        substitute({"f": E.fun("g", "a")}, template)
    except FunctorBindingError as e:
        print(f"  error: {e}")


def demo_rewriting():
    """Step a rule to normal form; the loop lives outside the library."""
    section("Rewriting")

    rule = E.rule(E.fun("swap", E.fun("pair", "a", "b")), E.fun("pair", "b", "a"))
    expr = E.fun("swap", E.fun("pair", E.fun("swap", E.fun("pair", "x", "y")), "z"))
    print(f"  rule: {rule}")
    print(f"  {expr}")
    while True:
        result = apply_all(rule, expr)
        if result == expr:
            break
        expr = result
        print(f"  => {expr}")


def demo_tokens():
    """Demonstrate the tokenizer."""
    section("Tokens")

    for token in tokenize("rule swap(pair(a, b)) = pair(b, a)\napply swap"):
        print(f"  {token}")


if __name__ == "__main__":
    demo_matching()
    demo_substitution()
    demo_rewriting()
    demo_tokens()
