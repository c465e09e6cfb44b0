"""
REDEX - reducible expressions, rewritten one step at a time

A small term-rewriting library: expressions, structural pattern matching,
binding substitution and outermost-first single-step rule application,
plus a tokenizer for the rule language.

Quick Start:
    from redex import E, match, substitute

    rule = E.rule(E.fun("swap", E.fun("pair", "a", "b")),
                  E.fun("pair", "b", "a"))

    rule(E.fun("swap", E.fun("pair", "x", "y")))   # => pair(y, x)

Expressions:
    x               - symbol (a variable when it appears in a pattern)
    f(x, g(y))      - function application
    nil()           - zero-arity application, distinct from the symbol nil

Matching:
    match(f(x, x), f(a, a))     # => Bindings({x: a})
    match(f(x, x), f(a, b))     # => NoMatch

Substitution also rewrites functor names bound to symbols:
    substitute({"f": g}, f(x))  # => g(x)

Tokens:
    for token in tokenize("swap(a, b) = pair(b, a)"):
        print(token)            # 0:0: symbol 'swap' ...
"""

__version__ = "0.1.0"

import logging

# Silent until the application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Core rewriter components
from .rewriter import (
    Expr,
    Sym,
    Fun,
    BindingsType,
    render,
    symbols,
    free_in,
    is_symbol,
    is_function,
    # Bindings classes
    Bindings,
    NoMatch,
    wrap_bindings,
    extend_bindings,
    # Matching and substitution
    match,
    substitute,
    FunctorBindingError,
)

# Rules and single-step rewriting
from .engine import (
    Rule,
    apply_all,
    E,
)

# Tokenizer
from .lexer import (
    Loc,
    Token,
    TokenKind,
    Lexer,
    tokenize,
    keyword_by_name,
    KEYWORDS,
)

# Public API
__all__ = [
    # Version
    "__version__",
    # Expressions
    "Expr",
    "Sym",
    "Fun",
    "BindingsType",
    "render",
    "symbols",
    "free_in",
    "is_symbol",
    "is_function",
    # Bindings
    "Bindings",
    "NoMatch",
    "wrap_bindings",
    "extend_bindings",
    # Core
    "match",
    "substitute",
    "FunctorBindingError",
    # Rules
    "Rule",
    "apply_all",
    "E",
    # Tokenizer
    "Loc",
    "Token",
    "TokenKind",
    "Lexer",
    "tokenize",
    "keyword_by_name",
    "KEYWORDS",
]
