"""
Rules and single-step rewriting for REDEX.

A rule pairs a pattern (head) with a template (body). Applying a rule
performs exactly one outermost-first rewrite step:

    swap = E.rule(E.fun("swap", E.fun("pair", "a", "b")),
                  E.fun("pair", "b", "a"))
    swap(E.fun("swap", E.fun("pair", "x", "y")))   # => pair(y, x)

When the head matches the whole expression, the expression is replaced
and nothing below it is touched in the same step. Otherwise every child
is visited independently. Reaching a normal form is left to the caller,
who can compare the result with the input to tell whether anything
changed.
"""

import logging
from typing import Set, Tuple, Union

import structlog

from .rewriter import (
    Expr, Sym, Fun, Bindings, FunctorBindingError,
    match as _match_internal, substitute, render, symbols, _NoMatch,
)

logger = structlog.wrap_logger(logging.getLogger(__name__), wrapper_class=structlog.stdlib.BoundLogger)


# ============================================================
# Expression Builder
# ============================================================

class _ExprBuilder:
    """
    Expression builder for REDEX.

    Bare strings passed as arguments become symbols, so nested terms
    read close to their rendered form.

    Examples:
        from redex import E

        E.sym("x")                          -> x
        E.fun("f", "x", E.fun("g", "y"))    -> f(x, g(y))
        E.fun("nil")                        -> nil()
        a, b = E.syms("a", "b")
        E.rule(E.fun("f", "x"), "x")        -> f(x) => x
    """

    def sym(self, name: str) -> Sym:
        """Create a symbol."""
        return Sym(name)

    def syms(self, *names: str) -> Tuple[Sym, ...]:
        """
        Create multiple symbols for unpacking.

        Example:
            x, y = E.syms("x", "y")
        """
        return tuple(Sym(name) for name in names)

    def fun(self, name: str, *args: Union[str, Expr]) -> Fun:
        """Build a function application; str arguments are promoted to Sym."""
        return Fun(name, [self.expr(arg) for arg in args])

    def expr(self, value: Union[str, Expr]) -> Expr:
        """Coerce a str to a Sym; expressions pass through unchanged."""
        if isinstance(value, str):
            return Sym(value)
        if isinstance(value, (Sym, Fun)):
            return value
        raise TypeError(f"Cannot build an expression from {value!r}")

    def rule(self, head: Union[str, Expr], body: Union[str, Expr]) -> "Rule":
        """Build a rule from a head pattern and a body template."""
        return Rule(self.expr(head), self.expr(body))

    def __repr__(self) -> str:
        return "E (expression builder)"


# Singleton instance
E = _ExprBuilder()


# ============================================================
# Rules
# ============================================================

class Rule:
    """
    An immutable rewrite rule: head => body.

    Every symbol in the head is a variable, including names that also
    appear as constants elsewhere. A symbol in the body refers to
    whatever the head bound it to, and is copied verbatim if unbound.
    """

    __slots__ = ('_head', '_body')

    def __init__(self, head: Expr, body: Expr):
        if not isinstance(head, (Sym, Fun)) or not isinstance(body, (Sym, Fun)):
            raise TypeError("Rule: head and body must be expressions")
        object.__setattr__(self, '_head', head)
        object.__setattr__(self, '_body', body)

    def __setattr__(self, name, value):
        raise AttributeError("Rule is immutable")

    @property
    def head(self) -> Expr:
        return self._head

    @property
    def body(self) -> Expr:
        return self._body

    def variables(self) -> Set[str]:
        """Names bound by the head pattern: every symbol it contains."""
        return symbols(self._head)

    def match(self, expr: Expr) -> Union[Bindings, _NoMatch]:
        """Match the head against the whole expression."""
        return _match_internal(self._head, expr)

    def apply_all(self, expr: Expr) -> Expr:
        """
        Perform one outermost-first rewrite step.

        Args:
            expr: The subject expression

        Returns:
            The rewritten expression (equal to expr if no subtree matched)

        Raises:
            FunctorBindingError: If the body uses a head variable bound to
                a function application as a functor name
        """
        bindings = self.match(expr)
        if bindings:
            log = logger.bind(component="rule", rule=str(self))
            try:
                result = substitute(bindings, self._body)
            except FunctorBindingError as e:
                log.warning("functor_binding_rejected", functor=e.functor, value=render(e.value))
                raise
            log.debug("rule_applied", before=render(expr), after=render(result))
            return result

        if isinstance(expr, Sym):
            return expr
        return Fun(expr.name, [self.apply_all(arg) for arg in expr.args])

    def __call__(self, expr: Expr) -> Expr:
        return self.apply_all(expr)

    def __eq__(self, other):
        if isinstance(other, Rule):
            return self._head == other._head and self._body == other._body
        return False

    def __hash__(self) -> int:
        return hash((self._head, self._body))

    def __str__(self) -> str:
        return f"{render(self._head)} => {render(self._body)}"

    def __repr__(self) -> str:
        return f"Rule({self._head!r}, {self._body!r})"


def apply_all(rule: Rule, expr: Expr) -> Expr:
    """Apply one outermost-first rewrite step of rule to expr."""
    return rule.apply_all(expr)
