"""
Core rewriter module for symbolic expression transformation.

REDEX - reducible expressions, rewritten one step at a time.

This module provides the expression model, structural pattern matching
and binding substitution used by rule-based expression rewriting.

Expressions:
    Sym("x")                      - atomic symbol
    Fun("f", [Sym("x"), ...])     - named function application

Every symbol in a pattern is a variable. Matching f(x, x) binds x once
and requires every later occurrence to be structurally equal.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Set, Tuple, Union


# ============================================================
# Expression Model
# ============================================================

@dataclass(frozen=True)
class Sym:
    """An atomic symbol. Inside a pattern it acts as a variable."""

    name: str

    def __post_init__(self):
        if not isinstance(self.name, str):
            raise TypeError(f"Sym: name must be a str, got {type(self.name).__name__}")

    def __str__(self) -> str:
        return render(self)

    def __repr__(self) -> str:
        return f"Sym({self.name!r})"


@dataclass(frozen=True)
class Fun:
    """
    A function application: a functor name and an ordered tuple of arguments.

    The arguments are stored as a tuple, so a Fun can never be modified
    after construction. A zero-arity application renders as "f()" and is
    distinct from the symbol "f".
    """

    name: str
    args: Tuple["Expr", ...] = ()

    def __post_init__(self):
        if not isinstance(self.name, str):
            raise TypeError(f"Fun: name must be a str, got {type(self.name).__name__}")
        args = tuple(self.args)
        for arg in args:
            if not isinstance(arg, (Sym, Fun)):
                raise TypeError(f"Fun: argument must be an expression, got {arg!r}")
        object.__setattr__(self, "args", args)

    @property
    def arity(self) -> int:
        return len(self.args)

    def __str__(self) -> str:
        return render(self)

    def __repr__(self) -> str:
        return f"Fun({self.name!r}, {list(self.args)!r})"


# Type aliases
Expr = Union[Sym, Fun]
BindingsType = Union[Dict[str, Expr], str]  # name -> expression, or "failed"


def is_symbol(expr: Any) -> bool:
    """Check if an expression is an atomic symbol."""
    return isinstance(expr, Sym)


def is_function(expr: Any) -> bool:
    """Check if an expression is a function application."""
    return isinstance(expr, Fun)


def render(expr: Expr) -> str:
    """
    Render an expression in its canonical display form.

    Examples:
        Sym("x")                            -> "x"
        Fun("f", [Sym("a"), Sym("b")])      -> "f(a, b)"
        Fun("g", [])                        -> "g()"
    """
    if isinstance(expr, Sym):
        return expr.name
    return f"{expr.name}({', '.join(render(arg) for arg in expr.args)})"


def symbols(expr: Expr) -> Set[str]:
    """Collect the names of every symbol occurring as a leaf of expr."""
    if isinstance(expr, Sym):
        return {expr.name}
    names: Set[str] = set()
    for arg in expr.args:
        names |= symbols(arg)
    return names


def free_in(name: str, expr: Expr) -> bool:
    """
    Check if a symbol appears as a leaf anywhere in an expression.

    Functor names do not count: free_in("f", f(x)) is False.
    """
    if isinstance(expr, Sym):
        return expr.name == name
    return any(free_in(name, arg) for arg in expr.args)


# ============================================================
# Bindings Class - read-only mapping for match results
# ============================================================

class Bindings:
    """
    Read-only mapping from pattern variable name to the expression it matched.

        if bindings := match(pattern, expr):
            print(bindings["x"])

    Bindings objects are truthy even when empty, since an empty result
    still means the match succeeded. Failed matches return NoMatch.
    """

    __slots__ = ('_dict',)

    def __init__(self, pairs: Union[Dict[str, Expr], Iterable[Tuple[str, Expr]]] = ()):
        """Initialize from a dict or an iterable of (name, value) pairs."""
        self._dict = dict(pairs)

    def __bool__(self) -> bool:
        return True

    def __getitem__(self, key: str) -> Expr:
        return self._dict[key]

    def get(self, key: str, default=None):
        """Get a bound value with optional default."""
        return self._dict.get(key, default)

    def __contains__(self, key: str) -> bool:
        return key in self._dict

    def keys(self):
        return self._dict.keys()

    def values(self):
        return self._dict.values()

    def items(self):
        return self._dict.items()

    def __iter__(self):
        return iter(self._dict)

    def __len__(self) -> int:
        return len(self._dict)

    def __repr__(self) -> str:
        inner = ", ".join(f"{name}: {render(value)}" for name, value in self._dict.items())
        return f"Bindings({{{inner}}})"

    def __eq__(self, other):
        if isinstance(other, Bindings):
            return self._dict == other._dict
        if isinstance(other, dict):
            return self._dict == other
        return False

    def to_dict(self) -> Dict[str, Expr]:
        """Convert to a plain dictionary."""
        return self._dict.copy()


class _NoMatch:
    """
    Singleton representing a failed pattern match.

    NoMatch is falsy and behaves like an empty mapping.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NoMatch"

    def __getitem__(self, key: str):
        raise KeyError(f"NoMatch has no binding for '{key}'")

    def get(self, key: str, default=None):
        return default

    def __contains__(self, key: str) -> bool:
        return False

    def __len__(self) -> int:
        return 0

    def __iter__(self):
        return iter([])


# Singleton instance
NoMatch = _NoMatch()


def wrap_bindings(result: BindingsType) -> Union[Bindings, _NoMatch]:
    """Convert the internal bindings representation to Bindings or NoMatch."""
    if result == "failed":
        return NoMatch
    return Bindings(result)


def extend_bindings(name: str, dat: Expr, bindings: BindingsType) -> BindingsType:
    """
    Extend bindings with name -> dat.

    Returns the same bindings when name is already bound to an equal
    expression, "failed" when it is bound to a different one, and a new
    dict otherwise. The input is never mutated.
    """
    if bindings == "failed":
        return "failed"

    if name in bindings:
        return bindings if bindings[name] == dat else "failed"

    extended = dict(bindings)
    extended[name] = dat
    return extended


# ============================================================
# Pattern Matching
# ============================================================

def match(pattern: Expr, subject: Expr) -> Union[Bindings, _NoMatch]:
    """
    Match a pattern against a subject expression.

    Every symbol in the pattern is a variable. Function applications
    match only applications with the same name and arity, child by child
    from left to right. Matching stops at the first mismatch and never
    backtracks.

    Args:
        pattern: The pattern expression
        subject: The expression to match against

    Returns:
        Bindings on success, NoMatch on failure
    """
    return wrap_bindings(match_bindings(pattern, subject, {}))


def match_bindings(pat: Expr, exp: Expr, bindings: BindingsType) -> BindingsType:
    """
    Match pat against exp, threading bindings.

    Returns:
        Updated bindings on success, "failed" on failure
    """
    if bindings == "failed":
        return "failed"

    if isinstance(pat, Sym):
        return extend_bindings(pat.name, exp, bindings)

    if not isinstance(exp, Fun):
        return "failed"

    if pat.name != exp.name or pat.arity != exp.arity:
        return "failed"

    for sub_pat, sub_exp in zip(pat.args, exp.args):
        bindings = match_bindings(sub_pat, sub_exp, bindings)
        if bindings == "failed":
            return "failed"
    return bindings


# ============================================================
# Substitution
# ============================================================

class FunctorBindingError(ValueError):
    """Raised when a functor name is bound to a function application."""

    def __init__(self, functor: str, value: Expr):
        self.functor = functor
        self.value = value
        super().__init__(
            f"Expected symbol in the place of the functor name '{functor}', "
            f"but it is bound to {render(value)}"
        )


def substitute_functor(name: str, bindings: Union[Bindings, Dict[str, Expr]]) -> str:
    """
    Resolve a functor name through the bindings.

    Raises:
        FunctorBindingError: If name is bound to a function application
    """
    value = bindings.get(name)
    if value is None:
        return name
    if isinstance(value, Sym):
        return value.name
    raise FunctorBindingError(name, value)


def substitute(bindings: Union[Bindings, Dict[str, Expr]], template: Expr) -> Expr:
    """
    Replace every bound symbol in template with its bound expression.

    Functor names are substituted too, which lets a rule rename a
    function: with f -> g bound, f(x) becomes g(x).

    Args:
        bindings: Variable bindings from a successful match
        template: The expression to instantiate

    Returns:
        A new expression; neither bindings nor template are modified

    Raises:
        FunctorBindingError: If a functor name is bound to a function application
    """
    if isinstance(template, Sym):
        return bindings.get(template.name, template)

    name = substitute_functor(template.name, bindings)
    return Fun(name, [substitute(bindings, arg) for arg in template.args])
