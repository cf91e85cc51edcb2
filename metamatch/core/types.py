"""
metamatch/core/types.py
=======================
Foundation term model for MetaMatch.
Every module imports from here. No circular dependencies.

A Term is one of four frozen dataclasses:

  Symbol       leaf with text; ``metavariable=True`` marks a placeholder
  Index        de Bruijn reference to an enclosing binder (0 = innermost)
  Binder       reserved marker heading an encoded binding
  Application  ordered, non-empty tuple of child terms

Bindings are Applications whose first child is a Binder:
    λx. (f x)        →  (λx (f x))                 named form
                     →  (λx (f #0))                de Bruijn form
Quantifiers are constants applied to a binding:
    ∀x. P(x)         →  (forall (λx (P x)))

Expression-function applications (EFAs) use the reserved ``@`` symbol:
    P(a, b)          →  (@ ?P a b)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Set, Tuple, Union

Address = Tuple[int, ...]


# ─────────────────────────────────────────────
#  TERM VARIANTS
# ─────────────────────────────────────────────

@dataclass(frozen=True)
class Symbol:
    """A leaf symbol.

    Metavariables print with a leading '?', e.g. ``?P``.
    Two symbols are equal iff text and metavariable flag agree.
    """
    text: str
    metavariable: bool = False

    def __str__(self) -> str:
        return f"?{self.text}" if self.metavariable else self.text


@dataclass(frozen=True)
class Index:
    """De Bruijn index. ``name`` is kept only for decoding."""
    value: int
    name: str = field(default="", compare=False)

    def __str__(self) -> str:
        return f"#{self.value}"


@dataclass(frozen=True)
class Binder:
    """Marker heading a binding. All binders compare equal (alpha-equivalence)."""
    variable: str = field(compare=False)

    def __str__(self) -> str:
        return f"λ{self.variable}"


@dataclass(frozen=True)
class Application:
    children: Tuple["Term", ...]

    def __post_init__(self):
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))

    def __len__(self) -> int:
        return len(self.children)

    def __str__(self) -> str:
        return "(" + " ".join(str(c) for c in self.children) + ")"


Term = Union[Symbol, Index, Binder, Application]
TERM_TYPES = (Symbol, Index, Binder, Application)

# Reserved head of every expression-function application
EFA = Symbol("@")


# ─────────────────────────────────────────────
#  BUILDERS
# ─────────────────────────────────────────────

def symbol(text: str) -> Symbol:
    return Symbol(text)


def metavariable(text: str) -> Symbol:
    return Symbol(text, metavariable=True)


def application(*children: Term) -> Application:
    return Application(tuple(children))


def _variable_name(variable: Union[str, Symbol]) -> str:
    return variable.text if isinstance(variable, Symbol) else variable


def binding(variable: Union[str, Symbol], body: Term) -> Application:
    """Named-form binding ``(λvariable body)``."""
    return Application((Binder(_variable_name(variable)), body))


def quantified(head: Term, variable: Union[str, Symbol], body: Term) -> Application:
    """``(head (λvariable body))``, e.g. ``quantified(symbol("forall"), "x", ...)``."""
    return Application((head, binding(variable, body)))


def lam(variables: Sequence[Union[str, Symbol]], body: Term) -> Term:
    """Nested bindings, outermost first: an expression function in named form."""
    result = body
    for variable in reversed(list(variables)):
        result = binding(variable, result)
    return result


def efa(head: Term, *args: Term) -> Application:
    """Expression-function application ``(@ head arg1 ... argN)``."""
    return Application((EFA, head) + tuple(args))


# ─────────────────────────────────────────────
#  PREDICATES
# ─────────────────────────────────────────────

def is_term(value) -> bool:
    return isinstance(value, TERM_TYPES)


def is_metavariable(term: Term) -> bool:
    return isinstance(term, Symbol) and term.metavariable


def is_binding(term: Term) -> bool:
    return (
        isinstance(term, Application)
        and len(term.children) >= 2
        and isinstance(term.children[0], Binder)
    )


def is_efa(term: Term) -> bool:
    """True for any ``(@ head ...)`` shape, whatever the head."""
    return (
        isinstance(term, Application)
        and len(term.children) >= 2
        and term.children[0] == EFA
    )


def contains_metavariable(term: Term) -> bool:
    return any(is_metavariable(t) for t in subterms(term))


def metavariable_names(term: Term) -> Set[str]:
    return {t.text for t in subterms(term) if is_metavariable(t)}


def contains_metavariable_named(term: Term, name: str) -> bool:
    return any(is_metavariable(t) and t.text == name for t in subterms(term))


# ─────────────────────────────────────────────
#  TRAVERSAL
# ─────────────────────────────────────────────

def subterms(term: Term) -> Iterator[Term]:
    """Pre-order walk over ``term`` and all its descendants."""
    stack: List[Term] = [term]
    while stack:
        current = stack.pop()
        yield current
        if isinstance(current, Application):
            stack.extend(reversed(current.children))


def symbol_texts(term: Term) -> Set[str]:
    """Every name appearing in ``term``: symbol texts, binder variables, index names."""
    texts: Set[str] = set()
    for t in subterms(term):
        if isinstance(t, Symbol):
            texts.add(t.text)
        elif isinstance(t, Binder):
            texts.add(t.variable)
        elif isinstance(t, Index) and t.name:
            texts.add(t.name)
    return texts


def subterm_at(term: Term, address: Address) -> Term:
    for i in address:
        term = term.children[i]
    return term


def replace_at(term: Term, address: Address, replacement: Term) -> Term:
    """Return a copy of ``term`` with the subterm at ``address`` replaced."""
    if not address:
        return replacement
    head, rest = address[0], address[1:]
    children = list(term.children)
    children[head] = replace_at(children[head], rest, replacement)
    return Application(tuple(children))


def replace_metavariable(term: Term, name: str, replacement: Term) -> Term:
    """Replace every occurrence of metavariable ``name`` (plain, no index shifting)."""
    if isinstance(term, Symbol):
        return replacement if term.metavariable and term.text == name else term
    if isinstance(term, Application):
        children = tuple(replace_metavariable(c, name, replacement) for c in term.children)
        if all(a is b for a, b in zip(children, term.children)):
            return term
        return Application(children)
    return term
