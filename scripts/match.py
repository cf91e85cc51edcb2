#!/usr/bin/env python3
"""
scripts/match.py
================
Solve a matching problem from the command line.

Terms are written as s-expressions: ``?P`` is a metavariable, ``@``
heads an expression-function application, and ``(lambda x body)``
is a binding.

Usage:
    python scripts/match.py "(@ ?P a)" "(g a a)"
    python scripts/match.py "(forall (lambda x (@ ?P x)))" "(forall (lambda y (h y c)))" --debug
    python scripts/match.py "(f ?x)" "(f 5)" "?y" "6" --no-fast-path
"""
import argparse
import logging
import re
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

TOKEN = re.compile(r"\(|\)|[^\s()]+")


def parse_term(text: str):
    """Parse one s-expression into a named-form term."""
    tokens = TOKEN.findall(text)
    term, rest = _parse(tokens)
    if rest:
        raise ValueError(f"Unexpected trailing input in {text!r}: {' '.join(rest)}")
    return term


def _parse(tokens):
    from metamatch.core.types import EFA, application, binding, metavariable, symbol

    if not tokens:
        raise ValueError("Unexpected end of input")
    head, rest = tokens[0], tokens[1:]
    if head == ")":
        raise ValueError("Unbalanced ')'")
    if head != "(":
        if head == "@":
            return EFA, rest
        if head.startswith("?") and len(head) > 1:
            return metavariable(head[1:]), rest
        return symbol(head), rest
    if len(rest) >= 2 and rest[0] == "lambda":
        variable, rest = rest[1], rest[2:]
        body, rest = _parse(rest)
        if not rest or rest[0] != ")":
            raise ValueError("A lambda takes exactly one body")
        return binding(variable, body), rest[1:]
    children = []
    while rest and rest[0] != ")":
        child, rest = _parse(rest)
        children.append(child)
    if not rest:
        raise ValueError("Missing ')'")
    return application(*children), rest[1:]


def main():
    parser = argparse.ArgumentParser(description="metamatch matching CLI")
    parser.add_argument("terms", nargs="+",
                        help="Alternating patterns and expressions")
    parser.add_argument("--debug", action="store_true",
                        help="Narrate the search")
    parser.add_argument("--no-fast-path", action="store_true",
                        help="Always use general imitation")
    parser.add_argument("--prefix", default="v",
                        help="Prefix for generated variable names")
    parser.add_argument("--limit", type=int, default=0,
                        help="Stop after this many solutions (0 = all)")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    from metamatch import MatchingConfig, MatchingError, Problem

    if len(args.terms) % 2:
        parser.error("terms must come in pattern/expression pairs")

    config = MatchingConfig(
        debug=args.debug,
        fresh_symbol_prefix=args.prefix,
        imitation_fast_path=not args.no_fast_path,
    )
    try:
        problem = Problem(*[parse_term(t) for t in args.terms], config=config)
    except (ValueError, MatchingError) as e:
        parser.error(str(e))

    print(f"Problem: {problem}")
    count = 0
    for solution in problem.solutions():
        count += 1
        print(f"{count}. {solution}")
        if args.limit and count >= args.limit:
            break
    if not count:
        print("No solutions.")


if __name__ == "__main__":
    main()
