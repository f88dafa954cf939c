"""Guard conditions for stages and transitions.

The grammar is deliberately tiny: a conjunction of equality and membership
clauses, compared case-insensitively against a ticket context::

    channel in ("email", "chat") && priority = "high" && requester = employee

There is no `||`, no negation and no nesting. Anything outside the grammar is
a syntax error, and a condition with a syntax error never passes.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

_EQUALITY_RE = re.compile(r"^(\w+)\s*=\s*[\"']?([\w\- ]+)[\"']?$", re.ASCII)
_MEMBERSHIP_RE = re.compile(r"^(\w+)\s+in\s+\((.+)\)$", re.ASCII | re.IGNORECASE)
_LIST_ITEM_STRIP_RE = re.compile(r"[\"'\s]")


class ConditionSyntaxError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class Equality:
    key: str
    value: str

    def matches(self, context: Mapping[str, str]) -> bool:
        return _lookup(context, self.key) == self.value.lower()


@dataclass(frozen=True, slots=True)
class Membership:
    key: str
    values: tuple[str, ...]

    def matches(self, context: Mapping[str, str]) -> bool:
        return _lookup(context, self.key) in {v.lower() for v in self.values}


Clause = Equality | Membership


@dataclass(frozen=True, slots=True)
class Conjunction:
    clauses: tuple[Clause, ...]

    def matches(self, context: Mapping[str, str]) -> bool:
        return all(clause.matches(context) for clause in self.clauses)


def _lookup(context: Mapping[str, str], key: str) -> str:
    value = context.get(key)
    if value is None:
        return ""
    return str(value).lower()


def _parse_clause(text: str) -> Clause:
    m = _EQUALITY_RE.match(text)
    if m:
        return Equality(key=m.group(1), value=m.group(2))

    m = _MEMBERSHIP_RE.match(text)
    if m:
        items = (_LIST_ITEM_STRIP_RE.sub("", part) for part in m.group(2).split(","))
        return Membership(key=m.group(1), values=tuple(v for v in items if v))

    raise ConditionSyntaxError(f"Unsupported clause: {text!r}")


def parse_condition(expr: str) -> Conjunction:
    """Parse `expr` into a :class:`Conjunction`.

    Blank segments between `&&` separators are ignored, so an empty or
    blank expression parses to an empty conjunction (always true).

    Raises:
        ConditionSyntaxError: if any clause is neither an equality nor a
            membership test.
    """

    parts = [p.strip() for p in expr.split("&&")]
    return Conjunction(clauses=tuple(_parse_clause(p) for p in parts if p))


def check_condition(expr: str | None) -> str | None:
    """Return the syntax error message for `expr`, or None if it parses."""

    if not expr:
        return None
    try:
        parse_condition(expr)
    except ConditionSyntaxError as e:
        return str(e)
    return None


def evaluate_condition(expr: str | None, context: Mapping[str, str]) -> bool:
    """Evaluate a guard against a ticket context.

    An absent or empty guard passes. A guard that does not parse fails.
    """

    if not expr:
        return True
    try:
        tree = parse_condition(expr)
    except ConditionSyntaxError:
        return False
    return tree.matches(context)
