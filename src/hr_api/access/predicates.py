"""Composable row predicates used for access scoping and filtering.

A predicate is one of four variants:

- ``MatchAll``: no restriction
- ``MatchNone``: nothing is visible
- ``MatchIds``: a fixed set of primary keys
- ``MatchCondition``: an expression tree of ``And``/``Or`` nodes over leaves

Leaves compare an attribute of the row (``Eq``, ``In``, ``Contains``) or test
a relation (department membership). Predicates are plain values; the
repository layer compiles them to SQL, so scope and filters are combined as
data and never as query fragments.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Union
from uuid import UUID


# =============================================================================
# Expression tree
# =============================================================================


@dataclass(frozen=True)
class Eq:
    """Attribute equals value."""

    field: str
    value: Any


@dataclass(frozen=True)
class In:
    """Attribute is one of values."""

    field: str
    values: frozenset[Any]


@dataclass(frozen=True)
class Contains:
    """Attribute contains a substring (case-sensitive)."""

    field: str
    value: str


@dataclass(frozen=True)
class MemberOfDepartments:
    """Employee has at least one membership in the given departments."""

    department_ids: frozenset[UUID]


@dataclass(frozen=True)
class MemberOfManagedDepartment:
    """Employee belongs to any department managed by ``manager_id``."""

    manager_id: UUID


@dataclass(frozen=True)
class HasMember:
    """Department has ``employee_id`` among its members."""

    employee_id: UUID


@dataclass(frozen=True)
class And:
    """All operands hold."""

    operands: tuple[Expr, ...]


@dataclass(frozen=True)
class Or:
    """At least one operand holds."""

    operands: tuple[Expr, ...]


Expr = Union[Eq, In, Contains, MemberOfDepartments, MemberOfManagedDepartment, HasMember, And, Or]


# =============================================================================
# Predicate variants
# =============================================================================


@dataclass(frozen=True)
class MatchAll:
    """Every row matches."""


@dataclass(frozen=True)
class MatchNone:
    """No row matches."""


@dataclass(frozen=True)
class MatchIds:
    """Rows whose primary key is in ``ids``."""

    ids: frozenset[UUID]


@dataclass(frozen=True)
class MatchCondition:
    """Rows satisfying ``expr``."""

    expr: Expr


Predicate = Union[MatchAll, MatchNone, MatchIds, MatchCondition]

MATCH_ALL = MatchAll()
MATCH_NONE = MatchNone()


def match_ids(ids: Iterable[UUID]) -> Predicate:
    """Build a MatchIds predicate; an empty set matches nothing."""
    frozen = frozenset(ids)
    if not frozen:
        return MATCH_NONE
    return MatchIds(frozen)


def to_expr(predicate: MatchIds | MatchCondition) -> Expr:
    """Express a restricting predicate as an expression tree."""
    if isinstance(predicate, MatchIds):
        return In("id", predicate.ids)
    return predicate.expr


def conjoin(*predicates: Predicate) -> Predicate:
    """Logical AND of predicates.

    ``MatchNone`` absorbs everything, ``MatchAll`` is the identity. The
    result is never wider than any operand.
    """
    restricting: list[MatchIds | MatchCondition] = []
    for predicate in predicates:
        if isinstance(predicate, MatchNone):
            return MATCH_NONE
        if isinstance(predicate, MatchAll):
            continue
        if isinstance(predicate, MatchIds) and not predicate.ids:
            return MATCH_NONE
        restricting.append(predicate)

    if not restricting:
        return MATCH_ALL
    if len(restricting) == 1:
        return restricting[0]

    # Two id sets can be intersected without touching the store
    if all(isinstance(p, MatchIds) for p in restricting):
        common = frozenset.intersection(*(p.ids for p in restricting))  # type: ignore[union-attr]
        return match_ids(common)

    return MatchCondition(And(tuple(to_expr(p) for p in restricting)))


def disjoin(*predicates: Predicate) -> Predicate:
    """Logical OR of predicates.

    ``MatchAll`` absorbs everything, ``MatchNone`` is the identity.
    """
    widening: list[MatchIds | MatchCondition] = []
    for predicate in predicates:
        if isinstance(predicate, MatchAll):
            return MATCH_ALL
        if isinstance(predicate, MatchNone):
            continue
        if isinstance(predicate, MatchIds) and not predicate.ids:
            continue
        widening.append(predicate)

    if not widening:
        return MATCH_NONE
    if len(widening) == 1:
        return widening[0]
    return MatchCondition(Or(tuple(to_expr(p) for p in widening)))


def where(*clauses: Expr) -> Predicate:
    """Wrap filter clauses as a single predicate (AND of all clauses)."""
    if not clauses:
        return MATCH_ALL
    if len(clauses) == 1:
        return MatchCondition(clauses[0])
    return MatchCondition(And(tuple(clauses)))
