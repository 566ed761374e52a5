"""Access scope builders: which rows a session may see at all.

Scope is always computed before any caller filter is applied and then
combined with the filters by conjunction, so filters can only narrow it.
Unknown roles and sessions without a linked employee (where one is needed)
get ``MatchNone`` rather than an error.
"""

from hr_api.access.predicates import (
    MATCH_ALL,
    MATCH_NONE,
    Eq,
    HasMember,
    MatchCondition,
    MemberOfManagedDepartment,
    Predicate,
    disjoin,
    match_ids,
)
from hr_api.models.domain.session import SessionContext


def employee_scope(ctx: SessionContext) -> Predicate:
    """Build the employee visibility predicate for a session.

    - HRADMIN: every employee
    - MANAGER: self, direct reports, and members of departments the
      manager runs (resolved as a sub-query when evaluated)
    - EMPLOYEE: self only
    - anything else: nothing
    """
    if ctx.is_admin():
        return MATCH_ALL

    if ctx.employee_id is None:
        return MATCH_NONE

    if ctx.is_employee():
        return match_ids([ctx.employee_id])

    if ctx.is_manager():
        return disjoin(
            match_ids([ctx.employee_id]),
            MatchCondition(Eq("manager_id", ctx.employee_id)),
            MatchCondition(MemberOfManagedDepartment(ctx.employee_id)),
        )

    return MATCH_NONE


def department_scope(ctx: SessionContext) -> Predicate:
    """Build the department visibility predicate for a session.

    - HRADMIN: every department
    - MANAGER: departments whose manager is the caller
    - EMPLOYEE: departments the caller is a member of
    - anything else: nothing
    """
    if ctx.is_admin():
        return MATCH_ALL

    if ctx.employee_id is None:
        return MATCH_NONE

    if ctx.is_manager():
        return MatchCondition(Eq("manager_id", ctx.employee_id))

    if ctx.is_employee():
        return MatchCondition(HasMember(ctx.employee_id))

    return MATCH_NONE
