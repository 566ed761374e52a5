"""Authorization checks applied before any write."""

import logging
from collections.abc import Iterable

from hr_api.exceptions import AdminRequiredError, RestrictedFieldError, UnauthenticatedError
from hr_api.models.domain.session import SessionContext

logger = logging.getLogger(__name__)

# Employee fields only an HR administrator may send in an update
ADMIN_ONLY_EMPLOYEE_FIELDS = frozenset({"status", "manager_id", "department_ids"})


def require_session(ctx: SessionContext | None) -> SessionContext:
    """Require an authenticated session.

    Raises:
        UnauthenticatedError: If no session is present
    """
    if ctx is None:
        raise UnauthenticatedError()
    return ctx


def require_admin(ctx: SessionContext | None) -> SessionContext:
    """Require an HR administrator session.

    Raises:
        UnauthenticatedError: If no session is present
        AdminRequiredError: If the caller is not an HR administrator
    """
    ctx = require_session(ctx)
    if not ctx.is_admin():
        logger.warning(f"Administrator operation denied for account {ctx.account_id}")
        raise AdminRequiredError()
    return ctx


def check_employee_update_fields(ctx: SessionContext, fields: Iterable[str]) -> None:
    """Reject privileged employee fields sent by a non-administrator.

    Only presence is checked: sending ``status`` with the current value is
    still rejected.

    Raises:
        RestrictedFieldError: If any privileged field is present
    """
    if ctx.is_admin():
        return
    restricted = ADMIN_ONLY_EMPLOYEE_FIELDS.intersection(fields)
    if restricted:
        logger.warning(
            f"Account {ctx.account_id} attempted to change restricted fields: {sorted(restricted)}"
        )
        raise RestrictedFieldError(list(restricted))


def normalize_email(email: str) -> str:
    """Normalize an email address for storage and uniqueness checks."""
    return email.strip().lower()
