"""Role-based authorization rules.

A single pure function decides whether a role may perform an operation
gated on a set of roles. No database access happens here.
"""

from typing import Iterable, Union

from survey_api.models.enums import UserRole


def is_permitted(role: Union[UserRole, str], required_roles: Iterable[Union[UserRole, str]]) -> bool:
    """Decide whether ``role`` passes a gate requiring one of ``required_roles``.

    Super admins pass every gate, whatever the required set. Any other role
    passes only when it is a member of the set. Unknown role strings never
    pass.

    Args:
        role: Role of the caller
        required_roles: Roles the operation is open to

    Returns:
        True if the caller may proceed

    Example:
        >>> is_permitted(UserRole.SUPER_ADMIN, [UserRole.COMPANY_ADMIN])
        True
        >>> is_permitted(UserRole.VIEWER, [UserRole.EDITOR, UserRole.COMPANY_ADMIN])
        False
    """
    try:
        caller = UserRole(role)
    except ValueError:
        return False

    if caller == UserRole.SUPER_ADMIN:
        return True

    allowed = set()
    for required in required_roles:
        try:
            allowed.add(UserRole(required))
        except ValueError:
            continue
    return caller in allowed
