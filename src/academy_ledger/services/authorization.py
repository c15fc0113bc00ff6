'''
Role checks shared by the API-facing service methods.
'''
from uuid import UUID

from ..database.db_enums import UserRole
from ..models.user import User
from ..common.exceptions import UnauthorizedRoleError
from ..common.logger import log


def authorize_role(current_user: User, allowed_roles: list[UserRole]) -> None:
    """Raises UnauthorizedRoleError unless the user's role is in `allowed_roles`."""
    allowed_role_values = [role.value for role in allowed_roles]
    if current_user.role not in allowed_role_values:
        log.warning(f"Unauthorized action by user {current_user.id} (Role: {current_user.role}). Required one of: {allowed_role_values}")
        raise UnauthorizedRoleError("You do not have permission to perform this action.")


def authorize_admin_or_self(current_user: User, user_id: UUID) -> None:
    """Admins may act on anyone; everybody else only on their own records."""
    if current_user.role == UserRole.ADMIN.value or current_user.id == user_id:
        return
    log.warning(f"User {current_user.id} tried to access records of user {user_id}.")
    raise UnauthorizedRoleError("You can only access your own records.")
