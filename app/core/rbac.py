from fastapi import Depends, HTTPException, status
from app.core.dependencies import get_current_user
from app.models.user import User, RoleEnum


def require_role(*allowed_roles: RoleEnum):
    """Dependency factory that lets only the given roles through."""
    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied. Admin only."
            )
        return current_user
    return role_checker


def is_admin(user: User) -> bool:
    return user.role == RoleEnum.admin


require_admin = require_role(RoleEnum.admin)
