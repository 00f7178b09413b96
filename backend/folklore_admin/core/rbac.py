"""Role-Based Access Control (RBAC) utilities."""

from enum import Enum
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status

from folklore_admin.core.security import decode_access_token
from folklore_admin.db.session import DbSession


class UserRole(str, Enum):
    """User roles for RBAC."""

    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"


# Role hierarchy: admin > manager > user
ROLE_HIERARCHY = {
    UserRole.ADMIN: 3,
    UserRole.MANAGER: 2,
    UserRole.USER: 1,
}


class TokenData:
    """Decoded token data.

    Attributes:
        user_id: The user's database ID.
        email: The user's email address.
        role: The user's role (admin/manager/user).
        token: The raw bearer token, kept for logout.
    """

    def __init__(self, user_id: int, email: str, role: UserRole, username: str = "", token: str = ""):
        self.user_id = user_id
        self.id = user_id
        self.email = email
        self.role = role
        self.username = username or email.split("@")[0]
        self.token = token


def _bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header.split(" ", 1)[1]
        return token or None
    return None


async def get_current_user(request: Request, db: DbSession) -> TokenData:
    """Get the current authenticated user from the Authorization header."""
    token = _bearer_token(request)
    payload = decode_access_token(token) if token else None

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    email = payload.get("email")
    role = payload.get("role")

    if user_id is None or email is None or role is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    try:
        user_role = UserRole(role)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid role in token",
        )

    # Verify user still exists and is active
    from folklore_admin.models.user import User

    user = db.query(User).filter(User.id == int(user_id)).first()
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account is disabled",
        )

    return TokenData(
        user_id=int(user_id), email=email, role=user_role,
        username=payload.get("username", ""), token=token,
    )


def require_role(minimum_role: UserRole):
    """Dependency to require a minimum role level."""

    async def role_checker(
        current_user: Annotated[TokenData, Depends(get_current_user)]
    ) -> TokenData:
        user_level = ROLE_HIERARCHY.get(current_user.role, 0)
        required_level = ROLE_HIERARCHY.get(minimum_role, 0)

        if user_level < required_level:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role {minimum_role.value} or higher",
            )
        return current_user

    return role_checker


# Common role dependencies
RequireAdmin = Annotated[TokenData, Depends(require_role(UserRole.ADMIN))]
RequireManager = Annotated[TokenData, Depends(require_role(UserRole.MANAGER))]
CurrentUser = Annotated[TokenData, Depends(get_current_user)]
