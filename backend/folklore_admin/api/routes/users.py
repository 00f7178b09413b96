"""User administration routes (admin only)."""

import logging
from typing import List

from fastapi import APIRouter, HTTPException, status

from folklore_admin.api.deps import get_or_404
from folklore_admin.core.rbac import RequireAdmin
from folklore_admin.core.security import get_password_hash
from folklore_admin.db.session import DbSession
from folklore_admin.models.user import User
from folklore_admin.schemas.user import UserCreate, UserLoginLogResponse, UserResponse, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_unique(db, username=None, email=None, exclude_id=None):
    if username:
        query = db.query(User).filter(User.username == username)
        if exclude_id:
            query = query.filter(User.id != exclude_id)
        if query.first():
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already taken")
    if email:
        query = db.query(User).filter(User.email == email)
        if exclude_id:
            query = query.filter(User.id != exclude_id)
        if query.first():
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")


@router.get("/", response_model=List[UserResponse])
def list_users(db: DbSession, current_user: RequireAdmin):
    return db.query(User).order_by(User.username).all()


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(data: UserCreate, db: DbSession, current_user: RequireAdmin):
    _check_unique(db, data.username, data.email)
    user = User(
        username=data.username,
        email=data.email,
        password_hash=get_password_hash(data.password),
        role=data.role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.username} (ID: {user.id}, role: {user.role.value}) created by {current_user.email}")
    return user


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: DbSession, current_user: RequireAdmin):
    return get_or_404(db, User, user_id, "User")


@router.put("/{user_id}", response_model=UserResponse)
def update_user(user_id: int, data: UserUpdate, db: DbSession, current_user: RequireAdmin):
    user = get_or_404(db, User, user_id, "User")
    update_data = data.model_dump(exclude_unset=True)
    _check_unique(db, update_data.get("username"), update_data.get("email"), exclude_id=user.id)

    password = update_data.pop("password", None)
    if password:
        user.password_hash = get_password_hash(password)
    for field, value in update_data.items():
        if value is not None:
            setattr(user, field, value)

    db.commit()
    db.refresh(user)
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, db: DbSession, current_user: RequireAdmin):
    if user_id == current_user.user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot delete your own account")
    user = get_or_404(db, User, user_id, "User")
    db.delete(user)
    db.commit()
    logger.info(f"User ID {user_id} deleted by {current_user.email}")


@router.get("/{user_id}/login-logs", response_model=List[UserLoginLogResponse])
def list_login_logs(user_id: int, db: DbSession, current_user: RequireAdmin):
    user = get_or_404(db, User, user_id, "User")
    return user.login_logs
